"""Logging setup using rich for console output."""

import logging

from rich.logging import RichHandler


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger with a RichHandler.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, markup=False)],
        force=True,
    )

    for noisy in ("urllib3", "requests", "wikibaseintegrator"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


logger = logging.getLogger("wbschema")
