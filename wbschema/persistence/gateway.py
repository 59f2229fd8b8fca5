"""Storage of serialized schemas."""

from __future__ import annotations

import logging
import os
import re
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

from wbschema.exceptions import PersistenceError

logger = logging.getLogger(__name__)

_SAFE_ID = re.compile(r"^[A-Za-z0-9_.-]+$")


class SchemaGateway(ABC):
    """Abstract store of schema JSON blobs keyed by schema id."""

    @abstractmethod
    def read(self, schema_id: str) -> Optional[str]:
        """Return the stored blob, or None when the id is unknown."""
        pass

    @abstractmethod
    def write(self, schema_id: str, blob: str) -> None:
        pass

    @abstractmethod
    def delete(self, schema_id: str) -> bool:
        """Delete a blob; returns False when nothing was stored under the id."""
        pass

    @abstractmethod
    def list_ids(self) -> List[str]:
        pass


class FileSchemaGateway(SchemaGateway):
    """Keeps each schema as ``<schema_id>.json`` in one directory."""

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def _path(self, schema_id: str) -> Path:
        if not _SAFE_ID.match(schema_id) or schema_id in (".", ".."):
            raise PersistenceError(f"Invalid schema id: {schema_id!r}")
        return self.directory / f"{schema_id}.json"

    def read(self, schema_id: str) -> Optional[str]:
        path = self._path(schema_id)
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except OSError as e:
            raise PersistenceError(f"Failed to read schema {schema_id}: {e}") from e

    def write(self, schema_id: str, blob: str) -> None:
        """Write through a temporary file so a failed write never truncates the old blob."""
        path = self._path(schema_id)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{schema_id}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(blob)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise PersistenceError(f"Failed to write schema {schema_id}: {e}") from e
        logger.debug("Wrote schema %s to %s", schema_id, path)

    def delete(self, schema_id: str) -> bool:
        path = self._path(schema_id)
        if not path.exists():
            return False
        try:
            path.unlink()
        except OSError as e:
            raise PersistenceError(f"Failed to delete schema {schema_id}: {e}") from e
        return True

    def list_ids(self) -> List[str]:
        if not self.directory.is_dir():
            return []
        return sorted(path.stem for path in self.directory.glob("*.json"))
