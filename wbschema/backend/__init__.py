from .api import ApiEntityClient
from .interface import EntityClient

__all__ = ["ApiEntityClient", "EntityClient"]
