from .gateway import FileSchemaGateway, SchemaGateway
from .schemas import delete_schema, load_schema, save_schema

__all__ = [
    "FileSchemaGateway",
    "SchemaGateway",
    "delete_schema",
    "load_schema",
    "save_schema",
]
