"""Save, load and delete a ``SchemaStore`` through a gateway."""

from __future__ import annotations

import json
import logging

from wbschema.exceptions import PersistenceError
from wbschema.mapping.builder import schema_to_dict
from wbschema.mapping.models import new_id
from wbschema.mapping.store import SchemaStore

from .gateway import SchemaGateway

logger = logging.getLogger(__name__)


def _document(store: SchemaStore) -> dict:
    return {
        "id": store.schema_id,
        "projectId": store.project_id,
        "name": store.name,
        "wikibase": store.wikibase,
        "createdAt": store.created_at,
        "updatedAt": store.updated_at,
        "schema": schema_to_dict(store.to_schema()),
    }


def save_schema(store: SchemaStore, gateway: SchemaGateway) -> str:
    """Persist the store and mark it saved. Returns the schema id.

    A failed write restores the store's previous save state.

    Raises:
        PersistenceError: If the gateway cannot write the schema
    """
    if store.schema_id is None:
        store.schema_id = new_id()
    previous = (store.is_dirty, store.created_at, store.updated_at, store.last_saved)

    store.set_loading(True)
    try:
        store.mark_as_saved()
        if not store.created_at:
            store.created_at = store.updated_at
        gateway.write(store.schema_id, json.dumps(_document(store), ensure_ascii=False, indent=2))
    except Exception:
        store.is_dirty, store.created_at, store.updated_at, store.last_saved = previous
        raise
    finally:
        store.set_loading(False)

    logger.info("Saved schema %s", store.schema_id)
    return store.schema_id


def load_schema(gateway: SchemaGateway, schema_id: str) -> SchemaStore:
    """Load a schema into a fresh, clean store.

    A corrupt schema body degrades to the empty schema (see ``parse_schema``).

    Raises:
        PersistenceError: If nothing is stored under ``schema_id``
    """
    blob = gateway.read(schema_id)
    if blob is None:
        raise PersistenceError(f"Schema not found: {schema_id}")

    try:
        document = json.loads(blob)
    except ValueError as e:
        logger.warning("Schema document %s is not valid JSON: %s", schema_id, e)
        document = {}
    if not isinstance(document, dict):
        document = {}

    store = SchemaStore()
    store.load_schema(
        document.get("schema"),
        schema_id=document.get("id") or schema_id,
        project_id=document.get("projectId"),
        name=document.get("name") or "",
        wikibase=document.get("wikibase") or "",
        created_at=document.get("createdAt") or "",
        updated_at=document.get("updatedAt") or "",
    )
    return store


def delete_schema(store: SchemaStore, gateway: SchemaGateway) -> bool:
    """Delete the stored schema and reset the store."""
    deleted = False
    if store.schema_id is not None:
        deleted = gateway.delete(store.schema_id)
    store.reset()
    return deleted
