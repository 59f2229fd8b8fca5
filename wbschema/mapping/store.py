"""In-memory model of one item schema mapping being edited."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Iterable

from .builder import build_item_schema, build_statement, build_terms, parse_schema
from .models import (
    ColumnMapping,
    ItemSchemaMapping,
    PropertyReference,
    QualifierMapping,
    ReferenceMapping,
    StatementMapping,
    StatementRank,
    ValueMapping,
)

logger = logging.getLogger(__name__)


class SchemaStore:
    """Single source of truth for one ``ItemSchemaMapping``.

    Every operation is synchronous and only touches this object. A call
    marks the store dirty when it changes state; removing or updating an id
    that is not present is a silent no-op. Only ``mark_as_saved`` (called
    after a successful persistence write) and ``load_schema`` clear the dirty
    flag.

    Statements are kept in one insertion-ordered dict keyed by statement id;
    ``statements`` is a read-only ordered view derived from it.
    """

    def __init__(self) -> None:
        self._statements: dict[str, StatementMapping] = {}
        self.reset()

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------
    @property
    def statements(self) -> tuple[StatementMapping, ...]:
        return tuple(self._statements.values())

    @property
    def statement_ids(self) -> list[str]:
        return list(self._statements)

    @property
    def has_statements(self) -> bool:
        return bool(self._statements)

    @property
    def statement_count(self) -> int:
        return len(self._statements)

    @property
    def has_content(self) -> bool:
        return bool(self.labels or self.descriptions or self.aliases or self._statements)

    @property
    def can_save(self) -> bool:
        return (
            self.project_id is not None
            and self.is_dirty
            and not self.is_loading
            and self.has_content
        )

    def get_statement(self, statement_id: str) -> StatementMapping | None:
        return self._statements.get(statement_id)

    # ------------------------------------------------------------------
    # Terms
    # ------------------------------------------------------------------
    def add_label_mapping(self, language: str, mapping: ColumnMapping) -> None:
        self.labels[language] = mapping
        self.mark_dirty()

    def remove_label_mapping(self, language: str) -> None:
        if self.labels.pop(language, None) is not None:
            self.mark_dirty()

    def add_description_mapping(self, language: str, mapping: ColumnMapping) -> None:
        self.descriptions[language] = mapping
        self.mark_dirty()

    def remove_description_mapping(self, language: str) -> None:
        if self.descriptions.pop(language, None) is not None:
            self.mark_dirty()

    def add_alias_mapping(self, language: str, mapping: ColumnMapping) -> None:
        """Append an alias mapping. Duplicates are kept."""
        self.aliases.setdefault(language, []).append(mapping)
        self.mark_dirty()

    def remove_alias_mapping(self, language: str, mapping: ColumnMapping) -> None:
        """Remove the first alias mapping equal to ``mapping``."""
        existing = self.aliases.get(language)
        if not existing:
            return
        for index, alias in enumerate(existing):
            if alias == mapping:
                del existing[index]
                break
        else:
            return

        if not existing:
            del self.aliases[language]
        self.mark_dirty()

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------
    def add_statement(
        self,
        property: PropertyReference,
        value: ValueMapping,
        rank: StatementRank | str = StatementRank.NORMAL,
        qualifiers: Iterable[QualifierMapping] = (),
        references: Iterable[ReferenceMapping] = (),
    ) -> str:
        """Add a statement and return its generated id."""
        statement = build_statement(property, value, rank, qualifiers, references)
        while statement.id in self._statements:
            statement = build_statement(property, value, rank, qualifiers, references)
        self._statements[statement.id] = statement
        self.mark_dirty()
        return statement.id

    def remove_statement(self, statement_id: str) -> None:
        if self._statements.pop(statement_id, None) is not None:
            self.mark_dirty()

    def update_statement_rank(self, statement_id: str, rank: StatementRank | str) -> None:
        statement = self._statements.get(statement_id)
        if statement is None:
            return
        statement.rank = rank
        self.mark_dirty()

    def update_statement(
        self,
        statement_id: str,
        property: PropertyReference,
        value: ValueMapping,
        rank: StatementRank | str = StatementRank.NORMAL,
        qualifiers: Iterable[QualifierMapping] = (),
        references: Iterable[ReferenceMapping] = (),
    ) -> None:
        """Replace the content of a statement, keeping its id and position."""
        if statement_id not in self._statements:
            return
        self._statements[statement_id] = StatementMapping(
            id=statement_id,
            property=property,
            value=value,
            rank=rank,
            qualifiers=list(qualifiers),
            references=list(references),
        )
        self.mark_dirty()

    def update_statement_value(self, statement_id: str, value: ValueMapping) -> None:
        statement = self._statements.get(statement_id)
        if statement is None:
            return
        statement.value = value
        self.mark_dirty()

    def update_statement_qualifiers(
        self, statement_id: str, qualifiers: Iterable[QualifierMapping]
    ) -> None:
        statement = self._statements.get(statement_id)
        if statement is None:
            return
        statement.qualifiers = list(qualifiers)
        self.mark_dirty()

    def add_qualifier_to_statement(self, statement_id: str, qualifier: QualifierMapping) -> None:
        statement = self._statements.get(statement_id)
        if statement is None:
            return
        statement.qualifiers = [*statement.qualifiers, qualifier]
        self.mark_dirty()

    def remove_qualifier_from_statement(self, statement_id: str, index: int) -> None:
        statement = self._statements.get(statement_id)
        if statement is None or not 0 <= index < len(statement.qualifiers):
            return
        qualifiers = list(statement.qualifiers)
        del qualifiers[index]
        statement.qualifiers = qualifiers
        self.mark_dirty()

    def add_reference_to_statement(self, statement_id: str, reference: ReferenceMapping) -> None:
        statement = self._statements.get(statement_id)
        if statement is None:
            return
        statement.references = [*statement.references, reference]
        self.mark_dirty()

    def remove_reference_from_statement(self, statement_id: str, reference_id: str) -> None:
        statement = self._statements.get(statement_id)
        if statement is None:
            return
        remaining = [ref for ref in statement.references if ref.id != reference_id]
        if len(remaining) == len(statement.references):
            return
        statement.references = remaining
        self.mark_dirty()

    # ------------------------------------------------------------------
    # Item / metadata
    # ------------------------------------------------------------------
    def set_item_id(self, item_id: str | None) -> None:
        if item_id is not None:
            # Validate through the model so a malformed id never enters the store
            ItemSchemaMapping(id=item_id)
        self.item_id = item_id
        self.mark_dirty()

    def update_schema_name(self, name: str) -> None:
        self.name = name
        self.mark_dirty()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def load_schema(
        self,
        schema: ItemSchemaMapping | str | bytes | dict[str, Any] | None,
        *,
        schema_id: str | None = None,
        project_id: str | None = None,
        name: str = "",
        wikibase: str = "",
        created_at: str = "",
        updated_at: str = "",
    ) -> None:
        """Replace the store content with a persisted schema and mark it clean."""
        parsed = parse_schema(schema)

        self.schema_id = schema_id
        self.project_id = project_id
        self.name = name
        self.wikibase = wikibase
        self.created_at = created_at
        self.updated_at = updated_at

        self.item_id = parsed.id
        self.labels = dict(parsed.terms.labels)
        self.descriptions = dict(parsed.terms.descriptions)
        self.aliases = {lang: list(mappings) for lang, mappings in parsed.terms.aliases.items()}
        self._statements = {statement.id: statement for statement in parsed.statements}

        self.is_dirty = False
        self.last_saved = _parse_timestamp(updated_at)
        logger.debug(
            "Loaded schema %s with %d statements", schema_id or "<new>", len(self._statements)
        )

    def to_schema(self) -> ItemSchemaMapping:
        """Build an independent ``ItemSchemaMapping`` snapshot of the store."""
        schema = build_item_schema(
            build_terms(self.labels, self.descriptions, self.aliases),
            self._statements.values(),
            item_id=self.item_id,
        )
        return schema.model_copy(deep=True)

    def mark_dirty(self) -> None:
        self.is_dirty = True

    def mark_as_saved(self) -> None:
        now = datetime.now(timezone.utc)
        self.is_dirty = False
        self.last_saved = now
        self.updated_at = now.isoformat()

    def set_loading(self, loading: bool) -> None:
        self.is_loading = loading

    def reset(self) -> None:
        """Restore the empty-schema defaults."""
        self.schema_id: str | None = None
        self.project_id: str | None = None
        self.name: str = ""
        self.wikibase: str = ""
        self.item_id: str | None = None
        self.labels: dict[str, ColumnMapping] = {}
        self.descriptions: dict[str, ColumnMapping] = {}
        self.aliases: dict[str, list[ColumnMapping]] = {}
        self._statements = {}
        self.created_at: str = ""
        self.updated_at: str = ""
        self.is_dirty: bool = False
        self.is_loading: bool = False
        self.last_saved: datetime | None = None


def _parse_timestamp(value: str) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None
