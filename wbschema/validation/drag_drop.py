"""Drag-and-drop session state and application of accepted drops to a schema."""

from __future__ import annotations

import logging
from typing import Callable, Iterable

from wbschema.mapping.builder import (
    build_qualifier,
    build_reference,
    column_mapping_from_column,
    column_value_mapping,
)
from wbschema.mapping.models import ColumnInfo, PropertyReference, WikibaseDataType
from wbschema.mapping.store import SchemaStore

from .models import ColumnDroppedEvent, DragState, DropFeedback, DropTarget, DropTargetType
from .state import ValidationState
from .validator import CompatibilityValidator

logger = logging.getLogger(__name__)

DropListener = Callable[[ColumnDroppedEvent], None]


class DragDropContext:
    """Tracks one drag gesture over a set of registered drop targets.

    Valid and invalid target paths are computed synchronously in
    ``start_drag`` so every visible target can be highlighted before the
    column is released.
    """

    def __init__(
        self,
        validator: CompatibilityValidator | None = None,
        state: ValidationState | None = None,
    ):
        self.validator = validator or CompatibilityValidator()
        self.state = state or ValidationState()
        self._targets: dict[str, DropTarget] = {}
        self._listeners: list[DropListener] = []
        self._clear_drag()

    @property
    def available_targets(self) -> list[DropTarget]:
        return list(self._targets.values())

    @property
    def is_dragging(self) -> bool:
        return self.drag_state is DragState.DRAGGING

    def set_available_targets(self, targets: Iterable[DropTarget]) -> None:
        self._targets = {target.path: target for target in targets}

    def get_target(self, path: str) -> DropTarget | None:
        return self._targets.get(path)

    def subscribe(self, listener: DropListener) -> Callable[[], None]:
        """Register a ``column-dropped`` listener; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def start_drag(self, column: ColumnInfo) -> list[DropTarget]:
        self.dragged_column = column
        self.drag_state = DragState.DRAGGING
        self.feedback = None

        valid = self.validator.valid_targets_for_column(column, self._targets.values())
        self.valid_drop_targets = [target.path for target in valid]
        self.invalid_drop_targets = [
            path for path in self._targets if path not in self.valid_drop_targets
        ]

        if not valid:
            self.feedback = DropFeedback(
                type="warning",
                message=f"No compatible drop targets found for {column.data_type} column",
            )
        return valid

    def enter_drop_zone(self, path: str) -> DropFeedback | None:
        self.hovered_target = path
        target = self._targets.get(path)
        if self.dragged_column is None or target is None:
            self.feedback = None
        else:
            self.feedback = self.validator.get_validation_feedback(self.dragged_column, target)
        return self.feedback

    def leave_drop_zone(self) -> None:
        self.hovered_target = None
        self.feedback = None

    def perform_drop(
        self,
        column: ColumnInfo,
        target: DropTarget,
        store: SchemaStore | None = None,
    ) -> bool:
        """Validate and, when accepted, notify listeners of the drop.

        With a ``store``, alias duplicates are checked against the store's
        aliases for the target language.
        """
        self.drag_state = DragState.DROPPING
        existing_aliases = None
        language = target.effective_language
        if store is not None and language:
            existing_aliases = store.aliases.get(language)

        self.state.clear_errors_for_path(target.path, exact_match=True)
        result = self.validator.validate_for_drop(column, target, existing_aliases)
        if not result.is_valid:
            self.state.add_error(result.error)
            self.feedback = DropFeedback(type="error", message=result.reason)
            self.drag_state = DragState.INVALID
            logger.debug("Rejected drop of %s on %s: %s", column.name, target.path, result.reason)
            return False

        event = ColumnDroppedEvent(target=target, column=column)
        for listener in list(self._listeners):
            listener(event)

        self.feedback = DropFeedback(
            type="success", message=f"Mapped {column.name} to {target.type.value}"
        )
        self.end_drag()
        return True

    def end_drag(self) -> None:
        """Reset the gesture; the last feedback stays readable."""
        feedback = self.feedback
        self._clear_drag()
        self.feedback = feedback

    def _clear_drag(self) -> None:
        self.dragged_column: ColumnInfo | None = None
        self.drag_state = DragState.IDLE
        self.valid_drop_targets: list[str] = []
        self.invalid_drop_targets: list[str] = []
        self.hovered_target: str | None = None
        self.feedback: DropFeedback | None = None


def apply_drop(store: SchemaStore, column: ColumnInfo, target: DropTarget) -> str | None:
    """Apply an accepted drop to ``store``.

    Returns the id of the statement that was created or changed, or None for
    term targets.

    Raises:
        ValueError: If the target lacks the language, statement or property it needs
    """
    match target.type:
        case DropTargetType.LABEL | DropTargetType.DESCRIPTION | DropTargetType.ALIAS:
            language = target.effective_language
            if not language:
                raise ValueError(f"Drop target {target.path} has no language")
            mapping = column_mapping_from_column(column)
            if target.type is DropTargetType.LABEL:
                store.add_label_mapping(language, mapping)
            elif target.type is DropTargetType.DESCRIPTION:
                store.add_description_mapping(language, mapping)
            else:
                store.add_alias_mapping(language, mapping)
            return None

        case DropTargetType.STATEMENT:
            data_type = _value_data_type(target)
            statement_id = target.statement_id
            if statement_id and store.get_statement(statement_id) is not None:
                store.update_statement_value(statement_id, column_value_mapping(column, data_type))
                return statement_id
            return store.add_statement(
                _property_for(target), column_value_mapping(column, data_type)
            )

        case DropTargetType.QUALIFIER | DropTargetType.REFERENCE:
            statement_id = target.statement_id
            if not statement_id or store.get_statement(statement_id) is None:
                raise ValueError(f"Drop target {target.path} does not name an existing statement")
            value = column_value_mapping(column, _value_data_type(target))
            if target.type is DropTargetType.QUALIFIER:
                store.add_qualifier_to_statement(
                    statement_id, build_qualifier(_property_for(target), value)
                )
            else:
                store.add_reference_to_statement(
                    statement_id, build_reference([(_property_for(target), value)])
                )
            return statement_id

    raise ValueError(f"Unsupported drop target type: {target.type}")


def _value_data_type(target: DropTarget) -> WikibaseDataType:
    return target.accepted_types[0] if target.accepted_types else WikibaseDataType.STRING


def _property_for(target: DropTarget) -> PropertyReference:
    if not target.property_id:
        raise ValueError(f"Drop target {target.path} has no property ID")
    return PropertyReference(id=target.property_id, data_type=_value_data_type(target).value)
