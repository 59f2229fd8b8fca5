"""Drop-target compatibility validation and drag-and-drop state."""

from .compatibility import (
    DATA_TYPE_COMPATIBILITY,
    get_compatible_wikibase_types,
    is_data_type_compatible,
    native_types_for,
)
from .drag_drop import DragDropContext, apply_drop
from .models import (
    ColumnDroppedEvent,
    DragState,
    DropFeedback,
    DropTarget,
    DropTargetType,
    DropValidation,
    MappingInfo,
    ValidationError,
    ValidationErrorCode,
    ValidationReport,
    language_from_path,
    statement_id_from_path,
    target_type_from_path,
)
from .state import ValidationState
from .validator import CompatibilityValidator, is_alias_duplicate

__all__ = [
    "DATA_TYPE_COMPATIBILITY",
    "ColumnDroppedEvent",
    "CompatibilityValidator",
    "DragDropContext",
    "DragState",
    "DropFeedback",
    "DropTarget",
    "DropTargetType",
    "DropValidation",
    "MappingInfo",
    "ValidationError",
    "ValidationErrorCode",
    "ValidationReport",
    "ValidationState",
    "apply_drop",
    "get_compatible_wikibase_types",
    "is_alias_duplicate",
    "is_data_type_compatible",
    "language_from_path",
    "native_types_for",
    "statement_id_from_path",
    "target_type_from_path",
]
