"""Path-scoped validation errors and warnings for the schema being edited."""

from __future__ import annotations

from .models import ValidationError, ValidationErrorCode, ValidationReport


class ValidationState:
    """Collects errors and warnings, at most one per ``(path, code)`` pair."""

    def __init__(self) -> None:
        self._errors: list[ValidationError] = []
        self._warnings: list[ValidationError] = []

    @property
    def errors(self) -> tuple[ValidationError, ...]:
        return tuple(self._errors)

    @property
    def warnings(self) -> tuple[ValidationError, ...]:
        return tuple(self._warnings)

    @property
    def has_errors(self) -> bool:
        return bool(self._errors)

    @property
    def has_warnings(self) -> bool:
        return bool(self._warnings)

    @property
    def total_issue_count(self) -> int:
        return len(self._errors) + len(self._warnings)

    def add(self, issue: ValidationError) -> None:
        """File ``issue`` as an error or a warning according to its ``type``."""
        bucket = self._warnings if issue.type == "warning" else self._errors
        if not any(item.path == issue.path and item.code == issue.code for item in bucket):
            bucket.append(issue)

    def add_error(self, error: ValidationError) -> None:
        self.add(error.model_copy(update={"type": "error"}))

    def add_warning(self, warning: ValidationError) -> None:
        self.add(warning.model_copy(update={"type": "warning"}))

    def clear_error(self, issue: ValidationError) -> None:
        for bucket in (self._errors, self._warnings):
            for index, item in enumerate(bucket):
                if (item.path, item.code, item.message) == (issue.path, issue.code, issue.message):
                    del bucket[index]
                    break

    def clear_errors_for_path(self, path: str, exact_match: bool = False) -> None:
        def keep(item: ValidationError) -> bool:
            item_path = item.path or ""
            return item_path != path if exact_match else not item_path.startswith(path)

        self._errors = [item for item in self._errors if keep(item)]
        self._warnings = [item for item in self._warnings if keep(item)]

    def clear_errors_by_code(self, code: ValidationErrorCode | str) -> None:
        code = ValidationErrorCode(code)
        self._errors = [item for item in self._errors if item.code != code]
        self._warnings = [item for item in self._warnings if item.code != code]

    def clear_all(self) -> None:
        self._errors = []
        self._warnings = []

    def errors_for_path(self, path: str) -> list[ValidationError]:
        return [item for item in self._errors if (item.path or "").startswith(path)]

    def warnings_for_path(self, path: str) -> list[ValidationError]:
        return [item for item in self._warnings if (item.path or "").startswith(path)]

    def has_errors_for_path(self, path: str) -> bool:
        return bool(self.errors_for_path(path))

    def report(self) -> ValidationReport:
        return ValidationReport(
            is_valid=not self._errors,
            errors=list(self._errors),
            warnings=list(self._warnings),
        )
