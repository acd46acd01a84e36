"""Structured exception hierarchy for form schemas and controllers.

Field validation failures are never raised: they are reported as an error
map. The exceptions here cover programming and configuration mistakes, such
as a malformed schema definition, which should fail as early as possible.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

__all__ = [
    "FormError",
    "SchemaError",
    "SchemaNotFoundError",
    "FieldKindError",
    "ValuesFileError",
]


class FormError(Exception):
    """Base exception for all formfoundry errors.

    Provides structured error information for debugging.
    """

    def __init__(
        self,
        message: str,
        *,
        form: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        self.form = form
        self.details = details or {}
        self.suggestion = suggestion

        # Build full message
        parts = [message]

        if form:
            parts.insert(0, f"[{form}]")

        if details:
            detail_lines = [f"  {k}: {v}" for k, v in details.items()]
            parts.append("\nDetails:")
            parts.extend(detail_lines)

        if suggestion:
            parts.append(f"\nSuggestion: {suggestion}")

        super().__init__("\n".join(parts) if len(parts) > 1 else message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for structured logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "form": self.form,
            "details": self.details,
            "suggestion": self.suggestion,
        }


class SchemaError(FormError):
    """Error in a form schema definition.

    Raised while a schema is being built, never while validating values.
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Any = None,
        **kwargs: Any,
    ) -> None:
        self.field = field
        self.value = value

        details = kwargs.pop("details", {})
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)

        super().__init__(message, details=details, **kwargs)


class SchemaNotFoundError(FormError):
    """No schema definition file exists for the requested form name."""

    def __init__(
        self,
        name: str,
        *,
        searched: Optional[list[str]] = None,
        available: Optional[list[str]] = None,
        **kwargs: Any,
    ) -> None:
        self.name = name

        details = kwargs.pop("details", {})
        if searched:
            details["searched"] = ", ".join(searched)

        suggestion = kwargs.pop("suggestion", None)
        if not suggestion and available:
            suggestion = f"Available forms: {', '.join(available)}"

        super().__init__(
            f"Unknown form '{name}'",
            details=details,
            suggestion=suggestion,
            **kwargs,
        )


class FieldKindError(FormError, TypeError):
    """An operation was applied to a field of the wrong kind.

    Raised, for example, when toggle() is called on a field that is not a
    multi-select.
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        kind: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        self.field = field
        self.kind = kind

        details = kwargs.pop("details", {})
        if field:
            details["field"] = field
        if kind:
            details["kind"] = kind

        super().__init__(message, details=details, **kwargs)


class ValuesFileError(FormError):
    """A values file could not be read as a mapping of field values."""

    def __init__(
        self,
        message: str,
        *,
        path: Optional[str] = None,
        cause: Optional[Exception] = None,
        **kwargs: Any,
    ) -> None:
        self.path = path
        self.cause = cause

        details = kwargs.pop("details", {})
        if path:
            details["path"] = path
        if cause:
            details["cause"] = str(cause)
            details["cause_type"] = type(cause).__name__

        super().__init__(message, details=details, **kwargs)
