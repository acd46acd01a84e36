"""Field value with source tracking for form rendering."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class FieldSource(str, Enum):
    """Source of a field's value."""

    DEFAULT = "default"  # From schema default
    LOCAL = "local"  # Set by the user


class FieldKind(str, Enum):
    """Kind of input a field is rendered as.

    The kind decides the default value and which store operations apply.
    It never causes values to be parsed when they are stored.
    """

    TEXT = "text"
    EMAIL = "email"
    NUMBER = "number"
    TEL = "tel"
    URL = "url"
    SELECT = "select"
    CHECKBOX = "checkbox"
    MULTISELECT = "multiselect"
    DATETIME = "datetime"

    @property
    def empty_value(self) -> Any:
        """Default value for a field of this kind when the schema gives none."""
        if self is FieldKind.CHECKBOX:
            return False
        if self is FieldKind.MULTISELECT:
            return []
        return ""


@dataclass
class FieldValue:
    """Represents a single field's value with provenance tracking.

    Attributes:
        name: The field name (e.g., "email", "position")
        value: The current value, stored exactly as supplied
        kind: Input kind of the field
        default: Value the field resets to
        source: Where this value came from
        validation_error: Error currently displayed for the field, if any
    """

    name: str
    value: Any = ""
    kind: FieldKind = FieldKind.TEXT
    default: Any = field(default="", repr=False)
    source: FieldSource = FieldSource.DEFAULT
    validation_error: str | None = None

    @classmethod
    def from_default(cls, name: str, kind: FieldKind, default: Any) -> "FieldValue":
        """Create a field holding its own copy of the default."""
        return cls(
            name=name,
            value=copy.deepcopy(default),
            kind=kind,
            default=default,
        )

    def is_local(self) -> bool:
        """Check if this value was set by the user."""
        return self.source == FieldSource.LOCAL

    def is_default(self) -> bool:
        """Check if this value is the schema default."""
        return self.source == FieldSource.DEFAULT

    def has_error(self) -> bool:
        return self.validation_error is not None

    def set_local_value(self, value: Any) -> None:
        """Set a user-supplied value."""
        self.value = value
        self.source = FieldSource.LOCAL

    def toggle_option(self, option: str) -> bool:
        """Add ``option`` to a multi-select value, or remove it if present.

        Returns:
            True if the option is now selected, False if it was removed
        """
        selected = list(self.value or [])
        if option in selected:
            selected.remove(option)
            now_selected = False
        else:
            selected.append(option)
            now_selected = True
        self.set_local_value(selected)
        return now_selected

    def reset(self) -> None:
        """Restore the schema default and clear any displayed error."""
        self.value = copy.deepcopy(self.default)
        self.source = FieldSource.DEFAULT
        self.validation_error = None

    def snapshot(self) -> Any:
        """Copy of the value that callers may keep or mutate freely."""
        if isinstance(self.value, list):
            return list(self.value)
        return self.value

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "value": self.snapshot(),
            "kind": self.kind.value,
            "source": self.source.value,
            "validation_error": self.validation_error,
        }

    def __str__(self) -> str:
        marker = "(default)" if self.is_default() else ""
        return f"{self.name}={self.value!r} {marker}".strip()
