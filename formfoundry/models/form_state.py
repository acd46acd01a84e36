"""Per-form value store.

This class provides a UI-agnostic representation of one form's current
values that can be tested without any terminal dependencies. It holds one
FieldValue for every field the schema declares, and nothing else.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping

from formfoundry.lib.errors import FieldKindError
from formfoundry.models.field_metadata import FormSchema
from formfoundry.models.field_value import FieldKind, FieldValue

logger = logging.getLogger(__name__)


@dataclass
class FormState:
    """Current value of every declared field of one form.

    The store is type-agnostic: values are kept exactly as supplied and are
    only interpreted by validation rules.

    Attributes:
        schema: Schema the state was created from
        fields: FieldValue per declared field name
    """

    schema: FormSchema
    fields: dict[str, FieldValue] = field(default_factory=dict)

    @classmethod
    def from_schema_defaults(cls, schema: FormSchema) -> "FormState":
        """Create a new state with all fields initialized from schema defaults."""
        state = cls(schema=schema)
        for spec in schema.fields:
            state.fields[spec.name] = FieldValue.from_default(
                spec.name, spec.kind, spec.initial_value
            )
        return state

    @classmethod
    def from_mapping(
        cls, schema: FormSchema, values: Mapping[str, Any]
    ) -> "FormState":
        """Create a state from defaults overlaid with the given values.

        Keys the schema does not declare are ignored.
        """
        state = cls.from_schema_defaults(schema)
        for name, value in values.items():
            if isinstance(value, (tuple, set, frozenset)):
                value = list(value)
            state.set(name, value)
        return state

    def __contains__(self, name: object) -> bool:
        return name in self.fields

    def __iter__(self) -> Iterator[str]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def get(self, name: str) -> Any:
        """Get the current value of a field (its default until set).

        Returns None for names the schema does not declare.
        """
        if name in self.fields:
            return self.fields[name].value
        return None

    def get_field(self, name: str) -> FieldValue | None:
        return self.fields.get(name)

    def set(self, name: str, value: Any) -> bool:
        """Replace the value of a field (marks it as local).

        Setting a field the schema does not declare is a no-op.

        Returns:
            True if the value was stored, False if the name is unknown
        """
        if name not in self.fields:
            logger.warning(
                "Ignoring value for undeclared field %r on form %s",
                name,
                self.schema.name,
            )
            return False
        self.fields[name].set_local_value(value)
        return True

    def toggle(self, name: str, option: str) -> bool:
        """Select ``option`` of a multi-select field, or deselect it if selected.

        Toggling a field the schema does not declare, or an option the field
        does not offer, is a no-op.

        Returns:
            True if the option was toggled, False if the name or option is unknown

        Raises:
            FieldKindError: If the field is not a multi-select
        """
        field_val = self.fields.get(name)
        if field_val is None:
            logger.warning(
                "Ignoring toggle for undeclared field %r on form %s",
                name,
                self.schema.name,
            )
            return False
        if field_val.kind is not FieldKind.MULTISELECT:
            raise FieldKindError(
                "toggle() only applies to multiselect fields",
                field=name,
                kind=field_val.kind.value,
                form=self.schema.name,
            )
        if option not in self.schema.field(name).options:
            logger.warning(
                "Ignoring toggle of undeclared option %r for %s on form %s",
                option,
                name,
                self.schema.name,
            )
            return False
        selected = field_val.toggle_option(option)
        logger.debug(
            "%s option %r of %s", "Selected" if selected else "Deselected", option, name
        )
        return True

    def reset(self, name: str | None = None) -> None:
        """Restore one field, or every field, to its schema default."""
        if name is None:
            for field_val in self.fields.values():
                field_val.reset()
            return
        if name in self.fields:
            self.fields[name].reset()

    def values(self) -> dict[str, Any]:
        """Snapshot of every field's value."""
        return {name: field_val.snapshot() for name, field_val in self.fields.items()}

    def edited_fields(self) -> list[str]:
        """Names of fields whose value was set by the user."""
        return [name for name, field_val in self.fields.items() if field_val.is_local()]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "form": self.schema.name,
            "fields": [field_val.to_dict() for field_val in self.fields.values()],
        }
