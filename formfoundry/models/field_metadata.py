"""Field specifications and form schemas.

A schema is static configuration: the ordered field list, each field's
default, its visibility rule and its validation rule chain. Schemas are
immutable and may be shared by any number of forms. Malformed schemas are
rejected when they are built, never while values are being validated.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Collection, Iterator, Mapping, Optional

from formfoundry.lib.errors import SchemaError
from formfoundry.lib.rules import Rule
from formfoundry.lib.visibility import Condition, VisibilityRule
from formfoundry.models.field_value import FieldKind

logger = logging.getLogger(__name__)

_UNSET: Any = object()


@dataclass(frozen=True)
class FieldSpec:
    """Declaration of one form field.

    Attributes:
        name: Field name, unique within the schema
        label: Human-readable label
        kind: Input kind (drives the default and allowed store operations)
        default: Initial value; the kind's empty value when not given
        options: Allowed choices for select and multi-select fields
        visible_when: Visibility rule; None means always active
        rules: Ordered validation rule chain
    """

    name: str
    label: str = ""
    kind: FieldKind = FieldKind.TEXT
    default: Any = _UNSET
    options: tuple[str, ...] = ()
    visible_when: Optional[VisibilityRule] = None
    rules: tuple[Rule, ...] = ()

    def __post_init__(self) -> None:
        # Normalise so specs stay hashable and defaults never share state
        if not self.label:
            object.__setattr__(self, "label", self.name)
        object.__setattr__(self, "kind", FieldKind(self.kind))
        object.__setattr__(self, "options", tuple(self.options))
        object.__setattr__(self, "rules", tuple(self.rules))
        if self.default is _UNSET:
            object.__setattr__(self, "default", self.kind.empty_value)
        elif isinstance(self.default, (list, set, frozenset)):
            object.__setattr__(self, "default", tuple(self.default))

    @property
    def initial_value(self) -> Any:
        """Fresh copy of the default, suitable for storing in a form."""
        if self.kind is FieldKind.MULTISELECT:
            return list(self.default)
        return self.default

    @property
    def is_conditional(self) -> bool:
        return self.visible_when is not None

    @property
    def rule_names(self) -> list[str]:
        return [rule.name for rule in self.rules]


@dataclass(frozen=True)
class FormSchema:
    """Ordered collection of field specifications for one form.

    Attributes:
        name: Form identifier (e.g., "event_registration")
        fields: Field specifications in display order
        title: Human-readable form title
    """

    name: str
    fields: tuple[FieldSpec, ...]
    title: str = ""
    _index: dict[str, FieldSpec] = field(
        default_factory=dict, init=False, repr=False, compare=False, hash=False
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", tuple(self.fields))
        if not self.title:
            object.__setattr__(self, "title", self.name.replace("_", " ").title())
        self._check()
        self._index.update((spec.name, spec) for spec in self.fields)
        logger.debug("Built schema %s with %d fields", self.name, len(self.fields))

    def _check(self) -> None:
        """Fail fast on configuration mistakes."""
        if not self.name:
            raise SchemaError("Schema needs a name")
        if not self.fields:
            raise SchemaError("Schema declares no fields", form=self.name)

        seen: dict[str, FieldSpec] = {}
        for spec in self.fields:
            if not spec.name:
                raise SchemaError("Field needs a name", form=self.name)
            if spec.name in seen:
                raise SchemaError(
                    "Duplicate field name",
                    form=self.name,
                    field=spec.name,
                )
            seen[spec.name] = spec

        for spec in self.fields:
            _check_options(self.name, spec)

        for spec in self.fields:
            _check_visibility(self.name, spec, seen)

    def __iter__(self) -> Iterator[FieldSpec]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def __contains__(self, name: object) -> bool:
        return name in self._index

    @property
    def field_names(self) -> list[str]:
        return [spec.name for spec in self.fields]

    def field(self, name: str) -> FieldSpec:
        """Get a field specification by name.

        Raises:
            KeyError: If the schema does not declare the field
        """
        try:
            return self._index[name]
        except KeyError:
            raise KeyError(f"Form {self.name!r} has no field {name!r}") from None

    def get(self, name: str) -> FieldSpec | None:
        return self._index.get(name)

    def defaults(self) -> dict[str, Any]:
        """Initial values of every field."""
        return {spec.name: spec.initial_value for spec in self.fields}

    def active_fields(self, values: Mapping[str, Any]) -> frozenset[str]:
        """Names of fields active for the given values."""
        from formfoundry.lib.visibility import resolve_active_fields

        return resolve_active_fields(self, values)

    def validate(
        self,
        values: Mapping[str, Any],
        active_fields: Collection[str] | None = None,
    ) -> dict[str, str]:
        """Validate values, resolving the active set when not supplied."""
        from formfoundry.lib.validation import validate

        if active_fields is None:
            active_fields = self.active_fields(values)
        return validate(self, values, active_fields)


def _check_options(form: str, spec: FieldSpec) -> None:
    if spec.kind in (FieldKind.SELECT, FieldKind.MULTISELECT):
        if not spec.options:
            raise SchemaError(
                f"{spec.kind.value} field needs options",
                form=form,
                field=spec.name,
            )
        if len(set(spec.options)) != len(spec.options):
            raise SchemaError("Duplicate options", form=form, field=spec.name)
    elif spec.options:
        raise SchemaError(
            f"Only select and multiselect fields take options, not {spec.kind.value}",
            form=form,
            field=spec.name,
        )

    if spec.kind is FieldKind.SELECT and spec.default not in spec.options:
        raise SchemaError(
            "Default is not one of the field's options",
            form=form,
            field=spec.name,
            value=spec.default,
            suggestion=f"Use one of: {', '.join(spec.options)}",
        )

    if spec.kind is FieldKind.MULTISELECT:
        if not isinstance(spec.default, tuple):
            raise SchemaError(
                "Multiselect default must be a list",
                form=form,
                field=spec.name,
                value=spec.default,
            )
        unknown = [v for v in spec.default if v not in spec.options]
        if unknown:
            raise SchemaError(
                "Default selects unknown options",
                form=form,
                field=spec.name,
                value=unknown,
            )


def _check_visibility(
    form: str, spec: FieldSpec, declared: Mapping[str, FieldSpec]
) -> None:
    rule = spec.visible_when
    if rule is None:
        return
    if not callable(rule):
        raise SchemaError(
            "Visibility rule must be callable",
            form=form,
            field=spec.name,
            value=rule,
        )
    if not isinstance(rule, Condition):
        return

    controller = declared.get(rule.field)
    if controller is None:
        raise SchemaError(
            f"Visibility rule references undeclared field '{rule.field}'",
            form=form,
            field=spec.name,
        )
    if controller.name == spec.name:
        raise SchemaError(
            "Field cannot control its own visibility",
            form=form,
            field=spec.name,
        )
    if controller.kind is FieldKind.SELECT:
        unknown = [v for v in rule.allowed if v not in controller.options]
        if unknown:
            raise SchemaError(
                f"Visibility rule compares '{rule.field}' with values it can never take",
                form=form,
                field=spec.name,
                value=unknown,
                suggestion=f"Use one of: {', '.join(controller.options)}",
            )
