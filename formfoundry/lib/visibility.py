"""Conditional field visibility.

A field with no visibility rule is always active. Otherwise its rule is a
predicate over the current values; the declarative rules here (``equals``,
``one_of``) read exactly one controlling field, and any other callable taking
the values mapping is accepted too.

Visibility is derived state: it is recomputed from the values on demand and
never cached.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Mapping, Union

if TYPE_CHECKING:
    from formfoundry.models.field_metadata import FormSchema

logger = logging.getLogger(__name__)

__all__ = [
    "Condition",
    "VisibilityRule",
    "equals",
    "one_of",
    "resolve_active_fields",
    "is_field_active",
    "controlling_fields",
]


@dataclass(frozen=True)
class Condition:
    """Declarative visibility rule: ``values[field]`` is one of ``allowed``.

    Attributes:
        field: Name of the controlling field
        allowed: Values of the controlling field that make the dependent
            field active
    """

    field: str
    allowed: tuple[Any, ...]

    def __call__(self, values: Mapping[str, Any]) -> bool:
        return values.get(self.field) in self.allowed

    def describe(self) -> str:
        if len(self.allowed) == 1:
            return f"{self.field} == {self.allowed[0]!r}"
        options = ", ".join(repr(v) for v in self.allowed)
        return f"{self.field} in ({options})"


VisibilityRule = Union[Condition, Callable[[Mapping[str, Any]], bool]]


def equals(field: str, value: Any) -> Condition:
    """Active iff the controlling field equals ``value``."""
    return Condition(field=field, allowed=(value,))


def one_of(field: str, *values: Any) -> Condition:
    """Active iff the controlling field equals any of ``values``."""
    if not values:
        raise ValueError("one_of() needs at least one value")
    return Condition(field=field, allowed=tuple(values))


def is_field_active(
    schema: "FormSchema", name: str, values: Mapping[str, Any]
) -> bool:
    """Check whether a single declared field is currently active.

    Raises:
        KeyError: If the schema does not declare ``name``
    """
    spec = schema.field(name)
    if spec.visible_when is None:
        return True
    return bool(spec.visible_when(values))


def resolve_active_fields(
    schema: "FormSchema", values: Mapping[str, Any]
) -> frozenset[str]:
    """Get the set of fields that are active for the given values.

    Args:
        schema: Form schema declaring the fields and their visibility rules
        values: Current value of every field

    Returns:
        Frozen set of active field names
    """
    active = frozenset(
        spec.name
        for spec in schema.fields
        if spec.visible_when is None or spec.visible_when(values)
    )
    logger.debug(
        "Resolved %d of %d fields active for %s",
        len(active),
        len(schema.fields),
        schema.name,
    )
    return active


def controlling_fields(schema: "FormSchema") -> dict[str, str]:
    """Map each conditionally visible field to the field that controls it.

    Only declarative conditions are listed; fields using an arbitrary
    callable have no statically known controlling field.
    """
    return {
        spec.name: spec.visible_when.field
        for spec in schema.fields
        if isinstance(spec.visible_when, Condition)
    }
