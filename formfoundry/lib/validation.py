"""Validation engine: values and active fields to an error map.

The engine is pure. It never raises for bad input values; every failure is
reported as a message keyed by field name. A field that is not active is
skipped entirely, whatever its value.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Collection, Mapping

if TYPE_CHECKING:
    from formfoundry.models.field_metadata import FieldSpec, FormSchema

logger = logging.getLogger(__name__)

__all__ = [
    "ErrorMap",
    "validate",
    "validate_field",
    "is_valid",
]

ErrorMap = dict[str, str]


def validate_field(spec: "FieldSpec", values: Mapping[str, Any]) -> str | None:
    """Run one field's rule chain and return the first failure message.

    Args:
        spec: Field specification holding the ordered rules
        values: Current value of every field

    Returns:
        Error message of the first failing rule, or None if all pass
    """
    value = values.get(spec.name)
    for rule in spec.rules:
        message = rule.evaluate(value, values)
        if message is not None:
            logger.debug("Field %s failed rule %s", spec.name, rule.name)
            return message
    return None


def validate(
    schema: "FormSchema",
    values: Mapping[str, Any],
    active_fields: Collection[str],
) -> ErrorMap:
    """Validate every active field of a form.

    Args:
        schema: Form schema with the rule chain of each field
        values: Current value of every field
        active_fields: Names of the currently active fields

    Returns:
        Mapping of field name to error message. Only active fields that fail
        appear; an empty mapping means the form is valid.
    """
    errors: ErrorMap = {}
    for spec in schema.fields:
        if spec.name not in active_fields:
            continue
        message = validate_field(spec, values)
        if message is not None:
            errors[spec.name] = message

    logger.debug(
        "Validated %s: %d error(s)%s",
        schema.name,
        len(errors),
        f" in {', '.join(errors)}" if errors else "",
    )
    return errors


def is_valid(errors: Mapping[str, str]) -> bool:
    """A form is valid when its error map is empty."""
    return not errors
