"""Form engine library modules.

Rules, visibility resolution, validation, errors and logging helpers.
"""

from formfoundry.lib.errors import (
    FieldKindError,
    FormError,
    SchemaError,
    SchemaNotFoundError,
    ValuesFileError,
)
from formfoundry.lib.rules import Rule, build_rule
from formfoundry.lib.validation import ErrorMap, is_valid, validate, validate_field
from formfoundry.lib.visibility import (
    Condition,
    controlling_fields,
    equals,
    is_field_active,
    one_of,
    resolve_active_fields,
)

__all__ = [
    "Condition",
    "ErrorMap",
    "FieldKindError",
    "FormError",
    "Rule",
    "SchemaError",
    "SchemaNotFoundError",
    "ValuesFileError",
    "build_rule",
    "controlling_fields",
    "equals",
    "is_field_active",
    "is_valid",
    "one_of",
    "resolve_active_fields",
    "validate",
    "validate_field",
]
