"""UI-agnostic form models.

These classes can be used and tested without any terminal dependencies.
Schemas describe fields, their defaults, visibility and rule chains; the
form state tracks each field's current value and displayed error.
"""

from formfoundry.models.field_value import FieldKind, FieldSource, FieldValue
from formfoundry.models.field_metadata import FieldSpec, FormSchema
from formfoundry.models.form_state import FormState

__all__ = [
    "FieldKind",
    "FieldSource",
    "FieldValue",
    "FieldSpec",
    "FormSchema",
    "FormState",
]
