"""Conditional form validation.

This package decides which fields of a form are active from the current
values, validates the active fields against ordered rule chains, and gates
submission on an empty error map.

Usage:
    from formfoundry import FormController, get_schema

    form = FormController(get_schema("event_registration"))
    form.change("attendingWithGuest", "yes")
    result = form.submit()
    result.errors  # {"name": "Name is required", ...}
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = [
    "FormController",
    "FormSchema",
    "FieldSpec",
    "FormState",
    "get_schema",
    "list_schemas",
    "resolve_active_fields",
    "validate",
]


def __getattr__(name: str):
    """Lazy import of package components."""
    if name == "FormController":
        from formfoundry.controller import FormController
        return FormController
    if name in ("FormSchema", "FieldSpec"):
        from formfoundry.models import field_metadata
        return getattr(field_metadata, name)
    if name == "FormState":
        from formfoundry.models.form_state import FormState
        return FormState
    if name in ("get_schema", "list_schemas"):
        from formfoundry import schemas
        return getattr(schemas, name)
    if name == "resolve_active_fields":
        from formfoundry.lib.visibility import resolve_active_fields
        return resolve_active_fields
    if name == "validate":
        from formfoundry.lib.validation import validate
        return validate
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
