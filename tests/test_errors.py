"""Tests for the structured exception hierarchy."""

from __future__ import annotations

from formfoundry.lib.errors import (
    FieldKindError,
    FormError,
    SchemaError,
    SchemaNotFoundError,
    ValuesFileError,
)


def test_plain_message() -> None:
    error = FormError("Something went wrong")

    assert str(error) == "Something went wrong"
    assert error.message == "Something went wrong"


def test_full_message() -> None:
    error = FormError(
        "Bad rule",
        form="signup",
        details={"field": "email"},
        suggestion="Check the rule name",
    )

    assert str(error) == "[signup]\nBad rule\n\nDetails:\n  field: email\n\nSuggestion: Check the rule name"


def test_to_dict() -> None:
    error = SchemaError("Duplicate field name", form="signup", field="email")

    assert error.to_dict() == {
        "error_type": "SchemaError",
        "message": "Duplicate field name",
        "form": "signup",
        "details": {"field": "email"},
        "suggestion": None,
    }


def test_schema_not_found() -> None:
    error = SchemaNotFoundError("survey", searched=["/a", "/b"], available=["x"])

    assert error.details == {"searched": "/a, /b"}
    assert error.suggestion == "Available forms: x"
    assert isinstance(error, FormError)


def test_field_kind_error_is_type_error() -> None:
    error = FieldKindError("toggle() only applies to multiselect fields", field="position", kind="select")

    assert isinstance(error, TypeError)
    assert error.details == {"field": "position", "kind": "select"}


def test_values_file_error_records_cause() -> None:
    cause = FileNotFoundError("missing.yaml")
    error = ValuesFileError("Cannot read values file", path="missing.yaml", cause=cause)

    assert error.details["cause_type"] == "FileNotFoundError"
    assert error.path == "missing.yaml"
