"""Tests for building schemas from YAML definitions and fail-fast checks."""

from __future__ import annotations

import pytest

from formfoundry.lib.errors import SchemaError
from formfoundry.lib.rules import required
from formfoundry.lib.visibility import Condition, equals
from formfoundry.models import FieldKind, FieldSpec, FormSchema
from formfoundry.utils.schema_reader import (
    clear_schema_cache,
    field_from_dict,
    load_schema,
    schema_from_dict,
)


class TestBuiltinSchemas:
    def test_event_schema(self, event_schema: FormSchema) -> None:
        assert event_schema.name == "event_registration"
        assert event_schema.title == "Event Registration Form"
        assert event_schema.field_names == ["name", "email", "age", "attendingWithGuest", "guestName"]
        assert event_schema.field("attendingWithGuest").options == ("no", "yes")
        assert event_schema.field("guestName").visible_when == equals("attendingWithGuest", "yes")
        assert event_schema.field("age").rule_names == ["required", "positive_number"]

    def test_job_schema(self, job_schema: FormSchema) -> None:
        skills = job_schema.field("additionalSkills")

        assert skills.kind is FieldKind.MULTISELECT
        assert skills.default == ()
        assert skills.initial_value == []
        assert job_schema.field("position").default == "Developer"
        assert job_schema.field("relevantExperience").visible_when == Condition(
            "position", ("Developer", "Designer")
        )

    def test_load_schema_is_cached(self, event_schema: FormSchema) -> None:
        from formfoundry.schemas import SCHEMA_DIR

        assert load_schema(SCHEMA_DIR / "event_registration.yaml") is event_schema

        clear_schema_cache()
        reloaded = load_schema(SCHEMA_DIR / "event_registration.yaml")
        assert reloaded is not event_schema
        assert reloaded.field_names == event_schema.field_names
        assert [s.rule_names for s in reloaded] == [s.rule_names for s in event_schema]


class TestSchemaFiles:
    def test_load_custom_schema(self, write_yaml) -> None:
        path = write_yaml(
            "contact.yaml",
            """
title: Contact
fields:
  - name: topic
    kind: select
    default: sales
    options: [sales, support]
  - name: orderNumber
    label: Order Number
    visible_when: {field: topic, equals: support}
    rules:
      - required: Order Number is required
      - matches: {pattern: "[0-9]{6}", message: Order Number has six digits}
""",
        )

        schema = load_schema(path)

        assert schema.name == "contact"
        assert schema.field("topic").label == "topic"
        assert schema.validate({"topic": "support", "orderNumber": "12"}) == {
            "orderNumber": "Order Number has six digits"
        }
        assert schema.validate({"topic": "sales", "orderNumber": ""}) == {}

    def test_invalid_yaml(self, write_yaml) -> None:
        path = write_yaml("broken.yaml", "fields: [\n")

        with pytest.raises(SchemaError, match="not valid YAML"):
            load_schema(path)

    def test_not_a_mapping(self, write_yaml) -> None:
        path = write_yaml("list.yaml", "- name: a\n")

        with pytest.raises(SchemaError, match="must contain a mapping"):
            load_schema(path)

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError):
            load_schema(tmp_path / "absent.yaml")


class TestFailFast:
    """Malformed schemas are rejected at construction time."""

    def _schema(self, *fields: dict) -> FormSchema:
        return schema_from_dict({"name": "broken", "fields": list(fields)})

    def test_no_fields(self) -> None:
        with pytest.raises(SchemaError, match="non-empty 'fields'"):
            schema_from_dict({"name": "empty", "fields": []})

    def test_duplicate_field(self) -> None:
        with pytest.raises(SchemaError, match="Duplicate field name"):
            self._schema({"name": "a"}, {"name": "a"})

    def test_unknown_rule(self) -> None:
        with pytest.raises(SchemaError, match="Unknown rule 'phone'"):
            self._schema({"name": "a", "rules": [{"phone": "Bad"}]})

    def test_rule_with_two_keys(self) -> None:
        with pytest.raises(SchemaError, match="single-key mapping"):
            self._schema({"name": "a", "rules": [{"required": "A", "email": "B"}]})

    def test_visibility_references_undeclared_field(self) -> None:
        with pytest.raises(SchemaError, match="undeclared field 'role'") as exc_info:
            self._schema({"name": "a", "visible_when": {"field": "role", "equals": "x"}})

        assert exc_info.value.field == "a"
        assert exc_info.value.form == "broken"

    def test_visibility_needs_exactly_one_operator(self) -> None:
        with pytest.raises(SchemaError, match="exactly one of 'equals' or 'in'"):
            self._schema(
                {"name": "a"},
                {"name": "b", "visible_when": {"field": "a", "equals": "x", "in": ["y"]}},
            )

    def test_visibility_value_outside_options(self) -> None:
        with pytest.raises(SchemaError, match="can never take"):
            self._schema(
                {"name": "role", "kind": "select", "default": "a", "options": ["a", "b"]},
                {"name": "extra", "visible_when": {"field": "role", "equals": "c"}},
            )

    def test_self_controlled_field(self) -> None:
        with pytest.raises(SchemaError, match="its own visibility"):
            self._schema({"name": "a", "visible_when": {"field": "a", "equals": "x"}})

    def test_select_default_outside_options(self) -> None:
        # An unquoted "no" is read by YAML as False, which is not an option
        with pytest.raises(SchemaError, match="Default is not one of"):
            self._schema({"name": "guest", "kind": "select", "default": False, "options": ["no", "yes"]})

    def test_select_needs_options(self) -> None:
        with pytest.raises(SchemaError, match="needs options"):
            self._schema({"name": "a", "kind": "select"})

    def test_options_on_text_field(self) -> None:
        with pytest.raises(SchemaError, match="Only select and multiselect"):
            self._schema({"name": "a", "options": ["x"]})

    def test_multiselect_default_must_be_list(self) -> None:
        with pytest.raises(SchemaError, match="must be a list"):
            self._schema({"name": "a", "kind": "multiselect", "default": "x", "options": ["x"]})

    def test_invalid_kind(self) -> None:
        with pytest.raises(SchemaError, match="Invalid kind 'slider'"):
            field_from_dict({"name": "a", "kind": "slider"})

    def test_unknown_field_keys(self) -> None:
        with pytest.raises(SchemaError, match="Unknown field keys: hidden"):
            field_from_dict({"name": "a", "hidden": True})

    def test_error_includes_suggestion(self) -> None:
        with pytest.raises(SchemaError) as exc_info:
            self._schema({"name": "role", "kind": "select", "default": "c", "options": ["a", "b"]})

        assert "Suggestion: Use one of: a, b" in str(exc_info.value)
        assert exc_info.value.to_dict()["details"] == {"field": "role", "value": "c"}


class TestPythonSchemas:
    """Schemas can also be declared directly in Python."""

    def test_non_callable_visibility(self) -> None:
        with pytest.raises(SchemaError, match="must be callable"):
            FormSchema(name="f", fields=(FieldSpec(name="a", visible_when="yes"),))  # type: ignore[arg-type]

    def test_schema_needs_fields(self) -> None:
        with pytest.raises(SchemaError, match="declares no fields"):
            FormSchema(name="f", fields=())

    def test_lookup(self) -> None:
        schema = FormSchema(
            name="signup",
            fields=(FieldSpec(name="email", rules=(required("Email is required"),)),),
        )

        assert "email" in schema
        assert schema.get("phone") is None
        assert schema.title == "Signup"
        with pytest.raises(KeyError, match="no field 'phone'"):
            schema.field("phone")
