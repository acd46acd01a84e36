"""Tests for the validation engine against both built-in forms."""

from __future__ import annotations

import itertools
from typing import Any

import pytest

from formfoundry.lib.rules import required
from formfoundry.lib.validation import is_valid, validate, validate_field
from formfoundry.lib.visibility import resolve_active_fields
from formfoundry.models import FieldSpec, FormSchema


def _validate(schema: FormSchema, values: dict[str, Any]) -> dict[str, str]:
    return validate(schema, values, resolve_active_fields(schema, values))


class TestEventForm:
    def test_valid_values(self, event_schema: FormSchema, valid_event_values: dict) -> None:
        assert _validate(event_schema, valid_event_values) == {}

    def test_missing_name_only(self, event_schema: FormSchema) -> None:
        values = {"name": "", "email": "a@b.com", "age": "5", "attendingWithGuest": "no", "guestName": ""}

        assert _validate(event_schema, values) == {"name": "Name is required"}

    def test_guest_name_required_when_attending_with_guest(
        self, event_schema: FormSchema, valid_event_values: dict
    ) -> None:
        values = {**valid_event_values, "attendingWithGuest": "yes", "guestName": ""}

        assert _validate(event_schema, values) == {"guestName": "Guest Name is required"}

    def test_empty_form(self, event_schema: FormSchema) -> None:
        assert _validate(event_schema, event_schema.defaults()) == {
            "name": "Name is required",
            "email": "Email is required",
            "age": "Age is required",
        }

    def test_invalid_email(self, event_schema: FormSchema, valid_event_values: dict) -> None:
        values = {**valid_event_values, "email": "ada.example.com"}

        assert _validate(event_schema, values) == {"email": "Email is invalid"}

    @pytest.mark.parametrize("age", ["0", "-1", "abc", "1_000", "inf", "Infinity"])
    def test_age_must_be_positive(self, event_schema: FormSchema, valid_event_values: dict, age: str) -> None:
        values = {**valid_event_values, "age": age}

        assert _validate(event_schema, values) == {"age": "Age must be a number greater than 0"}

    def test_age_one_passes(self, event_schema: FormSchema, valid_event_values: dict) -> None:
        assert _validate(event_schema, {**valid_event_values, "age": "1"}) == {}


class TestJobForm:
    def test_valid_values(self, job_schema: FormSchema, valid_job_values: dict) -> None:
        assert _validate(job_schema, valid_job_values) == {}

    def test_designer_with_bad_portfolio(self, job_schema: FormSchema, valid_job_values: dict) -> None:
        values = {**valid_job_values, "position": "Designer", "portfolioUrl": "not-a-url"}

        assert _validate(job_schema, values) == {"portfolioUrl": "Portfolio URL is invalid"}

    def test_designer_without_portfolio(self, job_schema: FormSchema, valid_job_values: dict) -> None:
        values = {**valid_job_values, "position": "Designer"}

        assert _validate(job_schema, values) == {"portfolioUrl": "Portfolio URL is required"}

    def test_manager_needs_management_not_relevant_experience(
        self, job_schema: FormSchema, valid_job_values: dict
    ) -> None:
        values = {**valid_job_values, "position": "Manager", "relevantExperience": ""}

        errors = _validate(job_schema, values)

        assert "relevantExperience" not in errors
        assert errors == {"managementExperience": "Management Experience is required"}

    def test_skills_required(self, job_schema: FormSchema, valid_job_values: dict) -> None:
        values = {**valid_job_values, "additionalSkills": []}

        assert _validate(job_schema, values) == {
            "additionalSkills": "At least one skill must be selected"
        }

    def test_phone_number(self, job_schema: FormSchema, valid_job_values: dict) -> None:
        assert _validate(job_schema, {**valid_job_values, "phoneNumber": ""}) == {
            "phoneNumber": "Phone Number is required"
        }
        assert _validate(job_schema, {**valid_job_values, "phoneNumber": "555-1234"}) == {
            "phoneNumber": "Phone Number must be a valid number"
        }

    def test_relevant_experience(self, job_schema: FormSchema, valid_job_values: dict) -> None:
        assert _validate(job_schema, {**valid_job_values, "relevantExperience": ""}) == {
            "relevantExperience": "Relevant Experience is required"
        }
        assert _validate(job_schema, {**valid_job_values, "relevantExperience": "0"}) == {
            "relevantExperience": "Relevant Experience must be a number greater than 0"
        }

    def test_interview_time(self, job_schema: FormSchema, valid_job_values: dict) -> None:
        assert _validate(job_schema, {**valid_job_values, "preferredInterviewTime": ""}) == {
            "preferredInterviewTime": "Preferred Interview Time is required"
        }
        assert _validate(job_schema, {**valid_job_values, "preferredInterviewTime": "next tuesday"}) == {
            "preferredInterviewTime": "Preferred Interview Time must be a valid date and time"
        }

    def test_empty_form_as_developer(self, job_schema: FormSchema) -> None:
        assert list(_validate(job_schema, job_schema.defaults())) == [
            "fullName",
            "email",
            "phoneNumber",
            "relevantExperience",
            "additionalSkills",
            "preferredInterviewTime",
        ]


class TestEngineProperties:
    """Properties that hold for every combination of values."""

    POSITIONS = ["Developer", "Designer", "Manager"]
    EXPERIENCE = ["", "0", "3", "abc"]
    URLS = ["", "not-a-url", "https://example.com/me"]
    MANAGEMENT = ["", "Led a team of 4"]

    def _combinations(self, base: dict):
        for position, experience, url, management in itertools.product(
            self.POSITIONS, self.EXPERIENCE, self.URLS, self.MANAGEMENT
        ):
            yield {
                **base,
                "position": position,
                "relevantExperience": experience,
                "portfolioUrl": url,
                "managementExperience": management,
            }

    def test_inactive_fields_never_reported(self, job_schema: FormSchema, valid_job_values: dict) -> None:
        for values in self._combinations(valid_job_values):
            active = resolve_active_fields(job_schema, values)
            errors = validate(job_schema, values, active)

            assert set(errors) <= active

    def test_validation_is_idempotent(self, job_schema: FormSchema, valid_job_values: dict) -> None:
        for values in self._combinations(valid_job_values):
            active = resolve_active_fields(job_schema, values)

            assert validate(job_schema, values, active) == validate(job_schema, values, active)

    def test_well_formed_active_fields_validate_clean(
        self, job_schema: FormSchema, valid_job_values: dict
    ) -> None:
        for position in self.POSITIONS:
            values = {
                **valid_job_values,
                "position": position,
                "portfolioUrl": "https://example.com/me",
                "managementExperience": "Led a team of 4",
            }

            assert is_valid(_validate(job_schema, values))

    def test_explicit_empty_active_set_skips_everything(self, job_schema: FormSchema) -> None:
        assert validate(job_schema, job_schema.defaults(), frozenset()) == {}

    def test_schema_validate_resolves_active_set(self, job_schema: FormSchema) -> None:
        values = {**job_schema.defaults(), "position": "Manager"}

        assert job_schema.validate(values) == _validate(job_schema, values)


class TestRuleChains:
    def test_first_failure_wins(self, event_schema: FormSchema) -> None:
        spec = event_schema.field("email")

        assert validate_field(spec, {"email": ""}) == "Email is required"
        assert validate_field(spec, {"email": "nope"}) == "Email is invalid"

    def test_field_without_rules_always_passes(self) -> None:
        spec = FieldSpec(name="notes")

        assert validate_field(spec, {"notes": ""}) is None

    def test_fields_are_independent(self) -> None:
        schema = FormSchema(
            name="pair",
            fields=(
                FieldSpec(name="a", rules=(required("A is required"),)),
                FieldSpec(name="b", rules=(required("B is required"),)),
            ),
        )

        assert _validate(schema, {"a": "", "b": "x"}) == {"a": "A is required"}
        assert _validate(schema, {"a": "x", "b": ""}) == {"b": "B is required"}
