"""Shared fixtures for formfoundry tests."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Generator

import pytest

from formfoundry import settings as settings_module
from formfoundry.controller import FormController
from formfoundry.models.field_metadata import FormSchema
from formfoundry.schemas import EVENT_REGISTRATION, JOB_APPLICATION, SCHEMA_DIR
from formfoundry.utils.schema_reader import load_schema


@pytest.fixture
def event_schema() -> FormSchema:
    """Built-in event registration schema."""
    return load_schema(SCHEMA_DIR / f"{EVENT_REGISTRATION}.yaml")


@pytest.fixture
def job_schema() -> FormSchema:
    """Built-in job application schema."""
    return load_schema(SCHEMA_DIR / f"{JOB_APPLICATION}.yaml")


@pytest.fixture
def valid_event_values() -> dict[str, Any]:
    """Event registration values that pass validation."""
    return {
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "age": "36",
        "attendingWithGuest": "no",
        "guestName": "",
    }


@pytest.fixture
def valid_job_values() -> dict[str, Any]:
    """Job application values (Developer position) that pass validation."""
    return {
        "fullName": "Grace Hopper",
        "email": "grace@example.com",
        "phoneNumber": "5551234567",
        "position": "Developer",
        "relevantExperience": "5",
        "portfolioUrl": "",
        "managementExperience": "",
        "additionalSkills": ["Python"],
        "preferredInterviewTime": "2025-03-14T10:30",
    }


@pytest.fixture
def submissions() -> list[dict[str, Any]]:
    """Collects whatever a controller forwards on accepted submits."""
    return []


@pytest.fixture
def event_form(event_schema: FormSchema, submissions: list) -> FormController:
    return FormController(event_schema, lambda values: submissions.append(dict(values)))


@pytest.fixture
def job_form(job_schema: FormSchema, submissions: list) -> FormController:
    return FormController(job_schema, lambda values: submissions.append(dict(values)))


@pytest.fixture
def fresh_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Force settings to be re-read from the current directory."""
    monkeypatch.setattr(settings_module, "_settings", None)


@pytest.fixture
def restore_logging() -> Generator[None, None, None]:
    """Restore root logger handlers and level after a test reconfigures them."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            handler.close()
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture
def write_yaml(tmp_path: Path):
    """Write text to a YAML file under tmp_path and return its path."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write
