"""Form schema registry.

Built-in schemas live next to this module as ``<name>.yaml``. Projects can
add their own directories through settings; those are searched first.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from formfoundry.lib.errors import SchemaNotFoundError
from formfoundry.models.field_metadata import FormSchema
from formfoundry.utils.schema_reader import load_schema

SCHEMA_DIR = Path(__file__).parent

EVENT_REGISTRATION = "event_registration"
JOB_APPLICATION = "job_application"

__all__ = [
    "SCHEMA_DIR",
    "EVENT_REGISTRATION",
    "JOB_APPLICATION",
    "find_schema_file",
    "get_schema",
    "list_schemas",
]


def _search_dirs(extra_dirs: Iterable[Path | str] | None) -> list[Path]:
    if extra_dirs is None:
        from formfoundry.settings import get_settings

        dirs = get_settings().get_schema_dirs()
    else:
        dirs = [Path(d) for d in extra_dirs]
    return [*dirs, SCHEMA_DIR]


def list_schemas(extra_dirs: Iterable[Path | str] | None = None) -> list[str]:
    """Get the names of every available schema, sorted."""
    names: set[str] = set()
    for directory in _search_dirs(extra_dirs):
        if directory.is_dir():
            names.update(p.stem for p in directory.glob("*.yaml"))
    return sorted(names)


def find_schema_file(
    name: str, extra_dirs: Iterable[Path | str] | None = None
) -> Path:
    """Locate the definition file of a schema.

    Raises:
        SchemaNotFoundError: If no directory holds ``<name>.yaml``
    """
    dirs = _search_dirs(extra_dirs)
    for directory in dirs:
        candidate = directory / f"{name}.yaml"
        if candidate.is_file():
            return candidate
    raise SchemaNotFoundError(
        name,
        searched=[str(d) for d in dirs],
        available=list_schemas(extra_dirs),
    )


def get_schema(
    name: str, extra_dirs: Iterable[Path | str] | None = None
) -> FormSchema:
    """Load a schema by name.

    Args:
        name: Schema name, e.g. "event_registration"
        extra_dirs: Directories searched before the built-in ones; defaults
            to the directories configured in settings

    Returns:
        The loaded FormSchema (cached per file)
    """
    return load_schema(find_schema_file(name, extra_dirs))
