"""Build form schemas from YAML definition files.

Example definition (event_registration.yaml)::

    name: event_registration
    title: Event Registration Form
    fields:
      - name: email
        label: Email
        kind: email
        rules:
          - required: Email is required
          - email: Email is invalid
      - name: attendingWithGuest
        label: Attending with Guest
        kind: select
        default: "no"
        options: ["no", "yes"]
      - name: guestName
        label: Guest Name
        visible_when: {field: attendingWithGuest, equals: "yes"}
        rules:
          - required: Guest Name is required

Each rule is a single-key mapping of rule name to error message, listed in
the order the rules are checked.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

import yaml

from formfoundry.lib.errors import SchemaError
from formfoundry.lib.rules import Rule, build_rule
from formfoundry.lib.visibility import Condition, equals, one_of
from formfoundry.models.field_metadata import FieldSpec, FormSchema
from formfoundry.models.field_value import FieldKind

logger = logging.getLogger(__name__)

__all__ = [
    "load_schema",
    "schema_from_dict",
    "field_from_dict",
]

FIELD_KEYS = frozenset(
    {"name", "label", "kind", "default", "options", "visible_when", "rules"}
)


@lru_cache(maxsize=None)
def _load_schema_cached(path: Path) -> FormSchema:
    logger.debug("Loading form schema from %s", path)
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SchemaError(
            "Schema file is not valid YAML",
            details={"path": str(path), "cause": str(e)},
        ) from e
    if not isinstance(data, Mapping):
        raise SchemaError(
            "Schema file must contain a mapping",
            details={"path": str(path)},
        )
    return schema_from_dict(data, default_name=path.stem)


def load_schema(path: Path | str) -> FormSchema:
    """Load and cache a schema definition file.

    Args:
        path: Path to a YAML schema definition

    Returns:
        The validated FormSchema

    Raises:
        SchemaError: If the file is malformed or describes an invalid schema
        FileNotFoundError: If the file does not exist
    """
    return _load_schema_cached(Path(path).resolve())


def clear_schema_cache() -> None:
    """Forget every loaded schema (used after schema files change)."""
    _load_schema_cached.cache_clear()


def schema_from_dict(data: Mapping[str, Any], default_name: str = "") -> FormSchema:
    """Build a FormSchema from its parsed definition."""
    name = str(data.get("name") or default_name)
    fields = data.get("fields")
    if not isinstance(fields, list) or not fields:
        raise SchemaError("Schema needs a non-empty 'fields' list", form=name or None)

    specs = [field_from_dict(item, form=name) for item in fields]
    return FormSchema(name=name, fields=tuple(specs), title=str(data.get("title", "")))


def field_from_dict(data: Any, form: str = "") -> FieldSpec:
    """Build one FieldSpec from its parsed definition."""
    if not isinstance(data, Mapping) or "name" not in data:
        raise SchemaError(
            "Each field must be a mapping with a 'name'",
            form=form or None,
            value=data,
        )
    name = str(data["name"])

    unknown = sorted(set(data) - FIELD_KEYS)
    if unknown:
        raise SchemaError(
            f"Unknown field keys: {', '.join(unknown)}",
            form=form or None,
            field=name,
            suggestion=f"Valid keys: {', '.join(sorted(FIELD_KEYS))}",
        )

    try:
        kind = FieldKind(data.get("kind", "text"))
    except ValueError:
        valid = ", ".join(k.value for k in FieldKind)
        raise SchemaError(
            f"Invalid kind '{data.get('kind')}'. Must be one of: {valid}",
            form=form or None,
            field=name,
        ) from None

    kwargs: dict[str, Any] = {
        "name": name,
        "label": str(data.get("label", "")),
        "kind": kind,
        "options": tuple(str(o) for o in data.get("options") or ()),
        "visible_when": _build_condition(data.get("visible_when"), form, name),
        "rules": _build_rules(data.get("rules"), form, name),
    }
    if "default" in data:
        kwargs["default"] = data["default"]
    return FieldSpec(**kwargs)


def _build_condition(data: Any, form: str, field_name: str) -> Condition | None:
    if data is None:
        return None
    if not isinstance(data, Mapping) or "field" not in data:
        raise SchemaError(
            "visible_when must be a mapping with a 'field' key",
            form=form or None,
            field=field_name,
        )
    has_equals = "equals" in data
    has_in = "in" in data
    if has_equals == has_in:
        raise SchemaError(
            "visible_when needs exactly one of 'equals' or 'in'",
            form=form or None,
            field=field_name,
        )
    controlling = str(data["field"])
    if has_equals:
        return equals(controlling, data["equals"])
    allowed = data["in"]
    if not isinstance(allowed, list) or not allowed:
        raise SchemaError(
            "visible_when 'in' must be a non-empty list",
            form=form or None,
            field=field_name,
        )
    return one_of(controlling, *allowed)


def _build_rules(data: Any, form: str, field_name: str) -> tuple[Rule, ...]:
    if data is None:
        return ()
    if not isinstance(data, list):
        raise SchemaError(
            "rules must be a list",
            form=form or None,
            field=field_name,
        )
    rules: list[Rule] = []
    for item in data:
        if not isinstance(item, Mapping) or len(item) != 1:
            raise SchemaError(
                "Each rule must be a single-key mapping of rule name to message",
                form=form or None,
                field=field_name,
                value=item,
            )
        ((rule_name, spec),) = item.items()
        try:
            rules.append(build_rule(str(rule_name), spec))
        except ValueError as e:
            raise SchemaError(str(e), form=form or None, field=field_name) from e
    return tuple(rules)
