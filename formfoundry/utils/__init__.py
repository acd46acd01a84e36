"""Utility modules."""

from __future__ import annotations

from formfoundry.utils.schema_reader import load_schema, schema_from_dict

__all__ = [
    "load_schema",
    "schema_from_dict",
]
