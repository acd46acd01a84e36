"""Validation rules for form fields.

A rule is a ``(check, message)`` pair: ``check(value, values)`` returns True
when the value passes. A field's rules form an ordered chain and the first
failing rule supplies the field's error message.

Rules never coerce what is stored. Numeric and date parsing happen here, at
validation time only.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Mapping

__all__ = [
    "Rule",
    "RuleCheck",
    "RULE_FACTORIES",
    "required",
    "email",
    "positive_number",
    "digits",
    "url",
    "non_empty",
    "datetime_value",
    "matches",
    "build_rule",
]

RuleCheck = Callable[[Any, Mapping[str, Any]], bool]

EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")
DIGITS_PATTERN = re.compile(r"[0-9]+")
URL_PATTERN = re.compile(r"https?://[^\s/$.?#].[^\s]*")
NUMBER_PATTERN = re.compile(r"[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?")
# ISO date with optional local time; no week dates, offsets or compact forms
DATETIME_PATTERN = re.compile(
    r"(?P<year>[0-9]{4})-(?P<month>[0-9]{2})-(?P<day>[0-9]{2})"
    r"(?:[T ](?P<hour>[0-9]{2}):(?P<minute>[0-9]{2})"
    r"(?::(?P<second>[0-9]{2})(?:\.(?P<fraction>[0-9]{1,6}))?)?)?"
)


@dataclass(frozen=True)
class Rule:
    """A single validation check with the message reported when it fails.

    Attributes:
        check: Callable taking (value, all_values); True means valid
        message: Human-readable error shown next to the field
        name: Rule kind, used in logs and schema files
    """

    check: RuleCheck
    message: str
    name: str = "custom"

    def evaluate(self, value: Any, values: Mapping[str, Any]) -> str | None:
        """Return the error message if the value fails, else None."""
        if self.check(value, values):
            return None
        return self.message


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (list, tuple, set, frozenset)):
        return len(value) == 0
    return value is False


def _parse_number(value: Any) -> float | None:
    """Parse a number the way an HTML number input reports it.

    Only plain decimal notation is accepted. Blank text counts as zero.
    Returns None when the value is not a finite number.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        if NUMBER_PATTERN.fullmatch(text) is None:
            return None
        number = float(text)
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def _parse_datetime(value: Any) -> datetime | date | None:
    if isinstance(value, (datetime, date)):
        return value
    if not isinstance(value, str):
        return None
    match = DATETIME_PATTERN.fullmatch(value.strip())
    if match is None:
        return None
    parts = match.groupdict()
    try:
        if parts["hour"] is None:
            return date(int(parts["year"]), int(parts["month"]), int(parts["day"]))
        return datetime(
            int(parts["year"]),
            int(parts["month"]),
            int(parts["day"]),
            int(parts["hour"]),
            int(parts["minute"]),
            int(parts["second"] or 0),
            int((parts["fraction"] or "0").ljust(6, "0")),
        )
    except ValueError:
        return None


def required(message: str) -> Rule:
    """Value must be present: not None, empty text, empty selection or False."""
    return Rule(lambda value, _values: not _is_blank(value), message, "required")


def email(message: str) -> Rule:
    """Value must look like ``local@domain.tld``."""

    def check(value: Any, _values: Mapping[str, Any]) -> bool:
        return isinstance(value, str) and EMAIL_PATTERN.search(value) is not None

    return Rule(check, message, "email")


def positive_number(message: str) -> Rule:
    """Value must parse as a number greater than zero."""

    def check(value: Any, _values: Mapping[str, Any]) -> bool:
        number = _parse_number(value)
        return number is not None and number > 0

    return Rule(check, message, "positive_number")


def digits(message: str) -> Rule:
    """Value must consist of ASCII digits only."""

    def check(value: Any, _values: Mapping[str, Any]) -> bool:
        if isinstance(value, int) and not isinstance(value, bool):
            value = str(value)
        return isinstance(value, str) and DIGITS_PATTERN.fullmatch(value) is not None

    return Rule(check, message, "digits")


def url(message: str) -> Rule:
    """Value must be an http(s) URL with a host and no whitespace."""

    def check(value: Any, _values: Mapping[str, Any]) -> bool:
        return isinstance(value, str) and URL_PATTERN.fullmatch(value) is not None

    return Rule(check, message, "url")


def non_empty(message: str) -> Rule:
    """Value must be a collection with at least one element."""

    def check(value: Any, _values: Mapping[str, Any]) -> bool:
        if isinstance(value, (list, tuple, set, frozenset)):
            return len(value) > 0
        return False

    return Rule(check, message, "non_empty")


def datetime_value(message: str) -> Rule:
    """Value must be an ISO date, optionally with a local time (``YYYY-MM-DD[THH:MM[:SS[.f]]]``)."""
    return Rule(
        lambda value, _values: _parse_datetime(value) is not None,
        message,
        "datetime",
    )


def matches(pattern: str, message: str) -> Rule:
    """Value must fully match a regular expression."""
    compiled = re.compile(pattern)

    def check(value: Any, _values: Mapping[str, Any]) -> bool:
        return isinstance(value, str) and compiled.fullmatch(value) is not None

    return Rule(check, message, "matches")


# Rule names usable in schema definition files
RULE_FACTORIES: dict[str, Callable[[str], Rule]] = {
    "required": required,
    "email": email,
    "positive_number": positive_number,
    "digits": digits,
    "url": url,
    "non_empty": non_empty,
    "datetime": datetime_value,
}


def build_rule(name: str, spec: Any) -> Rule:
    """Build a rule from its schema-file form.

    Args:
        name: Rule name (a key of RULE_FACTORIES, or "matches")
        spec: The error message, or for "matches" a mapping with
            ``pattern`` and ``message`` keys

    Returns:
        The constructed Rule

    Raises:
        ValueError: If the rule name is unknown or its spec is malformed
    """
    if name == "matches":
        if not isinstance(spec, Mapping) or "pattern" not in spec or "message" not in spec:
            raise ValueError("'matches' rule needs 'pattern' and 'message' keys")
        try:
            return matches(str(spec["pattern"]), str(spec["message"]))
        except re.error as e:
            raise ValueError(f"Invalid pattern for 'matches' rule: {e}") from e

    factory = RULE_FACTORIES.get(name)
    if factory is None:
        valid = ", ".join([*RULE_FACTORIES, "matches"])
        raise ValueError(f"Unknown rule '{name}'. Must be one of: {valid}")
    if not isinstance(spec, str) or not spec:
        raise ValueError(f"Rule '{name}' needs a non-empty error message")
    return factory(spec)
