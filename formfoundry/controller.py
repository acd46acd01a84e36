"""Form controller: change, toggle and submit handling for one form.

The controller owns a FormState and the errors currently displayed for it.
Every change recomputes the active field set; every submit recomputes the
error map from scratch and only forwards values when it is empty.

States::

    EDITING -> SUBMITTING -> ACCEPTED | REJECTED -> EDITING

Displayed errors follow an ErrorPolicy once the user edits again:

- CLEAR_ON_EDIT (default): a field's error disappears as soon as that field
  is changed or toggled.
- RETAIN: errors stay until the next submit.

Under either policy, the error of a field that becomes inactive is dropped.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional

from formfoundry.lib.logging import get_form_logger
from formfoundry.lib.validation import ErrorMap, validate
from formfoundry.lib.visibility import resolve_active_fields
from formfoundry.models.field_metadata import FormSchema
from formfoundry.models.form_state import FormState

__all__ = [
    "ErrorPolicy",
    "FormStatus",
    "SubmitResult",
    "Submitter",
    "FormController",
]

Submitter = Callable[[Mapping[str, Any]], None]


class FormStatus(str, Enum):
    """Lifecycle state of a form."""

    EDITING = "editing"
    SUBMITTING = "submitting"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class ErrorPolicy(str, Enum):
    """What happens to a displayed error when its field is edited."""

    CLEAR_ON_EDIT = "clear_on_edit"
    RETAIN = "retain"


@dataclass(frozen=True)
class SubmitResult:
    """Outcome of one submit attempt.

    Attributes:
        status: ACCEPTED or REJECTED
        errors: Error map computed for the attempt (empty when accepted)
        values: Read-only snapshot of every field at submit time
    """

    status: FormStatus
    errors: Mapping[str, str] = field(default_factory=dict)
    values: Mapping[str, Any] = field(default_factory=dict)

    @property
    def accepted(self) -> bool:
        return self.status is FormStatus.ACCEPTED


class FormController:
    """Orchestrates the store, the visibility resolver and validation.

    Args:
        schema: Schema of the form
        submitter: Callable receiving the read-only values of an accepted
            submission; None means accepted values are not forwarded
        error_policy: How displayed errors react to later edits
        initial_values: Optional values applied over the schema defaults
    """

    def __init__(
        self,
        schema: FormSchema,
        submitter: Optional[Submitter] = None,
        *,
        error_policy: ErrorPolicy | str = ErrorPolicy.CLEAR_ON_EDIT,
        initial_values: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.schema = schema
        self.submitter = submitter
        self.error_policy = ErrorPolicy(error_policy)
        if initial_values:
            self.state = FormState.from_mapping(schema, initial_values)
        else:
            self.state = FormState.from_schema_defaults(schema)
        self.status = FormStatus.EDITING
        self.last_outcome: FormStatus | None = None
        self.submit_count = 0
        self._logger = get_form_logger(__name__, form=schema.name)
        self._active = resolve_active_fields(schema, self.state.values())

    @property
    def values(self) -> dict[str, Any]:
        return self.state.values()

    @property
    def active_fields(self) -> frozenset[str]:
        return self._active

    @property
    def errors(self) -> ErrorMap:
        """Errors currently displayed, keyed by field name."""
        return {
            name: field_val.validation_error
            for name, field_val in self.state.fields.items()
            if field_val.validation_error is not None
        }

    def is_active(self, name: str) -> bool:
        return name in self._active

    def error_for(self, name: str) -> str | None:
        field_val = self.state.get_field(name)
        return field_val.validation_error if field_val else None

    def change(self, name: str, value: Any) -> bool:
        """Handle a new value for a field.

        Returns:
            False if the field is not declared (nothing changes)
        """
        if not self.state.set(name, value):
            return False
        self._after_edit(name)
        return True

    def toggle(self, name: str, option: str) -> bool:
        """Handle a checkbox of a multi-select field being flipped.

        Returns:
            False if the field is not declared (nothing changes)
        """
        if not self.state.toggle(name, option):
            return False
        self._after_edit(name)
        return True

    def _after_edit(self, name: str) -> None:
        self._active = resolve_active_fields(self.schema, self.state.values())
        if self.error_policy is ErrorPolicy.CLEAR_ON_EDIT:
            self.state.fields[name].validation_error = None
        for field_name, field_val in self.state.fields.items():
            if field_name not in self._active and field_val.validation_error:
                field_val.validation_error = None
        self._logger.debug("Field %s edited", name)

    def submit(self) -> SubmitResult:
        """Attempt to submit the form.

        Validates the current values against the current active set. When no
        field fails, the full set of values (including inactive fields) is
        forwarded to the submitter. The controller is back in EDITING when
        this returns, including when the submitter raises.
        """
        self.status = FormStatus.SUBMITTING
        self.submit_count += 1
        try:
            values = self.state.values()
            self._active = resolve_active_fields(self.schema, values)
            errors = validate(self.schema, values, self._active)
            self._apply_errors(errors)
            snapshot = MappingProxyType(values)

            if errors:
                self.status = FormStatus.REJECTED
                self.last_outcome = FormStatus.REJECTED
                self._logger.info(
                    "Submission rejected with %d error(s): %s",
                    len(errors),
                    ", ".join(errors),
                )
                return SubmitResult(
                    FormStatus.REJECTED, MappingProxyType(dict(errors)), snapshot
                )

            self.status = FormStatus.ACCEPTED
            self._logger.info("Submission accepted")
            if self.submitter is not None:
                self.submitter(snapshot)
            self.last_outcome = FormStatus.ACCEPTED
            return SubmitResult(FormStatus.ACCEPTED, MappingProxyType({}), snapshot)
        finally:
            self.status = FormStatus.EDITING

    def _apply_errors(self, errors: Mapping[str, str]) -> None:
        for name, field_val in self.state.fields.items():
            field_val.validation_error = errors.get(name)

    def reset(self) -> None:
        """Return every field to its default and forget displayed errors."""
        self.state.reset()
        self._active = resolve_active_fields(self.schema, self.state.values())
        self.last_outcome = None
        self._logger.debug("Form reset")
