"""prompt_toolkit terminal front-end for filling in a form.

ConsoleForm plays the rendering role: it asks for each active field, feeds
answers to a FormController and shows the errors of a rejected submit.
ConsoleSubmitter plays the submission role and prints the accepted values.

The prompt and echo functions are injectable so sessions can be scripted.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional

from prompt_toolkit import PromptSession, print_formatted_text
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.styles import Style

from formfoundry.controller import FormController, SubmitResult
from formfoundry.models.field_metadata import FieldSpec, FormSchema
from formfoundry.models.field_value import FieldKind

logger = logging.getLogger(__name__)

__all__ = [
    "STYLE",
    "ConsoleForm",
    "ConsoleSubmitter",
    "format_submission",
    "format_value",
    "run_form",
]

STYLE = Style.from_dict({
    "title": "bold #00afff",
    "field-label": "#d7d700",
    "error": "#ff6666",
    "success": "bold #00af00",
    "hint": "#808080 italic",
})

PromptFunc = Callable[..., str]
EchoFunc = Callable[[Any], None]

YES_ANSWERS = ("y", "yes", "true", "1")
NO_ANSWERS = ("n", "no", "false", "0")


def _default_echo(text: Any) -> None:
    print_formatted_text(text, style=STYLE)


def format_value(value: Any) -> str:
    """Render a stored value for display."""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    if isinstance(value, bool):
        return "yes" if value else "no"
    return "" if value is None else str(value)


def format_submission(schema: FormSchema, values: Mapping[str, Any]) -> str:
    """Confirmation text listing every field of an accepted submission."""
    lines = ["Form submitted successfully!"]
    for spec in schema.fields:
        lines.append(f"{spec.label}: {format_value(values.get(spec.name))}")
    return "\n".join(lines)


class ConsoleSubmitter:
    """Submission collaborator that prints the accepted values."""

    def __init__(self, schema: FormSchema, echo: Optional[EchoFunc] = None) -> None:
        self.schema = schema
        self.echo = echo or _default_echo
        self.submissions: list[dict[str, Any]] = []

    def __call__(self, values: Mapping[str, Any]) -> None:
        self.submissions.append(dict(values))
        self.echo(FormattedText([("class:success", format_submission(self.schema, values))]))


class ConsoleForm:
    """Interactive question-and-answer session for one form.

    Args:
        controller: Controller of the form being filled in
        prompt: Function called as ``prompt(message, default=..., completer=...)``;
            defaults to a prompt_toolkit PromptSession
        echo: Function receiving text or FormattedText to display
    """

    def __init__(
        self,
        controller: FormController,
        prompt: Optional[PromptFunc] = None,
        echo: Optional[EchoFunc] = None,
    ) -> None:
        self.controller = controller
        self.echo = echo or _default_echo
        if prompt is None:
            prompt = PromptSession().prompt
        self.prompt = prompt

    @property
    def schema(self) -> FormSchema:
        return self.controller.schema

    def run(self, max_attempts: Optional[int] = None) -> Optional[SubmitResult]:
        """Ask for values and submit until accepted.

        Args:
            max_attempts: Stop after this many rejected submits (None: no limit)

        Returns:
            The last SubmitResult, or None if the user aborted (Ctrl-C/Ctrl-D)
        """
        self.echo(FormattedText([("class:title", self.schema.title)]))
        pending = [spec.name for spec in self.schema.fields]
        attempts = 0
        result: Optional[SubmitResult] = None

        try:
            while True:
                for name in pending:
                    if self.controller.is_active(name):
                        self._ask(self.schema.field(name))

                result = self.controller.submit()
                attempts += 1
                if result.accepted:
                    return result

                self._show_errors(result.errors)
                if max_attempts is not None and attempts >= max_attempts:
                    return result
                pending = list(result.errors)
        except (EOFError, KeyboardInterrupt):
            logger.info("Form %s aborted after %d attempt(s)", self.schema.name, attempts)
            return None

    def _show_errors(self, errors: Mapping[str, str]) -> None:
        self.echo(FormattedText([("class:error", "Please fix the following:")]))
        for name, message in errors.items():
            label = self.schema.field(name).label
            self.echo(FormattedText([("class:error", f"  {label}: {message}")]))

    def _ask(self, spec: FieldSpec) -> None:
        if spec.kind is FieldKind.SELECT:
            self._ask_select(spec)
        elif spec.kind is FieldKind.MULTISELECT:
            self._ask_multiselect(spec)
        elif spec.kind is FieldKind.CHECKBOX:
            self._ask_checkbox(spec)
        else:
            current = format_value(self.controller.state.get(spec.name))
            answer = self.prompt(f"{spec.label}: ", default=current)
            self.controller.change(spec.name, answer)

    def _ask_select(self, spec: FieldSpec) -> None:
        completer = WordCompleter(list(spec.options))
        choices = "/".join(spec.options)
        while True:
            current = format_value(self.controller.state.get(spec.name))
            answer = self.prompt(
                f"{spec.label} ({choices}): ", default=current, completer=completer
            ).strip()
            if not answer:
                return
            if answer in spec.options:
                self.controller.change(spec.name, answer)
                return
            self.echo(FormattedText([("class:error", f"Choose one of: {', '.join(spec.options)}")]))

    def _ask_multiselect(self, spec: FieldSpec) -> None:
        completer = WordCompleter(list(spec.options))
        self.echo(
            FormattedText([("class:hint", f"Options: {', '.join(spec.options)} (comma separated)")])
        )
        while True:
            current = self.controller.state.get(spec.name) or []
            answer = self.prompt(
                f"{spec.label}: ", default=format_value(current), completer=completer
            )
            wanted = [part.strip() for part in answer.split(",") if part.strip()]
            unknown = [option for option in wanted if option not in spec.options]
            if unknown:
                self.echo(
                    FormattedText([("class:error", f"Unknown option(s): {', '.join(unknown)}")])
                )
                continue
            for option in spec.options:
                if (option in wanted) != (option in current):
                    self.controller.toggle(spec.name, option)
            return

    def _ask_checkbox(self, spec: FieldSpec) -> None:
        while True:
            current = format_value(self.controller.state.get(spec.name))
            answer = self.prompt(f"{spec.label} (y/n): ", default=current).strip().lower()
            if answer in YES_ANSWERS:
                self.controller.change(spec.name, True)
                return
            if answer in NO_ANSWERS:
                self.controller.change(spec.name, False)
                return
            self.echo(FormattedText([("class:error", "Answer y or n")]))


def run_form(
    controller: FormController, max_attempts: Optional[int] = None
) -> Optional[SubmitResult]:
    """Run an interactive terminal session for a form."""
    return ConsoleForm(controller).run(max_attempts=max_attempts)
