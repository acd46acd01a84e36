"""CLI entry point for formfoundry.

Usage:
    python -m formfoundry list
    python -m formfoundry check event_registration values.yaml
    python -m formfoundry check job_application values.yaml --json
    python -m formfoundry fill job_application

Exit codes:
    0  submission accepted (or command succeeded)
    1  submission rejected by validation
    2  configuration error (unknown form, unreadable values file, bad schema)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from prompt_toolkit.formatted_text import to_plain_text

from formfoundry.controller import FormController, SubmitResult
from formfoundry.lib.errors import FormError, ValuesFileError
from formfoundry.lib.logging import setup_logging
from formfoundry.settings import get_settings

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_REJECTED = 1
EXIT_CONFIG_ERROR = 2


def _plain_echo(text: Any) -> None:
    print(to_plain_text(text))


def load_values_file(path: Path) -> Dict[str, Any]:
    """Read a YAML (or JSON) mapping of field name to value.

    Raises:
        ValuesFileError: If the file cannot be read or is not a mapping
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ValuesFileError("Cannot read values file", path=str(path), cause=e) from e
    except yaml.YAMLError as e:
        raise ValuesFileError("Values file is not valid YAML", path=str(path), cause=e) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValuesFileError(
            "Values file must contain a mapping of field names to values",
            path=str(path),
        )
    return {str(k): v for k, v in data.items()}


def _result_to_dict(controller: FormController, result: SubmitResult) -> Dict[str, Any]:
    return {
        "form": controller.schema.name,
        "status": result.status.value,
        "errors": dict(result.errors),
        "active_fields": [
            name for name in controller.schema.field_names if controller.is_active(name)
        ],
        "values": dict(result.values),
    }


def cmd_list(args: argparse.Namespace) -> int:
    from formfoundry.schemas import get_schema, list_schemas

    for name in list_schemas():
        schema = get_schema(name)
        print(f"{name:<24} {schema.title} ({len(schema)} fields)")
    return EXIT_OK


def cmd_check(args: argparse.Namespace) -> int:
    from formfoundry.console import ConsoleSubmitter
    from formfoundry.schemas import get_schema

    schema = get_schema(args.form)
    values = load_values_file(Path(args.values))
    unknown = [name for name in values if name not in schema]
    if unknown:
        logger.warning("Ignoring undeclared field(s): %s", ", ".join(unknown))

    submitter = None if args.json else ConsoleSubmitter(schema, echo=_plain_echo)
    controller = FormController(
        schema,
        submitter,
        error_policy=get_settings().error_policy,
        initial_values=values,
    )
    result = controller.submit()

    if args.json:
        print(json.dumps(_result_to_dict(controller, result), indent=2, default=str))
    elif not result.accepted:
        print(f"{schema.title}: {len(result.errors)} error(s)")
        for name, message in result.errors.items():
            print(f"  {schema.field(name).label}: {message}")

    return EXIT_OK if result.accepted else EXIT_REJECTED


def cmd_fill(args: argparse.Namespace) -> int:
    from formfoundry.console import ConsoleForm, ConsoleSubmitter
    from formfoundry.schemas import get_schema

    schema = get_schema(args.form)
    controller = FormController(
        schema,
        ConsoleSubmitter(schema),
        error_policy=get_settings().error_policy,
    )
    result = ConsoleForm(controller).run(max_attempts=args.max_attempts)
    if result is None:
        return EXIT_REJECTED
    return EXIT_OK if result.accepted else EXIT_REJECTED


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="formfoundry",
        description="Validate and fill in conditional forms",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # List available forms
    python -m formfoundry list

    # Validate a values file against a form
    python -m formfoundry check event_registration ./event.yaml

    # Fill in a form interactively
    python -m formfoundry fill job_application
        """,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=None,
        help="Enable debug logging",
    )
    parser.add_argument(
        "--log-format",
        choices=["text", "json"],
        help="Log output format (default from settings)",
    )
    parser.add_argument("--log-file", help="Also write logs to this file")

    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List available forms")
    list_parser.set_defaults(func=cmd_list)

    check_parser = subparsers.add_parser(
        "check", help="Submit a values file and report validation errors"
    )
    check_parser.add_argument("form", help="Form name (e.g., event_registration)")
    check_parser.add_argument("values", help="YAML or JSON file of field values")
    check_parser.add_argument(
        "--json", action="store_true", help="Print the result as JSON"
    )
    check_parser.set_defaults(func=cmd_check)

    fill_parser = subparsers.add_parser("fill", help="Fill in a form interactively")
    fill_parser.add_argument("form", help="Form name (e.g., job_application)")
    fill_parser.add_argument(
        "--max-attempts",
        type=int,
        default=None,
        help="Give up after this many rejected submits",
    )
    fill_parser.set_defaults(func=cmd_fill)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    verbose = settings.verbose if args.verbose is None else args.verbose
    log_format = args.log_format or settings.log_format
    setup_logging(
        verbose=verbose,
        json_format=log_format == "json",
        log_file=args.log_file,
    )

    try:
        return args.func(args)
    except FormError as e:
        logger.debug("Command failed", extra={"error": e.to_dict()})
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR


if __name__ == "__main__":
    sys.exit(main())
