"""CLI entry point: validate JSON files against JSON Schema files."""

import argparse
import json
import logging
import sys
from pathlib import Path

from jsonvalidator.config import settings
from jsonvalidator.errors import JsonValidatorError, ValidationError
from jsonvalidator.loader.client import load_json
from jsonvalidator.loader.loader import load_schema
from jsonvalidator.logging_config import bind_load_context, clear_load_context, configure_logging
from jsonvalidator.metaschema import check_schema

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_SCHEMA_ERROR = 2


def _report(error: ValidationError, as_json: bool) -> None:
    if as_json:
        print(json.dumps(error.to_report().model_dump(mode="json", by_alias=True), indent=2))
    else:
        for message in error.all_messages():
            print(message)


def _check_schema(args: argparse.Namespace) -> int:
    document = load_json(Path(args.schema))
    try:
        check_schema(document)
    except ValidationError as exc:
        _report(exc, args.json)
        return EXIT_INVALID
    print(f"OK: {args.schema}")
    return EXIT_OK


def _validate(args: argparse.Namespace) -> int:
    document = load_json(Path(args.schema))
    if args.check_schema:
        try:
            check_schema(document)
        except ValidationError as exc:
            print(f"{args.schema} is not a valid JSON Schema:", file=sys.stderr)
            _report(exc, args.json)
            return EXIT_SCHEMA_ERROR
    bind_load_context(source=args.schema)
    try:
        schema = load_schema(document)
    finally:
        clear_load_context()
    failed = False
    for instance_path in args.instances:
        instance = json.loads(Path(instance_path).read_text(encoding="utf-8"))
        try:
            schema.validate(instance)
        except ValidationError as exc:
            failed = True
            print(f"{instance_path}: {exc.violation_count} violation(s)", file=sys.stderr)
            _report(exc, args.json)
        else:
            print(f"OK: {instance_path}")
    return EXIT_INVALID if failed else EXIT_OK


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="jsonvalidator",
        description="Validate JSON documents against a JSON Schema (draft 4)",
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        help=f"Logging level (default: {settings.log_level})",
    )
    parser.add_argument(
        "--log-json",
        action="store_true",
        default=settings.log_json,
        help="Emit logs as JSON lines",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    validate_parser = subparsers.add_parser("validate", help="Validate instances against a schema")
    validate_parser.add_argument("schema", help="Path to the JSON Schema file")
    validate_parser.add_argument("instances", nargs="+", help="Paths to JSON instance files")
    validate_parser.add_argument("--json", action="store_true", help="Print violations as JSON")
    validate_parser.add_argument(
        "--check-schema",
        action="store_true",
        help="Check the schema against the draft 4 meta-schema first",
    )
    validate_parser.set_defaults(handler=_validate)

    check_parser = subparsers.add_parser("check-schema", help="Check a schema against the meta-schema")
    check_parser.add_argument("schema", help="Path to the JSON Schema file")
    check_parser.add_argument("--json", action="store_true", help="Print violations as JSON")
    check_parser.set_defaults(handler=_check_schema)

    args = parser.parse_args(argv)
    configure_logging(args.log_level, json_output=args.log_json)

    try:
        return args.handler(args)
    except (JsonValidatorError, OSError, json.JSONDecodeError) as exc:
        logger.error("jsonvalidator %s failed: %s", args.command, exc)
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_SCHEMA_ERROR


if __name__ == "__main__":
    sys.exit(main())
