"""
roster_app/main.py -- Command-line entry point.

Loads the persisted collection, runs one command through the employee
service and exits.

Usage::

    employee-roster list
    employee-roster show 1700000000000-ab12cd34ef56
    employee-roster add --json employee.json
    employee-roster add --set firstName=Jo --set lastName=Li ...
    employee-roster edit 1700000000000-ab12cd34ef56 --set status="On Leave"
    employee-roster check --json employee.json
    employee-roster delete 1700000000000-ab12cd34ef56
    python -m roster_app.main --data-dir ./data list
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

from roster.entity_store import EntityStore
from roster.errors import RecordValidationError
from roster.persistence import PersistenceAdapter
from roster.schema import FIELD_LABELS, full_name, validate
from roster.storage import FileStorage
from roster_app.paths import STORAGE_KEY, get_data_dir
from roster_app.services.employee_service import EmployeeService
from roster_app.services.event_bus import EventBus

logger = logging.getLogger("roster_app")


def _setup_logging(verbose: bool = False) -> None:
    """Configure logging for the command-line tool."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="employee-roster",
        description="Manage the employee roster",
    )
    parser.add_argument("--data-dir", help="Directory holding the roster data")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List all employees")

    show = sub.add_parser("show", help="Show one employee")
    show.add_argument("id")

    for name, help_text in (
        ("add", "Add an employee"),
        ("edit", "Edit an employee"),
        ("check", "Validate field values without saving"),
    ):
        cmd = sub.add_parser(name, help=help_text)
        if name == "edit":
            cmd.add_argument("id")
        cmd.add_argument(
            "--set", dest="fields", action="append", default=[], metavar="FIELD=VALUE",
            help="Set a field value (repeatable)",
        )
        cmd.add_argument("--json", dest="json_file", metavar="FILE",
                         help="Read field values from a JSON object ('-' for stdin)")

    delete = sub.add_parser("delete", help="Delete an employee")
    delete.add_argument("id")
    return parser


def _read_fields(args: argparse.Namespace, parser: argparse.ArgumentParser) -> dict[str, Any]:
    """Collect field values from --json and --set (--set wins)."""
    values: dict[str, Any] = {}
    if args.json_file:
        try:
            if args.json_file == "-":
                data = json.load(sys.stdin)
            else:
                with open(args.json_file, "r", encoding="utf-8") as fh:
                    data = json.load(fh)
        except (OSError, json.JSONDecodeError) as exc:
            parser.error(f"could not read {args.json_file}: {exc}")
        if not isinstance(data, dict):
            parser.error(f"{args.json_file} must hold a JSON object of field values")
        values.update(data)
    for item in args.fields:
        key, sep, value = item.partition("=")
        if not sep or not key:
            parser.error(f"--set expects FIELD=VALUE, got {item!r}")
        values[key.strip()] = value
    return values


def _print_errors(errors: dict[str, str]) -> None:
    print("The employee could not be saved:", file=sys.stderr)
    for name, message in errors.items():
        print(f"  {FIELD_LABELS.get(name, name)}: {message}", file=sys.stderr)


def _print_table(rows: list[dict[str, Any]]) -> None:
    if not rows:
        print("No employees yet.")
        return
    columns = ("id", "name", "email", "department", "position", "status")
    widths = {
        col: max(len(col), *(len(str(row[col])) for row in rows)) for col in columns
    }
    print("  ".join(col.upper().ljust(widths[col]) for col in columns).rstrip())
    for row in rows:
        print("  ".join(str(row[col]).ljust(widths[col]) for col in columns).rstrip())


def main(argv: list[str] | None = None) -> int:
    """Run one roster command.  Returns the process exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    data_dir = get_data_dir(args.data_dir)
    logger.debug("Data directory: %s", data_dir)

    adapter = PersistenceAdapter(FileStorage(data_dir), key=STORAGE_KEY)
    store = EntityStore.rehydrate(adapter)

    bus = EventBus()
    bus.notification.connect(lambda title, description, _variant: print(f"{title}: {description}"))
    service = EmployeeService(store, bus=bus)

    if args.command == "list":
        _print_table(service.summary_rows())
        return 0

    if args.command == "show":
        record = service.get(args.id)
        if record is None:
            print(f"No employee with id '{args.id}'.", file=sys.stderr)
            return 1
        print(json.dumps({**record, "fullName": full_name(record)}, indent=2, ensure_ascii=False))
        return 0

    if args.command == "delete":
        if not service.delete(args.id):
            print(f"No employee with id '{args.id}'.", file=sys.stderr)
            return 1
        return 0

    values = _read_fields(args, parser)
    if args.command == "check":
        result = validate(values)
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        try:
            result.raise_for_errors()
        except RecordValidationError as exc:
            _print_errors(exc.field_errors)
            return 1
        return 0

    if args.command == "edit":
        current = service.select_for_edit(args.id)
        if current is None:
            print(f"No employee with id '{args.id}'.", file=sys.stderr)
            return 1
        current.update(values)
        values = current

    outcome = service.submit(values)
    if not outcome.ok:
        _print_errors(outcome.errors)
        if service.is_editing:
            # A failed submit keeps the edit target; nothing resubmits after exit.
            service.cancel_edit()
        return 1
    print(outcome.record_id)
    return 0


if __name__ == "__main__":
    sys.exit(main())
