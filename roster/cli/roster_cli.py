"""
Command-line interface for the student roster.

Usage:
    roster add --id <id> --name <name> --programme <p> --level <l> --gpa <g> --email <e> --phone <n>
    roster update --id <id> [--name ...] [--gpa ...] [--status ...]
    roster delete --id <id>
    roster show --id <id>
    roster list [--search <q>] [--programme <p>] [--level <l>] [--status <s>]
    roster programmes
    roster stats
    roster top [--limit <n>] [--programme <p>] [--level <l>]
    roster at-risk [--threshold <gpa>]
    roster distribution
    roster summary
    roster import --input <file> [--error-report [<file>]]
    roster export --output <file> [--scope all|top|at-risk] [--threshold <gpa>]
    roster metrics
"""

import argparse
import sys
from datetime import date

from pydantic import ValidationError as SettingsValidationError

from roster.app import RosterApp, build_app
from roster.config.settings import load_settings
from roster.core.exceptions import RosterError, ValidationError
from roster.core.models import STATUS_ACTIVE, STATUS_INACTIVE, Student
from roster.observability.logger import get_logger, setup_logger
from roster.observability.metrics import generate_metrics
from roster.utils.validation import (
    InputValidationError,
    validate_file_path,
    validate_limit,
)

logger = get_logger(__name__)

STATUSES = [STATUS_ACTIVE, STATUS_INACTIVE]


def print_students(students: list[Student]) -> None:
    """Print students as a fixed-width table."""
    if not students:
        print("No students found.")
        return

    print(f"{'ID':<20} {'Name':<30} {'Programme':<25} {'Level':>5} {'GPA':>5}  {'Status'}")
    print(f"{'-' * 96}")
    for s in students:
        print(
            f"{s.student_id:<20} {s.full_name[:30]:<30} {s.programme[:25]:<25} "
            f"{s.level:>5} {s.gpa:>5.2f}  {s.status}"
        )
    print(f"\n{len(students)} student(s)")


# =======================
# RECORD COMMANDS
# =======================

def add_command(app: RosterApp, args) -> int:
    student = Student(
        student_id=args.id,
        full_name=args.name,
        programme=args.programme,
        level=args.level,
        gpa=args.gpa,
        email=args.email,
        phone_number=args.phone,
        date_added=args.date or date.today(),
        status=args.status or STATUS_ACTIVE,
    )
    app.student_service.add_student(student)
    print(f"Student {student.student_id} added.")
    return 0


def update_command(app: RosterApp, args) -> int:
    existing = app.student_service.get_student_by_id(args.id)
    if existing is None:
        print(f"Error: Student ID '{args.id}' not found.", file=sys.stderr)
        return 1

    changes = {
        "full_name": args.name,
        "programme": args.programme,
        "level": args.level,
        "gpa": args.gpa,
        "email": args.email,
        "phone_number": args.phone,
        "date_added": args.date,
        "status": args.status,
    }
    updated = existing.model_copy(update={k: v for k, v in changes.items() if v is not None})
    app.student_service.update_student(updated)
    print(f"Student {args.id} updated.")
    return 0


def delete_command(app: RosterApp, args) -> int:
    app.student_service.delete_student(args.id)
    print(f"Student {args.id} deleted.")
    return 0


def show_command(app: RosterApp, args) -> int:
    student = app.student_service.get_student_by_id(args.id)
    if student is None:
        print(f"Error: Student ID '{args.id}' not found.", file=sys.stderr)
        return 1

    for field_name, value in student.model_dump().items():
        print(f"{field_name:<14} {value}")
    return 0


def list_command(app: RosterApp, args) -> int:
    service = app.student_service
    if args.search:
        students = service.search_students(args.search)
    elif args.programme or args.level is not None or args.status:
        students = service.filter_students(args.programme, args.level, args.status)
    else:
        students = service.get_all_students()
    print_students(students)
    return 0


def programmes_command(app: RosterApp, args) -> int:
    for programme in app.student_service.get_all_programmes():
        print(programme)
    return 0


# =======================
# REPORT COMMANDS
# =======================

def stats_command(app: RosterApp, args) -> int:
    stats = app.student_service.get_dashboard_stats()
    print(f"Total students:    {stats['total']}")
    print(f"Active:            {stats['active']}")
    print(f"Inactive:          {stats['inactive']}")
    print(f"Average GPA:       {stats['average_gpa']:.2f}")
    return 0


def top_command(app: RosterApp, args) -> int:
    limit = app.settings.top_performers_limit if args.limit is None else validate_limit(args.limit)
    print_students(app.student_service.get_top_performers(limit, args.programme, args.level))
    return 0


def _at_risk_threshold(app: RosterApp, args) -> float:
    settings = app.settings
    if args.threshold is not None:
        settings = settings.with_threshold(args.threshold)
    return settings.at_risk_threshold


def at_risk_command(app: RosterApp, args) -> int:
    threshold = _at_risk_threshold(app, args)
    print(f"Students with GPA below {threshold:.2f}:\n")
    print_students(app.student_service.get_at_risk_students(threshold))
    return 0


def distribution_command(app: RosterApp, args) -> int:
    for band, count in app.student_service.get_gpa_distribution().items():
        print(f"{band:<12} {count}")
    return 0


def summary_command(app: RosterApp, args) -> int:
    rows = app.student_service.get_programme_summary()
    if not rows:
        print("No students found.")
        return 0

    print(f"{'Programme':<30} {'Total':>6} {'Average GPA':>12}")
    print(f"{'-' * 50}")
    for row in rows:
        print(f"{row.programme[:30]:<30} {row.total:>6} {row.average_gpa:>12}")
    return 0


# =======================
# BULK TRANSFER COMMANDS
# =======================

def import_command(app: RosterApp, args) -> int:
    input_path = validate_file_path(args.input, "input")
    outcome = app.transfer_service.import_into(app.student_service, input_path)

    print(f"{outcome.accepted_count - len(outcome.save_errors)} student(s) imported successfully.")
    print(f"{outcome.error_count} row(s) skipped with errors.")
    for message in outcome.save_errors + outcome.errors:
        print(f"  {message}")

    if args.error_report is not None and outcome.errors:
        report_target = args.error_report or None
        path = app.transfer_service.save_import_error_report(outcome.errors, report_target)
        print(f"Error report saved to {path}")
    return 0


def export_command(app: RosterApp, args) -> int:
    output_path = validate_file_path(args.output, "output")
    service = app.student_service

    if args.scope == "top":
        students = service.get_top_performers(app.settings.top_performers_limit)
    elif args.scope == "at-risk":
        students = service.get_at_risk_students(_at_risk_threshold(app, args))
    else:
        students = service.get_all_students()

    path = app.transfer_service.export_students(students, output_path)
    print(f"Exported {len(students)} record(s) to {path}")
    return 0


def metrics_command(app: RosterApp, args) -> int:
    print(generate_metrics().decode("utf-8"))
    return 0


COMMANDS = {
    "add": add_command,
    "update": update_command,
    "delete": delete_command,
    "show": show_command,
    "list": list_command,
    "programmes": programmes_command,
    "stats": stats_command,
    "top": top_command,
    "at-risk": at_risk_command,
    "distribution": distribution_command,
    "summary": summary_command,
    "import": import_command,
    "export": export_command,
    "metrics": metrics_command,
}


def _add_record_arguments(parser: argparse.ArgumentParser, required: bool) -> None:
    parser.add_argument("--name", required=required, help="Full name")
    parser.add_argument("--programme", required=required, help="Programme of study")
    parser.add_argument("--level", type=int, required=required, help="Level (100-700)")
    parser.add_argument("--gpa", type=float, required=required, help="GPA (0.0-4.0)")
    parser.add_argument("--email", required=required, help="Email address")
    parser.add_argument("--phone", required=required, help="Phone number (digits only)")
    parser.add_argument("--date", type=date.fromisoformat, help="Date added (YYYY-MM-DD)")
    parser.add_argument("--status", choices=STATUSES, help="Record status")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="roster",
        description="Student record management",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Add a student
  roster add --id STU0001 --name "Ama Mensah" --programme "Computer Science" \\
      --level 200 --gpa 3.45 --email ama@example.com --phone 0244000001

  # Import a CSV file and keep a report of rejected rows
  roster import --input students.csv --error-report

  # Export at-risk students to data/at_risk_students.csv
  roster export --output at_risk_students.csv --scope at-risk
        """
    )
    parser.add_argument("--config", help="YAML settings file")
    parser.add_argument("--env-file", help=".env file with ROSTER_*/DB_* variables")
    parser.add_argument("--in-memory", action="store_true", help="Use a throwaway in-memory store")
    parser.add_argument("--log-format", choices=["json", "text"], help="Console log format")
    parser.add_argument("--log-level", help="Log level (DEBUG, INFO, WARNING, ERROR)")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    add_parser = subparsers.add_parser("add", help="Add a student")
    add_parser.add_argument("--id", required=True, help="Student ID")
    _add_record_arguments(add_parser, required=True)

    update_parser = subparsers.add_parser("update", help="Update a student (id cannot change)")
    update_parser.add_argument("--id", required=True, help="Student ID")
    _add_record_arguments(update_parser, required=False)

    for name, help_text in (("delete", "Delete a student"), ("show", "Show one student")):
        id_parser = subparsers.add_parser(name, help=help_text)
        id_parser.add_argument("--id", required=True, help="Student ID")

    list_parser = subparsers.add_parser("list", help="List, search or filter students")
    list_parser.add_argument("--search", help="Match id or name (case-insensitive)")
    list_parser.add_argument("--programme", help="Filter by programme")
    list_parser.add_argument("--level", type=int, help="Filter by level")
    list_parser.add_argument("--status", choices=STATUSES, help="Filter by status")

    subparsers.add_parser("programmes", help="List programme names")
    subparsers.add_parser("stats", help="Show dashboard figures")

    top_parser = subparsers.add_parser("top", help="Top performers by GPA")
    top_parser.add_argument("--limit", type=int, help="Number of students (default from settings)")
    top_parser.add_argument("--programme", help="Filter by programme")
    top_parser.add_argument("--level", type=int, help="Filter by level")

    risk_parser = subparsers.add_parser("at-risk", help="Students below a GPA threshold")
    risk_parser.add_argument("--threshold", type=float, help="GPA threshold (default from settings)")

    subparsers.add_parser("distribution", help="GPA distribution by band")
    subparsers.add_parser("summary", help="Per-programme summary")

    import_parser = subparsers.add_parser("import", help="Import students from CSV")
    import_parser.add_argument("--input", required=True, help="CSV file to import")
    import_parser.add_argument(
        "--error-report",
        nargs="?",
        const="",
        help="Save rejected rows to a report (default: <data_dir>/import_errors.csv)"
    )

    export_parser = subparsers.add_parser("export", help="Export students to CSV")
    export_parser.add_argument("--output", required=True, help="Destination file (relative to data dir)")
    export_parser.add_argument("--scope", default="all", choices=["all", "top", "at-risk"])
    export_parser.add_argument(
        "--threshold", type=float, help="GPA threshold for --scope at-risk (default from settings)"
    )

    subparsers.add_parser("metrics", help="Print collected metrics")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        settings = load_settings(config_file=args.config, env_file=args.env_file)
    except (OSError, ValueError, SettingsValidationError) as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 1

    setup_logger(
        level=args.log_level or settings.log_level,
        format_type=args.log_format or settings.log_format,
        log_file=settings.log_path,
    )

    try:
        app = build_app(settings, in_memory=args.in_memory)
    except Exception as e:
        logger.error(f"Could not start roster: {e}", exc_info=True)
        print(f"Error: could not open storage: {e}", file=sys.stderr)
        return 1

    try:
        return COMMANDS[args.command](app, args)
    except ValidationError as e:
        print("Error: the record is invalid:", file=sys.stderr)
        for message in e.errors:
            print(f"  - {message}", file=sys.stderr)
        return 1
    except (RosterError, InputValidationError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        app.close()


if __name__ == "__main__":
    sys.exit(main())
