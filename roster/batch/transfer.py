"""
Bulk CSV import and export of student records.

Flow of an import: read line -> split -> convert -> duplicate check -> validate ->
accept. A bad row is reported against its line number and skipped; it never
aborts the rest of the file.
"""

from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from roster.core.exceptions import ParseError, RosterError
from roster.core.models import ImportOutcome, Student
from roster.core.validators import StudentValidator
from roster.observability.logger import get_logger, log_operation
from roster.observability.metrics import (
    export_records_total,
    import_rows_total,
    increment_counter,
    track_duration,
    transfer_duration_seconds,
    validation_failures_total,
)

from .readers import StudentCsvReader
from .writers import ErrorReportWriter, StudentCsvWriter

if TYPE_CHECKING:
    from roster.services.student_service import StudentService

logger = get_logger(__name__)

DEFAULT_ERROR_REPORT = "import_errors.csv"


class BulkTransferService:
    """
    Imports and exports student records as CSV.

    The service holds no state between calls. The only thing an import
    mutates is the caller's set of known ids.
    """

    def __init__(self, validator: StudentValidator | None = None, data_dir: str | Path = "data"):
        """
        Args:
            validator: Field rules shared with StudentService
            data_dir: Directory that relative export and report paths resolve against
        """
        self.validator = validator or StudentValidator()
        self.data_dir = Path(data_dir)
        self.reader = StudentCsvReader()
        self.writer = StudentCsvWriter()
        self.error_report_writer = ErrorReportWriter()

    def _resolve(self, file_path: str | Path) -> Path:
        path = Path(file_path)
        return path if path.is_absolute() else self.data_dir / path

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def export_students(self, students: Iterable[Student], file_path: str | Path) -> Path:
        """
        Write students to a CSV file.

        Args:
            students: Records in the order they should appear
            file_path: Destination; relative paths resolve against data_dir

        Returns:
            The path written

        Raises:
            OSError: If the file cannot be written
        """
        path = self._resolve(file_path)
        with log_operation("Exporting students", logger=logger, file=str(path)), \
                track_duration(transfer_duration_seconds, direction="export"):
            count = self.writer.write(students, path)

        increment_counter(export_records_total, count)
        logger.info(f"Export complete: {path} ({count} records)")
        return path

    # ------------------------------------------------------------------
    # Import
    # ------------------------------------------------------------------

    def import_from_csv(self, file_path: str | Path, existing_ids: set[str] | None = None) -> ImportOutcome:
        """
        Parse, deduplicate and validate every row of a CSV file.

        Args:
            file_path: Source file; the first line is treated as a header
            existing_ids: Ids already known (normally every stored id). Each
                          accepted id is added to it, so a repeated id later
                          in the same file is reported as a duplicate.

        Returns:
            ImportOutcome with accepted students and per-line diagnostics

        Raises:
            OSError: If the file cannot be read
        """
        known_ids = existing_ids if existing_ids is not None else set()
        outcome = ImportOutcome()

        with log_operation("Importing students", logger=logger, file=str(file_path)), \
                track_duration(transfer_duration_seconds, direction="import"):
            for line_number, line in self.reader.iter_lines(file_path):
                student = self._import_line(line_number, line, known_ids, outcome)
                if student is not None:
                    outcome.students.append(student)

        logger.info(
            f"Import complete: {outcome.accepted_count} imported, "
            f"{outcome.error_count} errors."
        )
        return outcome

    def _import_line(
        self,
        line_number: int,
        line: str,
        known_ids: set[str],
        outcome: ImportOutcome,
    ) -> Student | None:
        try:
            student = self.reader.parse_line(line_number, line)
        except ParseError as e:
            outcome.errors.append(str(e))
            increment_counter(import_rows_total, outcome="parse_error")
            return None

        if student.student_id in known_ids:
            outcome.errors.append(
                f"Line {line_number}: Duplicate ID '{student.student_id}' - skipped."
            )
            increment_counter(import_rows_total, outcome="duplicate")
            return None

        result = self.validator.validate(student)
        if not result.is_valid:
            outcome.errors.append(f"Line {line_number}: " + "; ".join(result.errors))
            increment_counter(import_rows_total, outcome="invalid")
            increment_counter(validation_failures_total, operation="import")
            return None

        known_ids.add(student.student_id)
        increment_counter(import_rows_total, outcome="accepted")
        return student

    def import_into(self, service: "StudentService", file_path: str | Path) -> ImportOutcome:
        """
        Import a CSV file and store every accepted record through the service.

        Known ids are seeded from storage. A record that fails to save is
        reported in save_errors and the remaining records are still saved.
        """
        outcome = self.import_from_csv(file_path, service.get_existing_ids())

        saved = 0
        for student in outcome.students:
            try:
                service.add_student(student)
                saved += 1
            except RosterError as e:
                outcome.save_errors.append(f"Could not save {student.student_id}: {e}")

        logger.info(
            f"Saved {saved} imported student(s); "
            f"{len(outcome.save_errors)} failed, {outcome.error_count} row(s) skipped."
        )
        return outcome

    # ------------------------------------------------------------------
    # Error report
    # ------------------------------------------------------------------

    def save_import_error_report(self, errors: Iterable[str], file_path: str | Path | None = None) -> Path:
        """
        Write import diagnostics to a CSV report.

        Args:
            errors: Diagnostic messages, one per rejected line
            file_path: Destination; defaults to <data_dir>/import_errors.csv

        Returns:
            The path written
        """
        path = self._resolve(file_path or DEFAULT_ERROR_REPORT)
        count = self.error_report_writer.write(errors, path)
        logger.info(f"Import error report saved: {count} errors.")
        return path
