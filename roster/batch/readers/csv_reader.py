"""
Line-oriented CSV reader for student imports.
"""

import csv
import re
from collections.abc import Iterator
from datetime import date
from pathlib import Path

from roster.core.exceptions import ParseError
from roster.core.models import STATUS_ACTIVE, STATUS_INACTIVE, Student

CSV_COLUMNS = (
    "student_id",
    "full_name",
    "programme",
    "level",
    "gpa",
    "email",
    "phone_number",
    "date_added",
    "status",
)

_ISO_DATE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_INTEGER = re.compile(r"[+-]?[0-9]+")

# Stands in for bytes that are not valid UTF-8
REPLACEMENT_CHAR = "\ufffd"


class StudentCsvReader:
    """
    Reads student rows from a CSV file one line at a time.

    The first line is always treated as a header and skipped, whatever it
    contains. Blank lines are skipped. Each remaining line is split on commas
    (honouring double-quoted fields) without dropping trailing empty columns.
    Line numbers are 1-based and count the header.
    """

    def __init__(self, delimiter: str = ","):
        self.delimiter = delimiter

    def iter_lines(self, file_path: str | Path) -> Iterator[tuple[int, str]]:
        """
        Yield (line_number, line) for every data line.

        Raises:
            OSError: If the file cannot be opened or read
        """
        with open(file_path, encoding="utf-8-sig", errors="replace", newline="") as f:
            for line_number, line in enumerate(f, start=1):
                if line_number == 1:
                    continue
                line = line.rstrip("\r\n")
                if not line.strip():
                    continue
                yield line_number, line

    def split_line(self, line_number: int, line: str) -> list[str]:
        """
        Split one line into its fields.

        Raises:
            ParseError: If the line holds undecodable bytes, cannot be split or has fewer than 9 fields
        """
        if REPLACEMENT_CHAR in line:
            raise ParseError(line_number, "Row contains bytes that are not valid UTF-8")

        try:
            fields = next(csv.reader([line], delimiter=self.delimiter))
        except (csv.Error, StopIteration) as e:
            raise ParseError(line_number, str(e) or "Empty row")

        if len(fields) < len(CSV_COLUMNS):
            raise ParseError(
                line_number,
                f"Expected {len(CSV_COLUMNS)} columns, found {len(fields)}"
            )
        return fields

    def parse_fields(self, line_number: int, fields: list[str]) -> Student:
        """
        Build a Student from trimmed positional fields.

        Only conversions are checked here (numbers, date, status); business
        rules are left to the validator.

        Raises:
            ParseError: If a numeric, date or status field cannot be converted
        """
        values = [field.strip() for field in fields[:len(CSV_COLUMNS)]]
        (student_id, full_name, programme, level, gpa,
         email, phone_number, date_added, status) = values

        if not _INTEGER.fullmatch(level):
            raise ParseError(line_number, f"Level '{level}' is not a whole number")
        level_value = int(level)

        try:
            if "_" in gpa:
                raise ValueError(gpa)
            gpa_value = float(gpa)
        except ValueError:
            raise ParseError(line_number, f"GPA '{gpa}' is not a number")

        if not _ISO_DATE.fullmatch(date_added):
            raise ParseError(line_number, f"Date '{date_added}' is not in YYYY-MM-DD format")
        try:
            date_value = date.fromisoformat(date_added)
        except ValueError as e:
            raise ParseError(line_number, f"Date '{date_added}' is not a valid date ({e})")

        if status not in (STATUS_ACTIVE, STATUS_INACTIVE):
            raise ParseError(
                line_number,
                f"Status must be '{STATUS_ACTIVE}' or '{STATUS_INACTIVE}', found '{status}'"
            )

        return Student(
            student_id=student_id,
            full_name=full_name,
            programme=programme,
            level=level_value,
            gpa=gpa_value,
            email=email,
            phone_number=phone_number,
            date_added=date_value,
            status=status,
        )

    def parse_line(self, line_number: int, line: str) -> Student:
        """Split and convert one line; raises ParseError on any malformed content."""
        return self.parse_fields(line_number, self.split_line(line_number, line))
