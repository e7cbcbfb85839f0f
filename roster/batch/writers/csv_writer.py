"""
CSV writer for student exports.
"""

import csv
from collections.abc import Iterable
from pathlib import Path

from roster.batch.readers.csv_reader import CSV_COLUMNS
from roster.core.models import Student


class StudentCsvWriter:
    """
    Writes students to a UTF-8 CSV file with a fixed header row.

    Fields containing a comma, a quote or a line break are quoted and embedded
    quotes are doubled; every other field is written bare. Level and GPA are
    plain numeric text and dates are ISO 8601 (YYYY-MM-DD).
    """

    def write(self, students: Iterable[Student], file_path: Path) -> int:
        """
        Write students to file_path, replacing any existing file.

        Returns:
            Number of records written
        """
        file_path.parent.mkdir(parents=True, exist_ok=True)

        count = 0
        with open(file_path, "w", encoding="utf-8", newline="") as f:
            writer = csv.writer(f, lineterminator="\n")
            writer.writerow(CSV_COLUMNS)
            for student in students:
                writer.writerow(self.to_row(student))
                count += 1
        return count

    @staticmethod
    def to_row(student: Student) -> list[str]:
        return [
            student.student_id,
            student.full_name,
            student.programme,
            str(student.level),
            repr(student.gpa),
            student.email,
            student.phone_number,
            student.date_added.isoformat(),
            student.status,
        ]
