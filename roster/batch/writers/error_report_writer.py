"""
Writer for the import error report.
"""

import csv
from collections.abc import Iterable
from pathlib import Path

ERROR_REPORT_HEADER = "error_description"


class ErrorReportWriter:
    """
    Writes import diagnostics, one always-quoted message per line under an
    unquoted "error_description" header. Embedded quotes are doubled.
    """

    def write(self, errors: Iterable[str], file_path: Path) -> int:
        """
        Returns:
            Number of diagnostics written
        """
        file_path.parent.mkdir(parents=True, exist_ok=True)

        count = 0
        with open(file_path, "w", encoding="utf-8", newline="") as f:
            f.write(ERROR_REPORT_HEADER + "\n")
            writer = csv.writer(f, quoting=csv.QUOTE_ALL, lineterminator="\n")
            for message in errors:
                writer.writerow([message])
                count += 1
        return count
