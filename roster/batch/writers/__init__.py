"""
CSV writers for bulk export and import error reports.
"""

from .csv_writer import StudentCsvWriter
from .error_report_writer import ERROR_REPORT_HEADER, ErrorReportWriter

__all__ = ["StudentCsvWriter", "ErrorReportWriter", "ERROR_REPORT_HEADER"]
