"""
CSV readers for bulk import.
"""

from .csv_reader import CSV_COLUMNS, StudentCsvReader

__all__ = ["StudentCsvReader", "CSV_COLUMNS"]
