"""
CSV bulk import/export module.
"""

from .readers import StudentCsvReader
from .transfer import BulkTransferService
from .writers import ErrorReportWriter, StudentCsvWriter

__all__ = [
    "BulkTransferService",
    "StudentCsvReader",
    "StudentCsvWriter",
    "ErrorReportWriter",
]
