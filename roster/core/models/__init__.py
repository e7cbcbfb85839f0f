"""
Core data models for the student roster.

All models use Pydantic for runtime type checking.
"""

from .import_outcome import ImportOutcome
from .programme_summary import ProgrammeSummary
from .student import STATUS_ACTIVE, STATUS_INACTIVE, Student, StudentStatus
from .validation_outcome import ValidationOutcome

__all__ = [
    "Student",
    "StudentStatus",
    "STATUS_ACTIVE",
    "STATUS_INACTIVE",
    "ValidationOutcome",
    "ImportOutcome",
    "ProgrammeSummary",
]
