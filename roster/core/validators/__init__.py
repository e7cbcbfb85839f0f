"""
Field validation rules for student records.
"""

from .student_validator import (
    MAX_GPA,
    MIN_GPA,
    VALID_LEVELS,
    StudentValidator,
    validate_student,
)

__all__ = [
    "StudentValidator",
    "validate_student",
    "VALID_LEVELS",
    "MIN_GPA",
    "MAX_GPA",
]
