"""
StudentValidator - field rules for student records.

Every check appends messages to a caller-supplied ValidationOutcome instead of
raising, so the interactive path and the CSV import path share one rule set and
still report independently.
"""

import re

from roster.core.models import Student, ValidationOutcome

VALID_LEVELS = (100, 200, 300, 400, 500, 600, 700)

MIN_GPA = 0.0
MAX_GPA = 4.0

_ID_PATTERN = re.compile(r"[A-Za-z0-9]+")
_DIGIT_PATTERN = re.compile(r"[0-9]")
_PHONE_PATTERN = re.compile(r"[0-9]+")


def _is_blank(value: str | None) -> bool:
    return value is None or value.strip() == ""


class StudentValidator:
    """
    Applies the roster's business rules to a Student.

    Rules:
    - student_id: required, 4-20 characters, letters and digits only
    - full_name: required, 2-60 characters, no digits
    - programme: required
    - level: one of 100, 200, ..., 700
    - gpa: 0.0 <= gpa <= 4.0
    - email: required, contains '@' and '.'
    - phone_number: required, digits only, 10-15 characters
    """

    def validate(self, student: Student) -> ValidationOutcome:
        """
        Validate every field of a student.

        Args:
            student: The record to check

        Returns:
            ValidationOutcome with all violations (empty when valid)
        """
        outcome = ValidationOutcome()

        self.validate_student_id(student.student_id, outcome)
        self.validate_full_name(student.full_name, outcome)
        self.validate_programme(student.programme, outcome)
        self.validate_level(student.level, outcome)
        self.validate_gpa(student.gpa, outcome)
        self.validate_email(student.email, outcome)
        self.validate_phone(student.phone_number, outcome)

        return outcome

    def validate_student_id(self, student_id: str | None, outcome: ValidationOutcome) -> None:
        if _is_blank(student_id):
            outcome.add_error("Student ID is required.")
            return
        if not 4 <= len(student_id) <= 20:
            outcome.add_error("Student ID must be between 4 and 20 characters.")
        if not _ID_PATTERN.fullmatch(student_id):
            outcome.add_error("Student ID must contain only letters and digits.")

    def validate_full_name(self, full_name: str | None, outcome: ValidationOutcome) -> None:
        if _is_blank(full_name):
            outcome.add_error("Full name is required.")
            return
        if not 2 <= len(full_name) <= 60:
            outcome.add_error("Full name must be between 2 and 60 characters.")
        if _DIGIT_PATTERN.search(full_name):
            outcome.add_error("Full name must not contain digits.")

    def validate_programme(self, programme: str | None, outcome: ValidationOutcome) -> None:
        if _is_blank(programme):
            outcome.add_error("Programme is required.")

    def validate_level(self, level: int | None, outcome: ValidationOutcome) -> None:
        if level not in VALID_LEVELS:
            outcome.add_error("Level must be one of: 100, 200, 300, 400, 500, 600, 700.")

    def validate_gpa(self, gpa: float | None, outcome: ValidationOutcome) -> None:
        # Written as a negated range so NaN is rejected too
        if gpa is None or not MIN_GPA <= gpa <= MAX_GPA:
            outcome.add_error("GPA must be between 0.0 and 4.0.")

    def validate_email(self, email: str | None, outcome: ValidationOutcome) -> None:
        if _is_blank(email):
            outcome.add_error("Email is required.")
            return
        if "@" not in email or "." not in email:
            outcome.add_error("Email must contain '@' and '.'.")

    def validate_phone(self, phone_number: str | None, outcome: ValidationOutcome) -> None:
        if _is_blank(phone_number):
            outcome.add_error("Phone number is required.")
            return
        if not _PHONE_PATTERN.fullmatch(phone_number):
            outcome.add_error("Phone number must contain digits only.")
        if not 10 <= len(phone_number) <= 15:
            outcome.add_error("Phone number must be between 10 and 15 digits.")


_default_validator = StudentValidator()


def validate_student(student: Student) -> ValidationOutcome:
    """Validate a student with the shared default validator."""
    return _default_validator.validate(student)
