"""
Error taxonomy for roster operations.

Validation failures are recoverable by correcting input; storage failures are
faults and are never retried at this layer.
"""

from .models import ValidationOutcome


class RosterError(Exception):
    """Base class for all errors raised by the roster services."""


class ValidationError(RosterError):
    """Raised when a record violates one or more field rules."""

    def __init__(self, outcome: ValidationOutcome):
        self.outcome = outcome
        self.errors = list(outcome.errors)
        super().__init__(outcome.error_message)


class DuplicateIdError(RosterError):
    """Raised when adding a record whose id is already stored."""

    def __init__(self, student_id: str):
        self.student_id = student_id
        super().__init__(f"Student ID '{student_id}' already exists.")


class NotFoundError(RosterError):
    """Raised when updating or deleting a record that does not exist."""

    def __init__(self, student_id: str):
        self.student_id = student_id
        super().__init__(f"Student ID '{student_id}' not found.")


class StorageError(RosterError):
    """Raised when the storage engine rejects or fails an operation."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        super().__init__(f"Storage operation '{operation}' failed: {message}")


class ParseError(RosterError):
    """A single CSV row could not be turned into a record."""

    def __init__(self, line_number: int, message: str):
        self.line_number = line_number
        self.message = message
        super().__init__(f"Line {line_number}: Could not parse row - {message}")
