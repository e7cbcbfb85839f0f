"""
Business rules for student records.

StudentService is the only entry point callers use for records: it validates
before every write, enforces id uniqueness and existence, and derives the
dashboard and report figures from the full record set.
"""

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from roster.core.exceptions import DuplicateIdError, NotFoundError, ValidationError
from roster.core.models import (
    STATUS_ACTIVE,
    STATUS_INACTIVE,
    ProgrammeSummary,
    Student,
)
from roster.core.validators import StudentValidator
from roster.observability.logger import get_logger
from roster.observability.metrics import (
    increment_counter,
    records_written_total,
    validation_failures_total,
)
from roster.storage.repository import StudentRepository

logger = get_logger(__name__)

# (label, lower bound inclusive, upper bound exclusive); the last band is
# closed at 4.0, the top of the GPA scale
GPA_BANDS = (
    ("0.0 - 1.0", None, 1.0),
    ("1.0 - 2.0", 1.0, 2.0),
    ("2.0 - 3.0", 2.0, 3.0),
    ("3.0 - 4.0", 3.0, None),
)


def _mean_gpa(students: list[Student]) -> float:
    if not students:
        return 0.0
    return sum(s.gpa for s in students) / len(students)


def _format_gpa(value: float) -> str:
    """Two decimal places, halves rounded up (3.125 -> "3.13")."""
    return str(Decimal(repr(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


class StudentService:
    """
    Validates and stores student records and computes reports.

    Writes go through the validator first, so no record is ever stored
    partially validated. Reports load every record and reduce in memory.
    """

    def __init__(self, repository: StudentRepository, validator: StudentValidator | None = None):
        """
        Args:
            repository: Storage engine for student records
            validator: Field rules; a fresh StudentValidator when omitted
        """
        self.repository = repository
        self.validator = validator or StudentValidator()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def add_student(self, student: Student) -> None:
        """
        Validate and store a new student.

        Raises:
            ValidationError: If any field rule is violated
            DuplicateIdError: If the id is already stored
            StorageError: If the storage engine rejects the write
        """
        self._check_valid(student, "add")

        if self.repository.exists_by_id(student.student_id):
            raise DuplicateIdError(student.student_id)

        self.repository.save(student)
        increment_counter(records_written_total, operation="add")
        logger.info(f"Student added: ID={student.student_id}")

    def update_student(self, student: Student) -> None:
        """
        Validate and replace an existing student, matched by id.

        The id itself is never changed; callers must not alter it before
        calling this.

        Raises:
            ValidationError: If any field rule is violated
            NotFoundError: If no student has this id
            StorageError: If the storage engine rejects the write
        """
        self._check_valid(student, "update")

        if not self.repository.exists_by_id(student.student_id):
            raise NotFoundError(student.student_id)

        self.repository.update(student)
        increment_counter(records_written_total, operation="update")
        logger.info(f"Student updated: ID={student.student_id}")

    def delete_student(self, student_id: str) -> None:
        """
        Raises:
            NotFoundError: If no student has this id
        """
        if not self.repository.exists_by_id(student_id):
            raise NotFoundError(student_id)

        self.repository.delete(student_id)
        increment_counter(records_written_total, operation="delete")
        logger.info(f"Student deleted: ID={student_id}")

    def _check_valid(self, student: Student, operation: str) -> None:
        outcome = self.validator.validate(student)
        if not outcome.is_valid:
            increment_counter(validation_failures_total, operation=operation)
            logger.info(
                f"Rejected {operation} for ID={student.student_id}: "
                f"{len(outcome.errors)} validation error(s)"
            )
            raise ValidationError(outcome)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_all_students(self) -> list[Student]:
        return self.repository.find_all()

    def get_student_by_id(self, student_id: str) -> Student | None:
        return self.repository.find_by_id(student_id)

    def search_students(self, query: str | None) -> list[Student]:
        """Search by id or name; a blank query returns every student."""
        if query is None or not query.strip():
            return self.repository.find_all()
        return self.repository.search(query.strip())

    def filter_students(
        self,
        programme: str | None = None,
        level: int | None = None,
        status: str | None = None,
    ) -> list[Student]:
        return self.repository.filter(programme, level, status)

    def get_all_programmes(self) -> list[str]:
        return self.repository.find_all_programmes()

    def get_existing_ids(self) -> set[str]:
        """Every stored id; seeds the duplicate check of a CSV import."""
        return self.repository.find_all_ids()

    # ------------------------------------------------------------------
    # Dashboard figures
    # ------------------------------------------------------------------

    def get_total_count(self) -> int:
        return len(self.repository.find_all())

    def get_active_count(self) -> int:
        return self._count_status(self.repository.find_all(), STATUS_ACTIVE)

    def get_inactive_count(self) -> int:
        return self._count_status(self.repository.find_all(), STATUS_INACTIVE)

    def get_average_gpa(self) -> float:
        """Mean GPA over all students; 0.0 when there are none."""
        return _mean_gpa(self.repository.find_all())

    def get_dashboard_stats(self) -> dict[str, Any]:
        """Total, active, inactive and average GPA from a single load."""
        students = self.repository.find_all()
        return {
            "total": len(students),
            "active": self._count_status(students, STATUS_ACTIVE),
            "inactive": self._count_status(students, STATUS_INACTIVE),
            "average_gpa": _mean_gpa(students),
        }

    @staticmethod
    def _count_status(students: Iterable[Student], status: str) -> int:
        return sum(1 for s in students if s.status == status)

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    def get_top_performers(
        self,
        n: int,
        programme: str | None = None,
        level: int | None = None,
    ) -> list[Student]:
        """
        Highest-GPA active students, optionally limited to a programme and level.

        Ties keep the name order returned by storage.

        Args:
            n: Maximum number of students to return
            programme: Optional programme filter
            level: Optional level filter

        Raises:
            ValueError: If n is negative
        """
        if n < 0:
            raise ValueError(f"n must be non-negative, got {n}")

        candidates = self.repository.filter(programme, level, STATUS_ACTIVE)
        ranked = sorted(candidates, key=lambda s: s.gpa, reverse=True)
        return ranked[:n]

    def get_at_risk_students(self, threshold: float) -> list[Student]:
        """Students with a GPA strictly below threshold, lowest GPA first."""
        at_risk = [s for s in self.repository.find_all() if s.gpa < threshold]
        return sorted(at_risk, key=lambda s: s.gpa)

    def get_gpa_distribution(self) -> dict[str, int]:
        """
        Count students per GPA band.

        Bands are [0,1), [1,2), [2,3) and [3,4]; every band is reported, in
        that order, even when empty.
        """
        distribution = {label: 0 for label, _, _ in GPA_BANDS}
        for student in self.repository.find_all():
            for label, low, high in GPA_BANDS:
                if (low is None or student.gpa >= low) and (high is None or student.gpa < high):
                    distribution[label] += 1
                    break
        return distribution

    def get_programme_summary(self) -> list[ProgrammeSummary]:
        """One row per programme: student count and mean GPA, sorted by name."""
        grouped: dict[str, list[Student]] = {}
        for student in self.repository.find_all():
            grouped.setdefault(student.programme, []).append(student)

        return [
            ProgrammeSummary(
                programme=programme,
                total=len(members),
                average_gpa=_format_gpa(_mean_gpa(members)),
            )
            for programme, members in sorted(grouped.items())
        ]
