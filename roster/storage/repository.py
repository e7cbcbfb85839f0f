"""
Storage port for student records.

The services depend only on StudentRepository; concrete engines
(PostgresStudentRepository, InMemoryStudentRepository) plug in behind it.
"""

from abc import ABC, abstractmethod

from roster.core.models import Student


class StudentRepository(ABC):
    """
    Abstract persistence contract for student records.

    Uniqueness and existence checks are the caller's job: save() on an
    existing id and update() on a missing id have engine-defined results.
    Engines report failures by raising StorageError.
    """

    @abstractmethod
    def save(self, student: Student) -> None:
        """Insert a new student."""

    @abstractmethod
    def update(self, student: Student) -> None:
        """Replace every mutable field of the student with the same id."""

    @abstractmethod
    def delete(self, student_id: str) -> None:
        """Remove a student; does nothing if the id is absent."""

    @abstractmethod
    def find_by_id(self, student_id: str) -> Student | None:
        """Return the student with this id, or None."""

    @abstractmethod
    def find_all(self) -> list[Student]:
        """Return every student ordered by full name."""

    @abstractmethod
    def search(self, query: str) -> list[Student]:
        """Students whose id or full name contains query, ignoring case."""

    @abstractmethod
    def filter(
        self,
        programme: str | None = None,
        level: int | None = None,
        status: str | None = None,
    ) -> list[Student]:
        """
        Students matching every supplied criterion, ordered by full name.

        None (or an empty string) for a criterion matches everything.
        """

    @abstractmethod
    def find_all_programmes(self) -> list[str]:
        """Distinct programme names, sorted."""

    @abstractmethod
    def exists_by_id(self, student_id: str) -> bool:
        """True if a student with this id is stored."""

    def find_all_ids(self) -> set[str]:
        """Every stored id."""
        return {student.student_id for student in self.find_all()}


def sort_key(student: Student) -> tuple[str, str]:
    """Ordering shared by every engine: full name, then id."""
    return (student.full_name, student.student_id)
