"""
In-memory storage engine.

Keeps students in a dict keyed by id. Used by the test suite and by the CLI's
--in-memory mode; it follows the same ordering, search and filter semantics
as the PostgreSQL engine.
"""

from roster.core.exceptions import StorageError
from roster.core.models import Student

from .repository import StudentRepository, sort_key


class InMemoryStudentRepository(StudentRepository):
    """Dict-backed StudentRepository. Stored and returned records are copies."""

    def __init__(self, students: list[Student] | None = None):
        self._students: dict[str, Student] = {}
        for student in students or []:
            self.save(student)

    def save(self, student: Student) -> None:
        if student.student_id in self._students:
            raise StorageError("save", f"Student ID '{student.student_id}' already exists")
        self._students[student.student_id] = student.model_copy()

    def update(self, student: Student) -> None:
        if student.student_id in self._students:
            self._students[student.student_id] = student.model_copy()

    def delete(self, student_id: str) -> None:
        self._students.pop(student_id, None)

    def find_by_id(self, student_id: str) -> Student | None:
        student = self._students.get(student_id)
        return student.model_copy() if student is not None else None

    def find_all(self) -> list[Student]:
        return self._sorted(self._students.values())

    def search(self, query: str) -> list[Student]:
        needle = query.lower()
        return self._sorted(
            s for s in self._students.values()
            if needle in s.student_id.lower() or needle in s.full_name.lower()
        )

    def filter(
        self,
        programme: str | None = None,
        level: int | None = None,
        status: str | None = None,
    ) -> list[Student]:
        matches = []
        for student in self._students.values():
            if programme and student.programme != programme:
                continue
            if level is not None and student.level != level:
                continue
            if status and student.status != status:
                continue
            matches.append(student)
        return self._sorted(matches)

    def find_all_programmes(self) -> list[str]:
        return sorted({s.programme for s in self._students.values()})

    def exists_by_id(self, student_id: str) -> bool:
        return student_id in self._students

    def find_all_ids(self) -> set[str]:
        return set(self._students)

    def __len__(self) -> int:
        return len(self._students)

    @staticmethod
    def _sorted(students) -> list[Student]:
        return [s.model_copy() for s in sorted(students, key=sort_key)]
