"""
PostgreSQL storage engine for student records.

Every statement is parameterized; user input never becomes part of the SQL
text. Ordering uses the "C" collation so results sort by code point, the
same as the in-memory engine.
"""

from collections.abc import Callable
from typing import Any

import psycopg
from pydantic import ValidationError as ModelValidationError

from roster.core.exceptions import StorageError
from roster.core.models import Student
from roster.observability.logger import get_logger
from roster.observability.metrics import increment_counter, storage_errors_total

from .connection import DatabaseConnectionPool
from .repository import StudentRepository

logger = get_logger(__name__)

COLUMNS = (
    "student_id, full_name, programme, level, gpa, "
    "email, phone_number, date_added, status"
)
ORDER_BY = 'ORDER BY full_name COLLATE "C", student_id COLLATE "C"'


class PostgresStudentRepository(StudentRepository):
    """
    StudentRepository backed by the students table.

    Engine failures are logged and re-raised as StorageError, for reads as
    well as writes.
    """

    def __init__(self, pool: DatabaseConnectionPool):
        """
        Args:
            pool: Open database connection pool shared by the process
        """
        self.pool = pool

    def save(self, student: Student) -> None:
        query = f"""
            INSERT INTO students ({COLUMNS})
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
        """
        self._run("save", self.pool.execute_command, query, self._to_params(student))

    def update(self, student: Student) -> None:
        query = """
            UPDATE students
            SET full_name = %s, programme = %s, level = %s, gpa = %s, email = %s,
                phone_number = %s, date_added = %s, status = %s
            WHERE student_id = %s
        """
        params = (
            student.full_name,
            student.programme,
            student.level,
            student.gpa,
            student.email,
            student.phone_number,
            student.date_added,
            student.status,
            student.student_id,
        )
        self._run("update", self.pool.execute_command, query, params)

    def delete(self, student_id: str) -> None:
        self._run(
            "delete",
            self.pool.execute_command,
            "DELETE FROM students WHERE student_id = %s",
            (student_id,),
        )

    def find_by_id(self, student_id: str) -> Student | None:
        rows = self._query(
            "find_by_id",
            f"SELECT {COLUMNS} FROM students WHERE student_id = %s",
            (student_id,),
        )
        return self._to_student(rows[0]) if rows else None

    def find_all(self) -> list[Student]:
        rows = self._query("find_all", f"SELECT {COLUMNS} FROM students {ORDER_BY}")
        return [self._to_student(row) for row in rows]

    def search(self, query: str) -> list[Student]:
        needle = query.lower()
        rows = self._query(
            "search",
            f"""
            SELECT {COLUMNS} FROM students
            WHERE POSITION(%s IN LOWER(student_id)) > 0
               OR POSITION(%s IN LOWER(full_name)) > 0
            {ORDER_BY}
            """,
            (needle, needle),
        )
        return [self._to_student(row) for row in rows]

    def filter(
        self,
        programme: str | None = None,
        level: int | None = None,
        status: str | None = None,
    ) -> list[Student]:
        clauses = []
        params: list[Any] = []
        if programme:
            clauses.append("programme = %s")
            params.append(programme)
        if level is not None:
            clauses.append("level = %s")
            params.append(level)
        if status:
            clauses.append("status = %s")
            params.append(status)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        rows = self._query(
            "filter",
            f"SELECT {COLUMNS} FROM students {where} {ORDER_BY}",
            tuple(params),
        )
        return [self._to_student(row) for row in rows]

    def find_all_programmes(self) -> list[str]:
        rows = self._query(
            "find_all_programmes",
            'SELECT DISTINCT programme FROM students ORDER BY programme COLLATE "C"',
        )
        return [row["programme"] for row in rows]

    def exists_by_id(self, student_id: str) -> bool:
        rows = self._query(
            "exists_by_id",
            "SELECT 1 AS found FROM students WHERE student_id = %s",
            (student_id,),
        )
        return bool(rows)

    def find_all_ids(self) -> set[str]:
        rows = self._query("find_all_ids", "SELECT student_id FROM students")
        return {row["student_id"] for row in rows}

    # ------------------------------------------------------------------

    def _query(self, operation: str, query: str, params: tuple | None = None) -> list[dict]:
        return self._run(operation, self.pool.execute_query, query, params)

    def _run(self, operation: str, func: Callable, query: str, params: tuple | None):
        try:
            return func(query, params)
        except psycopg.Error as e:
            logger.error(f"DB error on {operation}: {e}")
            increment_counter(storage_errors_total, operation=operation)
            raise StorageError(operation, str(e)) from e

    @staticmethod
    def _to_params(student: Student) -> tuple:
        return (
            student.student_id,
            student.full_name,
            student.programme,
            student.level,
            student.gpa,
            student.email,
            student.phone_number,
            student.date_added,
            student.status,
        )

    @staticmethod
    def _to_student(row: dict) -> Student:
        try:
            return Student(**row)
        except ModelValidationError as e:
            logger.error(f"Unreadable row for student_id={row.get('student_id')}")
            raise StorageError("read", str(e)) from e
