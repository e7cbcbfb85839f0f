"""
Schema management for the students table.

The schema is created when absent; there are no migrations. CHECK constraints
repeat the level and GPA rules of the validation engine.
"""

from roster.observability.logger import get_logger

from .connection import DatabaseConnectionPool

logger = get_logger(__name__)

STUDENTS_TABLE_DDL = """
    CREATE TABLE IF NOT EXISTS students (
        student_id   TEXT             PRIMARY KEY NOT NULL,
        full_name    TEXT             NOT NULL,
        programme    TEXT             NOT NULL,
        level        INTEGER          NOT NULL CHECK (level IN (100, 200, 300, 400, 500, 600, 700)),
        gpa          DOUBLE PRECISION NOT NULL CHECK (gpa >= 0.0 AND gpa <= 4.0),
        email        TEXT             NOT NULL,
        phone_number TEXT             NOT NULL,
        date_added   DATE             NOT NULL,
        status       TEXT             NOT NULL DEFAULT 'Active'
    )
"""


class SchemaManager:
    """
    Creates and inspects the roster schema.
    """

    def __init__(self, pool: DatabaseConnectionPool):
        self.pool = pool

    def ensure_schema(self) -> None:
        """Create the students table if it does not exist."""
        self.pool.execute_command(STUDENTS_TABLE_DDL)
        logger.info("Database schema verified/created.")

    def table_exists(self, table_name: str = "students") -> bool:
        result = self.pool.execute_query(
            """
            SELECT EXISTS (
                SELECT 1 FROM information_schema.tables
                WHERE table_schema = current_schema() AND table_name = %s
            ) AS present
            """,
            (table_name,)
        )
        return bool(result and result[0]["present"])

    def truncate(self) -> None:
        """Remove every row from the students table."""
        self.pool.execute_command("TRUNCATE TABLE students")
