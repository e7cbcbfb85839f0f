"""
Dependency graph for one roster process.

build_app() constructs every shared component exactly once and hands each
service its dependencies; nothing is looked up through module globals.
"""

from dataclasses import dataclass

from roster.batch import BulkTransferService
from roster.config.settings import Settings
from roster.core.validators import StudentValidator
from roster.observability.logger import get_logger
from roster.services.student_service import StudentService
from roster.storage.connection import DatabaseConnectionPool
from roster.storage.memory_repository import InMemoryStudentRepository
from roster.storage.postgres_repository import PostgresStudentRepository
from roster.storage.repository import StudentRepository
from roster.storage.schema_mgmt import SchemaManager

logger = get_logger(__name__)


@dataclass
class RosterApp:
    """The wired services of a running roster process."""

    settings: Settings
    repository: StudentRepository
    validator: StudentValidator
    student_service: StudentService
    transfer_service: BulkTransferService
    pool: DatabaseConnectionPool | None = None

    def close(self) -> None:
        if self.pool is not None:
            self.pool.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def build_app(
    settings: Settings,
    in_memory: bool = False,
    repository: StudentRepository | None = None,
) -> RosterApp:
    """
    Wire the roster services.

    Args:
        settings: Resolved settings
        in_memory: Use a process-local in-memory store instead of PostgreSQL
        repository: Use this storage engine instead of building one

    Returns:
        RosterApp; close() it to release the database connection
    """
    pool = None
    if repository is None:
        if in_memory:
            repository = InMemoryStudentRepository()
        else:
            pool = DatabaseConnectionPool.from_settings(settings)
            pool.open()
            try:
                SchemaManager(pool).ensure_schema()
            except Exception:
                pool.close()
                raise
            repository = PostgresStudentRepository(pool)

    validator = StudentValidator()
    app = RosterApp(
        settings=settings,
        repository=repository,
        validator=validator,
        student_service=StudentService(repository, validator),
        transfer_service=BulkTransferService(validator, data_dir=settings.data_dir),
        pool=pool,
    )
    logger.debug(f"Roster services ready ({type(repository).__name__})")
    return app
