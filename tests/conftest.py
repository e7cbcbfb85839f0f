"""
Pytest configuration and fixtures for student-roster tests

This module provides shared fixtures for unit, integration, and E2E tests.
"""
import logging
from datetime import date
from typing import Generator

import pytest
from testcontainers.postgres import PostgresContainer

from roster.core.models import Student
from roster.observability.logger import DEFAULT_LOGGER_NAME
from roster.services.student_service import StudentService
from roster.storage.connection import DatabaseConnectionPool
from roster.storage.memory_repository import InMemoryStudentRepository
from roster.storage.schema_mgmt import SchemaManager


# =======================
# PYTEST CONFIGURATION
# =======================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests that don't require external services"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that require Docker containers"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests that exercise the full import/export flow"
    )


# =======================
# RECORD FIXTURES
# =======================

def make_student(student_id: str = "STU0001", **overrides) -> Student:
    """Build a valid student, overriding any field by keyword"""
    values = {
        "student_id": student_id,
        "full_name": "Ama Mensah",
        "programme": "Computer Science",
        "level": 200,
        "gpa": 3.45,
        "email": "ama.mensah@example.com",
        "phone_number": "0244000001",
        "date_added": date(2024, 9, 2),
        "status": "Active",
    }
    values.update(overrides)
    return Student(**values)


@pytest.fixture
def valid_student() -> Student:
    """A student that passes every field rule"""
    return make_student()


@pytest.fixture
def sample_students() -> list[Student]:
    """
    Five active students across two programmes

    GPAs: Alice 3.8, Bob 1.5, Carol 2.5, Dave 0.9, Eve 3.9
    """
    return [
        make_student("STU1001", full_name="Alice Owusu", programme="Computer Science",
                     level=100, gpa=3.8, phone_number="0244000101"),
        make_student("STU1002", full_name="Bob Asante", programme="Computer Science",
                     level=200, gpa=1.5, phone_number="0244000102"),
        make_student("STU1003", full_name="Carol Boateng", programme="Mathematics",
                     level=300, gpa=2.5, phone_number="0244000103"),
        make_student("STU1004", full_name="Dave Mensah", programme="Mathematics",
                     level=100, gpa=0.9, phone_number="0244000104"),
        make_student("STU1005", full_name="Eve Addo", programme="Computer Science",
                     level=400, gpa=3.9, phone_number="0244000105"),
    ]


# =======================
# SERVICE FIXTURES
# =======================

@pytest.fixture
def memory_repository() -> InMemoryStudentRepository:
    """Empty in-memory storage engine"""
    return InMemoryStudentRepository()


@pytest.fixture
def student_service(memory_repository) -> StudentService:
    """StudentService over an empty in-memory store"""
    return StudentService(memory_repository)


@pytest.fixture
def populated_service(sample_students) -> StudentService:
    """StudentService over an in-memory store holding sample_students"""
    return StudentService(InMemoryStudentRepository(sample_students))


# =======================
# DATABASE FIXTURES (Testcontainers)
# =======================

@pytest.fixture(scope="session")
def postgres_container() -> Generator[PostgresContainer, None, None]:
    """
    Start PostgreSQL container for integration tests

    Yields:
        PostgresContainer instance
    """
    with PostgresContainer(
        image="postgres:16.2-alpine",
        username="test_roster",
        password="test_password",
        dbname="test_roster"
    ) as postgres:
        # Wait for container to be ready
        postgres.get_connection_url()
        yield postgres


@pytest.fixture
def db_pool(postgres_container) -> Generator[DatabaseConnectionPool, None, None]:
    """
    Open a pool against the container with an empty students table

    Args:
        postgres_container: PostgreSQL container fixture

    Yields:
        Open DatabaseConnectionPool
    """
    pool = DatabaseConnectionPool(
        host=postgres_container.get_container_host_ip(),
        port=int(postgres_container.get_exposed_port(5432)),
        database="test_roster",
        user="test_roster",
        password="test_password",
    )
    pool.open()

    schema = SchemaManager(pool)
    schema.ensure_schema()
    schema.truncate()

    yield pool

    pool.close()


# =======================
# FILE FIXTURES
# =======================

@pytest.fixture
def write_csv(tmp_path):
    """
    Write CSV text to a file under tmp_path

    Returns:
        Function (text, name="students.csv") -> Path
    """
    def _write(text: str, name: str = "students.csv"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def student_factory():
    """Factory for valid students; see make_student"""
    return make_student


# =======================
# CLEANUP FIXTURES
# =======================

@pytest.fixture
def reset_logging():
    """
    Detach handlers that setup_logger attached to the package logger

    Handlers hold the stream that was sys.stdout when they were created, which
    pytest closes at the end of each test.
    """
    yield
    package_logger = logging.getLogger(DEFAULT_LOGGER_NAME)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.propagate = True
