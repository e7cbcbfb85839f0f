"""
Integration tests for the PostgreSQL storage engine

Runs against a PostgreSQL container started with testcontainers.
"""
import pytest
from psycopg import OperationalError

from roster.core.exceptions import DuplicateIdError, StorageError
from roster.services.student_service import StudentService
from roster.storage.connection import DatabaseConnectionPool
from roster.storage.memory_repository import InMemoryStudentRepository
from roster.storage.postgres_repository import PostgresStudentRepository
from roster.storage.schema_mgmt import SchemaManager


@pytest.fixture
def repository(db_pool) -> PostgresStudentRepository:
    return PostgresStudentRepository(db_pool)


@pytest.fixture
def populated_repository(repository, sample_students) -> PostgresStudentRepository:
    for student in sample_students:
        repository.save(student)
    return repository


@pytest.mark.integration
def test_schema_created(db_pool):
    """Test ensure_schema creates the students table and is repeatable"""
    schema = SchemaManager(db_pool)
    schema.ensure_schema()

    assert schema.table_exists("students")
    assert not schema.table_exists("no_such_table")


@pytest.mark.integration
def test_save_and_find(repository, valid_student):
    repository.save(valid_student)

    assert repository.exists_by_id("STU0001")
    assert repository.find_by_id("STU0001") == valid_student
    assert repository.find_by_id("NOPE9999") is None


@pytest.mark.integration
def test_update_and_delete(populated_repository):
    student = populated_repository.find_by_id("STU1003")
    populated_repository.update(student.model_copy(update={"gpa": 1.25, "status": "Inactive"}))

    stored = populated_repository.find_by_id("STU1003")
    assert stored.gpa == 1.25
    assert stored.status == "Inactive"

    populated_repository.delete("STU1003")
    assert not populated_repository.exists_by_id("STU1003")


@pytest.mark.integration
def test_duplicate_primary_key_raises_storage_error(repository, valid_student):
    repository.save(valid_student)

    with pytest.raises(StorageError) as exc_info:
        repository.save(valid_student)

    assert exc_info.value.operation == "save"


@pytest.mark.integration
def test_check_constraint_raises_storage_error(repository, student_factory):
    """Test the table rejects a GPA outside the scale even without the validator"""
    with pytest.raises(StorageError):
        repository.save(student_factory(gpa=4.5))


@pytest.mark.integration
def test_same_results_as_memory_engine(populated_repository, sample_students, student_factory):
    """Test ordering, search and filter agree with the in-memory engine"""
    extra = [
        student_factory("STU2001", full_name="abe Lowercase"),
        student_factory("STU2002", full_name="Alice Owusu", programme="Mathematics"),
        student_factory("STU2003", full_name="Percent 100% Sure", status="Inactive"),
    ]
    for student in extra:
        populated_repository.save(student)
    memory = InMemoryStudentRepository(sample_students + extra)

    assert populated_repository.find_all() == memory.find_all()
    for query in ["ALICE", "stu100", "%", "_", "wen"]:
        assert populated_repository.search(query) == memory.search(query)
    assert populated_repository.filter("Mathematics") == memory.filter("Mathematics")
    assert populated_repository.filter(None, 100, None) == memory.filter(None, 100, None)
    assert populated_repository.filter(None, None, "Inactive") == memory.filter(None, None, "Inactive")
    assert populated_repository.find_all_programmes() == memory.find_all_programmes()
    assert populated_repository.find_all_ids() == memory.find_all_ids()


@pytest.mark.integration
def test_service_over_postgres(populated_repository, valid_student):
    service = StudentService(populated_repository)

    service.add_student(valid_student)
    with pytest.raises(DuplicateIdError):
        service.add_student(valid_student)

    assert service.get_total_count() == 6
    assert [s.student_id for s in service.get_top_performers(2)] == ["STU1005", "STU1001"]


@pytest.mark.integration
def test_closed_pool_is_not_usable(postgres_container):
    pool = DatabaseConnectionPool(
        host=postgres_container.get_container_host_ip(),
        port=int(postgres_container.get_exposed_port(5432)),
        database="test_roster",
        user="test_roster",
        password="test_password",
    )

    with pool:
        assert pool.is_open
        assert pool.execute_query("SELECT 1 AS test")[0]["test"] == 1

    assert not pool.is_open
    with pytest.raises(RuntimeError):
        pool.execute_query("SELECT 1")


@pytest.mark.integration
def test_open_fails_after_retries():
    pool = DatabaseConnectionPool(
        host="127.0.0.1",
        port=1,
        password="irrelevant",
        timeout=1.0,
    )

    with pytest.raises(OperationalError):
        pool.open(max_retries=2, retry_delay=0.0)
    assert not pool.is_open
