"""
Unit tests for the in-memory storage engine.
"""

import pytest

from roster.core.exceptions import StorageError
from roster.storage.memory_repository import InMemoryStudentRepository
from roster.storage.repository import sort_key


@pytest.mark.unit
class TestInMemoryStudentRepository:
    """Tests for InMemoryStudentRepository"""

    def test_save_and_find(self, memory_repository, valid_student):
        memory_repository.save(valid_student)

        assert memory_repository.exists_by_id("STU0001")
        assert memory_repository.find_by_id("STU0001") == valid_student
        assert len(memory_repository) == 1

    def test_find_missing(self, memory_repository):
        assert memory_repository.find_by_id("NOPE") is None
        assert not memory_repository.exists_by_id("NOPE")

    def test_update_missing_is_noop(self, memory_repository, valid_student):
        memory_repository.update(valid_student)
        assert len(memory_repository) == 0

    def test_delete_missing_is_noop(self, memory_repository):
        memory_repository.delete("NOPE")
        assert len(memory_repository) == 0

    def test_save_existing_id_rejected(self, memory_repository, valid_student):
        memory_repository.save(valid_student)

        with pytest.raises(StorageError) as exc_info:
            memory_repository.save(valid_student.model_copy(update={"full_name": "Other Name"}))

        assert exc_info.value.operation == "save"
        assert memory_repository.find_by_id("STU0001").full_name == "Ama Mensah"

    def test_saved_record_is_copied(self, memory_repository, valid_student):
        """Test later changes to the caller's object are not stored"""
        memory_repository.save(valid_student)
        valid_student.full_name = "Changed Name"

        assert memory_repository.find_by_id("STU0001").full_name == "Ama Mensah"

    def test_order_by_name_then_id(self, student_factory):
        repository = InMemoryStudentRepository([
            student_factory("STU0003", full_name="Kofi Annan"),
            student_factory("STU0002", full_name="Ama Ata"),
            student_factory("STU0001", full_name="Kofi Annan"),
        ])

        assert [s.student_id for s in repository.find_all()] == ["STU0002", "STU0001", "STU0003"]

    def test_order_is_code_point(self, student_factory):
        """Test uppercase sorts before lowercase, as under the C collation"""
        repository = InMemoryStudentRepository([
            student_factory("STU0001", full_name="abe"),
            student_factory("STU0002", full_name="Zed"),
        ])

        assert [s.full_name for s in repository.find_all()] == ["Zed", "abe"]

    def test_find_all_ids(self, sample_students):
        repository = InMemoryStudentRepository(sample_students)
        assert repository.find_all_ids() == {s.student_id for s in sample_students}

    def test_filter_wildcards(self, sample_students):
        """Test empty programme and status act as wildcards"""
        repository = InMemoryStudentRepository(sample_students)
        assert len(repository.filter("", None, "")) == 5

    def test_sort_key(self, valid_student):
        assert sort_key(valid_student) == ("Ama Mensah", "STU0001")
