"""
Unit tests for dashboard figures and reports.
"""

import pytest

from roster.services.student_service import StudentService
from roster.storage.memory_repository import InMemoryStudentRepository


@pytest.mark.unit
class TestDashboard:
    """Tests for the dashboard counts and average"""

    def test_empty_store(self, student_service):
        assert student_service.get_total_count() == 0
        assert student_service.get_active_count() == 0
        assert student_service.get_inactive_count() == 0
        assert student_service.get_average_gpa() == 0.0

    def test_counts_and_average(self, populated_service):
        student = populated_service.get_student_by_id("STU1002")
        populated_service.update_student(student.model_copy(update={"status": "Inactive"}))

        assert populated_service.get_total_count() == 5
        assert populated_service.get_active_count() == 4
        assert populated_service.get_inactive_count() == 1
        assert populated_service.get_average_gpa() == pytest.approx(2.52)

    def test_dashboard_stats_agree_with_single_figures(self, populated_service):
        stats = populated_service.get_dashboard_stats()

        assert stats == {
            "total": populated_service.get_total_count(),
            "active": populated_service.get_active_count(),
            "inactive": populated_service.get_inactive_count(),
            "average_gpa": populated_service.get_average_gpa(),
        }


@pytest.mark.unit
class TestTopPerformers:
    """Tests for get_top_performers"""

    def test_top_three(self, populated_service):
        top = populated_service.get_top_performers(3)
        assert [s.full_name for s in top] == ["Eve Addo", "Alice Owusu", "Carol Boateng"]

    def test_n_larger_than_population(self, populated_service):
        assert len(populated_service.get_top_performers(50)) == 5

    def test_zero_returns_empty(self, populated_service):
        assert populated_service.get_top_performers(0) == []

    def test_negative_n_rejected(self, populated_service):
        with pytest.raises(ValueError):
            populated_service.get_top_performers(-1)

    def test_filters_by_programme_and_level(self, populated_service):
        top = populated_service.get_top_performers(5, programme="Mathematics")
        assert [s.student_id for s in top] == ["STU1003", "STU1004"]

        top = populated_service.get_top_performers(5, programme="Computer Science", level=200)
        assert [s.student_id for s in top] == ["STU1002"]

    def test_excludes_inactive(self, populated_service):
        eve = populated_service.get_student_by_id("STU1005")
        populated_service.update_student(eve.model_copy(update={"status": "Inactive"}))

        top = populated_service.get_top_performers(1)
        assert [s.student_id for s in top] == ["STU1001"]

    def test_ties_keep_name_order(self, student_factory):
        service = StudentService(InMemoryStudentRepository([
            student_factory("STU2002", full_name="Zed Quaye", gpa=3.0),
            student_factory("STU2001", full_name="Abe Quaye", gpa=3.0),
        ]))

        assert [s.full_name for s in service.get_top_performers(2)] == ["Abe Quaye", "Zed Quaye"]


@pytest.mark.unit
class TestAtRisk:
    """Tests for get_at_risk_students"""

    def test_below_threshold_lowest_first(self, populated_service):
        at_risk = populated_service.get_at_risk_students(2.0)
        assert [s.full_name for s in at_risk] == ["Dave Mensah", "Bob Asante"]

    def test_threshold_is_exclusive(self, populated_service):
        at_risk = populated_service.get_at_risk_students(2.5)
        assert "STU1003" not in [s.student_id for s in at_risk]

    def test_includes_inactive(self, populated_service):
        dave = populated_service.get_student_by_id("STU1004")
        populated_service.update_student(dave.model_copy(update={"status": "Inactive"}))

        assert "STU1004" in [s.student_id for s in populated_service.get_at_risk_students(2.0)]

    def test_zero_threshold_returns_empty(self, populated_service):
        assert populated_service.get_at_risk_students(0.0) == []


@pytest.mark.unit
class TestGpaDistribution:
    """Tests for get_gpa_distribution"""

    def test_every_band_reported_in_order(self, student_service):
        distribution = student_service.get_gpa_distribution()
        assert list(distribution.items()) == [
            ("0.0 - 1.0", 0),
            ("1.0 - 2.0", 0),
            ("2.0 - 3.0", 0),
            ("3.0 - 4.0", 0),
        ]

    def test_sample_distribution(self, populated_service):
        assert populated_service.get_gpa_distribution() == {
            "0.0 - 1.0": 1,
            "1.0 - 2.0": 1,
            "2.0 - 3.0": 1,
            "3.0 - 4.0": 2,
        }

    @pytest.mark.parametrize("gpa,band", [
        (0.0, "0.0 - 1.0"),
        (0.999, "0.0 - 1.0"),
        (1.0, "1.0 - 2.0"),
        (2.0, "2.0 - 3.0"),
        (3.0, "3.0 - 4.0"),
        (4.0, "3.0 - 4.0"),
    ])
    def test_band_boundaries(self, student_factory, gpa, band):
        service = StudentService(InMemoryStudentRepository([student_factory(gpa=gpa)]))
        distribution = service.get_gpa_distribution()

        assert distribution[band] == 1
        assert sum(distribution.values()) == 1


@pytest.mark.unit
class TestProgrammeSummary:
    """Tests for get_programme_summary"""

    def test_summary_rows(self, populated_service):
        rows = populated_service.get_programme_summary()

        assert [(r.programme, r.total, r.average_gpa) for r in rows] == [
            ("Computer Science", 3, "3.07"),
            ("Mathematics", 2, "1.70"),
        ]

    def test_average_rounds_half_up(self, student_service, student_factory):
        """Test a mean of 3.125 is shown as 3.13"""
        student_service.add_student(student_factory("STU2001", gpa=3.0))
        student_service.add_student(student_factory("STU2002", gpa=3.25, email="second@example.com"))

        [row] = student_service.get_programme_summary()
        assert row.average_gpa == "3.13"

    def test_empty_store(self, student_service):
        assert student_service.get_programme_summary() == []
