# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for role-branched dashboards."""

from decimal import Decimal

import pytest
import pytest_asyncio

from school_portal.core.errors import AuthorizationError
from school_portal.domains.dashboard import DashboardService
from school_portal.domains.identity import IdentityContext
from school_portal.infrastructure.database.models import FacultyReview, StudentReview
from school_portal.models.common import Role

pytestmark = pytest.mark.integration


def keys_of(value) -> set[str]:
    """Every dict key at any depth."""
    if isinstance(value, dict):
        return set(value) | {k for v in value.values() for k in keys_of(v)}
    if isinstance(value, list):
        return {k for v in value for k in keys_of(v)}
    return set()


@pytest_asyncio.fixture
async def reviewed(db_session, world):
    a = world["school_a"]
    db_session.add_all([
        FacultyReview(school_id=a, faculty_id=world["alice"], rating=5, comment="Great",
                      created_by_student_id=world["dan"]),
        FacultyReview(school_id=a, faculty_id=world["alice"], rating=4, created_by_parent_id=world["dan_parent"]),
        FacultyReview(school_id=world["school_b"], faculty_id=world["xavier"], rating=3,
                      created_by_student_id=world["yara"]),
        StudentReview(school_id=a, student_id=world["dan"], faculty_id=world["alice"], rating=4,
                      comment="Diligent"),
    ])
    await db_session.commit()
    return world


class TestSuperAdminDashboard:
    """Tests for the cross-school overview."""

    @pytest.mark.asyncio
    async def test_schools_and_counts(self, db_session, reviewed):
        dashboard = await DashboardService(db_session).build(reviewed.identities["root"])

        assert dashboard.scope == "super_admin"
        assert [s.name for s in dashboard.schools] == ["Alpha High", "Beta Academy"]
        alpha, beta = dashboard.schools
        assert alpha.counts.model_dump() == {"faculty": 3, "students": 3, "admins": 2, "classes": 2, "subjects": 2}
        assert beta.counts.model_dump() == {"faculty": 1, "students": 1, "admins": 1, "classes": 1, "subjects": 1}

    @pytest.mark.asyncio
    async def test_averages_without_text(self, db_session, reviewed):
        """Test the overview carries averages but never review text."""
        dashboard = await DashboardService(db_session).build(reviewed.identities["root"])

        assert dashboard.average_faculty_rating_by_school == {
            reviewed["school_a"]: Decimal("4.50"),
            reviewed["school_b"]: Decimal("3.00"),
        }
        assert "comment" not in keys_of(dashboard.model_dump())


class TestAdminDashboard:
    """Tests for school and academic admin dashboards."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("who", ["zed", "amy"])
    async def test_own_school_only(self, db_session, reviewed, who):
        dashboard = await DashboardService(db_session).build(reviewed.identities[who])

        assert dashboard.scope == "admin"
        assert dashboard.school.name == "Alpha High"
        assert dashboard.counts.faculty == 3
        assert dashboard.faculty_average == Decimal("4.50")
        assert dashboard.student_average == Decimal("4.00")
        assert dashboard.admin_review_average == Decimal("4.00")


class TestFacultyDashboard:
    """Tests for the faculty dashboard."""

    @pytest.mark.asyncio
    async def test_assignments_and_ratings(self, db_session, reviewed):
        dashboard = await DashboardService(db_session).build(reviewed.identities["alice"])

        assert dashboard.scope == "faculty"
        assert dashboard.faculty.name == "Alice Smith"
        assert [(a.grade, a.section) for a in dashboard.assignments] == [(9, "A")]
        assert dashboard.students_count == 2
        assert dashboard.average_rating == Decimal("4.50")
        assert dashboard.review_count == 2

    @pytest.mark.asyncio
    async def test_received_reviews_hide_authors(self, db_session, reviewed):
        dashboard = await DashboardService(db_session).build(reviewed.identities["alice"])

        keys = keys_of(dashboard.model_dump())
        assert "created_by_student_id" not in keys
        assert "created_by_parent_id" not in keys
        assert sorted(r.rating for r in dashboard.received_reviews) == [4, 5]

    @pytest.mark.asyncio
    async def test_faculty_without_classes(self, db_session, reviewed):
        dashboard = await DashboardService(db_session).build(reviewed.identities["carol"])

        assert dashboard.assignments == []
        assert dashboard.students_count == 0
        assert dashboard.average_rating is None

    @pytest.mark.asyncio
    async def test_missing_profile(self, db_session, world):
        orphan = IdentityContext(user_id="no-profile", role=Role.FACULTY, school_id=world["school_a"])

        with pytest.raises(AuthorizationError):
            await DashboardService(db_session).build(orphan)


class TestStudentDashboard:
    """Tests for student and parent dashboards."""

    @pytest.mark.asyncio
    async def test_student(self, db_session, reviewed):
        dashboard = await DashboardService(db_session).build(reviewed.identities["dan"])

        assert dashboard.scope == "student"
        assert dashboard.student.name == "Dan Brown"
        assert [(e.grade, e.section) for e in dashboard.enrollments] == [(9, "A")]
        assert [(t.term, t.subject_name, t.marks) for t in dashboard.term_results] == [
            ("Term 1", "Mathematics", Decimal("88.50"))
        ]
        assert [(r.faculty_name, r.comment) for r in dashboard.received_reviews] == [("Alice Smith", "Diligent")]

    @pytest.mark.asyncio
    async def test_parent_sees_linked_student(self, db_session, reviewed):
        dashboard = await DashboardService(db_session).build(reviewed.identities["dan_parent"])

        assert dashboard.scope == "parent"
        assert dashboard.student.id == reviewed["dan"]
        assert len(dashboard.received_reviews) == 1

    @pytest.mark.asyncio
    async def test_student_without_reviews(self, db_session, reviewed):
        dashboard = await DashboardService(db_session).build(reviewed.identities["eve"])

        assert dashboard.received_reviews == []
        assert dashboard.term_results == []

    @pytest.mark.asyncio
    async def test_missing_parent_profile(self, db_session, world):
        orphan = IdentityContext(user_id="no-profile", role=Role.PARENT, school_id=world["school_a"])

        with pytest.raises(AuthorizationError):
            await DashboardService(db_session).build(orphan)
