# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the review service."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from school_portal.core.config.settings import ReviewSettings
from school_portal.core.errors import AuthorizationError, NotFoundError, ValidationError
from school_portal.domains.access.scope import EffectiveFilters
from school_portal.domains.identity import IdentityContext
from school_portal.domains.review import ReviewService
from school_portal.infrastructure.database.models import FacultyReview, StudentReview
from school_portal.models.common import ResourceKind, Role


@pytest.fixture
def mock_db():
    """Create mock database session."""
    db = AsyncMock()
    db.add = MagicMock()
    db.commit = AsyncMock()
    db.refresh = AsyncMock()
    db.execute = AsyncMock()
    return db


@pytest.fixture
def review_service(mock_db):
    return ReviewService(db=mock_db)


def result_of(value):
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


def profile(school_id: str = "school-a", **fields):
    row = MagicMock()
    row.id = str(uuid4())
    row.school_id = school_id
    for key, value in fields.items():
        setattr(row, key, value)
    return row


def caller(role: Role, **kwargs) -> IdentityContext:
    return IdentityContext(user_id=str(uuid4()), role=role, school_id="school-a", **kwargs)


class TestCreateFacultyReview:
    """Tests for students and parents rating faculty."""

    @pytest.mark.asyncio
    async def test_student_review(self, review_service, mock_db):
        """Test a student's review is attributed to the student profile."""
        faculty = profile()
        student = profile()
        mock_db.execute.side_effect = [result_of(faculty), result_of(student)]

        review = await review_service.create_faculty_review(caller(Role.STUDENT), faculty.id, 4.6, "  Good  ")

        assert isinstance(review, FacultyReview)
        assert review.rating == 5
        assert review.comment == "  Good  "
        assert review.school_id == "school-a"
        assert review.created_by_student_id == student.id
        assert review.created_by_parent_id is None
        mock_db.add.assert_called_once_with(review)
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_parent_review(self, review_service, mock_db):
        """Test a parent's review is attributed to the parent profile."""
        faculty = profile()
        parent = profile()
        mock_db.execute.side_effect = [result_of(faculty), result_of(parent)]

        review = await review_service.create_faculty_review(caller(Role.PARENT), faculty.id, "0")

        assert review.rating == 1
        assert review.comment is None
        assert review.created_by_parent_id == parent.id
        assert review.created_by_student_id is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("role", [Role.FACULTY, Role.SCHOOL_ADMIN, Role.ACADEMIC_ADMIN, Role.SUPER_ADMIN])
    async def test_other_roles_rejected(self, review_service, mock_db, role):
        with pytest.raises(AuthorizationError):
            await review_service.create_faculty_review(caller(role), "fac-1", 4)

        mock_db.execute.assert_not_called()
        mock_db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_inactive_rejected(self, review_service, mock_db):
        with pytest.raises(AuthorizationError):
            await review_service.create_faculty_review(caller(Role.STUDENT, is_active=False), "fac-1", 4)

    @pytest.mark.asyncio
    async def test_unknown_faculty(self, review_service, mock_db):
        mock_db.execute.side_effect = [result_of(None)]

        with pytest.raises(NotFoundError):
            await review_service.create_faculty_review(caller(Role.STUDENT), "missing", 4)

    @pytest.mark.asyncio
    async def test_missing_author_profile(self, review_service, mock_db):
        mock_db.execute.side_effect = [result_of(profile()), result_of(None)]

        with pytest.raises(AuthorizationError):
            await review_service.create_faculty_review(caller(Role.STUDENT), "fac-1", 4)

    @pytest.mark.asyncio
    async def test_cross_school_rejected(self, review_service, mock_db):
        """Test a student cannot review faculty of another school."""
        mock_db.execute.side_effect = [result_of(profile("school-b")), result_of(profile("school-a"))]

        with pytest.raises(AuthorizationError):
            await review_service.create_faculty_review(caller(Role.STUDENT), "fac-1", 4)

        mock_db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_unreadable_rating(self, review_service, mock_db):
        mock_db.execute.side_effect = [result_of(profile()), result_of(profile())]

        with pytest.raises(ValidationError):
            await review_service.create_faculty_review(caller(Role.STUDENT), "fac-1", "great")

        mock_db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_comment_truncated_to_setting(self, mock_db):
        service = ReviewService(mock_db, ReviewSettings(comment_max_length=10))
        mock_db.execute.side_effect = [result_of(profile()), result_of(profile())]

        review = await service.create_faculty_review(caller(Role.STUDENT), "fac-1", 3, "x" * 50)

        assert review.comment == "x" * 10


class TestCreateStudentReview:
    """Tests for faculty rating students."""

    @pytest.mark.asyncio
    async def test_faculty_review(self, review_service, mock_db):
        """Test a faculty review is private and school-scoped by the student."""
        faculty = profile()
        student = profile()
        mock_db.execute.side_effect = [result_of(faculty), result_of(student)]

        review = await review_service.create_student_review(caller(Role.FACULTY), student.id, None, "Attentive")

        assert isinstance(review, StudentReview)
        assert review.rating is None
        assert review.is_private is True
        assert review.faculty_id == faculty.id
        assert review.student_id == student.id
        assert review.school_id == "school-a"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("role", [Role.STUDENT, Role.PARENT, Role.SCHOOL_ADMIN, Role.SUPER_ADMIN])
    async def test_non_faculty_rejected(self, review_service, mock_db, role):
        with pytest.raises(AuthorizationError):
            await review_service.create_student_review(caller(role), "stu-1", 3)

        mock_db.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_faculty_profile(self, review_service, mock_db):
        mock_db.execute.side_effect = [result_of(None)]

        with pytest.raises(AuthorizationError):
            await review_service.create_student_review(caller(Role.FACULTY), "stu-1", 3)

    @pytest.mark.asyncio
    async def test_unknown_student(self, review_service, mock_db):
        mock_db.execute.side_effect = [result_of(profile()), result_of(None)]

        with pytest.raises(NotFoundError):
            await review_service.create_student_review(caller(Role.FACULTY), "missing", 3)

    @pytest.mark.asyncio
    async def test_cross_school_rejected(self, review_service, mock_db):
        mock_db.execute.side_effect = [result_of(profile("school-a")), result_of(profile("school-b"))]

        with pytest.raises(AuthorizationError):
            await review_service.create_student_review(caller(Role.FACULTY), "stu-1", 3)

    @pytest.mark.asyncio
    async def test_strict_mode_requires_teaching(self, mock_db):
        """Test require_teaching_assignment rejects a faculty who teaches no sections."""
        service = ReviewService(mock_db, ReviewSettings(require_teaching_assignment=True))
        taught = MagicMock()
        taught.scalars.return_value.all.return_value = []
        mock_db.execute.side_effect = [result_of(profile()), result_of(profile()), taught]

        with pytest.raises(AuthorizationError):
            await service.create_student_review(caller(Role.FACULTY), "stu-1", 3)

        mock_db.add.assert_not_called()


class TestListReviews:
    """Tests for list_reviews guards."""

    @pytest.mark.asyncio
    async def test_aggregate_only_scope(self, review_service):
        scope = EffectiveFilters(resource_kind=ResourceKind.REVIEWS, school_id=None, aggregate_only=True)

        with pytest.raises(AuthorizationError):
            await review_service.list_reviews(scope)

    @pytest.mark.asyncio
    async def test_wrong_kind(self, review_service):
        scope = EffectiveFilters(resource_kind=ResourceKind.FACULTY, school_id="school-a")

        with pytest.raises(ValueError):
            await review_service.list_reviews(scope)

    @pytest.mark.asyncio
    async def test_student_scope_skips_faculty_reviews(self, review_service, mock_db):
        """Test a student scope queries only the student review table."""
        faculty = MagicMock()
        faculty.name = "Alice Smith"
        row = MagicMock(
            id="r1",
            school_id="school-a",
            faculty_id="fac-1",
            faculty=faculty,
            student_id="stu-1",
            rating=4,
            comment="Well done",
            created_at=datetime.now(timezone.utc),
        )
        result = MagicMock()
        result.scalars.return_value.all.return_value = [row]
        mock_db.execute.return_value = result
        scope = EffectiveFilters(
            resource_kind=ResourceKind.REVIEWS, school_id="school-a", subject_student_id="stu-1"
        )

        items = await review_service.list_reviews(scope)

        assert mock_db.execute.await_count == 1
        assert [i.kind for i in items] == ["student"]
        assert items[0].faculty_name == "Alice Smith"
