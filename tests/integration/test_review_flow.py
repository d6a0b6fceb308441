# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for review creation and scoped listing."""

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from sqlalchemy import delete, select, text

from school_portal.core.config.settings import ReviewSettings
from school_portal.core.errors import AuthorizationError, NotFoundError
from school_portal.domains.access import AccessScopeResolver, RequestedFilters
from school_portal.domains.review import ReviewService
from school_portal.infrastructure.database.models import FacultyReview, ParentProfile, StudentProfile, StudentReview
from school_portal.models.common import ResourceKind

pytestmark = pytest.mark.integration


async def visible(db, world, who, **requested):
    scope = await AccessScopeResolver(db).resolve(
        world.identities[who], ResourceKind.REVIEWS, RequestedFilters(**requested)
    )
    return await ReviewService(db).list_reviews(scope)


class TestFacultyReviews:
    """Tests for students and parents reviewing faculty."""

    @pytest.mark.asyncio
    async def test_student_review_persisted(self, db_session, world):
        review = await ReviewService(db_session).create_faculty_review(
            world.identities["dan"], world["alice"], "4.5", "Explains clearly"
        )

        stored = (await db_session.execute(select(FacultyReview))).scalars().all()
        assert [r.id for r in stored] == [review.id]
        assert review.rating == 5
        assert review.school_id == world["school_a"]
        assert review.created_by_student_id == world["dan"]
        assert review.created_by_parent_id is None
        assert review.created_at is not None

    @pytest.mark.asyncio
    async def test_parent_review_attributed_to_parent(self, db_session, world):
        review = await ReviewService(db_session).create_faculty_review(
            world.identities["dan_parent"], world["bob"], 2
        )

        assert review.created_by_parent_id == world["dan_parent"]
        assert review.created_by_student_id is None

    @pytest.mark.asyncio
    async def test_cross_school_rejected(self, db_session, world):
        with pytest.raises(AuthorizationError):
            await ReviewService(db_session).create_faculty_review(world.identities["dan"], world["xavier"], 5)

        assert (await db_session.execute(select(FacultyReview))).scalars().all() == []

    @pytest.mark.asyncio
    async def test_unknown_faculty(self, db_session, world):
        with pytest.raises(NotFoundError):
            await ReviewService(db_session).create_faculty_review(world.identities["dan"], "no-such-id", 5)

    @pytest.mark.asyncio
    async def test_repeat_submissions_are_kept(self, db_session, world):
        service = ReviewService(db_session)

        await service.create_faculty_review(world.identities["eve"], world["alice"], 3)
        await service.create_faculty_review(world.identities["eve"], world["alice"], 4)

        stored = (await db_session.execute(select(FacultyReview))).scalars().all()
        assert len(stored) == 2


class TestStudentReviews:
    """Tests for faculty reviewing students."""

    @pytest.mark.asyncio
    async def test_private_review_without_rating(self, db_session, world):
        review = await ReviewService(db_session).create_student_review(
            world.identities["bob"], world["dan"], "", "Needs practice"
        )

        assert review.rating is None
        assert review.is_private is True
        assert review.faculty_id == world["bob"]
        assert review.school_id == world["school_a"]

    @pytest.mark.asyncio
    async def test_student_cannot_review_student(self, db_session, world):
        with pytest.raises(AuthorizationError):
            await ReviewService(db_session).create_student_review(world.identities["eve"], world["dan"], 3)

    @pytest.mark.asyncio
    async def test_cross_school_rejected(self, db_session, world):
        with pytest.raises(AuthorizationError):
            await ReviewService(db_session).create_student_review(world.identities["xavier"], world["dan"], 3)

    @pytest.mark.asyncio
    async def test_strict_mode(self, db_session, world):
        """Test require_teaching_assignment limits reviews to taught sections."""
        service = ReviewService(db_session, ReviewSettings(require_teaching_assignment=True))

        review = await service.create_student_review(world.identities["alice"], world["dan"], 4)
        assert review.student_id == world["dan"]

        with pytest.raises(AuthorizationError):
            await service.create_student_review(world.identities["alice"], world["frank"], 4)
        with pytest.raises(AuthorizationError):
            await service.create_student_review(world.identities["carol"], world["dan"], 4)


class TestListReviews:
    """Tests for scoped review listing."""

    @pytest.fixture
    def stamp(self):
        base = datetime(2025, 1, 1, tzinfo=timezone.utc)
        return lambda minutes: base + timedelta(minutes=minutes)

    @pytest_asyncio.fixture
    async def seeded(self, db_session, world, stamp):
        db_session.add_all([
            FacultyReview(school_id=world["school_a"], faculty_id=world["alice"], rating=5,
                          comment="Great", created_by_student_id=world["dan"], created_at=stamp(1)),
            FacultyReview(school_id=world["school_a"], faculty_id=world["bob"], rating=3,
                          created_by_parent_id=world["dan_parent"], created_at=stamp(2)),
            StudentReview(school_id=world["school_a"], student_id=world["dan"], faculty_id=world["alice"],
                          rating=4, comment="Diligent", created_at=stamp(3)),
            StudentReview(school_id=world["school_a"], student_id=world["eve"], faculty_id=world["alice"],
                          rating=None, comment="Quiet", created_at=stamp(4)),
            FacultyReview(school_id=world["school_b"], faculty_id=world["xavier"], rating=2,
                          created_by_student_id=world["yara"], created_at=stamp(5)),
        ])
        await db_session.commit()
        return world

    @pytest.mark.asyncio
    async def test_student_sees_own_received_reviews(self, db_session, seeded):
        items = await visible(db_session, seeded, "dan")

        assert [(i.kind, i.comment) for i in items] == [("student", "Diligent")]
        assert items[0].faculty_name == "Alice Smith"

    @pytest.mark.asyncio
    async def test_parent_sees_linked_student(self, db_session, seeded):
        items = await visible(db_session, seeded, "dan_parent")

        assert [i.comment for i in items] == ["Diligent"]

    @pytest.mark.asyncio
    async def test_other_student_sees_nothing_of_dan(self, db_session, seeded):
        items = await visible(db_session, seeded, "eve")

        assert [i.comment for i in items] == ["Quiet"]

    @pytest.mark.asyncio
    async def test_faculty_sees_received_without_authors(self, db_session, seeded):
        items = await visible(db_session, seeded, "alice")

        assert [(i.kind, i.rating) for i in items] == [("faculty", 5)]
        dumped = items[0].model_dump()
        assert "created_by_student_id" not in dumped
        assert dumped["student_id"] is None

    @pytest.mark.asyncio
    async def test_admin_sees_school_newest_first(self, db_session, seeded):
        items = await visible(db_session, seeded, "zed")

        assert [i.comment for i in items] == ["Quiet", "Diligent", None, "Great"]
        assert {i.school_id for i in items} == {seeded["school_a"]}

    @pytest.mark.asyncio
    async def test_admin_paging(self, db_session, seeded):
        items = await visible(db_session, seeded, "amy", limit=2, offset=1)

        assert [i.comment for i in items] == ["Diligent", None]

    @pytest.mark.asyncio
    async def test_super_admin_gets_no_rows(self, db_session, seeded):
        with pytest.raises(AuthorizationError):
            await visible(db_session, seeded, "root")


class TestReviewAuthorRemoval:
    """Tests for what happens to faculty reviews when their author goes away."""

    @pytest.mark.parametrize("column", ["created_by_student_id", "created_by_parent_id"])
    def test_author_foreign_keys_cascade(self, column):
        """Test author links never fall back to NULL, which would break the one-author check."""
        (foreign_key,) = FacultyReview.__table__.c[column].foreign_keys

        assert foreign_key.ondelete == "CASCADE"

    @pytest_asyncio.fixture
    async def enforced(self, db_session, world):
        if db_session.bind.dialect.name == "sqlite":
            await db_session.execute(text("PRAGMA foreign_keys=ON"))
        return world

    @pytest.mark.asyncio
    async def test_deleting_student_removes_their_reviews(self, db_session, enforced):
        world = enforced
        await ReviewService(db_session).create_faculty_review(world.identities["dan"], world["alice"], 4)
        kept = await ReviewService(db_session).create_faculty_review(world.identities["eve"], world["alice"], 3)

        await db_session.execute(delete(StudentProfile).where(StudentProfile.id == world["dan"]))
        await db_session.commit()

        remaining = (await db_session.execute(select(FacultyReview.id))).scalars().all()
        assert remaining == [kept.id]

    @pytest.mark.asyncio
    async def test_deleting_parent_removes_their_reviews(self, db_session, enforced):
        world = enforced
        await ReviewService(db_session).create_faculty_review(world.identities["dan_parent"], world["bob"], 2)

        await db_session.execute(delete(ParentProfile).where(ParentProfile.id == world["dan_parent"]))
        await db_session.commit()

        remaining = (await db_session.execute(select(FacultyReview.id))).scalars().all()
        assert remaining == []
