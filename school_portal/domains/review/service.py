# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Review engine.

Two write paths, each a fixed sequence of gates:

Faculty review (student or parent rates a teacher):
    authorize role -> resolve target faculty -> resolve author profile
    -> validate -> persist

Student review (a teacher rates a student):
    authorize role -> resolve author faculty -> resolve target student
    -> validate -> persist

The author is always the caller's own profile, found by user id. The
review's school is taken from the target. Author and target must share a
school. Submissions are not deduplicated.
"""

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from school_portal.core.config.settings import ReviewSettings
from school_portal.core.errors import AuthorizationError, NotFoundError
from school_portal.domains.access.resolver import load_taught_section_ids
from school_portal.domains.access.scope import EffectiveFilters
from school_portal.domains.identity.context import IdentityContext
from school_portal.domains.review.normalize import normalize_comment, normalize_rating
from school_portal.infrastructure.database.models import (
    FacultyProfile,
    FacultyReview,
    ParentProfile,
    StudentEnrollment,
    StudentProfile,
    StudentReview,
)
from school_portal.models.common import ResourceKind, Role
from school_portal.models.review import ReviewItem

logger = logging.getLogger(__name__)


class ReviewService:
    """Creates and lists reviews.

    Attributes:
        _db: Async database session.
        _settings: Review intake settings.
    """

    def __init__(self, db: AsyncSession, settings: ReviewSettings | None = None) -> None:
        self._db = db
        self._settings = settings or ReviewSettings()

    async def create_faculty_review(
        self,
        identity: IdentityContext,
        faculty_id: str,
        rating: Any,
        comment: str | None = None,
    ) -> FacultyReview:
        """Record a student's or parent's review of a faculty member.

        Args:
            identity: The caller.
            faculty_id: Target FacultyProfile id.
            rating: Loose rating input, normalized to [1, 5].
            comment: Optional comment, truncated.

        Returns:
            The persisted FacultyReview.

        Raises:
            AuthorizationError: If the caller is not a student or parent, has
                no profile, or belongs to another school than the faculty.
            NotFoundError: If the faculty does not exist.
            ValidationError: If the rating cannot be read as a number.
        """
        self._require_active(identity)
        if identity.role not in (Role.STUDENT, Role.PARENT):
            raise AuthorizationError("Not allowed to rate faculty")

        faculty = await self._get_faculty(faculty_id)

        if identity.role is Role.STUDENT:
            author: StudentProfile | ParentProfile | None = await self._get_student_by_user(identity.user_id)
        else:
            author = await self._get_parent_by_user(identity.user_id)
        if author is None:
            raise AuthorizationError(f"No {identity.role.value} profile for this account")

        normalized_rating = normalize_rating(rating)
        normalized_comment = normalize_comment(comment, self._settings.comment_max_length)
        self._require_same_school(author.school_id, faculty.school_id)

        review = FacultyReview(
            school_id=faculty.school_id,
            faculty_id=faculty.id,
            rating=normalized_rating,
            comment=normalized_comment,
            created_by_student_id=author.id if identity.role is Role.STUDENT else None,
            created_by_parent_id=author.id if identity.role is Role.PARENT else None,
        )
        self._db.add(review)
        await self._db.commit()
        await self._db.refresh(review)

        logger.info(
            "Created faculty review: id=%s, school=%s, faculty=%s, author_role=%s",
            review.id,
            review.school_id,
            review.faculty_id,
            identity.role.value,
        )
        return review

    async def create_student_review(
        self,
        identity: IdentityContext,
        student_id: str,
        rating: Any = None,
        comment: str | None = None,
    ) -> StudentReview:
        """Record a faculty member's private review of a student.

        Args:
            identity: The caller.
            student_id: Target StudentProfile id.
            rating: Optional loose rating; blank means no rating.
            comment: Optional comment, truncated.

        Returns:
            The persisted StudentReview.

        Raises:
            AuthorizationError: If the caller is not faculty, has no faculty
                profile, is in another school than the student, or (with
                require_teaching_assignment) does not teach the student.
            NotFoundError: If the student does not exist.
            ValidationError: If a non-blank rating cannot be read as a number.
        """
        self._require_active(identity)
        if identity.role is not Role.FACULTY:
            raise AuthorizationError("Not allowed to rate students")

        faculty = await self._get_faculty_by_user(identity.user_id)
        if faculty is None:
            raise AuthorizationError("No faculty profile for this account")

        student = await self._get_student(student_id)

        normalized_rating = normalize_rating(rating, required=False)
        normalized_comment = normalize_comment(comment, self._settings.comment_max_length)
        self._require_same_school(faculty.school_id, student.school_id)
        if self._settings.require_teaching_assignment:
            await self._require_teaches(faculty.id, student.id)

        review = StudentReview(
            school_id=student.school_id,
            student_id=student.id,
            faculty_id=faculty.id,
            rating=normalized_rating,
            comment=normalized_comment,
            is_private=True,
        )
        self._db.add(review)
        await self._db.commit()
        await self._db.refresh(review)

        logger.info(
            "Created student review: id=%s, school=%s, student=%s, faculty=%s",
            review.id,
            review.school_id,
            review.student_id,
            review.faculty_id,
        )
        return review

    async def list_reviews(self, scope: EffectiveFilters) -> list[ReviewItem]:
        """List review rows visible under a reviews scope.

        A student or parent scope yields the student's received reviews; a
        faculty scope yields the faculty member's received reviews; an admin
        scope yields every review in the school. Faculty review authors are
        never exposed.

        Args:
            scope: Resolved reviews scope.

        Returns:
            Reviews, newest first.

        Raises:
            AuthorizationError: If the scope only permits aggregates.
        """
        if scope.resource_kind is not ResourceKind.REVIEWS:
            raise ValueError(f"Scope resolved for {scope.resource_kind.value}, not reviews")
        if scope.aggregate_only:
            raise AuthorizationError("Only rating averages are available across schools")

        items: list[ReviewItem] = []

        if scope.subject_student_id is None:
            stmt = select(FacultyReview).options(selectinload(FacultyReview.faculty))
            if scope.school_id is not None:
                stmt = stmt.where(FacultyReview.school_id == scope.school_id)
            if scope.subject_faculty_id is not None:
                stmt = stmt.where(FacultyReview.faculty_id == scope.subject_faculty_id)
            result = await self._db.execute(stmt)
            items.extend(
                ReviewItem(
                    id=r.id,
                    kind="faculty",
                    school_id=r.school_id,
                    faculty_id=r.faculty_id,
                    faculty_name=r.faculty.name,
                    rating=r.rating,
                    comment=r.comment,
                    created_at=r.created_at,
                )
                for r in result.scalars().all()
            )

        if scope.subject_faculty_id is None:
            stmt = select(StudentReview).options(selectinload(StudentReview.faculty))
            if scope.school_id is not None:
                stmt = stmt.where(StudentReview.school_id == scope.school_id)
            if scope.subject_student_id is not None:
                stmt = stmt.where(StudentReview.student_id == scope.subject_student_id)
            result = await self._db.execute(stmt)
            items.extend(
                ReviewItem(
                    id=r.id,
                    kind="student",
                    school_id=r.school_id,
                    faculty_id=r.faculty_id,
                    faculty_name=r.faculty.name,
                    student_id=r.student_id,
                    rating=r.rating,
                    comment=r.comment,
                    created_at=r.created_at,
                )
                for r in result.scalars().all()
            )

        items.sort(key=lambda i: (i.created_at is not None, i.created_at, i.id), reverse=True)
        end = scope.offset + scope.limit if scope.limit is not None else None
        return items[scope.offset:end]

    @staticmethod
    def _require_active(identity: IdentityContext) -> None:
        if not identity.is_active:
            raise AuthorizationError("Account is inactive")

    @staticmethod
    def _require_same_school(author_school_id: str | None, target_school_id: str) -> None:
        if author_school_id != target_school_id:
            logger.warning(
                "Rejected cross-school review: author_school=%s, target_school=%s",
                author_school_id,
                target_school_id,
            )
            raise AuthorizationError("Cannot review outside your school")

    async def _require_teaches(self, faculty_id: str, student_id: str) -> None:
        taught = await load_taught_section_ids(self._db, faculty_id)
        if taught:
            result = await self._db.execute(
                select(StudentEnrollment.id)
                .where(
                    StudentEnrollment.student_id == student_id,
                    StudentEnrollment.class_section_id.in_(sorted(taught)),
                )
                .limit(1)
            )
            if result.scalar_one_or_none() is not None:
                return
        raise AuthorizationError("Student is not in a section you teach")

    async def _get_faculty(self, faculty_id: str) -> FacultyProfile:
        result = await self._db.execute(select(FacultyProfile).where(FacultyProfile.id == faculty_id))
        faculty = result.scalar_one_or_none()
        if faculty is None:
            raise NotFoundError("Faculty not found")
        return faculty

    async def _get_student(self, student_id: str) -> StudentProfile:
        result = await self._db.execute(select(StudentProfile).where(StudentProfile.id == student_id))
        student = result.scalar_one_or_none()
        if student is None:
            raise NotFoundError("Student not found")
        return student

    async def _get_faculty_by_user(self, user_id: str) -> FacultyProfile | None:
        result = await self._db.execute(select(FacultyProfile).where(FacultyProfile.user_id == user_id))
        return result.scalar_one_or_none()

    async def _get_student_by_user(self, user_id: str) -> StudentProfile | None:
        result = await self._db.execute(select(StudentProfile).where(StudentProfile.user_id == user_id))
        return result.scalar_one_or_none()

    async def _get_parent_by_user(self, user_id: str) -> ParentProfile | None:
        result = await self._db.execute(select(ParentProfile).where(ParentProfile.user_id == user_id))
        return result.scalar_one_or_none()
