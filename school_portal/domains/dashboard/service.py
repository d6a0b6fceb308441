# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Role-branched dashboard summaries.

Each role maps to exactly one builder in _BUILDERS; the table is checked
against Role when this module is imported, so a new role without a builder
fails at startup rather than at request time.
"""

import logging
from collections.abc import Awaitable, Callable

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from school_portal.core.errors import AuthorizationError, NotFoundError
from school_portal.domains.directory.service import faculty_summary, student_summary
from school_portal.domains.identity.context import IdentityContext
from school_portal.domains.rating.aggregator import RatingAggregator
from school_portal.infrastructure.database.models import (
    AdminProfile,
    ClassSection,
    FacultyProfile,
    FacultyReview,
    FacultySubject,
    ParentProfile,
    School,
    StudentEnrollment,
    StudentProfile,
    StudentReview,
    Subject,
    TeachingAssignment,
    TermResult,
)
from school_portal.models.common import Role
from school_portal.models.dashboard import (
    AdminDashboard,
    Dashboard,
    FacultyDashboard,
    ReceivedFacultyReview,
    ReceivedStudentReview,
    SchoolCounts,
    SchoolInfo,
    SchoolOverview,
    StudentDashboard,
    SuperAdminDashboard,
    TermResultSummary,
)

logger = logging.getLogger(__name__)

_COUNTED = {
    "faculty": FacultyProfile,
    "students": StudentProfile,
    "admins": AdminProfile,
    "classes": ClassSection,
    "subjects": Subject,
}


class DashboardService:
    """Builds the dashboard for the calling role.

    Attributes:
        _db: Async database session.
        _ratings: Rating aggregator on the same session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self._db = db
        self._ratings = RatingAggregator(db)

    async def build(self, identity: IdentityContext) -> Dashboard:
        """Build the caller's dashboard.

        Raises:
            AuthorizationError: If the account is inactive or lacks the
                profile its role requires.
        """
        if not identity.is_active:
            raise AuthorizationError("Account is inactive")
        return await _BUILDERS[identity.role](self, identity)

    async def _super_admin(self, identity: IdentityContext) -> SuperAdminDashboard:
        result = await self._db.execute(select(School).order_by(School.name.asc(), School.id.asc()))
        schools = result.scalars().all()

        counts: dict[str, dict[str, int]] = {}
        for key, model in _COUNTED.items():
            grouped = await self._db.execute(
                select(model.school_id, func.count(model.id)).group_by(model.school_id)
            )
            for school_id, count in grouped.all():
                if school_id is not None:
                    counts.setdefault(school_id, {})[key] = count

        overview = [
            SchoolOverview(
                id=school.id,
                name=school.name,
                address=school.address,
                phone=school.phone,
                counts=SchoolCounts(**counts.get(school.id, {})),
            )
            for school in schools
        ]
        averages = await self._ratings.school_faculty_averages()
        return SuperAdminDashboard(schools=overview, average_faculty_rating_by_school=averages)

    async def _school_admin(self, identity: IdentityContext) -> AdminDashboard:
        school_id = identity.school_id
        if school_id is None:
            raise AuthorizationError("Account has no school")

        school = await self._db.get(School, school_id)
        values: dict[str, int] = {}
        for key, model in _COUNTED.items():
            result = await self._db.execute(select(func.count(model.id)).where(model.school_id == school_id))
            values[key] = int(result.scalar_one() or 0)

        return AdminDashboard(
            school=_school_info(school) if school is not None else None,
            counts=SchoolCounts(**values),
            faculty_average=await self._ratings.school_faculty_average(school_id),
            student_average=await self._ratings.school_student_average(school_id),
            admin_review_average=await self._ratings.school_admin_review_average(school_id),
        )

    async def _faculty(self, identity: IdentityContext) -> FacultyDashboard:
        result = await self._db.execute(
            select(FacultyProfile)
            .where(FacultyProfile.user_id == identity.user_id)
            .options(
                selectinload(FacultyProfile.subjects).selectinload(FacultySubject.subject),
                selectinload(FacultyProfile.assignments).options(
                    selectinload(TeachingAssignment.class_section),
                    selectinload(TeachingAssignment.subject),
                ),
            )
        )
        faculty = result.scalar_one_or_none()
        if faculty is None:
            raise AuthorizationError("No faculty profile for this account")

        summary = faculty_summary(faculty)
        section_ids = sorted({a.class_section_id for a in faculty.assignments})
        students_count = 0
        if section_ids:
            result = await self._db.execute(
                select(func.count(StudentEnrollment.id)).where(
                    StudentEnrollment.class_section_id.in_(section_ids)
                )
            )
            students_count = int(result.scalar_one() or 0)

        result = await self._db.execute(
            select(FacultyReview)
            .where(FacultyReview.faculty_id == faculty.id)
            .order_by(FacultyReview.created_at.desc(), FacultyReview.id.desc())
        )
        received = [
            ReceivedFacultyReview(rating=r.rating, comment=r.comment, created_at=r.created_at)
            for r in result.scalars().all()
        ]

        return FacultyDashboard(
            faculty=summary,
            assignments=summary.assignments,
            students_count=students_count,
            average_rating=await self._ratings.faculty_average(faculty.id),
            review_count=len(received),
            received_reviews=received,
        )

    async def _student(self, identity: IdentityContext) -> StudentDashboard:
        if identity.role is Role.PARENT:
            result = await self._db.execute(
                select(ParentProfile.student_id).where(ParentProfile.user_id == identity.user_id)
            )
            student_id = result.scalar_one_or_none()
            if student_id is None:
                raise AuthorizationError("No parent profile for this account")
            condition = StudentProfile.id == student_id
        else:
            condition = StudentProfile.user_id == identity.user_id

        result = await self._db.execute(
            select(StudentProfile)
            .where(condition)
            .options(
                selectinload(StudentProfile.enrollments).selectinload(StudentEnrollment.class_section),
                selectinload(StudentProfile.term_results).selectinload(TermResult.subject),
                selectinload(StudentProfile.received_reviews).selectinload(StudentReview.faculty),
            )
        )
        student = result.scalar_one_or_none()
        if student is None:
            if identity.role is Role.PARENT:
                raise NotFoundError("Linked student not found")
            raise AuthorizationError("No student profile for this account")

        summary = student_summary(student)
        term_results = sorted(
            (
                TermResultSummary(
                    id=t.id,
                    term=t.term,
                    subject_id=t.subject_id,
                    subject_name=t.subject.name,
                    marks=t.marks,
                    max_marks=t.max_marks,
                )
                for t in student.term_results
            ),
            key=lambda t: (t.term, t.subject_name, t.id),
        )
        reviews = sorted(
            student.received_reviews,
            key=lambda r: (r.created_at is not None, r.created_at, r.id),
            reverse=True,
        )
        return StudentDashboard(
            scope=identity.role.value,
            student=summary,
            enrollments=summary.enrollments,
            term_results=term_results,
            received_reviews=[
                ReceivedStudentReview(
                    rating=r.rating,
                    comment=r.comment,
                    faculty_id=r.faculty_id,
                    faculty_name=r.faculty.name,
                    created_at=r.created_at,
                )
                for r in reviews
            ],
        )


def _school_info(school: School) -> SchoolInfo:
    return SchoolInfo(id=school.id, name=school.name, address=school.address, phone=school.phone)


_BUILDERS: dict[Role, Callable[[DashboardService, IdentityContext], Awaitable[Dashboard]]] = {
    Role.SUPER_ADMIN: DashboardService._super_admin,
    Role.SCHOOL_ADMIN: DashboardService._school_admin,
    Role.ACADEMIC_ADMIN: DashboardService._school_admin,
    Role.FACULTY: DashboardService._faculty,
    Role.STUDENT: DashboardService._student,
    Role.PARENT: DashboardService._student,
}

_missing_roles = set(Role) - set(_BUILDERS)
if _missing_roles:
    raise RuntimeError(f"Dashboard has no builder for roles: {sorted(r.value for r in _missing_roles)}")
