# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Directory query service.

Applies an already-resolved scope, then the caller's search filters, and
returns ordered summaries. The scope always comes first; search narrows it
further and never replaces it.

Ordering is part of the contract:
- faculty: name ascending
- students: grade, section, roll number ascending
- admins: name ascending
with the row id as a stable tiebreaker.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import Select, and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from school_portal.domains.access.scope import EffectiveFilters
from school_portal.infrastructure.database.models import (
    AdminProfile,
    ClassSection,
    FacultyProfile,
    FacultySubject,
    StudentEnrollment,
    StudentProfile,
    Subject,
    TeachingAssignment,
)
from school_portal.models.common import ResourceKind
from school_portal.models.directory import (
    AdminSummary,
    AssignmentSummary,
    DirectorySearch,
    EnrollmentSummary,
    FacultySummary,
    StudentSummary,
    SubjectSummary,
)

logger = logging.getLogger(__name__)

FACULTY_SORTS: dict[str, tuple[Any, ...]] = {
    "name": (FacultyProfile.name.asc(),),
    "-name": (FacultyProfile.name.desc(),),
    "experience": (FacultyProfile.years_of_experience.asc(), FacultyProfile.name.asc()),
    "-experience": (FacultyProfile.years_of_experience.desc(), FacultyProfile.name.asc()),
}
STUDENT_SORTS: dict[str, tuple[Any, ...]] = {
    "roster": (StudentProfile.grade.asc(), StudentProfile.section.asc(), StudentProfile.roll_number.asc()),
    "name": (StudentProfile.name.asc(),),
    "-name": (StudentProfile.name.desc(),),
}
ADMIN_SORTS: dict[str, tuple[Any, ...]] = {
    "name": (AdminProfile.name.asc(),),
    "-name": (AdminProfile.name.desc(),),
}

DEFAULT_SORTS = {
    ResourceKind.FACULTY: "name",
    ResourceKind.STUDENTS: "roster",
    ResourceKind.ADMINS: "name",
}


def _order_by(sorts: dict[str, tuple[Any, ...]], sort: str | None, kind: ResourceKind) -> tuple[Any, ...]:
    """Whitelisted ordering; unknown keys fall back to the default."""
    if sort and sort not in sorts:
        logger.debug("Ignoring unknown %s sort key: %s", kind.value, sort)
    return sorts.get(sort or "", sorts[DEFAULT_SORTS[kind]])


def _paginate(stmt: Select, effective: EffectiveFilters) -> Select:
    if effective.offset:
        stmt = stmt.offset(effective.offset)
    if effective.limit is not None:
        stmt = stmt.limit(effective.limit)
    return stmt


def _check_kind(effective: EffectiveFilters, expected: ResourceKind) -> None:
    if effective.resource_kind is not expected:
        raise ValueError(f"Scope resolved for {effective.resource_kind.value}, not {expected.value}")


def faculty_summary(faculty: FacultyProfile) -> FacultySummary:
    """Build a FacultySummary from a profile with subjects and assignments loaded."""
    subjects = sorted(
        (SubjectSummary.model_validate(link.subject) for link in faculty.subjects),
        key=lambda s: (s.name, s.id),
    )
    assignments = sorted(
        (
            AssignmentSummary(
                id=a.id,
                class_section_id=a.class_section_id,
                grade=a.class_section.grade,
                section=a.class_section.section,
                subject_id=a.subject_id,
                subject_name=a.subject.name,
            )
            for a in faculty.assignments
        ),
        key=lambda a: (a.grade, a.section, a.subject_name, a.id),
    )
    return FacultySummary(
        id=faculty.id,
        school_id=faculty.school_id,
        name=faculty.name,
        designation=faculty.designation,
        qualifications=faculty.qualifications,
        years_of_experience=faculty.years_of_experience,
        contact=faculty.contact,
        subjects=subjects,
        assignments=assignments,
    )


def student_summary(student: StudentProfile) -> StudentSummary:
    """Build a StudentSummary from a profile with enrollments loaded."""
    enrollments = sorted(
        (
            EnrollmentSummary(
                class_section_id=e.class_section_id,
                grade=e.class_section.grade,
                section=e.class_section.section,
            )
            for e in student.enrollments
        ),
        key=lambda e: (e.grade, e.section),
    )
    return StudentSummary(
        id=student.id,
        school_id=student.school_id,
        name=student.name,
        roll_number=student.roll_number,
        grade=student.grade,
        section=student.section,
        parent_name=student.parent_name,
        enrollments=enrollments,
    )


class DirectoryService:
    """Scoped, filtered, ordered directory listings.

    Read-only. The CSV export consumes exactly these lists.

    Attributes:
        _db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def list_faculty(
        self,
        effective: EffectiveFilters,
        search: DirectorySearch | None = None,
        sort: str | None = None,
    ) -> list[FacultySummary]:
        """List faculty visible under the scope.

        Args:
            effective: Resolved faculty scope.
            search: Name, subject, grade and section filters.
            sort: Optional sort key (name, -name, experience, -experience).

        Returns:
            Faculty summaries in contract order.
        """
        _check_kind(effective, ResourceKind.FACULTY)
        search = search or DirectorySearch()

        stmt = select(FacultyProfile).options(
            selectinload(FacultyProfile.subjects).selectinload(FacultySubject.subject),
            selectinload(FacultyProfile.assignments).options(
                selectinload(TeachingAssignment.class_section),
                selectinload(TeachingAssignment.subject),
            ),
        )
        if effective.school_id is not None:
            stmt = stmt.where(FacultyProfile.school_id == effective.school_id)

        if search.q:
            stmt = stmt.where(FacultyProfile.name.icontains(search.q, autoescape=True))
        if search.subject:
            stmt = stmt.where(
                FacultyProfile.subjects.any(
                    FacultySubject.subject.has(Subject.name.icontains(search.subject, autoescape=True))
                )
            )
        section_filters = []
        if search.grade is not None:
            section_filters.append(ClassSection.grade == search.grade)
        if search.section:
            section_filters.append(ClassSection.section == search.section)
        if section_filters:
            stmt = stmt.where(
                FacultyProfile.assignments.any(TeachingAssignment.class_section.has(and_(*section_filters)))
            )

        stmt = stmt.order_by(*_order_by(FACULTY_SORTS, sort, ResourceKind.FACULTY), FacultyProfile.id.asc())
        result = await self._db.execute(_paginate(stmt, effective))
        return [faculty_summary(f) for f in result.scalars().all()]

    async def list_students(
        self,
        effective: EffectiveFilters,
        search: DirectorySearch | None = None,
        sort: str | None = None,
    ) -> list[StudentSummary]:
        """List students visible under the scope.

        A faculty scope carries class_section_ids; only students enrolled
        in one of those sections are returned.

        Args:
            effective: Resolved students scope.
            search: Name/roll number, grade and section filters.
            sort: Optional sort key (roster, name, -name).

        Returns:
            Student summaries in contract order.
        """
        _check_kind(effective, ResourceKind.STUDENTS)
        search = search or DirectorySearch()

        if effective.class_section_ids is not None and not effective.class_section_ids:
            return []

        stmt = select(StudentProfile).options(
            selectinload(StudentProfile.enrollments).selectinload(StudentEnrollment.class_section)
        )
        if effective.school_id is not None:
            stmt = stmt.where(StudentProfile.school_id == effective.school_id)
        if effective.class_section_ids is not None:
            stmt = stmt.where(
                StudentProfile.enrollments.any(
                    StudentEnrollment.class_section_id.in_(sorted(effective.class_section_ids))
                )
            )

        if search.q:
            stmt = stmt.where(
                or_(
                    StudentProfile.name.icontains(search.q, autoescape=True),
                    StudentProfile.roll_number.icontains(search.q, autoescape=True),
                )
            )
        if search.grade is not None:
            stmt = stmt.where(StudentProfile.grade == search.grade)
        if search.section:
            stmt = stmt.where(StudentProfile.section == search.section)

        stmt = stmt.order_by(*_order_by(STUDENT_SORTS, sort, ResourceKind.STUDENTS), StudentProfile.id.asc())
        result = await self._db.execute(_paginate(stmt, effective))
        return [student_summary(s) for s in result.scalars().all()]

    async def list_admins(
        self,
        effective: EffectiveFilters,
        search: DirectorySearch | None = None,
        sort: str | None = None,
    ) -> list[AdminSummary]:
        """List admins visible under the scope, filtered by name."""
        _check_kind(effective, ResourceKind.ADMINS)
        search = search or DirectorySearch()

        stmt = select(AdminProfile)
        if effective.school_id is not None:
            stmt = stmt.where(AdminProfile.school_id == effective.school_id)
        if search.q:
            stmt = stmt.where(AdminProfile.name.icontains(search.q, autoescape=True))

        stmt = stmt.order_by(*_order_by(ADMIN_SORTS, sort, ResourceKind.ADMINS), AdminProfile.id.asc())
        result = await self._db.execute(_paginate(stmt, effective))
        return [AdminSummary.model_validate(a) for a in result.scalars().all()]
