# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""School (tenant) and academic structure models.

A School is the tenant boundary: every other row below carries the
school_id it belongs to.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from school_portal.infrastructure.database.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from school_portal.infrastructure.database.models.user import FacultyProfile, StudentProfile


class School(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A school served by the portal."""

    __tablename__ = "schools"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(30), nullable=True)


class ClassSection(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A (grade, section) pair within one school."""

    __tablename__ = "class_sections"
    __table_args__ = (
        UniqueConstraint("school_id", "grade", "section", name="uq_class_sections_school_grade_section"),
    )

    school_id: Mapped[str] = mapped_column(ForeignKey("schools.id", ondelete="CASCADE"), nullable=False, index=True)
    grade: Mapped[int] = mapped_column(Integer, nullable=False)
    section: Mapped[str] = mapped_column(String(10), nullable=False)


class Subject(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A subject taught at one school."""

    __tablename__ = "subjects"
    __table_args__ = (
        UniqueConstraint("school_id", "code", name="uq_subjects_school_code"),
    )

    school_id: Mapped[str] = mapped_column(ForeignKey("schools.id", ondelete="CASCADE"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    code: Mapped[str] = mapped_column(String(20), nullable=False)


class TeachingAssignment(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Who teaches which subject to which class section.

    The only source of truth for a faculty member's student roster.
    """

    __tablename__ = "teaching_assignments"
    __table_args__ = (
        Index("ix_teaching_assignments_faculty", "faculty_id"),
        Index("ix_teaching_assignments_class_section", "class_section_id"),
    )

    school_id: Mapped[str] = mapped_column(ForeignKey("schools.id", ondelete="CASCADE"), nullable=False, index=True)
    faculty_id: Mapped[str] = mapped_column(ForeignKey("faculty_profiles.id", ondelete="CASCADE"), nullable=False)
    class_section_id: Mapped[str] = mapped_column(ForeignKey("class_sections.id", ondelete="CASCADE"), nullable=False)
    subject_id: Mapped[str] = mapped_column(ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False)

    faculty: Mapped[FacultyProfile] = relationship(back_populates="assignments")
    class_section: Mapped[ClassSection] = relationship()
    subject: Mapped[Subject] = relationship()


class StudentEnrollment(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """The class section a student is currently in."""

    __tablename__ = "student_enrollments"
    __table_args__ = (
        Index("ix_student_enrollments_class_section", "class_section_id"),
    )

    student_id: Mapped[str] = mapped_column(
        ForeignKey("student_profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    class_section_id: Mapped[str] = mapped_column(ForeignKey("class_sections.id", ondelete="CASCADE"), nullable=False)

    student: Mapped[StudentProfile] = relationship(back_populates="enrollments")
    class_section: Mapped[ClassSection] = relationship()


class TermResult(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A student's marks in one subject for one term."""

    __tablename__ = "term_results"

    school_id: Mapped[str] = mapped_column(ForeignKey("schools.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id: Mapped[str] = mapped_column(
        ForeignKey("student_profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    subject_id: Mapped[str] = mapped_column(ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False)
    term: Mapped[str] = mapped_column(String(50), nullable=False)
    marks: Mapped[Decimal] = mapped_column(Numeric(6, 2), nullable=False)
    max_marks: Mapped[Decimal] = mapped_column(Numeric(6, 2), nullable=False, default=Decimal("100"))

    student: Mapped[StudentProfile] = relationship(back_populates="term_results")
    subject: Mapped[Subject] = relationship()
