# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User accounts and the role-specific profiles attached to them.

Exactly one profile is attached to each user, selected by role:
admins (super, school, academic) get an AdminProfile, faculty a
FacultyProfile, students a StudentProfile and parents a ParentProfile.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from school_portal.infrastructure.database.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from school_portal.infrastructure.database.models.review import FacultyReview, StudentReview
    from school_portal.infrastructure.database.models.school import (
        StudentEnrollment,
        Subject,
        TeachingAssignment,
        TermResult,
    )


class User(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """An authenticated identity.

    school_id is null only for the super-admin.
    """

    __tablename__ = "users"

    email: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)
    mobile: Mapped[str | None] = mapped_column(String(20), unique=True, nullable=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    school_id: Mapped[str | None] = mapped_column(
        ForeignKey("schools.id", ondelete="CASCADE"), nullable=True, index=True
    )

    @validates("email")
    def _lowercase_email(self, key: str, value: str | None) -> str | None:
        return value.strip().lower() if value else None


class AdminProfile(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Profile for super, school and academic admins."""

    __tablename__ = "admin_profiles"

    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    school_id: Mapped[str | None] = mapped_column(
        ForeignKey("schools.id", ondelete="CASCADE"), nullable=True, index=True
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    designation: Mapped[str | None] = mapped_column(String(100), nullable=True)


class FacultyProfile(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Profile for a teacher."""

    __tablename__ = "faculty_profiles"

    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    school_id: Mapped[str] = mapped_column(ForeignKey("schools.id", ondelete="CASCADE"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    designation: Mapped[str | None] = mapped_column(String(100), nullable=True)
    qualifications: Mapped[str | None] = mapped_column(String(255), nullable=True)
    years_of_experience: Mapped[int | None] = mapped_column(Integer, nullable=True)
    contact: Mapped[str | None] = mapped_column(String(100), nullable=True)

    subjects: Mapped[list[FacultySubject]] = relationship(back_populates="faculty", cascade="all, delete-orphan")
    assignments: Mapped[list[TeachingAssignment]] = relationship(back_populates="faculty")
    received_reviews: Mapped[list[FacultyReview]] = relationship(back_populates="faculty")


class FacultySubject(Base):
    """A faculty member is qualified to teach a subject."""

    __tablename__ = "faculty_subjects"

    faculty_id: Mapped[str] = mapped_column(
        ForeignKey("faculty_profiles.id", ondelete="CASCADE"), primary_key=True
    )
    subject_id: Mapped[str] = mapped_column(ForeignKey("subjects.id", ondelete="CASCADE"), primary_key=True)

    faculty: Mapped[FacultyProfile] = relationship(back_populates="subjects")
    subject: Mapped[Subject] = relationship()


class StudentProfile(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Profile for a student."""

    __tablename__ = "student_profiles"
    __table_args__ = (
        UniqueConstraint(
            "school_id", "grade", "section", "roll_number", name="uq_student_profiles_roll"
        ),
    )

    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    school_id: Mapped[str] = mapped_column(ForeignKey("schools.id", ondelete="CASCADE"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    roll_number: Mapped[str] = mapped_column(String(20), nullable=False)
    grade: Mapped[int] = mapped_column(Integer, nullable=False)
    section: Mapped[str] = mapped_column(String(10), nullable=False)
    parent_name: Mapped[str | None] = mapped_column(String(200), nullable=True)

    enrollments: Mapped[list[StudentEnrollment]] = relationship(back_populates="student")
    term_results: Mapped[list[TermResult]] = relationship(back_populates="student")
    received_reviews: Mapped[list[StudentReview]] = relationship(back_populates="student")
    parents: Mapped[list[ParentProfile]] = relationship(back_populates="student")


class ParentProfile(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Profile for a parent, linked to exactly one student."""

    __tablename__ = "parent_profiles"

    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    school_id: Mapped[str] = mapped_column(ForeignKey("schools.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id: Mapped[str] = mapped_column(
        ForeignKey("student_profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    contact: Mapped[str | None] = mapped_column(String(100), nullable=True)

    student: Mapped[StudentProfile] = relationship(back_populates="parents")
