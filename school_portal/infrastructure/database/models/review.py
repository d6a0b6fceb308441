# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Review models.

Reviews are append-only. Ratings are stored as integers in [1, 5]; the
CHECK constraints below back the engine's normalization at the storage level.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from school_portal.infrastructure.database.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from school_portal.infrastructure.database.models.user import (
        FacultyProfile,
        ParentProfile,
        StudentProfile,
    )

COMMENT_MAX_LENGTH = 500


class FacultyReview(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A student or parent rating a teacher.

    Exactly one of created_by_student_id / created_by_parent_id is set.
    """

    __tablename__ = "faculty_reviews"
    __table_args__ = (
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_faculty_reviews_rating"),
        CheckConstraint(
            "(created_by_student_id IS NULL) <> (created_by_parent_id IS NULL)",
            name="ck_faculty_reviews_single_author",
        ),
    )

    school_id: Mapped[str] = mapped_column(ForeignKey("schools.id", ondelete="CASCADE"), nullable=False, index=True)
    faculty_id: Mapped[str] = mapped_column(
        ForeignKey("faculty_profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[str | None] = mapped_column(String(COMMENT_MAX_LENGTH), nullable=True)
    created_by_student_id: Mapped[str | None] = mapped_column(
        ForeignKey("student_profiles.id", ondelete="CASCADE"), nullable=True
    )
    created_by_parent_id: Mapped[str | None] = mapped_column(
        ForeignKey("parent_profiles.id", ondelete="CASCADE"), nullable=True
    )

    faculty: Mapped[FacultyProfile] = relationship(back_populates="received_reviews")
    created_by_student: Mapped[StudentProfile | None] = relationship(foreign_keys=[created_by_student_id])
    created_by_parent: Mapped[ParentProfile | None] = relationship(foreign_keys=[created_by_parent_id])

    @property
    def author_id(self) -> str | None:
        """The single authoring profile id."""
        return self.created_by_student_id or self.created_by_parent_id


class StudentReview(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A teacher rating a student. Always private."""

    __tablename__ = "student_reviews"
    __table_args__ = (
        CheckConstraint("rating IS NULL OR rating BETWEEN 1 AND 5", name="ck_student_reviews_rating"),
        CheckConstraint("is_private", name="ck_student_reviews_private"),
    )

    school_id: Mapped[str] = mapped_column(ForeignKey("schools.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id: Mapped[str] = mapped_column(
        ForeignKey("student_profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    faculty_id: Mapped[str] = mapped_column(
        ForeignKey("faculty_profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    rating: Mapped[int | None] = mapped_column(Integer, nullable=True)
    comment: Mapped[str | None] = mapped_column(String(COMMENT_MAX_LENGTH), nullable=True)
    is_private: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    student: Mapped[StudentProfile] = relationship(back_populates="received_reviews")
    faculty: Mapped[FacultyProfile] = relationship()


class AdminReview(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """An untargeted rating of the school itself."""

    __tablename__ = "admin_reviews"
    __table_args__ = (
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_admin_reviews_rating"),
    )

    school_id: Mapped[str] = mapped_column(ForeignKey("schools.id", ondelete="CASCADE"), nullable=False, index=True)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    category: Mapped[str | None] = mapped_column(String(50), nullable=True)
    comment: Mapped[str | None] = mapped_column(String(COMMENT_MAX_LENGTH), nullable=True)
