# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Initial portal schema.

Revision ID: 001_initial
Revises: None
Create Date: 2025-01-15

Creates schools, users and profiles, the academic structure (class
sections, subjects, assignments, enrollments, term results) and the
three review tables.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id() -> sa.Column:
    return sa.Column("id", sa.String(36), primary_key=True)


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.func.now(),
    )


def _school_fk(nullable: bool = False) -> sa.Column:
    return sa.Column(
        "school_id",
        sa.String(36),
        sa.ForeignKey("schools.id", ondelete="CASCADE"),
        nullable=nullable,
    )


def upgrade() -> None:
    """Create portal tables."""
    # ==========================================================================
    # Tenants and accounts
    # ==========================================================================
    op.create_table(
        "schools",
        _id(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("address", sa.String(500), nullable=True),
        sa.Column("phone", sa.String(30), nullable=True),
        _created_at(),
    )

    op.create_table(
        "users",
        _id(),
        sa.Column("email", sa.String(255), nullable=True, unique=True),
        sa.Column("mobile", sa.String(20), nullable=True, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        _school_fk(nullable=True),
        _created_at(),
    )
    op.create_index("ix_users_role", "users", ["role"])
    op.create_index("ix_users_school_id", "users", ["school_id"])

    # ==========================================================================
    # Academic structure
    # ==========================================================================
    op.create_table(
        "class_sections",
        _id(),
        _school_fk(),
        sa.Column("grade", sa.Integer, nullable=False),
        sa.Column("section", sa.String(10), nullable=False),
        _created_at(),
        sa.UniqueConstraint("school_id", "grade", "section", name="uq_class_sections_school_grade_section"),
    )
    op.create_index("ix_class_sections_school_id", "class_sections", ["school_id"])

    op.create_table(
        "subjects",
        _id(),
        _school_fk(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("code", sa.String(20), nullable=False),
        _created_at(),
        sa.UniqueConstraint("school_id", "code", name="uq_subjects_school_code"),
    )
    op.create_index("ix_subjects_school_id", "subjects", ["school_id"])

    # ==========================================================================
    # Profiles
    # ==========================================================================
    op.create_table(
        "admin_profiles",
        _id(),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True),
        _school_fk(nullable=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("designation", sa.String(100), nullable=True),
        _created_at(),
    )
    op.create_index("ix_admin_profiles_school_id", "admin_profiles", ["school_id"])

    op.create_table(
        "faculty_profiles",
        _id(),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True),
        _school_fk(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("designation", sa.String(100), nullable=True),
        sa.Column("qualifications", sa.String(255), nullable=True),
        sa.Column("years_of_experience", sa.Integer, nullable=True),
        sa.Column("contact", sa.String(100), nullable=True),
        _created_at(),
    )
    op.create_index("ix_faculty_profiles_school_id", "faculty_profiles", ["school_id"])

    op.create_table(
        "student_profiles",
        _id(),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True),
        _school_fk(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("roll_number", sa.String(20), nullable=False),
        sa.Column("grade", sa.Integer, nullable=False),
        sa.Column("section", sa.String(10), nullable=False),
        sa.Column("parent_name", sa.String(200), nullable=True),
        _created_at(),
        sa.UniqueConstraint("school_id", "grade", "section", "roll_number", name="uq_student_profiles_roll"),
    )
    op.create_index("ix_student_profiles_school_id", "student_profiles", ["school_id"])

    op.create_table(
        "parent_profiles",
        _id(),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True),
        _school_fk(),
        sa.Column(
            "student_id",
            sa.String(36),
            sa.ForeignKey("student_profiles.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("contact", sa.String(100), nullable=True),
        _created_at(),
    )
    op.create_index("ix_parent_profiles_school_id", "parent_profiles", ["school_id"])
    op.create_index("ix_parent_profiles_student_id", "parent_profiles", ["student_id"])

    op.create_table(
        "faculty_subjects",
        sa.Column(
            "faculty_id",
            sa.String(36),
            sa.ForeignKey("faculty_profiles.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("subject_id", sa.String(36), sa.ForeignKey("subjects.id", ondelete="CASCADE"), primary_key=True),
    )

    op.create_table(
        "teaching_assignments",
        _id(),
        _school_fk(),
        sa.Column(
            "faculty_id",
            sa.String(36),
            sa.ForeignKey("faculty_profiles.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "class_section_id",
            sa.String(36),
            sa.ForeignKey("class_sections.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("subject_id", sa.String(36), sa.ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False),
        _created_at(),
    )
    op.create_index("ix_teaching_assignments_school_id", "teaching_assignments", ["school_id"])
    op.create_index("ix_teaching_assignments_faculty", "teaching_assignments", ["faculty_id"])
    op.create_index("ix_teaching_assignments_class_section", "teaching_assignments", ["class_section_id"])

    op.create_table(
        "student_enrollments",
        _id(),
        sa.Column(
            "student_id",
            sa.String(36),
            sa.ForeignKey("student_profiles.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "class_section_id",
            sa.String(36),
            sa.ForeignKey("class_sections.id", ondelete="CASCADE"),
            nullable=False,
        ),
        _created_at(),
    )
    op.create_index("ix_student_enrollments_student_id", "student_enrollments", ["student_id"])
    op.create_index("ix_student_enrollments_class_section", "student_enrollments", ["class_section_id"])

    op.create_table(
        "term_results",
        _id(),
        _school_fk(),
        sa.Column(
            "student_id",
            sa.String(36),
            sa.ForeignKey("student_profiles.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("subject_id", sa.String(36), sa.ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False),
        sa.Column("term", sa.String(50), nullable=False),
        sa.Column("marks", sa.Numeric(6, 2), nullable=False),
        sa.Column("max_marks", sa.Numeric(6, 2), nullable=False),
        _created_at(),
    )
    op.create_index("ix_term_results_school_id", "term_results", ["school_id"])
    op.create_index("ix_term_results_student_id", "term_results", ["student_id"])

    # ==========================================================================
    # Reviews
    # ==========================================================================
    op.create_table(
        "faculty_reviews",
        _id(),
        _school_fk(),
        sa.Column(
            "faculty_id",
            sa.String(36),
            sa.ForeignKey("faculty_profiles.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("rating", sa.Integer, nullable=False),
        sa.Column("comment", sa.String(500), nullable=True),
        sa.Column(
            "created_by_student_id",
            sa.String(36),
            sa.ForeignKey("student_profiles.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column(
            "created_by_parent_id",
            sa.String(36),
            sa.ForeignKey("parent_profiles.id", ondelete="CASCADE"),
            nullable=True,
        ),
        _created_at(),
        sa.CheckConstraint("rating BETWEEN 1 AND 5", name="ck_faculty_reviews_rating"),
        sa.CheckConstraint(
            "(created_by_student_id IS NULL) <> (created_by_parent_id IS NULL)",
            name="ck_faculty_reviews_single_author",
        ),
    )
    op.create_index("ix_faculty_reviews_school_id", "faculty_reviews", ["school_id"])
    op.create_index("ix_faculty_reviews_faculty_id", "faculty_reviews", ["faculty_id"])

    op.create_table(
        "student_reviews",
        _id(),
        _school_fk(),
        sa.Column(
            "student_id",
            sa.String(36),
            sa.ForeignKey("student_profiles.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "faculty_id",
            sa.String(36),
            sa.ForeignKey("faculty_profiles.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("rating", sa.Integer, nullable=True),
        sa.Column("comment", sa.String(500), nullable=True),
        sa.Column("is_private", sa.Boolean, nullable=False, server_default=sa.true()),
        _created_at(),
        sa.CheckConstraint("rating IS NULL OR rating BETWEEN 1 AND 5", name="ck_student_reviews_rating"),
        sa.CheckConstraint("is_private", name="ck_student_reviews_private"),
    )
    op.create_index("ix_student_reviews_school_id", "student_reviews", ["school_id"])
    op.create_index("ix_student_reviews_student_id", "student_reviews", ["student_id"])
    op.create_index("ix_student_reviews_faculty_id", "student_reviews", ["faculty_id"])

    op.create_table(
        "admin_reviews",
        _id(),
        _school_fk(),
        sa.Column("rating", sa.Integer, nullable=False),
        sa.Column("category", sa.String(50), nullable=True),
        sa.Column("comment", sa.String(500), nullable=True),
        _created_at(),
        sa.CheckConstraint("rating BETWEEN 1 AND 5", name="ck_admin_reviews_rating"),
    )
    op.create_index("ix_admin_reviews_school_id", "admin_reviews", ["school_id"])


def downgrade() -> None:
    """Drop portal tables."""
    for table in (
        "admin_reviews",
        "student_reviews",
        "faculty_reviews",
        "term_results",
        "student_enrollments",
        "teaching_assignments",
        "faculty_subjects",
        "parent_profiles",
        "student_profiles",
        "faculty_profiles",
        "admin_profiles",
        "subjects",
        "class_sections",
        "users",
        "schools",
    ):
        op.drop_table(table)
