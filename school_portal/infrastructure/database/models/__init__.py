# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy models for the portal database.

Importing this package registers every table on Base.metadata.
"""

from school_portal.infrastructure.database.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin, new_id
from school_portal.infrastructure.database.models.review import (
    COMMENT_MAX_LENGTH,
    AdminReview,
    FacultyReview,
    StudentReview,
)
from school_portal.infrastructure.database.models.school import (
    ClassSection,
    School,
    StudentEnrollment,
    Subject,
    TeachingAssignment,
    TermResult,
)
from school_portal.infrastructure.database.models.user import (
    AdminProfile,
    FacultyProfile,
    FacultySubject,
    ParentProfile,
    StudentProfile,
    User,
)

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    "new_id",
    "School",
    "ClassSection",
    "Subject",
    "TeachingAssignment",
    "StudentEnrollment",
    "TermResult",
    "User",
    "AdminProfile",
    "FacultyProfile",
    "FacultySubject",
    "StudentProfile",
    "ParentProfile",
    "FacultyReview",
    "StudentReview",
    "AdminReview",
    "COMMENT_MAX_LENGTH",
]
