# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Common enumerations shared by schemas, database models and services."""

from enum import Enum


class Role(str, Enum):
    """The six portal roles. Every identity has exactly one."""

    SUPER_ADMIN = "super_admin"
    SCHOOL_ADMIN = "school_admin"
    ACADEMIC_ADMIN = "academic_admin"
    FACULTY = "faculty"
    STUDENT = "student"
    PARENT = "parent"


class ResourceKind(str, Enum):
    """Resource kinds the access scope resolver understands."""

    FACULTY = "faculty"
    STUDENTS = "students"
    ADMINS = "admins"
    REVIEWS = "reviews"


class ExportFormat(str, Enum):
    """Directory response formats."""

    JSON = "json"
    CSV = "csv"
