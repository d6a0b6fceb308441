# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Role-branched dashboard payloads.

Each role gets its own shape; the super-admin shape carries no comment
field at any depth.
"""

from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field

from school_portal.models.directory import AssignmentSummary, EnrollmentSummary, FacultySummary, StudentSummary


class SchoolCounts(BaseModel):
    faculty: int = 0
    students: int = 0
    admins: int = 0
    classes: int = 0
    subjects: int = 0


class SchoolInfo(BaseModel):
    id: str
    name: str
    address: str | None = None
    phone: str | None = None


class SchoolOverview(SchoolInfo):
    counts: SchoolCounts


class SuperAdminDashboard(BaseModel):
    scope: Literal["super_admin"] = "super_admin"
    schools: list[SchoolOverview]
    average_faculty_rating_by_school: dict[str, Decimal | None]


class AdminDashboard(BaseModel):
    scope: Literal["admin"] = "admin"
    school: SchoolInfo | None
    counts: SchoolCounts
    faculty_average: Decimal | None = None
    student_average: Decimal | None = None
    admin_review_average: Decimal | None = None


class ReceivedFacultyReview(BaseModel):
    rating: int
    comment: str | None = None
    created_at: datetime | None = None


class FacultyDashboard(BaseModel):
    scope: Literal["faculty"] = "faculty"
    faculty: FacultySummary
    assignments: list[AssignmentSummary]
    students_count: int
    average_rating: Decimal | None = None
    review_count: int = 0
    received_reviews: list[ReceivedFacultyReview] = Field(default_factory=list)


class TermResultSummary(BaseModel):
    id: str
    term: str
    subject_id: str
    subject_name: str
    marks: Decimal
    max_marks: Decimal


class ReceivedStudentReview(BaseModel):
    rating: int | None = None
    comment: str | None = None
    faculty_id: str
    faculty_name: str
    created_at: datetime | None = None


class StudentDashboard(BaseModel):
    scope: Literal["student", "parent"]
    student: StudentSummary
    enrollments: list[EnrollmentSummary]
    term_results: list[TermResultSummary]
    received_reviews: list[ReceivedStudentReview]


Dashboard = SuperAdminDashboard | AdminDashboard | FacultyDashboard | StudentDashboard
