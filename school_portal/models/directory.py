# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Directory listing schemas."""

from pydantic import BaseModel, ConfigDict, Field


class DirectorySearch(BaseModel):
    """User-supplied search filters, applied on top of the scope.

    Attributes:
        q: Case-insensitive name substring (students also match roll number).
        subject: Case-insensitive qualified-subject name substring (faculty).
        grade: Exact grade.
        section: Exact section.
    """

    q: str | None = None
    subject: str | None = None
    grade: int | None = None
    section: str | None = None


class SubjectSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    code: str


class AssignmentSummary(BaseModel):
    """A teaching assignment denormalized for display."""

    id: str
    class_section_id: str
    grade: int
    section: str
    subject_id: str
    subject_name: str


class EnrollmentSummary(BaseModel):
    class_section_id: str
    grade: int
    section: str


class FacultySummary(BaseModel):
    """A faculty directory row with its subjects and assignments embedded."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    school_id: str
    name: str
    designation: str | None = None
    qualifications: str | None = None
    years_of_experience: int | None = None
    contact: str | None = None
    subjects: list[SubjectSummary] = Field(default_factory=list)
    assignments: list[AssignmentSummary] = Field(default_factory=list)


class StudentSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    school_id: str
    name: str
    roll_number: str
    grade: int
    section: str
    parent_name: str | None = None
    enrollments: list[EnrollmentSummary] = Field(default_factory=list)


class AdminSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    school_id: str | None = None
    name: str
    designation: str | None = None
