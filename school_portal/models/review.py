# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Review request and response schemas."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict


class ReviewCreateRequest(BaseModel):
    """Body of a review submission.

    rating is deliberately loose (int, float, numeric string or null); the
    review engine normalizes it.
    """

    rating: Any = None
    comment: str | None = None


class FacultyReviewResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    school_id: str
    faculty_id: str
    rating: int
    comment: str | None = None
    created_by_student_id: str | None = None
    created_by_parent_id: str | None = None
    created_at: datetime | None = None


class StudentReviewResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    school_id: str
    student_id: str
    faculty_id: str
    rating: int | None = None
    comment: str | None = None
    is_private: bool = True
    created_at: datetime | None = None


class ReviewItem(BaseModel):
    """A row in a scoped review listing.

    Faculty reviews never expose their author ids here.
    """

    id: str
    kind: Literal["faculty", "student"]
    school_id: str
    faculty_id: str
    faculty_name: str | None = None
    student_id: str | None = None
    rating: int | None = None
    comment: str | None = None
    created_at: datetime | None = None
