# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Review endpoints.

- POST /reviews/faculty/{faculty_id} - A student or parent rates a teacher
- POST /reviews/student/{student_id} - A teacher privately rates a student
- GET /reviews - Review rows visible to the caller

Role checks, attribution and normalization all live in ReviewService;
failures surface through the application's PortalError handlers.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Query, Request, status

from school_portal.api.dependencies import AppSettings, CurrentIdentity, DbSession
from school_portal.api.middleware.rate_limit import limiter, standard_limit
from school_portal.domains.access import AccessScopeResolver, RequestedFilters
from school_portal.domains.review import ReviewService
from school_portal.models.common import ResourceKind
from school_portal.models.review import (
    FacultyReviewResponse,
    ReviewCreateRequest,
    ReviewItem,
    StudentReviewResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/faculty/{faculty_id}",
    response_model=FacultyReviewResponse,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(standard_limit)
async def create_faculty_review(
    request: Request,
    faculty_id: str,
    data: ReviewCreateRequest,
    identity: CurrentIdentity,
    db: DbSession,
    settings: AppSettings,
) -> FacultyReviewResponse:
    """Rate a faculty member. The author is always the caller's own profile."""
    review = await ReviewService(db, settings.reviews).create_faculty_review(
        identity, faculty_id, data.rating, data.comment
    )
    return FacultyReviewResponse.model_validate(review)


@router.post(
    "/student/{student_id}",
    response_model=StudentReviewResponse,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(standard_limit)
async def create_student_review(
    request: Request,
    student_id: str,
    data: ReviewCreateRequest,
    identity: CurrentIdentity,
    db: DbSession,
    settings: AppSettings,
) -> StudentReviewResponse:
    """Privately rate a student. Faculty only."""
    review = await ReviewService(db, settings.reviews).create_student_review(
        identity, student_id, data.rating, data.comment
    )
    return StudentReviewResponse.model_validate(review)


@router.get("", response_model=list[ReviewItem])
async def list_reviews(
    identity: CurrentIdentity,
    db: DbSession,
    settings: AppSettings,
    limit: Annotated[int | None, Query(ge=1)] = None,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> list[ReviewItem]:
    """Reviews the caller may read.

    Students and parents get the student's received reviews, faculty their
    own received reviews, admins every review in their school. The
    super-admin gets 403: only averages cross schools.
    """
    scope = await AccessScopeResolver(db, settings.directory.max_page_size).resolve(
        identity,
        ResourceKind.REVIEWS,
        RequestedFilters(limit=limit, offset=offset),
    )
    return await ReviewService(db, settings.reviews).list_reviews(scope)
