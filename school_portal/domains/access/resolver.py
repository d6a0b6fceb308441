# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database-backed wrapper around resolve_scope.

Loads the facts the pure resolver needs (taught sections, the caller's
profile) and delegates the decision to it.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from school_portal.core.errors import AuthenticationError, AuthorizationError
from school_portal.domains.access.scope import (
    DEFAULT_MAX_PAGE_SIZE,
    EffectiveFilters,
    RequestedFilters,
    resolve_scope,
)
from school_portal.domains.identity.context import IdentityContext
from school_portal.infrastructure.database.models import (
    FacultyProfile,
    ParentProfile,
    StudentProfile,
    TeachingAssignment,
)
from school_portal.models.common import ResourceKind, Role

logger = logging.getLogger(__name__)


async def load_taught_section_ids(db: AsyncSession, faculty_id: str) -> frozenset[str]:
    """Union of class_section_id over a faculty member's teaching assignments."""
    result = await db.execute(
        select(TeachingAssignment.class_section_id)
        .where(TeachingAssignment.faculty_id == faculty_id)
        .distinct()
    )
    return frozenset(result.scalars().all())


class AccessScopeResolver:
    """Resolves effective filters for a request.

    Attributes:
        _db: Async database session.
        _max_page_size: Upper bound on page limits.
    """

    def __init__(self, db: AsyncSession, max_page_size: int = DEFAULT_MAX_PAGE_SIZE) -> None:
        self._db = db
        self._max_page_size = max_page_size

    async def resolve(
        self,
        identity: IdentityContext | None,
        resource_kind: ResourceKind,
        requested: RequestedFilters | None = None,
    ) -> EffectiveFilters:
        """Resolve the caller's scope for one resource kind.

        Args:
            identity: The caller.
            resource_kind: What the caller wants to read.
            requested: Caller-supplied filters.

        Returns:
            EffectiveFilters for downstream queries.

        Raises:
            AuthenticationError: If identity is missing.
            AuthorizationError: If the identity may not read at all, or a
                faculty/student/parent caller has no profile where one is needed.
        """
        if identity is None:
            raise AuthenticationError("Must sign in")

        taught_section_ids: frozenset[str] | None = None
        review_subject_id: str | None = None

        if identity.is_active and identity.role is Role.FACULTY:
            if resource_kind in (ResourceKind.STUDENTS, ResourceKind.REVIEWS):
                faculty_id = await self._faculty_id(identity.user_id)
                if resource_kind is ResourceKind.STUDENTS:
                    taught_section_ids = await load_taught_section_ids(self._db, faculty_id)
                else:
                    review_subject_id = faculty_id
        elif identity.is_active and resource_kind is ResourceKind.REVIEWS:
            if identity.role is Role.STUDENT:
                review_subject_id = await self._scalar(
                    select(StudentProfile.id).where(StudentProfile.user_id == identity.user_id)
                )
            elif identity.role is Role.PARENT:
                review_subject_id = await self._scalar(
                    select(ParentProfile.student_id).where(ParentProfile.user_id == identity.user_id)
                )

        return resolve_scope(
            identity,
            resource_kind,
            requested,
            taught_section_ids,
            review_subject_id=review_subject_id,
            max_page_size=self._max_page_size,
        )

    async def _faculty_id(self, user_id: str) -> str:
        faculty_id = await self._scalar(select(FacultyProfile.id).where(FacultyProfile.user_id == user_id))
        if faculty_id is None:
            logger.warning("Faculty user without profile: user=%s", user_id)
            raise AuthorizationError("Faculty profile not found")
        return faculty_id

    async def _scalar(self, stmt) -> str | None:
        result = await self._db.execute(stmt)
        return result.scalar_one_or_none()
