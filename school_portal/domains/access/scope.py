# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Access scope resolution.

Turns (identity, resource kind, requested filters) into the effective
filter set every directory and review query applies verbatim. Over-broad
requests are narrowed to the caller's slice; only a missing, inactive or
unrecognized identity is rejected.

Example:
    >>> identity = IdentityContext(user_id="u1", role=Role.STUDENT, school_id="s1")
    >>> scope = resolve_scope(identity, ResourceKind.FACULTY, RequestedFilters(school_id="s2"))
    >>> scope.school_id
    's1'
"""

import logging
from dataclasses import dataclass
from typing import assert_never

from school_portal.core.errors import AuthenticationError, AuthorizationError
from school_portal.domains.identity.context import IdentityContext
from school_portal.models.common import ResourceKind, Role

logger = logging.getLogger(__name__)

DEFAULT_MAX_PAGE_SIZE = 500


@dataclass(frozen=True)
class RequestedFilters:
    """Scope-relevant filters exactly as the caller supplied them."""

    school_id: str | None = None
    limit: int | None = None
    offset: int | None = None


@dataclass(frozen=True)
class EffectiveFilters:
    """Validated scope applied by downstream queries.

    Attributes:
        resource_kind: What is being read.
        school_id: Tenant filter; None means all schools (super-admin only).
        class_section_ids: When set, only students enrolled in one of these
            sections are visible. An empty set yields no rows.
        aggregate_only: Rows must not be returned, only numeric aggregates.
        subject_student_id: Reviews must concern this student profile.
        subject_faculty_id: Reviews must concern this faculty profile.
        limit: Page size, None for unbounded.
        offset: Rows to skip.
    """

    resource_kind: ResourceKind
    school_id: str | None
    class_section_ids: frozenset[str] | None = None
    aggregate_only: bool = False
    subject_student_id: str | None = None
    subject_faculty_id: str | None = None
    limit: int | None = None
    offset: int = 0


def narrow_school_id(identity: IdentityContext, requested_school_id: str | None) -> str | None:
    """Replace a caller-supplied school id with the one the caller may see.

    The super-admin keeps whatever was requested (None meaning all schools).
    Everyone else is pinned to their home school; a foreign id is corrected,
    not rejected.
    """
    if identity.role is Role.SUPER_ADMIN:
        return requested_school_id or None

    if requested_school_id and requested_school_id != identity.school_id:
        logger.debug(
            "Narrowed school filter: user=%s, requested=%s, home=%s",
            identity.user_id,
            requested_school_id,
            identity.school_id,
        )
    return identity.school_id


def _normalize_page(
    limit: int | None,
    offset: int | None,
    max_page_size: int,
) -> tuple[int | None, int]:
    if limit is not None:
        limit = max(0, min(limit, max_page_size))
    return limit, max(0, offset or 0)


def resolve_scope(
    identity: IdentityContext | None,
    resource_kind: ResourceKind,
    requested: RequestedFilters | None = None,
    taught_section_ids: frozenset[str] | set[str] | None = None,
    *,
    review_subject_id: str | None = None,
    max_page_size: int = DEFAULT_MAX_PAGE_SIZE,
) -> EffectiveFilters:
    """Compute the effective filters for one read.

    Args:
        identity: The caller, or None when unauthenticated.
        resource_kind: What the caller wants to read.
        requested: Caller-supplied filters (possibly stale or over-broad).
        taught_section_ids: For a faculty caller, the class sections named
            by their teaching assignments.
        review_subject_id: For reviews, the profile rows must concern: the
            caller's own student profile (student), the linked student
            (parent) or the caller's faculty profile (faculty).
        max_page_size: Upper bound on the page limit.

    Returns:
        EffectiveFilters to apply verbatim.

    Raises:
        AuthenticationError: If identity is missing.
        AuthorizationError: If the identity is inactive, its role is not a
            portal role, a non-super-admin has no home school, or a
            reviews scope lacks the caller's profile.
    """
    if identity is None:
        raise AuthenticationError("Must sign in")
    if not identity.is_active:
        raise AuthorizationError("Account is inactive")
    if not isinstance(identity.role, Role):
        raise AuthorizationError("Unrecognized role")
    if identity.role is not Role.SUPER_ADMIN and identity.school_id is None:
        raise AuthorizationError("Account has no school")

    requested = requested or RequestedFilters()
    school_id = narrow_school_id(identity, requested.school_id)
    limit, offset = _normalize_page(requested.limit, requested.offset, max_page_size)

    class_section_ids: frozenset[str] | None = None
    aggregate_only = False
    subject_student_id: str | None = None
    subject_faculty_id: str | None = None
    is_reviews = resource_kind is ResourceKind.REVIEWS

    match identity.role:
        case Role.SUPER_ADMIN:
            # cross-school averages only, never review text
            aggregate_only = is_reviews
        case Role.SCHOOL_ADMIN | Role.ACADEMIC_ADMIN:
            pass
        case Role.FACULTY:
            if resource_kind is ResourceKind.STUDENTS:
                class_section_ids = frozenset(taught_section_ids or ())
            elif is_reviews:
                if review_subject_id is None:
                    raise AuthorizationError("Faculty profile not found")
                subject_faculty_id = review_subject_id
        case Role.STUDENT | Role.PARENT:
            if is_reviews:
                if review_subject_id is None:
                    raise AuthorizationError("Student profile not found")
                subject_student_id = review_subject_id
        case _:
            assert_never(identity.role)

    return EffectiveFilters(
        resource_kind=resource_kind,
        school_id=school_id,
        class_section_ids=class_section_ids,
        aggregate_only=aggregate_only,
        subject_student_id=subject_student_id,
        subject_faculty_id=subject_faculty_id,
        limit=limit,
        offset=offset,
    )
