# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""On-demand rating aggregates.

Nothing here is stored: every call recomputes from the review tables. The
aggregator returns numbers only, never review rows, so it is not gated by
row-level scope. A super-admin may see cross-school averages this way.
"""

import logging
from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from school_portal.infrastructure.database.models import AdminReview, FacultyReview, StudentReview

logger = logging.getLogger(__name__)

_CENTS = Decimal("0.01")


def quantize_rating(value: Decimal | float | int | None) -> Decimal | None:
    """Round an average to two places, passing None through."""
    if value is None:
        return None
    return Decimal(str(value)).quantize(_CENTS, rounding=ROUND_HALF_UP)


def mean_rating(values: Iterable[int | None]) -> Decimal | None:
    """Mean of the non-null ratings, or None when there are none.

    >>> mean_rating([3, 4, 5])
    Decimal('4.00')
    >>> mean_rating([]) is None
    True
    """
    present = [v for v in values if v is not None]
    if not present:
        return None
    return quantize_rating(Decimal(sum(present)) / Decimal(len(present)))


class RatingAggregator:
    """Stateless rating statistics over the review store."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def faculty_average(self, faculty_id: str) -> Decimal | None:
        """Mean FacultyReview rating for one faculty member, None when unrated."""
        result = await self._db.execute(
            select(func.avg(FacultyReview.rating)).where(FacultyReview.faculty_id == faculty_id)
        )
        return quantize_rating(result.scalar_one_or_none())

    async def faculty_review_count(self, faculty_id: str) -> int:
        result = await self._db.execute(
            select(func.count(FacultyReview.id)).where(FacultyReview.faculty_id == faculty_id)
        )
        return int(result.scalar_one() or 0)

    async def school_faculty_averages(
        self,
        school_ids: Iterable[str] | None = None,
    ) -> dict[str, Decimal | None]:
        """Mean FacultyReview rating grouped by school.

        Args:
            school_ids: Restrict to these schools; None for every school.

        Returns:
            Mapping of school id to average. Schools without any faculty
            review are omitted.
        """
        stmt = select(FacultyReview.school_id, func.avg(FacultyReview.rating)).group_by(
            FacultyReview.school_id
        )
        if school_ids is not None:
            stmt = stmt.where(FacultyReview.school_id.in_(list(school_ids)))

        result = await self._db.execute(stmt)
        return {school_id: quantize_rating(avg) for school_id, avg in result.all()}

    async def school_faculty_average(self, school_id: str) -> Decimal | None:
        result = await self._db.execute(
            select(func.avg(FacultyReview.rating)).where(FacultyReview.school_id == school_id)
        )
        return quantize_rating(result.scalar_one_or_none())

    async def school_student_average(self, school_id: str) -> Decimal | None:
        """Mean StudentReview rating for a school.

        Reviews without a rating are excluded from the denominator.
        """
        result = await self._db.execute(
            select(func.avg(StudentReview.rating)).where(
                StudentReview.school_id == school_id,
                StudentReview.rating.is_not(None),
            )
        )
        return quantize_rating(result.scalar_one_or_none())

    async def school_admin_review_average(self, school_id: str) -> Decimal | None:
        result = await self._db.execute(
            select(func.avg(AdminReview.rating)).where(AdminReview.school_id == school_id)
        )
        return quantize_rating(result.scalar_one_or_none())
