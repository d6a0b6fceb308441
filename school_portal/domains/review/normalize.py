# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Rating and comment normalization.

Out-of-range ratings are corrected, not rejected: values are rounded half
up to an integer and clamped to [1, 5]. Only input with no sane numeric
reading (text, NaN, infinity, booleans, nothing at all) is refused.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from school_portal.core.errors import ValidationError

RATING_MIN = 1
RATING_MAX = 5


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def normalize_rating(value: Any, *, required: bool = True) -> int | None:
    """Coerce a loose rating into an integer in [1, 5].

    Args:
        value: Rating as submitted (int, float, Decimal or numeric string).
        required: When False, a blank value yields None instead of an error.

    Returns:
        The clamped integer rating, or None for an allowed blank.

    Raises:
        ValidationError: If the value is blank and required, or cannot be
            read as a finite number.

    Examples:
        >>> normalize_rating(0), normalize_rating(6), normalize_rating("3")
        (1, 5, 3)
        >>> normalize_rating(4.5)
        5
    """
    if _is_blank(value):
        if required:
            raise ValidationError("Rating is required")
        return None

    if isinstance(value, bool):
        raise ValidationError("Rating must be a number")

    if isinstance(value, (int, Decimal)):
        number = Decimal(value)
    elif isinstance(value, (float, str)):
        try:
            number = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValidationError("Rating must be a number") from None
    else:
        raise ValidationError("Rating must be a number")

    if not number.is_finite():
        raise ValidationError("Rating must be a finite number")

    if number <= RATING_MIN:
        return RATING_MIN
    if number >= RATING_MAX:
        return RATING_MAX
    return int(number.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def normalize_comment(comment: str | None, max_length: int = 500) -> str | None:
    """Truncate a comment to max_length; empty or whitespace-only becomes None."""
    if comment is None or not comment.strip():
        return None
    return comment[:max_length]
