# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Review engine.

Exports:
    ReviewService: Faculty and student review creation, scoped listing.
    normalize_rating: Loose rating to integer in [1, 5].
    normalize_comment: Comment truncation.
"""

from school_portal.domains.review.normalize import RATING_MAX, RATING_MIN, normalize_comment, normalize_rating
from school_portal.domains.review.service import ReviewService

__all__ = [
    "RATING_MAX",
    "RATING_MIN",
    "ReviewService",
    "normalize_comment",
    "normalize_rating",
]
