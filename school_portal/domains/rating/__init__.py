# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Rating aggregation.

Exports:
    RatingAggregator: Per-faculty and per-school averages.
    mean_rating: Pure mean over nullable ratings.
    quantize_rating: Two-place rounding used by every average.
"""

from school_portal.domains.rating.aggregator import RatingAggregator, mean_rating, quantize_rating

__all__ = ["RatingAggregator", "mean_rating", "quantize_rating"]
