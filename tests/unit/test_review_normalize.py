# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for rating and comment normalization."""

from decimal import Decimal

import pytest

from school_portal.core.errors import ValidationError
from school_portal.domains.review.normalize import normalize_comment, normalize_rating


class TestNormalizeRating:
    """Tests for normalize_rating."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (0, 1),
            (-3, 1),
            (6, 5),
            (100, 5),
            (3, 3),
            (4.5, 5),
            (2.4, 2),
            (1.5, 2),
            ("3", 3),
            (" 4 ", 4),
            ("0.2", 1),
            (Decimal("3.5"), 4),
        ],
    )
    def test_coerces_and_clamps(self, value, expected) -> None:
        assert normalize_rating(value) == expected

    @pytest.mark.parametrize("value", ["abc", "nan", float("nan"), float("inf"), "-Infinity", True, [3], object()])
    def test_unreadable(self, value) -> None:
        with pytest.raises(ValidationError):
            normalize_rating(value)

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_blank_required(self, value) -> None:
        with pytest.raises(ValidationError):
            normalize_rating(value)

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_blank_optional(self, value) -> None:
        assert normalize_rating(value, required=False) is None

    def test_optional_still_validates(self) -> None:
        with pytest.raises(ValidationError):
            normalize_rating("five", required=False)


class TestNormalizeComment:
    """Tests for normalize_comment."""

    def test_truncates(self) -> None:
        assert normalize_comment("x" * 600) == "x" * 500

    def test_custom_length(self) -> None:
        assert normalize_comment("abcdef", max_length=3) == "abc"

    @pytest.mark.parametrize("value", [None, "", "  \n\t"])
    def test_empty_becomes_none(self, value) -> None:
        assert normalize_comment(value) is None

    def test_short_comment_kept(self) -> None:
        assert normalize_comment("Great teacher") == "Great teacher"
