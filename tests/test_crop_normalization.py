"""Tests for percentage sanitising and the suggestion clamp."""

import math

import pytest

from cropstudio.domain.models import AspectMode, NormalizedRect
from cropstudio.domain.services import clamp_suggestion, default_normalized, sanitize_normalized


def test_oversized_square_suggestion_is_scaled_and_recentred(rect_close):
    rect, clamped = clamp_suggestion(NormalizedRect(0, 0, 70, 70), 48.0)
    assert clamped
    rect_close(rect, NormalizedRect(11.0, 11.0, 48.0, 48.0))
    assert rect.center == pytest.approx((35.0, 35.0))


def test_suggestion_within_limit_is_untouched():
    original = NormalizedRect(10, 10, 40, 40)
    rect, clamped = clamp_suggestion(original, 48.0)
    assert not clamped
    assert rect == original


def test_oversized_tall_suggestion_keeps_proportions():
    rect, clamped = clamp_suggestion(NormalizedRect(0, 0, 60, 96), 48.0)
    assert clamped
    assert rect.width == pytest.approx(30.0)
    assert rect.height == pytest.approx(48.0)
    assert rect.x == pytest.approx(15.0)
    assert rect.y == pytest.approx(24.0)


def test_clamp_honours_configured_maximum(rect_close):
    rect, clamped = clamp_suggestion(NormalizedRect(0, 0, 70, 70), 55.0)
    assert clamped
    rect_close(rect, NormalizedRect(7.5, 7.5, 55.0, 55.0))


def test_clamp_sanitizes_before_scaling():
    rect, clamped = clamp_suggestion(NormalizedRect(-20, 0, 150, 40), 48.0)
    assert clamped
    assert rect.x >= 0.0 and rect.right <= 100.0
    assert max(rect.width, rect.height) == pytest.approx(48.0)


def test_sanitize_rederives_sides():
    assert sanitize_normalized(NormalizedRect(-10, 50, 130, 80)) == NormalizedRect(0, 50, 100, 50)


def test_sanitize_keeps_minimum_side_at_far_edge():
    assert sanitize_normalized(NormalizedRect(100, 0, 10, 10)) == NormalizedRect(99, 0, 1, 10)


def test_sanitize_replaces_non_finite_values():
    rect = sanitize_normalized(NormalizedRect(math.nan, math.inf, 20, math.nan))
    assert rect.x == 0.0
    assert rect.y + rect.height <= 100.0
    assert rect.height >= 1.0
    assert all(math.isfinite(v) for v in (rect.x, rect.y, rect.width, rect.height))


def test_sanitize_passes_valid_rect_through():
    rect = NormalizedRect(20, 35, 60, 30)
    assert sanitize_normalized(rect) == rect


def test_default_normalized_matches_screen_default(rect_close):
    rect_close(default_normalized(1000, 2000, AspectMode.SQUARE), NormalizedRect(20, 35, 60, 30))


def test_default_normalized_portrait():
    rect = default_normalized(1000, 1000, AspectMode.PORTRAIT)
    assert rect.width == pytest.approx(60.0)
    assert rect.height == pytest.approx(75.0)
    assert rect.y == pytest.approx(12.5)


def test_default_normalized_requires_size():
    with pytest.raises(ValueError):
        default_normalized(0, 100, AspectMode.SQUARE)


def test_rounded_and_mapping():
    rect = NormalizedRect(20.4, 35.6, 59.7, 29.2)
    assert rect.rounded() == NormalizedRect(20, 36, 60, 29)
    assert NormalizedRect.from_mapping(rect.as_mapping()) == rect
