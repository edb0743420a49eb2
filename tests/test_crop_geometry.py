"""Tests for contain-fit bounds and coordinate conversion."""

import pytest

from cropstudio.domain.models import AspectMode, NormalizedRect
from cropstudio.editor.geometry import (
    CropRect,
    ImageBounds,
    clamp_rect_to_bounds,
    compute_bounds,
    default_crop,
    normalized_to_pixels,
    to_normalized,
    to_screen,
)
from cropstudio.errors import BoundsNotReadyError


def test_compute_bounds_wide_image_letterboxed():
    bounds = compute_bounds(2000, 1000, 800, 800)
    assert bounds == ImageBounds(0.0, 200.0, 800.0, 400.0)


def test_compute_bounds_tall_image_pillarboxed():
    bounds = compute_bounds(1000, 2000, 800, 800)
    assert bounds == ImageBounds(200.0, 0.0, 400.0, 800.0)


def test_compute_bounds_same_aspect_fills_container():
    bounds = compute_bounds(400, 300, 800, 600)
    assert bounds == ImageBounds(0.0, 0.0, 800.0, 600.0)


@pytest.mark.parametrize(
    "dims",
    [(0, 100, 800, 600), (100, 100, 0, 600), (100, 100, 800, -1), (-5, 100, 800, 600)],
)
def test_compute_bounds_degenerate_input_is_not_ready(dims):
    bounds = compute_bounds(*dims)
    assert bounds is ImageBounds.NOT_READY
    assert not bounds.is_valid


def test_normalized_screen_round_trip(rect_close):
    bounds = ImageBounds(200.0, 0.0, 400.0, 800.0)
    original = NormalizedRect(10.0, 20.0, 30.0, 40.0)

    screen = to_screen(original, bounds)
    rect_close(screen, CropRect(240.0, 160.0, 120.0, 320.0))
    rect_close(to_normalized(screen, bounds), original)


def test_screen_normalized_round_trip_with_offsets(rect_close):
    bounds = ImageBounds(13.5, 77.25, 333.0, 222.0)
    screen = CropRect(50.0, 100.0, 120.5, 90.0)
    rect_close(to_screen(to_normalized(screen, bounds), bounds), screen)


def test_conversion_requires_ready_bounds():
    with pytest.raises(BoundsNotReadyError):
        to_normalized(CropRect(0, 0, 10, 10), ImageBounds.NOT_READY)
    with pytest.raises(BoundsNotReadyError):
        to_screen(NormalizedRect(0, 0, 10, 10), ImageBounds.NOT_READY)


def test_default_crop_centres_square_on_portrait_image(portrait_bounds, rect_close):
    rect = default_crop(portrait_bounds, AspectMode.SQUARE)
    assert rect == CropRect(200.0, 700.0, 600.0, 600.0)
    rect_close(to_normalized(rect, portrait_bounds), NormalizedRect(20.0, 35.0, 60.0, 30.0))


def test_default_crop_portrait_mode_uses_multiplier():
    rect = default_crop(ImageBounds(0.0, 0.0, 1000.0, 1000.0), AspectMode.PORTRAIT)
    assert rect == CropRect(200.0, 125.0, 600.0, 750.0)


def test_default_crop_free_mode_starts_square():
    rect = default_crop(ImageBounds(0.0, 0.0, 1000.0, 1000.0), AspectMode.FREE)
    assert rect.width == rect.height == 600.0


def test_default_crop_scales_down_when_too_tall():
    rect = default_crop(ImageBounds(0.0, 0.0, 1000.0, 400.0), AspectMode.PORTRAIT, fraction=1.0)
    assert rect == CropRect(340.0, 0.0, 320.0, 400.0)


def test_default_crop_requires_ready_bounds():
    with pytest.raises(BoundsNotReadyError):
        default_crop(ImageBounds.NOT_READY, AspectMode.SQUARE)


def test_normalized_to_pixels_rounds_and_clamps():
    assert normalized_to_pixels(NormalizedRect(10, 20, 50, 50), 1000, 800) == (100, 160, 500, 400)
    assert normalized_to_pixels(NormalizedRect(90, 90, 50, 50), 100, 100) == (90, 90, 10, 10)


def test_clamp_rect_to_bounds_shrinks_then_shifts():
    bounds = ImageBounds(10.0, 10.0, 100.0, 50.0)
    assert clamp_rect_to_bounds(CropRect(90.0, 0.0, 40.0, 80.0), bounds) == CropRect(70.0, 10.0, 40.0, 50.0)
