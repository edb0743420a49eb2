"""Tests for CropSessionModel readiness, pending rects and gestures."""

import pytest

from cropstudio.domain.models import AspectMode, NormalizedRect
from cropstudio.editor.geometry import CropRect, ImageBounds, InteractionMode
from cropstudio.editor.model import CropSessionModel

SQUARE_BOUNDS = ImageBounds(0.0, 0.0, 500.0, 500.0)


@pytest.fixture
def model():
    return CropSessionModel()


def _ready(model, image_id="img-1", bounds=SQUARE_BOUNDS, pending=None):
    generation = model.select_image(image_id, pending)
    assert model.set_bounds(generation, bounds)
    return generation


def test_default_crop_applied_when_nothing_is_pending(model, portrait_bounds):
    _ready(model, bounds=portrait_bounds)
    assert model.rect == CropRect(200.0, 700.0, 600.0, 600.0)
    normalized = model.normalized()
    assert normalized.rounded() == NormalizedRect(20.0, 35.0, 60.0, 30.0)


def test_pending_rect_waits_for_bounds(model, rect_close):
    generation = model.select_image("img-1", NormalizedRect(10, 10, 20, 20))
    assert model.rect is None
    assert model.has_pending
    assert not model.bounds_ready

    assert model.set_bounds(generation, SQUARE_BOUNDS)
    assert model.bounds_ready
    assert not model.has_pending
    rect_close(model.rect, CropRect(50.0, 50.0, 100.0, 100.0))


def test_pending_rect_applied_exactly_once(model, rect_close):
    generation = _ready(model, pending=NormalizedRect(10, 10, 20, 20))
    assert model.begin_gesture(InteractionMode.MOVE, (100.0, 100.0))
    model.update_gesture((120.0, 100.0))
    model.end_gesture()

    assert model.set_bounds(generation, SQUARE_BOUNDS)
    rect_close(model.rect, CropRect(70.0, 50.0, 100.0, 100.0))


def test_invalid_bounds_keep_not_ready(model):
    generation = model.select_image("img-1")
    assert not model.set_bounds(generation, ImageBounds.NOT_READY)
    assert not model.bounds_ready
    assert model.rect is None
    assert model.set_bounds(generation, SQUARE_BOUNDS)
    assert model.bounds_ready


def test_stale_generation_bounds_are_ignored(model):
    first = model.select_image("img-1")
    second = model.select_image("img-2")
    assert second > first

    assert not model.set_bounds(first, SQUARE_BOUNDS)
    assert not model.bounds_ready
    assert model.set_bounds(second, SQUARE_BOUNDS)
    assert model.image_id == "img-2"


def test_zero_bounds_after_ready_are_ignored(model):
    generation = _ready(model)
    before = model.rect
    assert not model.set_bounds(generation, ImageBounds(0.0, 0.0, 0.0, 300.0))
    assert model.rect == before
    assert model.bounds == SQUARE_BOUNDS


def test_container_resize_reprojects_in_normalized_space(model, rect_close):
    generation = _ready(model, pending=NormalizedRect(10, 10, 20, 20))
    assert model.set_bounds(generation, ImageBounds(100.0, 0.0, 1000.0, 1000.0))
    rect_close(model.rect, CropRect(200.0, 100.0, 200.0, 200.0))
    rect_close(model.normalized(), NormalizedRect(10, 10, 20, 20))


def test_gestures_refused_until_bounds_ready(model):
    model.select_image("img-1")
    assert not model.begin_gesture(InteractionMode.MOVE, (0.0, 0.0))
    assert model.update_gesture((10.0, 10.0)) is None


def test_none_mode_is_not_a_gesture(model):
    _ready(model)
    assert not model.begin_gesture(InteractionMode.NONE, (0.0, 0.0))


def test_image_switch_during_drag_discards_gesture(model):
    _ready(model)
    assert model.begin_gesture(InteractionMode.RESIZE_SE, (400.0, 400.0))
    model.update_gesture((450.0, 450.0))

    model.select_image("img-2")
    assert not model.interaction.is_active
    assert model.rect is None
    assert not model.bounds_ready
    assert model.update_gesture((480.0, 480.0)) is None


def test_end_gesture_commits_rect(model):
    _ready(model)
    start = model.rect
    assert model.begin_gesture(InteractionMode.MOVE, (250.0, 250.0))
    moved = model.update_gesture((260.0, 240.0))
    assert model.end_gesture() == moved
    assert not model.interaction.is_active
    assert model.rect == CropRect(start.x + 10.0, start.y - 10.0, start.width, start.height)
    assert model.end_gesture() is None


def test_cancel_gesture_restores_start(model):
    _ready(model)
    start = model.rect
    model.begin_gesture(InteractionMode.RESIZE_NW, (start.x, start.y))
    model.update_gesture((start.x - 40.0, start.y - 40.0))
    model.cancel_gesture()
    assert model.rect == start


def test_gestures_refused_while_save_outstanding(model):
    _ready(model)
    model.mark_save_started()
    assert model.is_save_outstanding
    assert not model.begin_gesture(InteractionMode.MOVE, (250.0, 250.0))
    model.mark_save_finished()
    assert model.begin_gesture(InteractionMode.MOVE, (250.0, 250.0))


def test_save_start_commits_active_gesture(model):
    _ready(model)
    model.begin_gesture(InteractionMode.MOVE, (250.0, 250.0))
    model.update_gesture((255.0, 250.0))
    model.mark_save_started()
    assert not model.interaction.is_active


def test_aspect_change_does_not_resize(model):
    _ready(model)
    before = model.rect
    model.set_aspect_mode(AspectMode.PORTRAIT)
    assert model.rect == before
    assert model.aspect_mode is AspectMode.PORTRAIT


def test_queue_normalized_applies_immediately_when_ready(model, rect_close):
    _ready(model)
    assert model.queue_normalized(NormalizedRect(0, 0, 50, 50))
    rect_close(model.rect, CropRect(0.0, 0.0, 250.0, 250.0))
    assert model.queue_normalized(None)
    assert model.rect == CropRect(100.0, 100.0, 300.0, 300.0)


def test_queue_normalized_sanitizes_out_of_range(model, rect_close):
    _ready(model)
    model.queue_normalized(NormalizedRect(90, -5, 30, 50))
    rect_close(model.normalized(), NormalizedRect(90, 0, 10, 50))


def test_reset_to_default(model):
    _ready(model, pending=NormalizedRect(0, 0, 10, 10))
    assert model.reset_to_default()
    assert model.rect == CropRect(100.0, 100.0, 300.0, 300.0)


def test_snapshot_restore_is_generation_bound(model, rect_close):
    _ready(model)
    before = model.rect
    snapshot = model.snapshot()
    model.begin_gesture(InteractionMode.MOVE, (250.0, 250.0))
    model.update_gesture((200.0, 200.0))
    model.end_gesture()
    assert model.restore(snapshot)
    rect_close(model.rect, before)

    _ready(model, image_id="img-2")
    assert not model.restore(snapshot)


def test_resize_after_switching_lock_respects_min_size():
    model = CropSessionModel(aspect_mode=AspectMode.FREE, min_size=30.0)
    _ready(model, bounds=ImageBounds(0.0, 0.0, 1000.0, 1000.0), pending=NormalizedRect(0, 97, 3, 3))
    model.set_aspect_mode(AspectMode.PORTRAIT)

    assert model.begin_gesture(InteractionMode.RESIZE_SE, (30.0, 1000.0))
    rect = model.update_gesture((35.0, 1005.0))
    assert rect.width >= 30.0
    assert rect.height >= 30.0
    assert rect.bottom <= 1000.0 + 1e-9


def test_restore_reprojects_after_container_resize(model, rect_close):
    generation = _ready(model, pending=NormalizedRect(10, 10, 20, 20))
    snapshot = model.snapshot()
    model.begin_gesture(InteractionMode.MOVE, (100.0, 100.0))
    model.update_gesture((300.0, 300.0))
    model.end_gesture()
    assert model.set_bounds(generation, ImageBounds(0.0, 0.0, 1000.0, 1000.0))

    assert model.restore(snapshot)
    rect_close(model.rect, CropRect(100.0, 100.0, 200.0, 200.0))
