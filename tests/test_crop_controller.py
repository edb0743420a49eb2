"""Tests for CropInteractionController wiring gestures to persistence."""

from unittest.mock import MagicMock

import pytest
from PySide6.QtCore import Qt

from cropstudio.application.use_cases import (
    LoadCropUseCase,
    SaveCropUseCase,
    SuggestCropResponse,
)
from cropstudio.domain.models import AspectMode, NormalizedRect
from cropstudio.domain.repositories import ICropRepository
from cropstudio.editor.controller import CropInteractionController
from cropstudio.editor.geometry import CropRect
from cropstudio.errors import CropPersistenceError


def create_controller(repo, **kwargs):
    callbacks = {
        "on_crop_changed": MagicMock(),
        "on_cursor_change": MagicMock(),
        "on_request_update": MagicMock(),
    }
    controller = CropInteractionController(
        load_use_case=LoadCropUseCase(repo),
        save_use_case=SaveCropUseCase(repo),
        **callbacks,
        **kwargs,
    )
    return controller, callbacks


def _open(controller, image_id="img-1", natural=(1000, 2000), container=(1000, 2000)):
    generation = controller.select_image(image_id)
    assert controller.on_image_loaded(generation, *natural, *container)
    return generation


def test_new_image_gets_default_crop(crop_repo):
    controller, callbacks = create_controller(crop_repo)
    _open(controller)
    assert controller.current_rect() == CropRect(200.0, 700.0, 600.0, 600.0)
    assert controller.current_normalized() == NormalizedRect(20, 35, 60, 30)
    last = callbacks["on_crop_changed"].call_args[0][0]
    assert last.rounded() == NormalizedRect(20, 35, 60, 30)


def test_stale_image_loaded_report_is_dropped(crop_repo):
    controller, _ = create_controller(crop_repo)
    old = controller.select_image("img-1")
    controller.select_image("img-2")
    assert not controller.on_image_loaded(old, 1000, 2000, 1000, 2000)
    assert controller.current_rect() is None
    assert controller.natural_size is None


def test_drag_then_save_persists_rounded_percentages(crop_repo):
    controller, callbacks = create_controller(crop_repo)
    _open(controller)

    assert controller.pointer_down((500.0, 1000.0))
    callbacks["on_cursor_change"].assert_called_with(Qt.CursorShape.ClosedHandCursor)
    controller.pointer_move((600.0, 1000.0))
    controller.pointer_up()
    assert controller.current_rect() == CropRect(300.0, 700.0, 600.0, 600.0)

    assert controller.save()
    record = crop_repo.get_crop("img-1")
    assert record.rect == NormalizedRect(30, 35, 60, 30)
    assert record.is_automatic is False
    assert record.aspect_mode is AspectMode.SQUARE
    assert not controller.model.is_save_outstanding


def test_corner_drag_resizes(crop_repo):
    controller, callbacks = create_controller(crop_repo)
    _open(controller)
    assert controller.pointer_down((800.0, 1300.0))
    callbacks["on_cursor_change"].assert_called_with(Qt.CursorShape.SizeFDiagCursor)
    controller.pointer_move((900.0, 1300.0))
    controller.pointer_up()
    assert controller.current_rect() == CropRect(200.0, 700.0, 700.0, 700.0)


def test_pointer_leave_commits_gesture(crop_repo):
    controller, _ = create_controller(crop_repo)
    _open(controller)
    controller.pointer_down((500.0, 1000.0))
    controller.pointer_move((450.0, 1000.0))
    controller.pointer_leave()
    assert not controller.model.interaction.is_active
    controller.pointer_move((100.0, 1000.0))
    assert controller.current_rect().x == 150.0


def test_pointer_down_outside_crop(crop_repo):
    controller, callbacks = create_controller(crop_repo)
    _open(controller)
    assert not controller.pointer_down((10.0, 10.0))
    callbacks["on_cursor_change"].assert_called_with(Qt.CursorShape.ArrowCursor)


def test_pointer_down_before_bounds_ready(crop_repo):
    controller, _ = create_controller(crop_repo)
    controller.select_image("img-1")
    assert not controller.pointer_down((500.0, 1000.0))


def test_hover_updates_cursor(crop_repo):
    controller, callbacks = create_controller(crop_repo)
    _open(controller)
    controller.pointer_move((500.0, 1000.0))
    callbacks["on_cursor_change"].assert_called_with(Qt.CursorShape.OpenHandCursor)


def test_saved_crop_and_aspect_loaded_on_select(crop_repo, rect_close):
    crop_repo.upsert_crop("img-1", NormalizedRect(10, 10, 40, 50), AspectMode.PORTRAIT, False)
    controller, _ = create_controller(crop_repo)
    _open(controller, natural=(1000, 1000), container=(500, 500))
    assert controller.model.aspect_mode is AspectMode.PORTRAIT
    assert controller.current_normalized() == NormalizedRect(10, 10, 40, 50)
    rect_close(controller.current_rect(), CropRect(50.0, 50.0, 200.0, 250.0))


def test_saved_aspect_does_not_leak_to_next_image(crop_repo):
    crop_repo.upsert_crop("img-1", NormalizedRect(10, 10, 40, 50), AspectMode.PORTRAIT, False)
    controller, _ = create_controller(crop_repo)
    _open(controller, image_id="img-1")
    assert controller.model.aspect_mode is AspectMode.PORTRAIT
    _open(controller, image_id="img-2")
    assert controller.model.aspect_mode is AspectMode.SQUARE

    controller.set_aspect_mode(AspectMode.FREE)
    _open(controller, image_id="img-1")
    assert controller.model.aspect_mode is AspectMode.PORTRAIT
    _open(controller, image_id="img-3")
    assert controller.model.aspect_mode is AspectMode.FREE


def test_failed_save_keeps_rect_and_notifies():
    repo = MagicMock(spec=ICropRepository)
    repo.get_crop.return_value = None
    repo.upsert_crop.side_effect = CropPersistenceError("write failed")
    error_handler = MagicMock()
    controller, _ = create_controller(repo, error_handler=error_handler)
    _open(controller)
    before = controller.current_rect()

    assert not controller.save()
    assert controller.current_rect() == before
    assert not controller.model.is_save_outstanding
    error_handler.notice.assert_called_once()
    assert "write failed" in error_handler.notice.call_args[0][0]


def test_save_without_image(crop_repo):
    controller, _ = create_controller(crop_repo)
    assert not controller.save()


def test_container_resize_reprojects(crop_repo, rect_close):
    controller, _ = create_controller(crop_repo)
    _open(controller)
    assert controller.on_container_resized(500.0, 1000.0)
    rect_close(controller.current_rect(), CropRect(100.0, 350.0, 300.0, 300.0))


def test_container_resize_before_image_loaded(crop_repo):
    controller, _ = create_controller(crop_repo)
    controller.select_image("img-1")
    assert not controller.on_container_resized(500.0, 1000.0)


def test_image_switch_mid_drag(crop_repo):
    controller, _ = create_controller(crop_repo)
    _open(controller)
    controller.pointer_down((500.0, 1000.0))
    controller.pointer_move((600.0, 1000.0))

    _open(controller, image_id="img-2")
    assert not controller.model.interaction.is_active
    assert controller.current_rect() == CropRect(200.0, 700.0, 600.0, 600.0)
    controller.pointer_up()
    assert crop_repo.get_crop("img-1") is None


def test_revert_returns_to_saved(crop_repo):
    controller, _ = create_controller(crop_repo)
    _open(controller)
    controller.pointer_down((500.0, 1000.0))
    controller.pointer_move((600.0, 1000.0))
    controller.pointer_up()
    assert controller.save()

    controller.reset()
    assert controller.current_rect() == CropRect(200.0, 700.0, 600.0, 600.0)
    controller.revert()
    assert controller.current_normalized() == NormalizedRect(30, 35, 60, 30)


def test_undo_reverts_last_drag(crop_repo, rect_close):
    controller, callbacks = create_controller(crop_repo)
    _open(controller)
    controller.pointer_down((500.0, 1000.0))
    controller.pointer_move((600.0, 1000.0))
    controller.pointer_up()
    assert controller.current_rect() == CropRect(300.0, 700.0, 600.0, 600.0)

    assert controller.undo()
    rect_close(controller.current_rect(), CropRect(200.0, 700.0, 600.0, 600.0))
    assert callbacks["on_crop_changed"].call_args[0][0].rounded() == NormalizedRect(20, 35, 60, 30)
    assert not controller.undo()


def test_undo_reverts_reset(crop_repo):
    crop_repo.upsert_crop("img-1", NormalizedRect(10, 10, 40, 20), AspectMode.FREE, False)
    controller, _ = create_controller(crop_repo)
    _open(controller)
    controller.reset()
    assert controller.undo()
    assert controller.current_normalized() == NormalizedRect(10, 10, 40, 20)


def test_undo_does_not_cross_image_switch(crop_repo):
    controller, _ = create_controller(crop_repo)
    _open(controller)
    controller.pointer_down((500.0, 1000.0))
    controller.pointer_move((600.0, 1000.0))
    controller.pointer_up()
    _open(controller, image_id="img-2")
    assert not controller.undo()
    assert controller.current_rect() == CropRect(200.0, 700.0, 600.0, 600.0)


def test_set_aspect_mode_accepts_strings(crop_repo):
    controller, _ = create_controller(crop_repo)
    controller.set_aspect_mode("4:5")
    assert controller.model.aspect_mode is AspectMode.PORTRAIT


def test_suggest_applies_rect_and_notice(crop_repo):
    suggest = MagicMock()
    suggest.execute.return_value = SuggestCropResponse(
        success=True,
        rect=NormalizedRect(11, 11, 48, 48),
        clamped=True,
        notice="reduced",
    )
    error_handler = MagicMock()
    controller, _ = create_controller(crop_repo, suggest_use_case=suggest, error_handler=error_handler)
    _open(controller, natural=(1000, 1000), container=(1000, 1000))

    assert controller.suggest("img.jpg")
    request = suggest.execute.call_args[0][0]
    assert request.natural_size == (1000, 1000)
    assert request.aspect_mode is AspectMode.SQUARE
    assert controller.current_normalized() == NormalizedRect(11, 11, 48, 48)
    error_handler.notice.assert_called_once_with("reduced", context={"image_id": "img-1"})


def test_suggest_without_use_case(crop_repo):
    controller, _ = create_controller(crop_repo)
    assert not controller.suggest("img.jpg")


@pytest.mark.parametrize("rect", [None, NormalizedRect(0, 0, 20, 20)])
def test_apply_suggestion(crop_repo, rect):
    controller, _ = create_controller(crop_repo)
    _open(controller, natural=(1000, 1000), container=(1000, 1000))
    controller.apply_suggestion(rect)
    expected = rect if rect is not None else NormalizedRect(20, 20, 60, 60)
    assert controller.current_normalized() == expected
