import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from .base import UseCase, UseCaseRequest, UseCaseResponse
from .save_crop import SaveCropRequest, SaveCropUseCase
from ..interfaces import IFaceDetector
from ...config import MAX_SUGGESTED_PCT, MAX_SUGGESTED_PCT_RANGE
from ...domain.models import AspectMode, NormalizedRect
from ...domain.services.normalization import clamp_suggestion, default_normalized
from ...errors import CropStudioError
from ...events.bus import EventBus
from ...events.crop_events import SuggestionClampedEvent


@dataclass(frozen=True)
class SuggestCropRequest(UseCaseRequest):
    image_ref: str = ""
    aspect_mode: AspectMode = AspectMode.SQUARE
    natural_size: Optional[Tuple[int, int]] = None
    max_pct: float = MAX_SUGGESTED_PCT
    image_id: Optional[str] = None
    persist: bool = False


@dataclass(frozen=True)
class SuggestCropResponse(UseCaseResponse):
    rect: Optional[NormalizedRect] = None
    detected: bool = False
    confidence: float = 0.0
    clamped: bool = False
    notice: Optional[str] = None


class SuggestCropUseCase(UseCase):
    """Ask the detector for a crop and apply the acceptance policy.

    Suggestions are never trusted as-is: oversized boxes are shrunk and
    re-centred, and a missing or failed detection falls back to the centred
    default crop.  Both cases come back with a ``notice`` for the user rather
    than an error.
    """

    def __init__(
        self,
        detector: IFaceDetector,
        event_bus: Optional[EventBus] = None,
        save_use_case: Optional[SaveCropUseCase] = None,
    ):
        self._detector = detector
        self._events = event_bus
        self._save = save_use_case
        self._logger = logging.getLogger(__name__)

    def execute(self, request: SuggestCropRequest) -> SuggestCropResponse:
        low, high = MAX_SUGGESTED_PCT_RANGE
        max_pct = max(low, min(high, float(request.max_pct)))

        try:
            result = self._detector.detect(request.image_ref, request.aspect_mode)
        except CropStudioError as exc:
            self._logger.warning("Detection failed for %s: %s", request.image_ref, exc)
            result = None
        except Exception:
            self._logger.exception("Detector raised unexpectedly for %s", request.image_ref)
            result = None

        if result is None or result.suggested_rect is None:
            rect = None
            if request.natural_size is not None:
                width, height = request.natural_size
                if width > 0 and height > 0:
                    rect = default_normalized(width, height, request.aspect_mode)
            notice = "No crop suggestion available; using the default crop"
            if result is not None and result.notice:
                notice = result.notice
            if rect is not None and self._events is not None:
                self._events.publish(SuggestionClampedEvent(original=None, accepted=rect, notice=notice))
            response = SuggestCropResponse(success=True, rect=rect, notice=notice)
            return self._maybe_persist(request, response)

        rect, clamped = clamp_suggestion(result.suggested_rect, max_pct)
        notice = result.notice
        if clamped:
            clamp_notice = f"Suggested crop exceeded {max_pct:g}% of the image and was reduced"
            notice = f"{result.notice}. {clamp_notice}" if result.notice else clamp_notice
            self._logger.info(
                "Clamped suggestion for %s from %s to %s", request.image_ref, result.suggested_rect, rect
            )
            if self._events is not None:
                self._events.publish(SuggestionClampedEvent(
                    original=result.suggested_rect,
                    accepted=rect,
                    notice=notice,
                ))

        response = SuggestCropResponse(
            success=True,
            rect=rect,
            detected=result.detected,
            confidence=float(result.confidence),
            clamped=clamped,
            notice=notice,
        )
        return self._maybe_persist(request, response)

    def _maybe_persist(self, request: SuggestCropRequest, response: SuggestCropResponse) -> SuggestCropResponse:
        if not request.persist or self._save is None or not request.image_id or response.rect is None:
            return response
        saved = self._save.execute(SaveCropRequest(
            image_id=request.image_id,
            rect=response.rect,
            aspect_mode=request.aspect_mode,
            is_automatic=True,
        ))
        if not saved.success:
            return SuggestCropResponse(
                success=False,
                error=saved.error,
                rect=response.rect,
                detected=response.detected,
                confidence=response.confidence,
                clamped=response.clamped,
                notice=response.notice,
            )
        return response
