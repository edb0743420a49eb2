import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

# Qt widgets are exercised headless.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from cropstudio.domain.models import NormalizedRect  # noqa: E402
from cropstudio.editor.geometry import ImageBounds  # noqa: E402
from cropstudio.infrastructure.repositories import InMemoryCropRepository  # noqa: E402


@pytest.fixture
def portrait_bounds() -> ImageBounds:
    """Rendered bounds of a 1000x2000 image shown at natural size."""
    return ImageBounds(0.0, 0.0, 1000.0, 2000.0)


@pytest.fixture
def crop_repo() -> InMemoryCropRepository:
    return InMemoryCropRepository()


def assert_rect_close(actual, expected, tol: float = 1e-6) -> None:
    """Compare rectangles with float tolerance."""
    assert actual is not None
    for field in ("x", "y", "width", "height"):
        assert getattr(actual, field) == pytest.approx(getattr(expected, field), abs=tol), field


@pytest.fixture
def rect_close():
    return assert_rect_close


@pytest.fixture
def sample_rect() -> NormalizedRect:
    return NormalizedRect(20.4, 35.6, 59.7, 29.2)
