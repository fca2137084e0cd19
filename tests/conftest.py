from __future__ import annotations

import numpy as np
import pytest

from tgalab.models.header_model import Header
from tgalab.models.image_model import Pixel, RasterImage
from tgalab.services.compositor import CompositorService

# имена слоёв, которые читает каталог рецептов
LAYER_NAMES = (
    "layer1", "layer2", "pattern1", "pattern2", "car", "circles",
    "text", "text2", "layer_red", "layer_green", "layer_blue",
)


def make_image(width: int, height: int, fill: Pixel | None = None, seed: int = 0, **header_fields: int) -> RasterImage:
    """Тестовый растр: заливка цветом или детерминированный шум."""
    header = Header.truecolor(width, height, **header_fields)
    if fill is not None:
        return RasterImage.filled(header, fill)
    rng = np.random.default_rng(seed)
    return RasterImage(header, rng.integers(0, 256, size=(height, width, 3), dtype=np.uint8))


@pytest.fixture
def noise_image() -> RasterImage:
    return make_image(7, 5, seed=1)


@pytest.fixture
def other_noise_image() -> RasterImage:
    return make_image(7, 5, seed=2)


@pytest.fixture
def compositor() -> CompositorService:
    return CompositorService()
