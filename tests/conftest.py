import numpy as np
import pytest

from models.pixel import Pixel, RED, GREEN, BLUE, WHITE
from models.raster_image import RasterImage


@pytest.fixture
def sample_image() -> RasterImage:
    """2x2: red, green / blue, white."""
    return RasterImage.from_rows([[RED, GREEN], [BLUE, WHITE]])


@pytest.fixture
def random_image() -> RasterImage:
    """Seeded 7x5 noise image (odd sizes on purpose)."""
    rng = np.random.default_rng(42)
    return RasterImage(rng.integers(0, 256, size=(5, 7, 3)))


@pytest.fixture
def gradient_image() -> RasterImage:
    """10x4 horizontal gradient, grey levels 0, 25, ..., 225."""
    row = [Pixel(v, v, v) for v in range(0, 250, 25)]
    return RasterImage.from_rows([row] * 4)
