import numpy as np
import pytest

from models.errors import InvalidDimensionsError, OutOfBoundsError
from models.pixel import Pixel, BLACK, RED, clamp_channel, to_channels
from models.raster_image import RasterImage


def test_blank_image_is_black():
    img = RasterImage.blank(3, 2)
    assert img.size == (3, 2)
    assert all(p == BLACK for row in img.rows() for p in row)


@pytest.mark.parametrize("width,height", [(0, 1), (1, 0), (-2, 3)])
def test_blank_rejects_non_positive_size(width, height):
    with pytest.raises(InvalidDimensionsError):
        RasterImage.blank(width, height)


def test_empty_grid_gives_zero_area_image():
    img = RasterImage.from_rows([])
    assert img.size == (0, 0)


def test_ragged_rows_rejected():
    with pytest.raises(InvalidDimensionsError):
        RasterImage.from_rows([[RED, RED], [RED]])


def test_get_and_set_pixel(sample_image):
    assert sample_image.get_pixel(1, 0) == Pixel(0, 255, 0)
    sample_image.set_pixel(1, 0, Pixel(1, 2, 3))
    assert sample_image.get_pixel(1, 0) == Pixel(1, 2, 3)


@pytest.mark.parametrize("x,y", [(-1, 0), (0, -1), (2, 0), (0, 2)])
def test_out_of_bounds_access(sample_image, x, y):
    with pytest.raises(OutOfBoundsError):
        sample_image.get_pixel(x, y)
    with pytest.raises(OutOfBoundsError):
        sample_image.set_pixel(x, y, RED)


def test_equality_and_hash_by_content(sample_image):
    other = RasterImage(sample_image.pixels.copy(), path="elsewhere.png")
    assert other == sample_image
    assert hash(other) == hash(sample_image)
    other.set_pixel(0, 0, BLACK)
    assert other != sample_image


def test_constructor_copies_buffer():
    buf = np.zeros((1, 1, 3), dtype=np.int32)
    img = RasterImage(buf)
    buf[0, 0] = (9, 9, 9)
    assert img.get_pixel(0, 0) == BLACK


def test_from_triples_row_major():
    img = RasterImage.from_triples(2, 1, [1, 2, 3, 4, 5, 6])
    assert img.get_pixel(1, 0) == Pixel(4, 5, 6)
    with pytest.raises(InvalidDimensionsError):
        RasterImage.from_triples(2, 2, [1, 2, 3])


def test_channel_helpers():
    assert clamp_channel(300) == 255
    assert clamp_channel(-4) == 0
    assert to_channels(np.array([0.5, 1.49, 254.6, 260.0, -3.0])).tolist() == [1, 1, 255, 255, 0]
    assert Pixel.clamped(300, -1, 7) == Pixel(255, 0, 7)
