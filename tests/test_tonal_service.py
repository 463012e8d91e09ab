import numpy as np
import pytest

from models.errors import InvalidParameterError
from models.pixel import Pixel
from models.raster_image import RasterImage
from services.tonal_service import TonalService


@pytest.fixture
def tonal():
    return TonalService()


def gray_row(values):
    return RasterImage.from_rows([[Pixel(v, v, v) for v in values]])


# ─── Levels ──────────────────────────────────────────────────────────
def test_levels_piecewise_mapping(tonal):
    img = gray_row([10, 20, 60, 100, 150, 200, 250])
    out = tonal.levels_adjust(img, 20, 100, 200)
    assert [p.red for p in out.rows()[0]] == [0, 0, 64, 127, 191, 255, 255]


def test_levels_same_formula_for_every_channel(tonal):
    img = RasterImage.from_rows([[Pixel(60, 150, 10)]])
    assert tonal.levels_adjust(img, 20, 100, 200).get_pixel(0, 0) == Pixel(64, 191, 0)


@pytest.mark.parametrize("b,m,w", [(0, 1, 2), (10, 128, 245), (100, 101, 255)])
def test_levels_boundaries(tonal, b, m, w):
    img = gray_row(list(range(256)))
    out = tonal.levels_adjust(img, b, m, w).pixels[0, :, 0]
    assert (out[:b + 1] == 0).all()
    assert (out[w:] == 255).all()


@pytest.mark.parametrize("b,m,w", [(-1, 10, 20), (10, 10, 20), (10, 30, 20), (0, 10, 256), (50, 40, 30)])
def test_levels_rejects_invalid_points(tonal, gradient_image, b, m, w):
    with pytest.raises(InvalidParameterError):
        tonal.levels_adjust(gradient_image, b, m, w)


def test_levels_split(tonal, gradient_image):
    out = tonal.levels_adjust(gradient_image, 20, 100, 200, 50)
    assert np.array_equal(out.pixels[:, 5:], gradient_image.pixels[:, 5:])
    assert out.get_pixel(4, 0) == Pixel(127, 127, 127)
    assert out.get_pixel(1, 0) == Pixel(8, 8, 8)


def test_levels_rejects_bad_split(tonal, gradient_image):
    with pytest.raises(InvalidParameterError):
        tonal.levels_adjust(gradient_image, 20, 100, 200, 120)


# ─── Colour correction ───────────────────────────────────────────────
def test_find_meaningful_peak_ignores_extremes_and_prefers_lower_bin(tonal):
    hist = np.zeros(256, dtype=np.int64)
    hist[5] = 100
    hist[250] = 100
    hist[20] = 3
    hist[30] = 3
    assert tonal.find_meaningful_peak(hist) == 20


def test_find_meaningful_peak_empty_histogram(tonal):
    assert tonal.find_meaningful_peak(np.zeros(256)) == 10


def test_color_correct_aligns_peaks(tonal):
    img = RasterImage.blank(4, 2, Pixel(100, 50, 150))
    out = tonal.color_correct(img)
    assert np.all(out.pixels == 100)


def test_color_correct_clamps(tonal):
    rows = [[Pixel(100, 50, 150)] * 3 + [Pixel(250, 10, 10)]]
    out = tonal.color_correct(RasterImage.from_rows(rows))
    # offsets are (0, +50, -50)
    assert out.get_pixel(3, 0) == Pixel(250, 60, 0)


def test_color_correct_measures_and_corrects_split_region_only(tonal):
    rows = [[Pixel(100, 50, 150)] * 2 + [Pixel(0, 0, 0)] * 2] * 3
    img = RasterImage.from_rows(rows)
    out = tonal.color_correct(img, 50)
    assert out.get_pixel(0, 0) == Pixel(100, 100, 100)
    assert out.get_pixel(1, 2) == Pixel(100, 100, 100)
    assert out.get_pixel(2, 0) == Pixel(0, 0, 0)
    assert out.get_pixel(3, 2) == Pixel(0, 0, 0)


def test_color_correct_rejects_bad_split(tonal, gradient_image):
    with pytest.raises(InvalidParameterError):
        tonal.color_correct(gradient_image, -5)
