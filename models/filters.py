from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Optional
import numpy as np

from models.kernel import Kernel, BLUR_KERNEL, SHARPEN_KERNEL, convolve
from models.pixel import to_channels
from models.raster_image import RasterImage
from models.split_region import Percentage, resolve_split_point, merge_split


class Filter(ABC):
    """
    Whole-image transform with optional partial (left-side) application.
    Subclasses only implement `transform` on an (H, W, 3) int buffer.
    """
    name: str = "filter"

    def apply(self, image: RasterImage, split_percentage: Optional[Percentage] = None) -> RasterImage:
        """
        Args:
            image: source image, left untouched.
            split_percentage: percent of the width (from the left) to filter;
                None filters the whole image.
        Returns:
            A new image of the same size.
        """
        split_point = resolve_split_point(image.width, split_percentage)
        if split_point == 0:
            return RasterImage(image.pixels.copy())
        transformed = self.transform(image.pixels)
        return RasterImage(merge_split(image.pixels, transformed, split_point))

    @abstractmethod
    def transform(self, pixels: np.ndarray) -> np.ndarray:
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


# ─── Convolution family ──────────────────────────────────────────────
class KernelFilter(Filter):
    name = "kernel"

    def __init__(self, kernel: Kernel):
        self.kernel = kernel

    def transform(self, pixels: np.ndarray) -> np.ndarray:
        return to_channels(convolve(pixels, self.kernel))


class BlurFilter(KernelFilter):
    name = "blur"

    def __init__(self):
        super().__init__(BLUR_KERNEL)


class SharpenFilter(KernelFilter):
    name = "sharpen"

    def __init__(self):
        super().__init__(SHARPEN_KERNEL)


# ─── Per-pixel family ────────────────────────────────────────────────
def _gray(values: np.ndarray) -> np.ndarray:
    """(H, W) -> (H, W, 3) with the value replicated in every channel."""
    return np.repeat(values[..., np.newaxis], 3, axis=2).astype(np.int32)


class RedComponentFilter(Filter):
    name = "red-component"

    def transform(self, pixels):
        return _gray(pixels[..., 0])


class GreenComponentFilter(Filter):
    name = "green-component"

    def transform(self, pixels):
        return _gray(pixels[..., 1])


class BlueComponentFilter(Filter):
    name = "blue-component"

    def transform(self, pixels):
        return _gray(pixels[..., 2])


class ValueComponentFilter(Filter):
    name = "value-component"

    def transform(self, pixels):
        return _gray(pixels.max(axis=2))


class IntensityComponentFilter(Filter):
    name = "intensity-component"

    def transform(self, pixels):
        # integer division, truncates
        return _gray(pixels.astype(np.int64).sum(axis=2) // 3)


class LumaComponentFilter(Filter):
    name = "luma-component"

    def transform(self, pixels):
        r, g, b = (pixels[..., c].astype(np.float64) for c in range(3))
        return _gray(to_channels(0.2126 * r + 0.7152 * g + 0.0722 * b))


SEPIA_MATRIX = np.array([
    [0.393, 0.769, 0.189],
    [0.349, 0.686, 0.168],
    [0.272, 0.534, 0.131],
])


class SepiaFilter(Filter):
    name = "sepia"

    def transform(self, pixels):
        r, g, b = (pixels[..., c].astype(np.float64) for c in range(3))
        toned = [m[0] * r + m[1] * g + m[2] * b for m in SEPIA_MATRIX]
        return to_channels(np.stack(toned, axis=2))


ALL_FILTERS = (
    BlurFilter,
    SharpenFilter,
    SepiaFilter,
    RedComponentFilter,
    GreenComponentFilter,
    BlueComponentFilter,
    LumaComponentFilter,
    IntensityComponentFilter,
    ValueComponentFilter,
)
