from __future__ import annotations
from typing import Tuple
import logging
import numpy as np

from models.errors import InvalidDimensionsError, InvalidParameterError
from models.pixel import clamp_channels, to_channels
from models.raster_image import RasterImage

logger = logging.getLogger(__name__)


class TransformService:
    """
    Geometric and intensity transforms plus RGB split/combine.
    Every method returns a *new* RasterImage; sources are never mutated.
    """

    # ─── Flips ───────────────────────────────────────────────────────
    @staticmethod
    def flip_horizontal(image: RasterImage) -> RasterImage:
        """output(x, y) = input(width - 1 - x, y)"""
        return RasterImage(image.pixels[:, ::-1])

    @staticmethod
    def flip_vertical(image: RasterImage) -> RasterImage:
        """output(x, y) = input(x, height - 1 - y)"""
        return RasterImage(image.pixels[::-1, :])

    # ─── Intensity ───────────────────────────────────────────────────
    @staticmethod
    def brighten(image: RasterImage, factor: int) -> RasterImage:
        """Add `factor` to every channel, clamped. Negative darkens."""
        return RasterImage(clamp_channels(image.pixels.astype(np.int64) + int(factor)))

    # ─── Resampling ──────────────────────────────────────────────────
    @staticmethod
    def downscale(image: RasterImage, target_width: int, target_height: int) -> RasterImage:
        """
        Bilinear resampling to target_width x target_height.

        Args:
            image: source image.
            target_width: 1..image.width
            target_height: 1..image.height
        Returns:
            New image of the target size.
        """
        orig_w, orig_h = image.size
        if target_width <= 0 or target_height <= 0:
            raise InvalidParameterError(
                f"Target dimensions must be positive, got {target_width}x{target_height}")
        if target_width > orig_w or target_height > orig_h:
            raise InvalidParameterError(
                f"Target {target_width}x{target_height} exceeds source {orig_w}x{orig_h}")

        sx = np.arange(target_width) * (orig_w / target_width)
        sy = np.arange(target_height) * (orig_h / target_height)
        x0 = np.minimum(np.floor(sx).astype(np.intp), orig_w - 1)
        y0 = np.minimum(np.floor(sy).astype(np.intp), orig_h - 1)
        x1 = np.minimum(x0 + 1, orig_w - 1)
        y1 = np.minimum(y0 + 1, orig_h - 1)
        dx = (sx - x0)[np.newaxis, :, np.newaxis]
        dy = (sy - y0)[:, np.newaxis, np.newaxis]

        src = image.pixels.astype(np.float64)
        c00 = src[np.ix_(y0, x0)]
        c10 = src[np.ix_(y0, x1)]
        c01 = src[np.ix_(y1, x0)]
        c11 = src[np.ix_(y1, x1)]

        top = c00 * (1 - dx) + c10 * dx
        bottom = c01 * (1 - dx) + c11 * dx
        logger.debug(f"Downscale {orig_w}x{orig_h} -> {target_width}x{target_height}")
        return RasterImage(to_channels(top * (1 - dy) + bottom * dy))

    # ─── Channels ────────────────────────────────────────────────────
    @staticmethod
    def rgb_split(image: RasterImage) -> Tuple[RasterImage, RasterImage, RasterImage]:
        """Three grayscale images, one per source channel."""
        return tuple(
            RasterImage(np.repeat(image.pixels[..., c:c + 1], 3, axis=2)) for c in range(3)
        )

    @staticmethod
    def rgb_combine(red: RasterImage, green: RasterImage, blue: RasterImage) -> RasterImage:
        """Red from the first image, green from the second, blue from the third."""
        if not (red.same_size(green) and red.same_size(blue)):
            raise InvalidDimensionsError(
                f"RGB combine needs equal sizes, got {red.size}, {green.size}, {blue.size}")
        return RasterImage(np.stack(
            [red.pixels[..., 0], green.pixels[..., 1], blue.pixels[..., 2]], axis=2))
