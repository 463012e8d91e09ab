from __future__ import annotations
from typing import Optional, Tuple
import logging
import numpy as np

from models.pixel import Pixel, RED, GREEN, BLUE, WHITE
from models.raster_image import RasterImage

logger = logging.getLogger(__name__)

BINS = 256
CANVAS_SIZE = 256


class HistogramService:
    """
    Per-channel frequency counts and their 256x256 line-plot rendering.
    """

    @staticmethod
    def compute_histograms(
            image: RasterImage,
            split_point: Optional[int] = None,
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Args:
            image: source image.
            split_point: count only columns [0, split_point); None counts all.
        Returns:
            (red, green, blue) arrays of 256 int64 counts.
        """
        region = image.pixels if split_point is None else image.pixels[:, :split_point]
        region = np.clip(region, 0, BINS - 1)
        return tuple(
            np.bincount(region[..., c].ravel(), minlength=BINS).astype(np.int64)
            for c in range(3)
        )

    @staticmethod
    def _draw_line(canvas: np.ndarray, x1: int, y1: int, x2: int, y2: int, color: Pixel) -> None:
        """Bresenham; points off the canvas are skipped."""
        h, w = canvas.shape[:2]
        dx, dy = abs(x2 - x1), abs(y2 - y1)
        sx = 1 if x1 < x2 else -1
        sy = 1 if y1 < y2 else -1
        err = dx - dy
        while True:
            if 0 <= x1 < w and 0 <= y1 < h:
                canvas[y1, x1] = color.as_tuple()
            if x1 == x2 and y1 == y2:
                break
            e2 = 2 * err
            if e2 > -dy:
                err -= dy
                x1 += sx
            if e2 < dx:
                err += dx
                y1 += sy

    def render_histogram(self, image: RasterImage) -> RasterImage:
        """
        Plot the three channel histograms on a white 256x256 canvas,
        each scaled so its tallest bin reaches the top edge.
        """
        canvas = np.empty((CANVAS_SIZE, CANVAS_SIZE, 3), dtype=np.int32)
        canvas[:, :] = WHITE.as_tuple()

        for hist, color in zip(self.compute_histograms(image), (RED, GREEN, BLUE)):
            peak = int(hist.max())
            logger.debug(f"Histogram peak count for {color}: {peak}")
            scale = CANVAS_SIZE / peak if peak > 0 else 1
            heights = [CANVAS_SIZE - int(v * scale) for v in hist]
            for i in range(BINS - 1):
                self._draw_line(canvas, i, heights[i], i + 1, heights[i + 1], color)

        return RasterImage(canvas)
