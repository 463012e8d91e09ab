from __future__ import annotations
from typing import Optional
import logging
import numpy as np

from models.errors import InvalidParameterError
from models.pixel import clamp_channels, to_channels
from models.raster_image import RasterImage
from models.split_region import Percentage, resolve_split_point, merge_split
from services.histogram_service import HistogramService

logger = logging.getLogger(__name__)

# Bins searched for a meaningful peak: [PEAK_LOW, PEAK_HIGH)
PEAK_LOW = 10
PEAK_HIGH = 245


class TonalService:
    """
    Levels adjustment and histogram-peak colour correction.
    """

    def __init__(self, histogram_service: HistogramService = None):
        self.histogram_service = histogram_service or HistogramService()

    # ─── Levels ──────────────────────────────────────────────────────
    @staticmethod
    def adjust_level(values: np.ndarray, b: int, m: int, w: int) -> np.ndarray:
        """Three-point piecewise-linear remap of channel values."""
        v = np.asarray(values, dtype=np.float64)
        low = 127.0 * (v - b) / (m - b)
        high = 127 + 128.0 * (v - m) / (w - m)
        mapped = np.select(
            [v <= b, v >= w, v <= m],
            [0.0, 255.0, low],
            default=high,
        )
        return to_channels(mapped)

    def levels_adjust(
            self,
            image: RasterImage,
            b: int,
            m: int,
            w: int,
            split_percentage: Optional[Percentage] = None,
    ) -> RasterImage:
        """
        Args:
            image: source image.
            b, m, w: black, mid and white points, 0 <= b < m < w <= 255.
            split_percentage: active width percentage, default 100.
        Returns:
            Adjusted image; columns past the split are copied unchanged.
        """
        if not (0 <= b < m < w <= 255):
            raise InvalidParameterError(f"Values must be 0 <= b < m < w <= 255, got {b}, {m}, {w}")
        split_point = resolve_split_point(image.width, split_percentage)
        adjusted = self.adjust_level(image.pixels, b, m, w)
        logger.debug(f"Levels b={b} m={m} w={w} split_point={split_point}")
        return RasterImage(merge_split(image.pixels, adjusted, split_point))

    # ─── Colour correction ───────────────────────────────────────────
    @staticmethod
    def find_meaningful_peak(histogram: np.ndarray) -> int:
        """Most frequent bin in [10, 245); ties go to the lower bin."""
        window = np.asarray(histogram)[PEAK_LOW:PEAK_HIGH]
        return PEAK_LOW + int(np.argmax(window))

    def color_correct(self, image: RasterImage, split_percentage: Optional[Percentage] = None) -> RasterImage:
        """
        Shift each channel so its histogram peak lines up with the average
        peak of the three channels. Only the split region is measured and
        corrected.
        """
        split_point = resolve_split_point(image.width, split_percentage)
        histograms = self.histogram_service.compute_histograms(image, split_point)
        peaks = [self.find_meaningful_peak(h) for h in histograms]
        average_peak = sum(peaks) // 3
        offsets = np.array([average_peak - p for p in peaks], dtype=np.int64)
        logger.debug(f"Colour correction peaks={peaks} offsets={offsets.tolist()}")

        corrected = clamp_channels(image.pixels.astype(np.int64) + offsets)
        return RasterImage(merge_split(image.pixels, corrected, split_point))
