"""
Haar wavelet compression.

Each channel is padded to a square power-of-two matrix, transformed with a
separable multi-level 2D Haar transform, thresholded, transformed back,
cropped and re-quantised. Compression and reconstruction always happen in
the same call: the result is the lossy image, not the coefficients.
"""
from __future__ import annotations
import logging
import math
import numpy as np

from models.errors import InvalidDimensionsError, InvalidParameterError
from models.pixel import to_channels
from models.raster_image import RasterImage
from models.split_region import Percentage, validate_percentage

logger = logging.getLogger(__name__)

SQRT2 = math.sqrt(2)


def next_power_of_two(n: int) -> int:
    if n <= 1:
        return 1
    return 1 << (n - 1).bit_length()


def _check_power_of_two(length: int) -> None:
    if length < 1 or length & (length - 1):
        raise InvalidDimensionsError(f"Haar transform needs a power-of-two length, got {length}")


# ─── 1D ──────────────────────────────────────────────────────────────
def haar_transform(data: np.ndarray) -> np.ndarray:
    """
    Multi-level forward Haar along the last axis.
    Averages land in the first half, differences in the second, and the
    first half is transformed again until a single value remains.
    """
    out = np.array(data, dtype=np.float64)
    length = out.shape[-1]
    _check_power_of_two(length)
    while length > 1:
        half = length // 2
        evens = out[..., 0:length:2]
        odds = out[..., 1:length:2]
        avg = (evens + odds) / SQRT2
        diff = (evens - odds) / SQRT2
        out[..., :half] = avg
        out[..., half:length] = diff
        length = half
    return out


def inverse_haar_transform(data: np.ndarray) -> np.ndarray:
    """Exact inverse of `haar_transform`, growing the active length from 2."""
    out = np.array(data, dtype=np.float64)
    total = out.shape[-1]
    _check_power_of_two(total)
    length = 2
    while length <= total:
        half = length // 2
        avg = out[..., :half].copy()
        diff = out[..., half:length].copy()
        out[..., 0:length:2] = (avg + diff) / SQRT2
        out[..., 1:length:2] = (avg - diff) / SQRT2
        length *= 2
    return out


# ─── 2D ──────────────────────────────────────────────────────────────
def _square_size(matrix: np.ndarray) -> int:
    size = matrix.shape[-1]
    if matrix.ndim < 2 or matrix.shape[-2] != size:
        raise InvalidDimensionsError(f"Haar 2D needs square matrices, got shape {matrix.shape}")
    _check_power_of_two(size)
    return size


def haar_2d(matrix: np.ndarray) -> np.ndarray:
    """
    Forward 2D Haar on (..., N, N) with N a power of two.

    At each size (N, N/2, ..., 2) only the top-left size x size block is
    touched: rows first, then columns.
    """
    out = np.array(matrix, dtype=np.float64)
    size = _square_size(out)
    while size > 1:
        block = out[..., :size, :size]
        block[...] = haar_transform(block)
        block[...] = np.swapaxes(haar_transform(np.swapaxes(block, -1, -2)), -1, -2)
        size //= 2
    return out


def inverse_haar_2d(matrix: np.ndarray) -> np.ndarray:
    """Mirror of `haar_2d`: sizes 2..N, columns first, then rows."""
    out = np.array(matrix, dtype=np.float64)
    full = _square_size(out)
    size = 2
    while size <= full:
        block = out[..., :size, :size]
        block[...] = np.swapaxes(inverse_haar_transform(np.swapaxes(block, -1, -2)), -1, -2)
        block[...] = inverse_haar_transform(block)
        size *= 2
    return out


# ─── Padding / thresholding ──────────────────────────────────────────
def pad_channels(image: RasterImage) -> np.ndarray:
    """(3, P, P) float matrices, P = next_power_of_two(max(width, height))."""
    padded_size = next_power_of_two(max(image.width, image.height))
    padded = np.zeros((3, padded_size, padded_size), dtype=np.float64)
    padded[:, :image.height, :image.width] = np.moveaxis(image.pixels, -1, 0)
    return padded


def crop_channels(channels: np.ndarray, width: int, height: int) -> np.ndarray:
    """(3, P, P) -> (height, width, 3)"""
    return np.moveaxis(channels[:, :height, :width], 0, -1)


def apply_threshold(coefficients: np.ndarray, threshold: float) -> np.ndarray:
    """Zero every coefficient whose magnitude is below `threshold`."""
    return np.where(np.abs(coefficients) < threshold, 0.0, coefficients)


class CompressionService:
    """
    Lossy Haar wavelet compression for RasterImage objects.
    """

    @staticmethod
    def transform_image(image: RasterImage) -> np.ndarray:
        """Forward 2D Haar coefficients of the padded channels, shape (3, P, P)."""
        return haar_2d(pad_channels(image))

    def compress_image(self, image: RasterImage, threshold: float) -> RasterImage:
        """
        Args:
            image: source image.
            threshold: coefficients with magnitude below this are dropped;
                0 keeps everything.
        Returns:
            The reconstructed image, same size as the source.
        """
        if threshold < 0:
            raise InvalidParameterError(f"Compression threshold must be >= 0, got {threshold}")
        if image.width == 0 or image.height == 0:
            return image.copy()

        coefficients = self.transform_image(image)
        kept = apply_threshold(coefficients, threshold)
        logger.debug(
            f"Haar compression: padded={coefficients.shape[-1]} threshold={threshold} "
            f"zeroed={int(np.count_nonzero(kept == 0))}/{kept.size}"
        )
        restored = inverse_haar_2d(kept)
        return RasterImage(to_channels(crop_channels(restored, image.width, image.height)))

    def compression_threshold(self, image: RasterImage, percentage: Percentage) -> float:
        """
        Threshold that drops roughly `percentage` percent of the coefficients.
        100 gives a value above the largest magnitude, so nothing survives.
        """
        validate_percentage(percentage, "Compression percentage")
        if percentage == 0 or image.width == 0 or image.height == 0:
            return 0.0
        magnitudes = np.sort(np.abs(self.transform_image(image)).ravel())
        cutoff = int(percentage / 100 * magnitudes.size)
        if cutoff >= magnitudes.size:
            return float(np.nextafter(magnitudes[-1], np.inf))
        return float(magnitudes[cutoff])

    def compress_by_percentage(self, image: RasterImage, percentage: Percentage) -> RasterImage:
        threshold = self.compression_threshold(image, percentage)
        logger.info(f"Compressing {image.width}x{image.height} at {percentage}% (threshold {threshold:.4f})")
        return self.compress_image(image, threshold)
