from __future__ import annotations
from dataclasses import dataclass
import numpy as np

from models.errors import InvalidParameterError


@dataclass(frozen=True, eq=False)
class Kernel:
    """
    Immutable odd-sized square matrix of convolution weights.
    weights[i + radius][j + radius] weighs the neighbour at (x + j, y + i).
    """
    weights: np.ndarray

    def __post_init__(self):
        weights = np.array(self.weights, dtype=np.float64)
        if weights.ndim != 2 or weights.shape[0] != weights.shape[1] or weights.shape[0] % 2 == 0:
            raise InvalidParameterError(
                f"Kernel must be an odd-sized square matrix, got shape {weights.shape}")
        weights.setflags(write=False)
        object.__setattr__(self, "weights", weights)

    @property
    def size(self) -> int:
        return self.weights.shape[0]

    @property
    def radius(self) -> int:
        return (self.size - 1) // 2


BLUR_KERNEL = Kernel([
    [1 / 16.0, 1 / 8.0, 1 / 16.0],
    [1 / 8.0, 1 / 4.0, 1 / 8.0],
    [1 / 16.0, 1 / 8.0, 1 / 16.0],
])

SHARPEN_KERNEL = Kernel([
    [-1 / 8.0, -1 / 8.0, -1 / 8.0, -1 / 8.0, -1 / 8.0],
    [-1 / 8.0, 1 / 4.0, 1 / 4.0, 1 / 4.0, -1 / 8.0],
    [-1 / 8.0, 1 / 4.0, 1.0, 1 / 4.0, -1 / 8.0],
    [-1 / 8.0, 1 / 4.0, 1 / 4.0, 1 / 4.0, -1 / 8.0],
    [-1 / 8.0, -1 / 8.0, -1 / 8.0, -1 / 8.0, -1 / 8.0],
])


def convolve(pixels: np.ndarray, kernel: Kernel) -> np.ndarray:
    """
    Weighted neighbourhood sum for every pixel of an (H, W, 3) buffer.

    Neighbours that fall outside the image contribute nothing (zero padding
    is equivalent to skipping them). Returns float64 sums, unrounded.
    """
    h, w = pixels.shape[:2]
    r = kernel.radius
    padded = np.zeros((h + 2 * r, w + 2 * r, 3), dtype=np.float64)
    padded[r:r + h, r:r + w] = pixels

    acc = np.zeros((h, w, 3), dtype=np.float64)
    for i in range(-r, r + 1):
        for j in range(-r, r + 1):
            weight = kernel.weights[i + r, j + r]
            acc += padded[r + i:r + i + h, r + j:r + j + w] * weight
    return acc
