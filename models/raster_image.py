from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence
import numpy as np

from models.errors import InvalidDimensionsError, OutOfBoundsError
from models.pixel import Pixel


@dataclass(eq=False)
class RasterImage:
    """
    Simple data object: RGB pixels (+ optional source path for bookkeeping).
    Equality and hashing look at pixel content only, never at the path.
    """
    pixels: np.ndarray  # Shape (H, W, 3), dtype int32, RGB order.
    path: Path | None = None  # Source / destination of the image.

    def __post_init__(self):
        pixels = np.array(self.pixels, dtype=np.int32)
        if pixels.ndim != 3 or pixels.shape[2] != 3:
            raise InvalidDimensionsError(
                f"Pixel buffer must have shape (H, W, 3), got {pixels.shape}")
        self.pixels = pixels
        if self.path is not None:
            self.path = Path(self.path)

    # ─── Constructors ────────────────────────────────────────────────
    @classmethod
    def blank(cls, width: int, height: int, fill: Pixel = Pixel()) -> "RasterImage":
        """A width x height image filled with `fill` (black by default)."""
        if width <= 0 or height <= 0:
            raise InvalidDimensionsError(
                f"Width and height must be positive, got {width}x{height}")
        pixels = np.empty((height, width, 3), dtype=np.int32)
        pixels[:, :] = fill.as_tuple()
        return cls(pixels)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Pixel]]) -> "RasterImage":
        """
        Build an image from rows of Pixel (rows[y][x]).
        An empty grid gives a degenerate 0x0 image.
        """
        if len(rows) == 0:
            return cls(np.zeros((0, 0, 3), dtype=np.int32))
        width = len(rows[0])
        if width == 0:
            raise InvalidDimensionsError("Pixel rows must not be empty")
        for y, row in enumerate(rows):
            if len(row) != width:
                raise InvalidDimensionsError(
                    f"All rows must have the same width: row {y} has {len(row)}, expected {width}")
        return cls(np.array([[p.as_tuple() for p in row] for row in rows], dtype=np.int32))

    @classmethod
    def from_triples(cls, width: int, height: int,
                     values: Iterable[int]) -> "RasterImage":
        """Row-major flat channel values, three per pixel."""
        flat = np.fromiter(values, dtype=np.int32)
        if width <= 0 or height <= 0 or flat.size != width * height * 3:
            raise InvalidDimensionsError(
                f"Expected {width}x{height}x3 channel values, got {flat.size}")
        return cls(flat.reshape(height, width, 3))

    # ─── Geometry ────────────────────────────────────────────────────
    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def same_size(self, other: "RasterImage") -> bool:
        return self.size == other.size

    # ─── Pixel access ────────────────────────────────────────────────
    def _check(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise OutOfBoundsError(
                f"Coordinates out of bounds: ({x}, {y}) for {self.width}x{self.height}")

    def get_pixel(self, x: int, y: int) -> Pixel:
        self._check(x, y)
        r, g, b = self.pixels[y, x]
        return Pixel(int(r), int(g), int(b))

    def set_pixel(self, x: int, y: int, pixel: Pixel) -> None:
        self._check(x, y)
        self.pixels[y, x] = pixel.as_tuple()

    def rows(self) -> list[list[Pixel]]:
        return [[Pixel(int(r), int(g), int(b)) for r, g, b in row] for row in self.pixels]

    # ─── Copies / conversions ────────────────────────────────────────
    def copy(self) -> "RasterImage":
        return RasterImage(self.pixels.copy(), self.path)

    def to_uint8(self) -> np.ndarray:
        """C-contiguous uint8 (H, W, 3) buffer for codecs."""
        return np.ascontiguousarray(np.clip(self.pixels, 0, 255).astype(np.uint8))

    def __eq__(self, other) -> bool:
        if not isinstance(other, RasterImage):
            return NotImplemented
        return self.pixels.shape == other.pixels.shape and np.array_equal(self.pixels, other.pixels)

    def __hash__(self) -> int:
        return hash((self.pixels.shape, self.pixels.tobytes()))

    def __repr__(self) -> str:
        return f"RasterImage({self.width}x{self.height}, path={self.path})"
