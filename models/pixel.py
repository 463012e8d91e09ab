from __future__ import annotations
from dataclasses import dataclass
import numpy as np


CHANNEL_MIN = 0
CHANNEL_MAX = 255


@dataclass(frozen=True)
class Pixel:
    """
    One RGB colour value.
    Channels are plain ints; producers clamp to [0, 255], the type does not.
    """
    red: int = 0
    green: int = 0
    blue: int = 0

    def as_tuple(self) -> tuple[int, int, int]:
        return self.red, self.green, self.blue

    @classmethod
    def clamped(cls, red: float, green: float, blue: float) -> "Pixel":
        return cls(clamp_channel(red), clamp_channel(green), clamp_channel(blue))


BLACK = Pixel(0, 0, 0)
WHITE = Pixel(255, 255, 255)
RED = Pixel(255, 0, 0)
GREEN = Pixel(0, 255, 0)
BLUE = Pixel(0, 0, 255)


def clamp_channel(value: float) -> int:
    return int(max(CHANNEL_MIN, min(CHANNEL_MAX, value)))


# ─── Array helpers shared by every operation ─────────────────────────
def round_channels(values: np.ndarray) -> np.ndarray:
    """Round half up, the single rounding rule used across the engine."""
    return np.floor(np.asarray(values, dtype=np.float64) + 0.5)


def clamp_channels(values: np.ndarray) -> np.ndarray:
    """Clip to the channel range and return int32 values."""
    return np.clip(values, CHANNEL_MIN, CHANNEL_MAX).astype(np.int32)


def to_channels(values: np.ndarray) -> np.ndarray:
    """round_channels + clamp_channels."""
    return clamp_channels(round_channels(values))
