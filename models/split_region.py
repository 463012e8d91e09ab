"""
Split-percentage policy shared by filters and tonal operations.

Columns [0, split_point) receive the operation, columns from split_point
onwards are copied from the source unchanged.
"""
from __future__ import annotations
from typing import Optional, Union
import numpy as np

from models.errors import InvalidParameterError

Percentage = Union[int, float]


def validate_percentage(percentage: Percentage, what: str = "Split percentage") -> None:
    if not 0 <= percentage <= 100:
        raise InvalidParameterError(f"{what} must be between 0 and 100, got {percentage}")


def resolve_split_point(width: int, split_percentage: Optional[Percentage] = None) -> int:
    """floor(width * p / 100); None means the whole width."""
    if split_percentage is None:
        return width
    validate_percentage(split_percentage)
    return int(width * split_percentage // 100)


def merge_split(source: np.ndarray, transformed: np.ndarray, split_point: int) -> np.ndarray:
    """Left of split_point from `transformed`, the rest from `source`."""
    result = np.array(source, dtype=np.int32)
    result[:, :split_point] = transformed[:, :split_point]
    return result
