from __future__ import annotations

import numpy as np

from .range_tracker import ValueRange


def value_to_y(value: float, value_range: ValueRange, height: float, top: float = 0.0) -> float:
    """Linear, inverted mapping: `value_range.max` lands on `top`, `min` on `top + height`."""
    return (1.0 - (value - value_range.min) / (value_range.max - value_range.min)) * height + top


def values_to_y(values: np.ndarray, value_range: ValueRange, height: float, top: float = 0.0) -> np.ndarray:
    vals = np.asarray(values, dtype=np.float64)
    return (1.0 - (vals - value_range.min) / (value_range.max - value_range.min)) * height + top
