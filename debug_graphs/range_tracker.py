from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

import numpy as np


@dataclass(frozen=True)
class ValueRange:
    min: float
    max: float

    @property
    def span(self) -> float:
        return self.max - self.min


def apply_range_floor(vmin: float, vmax: float, floor: float) -> ValueRange:
    """Push both bounds outward by `floor / 2` when the span is below `floor`."""
    if vmax - vmin < floor:
        half = floor / 2.0
        return ValueRange(min=vmin - half, max=vmax + half)
    return ValueRange(min=vmin, max=vmax)


def window_range(values: np.ndarray | Iterable[float], floor: float) -> ValueRange:
    """Full scan of the samples currently on screen; keeps no state between calls."""
    arr = np.asarray(values, dtype=np.float64)
    if arr.size == 0:
        raise ValueError("window_range needs at least one sample")
    return apply_range_floor(float(np.min(arr)), float(np.max(arr)), floor)


@dataclass
class RunningExtrema:
    """Monotonically widening min/max for renderers that keep no sample history.

    The first sample seeds the range as `value - 1` / `value + 1`. Past extremes are
    never forgotten, even once their pixels have scrolled off the plot.
    """

    floor: float = 0.0
    min: float | None = None
    max: float | None = None

    def observe(self, value: float) -> ValueRange:
        """Return the widened range for `value` without committing it."""
        value = float(value)
        vmin = value - 1.0 if self.min is None else min(self.min, value)
        vmax = value + 1.0 if self.max is None else max(self.max, value)
        return apply_range_floor(vmin, vmax, self.floor)

    def commit(self, value_range: ValueRange) -> None:
        # Widening only: a narrower candidate never replaces a committed bound.
        self.min = value_range.min if self.min is None else min(self.min, value_range.min)
        self.max = value_range.max if self.max is None else max(self.max, value_range.max)

    def current(self) -> ValueRange | None:
        if self.min is None or self.max is None:
            return None
        return ValueRange(min=self.min, max=self.max)
