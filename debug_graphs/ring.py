from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

import numpy as np


RingState = Literal["empty", "filling", "full"]


@dataclass
class SampleRing:
    """Fixed-capacity circular sample buffer, allocated once and reused."""

    capacity: int

    def __post_init__(self) -> None:
        if self.capacity <= 0:
            raise ValueError("capacity must be > 0")
        self._values = np.zeros(self.capacity, dtype=np.float64)
        self._size = 0
        self.next_index = 0

    def __len__(self) -> int:
        return self._size

    @property
    def state(self) -> RingState:
        if self._size == 0:
            return "empty"
        if self._size < self.capacity:
            return "filling"
        return "full"

    def push(self, value: float) -> None:
        # While filling, next_index == size, so append and overwrite share one write.
        self._values[self.next_index] = float(value)
        if self._size < self.capacity:
            self._size += 1
        self.next_index = (self.next_index + 1) % self.capacity

    def raw(self) -> np.ndarray:
        """Filled slots in storage order (no copy)."""
        return self._values[: self._size]

    def ordered(self) -> np.ndarray:
        """Samples oldest-first, reading from `next_index` and wrapping."""
        if self._size < self.capacity:
            return self._values[: self._size].copy()
        return np.concatenate((self._values[self.next_index :], self._values[: self.next_index]))
