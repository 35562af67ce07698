#!/usr/bin/env python3
"""
Fixed-capacity ring buffer holding an orbiter's recent world positions.

Points live in a (capacity, 3) numpy array. The write cursor wraps around,
overwriting the oldest row. Unwritten rows are NaN and the number of valid
rows is tracked explicitly, so a computed position that happens to equal the
effect center is never mistaken for an empty slot.
"""
import numpy as np

from .vector_utils import Vec3


class TrailBuffer:
    """Circular history of world positions, oldest entry at ``index`` once full."""

    def __init__(self, capacity: int):
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self.points = np.full((capacity, 3), np.nan)
        self.index = 0  # next write slot
        self.count = 0

    def __len__(self) -> int:
        return self.count

    @property
    def filled(self) -> bool:
        return self.count == self.capacity

    def push(self, point: Vec3) -> None:
        """Write point at the cursor and advance it modulo capacity."""
        self.points[self.index] = point
        self.index = (self.index + 1) % self.capacity
        if self.count < self.capacity:
            self.count += 1

    def chronological(self) -> np.ndarray:
        """Valid points ordered oldest to newest, shape (count, 3). Do not modify."""
        if self.filled and self.index:
            return np.concatenate((self.points[self.index:], self.points[:self.index]))
        return self.points[:self.count]
