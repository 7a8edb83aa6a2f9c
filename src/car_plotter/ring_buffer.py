"""Fixed-capacity history buffer with overwrite-oldest semantics."""

from __future__ import annotations

from dataclasses import dataclass, field
from numbers import Integral

import numpy as np

from car_plotter.errors import InvalidCapacity


@dataclass(slots=True)
class RingBuffer:
    """Fixed number of ``dim``-dimensional slots, oldest overwritten first.

    Absent slots hold NaN rows so plotting backends leave them out instead of
    drawing a spurious ``(0, 0)`` vertex. Pushes are O(1): the write index
    advances modulo ``capacity`` and the storage is never reallocated.
    """

    capacity: int
    dim: int = 2
    _data: np.ndarray = field(init=False, repr=False)
    _head: int = field(init=False, repr=False)
    _count: int = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if isinstance(self.capacity, bool) or not isinstance(self.capacity, Integral) or self.capacity < 1:
            raise InvalidCapacity(f"Ring buffer capacity must be an integer >= 1, got {self.capacity!r}")
        self.capacity = int(self.capacity)
        self._data = np.full((self.capacity, self.dim), np.nan, dtype=float)
        self._head = 0
        self._count = 0

    def __len__(self) -> int:
        return self.capacity

    @property
    def count(self) -> int:
        """Number of slots holding real values."""
        return self._count

    @property
    def is_full(self) -> bool:
        return self._count == self.capacity

    def push(self, value) -> None:
        """Overwrite the oldest slot with ``value``."""
        row = np.asarray(value, dtype=float).reshape(-1)
        if row.size != self.dim:
            raise ValueError(f"Expected {self.dim} values per entry, got {row.size}")
        self._data[self._head] = row
        self._head = (self._head + 1) % self.capacity
        self._count = min(self._count + 1, self.capacity)

    def snapshot(self) -> np.ndarray:
        """Return all slots ordered oldest to newest, absent slots first as NaN rows."""
        return np.roll(self._data, -self._head, axis=0)

    def values(self) -> np.ndarray:
        """Return only the real entries, oldest first."""
        return self.snapshot()[self.capacity - self._count :]

    def clear(self) -> None:
        """Mark every slot as absent."""
        self._data.fill(np.nan)
        self._head = 0
        self._count = 0
