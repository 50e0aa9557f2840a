"""Fixed-capacity rolling-window primitives shared by the indicators."""

import math
from collections import deque
from typing import Iterable

import numpy as np

from signaldesk.errors import InvalidParameterError


class RollingWindow:
    """
    Circular buffer keeping a running sum and sum of squares.

    push():   O(1) - evict the value under the write cursor, insert, advance
    mean:     sum / count
    variance: E[x^2] - E[x]^2, clamped to >= 0 (population, ddof=0)

    A count of non-zero live values is kept so that a window holding only
    zeros reports an exact 0.0 sum even after many evictions.
    """

    def __init__(self, capacity: int):
        if capacity <= 0:
            raise InvalidParameterError("capacity must be > 0")
        self.capacity = capacity
        self._values: list[float] = [0.0] * capacity
        self._cursor: int = 0
        self._count: int = 0
        self._nonzero: int = 0
        self._sum: float = 0.0
        self._sum_sq: float = 0.0

    def push(self, value: float) -> float | None:
        """Insert a value; return the evicted value once the window is full."""
        value = float(value)
        evicted: float | None = None

        if self._count == self.capacity:
            evicted = self._values[self._cursor]
            self._sum -= evicted
            self._sum_sq -= evicted * evicted
            if evicted != 0.0:
                self._nonzero -= 1
        else:
            self._count += 1

        self._values[self._cursor] = value
        self._sum += value
        self._sum_sq += value * value
        if value != 0.0:
            self._nonzero += 1

        self._cursor = (self._cursor + 1) % self.capacity
        return evicted

    def fill(self, values: Iterable[float]) -> None:
        """Cold start from the most recent `capacity` values."""
        arr = np.asarray(list(values), dtype=np.float64)[-self.capacity :]
        self.clear()

        n = len(arr)
        self._values[:n] = arr.tolist()
        self._count = n
        self._cursor = n % self.capacity
        self._nonzero = int(np.count_nonzero(arr))
        self._sum = float(arr.sum())
        self._sum_sq = float(np.dot(arr, arr))

    def clear(self) -> None:
        self._values = [0.0] * self.capacity
        self._cursor = 0
        self._count = 0
        self._nonzero = 0
        self._sum = 0.0
        self._sum_sq = 0.0

    @property
    def full(self) -> bool:
        return self._count == self.capacity

    @property
    def sum(self) -> float:
        if self._nonzero == 0:
            return 0.0
        return self._sum

    @property
    def mean(self) -> float:
        if self._count == 0:
            return 0.0
        return self.sum / self._count

    @property
    def variance(self) -> float:
        if self._count == 0 or self._nonzero == 0:
            return 0.0
        mean = self._sum / self._count
        var = self._sum_sq / self._count - mean * mean
        return var if var > 0.0 else 0.0

    @property
    def std(self) -> float:
        return math.sqrt(self.variance)

    @property
    def newest(self) -> float | None:
        if self._count == 0:
            return None
        return self._values[(self._cursor - 1) % self.capacity]

    @property
    def oldest(self) -> float | None:
        if self._count == 0:
            return None
        if self._count < self.capacity:
            return self._values[0]
        return self._values[self._cursor]

    def values(self) -> list[float]:
        """Live values, oldest first."""
        if self._count < self.capacity:
            return self._values[: self._count]
        return self._values[self._cursor :] + self._values[: self._cursor]

    def __len__(self) -> int:
        return self._count


class RollingExtremes:
    """
    Rolling maximum and minimum over the last `capacity` pushes.

    Monotonic deques of (index, value): each value is appended and popped
    at most once, so push() is O(1) amortised.
    """

    def __init__(self, capacity: int):
        if capacity <= 0:
            raise InvalidParameterError("capacity must be > 0")
        self.capacity = capacity
        self._maxima: deque[tuple[int, float]] = deque()
        self._minima: deque[tuple[int, float]] = deque()
        self._index: int = 0

    def push(self, high: float, low: float | None = None) -> None:
        """Track `high` for the maximum and `low` (default: high) for the minimum."""
        high = float(high)
        low = high if low is None else float(low)
        i = self._index
        self._index += 1

        while self._maxima and self._maxima[-1][1] <= high:
            self._maxima.pop()
        self._maxima.append((i, high))

        while self._minima and self._minima[-1][1] >= low:
            self._minima.pop()
        self._minima.append((i, low))

        expired = i - self.capacity
        while self._maxima[0][0] <= expired:
            self._maxima.popleft()
        while self._minima[0][0] <= expired:
            self._minima.popleft()

    def clear(self) -> None:
        self._maxima.clear()
        self._minima.clear()
        self._index = 0

    @property
    def full(self) -> bool:
        return self._index >= self.capacity

    @property
    def max(self) -> float | None:
        return self._maxima[0][1] if self._maxima else None

    @property
    def min(self) -> float | None:
        return self._minima[0][1] if self._minima else None

    def __len__(self) -> int:
        return min(self._index, self.capacity)


class WeightedWindow:
    """
    Linearly weighted moving average (weights 1..n, newest heaviest).

    Weighted sum update once full:
      ws' = ws - sum(previous window) + n * x
    """

    def __init__(self, capacity: int):
        self._window = RollingWindow(capacity)
        self.capacity = capacity
        self._weighted_sum: float = 0.0
        self._divisor = capacity * (capacity + 1) / 2.0

    def push(self, value: float) -> float | None:
        value = float(value)
        previous_sum = self._window.sum
        evicted = self._window.push(value)

        if evicted is None:
            self._weighted_sum += len(self._window) * value
        else:
            self._weighted_sum += self.capacity * value - previous_sum

        return self.value

    @property
    def value(self) -> float | None:
        if not self._window.full:
            return None
        return self._weighted_sum / self._divisor

    @property
    def full(self) -> bool:
        return self._window.full

    def clear(self) -> None:
        self._window.clear()
        self._weighted_sum = 0.0
