"""Hull Moving Average (HMA) indicator implementation."""

import math

from signaldesk.chartdata import Candle
from .base import Indicator, clamp01, require_positive
from .rolling import WeightedWindow

# HMA slope (fraction of the previous HMA) that maps to full strength
_FULL_STRENGTH_SLOPE = 0.01


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


class HullMA(Indicator):
    """
    Hull Moving Average.

      raw = 2 * WMA(close, round(p / 2)) - WMA(close, p)
      HMA = WMA(raw, round(sqrt(p)))

    Weighted windows keep each step O(1).
    """

    def __init__(self, period: int = 14):
        super().__init__()
        self.period = require_positive("period", period)
        self.half_period = max(1, _round_half_up(self.period / 2.0))
        self.sqrt_period = max(1, _round_half_up(math.sqrt(self.period)))

        self._wma_half = WeightedWindow(self.half_period)
        self._wma_full = WeightedWindow(self.period)
        self._wma_sqrt = WeightedWindow(self.sqrt_period)
        self._prev_hma: float | None = None
        self._hma: float | None = None

    def _update(self, candle: Candle) -> float | None:
        close = float(candle.close)
        half = self._wma_half.push(close)
        full = self._wma_full.push(close)

        if half is None or full is None:
            return None

        hma = self._wma_sqrt.push(2.0 * half - full)
        if hma is None:
            return None

        self._prev_hma = self._hma
        self._hma = hma
        return hma

    def _reset(self) -> None:
        self._wma_half.clear()
        self._wma_full.clear()
        self._wma_sqrt.clear()
        self._prev_hma = None
        self._hma = None

    def _buy(self, price: float) -> bool:
        return self._value is not None and price > self._value

    def _sell(self, price: float) -> bool:
        return self._value is not None and price < self._value

    def slope(self) -> float:
        """Last HMA change as a fraction of the previous HMA (0 until two values exist)."""
        if self._value is None or not self._prev_hma:
            return 0.0
        return (self._value - self._prev_hma) / abs(self._prev_hma)

    def trend(self) -> int:
        """1 while the HMA rises, -1 while it falls, 0 when flat or warming up."""
        slope = self.slope()
        if slope > 0.0:
            return 1
        if slope < 0.0:
            return -1
        return 0

    def signal_strength(self) -> float:
        return clamp01(abs(self.slope()) / _FULL_STRENGTH_SLOPE)

    def outputs(self) -> dict[str, float | None]:
        return {"hma": self._value, "previous": self._prev_hma}

    def name(self) -> str:
        return f"HullMA({self.period})"

    def required_periods(self) -> int:
        return self.period + self.sqrt_period
