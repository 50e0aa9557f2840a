"""Simple Moving Average (SMA) indicator implementation."""

from itertools import islice
from typing import Sequence

from signaldesk.chartdata import Candle
from .base import Indicator, clamp01, require_positive
from .rolling import RollingWindow

_FULL_STRENGTH_DISTANCE = 0.05


class SMA(Indicator):
    """Simple Moving Average of close prices over a rolling window."""

    def __init__(self, period: int = 14):
        super().__init__()
        self.period = require_positive("period", period)
        self._window = RollingWindow(self.period)
        self._last_close: float | None = None

    def _update(self, candle: Candle) -> float | None:
        self._last_close = float(candle.close)
        self._window.push(candle.close)

        if not self._window.full:
            return None

        return self._window.mean

    def _initialize(self, history: Sequence[Candle]) -> float | None:
        # Direct sum over the most recent `period` closes
        recent = islice(history, max(len(history) - self.period, 0), None)
        self._window.fill(c.close for c in recent)
        self._last_close = float(history[-1].close)
        return self._window.mean if self._window.full else None

    def _reset(self) -> None:
        self._window.clear()
        self._last_close = None

    def _buy(self, price: float) -> bool:
        return self._value is not None and price > self._value

    def _sell(self, price: float) -> bool:
        return self._value is not None and price < self._value

    def signal_strength(self) -> float:
        sma = self._value
        if sma is None or self._last_close is None or sma == 0.0:
            return 0.0
        return clamp01(abs(self._last_close - sma) / abs(sma) / _FULL_STRENGTH_DISTANCE)

    def name(self) -> str:
        return f"SMA({self.period})"

    def required_periods(self) -> int:
        return self.period
