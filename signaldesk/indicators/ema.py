"""Exponential Moving Average (EMA) indicator implementation."""

from signaldesk.chartdata import Candle
from .base import Indicator, clamp01, require_positive

# Percentage distance from the average that maps to full strength
_FULL_STRENGTH_DISTANCE = 0.05


class EMA(Indicator):
    """
    Exponential Moving Average of close prices.

    alpha = 2 / (period + 1)

    - Seed with SMA of the first `period` inputs
    - Thereafter: EMA = x * alpha + prev_ema * (1 - alpha)

    `update_value()` drives the same recurrence with an arbitrary scalar
    (true range, MACD line, WaveTrend channel index, ...).
    """

    def __init__(self, period: int = 14):
        super().__init__()
        self.period = require_positive("period", period)
        self.alpha = 2.0 / (self.period + 1.0)
        self._ema: float | None = None
        self._count: int = 0
        self._seed_sum: float = 0.0
        self._last_close: float | None = None

    def update_value(self, value: float) -> float | None:
        value = float(value)
        self._count += 1

        if self._ema is None:
            self._seed_sum += value
            if self._count < self.period:
                return None
            self._ema = self._seed_sum / self.period
            return self._ema

        self._ema = value * self.alpha + self._ema * (1.0 - self.alpha)
        return self._ema

    def _update(self, candle: Candle) -> float | None:
        self._last_close = float(candle.close)
        return self.update_value(candle.close)

    def _reset(self) -> None:
        self._ema = None
        self._count = 0
        self._seed_sum = 0.0
        self._last_close = None

    def _buy(self, price: float) -> bool:
        # Price above the average: uptrend
        return self._ema is not None and price > self._ema

    def _sell(self, price: float) -> bool:
        return self._ema is not None and price < self._ema

    def signal_strength(self) -> float:
        if self._ema is None or self._last_close is None or self._ema == 0.0:
            return 0.0
        distance = abs(self._last_close - self._ema) / abs(self._ema)
        return clamp01(distance / _FULL_STRENGTH_DISTANCE)

    @property
    def last_value(self) -> float | None:
        """Current EMA, including when driven only through update_value()."""
        return self._ema

    def name(self) -> str:
        return f"EMA({self.period})"

    def required_periods(self) -> int:
        return self.period
