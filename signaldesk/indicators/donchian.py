"""Donchian Channels indicator implementation."""

from signaldesk.chartdata import Candle
from .base import Indicator, clamp01, require_positive
from .rolling import RollingExtremes


class DonchianChannels(Indicator):
    """
    Donchian Channels (breakout channel).

      upper  = highest high over the last `period` candles
      lower  = lowest low over the last `period` candles
      middle = (upper + lower) / 2

    Breakouts are judged against the prior channel, i.e. the `period`
    candles before the current one, so a new high can break out of the
    range it has not yet widened.
    """

    def __init__(self, period: int = 20):
        super().__init__()
        self.period = require_positive("period", period)
        self._extremes = RollingExtremes(self.period)

        self.upper: float | None = None
        self.lower: float | None = None
        self.prior_upper: float | None = None
        self.prior_lower: float | None = None
        self._last_close: float | None = None

    def _update(self, candle: Candle) -> float | None:
        if self._extremes.full:
            self.prior_upper = self._extremes.max
            self.prior_lower = self._extremes.min

        self._extremes.push(candle.high, candle.low)
        self._last_close = float(candle.close)

        if not self._extremes.full:
            return None

        self.upper = self._extremes.max
        self.lower = self._extremes.min

        if self.prior_upper is None:
            return None
        return (self.upper + self.lower) / 2.0

    def _reset(self) -> None:
        self._extremes.clear()
        self.upper = None
        self.lower = None
        self.prior_upper = None
        self.prior_lower = None
        self._last_close = None

    def _buy(self, price: float) -> bool:
        return self._value is not None and price > self.prior_upper

    def _sell(self, price: float) -> bool:
        return self._value is not None and price < self.prior_lower

    def signal_strength(self) -> float:
        if self._value is None or self._last_close is None:
            return 0.0

        close = self._last_close
        if close > self.prior_upper:
            distance = close - self.prior_upper
        elif close < self.prior_lower:
            distance = self.prior_lower - close
        else:
            return 0.0

        width = self.prior_upper - self.prior_lower
        if width <= 0.0:
            return 1.0
        return clamp01(distance / width)

    def width(self) -> float | None:
        """Current channel width relative to its middle (0 when the middle is 0)."""
        if self._value is None:
            return None
        if self._value == 0.0:
            return 0.0
        return (self.upper - self.lower) / self._value

    def trend_direction(self, price: float) -> int:
        """1 above the prior channel, -1 below it, 0 inside or before warm-up."""
        if self._value is None:
            return 0
        if price > self.prior_upper:
            return 1
        if price < self.prior_lower:
            return -1
        return 0

    def outputs(self) -> dict[str, float | None]:
        return {
            "middle": self._value,
            "upper": self.upper,
            "lower": self.lower,
            "prior_upper": self.prior_upper,
            "prior_lower": self.prior_lower,
            "width": self.width(),
        }

    def name(self) -> str:
        return f"Donchian({self.period})"

    def required_periods(self) -> int:
        return self.period + 1
