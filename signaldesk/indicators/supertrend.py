"""SuperTrend indicator implementation."""

from signaldesk.chartdata import Candle
from signaldesk.errors import InvalidParameterError
from .atr import ATR
from .base import Indicator, clamp01, require_positive

# Distance of the close from the line that maps to full strength
_FULL_STRENGTH_DISTANCE = 0.10


class SuperTrend(Indicator):
    """
    SuperTrend: ATR envelope around the candle midpoint that ratchets with
    the trend.

      basic upper = (H + L) / 2 + multiplier * ATR
      basic lower = (H + L) / 2 - multiplier * ATR

    The final upper band only moves down (and the lower band only up) unless
    the previous close broke through it. The trend starts up, flips down when
    the close falls below the final lower band and flips back up when it
    rises above the final upper band. The line is the lower band in an
    up-trend and the upper band in a down-trend.

    Entries are only signalled while price is within `max_distance` of the
    line, so late entries far from the stop level are skipped.
    """

    def __init__(self, period: int = 14, multiplier: float = 2.5, max_distance: float = 0.05):
        super().__init__()
        self.period = require_positive("period", period)
        if multiplier <= 0:
            raise InvalidParameterError(f"multiplier must be > 0, got {multiplier!r}")
        if max_distance <= 0:
            raise InvalidParameterError(f"max_distance must be > 0, got {max_distance!r}")
        self.multiplier = float(multiplier)
        self.max_distance = float(max_distance)

        self._atr = ATR(self.period)
        self._prev_close: float | None = None

        self.upper: float | None = None
        self.lower: float | None = None
        self.uptrend: bool = True

    def _update(self, candle: Candle) -> float | None:
        close = float(candle.close)
        prev_close = self._prev_close
        self._prev_close = close

        atr = self._atr.update(candle)
        if atr is None:
            return None

        mid = candle.mid
        basic_upper = mid + self.multiplier * atr
        basic_lower = mid - self.multiplier * atr

        if self.upper is None or basic_upper < self.upper or prev_close > self.upper:
            upper = basic_upper
        else:
            upper = self.upper

        if self.lower is None or basic_lower > self.lower or prev_close < self.lower:
            lower = basic_lower
        else:
            lower = self.lower

        self.upper, self.lower = upper, lower

        if self.uptrend and close < lower:
            self.uptrend = False
        elif not self.uptrend and close > upper:
            self.uptrend = True

        return lower if self.uptrend else upper

    def _reset(self) -> None:
        self._atr.reset_state()
        self._prev_close = None
        self.upper = None
        self.lower = None
        self.uptrend = True

    def _buy(self, price: float) -> bool:
        line = self._value
        if line is None or not self.uptrend or price <= line or line == 0.0:
            return False
        return (price - line) / abs(line) <= self.max_distance

    def _sell(self, price: float) -> bool:
        line = self._value
        if line is None or self.uptrend or price >= line or line == 0.0:
            return False
        return (line - price) / abs(line) <= self.max_distance

    def signal_strength(self) -> float:
        if self._value is None or not self._prev_close:
            return 0.0
        distance = abs(self._prev_close - self._value) / abs(self._prev_close)
        return clamp01(distance / _FULL_STRENGTH_DISTANCE)

    def outputs(self) -> dict[str, float | None]:
        return {
            "supertrend": self._value,
            "upper": self.upper,
            "lower": self.lower,
            "direction": None if self._value is None else (1.0 if self.uptrend else -1.0),
        }

    def name(self) -> str:
        return f"SuperTrend({self.period},{self.multiplier:g})"

    def required_periods(self) -> int:
        return self._atr.required_periods()
