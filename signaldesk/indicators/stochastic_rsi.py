"""Stochastic RSI indicator implementation."""

from signaldesk.chartdata import Candle
from signaldesk.errors import InvalidParameterError
from .base import Indicator, clamp01, require_positive, require_thresholds
from .rolling import RollingExtremes
from .rsi import RSI, oscillator_strength


class StochasticRSI(Indicator):
    """
    Stochastic oscillator applied to RSI values (range: 0 to 100).

      StochRSI = (RSI - min(RSI, n)) / (max(RSI, n) - min(RSI, n)) * 100

    50 when the RSI window has no range.

    Signals fire just after the oscillator leaves an extreme:
      buy  when oversold < StochRSI < oversold + zone
      sell when overbought - zone < StochRSI < overbought
    """

    def __init__(
        self,
        period: int = 14,
        overbought: float = 80.0,
        oversold: float = 20.0,
        zone: float = 10.0,
    ):
        super().__init__()
        self.period = require_positive("period", period)
        require_thresholds("oversold", oversold, "overbought", overbought)
        if zone <= 0:
            raise InvalidParameterError(f"zone must be > 0, got {zone!r}")
        if oversold + zone > overbought - zone:
            raise InvalidParameterError(
                f"buy zone ({oversold}, {oversold + zone}) overlaps "
                f"sell zone ({overbought - zone}, {overbought})"
            )
        self.overbought = float(overbought)
        self.oversold = float(oversold)
        self.zone = float(zone)

        self._rsi = RSI(self.period)
        self._extremes = RollingExtremes(self.period)
        self.rsi: float | None = None

    def _update(self, candle: Candle) -> float | None:
        rsi = self._rsi.update(candle)
        if rsi is None:
            return None

        self.rsi = rsi
        self._extremes.push(rsi)
        if not self._extremes.full:
            return None

        highest = self._extremes.max
        lowest = self._extremes.min
        if highest == lowest:
            return 50.0
        return clamp01((rsi - lowest) / (highest - lowest)) * 100.0

    def _reset(self) -> None:
        self._rsi.reset_state()
        self._extremes.clear()
        self.rsi = None

    def _buy(self, price: float) -> bool:
        value = self._value
        return value is not None and self.oversold < value < self.oversold + self.zone

    def _sell(self, price: float) -> bool:
        value = self._value
        return value is not None and self.overbought - self.zone < value < self.overbought

    def signal_strength(self) -> float:
        value = self._value
        if value is None:
            return 0.0
        # Inside a signal zone: strongest right at the threshold crossing
        if self.oversold < value < self.oversold + self.zone:
            return clamp01((self.oversold + self.zone - value) / self.zone)
        if self.overbought - self.zone < value < self.overbought:
            return clamp01((value - (self.overbought - self.zone)) / self.zone)
        return oscillator_strength(value, self.oversold, self.overbought)

    def outputs(self) -> dict[str, float | None]:
        return {"stoch_rsi": self._value, "rsi": self.rsi}

    def name(self) -> str:
        return f"StochRSI({self.period})"

    def required_periods(self) -> int:
        # period + 1 candles for the first RSI, then period - 1 more RSI values
        return 2 * self.period
