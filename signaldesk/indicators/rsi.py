"""Relative Strength Index (RSI) indicator."""

from signaldesk.chartdata import Candle
from .base import Indicator, clamp01, require_positive, require_thresholds
from .rolling import RollingWindow


def rsi_from_sums(gain_sum: float, loss_sum: float) -> float:
    """
    RSI from gain/loss totals over the same window.

    RSI = 100 - (100 / (1 + RS)),  RS = avg_gain / avg_loss

    Degenerate windows: no losses -> 100 (a flat window included), no gains
    -> 0. MFI applies the same rule to its positive/negative flows.
    """
    if loss_sum == 0.0:
        return 100.0
    if gain_sum == 0.0:
        return 0.0
    rs = gain_sum / loss_sum
    return 100.0 - (100.0 / (1.0 + rs))


def oscillator_strength(value: float | None, oversold: float, overbought: float) -> float:
    """Depth past a 0..100 oscillator threshold, normalised to the distance to its bound."""
    if value is None:
        return 0.0
    if value < oversold:
        return clamp01((oversold - value) / oversold) if oversold > 0 else 1.0
    if value > overbought:
        room = 100.0 - overbought
        return clamp01((value - overbought) / room) if room > 0 else 1.0
    return 0.0


class RSI(Indicator):
    """
    Relative Strength Index over the arithmetic mean of the last `period`
    gains and losses.

    Gains and losses live in rolling windows, so each update is O(1) and a
    warm-updated RSI matches one computed from scratch over the same window.
    The first RSI value is produced after period+1 candles (period deltas).
    """

    def __init__(self, period: int = 14, overbought: float = 70.0, oversold: float = 30.0):
        super().__init__()
        self.period = require_positive("period", period)
        require_thresholds("oversold", oversold, "overbought", overbought)
        self.overbought = float(overbought)
        self.oversold = float(oversold)

        self._prev_close: float | None = None
        self._gains = RollingWindow(self.period)
        self._losses = RollingWindow(self.period)

    def _update(self, candle: Candle) -> float | None:
        close = float(candle.close)

        if self._prev_close is None:
            self._prev_close = close
            return None

        delta = close - self._prev_close
        self._prev_close = close
        self._gains.push(max(delta, 0.0))
        self._losses.push(max(-delta, 0.0))

        if not self._gains.full:
            return None

        return rsi_from_sums(self._gains.sum, self._losses.sum)

    def _reset(self) -> None:
        self._prev_close = None
        self._gains.clear()
        self._losses.clear()

    def _buy(self, price: float) -> bool:
        return self._value is not None and self._value < self.oversold

    def _sell(self, price: float) -> bool:
        return self._value is not None and self._value > self.overbought

    def signal_strength(self) -> float:
        return oscillator_strength(self._value, self.oversold, self.overbought)

    def name(self) -> str:
        return f"RSI({self.period})"

    def required_periods(self) -> int:
        # Need period deltas -> period + 1 candles
        return self.period + 1
