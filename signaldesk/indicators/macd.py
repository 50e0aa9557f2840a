"""
MACD (Moving Average Convergence Divergence) indicator implementation.

MACD is a trend-following momentum indicator that shows the relationship
between two moving averages of prices.
"""

from signaldesk.chartdata import Candle
from signaldesk.errors import InvalidParameterError
from .base import Indicator, clamp01, require_positive
from .ema import EMA

# Histogram as a fraction of price that maps to full strength
_FULL_STRENGTH_HISTOGRAM = 0.01


class MACD(Indicator):
    """
    MACD (Moving Average Convergence Divergence) indicator.

    Components:
        - MACD Line: Fast EMA - Slow EMA
        - Signal Line: EMA of MACD Line
        - Histogram: MACD Line - Signal Line

    The primary value is the MACD line, reported once the signal line has
    seeded.

    Signals:
        - MACD above signal: buy
        - MACD below signal: sell

    Args:
        fast: Fast EMA period (default: 12)
        slow: Slow EMA period (default: 26)
        signal: Signal line EMA period (default: 9)

    Example:
        macd = MACD(fast=12, slow=26, signal=9)

        for candle in candles:
            macd.update(candle)
            if macd.ready() and macd.outputs()["histogram"] > 0:
                print("Bullish momentum")
    """

    def __init__(self, fast: int = 12, slow: int = 26, signal: int = 9):
        super().__init__()
        self.fast_period = require_positive("fast", fast)
        self.slow_period = require_positive("slow", slow)
        self.signal_period = require_positive("signal", signal)
        if self.fast_period >= self.slow_period:
            raise InvalidParameterError(
                f"fast ({fast}) must be shorter than slow ({slow})"
            )

        self._fast = EMA(self.fast_period)
        self._slow = EMA(self.slow_period)
        self._signal = EMA(self.signal_period)

        self.macd_line: float | None = None
        self.signal_line: float | None = None
        self.histogram: float | None = None
        self._last_close: float | None = None

    def _update(self, candle: Candle) -> float | None:
        close = float(candle.close)
        self._last_close = close

        fast = self._fast.update_value(close)
        slow = self._slow.update_value(close)

        # Can't calculate MACD until both EMAs are ready
        if fast is None or slow is None:
            return None

        self.macd_line = fast - slow
        self.signal_line = self._signal.update_value(self.macd_line)

        if self.signal_line is None:
            return None

        self.histogram = self.macd_line - self.signal_line
        return self.macd_line

    def _reset(self) -> None:
        self._fast.reset_state()
        self._slow.reset_state()
        self._signal.reset_state()
        self.macd_line = None
        self.signal_line = None
        self.histogram = None
        self._last_close = None

    def _buy(self, price: float) -> bool:
        return self.histogram is not None and self.histogram > 0

    def _sell(self, price: float) -> bool:
        return self.histogram is not None and self.histogram < 0

    def signal_strength(self) -> float:
        if self.histogram is None or not self._last_close:
            return 0.0
        return clamp01(abs(self.histogram) / abs(self._last_close) / _FULL_STRENGTH_HISTOGRAM)

    def outputs(self) -> dict[str, float | None]:
        return {
            "macd": self.macd_line if self._value is not None else None,
            "signal": self.signal_line,
            "histogram": self.histogram,
        }

    def name(self) -> str:
        return f"MACD({self.fast_period},{self.slow_period},{self.signal_period})"

    def required_periods(self) -> int:
        return self.slow_period + self.signal_period
