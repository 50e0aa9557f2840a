"""Average True Range (ATR) indicator implementation (Wilder)."""

from signaldesk.chartdata import Candle
from .base import Indicator, clamp01, require_positive

# ATR as a fraction of price that maps to full strength
_FULL_STRENGTH_VOLATILITY = 0.05


def true_range(high: float, low: float, prev_close: float) -> float:
    """TR = max(high - low, |high - prev_close|, |low - prev_close|)."""
    return max(high - low, abs(high - prev_close), abs(low - prev_close))


class ATR(Indicator):
    """
    ATR (Average True Range) using Wilder's smoothing.

    True Range needs a previous close, so the first candle only records
    its close and the first TR comes from the second candle.

    ATR:
      - Seed with SMA(TR) over the first `period` true ranges
      - Thereafter (Wilder):
          smoothed = smoothed - smoothed / period + TR
          ATR      = smoothed / period
        which is an EMA with alpha = 1 / period.

    ATR measures volatility only; it never votes buy or sell.
    """

    def __init__(self, period: int = 14):
        super().__init__()
        self.period = require_positive("period", period)
        self._prev_close: float | None = None
        self._seed_sum: float = 0.0
        self._tr_count: int = 0
        self._smoothed: float | None = None
        self._last_tr: float | None = None

    def _update(self, candle: Candle) -> float | None:
        high = float(candle.high)
        low = float(candle.low)
        close = float(candle.close)

        if self._prev_close is None:
            self._prev_close = close
            return None

        tr = true_range(high, low, self._prev_close)
        self._prev_close = close
        self._last_tr = tr

        if self._smoothed is None:
            self._seed_sum += tr
            self._tr_count += 1
            if self._tr_count < self.period:
                return None
            # Seed: the running sum of `period` TRs is the smoothed sum
            self._smoothed = self._seed_sum
        else:
            self._smoothed = self._smoothed - self._smoothed / self.period + tr

        return self._smoothed / self.period

    def _reset(self) -> None:
        self._prev_close = None
        self._seed_sum = 0.0
        self._tr_count = 0
        self._smoothed = None
        self._last_tr = None

    def _buy(self, price: float) -> bool:
        return False

    def _sell(self, price: float) -> bool:
        return False

    def signal_strength(self) -> float:
        if self._value is None or not self._prev_close:
            return 0.0
        return clamp01(self._value / abs(self._prev_close) / _FULL_STRENGTH_VOLATILITY)

    def outputs(self) -> dict[str, float | None]:
        return {"atr": self._value, "true_range": self._last_tr}

    def name(self) -> str:
        return f"ATR({self.period})"

    def required_periods(self) -> int:
        # Need an extra candle for the first true range
        return self.period + 1
