"""Bollinger Bands indicator implementation."""

from signaldesk.chartdata import Candle
from signaldesk.errors import InvalidParameterError
from .base import Indicator, clamp01, require_positive, require_thresholds
from .ema import EMA
from .rolling import RollingWindow

MOVING_AVERAGES = ("sma", "ema")


class BollingerBands(Indicator):
    """
    Bollinger Bands (rolling SMA or EMA +/- k * population standard deviation).

    Outputs:
      - middle:    SMA (or EMA) of close
      - upper:     middle + k * std
      - lower:     middle - k * std
      - std:       population std (ddof=0) of the last `period` closes
      - percent_b: (close - lower) / (upper - lower), 0.5 when the bands collapse

    Notes:
    - Uses population standard deviation (ddof=0), which matches the common
      "platform default" behavior.
    - In EMA mode the spread still comes from the rolling window of closes.
    """

    def __init__(
        self,
        period: int = 20,
        k: float = 2.0,
        ma: str = "sma",
        overbought: float = 0.9,
        oversold: float = 0.1,
    ):
        super().__init__()
        self.period = require_positive("period", period)
        if k <= 0:
            raise InvalidParameterError(f"k must be > 0, got {k!r}")
        ma = str(ma).lower()
        if ma not in MOVING_AVERAGES:
            raise InvalidParameterError(
                f"ma must be one of {', '.join(MOVING_AVERAGES)}, got {ma!r}"
            )
        require_thresholds("oversold", oversold, "overbought", overbought)

        self.k = float(k)
        self.ma = ma
        self.overbought = float(overbought)
        self.oversold = float(oversold)

        self._closes = RollingWindow(self.period)
        self._ema = EMA(self.period) if ma == "ema" else None

        self.upper: float | None = None
        self.lower: float | None = None
        self.std: float | None = None
        self.percent_b: float | None = None

    def _update(self, candle: Candle) -> float | None:
        close = float(candle.close)
        self._closes.push(close)

        if self._ema is not None:
            middle = self._ema.update_value(close)
        else:
            middle = self._closes.mean if self._closes.full else None

        if middle is None or not self._closes.full:
            return None

        std = self._closes.std
        self.std = std
        self.upper = middle + self.k * std
        self.lower = middle - self.k * std
        self.percent_b = self._percent_b(close)
        return middle

    def _percent_b(self, price: float) -> float:
        width = self.upper - self.lower
        if width <= 0.0:
            return 0.5
        return (price - self.lower) / width

    def _reset(self) -> None:
        self._closes.clear()
        if self._ema is not None:
            self._ema.reset_state()
        self.upper = None
        self.lower = None
        self.std = None
        self.percent_b = None

    def _buy(self, price: float) -> bool:
        return self._value is not None and self._percent_b(price) <= self.oversold

    def _sell(self, price: float) -> bool:
        return self._value is not None and self._percent_b(price) >= self.overbought

    def signal_strength(self) -> float:
        if self.percent_b is None:
            return 0.0
        # 0 at the middle band, 1 at (or beyond) either outer band
        return clamp01(abs(self.percent_b - 0.5) * 2.0)

    def trend_strength(self) -> str:
        """Label the last close by where its %B sits relative to the bands."""
        pb = self.percent_b
        if pb is None:
            return "neutral"
        if pb > 1.0:
            return "strong_uptrend"
        if pb >= self.overbought:
            return "uptrend"
        if pb > self.oversold:
            return "neutral"
        if pb >= 0.0:
            return "downtrend"
        return "strong_downtrend"

    def outputs(self) -> dict[str, float | None]:
        return {
            "middle": self._value,
            "upper": self.upper,
            "lower": self.lower,
            "std": self.std,
            "percent_b": self.percent_b,
        }

    def name(self) -> str:
        if self.ma == "ema":
            return f"Bollinger({self.period},{self.k:g},ema)"
        return f"Bollinger({self.period},{self.k:g})"

    def required_periods(self) -> int:
        return self.period
