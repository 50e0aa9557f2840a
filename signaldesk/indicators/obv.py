"""On-Balance Volume (OBV) indicator implementation."""

from signaldesk.chartdata import Candle
from signaldesk.errors import InvalidParameterError
from .base import Indicator, clamp01, require_positive
from .rolling import RollingWindow


class OBV(Indicator):
    """
    On-Balance Volume with a normalised trend.

    OBV starts at 0 on the first candle.
      - If close > prev_close: OBV += volume
      - If close < prev_close: OBV -= volume
      - If close == prev_close: OBV unchanged

    trend = (OBV - OBV `lookback` candles ago) / volume traded since then

    The trend lies in [-1, 1]: +1 when every candle in the lookback closed up,
    0 when there was no volume.
    """

    def __init__(self, lookback: int = 10, trend_threshold: float = 0.1):
        super().__init__()
        self.lookback = require_positive("lookback", lookback)
        if not 0 <= trend_threshold < 1:
            raise InvalidParameterError(
                f"trend_threshold must be in [0, 1), got {trend_threshold!r}"
            )
        self.trend_threshold = float(trend_threshold)

        self._prev_close: float | None = None
        self._obv: float = 0.0
        self._history = RollingWindow(self.lookback + 1)
        self._volumes = RollingWindow(self.lookback)
        self.trend: float | None = None

    def _update(self, candle: Candle) -> float | None:
        close = float(candle.close)
        vol = float(candle.volume)

        if vol < 0:
            raise ValueError("volume must be >= 0")

        if self._prev_close is not None:
            if close > self._prev_close:
                self._obv += vol
            elif close < self._prev_close:
                self._obv -= vol
            self._volumes.push(vol)

        self._prev_close = close
        self._history.push(self._obv)

        if not self._history.full:
            return None

        traded = self._volumes.sum
        if traded == 0.0:
            self.trend = 0.0
        else:
            change = self._obv - self._history.oldest
            self.trend = max(-1.0, min(1.0, change / traded))
        return self._obv

    def _reset(self) -> None:
        self._prev_close = None
        self._obv = 0.0
        self._history.clear()
        self._volumes.clear()
        self.trend = None

    def _buy(self, price: float) -> bool:
        return self.trend is not None and self.trend > self.trend_threshold

    def _sell(self, price: float) -> bool:
        return self.trend is not None and self.trend < -self.trend_threshold

    def signal_strength(self) -> float:
        if self.trend is None:
            return 0.0
        return clamp01(abs(self.trend))

    def outputs(self) -> dict[str, float | None]:
        return {"obv": self._value, "trend": self.trend}

    def name(self) -> str:
        return f"OBV({self.lookback})"

    def required_periods(self) -> int:
        return self.lookback + 1
