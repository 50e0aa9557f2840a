"""Keltner Channels indicator implementation."""

from signaldesk.chartdata import Candle
from signaldesk.errors import InvalidParameterError
from .atr import ATR
from .base import Indicator, clamp01, require_positive
from .ema import EMA

# Channel-position zones that carry signal strength
_LOWER_ZONE = 0.2
_UPPER_ZONE = 0.8


class KeltnerChannels(Indicator):
    """
    Keltner Channels: EMA(close) +/- multiplier * ATR.

    Buy when price is at or within `tolerance` of the lower band and below
    the middle line; sell mirrored at the upper band. The middle-line guard
    keeps the two signals exclusive even for very narrow channels.
    """

    def __init__(self, period: int = 20, multiplier: float = 2.0, tolerance: float = 0.005):
        super().__init__()
        self.period = require_positive("period", period)
        if multiplier <= 0:
            raise InvalidParameterError(f"multiplier must be > 0, got {multiplier!r}")
        if not 0 <= tolerance < 1:
            raise InvalidParameterError(f"tolerance must be in [0, 1), got {tolerance!r}")
        self.multiplier = float(multiplier)
        self.tolerance = float(tolerance)

        self._ema = EMA(self.period)
        self._atr = ATR(self.period)

        self.upper: float | None = None
        self.lower: float | None = None
        self.atr: float | None = None
        self._last_close: float | None = None

    def _update(self, candle: Candle) -> float | None:
        self._last_close = float(candle.close)
        middle = self._ema.update_value(candle.close)
        atr = self._atr.update(candle)

        if middle is None or atr is None:
            return None

        self.atr = atr
        self.upper = middle + self.multiplier * atr
        self.lower = middle - self.multiplier * atr
        return middle

    def _reset(self) -> None:
        self._ema.reset_state()
        self._atr.reset_state()
        self.upper = None
        self.lower = None
        self.atr = None
        self._last_close = None

    def position(self, price: float) -> float | None:
        """Where `price` sits in the channel: 0 at the lower band, 1 at the upper."""
        if self._value is None:
            return None
        width = self.upper - self.lower
        if width <= 0.0:
            return 0.5
        return (price - self.lower) / width

    def _buy(self, price: float) -> bool:
        if self._value is None:
            return False
        return price <= self.lower * (1.0 + self.tolerance) and price < self._value

    def _sell(self, price: float) -> bool:
        if self._value is None:
            return False
        return price >= self.upper * (1.0 - self.tolerance) and price > self._value

    def signal_strength(self) -> float:
        if self._last_close is None:
            return 0.0
        pos = self.position(self._last_close)
        if pos is None:
            return 0.0
        if pos <= _LOWER_ZONE:
            return clamp01((_LOWER_ZONE - pos) / _LOWER_ZONE)
        if pos >= _UPPER_ZONE:
            return clamp01((pos - _UPPER_ZONE) / (1.0 - _UPPER_ZONE))
        return 0.0

    def outputs(self) -> dict[str, float | None]:
        return {
            "middle": self._value,
            "upper": self.upper,
            "lower": self.lower,
            "atr": self.atr,
        }

    def name(self) -> str:
        return f"Keltner({self.period},{self.multiplier:g})"

    def required_periods(self) -> int:
        return self._atr.required_periods()
