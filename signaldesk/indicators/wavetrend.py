"""WaveTrend oscillator implementation."""

from signaldesk.chartdata import Candle
from .base import Indicator, clamp01, require_positive, require_thresholds
from .ema import EMA
from .rolling import RollingWindow

_WT2_LENGTH = 4
_CHANNEL_SCALE = 0.015
# WT1-WT2 spread that maps to full momentum strength
_MAX_MOMENTUM = 20.0


class WaveTrend(Indicator):
    """
    WaveTrend momentum oscillator.

      HLC3 = (H + L + C) / 3
      ESA  = EMA(HLC3, n1)
      D    = EMA(|HLC3 - ESA|, n1)
      CI   = (HLC3 - ESA) / (0.015 * D)        (0 when D == 0)
      WT1  = EMA(CI, n2)
      WT2  = SMA(WT1, 4)

    Each stage only starts once the stage before it has seeded, so the first
    WT2 value lands on candle 2*n1 + n2 + 1 at the latest.

    Buy when WT1 is above WT2 and either still below overbought or has just
    crossed up through WT2. Sell mirrored. A plain WT1 > WT2 rule would keep
    buying deep in the overbought zone, where the oscillator is exhausted;
    there only a fresh cross still counts as a buy.
    """

    def __init__(
        self,
        n1: int = 10,
        n2: int = 21,
        overbought: float = 60.0,
        oversold: float = -60.0,
    ):
        super().__init__()
        self.n1 = require_positive("n1", n1)
        self.n2 = require_positive("n2", n2)
        require_thresholds("oversold", oversold, "overbought", overbought)
        self.overbought = float(overbought)
        self.oversold = float(oversold)

        self._esa = EMA(self.n1)
        self._d = EMA(self.n1)
        self._wt1 = EMA(self.n2)
        self._wt2 = RollingWindow(_WT2_LENGTH)

        self.wt1: float | None = None
        self.wt2: float | None = None
        self._prev_wt1: float | None = None
        self._prev_wt2: float | None = None

    def _update(self, candle: Candle) -> float | None:
        hlc3 = candle.typical_price

        esa = self._esa.update_value(hlc3)
        if esa is None:
            return None

        d = self._d.update_value(abs(hlc3 - esa))
        if d is None:
            return None

        ci = (hlc3 - esa) / (_CHANNEL_SCALE * d) if d != 0.0 else 0.0

        wt1 = self._wt1.update_value(ci)
        if wt1 is None:
            return None

        self._prev_wt1, self._prev_wt2 = self.wt1, self.wt2
        self._wt2.push(wt1)
        self.wt1 = wt1
        self.wt2 = self._wt2.mean if self._wt2.full else None

        if self.wt2 is None:
            return None
        return self.wt1

    def _reset(self) -> None:
        self._esa.reset_state()
        self._d.reset_state()
        self._wt1.reset_state()
        self._wt2.clear()
        self.wt1 = None
        self.wt2 = None
        self._prev_wt1 = None
        self._prev_wt2 = None

    def _crossed(self, upward: bool) -> bool:
        if self._prev_wt1 is None or self._prev_wt2 is None:
            return False
        if upward:
            return self._prev_wt1 <= self._prev_wt2
        return self._prev_wt1 >= self._prev_wt2

    def _buy(self, price: float) -> bool:
        if self._value is None or self.wt1 <= self.wt2:
            return False
        return self.wt1 < self.overbought or self._crossed(upward=True)

    def _sell(self, price: float) -> bool:
        if self._value is None or self.wt1 >= self.wt2:
            return False
        return self.wt1 > self.oversold or self._crossed(upward=False)

    def signal_strength(self) -> float:
        if self._value is None:
            return 0.0

        momentum = min(abs(self.wt1 - self.wt2) / _MAX_MOMENTUM, 1.0)

        position = 0.0
        if self.wt1 > self.overbought and self.overbought < 100.0:
            position = (self.wt1 - self.overbought) / (100.0 - self.overbought)
        elif self.wt1 < self.oversold and self.oversold < 0.0:
            position = (self.oversold - self.wt1) / abs(self.oversold)

        return clamp01((momentum + position) / 2.0)

    def outputs(self) -> dict[str, float | None]:
        return {"wt1": self.wt1, "wt2": self.wt2}

    def name(self) -> str:
        return f"WaveTrend({self.n1},{self.n2})"

    def required_periods(self) -> int:
        return 2 * self.n1 + self.n2 + 1
