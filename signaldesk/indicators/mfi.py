"""Money Flow Index (MFI) indicator implementation."""

from signaldesk.chartdata import Candle
from .base import Indicator, require_positive, require_thresholds
from .rolling import RollingWindow
from .rsi import oscillator_strength, rsi_from_sums


class MFI(Indicator):
    """
    Money Flow Index - volume-weighted momentum (range: 0 to 100).

    Raw money flow = typical price * volume. Each flow is positive or negative
    by the direction of the typical price; the last `period` flows of each
    kind are summed in rolling windows. A window without negative flow reads
    100, zero-volume bars included.
    """

    def __init__(self, period: int = 14, overbought: float = 80.0, oversold: float = 20.0):
        super().__init__()
        self.period = require_positive("period", period)
        require_thresholds("oversold", oversold, "overbought", overbought)
        self.overbought = float(overbought)
        self.oversold = float(oversold)

        self._prev_typical: float | None = None
        self.positive_flows = RollingWindow(self.period)
        self.negative_flows = RollingWindow(self.period)

    def _update(self, candle: Candle) -> float | None:
        typical_price = candle.typical_price
        volume = float(candle.volume)

        prev = self._prev_typical
        self._prev_typical = typical_price
        if prev is None:
            return None

        raw_money_flow = typical_price * volume

        if typical_price > prev:
            self.positive_flows.push(raw_money_flow)
            self.negative_flows.push(0.0)
        elif typical_price < prev:
            self.positive_flows.push(0.0)
            self.negative_flows.push(raw_money_flow)
        else:
            self.positive_flows.push(0.0)
            self.negative_flows.push(0.0)

        if not self.positive_flows.full:
            return None

        return rsi_from_sums(self.positive_flows.sum, self.negative_flows.sum)

    def _reset(self) -> None:
        self._prev_typical = None
        self.positive_flows.clear()
        self.negative_flows.clear()

    def _buy(self, price: float) -> bool:
        return self._value is not None and self._value < self.oversold

    def _sell(self, price: float) -> bool:
        return self._value is not None and self._value > self.overbought

    def signal_strength(self) -> float:
        return oscillator_strength(self._value, self.oversold, self.overbought)

    def name(self) -> str:
        return f"MFI({self.period})"

    def required_periods(self) -> int:
        return self.period + 1
