"""Average Directional Index (ADX) indicator implementation (Wilder)."""

from signaldesk.chartdata import Candle
from .atr import true_range
from .base import Indicator, clamp01, require_positive

# ADX level that maps to full strength
_FULL_STRENGTH_ADX = 40.0


class ADX(Indicator):
    """
    ADX (Average Directional Index), Wilder smoothing.

    Computes:
      +DI, -DI, ADX

    Directional Movement:
      up_move   = high - prev_high
      down_move = prev_low - low

      +DM = up_move   if up_move > down_move and up_move > 0 else 0
      -DM = down_move if down_move > up_move and down_move > 0 else 0

    Wilder smoothing:
      smoothed = prev_smoothed - (prev_smoothed / period) + current

    DX:
      DX = 100 * abs(+DI - -DI) / (+DI + -DI)  (0 if denom == 0)

    ADX:
      - Seed with SMA(DX) over `period` DX values
      - Then Wilder smooth: ADX = (prev_adx*(period-1) + DX) / period

    A trend is only traded when ADX exceeds `trend_threshold`; the dominant
    directional index picks the side.
    """

    def __init__(self, period: int = 14, trend_threshold: float = 20.0):
        super().__init__()
        self.period = require_positive("period", period)
        self.trend_threshold = float(trend_threshold)

        self._prev_high: float | None = None
        self._prev_low: float | None = None
        self._prev_close: float | None = None

        # Seeding sums (first `period` deltas)
        self._seed_tr_sum: float = 0.0
        self._seed_pdm_sum: float = 0.0
        self._seed_mdm_sum: float = 0.0
        self._delta_count: int = 0

        # Wilder-smoothed values (become valid after seeding)
        self._tr: float | None = None
        self._pdm: float | None = None
        self._mdm: float | None = None

        # DX/ADX seeding and smoothing
        self._dx_seed_sum: float = 0.0
        self._dx_count: int = 0
        self._adx: float | None = None

        self.plus_di: float | None = None
        self.minus_di: float | None = None

    def _update(self, candle: Candle) -> float | None:
        high = float(candle.high)
        low = float(candle.low)
        close = float(candle.close)

        if self._prev_close is None:
            self._prev_high, self._prev_low, self._prev_close = high, low, close
            return None

        tr = true_range(high, low, self._prev_close)

        up_move = high - self._prev_high
        down_move = self._prev_low - low

        pdm = up_move if (up_move > down_move and up_move > 0.0) else 0.0
        mdm = down_move if (down_move > up_move and down_move > 0.0) else 0.0

        self._prev_high, self._prev_low, self._prev_close = high, low, close
        self._delta_count += 1

        # Seeding phase for TR/+DM/-DM (need `period` deltas)
        if self._tr is None:
            self._seed_tr_sum += tr
            self._seed_pdm_sum += pdm
            self._seed_mdm_sum += mdm

            if self._delta_count < self.period:
                return None

            self._tr = self._seed_tr_sum
            self._pdm = self._seed_pdm_sum
            self._mdm = self._seed_mdm_sum
        else:
            self._tr = self._tr - (self._tr / self.period) + tr
            self._pdm = self._pdm - (self._pdm / self.period) + pdm
            self._mdm = self._mdm - (self._mdm / self.period) + mdm

        self.plus_di, self.minus_di = self._compute_di(self._tr, self._pdm, self._mdm)
        dx = self._compute_dx(self.plus_di, self.minus_di)
        return self._update_adx(dx)

    @staticmethod
    def _compute_di(tr: float, pdm: float, mdm: float) -> tuple[float, float]:
        if tr == 0.0:
            return 0.0, 0.0
        return 100.0 * (pdm / tr), 100.0 * (mdm / tr)

    @staticmethod
    def _compute_dx(plus_di: float, minus_di: float) -> float:
        denom = plus_di + minus_di
        if denom == 0.0:
            return 0.0
        return 100.0 * abs(plus_di - minus_di) / denom

    def _update_adx(self, dx: float) -> float | None:
        # Seed ADX with SMA of first `period` DX values
        if self._adx is None:
            self._dx_seed_sum += dx
            self._dx_count += 1

            if self._dx_count < self.period:
                return None
            self._adx = self._dx_seed_sum / self.period
            return self._adx

        # Wilder smoothing for ADX
        self._adx = (self._adx * (self.period - 1) + dx) / self.period
        return self._adx

    def _reset(self) -> None:
        self._prev_high = None
        self._prev_low = None
        self._prev_close = None

        self._seed_tr_sum = 0.0
        self._seed_pdm_sum = 0.0
        self._seed_mdm_sum = 0.0
        self._delta_count = 0

        self._tr = None
        self._pdm = None
        self._mdm = None

        self._dx_seed_sum = 0.0
        self._dx_count = 0
        self._adx = None

        self.plus_di = None
        self.minus_di = None

    def trending(self) -> bool:
        """True once ADX is above `trend_threshold`."""
        return self._value is not None and self._value > self.trend_threshold

    def trend_strength(self) -> str:
        """Classify the last ADX: weak_or_ranging, trending or strong_trending."""
        if not self.trending():
            return "weak_or_ranging"
        if self._value < _FULL_STRENGTH_ADX:
            return "trending"
        return "strong_trending"

    def _buy(self, price: float) -> bool:
        return self.trending() and self.plus_di > self.minus_di

    def _sell(self, price: float) -> bool:
        return self.trending() and self.minus_di > self.plus_di

    def signal_strength(self) -> float:
        if self._value is None:
            return 0.0
        return clamp01(self._value / _FULL_STRENGTH_ADX)

    def outputs(self) -> dict[str, float | None]:
        return {"adx": self._value, "plus_di": self.plus_di, "minus_di": self.minus_di}

    def name(self) -> str:
        return f"ADX({self.period})"

    def required_periods(self) -> int:
        # First ADX lands after 2*period candles; the extra period lets the
        # Wilder smoothing settle before signals are trusted.
        return 3 * self.period
