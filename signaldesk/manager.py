# signaldesk/manager.py
"""
Indicator manager: evaluates a set of indicators per closed candle, caches
the batch by candle timestamp and aggregates their opinions.

Example:
    manager = IndicatorManager([RSI(14), BollingerBands(20, 2.0)])

    for candle in stream:
        history.add_candle(candle)
        results = manager.process_candle(candle, history.get_candles())
        counts = manager.count_active_signals(results)
        if counts.consensus is SignalType.BUY:
            ...
"""

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Sequence

from .chartdata import Candle
from .errors import IndicatorError, InsufficientDataError, InvalidParameterError
from .indicators.base import Indicator

log = logging.getLogger(__name__)


class SignalType(str, Enum):
    BUY = "buy"
    SELL = "sell"
    HOLD = "hold"


@dataclass(frozen=True)
class IndicatorResult:
    """Outcome of one indicator on one candle."""

    value: float | None
    should_buy: bool
    should_sell: bool
    strength: float
    timestamp: str
    error: IndicatorError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def signal(self) -> SignalType:
        if self.error is not None:
            return SignalType.HOLD
        if self.should_buy:
            return SignalType.BUY
        if self.should_sell:
            return SignalType.SELL
        return SignalType.HOLD

    @classmethod
    def failed(cls, error: IndicatorError, timestamp: str) -> "IndicatorResult":
        return cls(
            value=None,
            should_buy=False,
            should_sell=False,
            strength=0.0,
            timestamp=timestamp,
            error=error,
        )


@dataclass(frozen=True)
class SignalCounts:
    """Buy/sell tallies across one batch of results."""

    buy_signals: int = 0
    sell_signals: int = 0
    buy_strength: float = 0.0
    sell_strength: float = 0.0

    @property
    def net_strength(self) -> float:
        return self.buy_strength - self.sell_strength

    @property
    def consensus(self) -> SignalType:
        if self.buy_signals > self.sell_signals:
            return SignalType.BUY
        if self.sell_signals > self.buy_signals:
            return SignalType.SELL
        return SignalType.HOLD


ResultSink = Callable[[str, IndicatorResult], None]


class IndicatorManager:
    """
    Holds a list of indicators and evaluates them together.

    Results for the most recent candle timestamp are cached; asking again for
    the same candle returns a copy of the cache without touching the
    indicators. The cache lock is only held while copying or swapping the
    result map, so readers on other threads never see a half-built batch.

    Indicators themselves are not thread-safe: a single thread should drive
    `process_candle`.
    """

    def __init__(
        self,
        indicators: Iterable[Indicator] = (),
        sink: ResultSink | None = None,
    ):
        self._indicators: list[Indicator] = []
        self._sink = sink
        self._lock = threading.Lock()
        self._cache: dict[str, IndicatorResult] = {}
        self._last_timestamp: str | None = None

        for indicator in indicators:
            self.add_indicator(indicator)

    @property
    def indicators(self) -> list[Indicator]:
        return list(self._indicators)

    def add_indicator(self, indicator: Indicator) -> None:
        """Register an indicator; names must be unique within a manager."""
        name = indicator.name()
        if any(existing.name() == name for existing in self._indicators):
            raise InvalidParameterError(f"indicator {name} is already registered")
        self._indicators.append(indicator)
        log.debug("Added indicator %s", name)

    def required_warmup(self) -> int:
        """Candles needed before every indicator can produce a value."""
        return max((i.required_periods() for i in self._indicators), default=0)

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------
    def process_candle(
        self, candle: Candle, history: Sequence[Candle]
    ) -> dict[str, IndicatorResult]:
        """
        Evaluate every indicator against `history` for the closed `candle`.

        One failing indicator never prevents the others from running: its
        error is recorded in its own result.
        """
        with self._lock:
            if self._cache and candle.timestamp == self._last_timestamp:
                log.debug("Cache hit for %s", candle.timestamp)
                return dict(self._cache)

        results: dict[str, IndicatorResult] = {}
        for indicator in self._indicators:
            name = indicator.name()
            result = self._evaluate(indicator, candle, history)
            results[name] = result
            if self._sink is not None:
                self._sink(name, result)

        with self._lock:
            self._cache = results
            self._last_timestamp = candle.timestamp

        return dict(results)

    def _evaluate(
        self, indicator: Indicator, candle: Candle, history: Sequence[Candle]
    ) -> IndicatorResult:
        name = indicator.name()
        required = indicator.required_periods()
        if len(history) < required:
            log.debug("%s waiting for data: have %d, need %d", name, len(history), required)
            return IndicatorResult.failed(
                InsufficientDataError(name, len(history), required), candle.timestamp
            )

        price = float(candle.close)
        try:
            value = indicator.calculate(history)
            buy = indicator.should_buy(price, history)
            sell = indicator.should_sell(price, history)
            strength = indicator.signal_strength()
        except IndicatorError as e:
            log.debug("%s failed on %s: %s", name, candle.timestamp, e)
            return IndicatorResult.failed(e, candle.timestamp)
        except Exception as e:
            log.exception("Unexpected error in indicator %s on %s", name, candle.timestamp)
            error = IndicatorError(f"{name} failed: {e}")
            error.__cause__ = e
            return IndicatorResult.failed(error, candle.timestamp)

        return IndicatorResult(
            value=value,
            should_buy=buy,
            should_sell=sell,
            strength=strength,
            timestamp=candle.timestamp,
        )

    # ------------------------------------------------------------------
    # Cache / lifecycle
    # ------------------------------------------------------------------
    def get_cached_results(self) -> dict[str, IndicatorResult] | None:
        with self._lock:
            if not self._cache:
                return None
            return dict(self._cache)

    def clear_cache(self) -> None:
        with self._lock:
            self._cache = {}
            self._last_timestamp = None

    def reset_indicators(self) -> None:
        """Return every indicator to its fresh state and drop the cache."""
        for indicator in self._indicators:
            indicator.reset_state()
        self.clear_cache()

    @staticmethod
    def count_active_signals(results: dict[str, IndicatorResult]) -> SignalCounts:
        buy_signals = sell_signals = 0
        buy_strength = sell_strength = 0.0

        for result in results.values():
            if not result.ok:
                continue
            if result.should_buy:
                buy_signals += 1
                buy_strength += result.strength
            elif result.should_sell:
                sell_signals += 1
                sell_strength += result.strength

        return SignalCounts(
            buy_signals=buy_signals,
            sell_signals=sell_signals,
            buy_strength=buy_strength,
            sell_strength=sell_strength,
        )

    def __repr__(self) -> str:
        names = ", ".join(i.name() for i in self._indicators)
        return f"IndicatorManager([{names}])"
