"""Base class for technical indicators."""

import abc
from typing import Sequence

from signaldesk.chartdata import Candle
from signaldesk.errors import InsufficientDataError, InvalidParameterError


def require_positive(name: str, value: int) -> int:
    if int(value) != value or value <= 0:
        raise InvalidParameterError(f"{name} must be a positive integer, got {value!r}")
    return int(value)


def require_thresholds(lower_name: str, lower: float, upper_name: str, upper: float) -> None:
    if not lower < upper:
        raise InvalidParameterError(
            f"{lower_name} ({lower}) must be below {upper_name} ({upper})"
        )


def clamp01(value: float) -> float:
    return min(1.0, max(0.0, value))


class Indicator(abc.ABC):
    """
    Abstract base class for all technical indicators.

    Subclasses implement the per-candle recurrence in `_update`, clear their
    own state in `_reset`, and decide signals from cached state in
    `_buy`/`_sell`/`signal_strength`. This class supplies the shared
    lifecycle:

      initialize(history)  cold start: reset, seed, replay
      update(candle)       warm update by one closed candle
      calculate(history)   resume from the last consumed candle (memoised)

    Because a cold start is the same recurrence replayed from scratch,
    initialize(H[:n]) followed by update() over H[n:] gives the same state
    as initialize(H).
    """

    def __init__(self) -> None:
        self._value: float | None = None
        self._last_candle: Candle | None = None

    # ------------------------------------------------------------------
    # Hooks for subclasses
    # ------------------------------------------------------------------
    @abc.abstractmethod
    def _update(self, candle: Candle) -> float | None:
        """Advance the recurrence by one candle; return the primary value once ready."""
        raise NotImplementedError

    @abc.abstractmethod
    def _reset(self) -> None:
        """Clear indicator-specific state."""
        raise NotImplementedError

    @abc.abstractmethod
    def _buy(self, price: float) -> bool:
        raise NotImplementedError

    @abc.abstractmethod
    def _sell(self, price: float) -> bool:
        raise NotImplementedError

    @abc.abstractmethod
    def signal_strength(self) -> float:
        """Strength of the current opinion, read from cached state."""
        raise NotImplementedError

    @abc.abstractmethod
    def name(self) -> str:
        raise NotImplementedError

    @abc.abstractmethod
    def required_periods(self) -> int:
        """Minimum number of candles `calculate` needs."""
        raise NotImplementedError

    def _initialize(self, history: Sequence[Candle]) -> float | None:
        value = None
        for candle in history:
            value = self._update(candle)
        return value

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def update(self, candle: Candle) -> float | None:
        """Update indicator state with a new closed candle and return the latest value."""
        self._value = self._update(candle)
        self._last_candle = candle
        return self._value

    def initialize(self, history: Sequence[Candle]) -> float:
        """Cold start from a full history."""
        self._check_history(history)
        self.reset_state()
        self._value = self._initialize(history)
        self._last_candle = history[-1]
        return self._current_value(len(history))

    def calculate(self, history: Sequence[Candle]) -> float:
        """
        Bring state up to date with `history` and return the primary value.

        Only candles after the last consumed one are applied. If the last
        consumed candle is not part of `history` the indicator cold-starts.
        """
        self._check_history(history)

        start = self._resume_index(history)
        if start is None:
            return self.initialize(history)

        for i in range(start, len(history)):
            self.update(history[i])
        return self._current_value(len(history))

    def reset_state(self) -> None:
        """Reset indicator internal state to its freshly-constructed condition."""
        self._reset()
        self._value = None
        self._last_candle = None

    def ready(self) -> bool:
        """Return True when the indicator has produced a valid value."""
        return self._value is not None

    @property
    def value(self) -> float | None:
        return self._value

    def outputs(self) -> dict[str, float | None]:
        """All named outputs of the indicator."""
        return {"value": self._value}

    # ------------------------------------------------------------------
    # Signals
    # ------------------------------------------------------------------
    def should_buy(self, current_price: float, history: Sequence[Candle]) -> bool:
        self.calculate(history)
        return self._buy(float(current_price))

    def should_sell(self, current_price: float, history: Sequence[Candle]) -> bool:
        self.calculate(history)
        return self._sell(float(current_price))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _check_history(self, history: Sequence[Candle]) -> None:
        required = self.required_periods()
        if len(history) < required:
            raise InsufficientDataError(self.name(), len(history), required)

    def _resume_index(self, history: Sequence[Candle]) -> int | None:
        last = self._last_candle
        if last is None:
            return None
        for i in range(len(history) - 1, -1, -1):
            if history[i] == last:
                return i + 1
        return None

    def _current_value(self, available: int) -> float:
        if self._value is None:
            raise InsufficientDataError(self.name(), available, self.required_periods())
        return self._value

    def __repr__(self) -> str:
        return f"<{self.name()} ready={self.ready()}>"
