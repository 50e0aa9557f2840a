# tests/conftest.py
from datetime import datetime, timedelta, timezone

import numpy as np
import pytest

from signaldesk.chartdata import Candle

_EPOCH = datetime(2025, 1, 1, tzinfo=timezone.utc)


def stamp(i: int) -> str:
    """Unique, ordered minute timestamps."""
    return (_EPOCH + timedelta(minutes=i)).strftime("%Y-%m-%dT%H:%M:%SZ")


def make_candle(i: int) -> Candle:
    """
    Deterministic candle series with monotonically increasing prices.
    """
    base = 100.0 + i
    return Candle(
        timestamp=stamp(i),
        open=base,
        high=base + 0.5,
        low=base - 0.5,
        close=base + 0.2,
        volume=1000.0,
        tick_count=10,
    )


def close_candle(i: int, close: float, volume: float = 1.0) -> Candle:
    """Flat candle (O=H=L=C) at position i."""
    return Candle(
        timestamp=stamp(i),
        open=close,
        high=close,
        low=close,
        close=close,
        volume=volume,
        tick_count=1,
    )


def candles_from_closes(closes, volume: float = 1.0) -> list[Candle]:
    return [close_candle(i, c, volume) for i, c in enumerate(closes)]


def random_walk(n: int, seed: int = 7, start: float = 100.0) -> list[Candle]:
    """
    Reproducible OHLCV random walk with real ranges and varying volume.
    """
    rng = np.random.default_rng(seed)
    returns = rng.normal(0.0, 0.01, size=n)
    closes = start * np.exp(np.cumsum(returns))
    opens = np.concatenate(([start], closes[:-1]))
    wiggle = np.abs(rng.normal(0.0, 0.004, size=n))
    highs = np.maximum(opens, closes) * (1.0 + wiggle)
    lows = np.minimum(opens, closes) * (1.0 - wiggle)
    volumes = rng.uniform(100.0, 5000.0, size=n).round(2)
    ticks = rng.integers(1, 200, size=n)

    return [
        Candle(
            timestamp=stamp(i),
            open=float(opens[i]),
            high=float(highs[i]),
            low=float(lows[i]),
            close=float(closes[i]),
            volume=float(volumes[i]),
            tick_count=int(ticks[i]),
        )
        for i in range(n)
    ]


@pytest.fixture
def candle_factory():
    """
    Returns a function: (i:int) -> Candle
    """
    return make_candle


@pytest.fixture
def make_candles(candle_factory):
    """
    Returns a function: (n:int, start:int=0) -> list[Candle]
    """
    def _make(n: int, start: int = 0) -> list[Candle]:
        return [candle_factory(i) for i in range(start, start + n)]

    return _make


@pytest.fixture
def from_closes():
    """
    Returns a function: (closes, volume=1.0) -> list[Candle]
    """
    return candles_from_closes


@pytest.fixture
def walk():
    """
    Returns a function: (n:int, seed:int=7) -> list[Candle]
    """
    return random_walk
