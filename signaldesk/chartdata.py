# signaldesk/chartdata.py
"""
Chart data management - candle storage and history tracking.

Provides the immutable OHLCV candle, a bounded rolling window of
historical candles for indicator calculations, and a CSV reader for
replaying stored candle series.
"""

import csv
import re
from collections import deque
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class Candle:
    """
    Represents a single closed OHLCV candle.

    Attributes:
        timestamp: ISO 8601 timestamp string
        open: Opening price
        high: Highest price during period
        low: Lowest price during period
        close: Closing price
        volume: Trading volume (or 0 if unavailable)
        tick_count: Number of ticks/updates during period
    """

    timestamp: str
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0
    tick_count: int = 0

    @property
    def typical_price(self) -> float:
        """
        Calculate typical price (HLC/3).
        Used in Money Flow Index and WaveTrend.
        """
        return (self.high + self.low + self.close) / 3

    @property
    def mid(self) -> float:
        """Calculate midpoint between high and low."""
        return (self.high + self.low) / 2

    def __repr__(self) -> str:
        return (
            f"Candle(timestamp={self.timestamp}, "
            f"O={self.open:.5f}, H={self.high:.5f}, "
            f"L={self.low:.5f}, C={self.close:.5f}, "
            f"V={self.volume:.0f})"
        )


class ChartHistory:
    """
    Maintains a rolling window of closed candles for one instrument/timeframe.

    Indicators and the manager read it as a plain candle sequence.
    Automatically manages memory by limiting history length.

    Example:
        history = ChartHistory("BTCUSDT", "1h", max_length=200)
        history.add_candle(candle)

        recent = history.get_candles(count=20)  # Last 20 candles only
    """

    def __init__(self, symbol: str, period: str, max_length: int = 200):
        """
        Initialize chart history.

        Args:
            symbol: Instrument identifier
            period: Timeframe (e.g., "5m", "1h")
            max_length: Maximum number of candles to retain
        """
        if max_length <= 0:
            raise ValueError("max_length must be > 0")
        self.symbol = symbol
        self.period = period
        self.max_length = max_length
        self.candles: deque[Candle] = deque(maxlen=max_length)

    def add_candle(self, candle: Candle) -> None:
        """
        Add a new closed candle to history.

        Automatically removes oldest candle if at max_length.
        """
        self.candles.append(candle)

    def get_candles(self, count: Optional[int] = None) -> list[Candle]:
        """
        Get candle objects.

        Args:
            count: Number of most recent candles to return (None = all)

        Returns:
            List of Candle objects, oldest first
        """
        if count is None:
            return list(self.candles)
        return list(self.candles)[-count:]

    @property
    def latest(self) -> Optional[Candle]:
        """Get the most recent candle, or None if empty."""
        return self.candles[-1] if self.candles else None

    def __len__(self) -> int:
        """Return number of candles in history."""
        return len(self.candles)

    def __repr__(self) -> str:
        return (
            f"ChartHistory(symbol={self.symbol}, period={self.period}, "
            f"candles={len(self)}/{self.max_length})"
        )


_HAS_OFFSET = re.compile(r"(Z|[+-]\d{2}:?\d{2})$")

# canonical -> accepted aliases
_CSV_ALIASES = {
    "timestamp": {"timestamp", "time", "datetime", "date"},
    "open": {"open", "o"},
    "high": {"high", "h"},
    "low": {"low", "l"},
    "close": {"close", "c"},
    "volume": {"volume", "vol", "v"},
    "tick_count": {"tick_count", "ticks", "tickcount"},
}


def _norm(s: str) -> str:
    return s.strip().lower()


def _fnum(val: str | None, default: float = 0.0) -> float:
    if val is None:
        return default
    s = str(val).strip()
    return default if s == "" else float(s)


def _inum(val: str | None, default: int = 0) -> int:
    if val is None:
        return default
    s = str(val).strip()
    return default if s == "" else int(float(s))


def read_candles_csv(
    path: str | Path,
    *,
    timestamp_col: str | None = None,
    delimiter: str = ",",
) -> list[Candle]:
    """
    Load an ordered candle series from CSV.

    CSV requirements:
      - timestamp column (autodetected unless timestamp_col is given)
      - open/high/low/close columns (autodetected by common aliases)
      - optional volume and tick_count columns

    Timestamps without an explicit offset are normalised to a trailing "Z".
    """
    path = Path(path)
    candles: list[Candle] = []

    with path.open("r", newline="") as f:
        reader = csv.DictReader(f, delimiter=delimiter)
        if reader.fieldnames is None:
            raise ValueError("CSV has no header row")

        header_map = {_norm(h): h for h in reader.fieldnames if h is not None}

        def pick(key: str) -> str | None:
            for a in _CSV_ALIASES[key]:
                if a in header_map:
                    return header_map[a]
            return None

        if timestamp_col:
            if _norm(timestamp_col) not in header_map:
                raise ValueError(f"CSV missing column: {timestamp_col}")
            ts_key: str | None = header_map[_norm(timestamp_col)]
        else:
            ts_key = pick("timestamp")

        keys = {name: pick(name) for name in ("open", "high", "low", "close")}
        v_key = pick("volume")
        t_key = pick("tick_count")

        missing = [
            name
            for name, k in [("timestamp", ts_key), *keys.items()]
            if k is None
        ]
        if missing:
            raise ValueError(f"CSV missing required columns: {', '.join(missing)}")

        for row in reader:
            ts = (row.get(ts_key) or "").strip()
            if not ts:
                continue

            if not _HAS_OFFSET.search(ts):
                ts = ts + "Z"

            candles.append(
                Candle(
                    timestamp=ts,
                    open=_fnum(row.get(keys["open"])),
                    high=_fnum(row.get(keys["high"])),
                    low=_fnum(row.get(keys["low"])),
                    close=_fnum(row.get(keys["close"])),
                    volume=_fnum(row.get(v_key)) if v_key else 0.0,
                    tick_count=_inum(row.get(t_key)) if t_key else 0,
                )
            )

    return candles
