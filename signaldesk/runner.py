# signaldesk/runner.py
"""
Logging setup and historical replay.
"""

import logging
import sys
from typing import Iterable, Iterator

from .chartdata import Candle, ChartHistory
from .config import settings
from .manager import IndicatorManager, IndicatorResult, SignalCounts, SignalType

log = logging.getLogger(__name__)


def configure_logging(level: str = "INFO", force: bool = False) -> None:
    """
    Configure root logger with console output.

    By default, this is non-destructive: if the root logger already has handlers,
    it will do nothing (assuming the application has configured logging).

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        force: If True, clear existing handlers and force this configuration
    """
    root_logger = logging.getLogger()

    # If logging is already configured and we aren't forcing it, exit.
    if root_logger.hasHandlers() and not force:
        return

    root_logger.setLevel(level.upper())

    if force:
        root_logger.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s %(levelname)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)


def replay_candles(
    manager: IndicatorManager,
    candles: Iterable[Candle],
    history_length: int | None = None,
    symbol: str = "REPLAY",
    period: str = "",
) -> Iterator[tuple[Candle, dict[str, IndicatorResult], SignalCounts]]:
    """
    Feed closed candles through a bounded history and the manager.

    Yields ``(candle, results, counts)`` for every candle, including those
    still inside the warm-up window (their results carry
    InsufficientDataError). A summary is logged once the stream ends.

    Args:
        manager: Manager holding the indicators to evaluate
        candles: Closed candles in chronological order
        history_length: Candles kept in the window (default: settings.history_length)
    """
    length = history_length if history_length is not None else settings.history_length
    required = manager.required_warmup()
    if length < required:
        log.warning(
            "History length %d is shorter than the %d candles the indicators need",
            length,
            required,
        )

    history = ChartHistory(symbol, period, max_length=length)
    processed = 0
    tally = {SignalType.BUY: 0, SignalType.SELL: 0, SignalType.HOLD: 0}

    for candle in candles:
        history.add_candle(candle)
        results = manager.process_candle(candle, history.get_candles())
        counts = manager.count_active_signals(results)

        processed += 1
        tally[counts.consensus] += 1
        yield candle, results, counts

    log.info(
        "Replayed %d candle%s: %d buy, %d sell, %d hold",
        processed,
        "s" if processed != 1 else "",
        tally[SignalType.BUY],
        tally[SignalType.SELL],
        tally[SignalType.HOLD],
    )
