# signaldesk/__init__.py
"""
Signaldesk - streaming technical indicators and signal consensus.

Provides stateful indicators that keep running state over an append-only
candle stream, and a manager that evaluates many of them per candle and
counts their buy/sell opinions.

Quick start:
    1. Describe your indicators in a YAML file (or construct them directly)
    2. Build a manager with build_manager()
    3. Feed closed candles through process_candle() or replay_candles()

Example:
    from signaldesk import build_manager, load_indicator_config, read_candles_csv
    from signaldesk import replay_candles

    manager = build_manager(load_indicator_config("indicators.yaml"))

    for candle, results, counts in replay_candles(manager, read_candles_csv("btc_1h.csv")):
        if counts.consensus == "buy":
            print(candle.timestamp, counts.buy_strength)
"""

from .chartdata import Candle, ChartHistory, read_candles_csv
from .config import settings, load_indicator_config
from .errors import IndicatorError, InsufficientDataError, InvalidParameterError
from .indicators import Indicator, build_indicators, build_manager, create_indicator
from .manager import IndicatorManager, IndicatorResult, SignalCounts, SignalType
from .runner import configure_logging, replay_candles

__version__ = "0.1.0"
__all__ = [
    "Candle",
    "ChartHistory",
    "read_candles_csv",
    "settings",
    "load_indicator_config",
    "IndicatorError",
    "InsufficientDataError",
    "InvalidParameterError",
    "Indicator",
    "build_indicators",
    "build_manager",
    "create_indicator",
    "IndicatorManager",
    "IndicatorResult",
    "SignalCounts",
    "SignalType",
    "configure_logging",
    "replay_candles",
]
