"""Build indicators and managers from configuration mappings."""

import logging
from typing import Any, Iterable, Mapping

from signaldesk.errors import InvalidParameterError
from .adx import ADX
from .atr import ATR
from .base import Indicator
from .bollinger_bands import BollingerBands
from .donchian import DonchianChannels
from .ema import EMA
from .hull_ma import HullMA
from .keltner import KeltnerChannels
from .macd import MACD
from .mfi import MFI
from .obv import OBV
from .rsi import RSI
from .sma import SMA
from .stochastic_rsi import StochasticRSI
from .supertrend import SuperTrend
from .wavetrend import WaveTrend

log = logging.getLogger(__name__)

INDICATORS: dict[str, type[Indicator]] = {
    "ema": EMA,
    "sma": SMA,
    "atr": ATR,
    "rsi": RSI,
    "macd": MACD,
    "mfi": MFI,
    "wavetrend": WaveTrend,
    "stochastic_rsi": StochasticRSI,
    "bollinger": BollingerBands,
    "keltner": KeltnerChannels,
    "donchian": DonchianChannels,
    "adx": ADX,
    "supertrend": SuperTrend,
    "obv": OBV,
    "hull_ma": HullMA,
}


def create_indicator(kind: str, **params: Any) -> Indicator:
    """
    Instantiate one indicator by its configuration kind.

    Raises:
        InvalidParameterError: unknown kind, unexpected keyword or invalid value
    """
    key = str(kind).strip().lower()
    try:
        cls = INDICATORS[key]
    except KeyError:
        known = ", ".join(sorted(INDICATORS))
        raise InvalidParameterError(f"unknown indicator type {kind!r} (known: {known})") from None

    try:
        return cls(**params)
    except TypeError as e:
        raise InvalidParameterError(f"invalid parameters for {key}: {e}") from e


def build_indicators(entries: Iterable[Mapping[str, Any]]) -> list[Indicator]:
    """Create indicators from mappings of the form ``{"type": kind, **params}``."""
    indicators = []
    for entry in entries:
        if not isinstance(entry, Mapping) or "type" not in entry:
            raise InvalidParameterError(f"indicator entry needs a 'type' key: {entry!r}")
        params = {k: v for k, v in entry.items() if k != "type"}
        indicator = create_indicator(entry["type"], **params)
        log.debug("Configured indicator %s", indicator.name())
        indicators.append(indicator)
    return indicators


def build_manager(config: Mapping[str, Any], **kwargs: Any):
    """
    Create an IndicatorManager from a configuration mapping.

    Expected shape (as loaded from YAML):

        indicators:
          - type: rsi
            period: 14
          - type: bollinger
            period: 20
            k: 2.0

    Extra keyword arguments (e.g. ``sink``) are passed to the manager.
    """
    from signaldesk.manager import IndicatorManager

    entries = config.get("indicators")
    if not isinstance(entries, list) or not entries:
        raise InvalidParameterError("config must contain a non-empty 'indicators' list")

    manager = IndicatorManager(build_indicators(entries), **kwargs)
    log.info(
        "Indicator manager ready: %s",
        ", ".join(i.name() for i in manager.indicators),
    )
    return manager
