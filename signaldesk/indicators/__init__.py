"""
Technical indicators for trading signals.

Provides stateful indicator classes that are brought up to date with a
candle history and then asked for an opinion on the current price.

Example:
    from signaldesk.indicators import RSI, MACD, BollingerBands

    rsi = RSI(period=14)
    macd = MACD(fast=12, slow=26, signal=9)
    bands = BollingerBands(period=20, k=2.0)

    # Each call only consumes candles it has not seen yet
    rsi_value = rsi.calculate(history)
    if rsi.should_buy(history[-1].close, history):
        ...
"""

from .base import Indicator
from .adx import ADX
from .atr import ATR, true_range
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
from .registry import INDICATORS, build_indicators, build_manager, create_indicator

__all__ = [
    "Indicator",
    "ADX",
    "ATR",
    "BollingerBands",
    "DonchianChannels",
    "EMA",
    "HullMA",
    "KeltnerChannels",
    "MACD",
    "MFI",
    "OBV",
    "RSI",
    "SMA",
    "StochasticRSI",
    "SuperTrend",
    "WaveTrend",
    "INDICATORS",
    "build_indicators",
    "build_manager",
    "create_indicator",
    "true_range",
]
