# signaldesk/errors.py
"""
Error types raised by indicators and the indicator manager.

IndicatorError
  +-- InsufficientDataError   history shorter than required_periods()
  +-- InvalidParameterError   bad constructor/config parameters (also a ValueError)
"""


class IndicatorError(Exception):
    """Base class for all indicator failures."""


class InsufficientDataError(IndicatorError):
    """Raised when a calculation is asked for with too few candles."""

    def __init__(self, indicator: str, available: int, required: int):
        self.indicator = indicator
        self.available = available
        self.required = required
        super().__init__(
            f"insufficient data for {indicator}: have {available}, need {required}"
        )


class InvalidParameterError(IndicatorError, ValueError):
    """Raised at construction time for parameters that can never work."""
