"""Replay a candle CSV through a handful of indicators and log their consensus."""
import logging
import sys

from signaldesk import (
    build_manager,
    configure_logging,
    load_indicator_config,
    read_candles_csv,
    replay_candles,
    settings,
)
from signaldesk.manager import SignalType

log = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    "indicators": [
        {"type": "rsi", "period": 14},
        {"type": "macd"},
        {"type": "bollinger", "period": 20, "k": 2.0},
        {"type": "supertrend", "period": 10, "multiplier": 3.0},
    ]
}


def main(csv_path: str) -> None:
    configure_logging(settings.log_level)
    settings.validate()

    config = (
        load_indicator_config(settings.indicator_config)
        if settings.indicator_config
        else DEFAULT_CONFIG
    )
    manager = build_manager(config)

    for candle, results, counts in replay_candles(manager, read_candles_csv(csv_path)):
        if counts.consensus is SignalType.HOLD:
            continue

        voters = [name for name, r in results.items() if r.signal is counts.consensus]
        log.info(
            "%s %s close=%.5f net=%.2f (%s)",
            candle.timestamp,
            counts.consensus.value.upper(),
            candle.close,
            counts.net_strength,
            ", ".join(voters),
        )


if __name__ == "__main__":
    if len(sys.argv) != 2:
        sys.exit("usage: python examples/momentum.py CANDLES.csv")
    main(sys.argv[1])
