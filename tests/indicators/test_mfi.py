import pytest

from signaldesk.chartdata import Candle
from signaldesk.indicators.mfi import MFI


def candle(
    high: float,
    low: float,
    close: float,
    *,
    volume: float = 1.0,
    tick_count: int = 1,
    i: int = 0,
) -> Candle:
    return Candle(
        timestamp=f"2020-01-01T00:{i:02d}:00Z",
        open=close,
        high=high,
        low=low,
        close=close,
        volume=volume,
        tick_count=tick_count,
    )


class TestMFI:
    def test_rejects_invalid_params(self) -> None:
        with pytest.raises(ValueError):
            MFI(period=0)
        with pytest.raises(ValueError):
            MFI(period=14, overbought=20, oversold=80)

    def test_rising_typical_prices_give_100(self, make_candles) -> None:
        history = make_candles(20)
        mfi = MFI(period=14)
        assert mfi.calculate(history) == 100.0
        assert mfi.should_sell(history[-1].close, history) is True
        assert mfi.should_buy(history[-1].close, history) is False

    def test_falling_typical_prices_give_0(self) -> None:
        mfi = MFI(period=3)
        for i, c in enumerate((20.0, 19.0, 18.0, 17.0)):
            v = mfi.update(candle(c + 1, c - 1, c, i=i))
        assert v == 0.0

    def test_no_flow_reads_100(self) -> None:
        mfi = MFI(period=3)
        for i in range(4):
            v = mfi.update(candle(11.0, 9.0, 10.0, i=i))
        assert v == 100.0

    def test_flat_history_reads_100(self, from_closes) -> None:
        mfi = MFI(period=14)
        assert mfi.calculate(from_closes([10.0] * 15)) == 100.0

    def test_known_value(self) -> None:
        mfi = MFI(period=2)

        # typical prices 10, 12, 11 with volumes 1, 2, 4
        assert mfi.update(candle(10.0, 10.0, 10.0, volume=1.0, i=0)) is None
        assert mfi.update(candle(12.0, 12.0, 12.0, volume=2.0, i=1)) is None
        v = mfi.update(candle(11.0, 11.0, 11.0, volume=4.0, i=2))

        positive = 12.0 * 2.0
        negative = 11.0 * 4.0
        expected = 100.0 - 100.0 / (1.0 + positive / negative)
        assert v == pytest.approx(expected)

    def test_zero_volume_has_no_flow(self) -> None:
        mfi = MFI(period=2)

        # tick counts are ignored; without volume both flows are zero
        bars = [(10.0, 1, 0), (12.0, 2, 1), (11.0, 4, 2)]
        for close, ticks, i in bars:
            v = mfi.update(candle(close, close, close, volume=0.0, tick_count=ticks, i=i))

        assert v == 100.0
        assert mfi.positive_flows.sum == 0.0
        assert mfi.negative_flows.sum == 0.0

    def test_oversold_strength(self) -> None:
        mfi = MFI(period=3)
        for i, c in enumerate((20.0, 19.0, 18.0, 17.0)):
            mfi.update(candle(c, c, c, i=i))
        assert mfi.signal_strength() == pytest.approx(1.0)

    def test_reset(self) -> None:
        mfi = MFI(period=2)
        for i, c in enumerate((10.0, 11.0, 12.0)):
            mfi.update(candle(c, c, c, i=i))
        assert mfi.ready() is True

        mfi.reset_state()
        assert mfi.ready() is False
        assert mfi.update(candle(5.0, 5.0, 5.0)) is None

    def test_required_periods(self) -> None:
        assert MFI(period=14).required_periods() == 15
        assert MFI(period=14).name() == "MFI(14)"
