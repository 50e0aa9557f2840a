import math

import pytest

from signaldesk.chartdata import Candle
from signaldesk.errors import InvalidParameterError
from signaldesk.indicators.bollinger_bands import BollingerBands


def candle(close: float) -> Candle:
    return Candle(
        timestamp="2020-01-01T00:00:00Z",
        open=close,
        high=close,
        low=close,
        close=close,
        volume=1.0,
        tick_count=1,
    )


class TestBollingerBands:
    def test_rejects_invalid_params(self) -> None:
        with pytest.raises(ValueError):
            BollingerBands(period=0)
        with pytest.raises(ValueError):
            BollingerBands(period=-1)
        with pytest.raises(ValueError):
            BollingerBands(period=20, k=0)
        with pytest.raises(ValueError):
            BollingerBands(period=20, k=-2)
        with pytest.raises(InvalidParameterError):
            BollingerBands(period=20, ma="wma")
        with pytest.raises(InvalidParameterError):
            BollingerBands(period=20, overbought=0.1, oversold=0.9)

    def test_returns_none_until_ready(self) -> None:
        bb = BollingerBands(period=3, k=2.0)

        assert bb.update(candle(10.0)) is None
        assert bb.update(candle(11.0)) is None
        assert bb.outputs()["upper"] is None

        assert bb.update(candle(12.0)) is not None
        assert bb.ready() is True
        out = bb.outputs()
        assert out["upper"] is not None
        assert out["lower"] is not None
        assert out["std"] is not None

    def test_known_values_period_2_k_2(self) -> None:
        # closes: [10, 14]
        # mean = 12
        # var = ((-2)^2 + (2)^2) / 2 = 4
        # std = 2
        # upper/lower = 12 +/- 2*2 => 16, 8
        bb = BollingerBands(period=2, k=2.0)

        assert bb.update(candle(10.0)) is None
        assert bb.update(candle(14.0)) == pytest.approx(12.0)

        out = bb.outputs()
        assert out["std"] == pytest.approx(2.0)
        assert out["upper"] == pytest.approx(16.0)
        assert out["lower"] == pytest.approx(8.0)
        # close 14 sits 6/8 of the way up the band
        assert out["percent_b"] == pytest.approx(0.75)

    def test_uses_population_std_ddof_zero(self) -> None:
        # closes: [0, 1, 2]
        # mean = 1
        # var (ddof=0) = (1 + 0 + 1) / 3 = 2/3
        # std = sqrt(2/3)
        bb = BollingerBands(period=3, k=1.0)

        bb.update(candle(0.0))
        bb.update(candle(1.0))
        bb.update(candle(2.0))
        out = bb.outputs()

        expected_std = math.sqrt(2.0 / 3.0)
        assert out["middle"] == pytest.approx(1.0)
        assert out["std"] == pytest.approx(expected_std)
        assert out["upper"] == pytest.approx(1.0 + expected_std)
        assert out["lower"] == pytest.approx(1.0 - expected_std)

    def test_rolls_window(self) -> None:
        bb = BollingerBands(period=3, k=2.0)
        bb.update(candle(1.0))
        bb.update(candle(2.0))
        bb.update(candle(3.0))
        bb.update(candle(4.0))  # window now [2,3,4]
        out = bb.outputs()

        mean = (2.0 + 3.0 + 4.0) / 3.0
        var = ((2 - mean) ** 2 + (3 - mean) ** 2 + (4 - mean) ** 2) / 3.0
        std = math.sqrt(var)

        assert out["middle"] == pytest.approx(mean)
        assert out["std"] == pytest.approx(std)
        assert out["upper"] == pytest.approx(mean + 2.0 * std)
        assert out["lower"] == pytest.approx(mean - 2.0 * std)

    def test_flat_series_collapses_bands(self, from_closes) -> None:
        history = from_closes([100.0] * 5)
        bb = BollingerBands(period=5, k=2.0)

        assert bb.calculate(history) == 100.0
        out = bb.outputs()
        assert out["upper"] == 100.0
        assert out["middle"] == 100.0
        assert out["lower"] == 100.0
        assert out["percent_b"] == 0.5

        assert bb.should_buy(100.0, history) is False
        assert bb.should_sell(100.0, history) is False
        assert bb.signal_strength() == 0.0

    def test_signals_from_percent_b_of_current_price(self, from_closes) -> None:
        history = from_closes([10.0, 14.0])  # bands 8 .. 16
        bb = BollingerBands(period=2, k=2.0)

        assert bb.should_buy(8.5, history) is True    # %B 0.0625
        assert bb.should_sell(8.5, history) is False
        assert bb.should_sell(15.5, history) is True  # %B 0.9375
        assert bb.should_buy(15.5, history) is False
        assert bb.should_buy(12.0, history) is False
        assert bb.should_sell(12.0, history) is False

    def test_strength_from_last_close(self, from_closes) -> None:
        bb = BollingerBands(period=2, k=2.0)
        bb.calculate(from_closes([10.0, 14.0]))
        # %B 0.75 -> halfway from the middle to the upper band
        assert bb.signal_strength() == pytest.approx(0.5)

    @pytest.mark.parametrize(
        "k, closes, expected",
        [
            (1.0, [10.0, 10.0, 16.0], "strong_uptrend"),   # %B ~1.21
            (1.0, [10.0, 14.0], "uptrend"),                # %B 1.0
            (2.0, [10.0, 14.0], "neutral"),                # %B 0.75
            (1.0, [14.0, 10.0], "downtrend"),              # %B 0.0
            (1.0, [16.0, 16.0, 10.0], "strong_downtrend"), # %B ~-0.21
        ],
    )
    def test_trend_strength(self, from_closes, k, closes, expected) -> None:
        bb = BollingerBands(period=len(closes), k=k)
        bb.calculate(from_closes(closes))
        assert bb.trend_strength() == expected

    def test_trend_strength_before_warmup(self) -> None:
        assert BollingerBands(period=5).trend_strength() == "neutral"

    def test_ema_middle(self) -> None:
        bb = BollingerBands(period=2, k=1.0, ma="ema")
        bb.update(candle(10.0))
        bb.update(candle(14.0))  # EMA seed = 12
        v = bb.update(candle(20.0))

        alpha = 2.0 / 3.0
        middle = 20.0 * alpha + 12.0 * (1.0 - alpha)
        assert v == pytest.approx(middle)
        # spread still comes from the [14, 20] window
        assert bb.outputs()["std"] == pytest.approx(3.0)
        assert bb.outputs()["upper"] == pytest.approx(middle + 3.0)
        assert bb.name() == "Bollinger(2,1,ema)"

    def test_reset(self) -> None:
        bb = BollingerBands(period=2, k=2.0)
        bb.update(candle(10.0))
        assert bb.update(candle(14.0)) is not None

        bb.reset_state()
        assert bb.ready() is False
        assert bb.outputs()["upper"] is None
        assert bb.update(candle(1.0)) is None

    def test_required_periods(self) -> None:
        bb = BollingerBands(period=20, k=2.0)
        assert bb.required_periods() == 20
        assert bb.name() == "Bollinger(20,2)"
