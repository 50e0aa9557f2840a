import pytest

from signaldesk.errors import InvalidParameterError
from signaldesk.indicators.stochastic_rsi import StochasticRSI


class TestStochasticRSI:
    def test_rejects_invalid_params(self) -> None:
        with pytest.raises(ValueError):
            StochasticRSI(period=0)
        with pytest.raises(InvalidParameterError):
            StochasticRSI(overbought=20, oversold=80)
        with pytest.raises(InvalidParameterError):
            StochasticRSI(zone=0)

    def test_rejects_overlapping_zones(self) -> None:
        with pytest.raises(InvalidParameterError):
            StochasticRSI(overbought=35, oversold=20, zone=10)
        # touching zones are fine
        StochasticRSI(overbought=40, oversold=20, zone=10)

    def test_flat_rsi_window_is_neutral(self, from_closes) -> None:
        history = from_closes([10.0] * 6)
        stoch = StochasticRSI(period=3)

        assert stoch.calculate(history) == 50.0
        assert stoch.should_buy(10.0, history) is False
        assert stoch.should_sell(10.0, history) is False

    def test_buy_just_above_oversold(self, from_closes) -> None:
        # deltas +1, 0, 0, -3, +1 -> RSI(3) values 100, 0, 25
        history = from_closes([10.0, 11.0, 11.0, 11.0, 8.0, 9.0])
        stoch = StochasticRSI(period=3)

        assert stoch.calculate(history) == pytest.approx(25.0)
        assert stoch.outputs()["rsi"] == pytest.approx(25.0)
        assert stoch.should_buy(9.0, history) is True
        assert stoch.should_sell(9.0, history) is False
        assert stoch.signal_strength() == pytest.approx(0.5)

    def test_sell_just_below_overbought(self, from_closes) -> None:
        # deltas -1, 0, 0, +3, -1 -> RSI(3) values 0, 100, 75
        history = from_closes([10.0, 9.0, 9.0, 9.0, 12.0, 11.0])
        stoch = StochasticRSI(period=3)

        assert stoch.calculate(history) == pytest.approx(75.0)
        assert stoch.should_sell(11.0, history) is True
        assert stoch.should_buy(11.0, history) is False
        assert stoch.signal_strength() == pytest.approx(0.5)

    def test_extremes_do_not_signal(self, from_closes) -> None:
        # last RSI(3) values 66.7, 100, 100 -> StochRSI 100 is past the sell zone
        history = from_closes([10.0, 9.0, 8.0, 7.0, 7.0, 9.0, 11.0, 13.0])
        stoch = StochasticRSI(period=3)

        assert stoch.calculate(history) == pytest.approx(100.0)
        assert stoch.should_sell(13.0, history) is False
        assert stoch.should_buy(13.0, history) is False
        assert stoch.signal_strength() == pytest.approx(1.0)

    def test_reset(self, from_closes) -> None:
        stoch = StochasticRSI(period=3)
        stoch.calculate(from_closes([10.0] * 6))
        assert stoch.ready() is True

        stoch.reset_state()
        assert stoch.ready() is False
        assert stoch.outputs() == {"stoch_rsi": None, "rsi": None}

    def test_required_periods(self) -> None:
        assert StochasticRSI(period=14).required_periods() == 28
        assert StochasticRSI(period=14).name() == "StochRSI(14)"
