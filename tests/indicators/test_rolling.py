import math

import pytest

from signaldesk.errors import InvalidParameterError
from signaldesk.indicators.rolling import RollingExtremes, RollingWindow, WeightedWindow


class TestRollingWindow:
    def test_rejects_non_positive_capacity(self) -> None:
        with pytest.raises(InvalidParameterError):
            RollingWindow(0)

    def test_push_returns_evicted_value(self) -> None:
        w = RollingWindow(3)

        assert w.push(1.0) is None
        assert w.push(2.0) is None
        assert w.push(3.0) is None
        assert w.full is True
        assert w.push(4.0) == 1.0
        assert w.push(5.0) == 2.0
        assert w.values() == [3.0, 4.0, 5.0]
        assert w.oldest == 3.0
        assert w.newest == 5.0

    def test_running_statistics(self) -> None:
        w = RollingWindow(4)
        for x in (2.0, 4.0, 4.0, 4.0, 5.0, 5.0, 7.0, 9.0):
            w.push(x)

        # window [5, 5, 7, 9]
        assert len(w) == 4
        assert w.sum == pytest.approx(26.0)
        assert w.mean == pytest.approx(6.5)
        assert w.variance == pytest.approx(2.75)
        assert w.std == pytest.approx(math.sqrt(2.75))

    def test_partial_window(self) -> None:
        w = RollingWindow(5)
        w.push(1.0)
        w.push(3.0)

        assert w.full is False
        assert w.values() == [1.0, 3.0]
        assert w.mean == pytest.approx(2.0)
        assert w.oldest == 1.0

    def test_zero_window_sum_is_exact(self) -> None:
        w = RollingWindow(3)
        for x in (0.1, 0.2, 0.3, 0.0, 0.0, 0.0):
            w.push(x)

        assert w.sum == 0.0
        assert w.variance == 0.0

    def test_fill_matches_pushes(self) -> None:
        values = [float(i * i) for i in range(10)]

        pushed = RollingWindow(4)
        for x in values:
            pushed.push(x)

        filled = RollingWindow(4)
        filled.fill(values)

        assert filled.values() == pushed.values()
        assert filled.sum == pytest.approx(pushed.sum)
        assert filled.variance == pytest.approx(pushed.variance)

        # pushes after fill evict in order
        assert filled.push(100.0) == 36.0
        assert filled.values() == [49.0, 64.0, 81.0, 100.0]

    def test_fill_with_fewer_values_than_capacity(self) -> None:
        w = RollingWindow(4)
        w.fill([1.0, 2.0])

        assert w.full is False
        assert w.push(3.0) is None
        assert w.values() == [1.0, 2.0, 3.0]

    def test_clear(self) -> None:
        w = RollingWindow(2)
        w.push(1.0)
        w.push(2.0)
        w.clear()

        assert len(w) == 0
        assert w.sum == 0.0
        assert w.newest is None


class TestRollingExtremes:
    def test_tracks_max_and_min(self) -> None:
        ex = RollingExtremes(3)
        for high, low in ((5, 1), (7, 2), (6, 0), (4, 3), (3, 3)):
            ex.push(high, low)

        # last three: (6, 0), (4, 3), (3, 3)
        assert ex.max == 6.0
        assert ex.min == 0.0
        assert ex.full is True

        ex.push(2, 2)
        # last three: (4, 3), (3, 3), (2, 2)
        assert ex.max == 4.0
        assert ex.min == 2.0

    def test_single_series(self) -> None:
        ex = RollingExtremes(2)
        ex.push(3.0)
        assert ex.full is False
        ex.push(1.0)
        assert ex.max == 3.0
        assert ex.min == 1.0
        assert len(ex) == 2

    def test_clear(self) -> None:
        ex = RollingExtremes(2)
        ex.push(1.0)
        ex.clear()
        assert ex.max is None
        assert ex.min is None
        assert len(ex) == 0


class TestWeightedWindow:
    def test_linear_weights(self) -> None:
        ww = WeightedWindow(3)

        assert ww.push(1.0) is None
        assert ww.push(2.0) is None
        # (1*1 + 2*2 + 3*3) / 6
        assert ww.push(3.0) == pytest.approx(14.0 / 6.0)
        # (1*2 + 2*3 + 3*10) / 6
        assert ww.push(10.0) == pytest.approx(38.0 / 6.0)

    def test_clear(self) -> None:
        ww = WeightedWindow(2)
        ww.push(1.0)
        ww.push(2.0)
        ww.clear()
        assert ww.value is None
        assert ww.push(4.0) is None
