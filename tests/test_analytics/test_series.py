"""Tests for series derivations: annualize, moving average, summary stats."""

from decimal import Decimal

import pytest

from funding_viewer.analytics.series import (
    ANNUALIZATION_FACTOR,
    annualize,
    annualized_points,
    moving_average,
    summary_stats,
)
from funding_viewer.exceptions import ValidationError
from funding_viewer.models import FundingSample, SeriesPoint, SummaryStats


def _series(*rates: str) -> list[FundingSample]:
    return [
        FundingSample(time=1000 * i, funding_rate=Decimal(r), premium=Decimal("0"))
        for i, r in enumerate(rates)
    ]


def _points(*values: int) -> list[SeriesPoint]:
    return [SeriesPoint(time=i, value=Decimal(v)) for i, v in enumerate(values)]


class TestAnnualize:
    """Tests for hourly rate -> percent APR."""

    def test_factor(self) -> None:
        assert ANNUALIZATION_FACTOR == Decimal("876000")

    def test_typical_rate(self) -> None:
        # 0.00125% per hour ~= 10.95% APR
        assert annualize(Decimal("0.0000125")) == Decimal("10.95")

    def test_negative_rate(self) -> None:
        assert annualize(Decimal("-0.00001")) == Decimal("-8.76")

    @pytest.mark.parametrize("rate", ["0", "0.0001", "-0.000034", "1.5", "-0.0000000001"])
    def test_round_trip(self, rate: str) -> None:
        value = Decimal(rate)
        assert annualize(value) / (Decimal("100") * 24 * 365) == value

    def test_annualized_points(self) -> None:
        points = annualized_points(_series("0.00001", "0.00002"))
        assert points == [
            SeriesPoint(time=0, value=Decimal("8.76")),
            SeriesPoint(time=1000, value=Decimal("17.52")),
        ]


class TestMovingAverage:
    """Tests for the trailing variable-length window."""

    def test_length_and_first_element(self) -> None:
        points = _points(*range(1, 11))
        averaged = moving_average(points, 24)

        assert len(averaged) == 10
        assert averaged[0].value == points[0].value

    def test_warm_up_window_grows(self) -> None:
        averaged = moving_average(_points(2, 4, 6, 8), 3)
        assert [p.value for p in averaged] == [
            Decimal("2"),
            Decimal("3"),
            Decimal("4"),
            Decimal("6"),
        ]

    def test_keeps_input_times(self) -> None:
        points = [SeriesPoint(time=t, value=Decimal("1")) for t in (10, 20, 30)]
        assert [p.time for p in moving_average(points, 2)] == [10, 20, 30]

    def test_window_of_one_is_identity(self) -> None:
        points = _points(5, -3, 7)
        assert moving_average(points, 1) == points

    def test_default_window_is_24(self) -> None:
        points = _points(*([0] * 24 + [24]))
        assert moving_average(points)[-1].value == Decimal("1")

    def test_empty(self) -> None:
        assert moving_average([], 24) == []

    def test_rejects_zero_window(self) -> None:
        with pytest.raises(ValidationError):
            moving_average(_points(1), 0)


class TestSummaryStats:
    """Tests for percent-scale summary statistics."""

    def test_stats(self) -> None:
        stats = summary_stats(_series("0.0001", "-0.0002", "0.0004"))

        assert stats.avg == Decimal("0.01")
        assert stats.min == Decimal("-0.02")
        assert stats.max == Decimal("0.04")
        assert stats.current == Decimal("0.04")
        assert stats.apr == Decimal("87.6")

    def test_current_is_last_sample(self) -> None:
        stats = summary_stats(_series("0.0005", "0.0001"))
        assert stats.current == Decimal("0.01")

    def test_empty_series(self) -> None:
        zero = Decimal("0")
        assert summary_stats([]) == SummaryStats(
            avg=zero, min=zero, max=zero, current=zero, apr=zero
        )
