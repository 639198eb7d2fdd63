"""Pure Decimal derivations over funding series.

Hyperliquid settles funding hourly, so a per-period rate annualizes as
rate * 100 (percent) * 24 (periods/day) * 365 (days/year).
"""

from collections.abc import Sequence
from decimal import Decimal

from funding_viewer.exceptions import ValidationError
from funding_viewer.models import FundingSeries, SeriesPoint, SummaryStats

PERCENT = Decimal("100")
PERIODS_PER_YEAR = Decimal("8760")  # 24 * 365
ANNUALIZATION_FACTOR = PERCENT * PERIODS_PER_YEAR


def annualize(rate: Decimal) -> Decimal:
    """Convert an hourly funding rate to a percent APR."""
    return rate * ANNUALIZATION_FACTOR


def annualized_points(series: FundingSeries) -> list[SeriesPoint]:
    """Map each sample to (time, annualized percent rate) for charting."""
    return [SeriesPoint(time=s.time, value=annualize(s.funding_rate)) for s in series]


def moving_average(
    points: Sequence[SeriesPoint], window_size: int = 24
) -> list[SeriesPoint]:
    """Trailing moving average with a variable-length warm-up window.

    Element i averages points[max(0, i - window_size + 1) .. i], so the
    output has the same length as the input and never looks ahead.

    Args:
        points: Time-ordered input points.
        window_size: Number of trailing points per average (default 24 hours).

    Returns:
        One averaged point per input point, keeping the input times.
    """
    if window_size < 1:
        raise ValidationError(f"window_size must be >= 1, got {window_size}")

    averaged: list[SeriesPoint] = []
    running = Decimal("0")
    for i, point in enumerate(points):
        running += point.value
        if i >= window_size:
            running -= points[i - window_size].value
        count = min(i + 1, window_size)
        averaged.append(SeriesPoint(time=point.time, value=running / Decimal(count)))
    return averaged


def summary_stats(series: FundingSeries) -> SummaryStats:
    """Compute avg/min/max/current funding in percent, plus average APR.

    current is the last sample's rate. An empty series yields all zeros.
    """
    if not series:
        zero = Decimal("0")
        return SummaryStats(avg=zero, min=zero, max=zero, current=zero, apr=zero)

    rates = [s.funding_rate * PERCENT for s in series]
    avg = sum(rates, Decimal("0")) / Decimal(len(rates))

    return SummaryStats(
        avg=avg,
        min=min(rates),
        max=max(rates),
        current=rates[-1],
        apr=avg * PERIODS_PER_YEAR,
    )
