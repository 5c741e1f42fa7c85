"""Tests for date-window filtering and aggregation."""

from __future__ import annotations

import math
import warnings
from datetime import datetime, timedelta

import pytest

from adboard.metrics import (
    aggregate_metrics,
    filter_by_date_range,
    parse_date_label,
    window_start,
)
from adboard.schema import DERIVED_METRICS, METRICS, DataPoint

NOW = datetime(2026, 10, 19, 15, 30)


def _days_ago(n: int, fmt: str = "%Y-%m-%d") -> str:
    return (NOW - timedelta(days=n)).strftime(fmt)


class TestParseDateLabel:
    @pytest.mark.parametrize("label", ["2024-01-15", "1/15/2024", "Jan 15, 2024", "January 15 2024"])
    def test_common_formats(self, label):
        d = parse_date_label(label)
        assert (d.year, d.month, d.day) == (2024, 1, 15)

    def test_day_first_label_parses_without_warning(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error", UserWarning)
            d = parse_date_label("15/01/2024")
        assert (d.year, d.month, d.day) == (2024, 1, 15)

    @pytest.mark.parametrize("label", ["Total", "not a date", "2024-13-45"])
    def test_unparseable_is_none(self, label):
        assert parse_date_label(label) is None


class TestFilterByDateRange:
    def test_keeps_records_inside_window(self):
        points = [DataPoint(name=_days_ago(n)) for n in (5, 20, 40)]
        kept = filter_by_date_range(points, 30, now=NOW)
        assert [p.name for p in kept] == [_days_ago(5), _days_ago(20)]

    def test_boundary_day_is_included(self):
        points = [DataPoint(name=_days_ago(30)), DataPoint(name=_days_ago(31))]
        kept = filter_by_date_range(points, 30, now=NOW)
        assert [p.name for p in kept] == [_days_ago(30)]

    def test_unparseable_names_are_excluded(self):
        points = [DataPoint(name="Total"), DataPoint(name=_days_ago(1))]
        kept = filter_by_date_range(points, 7, now=NOW)
        assert [p.name for p in kept] == [_days_ago(1)]

    def test_mixed_label_formats(self):
        points = [
            DataPoint(name=_days_ago(2, "%m/%d/%Y")),
            DataPoint(name=_days_ago(3, "%b %d, %Y")),
            DataPoint(name=_days_ago(100, "%m/%d/%Y")),
        ]
        kept = filter_by_date_range(points, 7, now=NOW)
        assert len(kept) == 2

    def test_order_is_preserved(self):
        points = [DataPoint(name=_days_ago(n)) for n in (1, 6, 3)]
        kept = filter_by_date_range(points, 7, now=NOW)
        assert [p.name for p in kept] == [_days_ago(1), _days_ago(6), _days_ago(3)]

    def test_future_dates_are_kept(self):
        points = [DataPoint(name=(NOW + timedelta(days=3)).strftime("%Y-%m-%d"))]
        assert len(filter_by_date_range(points, 7, now=NOW)) == 1

    @pytest.mark.parametrize("days", [0, -7, 7.5, "30", True])
    def test_invalid_days_raise(self, days):
        with pytest.raises(ValueError):
            window_start(days, NOW)


class TestAggregateMetrics:
    def test_sums_and_derived_ratios(self):
        points = [
            DataPoint(name="d1", cost=10, impressions=100, clicks=5, conversions=1, value=50),
            DataPoint(name="d2", cost=20, impressions=200, clicks=10, conversions=2, value=100),
        ]
        agg = aggregate_metrics(points)
        assert agg.cost == 30
        assert agg.impressions == 300
        assert agg.clicks == 15
        assert agg.conversions == 3
        assert agg.value == 150
        assert agg.ctr == pytest.approx(0.05)
        assert agg.cvr == pytest.approx(0.2)
        assert agg.cpa == pytest.approx(10)
        assert agg.roas == pytest.approx(5)
        assert agg.aov == pytest.approx(50)

    def test_ratios_ignore_per_row_values(self):
        # Row-level ratios are not averaged; they are recomputed from sums.
        points = [
            DataPoint(name="d1", impressions=100, clicks=1, ctr=0.9),
            DataPoint(name="d2", impressions=900, clicks=99, ctr=0.9),
        ]
        assert aggregate_metrics(points).ctr == pytest.approx(0.1)

    def test_to_dict_lists_every_metric_in_card_order(self):
        agg = aggregate_metrics([DataPoint(name="d1", cost=4, value=8)])
        out = agg.to_dict()
        assert list(out) == list(METRICS)
        assert out["roas"] == 2

    def test_empty_window_gives_non_finite_ratios(self):
        agg = aggregate_metrics([])
        assert agg.cost == 0
        for m in DERIVED_METRICS:
            assert not math.isfinite(agg.get(m)), m

    def test_zero_denominator_with_positive_numerator_is_inf(self):
        agg = aggregate_metrics([DataPoint(name="d1", cost=10, value=0, conversions=0)])
        assert agg.cpa == math.inf
        assert agg.roas == 0
        assert math.isnan(agg.aov)
