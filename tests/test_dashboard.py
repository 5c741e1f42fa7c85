"""Tests for metric formatting and dashboard view assembly."""

from __future__ import annotations

import math
from datetime import datetime, timedelta

import pytest

from adboard.dashboard import (
    EMPTY_CHART_TITLE,
    build_cards,
    build_chart_series,
    build_dashboard,
    build_figure,
    chart_title,
)
from adboard.formatting import NOT_AVAILABLE, format_count, format_metric
from adboard.schema import METRICS, AggregateMetrics, DataPoint

NOW = datetime(2026, 10, 19, 9, 0)


def _point(days_ago: int, **kw) -> DataPoint:
    return DataPoint(name=(NOW - timedelta(days=days_ago)).strftime("%Y-%m-%d"), **kw)


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------


class TestFormatMetric:
    @pytest.mark.parametrize(
        "metric,value,expected",
        [
            ("cost", 1234.5, "1,234.50"),
            ("value", 0, "0.00"),
            ("impressions", 1234567, "1,234,567"),
            ("clicks", 12.5, "12.5"),
            ("conversions", 2.0004, "2"),
            ("ctr", 0.0512, "5.12%"),
            ("cvr", 0.2, "20.00%"),
            ("cpa", 10, "10.00"),
            ("roas", 5, "5.00x"),
            ("aov", 49.999, "50.00"),
        ],
    )
    def test_formats(self, metric, value, expected):
        assert format_metric(metric, value) == expected

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
    def test_non_finite_is_not_available(self, value):
        assert format_metric("ctr", value) == NOT_AVAILABLE

    def test_count_zero(self):
        assert format_count(0) == "0"


# ---------------------------------------------------------------------------
# Cards + chart parameters
# ---------------------------------------------------------------------------


class TestCards:
    def test_one_card_per_metric_in_order(self):
        cards = build_cards(AggregateMetrics(), [])
        assert [c.metric for c in cards] == list(METRICS)
        assert cards[0].icon == "fa-cost"

    def test_selection_flags(self):
        cards = {c.metric: c for c in build_cards(AggregateMetrics(), ["roas", "cost"])}
        assert cards["roas"].is_selected and not cards["roas"].is_second_selected
        assert cards["cost"].is_selected and cards["cost"].is_second_selected
        assert not cards["ctr"].is_selected

    def test_empty_aggregate_shows_not_available_for_ratios(self):
        cards = {c.metric: c for c in build_cards(AggregateMetrics(), [])}
        assert cards["cost"].value == "0.00"
        assert cards["ctr"].value == NOT_AVAILABLE


class TestChart:
    def test_title_without_selection(self):
        assert chart_title([]) == EMPTY_CHART_TITLE

    def test_title_with_two_metrics(self):
        assert chart_title(["ctr", "roas"]) == "CTR vs ROAS Trend"

    def test_series_axes_and_colors(self):
        series = build_chart_series(["cost", "cvr"])
        assert [(s.axis, s.color) for s in series] == [
            ("left", "#3b82f6"),
            ("right", "#7c3aed"),
        ]
        assert series[1].title == "CVR"


class TestBuildDashboard:
    def _points(self):
        return [
            _point(2, cost=10, impressions=100, clicks=5, conversions=1, value=50),
            _point(6, cost=20, impressions=200, clicks=10, conversions=2, value=100),
            _point(45, cost=1000, impressions=1, clicks=1, conversions=1, value=1),
        ]

    def test_window_drives_aggregate(self):
        view = build_dashboard(self._points(), 7, ["cost"], now=NOW)
        assert len(view.points) == 2
        assert view.aggregate.cost == 30
        cards = {c.metric: c for c in view.cards}
        assert cards["roas"].value == "5.00x"
        assert view.chart_title == "Cost Trend"

    def test_wider_window_includes_older_rows(self):
        view = build_dashboard(self._points(), 90, [], now=NOW)
        assert len(view.points) == 3
        assert view.aggregate.cost == 1030

    def test_frame_matches_points(self):
        view = build_dashboard(self._points(), 30, [], now=NOW)
        assert list(view.frame["cost"]) == [10, 20]

    def test_figure_traces_follow_selection(self):
        view = build_dashboard(self._points(), 30, ["cost", "ctr"], now=NOW)
        fig = build_figure(view)
        assert [t.name for t in fig.data] == ["Cost", "CTR"]
        assert fig.data[0].line.color == "#3b82f6"
        assert fig.data[1].line.color == "#7c3aed"
        assert fig.layout.title.text == "Cost vs CTR Trend"

    def test_hover_uses_metric_formats(self):
        view = build_dashboard(self._points(), 30, ["cost", "ctr"], now=NOW)
        fig = build_figure(view)
        assert fig.layout.yaxis.hoverformat == ",.2f"
        assert fig.layout.yaxis2.hoverformat == ".2%"
        assert "%{y:.2%}" in fig.data[1].hovertemplate

    def test_roas_hover_keeps_suffix(self):
        view = build_dashboard(self._points(), 30, ["roas"], now=NOW)
        fig = build_figure(view)
        assert "%{y:.2f}x" in fig.data[0].hovertemplate

    def test_figure_without_selection_has_no_traces(self):
        view = build_dashboard([], 30, [], now=NOW)
        fig = build_figure(view)
        assert len(fig.data) == 0
        assert fig.layout.title.text == EMPTY_CHART_TITLE
