"""Map dataset + user selection onto summary cards and chart parameters."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Sequence

import pandas as pd
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from adboard.formatting import METRIC_CONFIG, format_metric, metric_title
from adboard.metrics import aggregate_metrics, filter_by_date_range
from adboard.parsing import datapoints_to_dataframe
from adboard.schema import AggregateMetrics, DataPoint

EMPTY_CHART_TITLE = "Select up to 2 metrics"

# Axis colours are fixed by slot, independent of the metric's card colour.
AXIS_SLOTS = (
    {"axis": "left", "color": "#3b82f6"},
    {"axis": "right", "color": "#7c3aed"},
)

# Plotly d3-format equivalents of the card formatters.
_TICK_FORMATS: Dict[str, Dict[str, str]] = {
    "cost": {"tickformat": ",.2f"},
    "impressions": {"tickformat": ","},
    "clicks": {"tickformat": ","},
    "ctr": {"tickformat": ".2%"},
    "conversions": {"tickformat": ","},
    "value": {"tickformat": ",.2f"},
    "cvr": {"tickformat": ".2%"},
    "cpa": {"tickformat": ",.2f"},
    "roas": {"tickformat": ".2f", "ticksuffix": "x"},
    "aov": {"tickformat": ",.2f"},
}


@dataclass
class StatCard:
    metric: str
    title: str
    value: str
    icon: str
    is_selected: bool = False
    is_second_selected: bool = False


@dataclass
class ChartSeries:
    metric: str
    title: str
    axis: str
    color: str


@dataclass
class DashboardView:
    date_range: int
    selected: List[str]
    points: List[DataPoint]
    aggregate: AggregateMetrics
    cards: List[StatCard] = field(default_factory=list)
    chart_title: str = EMPTY_CHART_TITLE
    series: List[ChartSeries] = field(default_factory=list)

    @property
    def frame(self) -> pd.DataFrame:
        return datapoints_to_dataframe(self.points)


def build_cards(aggregate: AggregateMetrics, selected: Sequence[str]) -> List[StatCard]:
    cards: List[StatCard] = []
    for metric, value in aggregate.to_dict().items():
        idx = selected.index(metric) if metric in selected else -1
        cards.append(
            StatCard(
                metric=metric,
                title=metric_title(metric),
                value=format_metric(metric, value),
                icon=f"fa-{metric}",
                is_selected=idx != -1,
                is_second_selected=idx == 1,
            )
        )
    return cards


def chart_title(selected: Sequence[str]) -> str:
    if not selected:
        return EMPTY_CHART_TITLE
    return " vs ".join(metric_title(m) for m in selected) + " Trend"


def build_chart_series(selected: Sequence[str]) -> List[ChartSeries]:
    return [
        ChartSeries(metric=m, title=metric_title(m), axis=slot["axis"], color=slot["color"])
        for m, slot in zip(selected, AXIS_SLOTS)
    ]


def build_dashboard(
    points: Sequence[DataPoint],
    date_range: int,
    selected: Sequence[str],
    now: Optional[datetime] = None,
) -> DashboardView:
    """Re-derive everything the page shows from the loaded dataset and UI state."""
    filtered = filter_by_date_range(points, date_range, now)
    agg = aggregate_metrics(filtered)
    selected = list(selected)
    return DashboardView(
        date_range=date_range,
        selected=selected,
        points=filtered,
        aggregate=agg,
        cards=build_cards(agg, selected),
        chart_title=chart_title(selected),
        series=build_chart_series(selected),
    )


def build_figure(view: DashboardView) -> go.Figure:
    """Dual-axis line chart: first selection on the left axis, second on the right."""
    frame = view.frame
    fig = make_subplots(specs=[[{"secondary_y": True}]])

    for s in view.series:
        secondary = s.axis == "right"
        fmt = _TICK_FORMATS[s.metric]
        hover_value = "%{y:" + fmt["tickformat"] + "}" + fmt.get("ticksuffix", "")
        fig.add_trace(
            go.Scatter(
                x=frame["name"],
                y=frame[s.metric],
                name=s.title,
                mode="lines+markers",
                line=dict(color=s.color, width=2, shape="spline"),
                marker=dict(size=6, color=s.color),
                hovertemplate=f"<b>%{{x}}</b><br>{s.title}: {hover_value}<extra></extra>",
            ),
            secondary_y=secondary,
        )
        fig.update_yaxes(
            color=s.color,
            secondary_y=secondary,
            hoverformat=fmt["tickformat"],
            **fmt,
        )

    fig.update_xaxes(tickangle=-75, type="category")
    fig.update_layout(
        title_text=view.chart_title,
        height=480,
        margin=dict(t=60, r=60, l=20, b=80),
        showlegend=bool(view.series),
    )
    if len(view.series) < 2:
        fig.update_yaxes(visible=False, secondary_y=True)
    if not view.series:
        fig.update_yaxes(visible=False, secondary_y=False)
    return fig


def card_color(metric: str) -> str:
    return METRIC_CONFIG[metric].color
