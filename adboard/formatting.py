"""Per-metric display configuration: titles, colours and value formatters."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Dict

NOT_AVAILABLE = "n/a"


def format_money(value: float) -> str:
    return f"{value:,.2f}"


def format_count(value: float) -> str:
    # Grouped, at most three decimals, no trailing zeros.
    text = f"{value:,.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def format_percent(value: float) -> str:
    return f"{value * 100:.2f}%"


def format_multiple(value: float) -> str:
    return f"{value:.2f}x"


@dataclass(frozen=True)
class MetricConfig:
    color: str
    title: str
    format: Callable[[float], str]


METRIC_CONFIG: Dict[str, MetricConfig] = {
    "cost": MetricConfig("#3b82f6", "Cost", format_money),
    "impressions": MetricConfig("#10b981", "Impressions", format_count),
    "clicks": MetricConfig("#f59e0b", "Clicks", format_count),
    "ctr": MetricConfig("#6366f1", "CTR", format_percent),
    "conversions": MetricConfig("#dc2626", "Conversions", format_count),
    "value": MetricConfig("#059669", "Value", format_money),
    "cvr": MetricConfig("#7c3aed", "CVR", format_percent),
    "cpa": MetricConfig("#db2777", "CPA", format_money),
    "roas": MetricConfig("#2563eb", "ROAS", format_multiple),
    "aov": MetricConfig("#9333ea", "AOV", format_money),
}


def metric_title(metric: str) -> str:
    return METRIC_CONFIG[metric].title


def format_metric(metric: str, value: float) -> str:
    """Format *value* the way the card for *metric* displays it."""
    if value is None or not math.isfinite(value):
        return NOT_AVAILABLE
    return METRIC_CONFIG[metric].format(value)
