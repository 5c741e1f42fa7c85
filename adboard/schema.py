"""Internal schema for daily ad metrics and their aggregates."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Literal, Tuple

MetricType = Literal[
    "cost",
    "impressions",
    "clicks",
    "ctr",
    "conversions",
    "value",
    "cvr",
    "cpa",
    "roas",
    "aov",
]

# Column order of the published sheet (after the date column) and card order.
METRICS: Tuple[str, ...] = (
    "cost",
    "impressions",
    "clicks",
    "ctr",
    "conversions",
    "value",
    "cvr",
    "cpa",
    "roas",
    "aov",
)

RAW_METRICS: Tuple[str, ...] = ("cost", "impressions", "clicks", "conversions", "value")
DERIVED_METRICS: Tuple[str, ...] = ("ctr", "cvr", "cpa", "roas", "aov")


@dataclass
class DataPoint:
    name: str

    cost: float = 0.0
    impressions: float = 0.0
    clicks: float = 0.0
    ctr: float = 0.0
    conversions: float = 0.0
    value: float = 0.0
    cvr: float = 0.0
    cpa: float = 0.0
    roas: float = 0.0
    aov: float = 0.0

    def get(self, metric: str) -> float:
        return getattr(self, metric)

    def is_finite(self) -> bool:
        return all(math.isfinite(self.get(m)) for m in METRICS)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"name": self.name}
        for m in METRICS:
            out[m] = self.get(m)
        return out


def _ratio(numerator: float, denominator: float) -> float:
    # 0/0 -> nan, x/0 -> +/-inf; callers decide how to display non-finite values.
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator)
    return numerator / denominator


@dataclass
class AggregateMetrics:
    """Summed counters over a window, with ratios recomputed from the sums."""

    cost: float = 0.0
    impressions: float = 0.0
    clicks: float = 0.0
    conversions: float = 0.0
    value: float = 0.0

    ctr: float = math.nan
    cvr: float = math.nan
    cpa: float = math.nan
    roas: float = math.nan
    aov: float = math.nan

    def recompute_ratios(self) -> None:
        self.ctr = _ratio(self.clicks, self.impressions)
        self.cvr = _ratio(self.conversions, self.clicks)
        self.cpa = _ratio(self.cost, self.conversions)
        self.roas = _ratio(self.value, self.cost)
        self.aov = _ratio(self.value, self.conversions)

    def get(self, metric: str) -> float:
        return getattr(self, metric)

    def to_dict(self) -> Dict[str, float]:
        return {m: self.get(m) for m in METRICS}
