"""Date-window filtering and metric aggregation over DataPoint records."""

from __future__ import annotations

import warnings
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional

import pandas as pd

from adboard.schema import RAW_METRICS, AggregateMetrics, DataPoint


def parse_date_label(label: str) -> Optional[date]:
    """Return the calendar date a sheet label denotes, or None if it is not a date."""
    # Day-first labels ("15/01/2024") make pandas warn on every call.
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", UserWarning)
        ts = pd.to_datetime(label, errors="coerce")
    if pd.isna(ts):
        return None
    return ts.date()


def window_start(days: int, now: Optional[datetime] = None) -> date:
    """First calendar day of the trailing *days* window ending at *now*."""
    if isinstance(days, bool) or not isinstance(days, int) or days <= 0:
        raise ValueError(f"days must be a positive integer, got {days!r}")
    now = now or datetime.now()
    return (now - timedelta(days=days)).date()


def filter_by_date_range(
    points: Iterable[DataPoint],
    days: int,
    now: Optional[datetime] = None,
) -> List[DataPoint]:
    """Keep records dated on or after ``now - days``.

    Records whose name does not parse as a date are excluded. Input order
    is preserved.
    """
    cutoff = window_start(days, now)
    kept: List[DataPoint] = []
    for p in points:
        d = parse_date_label(p.name)
        if d is not None and d >= cutoff:
            kept.append(p)
    return kept


def aggregate_metrics(points: Iterable[DataPoint]) -> AggregateMetrics:
    """Sum the raw counters and derive CTR, CVR, CPA, ROAS and AOV from the sums.

    Ratios are never averaged per row. A zero denominator (e.g. an empty
    window) gives a non-finite ratio instead of raising.
    """
    agg = AggregateMetrics()
    for p in points:
        for m in RAW_METRICS:
            setattr(agg, m, agg.get(m) + p.get(m))
    agg.recompute_ratios()
    return agg
