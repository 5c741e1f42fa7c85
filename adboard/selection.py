"""Metric selection and date-range choice for the dashboard view."""

from __future__ import annotations

from typing import List, Optional, Sequence

from adboard.schema import METRICS, MetricType

DEFAULT_DATE_RANGES = (7, 30, 90)


class UnknownMetricError(ValueError):
    """Raised when a metric identifier is not one of the dashboard metrics."""


def toggle_metric(
    selected: Sequence[str],
    metric: MetricType,
    max_selected: int = 2,
) -> List[str]:
    """Return the selection after clicking *metric*.

    A selected metric is removed. Otherwise it is appended, evicting the
    oldest selection first when *max_selected* slots are already taken.
    """
    if metric not in METRICS:
        raise UnknownMetricError(f"Unknown metric: {metric!r}")

    current = list(selected)
    if metric in current:
        return [m for m in current if m != metric]
    if len(current) >= max_selected:
        current = current[len(current) - max_selected + 1:]
    return current + [metric]


class MetricSelection:
    """Ordered selection of up to *max_selected* metrics (oldest first)."""

    def __init__(self, metrics: Optional[Sequence[str]] = None, max_selected: int = 2):
        self.max_selected = max_selected
        self._metrics: List[str] = []
        for m in metrics or []:
            self.toggle(m)

    @property
    def metrics(self) -> List[str]:
        return list(self._metrics)

    def toggle(self, metric: str) -> List[str]:
        self._metrics = toggle_metric(self._metrics, metric, self.max_selected)
        return self.metrics

    def index_of(self, metric: str) -> int:
        """Position of *metric* in the selection, or -1."""
        try:
            return self._metrics.index(metric)
        except ValueError:
            return -1

    def is_selected(self, metric: str) -> bool:
        return metric in self._metrics

    def clear(self) -> None:
        self._metrics = []

    def __len__(self) -> int:
        return len(self._metrics)

    def __iter__(self):
        return iter(list(self._metrics))

    def __repr__(self) -> str:
        return f"MetricSelection({self._metrics!r}, max_selected={self.max_selected})"


def validate_date_range(days, allowed: Sequence[int] = DEFAULT_DATE_RANGES) -> int:
    """Coerce *days* ("7", 7, ...) to an int and check it is an offered window."""
    try:
        value = int(days)
    except (TypeError, ValueError):
        raise ValueError(f"Date range must be one of {list(allowed)}, got {days!r}")
    if value not in allowed:
        raise ValueError(f"Date range must be one of {list(allowed)}, got {days!r}")
    return value
