"""Parse published-sheet CSV text into DataPoint records."""

from __future__ import annotations

import csv
import logging
import math
from typing import Any, Iterable, List, Optional, Sequence

import pandas as pd

from adboard.schema import METRICS, DataPoint

logger = logging.getLogger(__name__)

# Sheet layout: date, then the ten metrics in schema order.
SHEET_COLUMNS = ("name",) + METRICS

_NON_NUMERIC_WORDS = {"nan", "inf", "infinity", "-inf", "-infinity", "+inf", "+infinity"}


def _to_number(text: str) -> float:
    """Strict numeric conversion; anything that is not a plain number is NaN."""
    s = text.strip()
    if not s:
        return 0.0
    if s.lower() in _NON_NUMERIC_WORDS:
        return math.nan
    try:
        return float(s)
    except ValueError:
        return math.nan


def parse_number(cell: Optional[Any]) -> float:
    """Clean a formatted sheet cell and return its numeric value.

    ``"$1,234.50"`` -> 1234.5, ``"12.34%"`` -> 0.1234, ``""`` -> 0.0.
    Non-numeric text becomes 0.0, except inside a percentage where it stays
    NaN so the whole row is rejected by :func:`is_valid_datapoint`.
    """
    if cell is None:
        return 0.0
    raw = str(cell)
    if not raw.strip():
        return 0.0

    clean = raw.strip().replace('"', "")

    if "%" in clean:
        return _to_number(clean.replace("%", "").replace(",", "")) / 100

    if clean.startswith("$"):
        clean = clean[1:]

    number = _to_number(clean.replace(",", ""))
    return 0.0 if math.isnan(number) else number


def split_rows(csv_text: str) -> List[List[str]]:
    """Split CSV text into rows of cells, dropping rows with fewer than two cells.

    Quoted cells keep their embedded commas, so ``"$1,234.50"`` stays one cell.
    Each line is tokenized on its own, so a stray quote only spoils its own row.
    """
    rows: List[List[str]] = []
    for line in csv_text.splitlines():
        try:
            cells = next(csv.reader([line]), [])
        except csv.Error:
            logger.debug("Skipping unreadable line: %r", line)
            continue
        if len(cells) > 1:
            rows.append(cells)
    return rows


def map_row_to_datapoint(row: Sequence[str]) -> DataPoint:
    """Map one sheet row positionally onto the DataPoint schema."""

    def cell(i: int) -> Optional[str]:
        return row[i] if i < len(row) else None

    name = (cell(0) or "").strip()
    values = {metric: parse_number(cell(i + 1)) for i, metric in enumerate(METRICS)}
    return DataPoint(name=name, **values)


def is_valid_datapoint(point: DataPoint) -> bool:
    return bool(point.name) and point.is_finite()


def parse_csv_text(csv_text: str) -> List[DataPoint]:
    """Parse the full sheet export. The first surviving row is the header."""
    rows = split_rows(csv_text)
    if not rows:
        return []

    parsed = [map_row_to_datapoint(r) for r in rows[1:]]
    valid = [p for p in parsed if is_valid_datapoint(p)]

    dropped = len(parsed) - len(valid)
    if dropped:
        logger.debug("Dropped %d malformed row(s) out of %d", dropped, len(parsed))
    return valid


def datapoints_to_dataframe(points: Iterable[DataPoint]) -> pd.DataFrame:
    data = [p.to_dict() for p in points]
    return pd.DataFrame(data, columns=list(SHEET_COLUMNS))
