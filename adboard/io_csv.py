"""Local CSV read-write helpers."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

from adboard.parsing import datapoints_to_dataframe, parse_csv_text
from adboard.schema import DataPoint


def read_sheet_csv(path: str | Path) -> List[DataPoint]:
    """Parse a locally saved copy of the sheet export."""
    text = Path(path).read_text(encoding="utf-8-sig")
    return parse_csv_text(text)


def write_datapoints_csv(points: Iterable[DataPoint], path: str | Path) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    df = datapoints_to_dataframe(points)
    df.to_csv(p, index=False, encoding="utf-8")
    return p


def write_report(text: str, path: str | Path) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding="utf-8")
    return p
