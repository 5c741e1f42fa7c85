"""Render a Markdown summary of a dashboard view."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from jinja2 import Template

from adboard.dashboard import DashboardView

_REPORT_TEMPLATE_PATH = Path(__file__).parent / "templates" / "report.md.j2"


def _load_report_template() -> Template:
    return Template(_REPORT_TEMPLATE_PATH.read_text(encoding="utf-8"))


def format_report(view: DashboardView, source: str) -> str:
    names = [p.name for p in view.points]
    return _load_report_template().render(
        date_range=view.date_range,
        generated_at=datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC"),
        source=source,
        day_count=len(names),
        first_day=names[0] if names else "",
        last_day=names[-1] if names else "",
        cards=view.cards,
    )
