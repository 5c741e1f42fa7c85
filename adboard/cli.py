"""CLI entry point for the ad performance dashboard."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple

import click

from adboard import __version__
from adboard.config import AppConfig, ConfigError, configure_logging, load_config
from adboard.dashboard import build_dashboard
from adboard.fetcher import SheetFetchError, fetch_csv_text
from adboard.io_csv import read_sheet_csv, write_datapoints_csv, write_report
from adboard.parsing import parse_csv_text
from adboard.report import format_report
from adboard.schema import METRICS, DataPoint
from adboard.selection import MetricSelection, UnknownMetricError, validate_date_range


def _load_cfg(config_path: str) -> AppConfig:
    try:
        cfg = load_config(config_path)
    except (ConfigError, TypeError) as exc:
        raise click.ClickException(f"Invalid config {config_path}: {exc}")
    configure_logging(cfg.logging.level)
    return cfg


def _load_points(cfg: AppConfig, url: Optional[str], input_path: Optional[str]) -> Tuple[List[DataPoint], str]:
    """Return (points, source label). Fetch errors abort the command."""
    if input_path:
        return read_sheet_csv(input_path), input_path

    source = url or cfg.sheet.url
    try:
        text = fetch_csv_text(
            source,
            timeout=cfg.sheet.timeout_seconds,
            max_retries=cfg.sheet.max_retries,
            backoff_seconds=cfg.sheet.backoff_seconds,
        )
    except SheetFetchError as exc:
        raise click.ClickException(f"Could not fetch sheet: {exc}")
    return parse_csv_text(text), source


def _resolve_days(cfg: AppConfig, days: Optional[int]) -> int:
    if days is None:
        return cfg.dashboard.default_date_range
    try:
        return validate_date_range(days, cfg.dashboard.date_ranges)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--days")


def _resolve_selection(cfg: AppConfig, metrics: Tuple[str, ...]) -> List[str]:
    try:
        return MetricSelection(metrics, cfg.dashboard.max_selected_metrics).metrics
    except UnknownMetricError as exc:
        raise click.BadParameter(str(exc), param_hint="--metric")


_source_options = [
    click.option("--url", default=None, help="Published CSV URL (defaults to config)"),
    click.option("--input", "input_path", default=None, help="Local CSV export instead of the URL"),
    click.option("--days", type=int, default=None, help="Trailing window in days (7, 30 or 90)"),
    click.option("--config", "config_path", default="config.yaml", help="Config file path"),
]


def _with_source_options(fn):
    for opt in reversed(_source_options):
        fn = opt(fn)
    return fn


@click.group()
@click.version_option(version=__version__, prog_name="adboard")
def cli():
    """Ad Performance Dashboard — summarize a published metrics sheet."""
    pass


@cli.command()
@_with_source_options
@click.option(
    "--metric",
    "metrics",
    multiple=True,
    type=click.Choice(list(METRICS)),
    help="Metric clicks to apply, in order (max two stay selected)",
)
def summary(url, input_path, days, config_path, metrics):
    """Print the summary cards for the selected window."""
    cfg = _load_cfg(config_path)
    window = _resolve_days(cfg, days)
    selected = _resolve_selection(cfg, metrics)
    points, source = _load_points(cfg, url, input_path)

    view = build_dashboard(points, window, selected)

    click.echo(f"Last {window} days · {len(view.points)} of {len(points)} rows · {source}")
    width = max(len(c.title) for c in view.cards)
    for card in view.cards:
        marker = "*" if card.is_selected else " "
        click.echo(f" {marker} {card.title.ljust(width)}  {card.value}")
    click.echo(view.chart_title)


@cli.command()
@_with_source_options
@click.option("--out", "output_dir", default="output", help="Output directory")
def export(url, input_path, days, config_path, output_dir):
    """Write the windowed rows (data.csv) and a Markdown summary (report.md)."""
    cfg = _load_cfg(config_path)
    window = _resolve_days(cfg, days)
    points, source = _load_points(cfg, url, input_path)

    view = build_dashboard(points, window, [])

    out = Path(output_dir)
    data_path = write_datapoints_csv(view.points, out / "data.csv")
    report_path = write_report(format_report(view, source), out / "report.md")

    click.echo(f"Wrote {len(view.points)} rows to {data_path}")
    click.echo(f"Wrote summary to {report_path}")


if __name__ == "__main__":
    cli()
