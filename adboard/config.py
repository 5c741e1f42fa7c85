"""Load and validate config.yaml."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

import yaml

DEFAULT_SHEET_URL = (
    "https://docs.google.com/spreadsheets/d/e/"
    "2PACX-1vT4HJd_4HWo3oS9SeuqZHISLpT-_rMmDE6_YwYGWLCsdbe-40YDUVQ2YUhNF0Ym6WKWlAAWg8RtoF0a"
    "/pub?output=csv"
)


class ConfigError(ValueError):
    """Raised when config.yaml holds values the dashboard cannot use."""


@dataclass
class SheetConfig:
    url: str = DEFAULT_SHEET_URL
    timeout_seconds: float = 30.0
    max_retries: int = 0  # single request, like the published-sheet fetch it replaces
    backoff_seconds: float = 1.0


@dataclass
class DashboardConfig:
    default_date_range: int = 30
    date_ranges: List[int] = field(default_factory=lambda: [7, 30, 90])
    max_selected_metrics: int = 2


@dataclass
class LoggingConfig:
    level: str = "INFO"


@dataclass
class AppConfig:
    sheet: SheetConfig = field(default_factory=SheetConfig)
    dashboard: DashboardConfig = field(default_factory=DashboardConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _validate(cfg: AppConfig) -> None:
    if not cfg.sheet.url.strip():
        raise ConfigError("sheet.url is empty. Set it in config.yaml or ADBOARD_SHEET_URL.")
    if cfg.sheet.max_retries < 0:
        raise ConfigError("sheet.max_retries must be >= 0.")
    if not cfg.dashboard.date_ranges:
        raise ConfigError("dashboard.date_ranges must list at least one window.")
    if any(int(d) <= 0 for d in cfg.dashboard.date_ranges):
        raise ConfigError("dashboard.date_ranges must be positive day counts.")
    if cfg.dashboard.default_date_range not in cfg.dashboard.date_ranges:
        raise ConfigError(
            f"dashboard.default_date_range={cfg.dashboard.default_date_range} "
            f"is not one of {cfg.dashboard.date_ranges}."
        )
    if cfg.dashboard.max_selected_metrics < 1:
        raise ConfigError("dashboard.max_selected_metrics must be >= 1.")


def configure_logging(level: str = "INFO") -> None:
    """Route library logs to stderr with timestamps; safe to call repeatedly."""
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def load_config(path: str | Path = "config.yaml") -> AppConfig:
    """Load config from YAML file, falling back to defaults.

    ``ADBOARD_SHEET_URL`` in the environment overrides ``sheet.url``.
    """
    p = Path(path)
    raw: dict = {}
    if p.exists():
        with open(p, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

    cfg = AppConfig(
        sheet=SheetConfig(**raw.get("sheet", {})),
        dashboard=DashboardConfig(**raw.get("dashboard", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
    )

    env_url = os.environ.get("ADBOARD_SHEET_URL", "").strip()
    if env_url:
        cfg.sheet.url = env_url

    _validate(cfg)
    return cfg
