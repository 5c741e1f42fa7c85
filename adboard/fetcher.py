"""Fetch the published sheet CSV export over HTTP."""

from __future__ import annotations

import logging
import time
from typing import List, Optional

import requests

from adboard.config import SheetConfig
from adboard.parsing import parse_csv_text
from adboard.schema import DataPoint

logger = logging.getLogger(__name__)


class SheetFetchError(RuntimeError):
    """Raised when the CSV export cannot be retrieved."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def _is_retryable(exc: SheetFetchError) -> bool:
    # Connection problems and 5xx/429 are transient; 4xx means a bad URL.
    if exc.status_code is None:
        return True
    return exc.status_code == 429 or exc.status_code >= 500


def _get_once(session, url: str, timeout: float) -> str:
    try:
        resp = session.get(url, timeout=timeout)
    except requests.RequestException as exc:
        raise SheetFetchError(f"Request to sheet failed: {exc}") from exc

    if not resp.ok:
        raise SheetFetchError(
            f"HTTP error! status: {resp.status_code}", status_code=resp.status_code
        )
    return resp.text


def fetch_csv_text(
    url: str,
    timeout: float = 30.0,
    max_retries: int = 0,
    backoff_seconds: float = 1.0,
    session: Optional[requests.Session] = None,
) -> str:
    """GET *url* and return the body text. Raises SheetFetchError on failure."""
    if session is None:
        with requests.Session() as owned:
            return _fetch_with_retries(owned, url, timeout, max_retries, backoff_seconds)
    return _fetch_with_retries(session, url, timeout, max_retries, backoff_seconds)


def _fetch_with_retries(
    session, url: str, timeout: float, max_retries: int, backoff_seconds: float
) -> str:
    attempt = 0
    while True:
        try:
            text = _get_once(session, url, timeout)
            logger.info("Fetched %d bytes of CSV from sheet", len(text))
            return text
        except SheetFetchError as exc:
            if attempt >= max_retries or not _is_retryable(exc):
                raise
            sleep_s = backoff_seconds * (2**attempt)
            logger.warning(
                "Sheet fetch failed (%s); retry %d/%d in %.1fs",
                exc, attempt + 1, max_retries, sleep_s,
            )
            time.sleep(sleep_s)
            attempt += 1


def load_datapoints(
    cfg: SheetConfig,
    session: Optional[requests.Session] = None,
) -> List[DataPoint]:
    """Fetch and parse the sheet. Failures are logged and yield an empty list."""
    try:
        text = fetch_csv_text(
            cfg.url,
            timeout=cfg.timeout_seconds,
            max_retries=cfg.max_retries,
            backoff_seconds=cfg.backoff_seconds,
            session=session,
        )
    except SheetFetchError as exc:
        logger.error("Error fetching data: %s", exc)
        return []
    points = parse_csv_text(text)
    logger.info("Parsed %d data point(s)", len(points))
    return points
