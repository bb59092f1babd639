"""Download schedule pages."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Dict, Optional
from urllib.parse import quote

import requests

from .config import AppConfig

LOGGER = logging.getLogger(__name__)

REQUEST_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
    ),
    "Accept-Language": "en-US,en;q=0.9",
}
HTML_ACCEPT_HEADER = {"Accept": "text/html,application/xhtml+xml"}


class FetchError(RuntimeError):
    """The schedule page could not be retrieved."""

    def __init__(self, message: str, *, url: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


@dataclass(frozen=True)
class FetchedDocument:
    html: str
    url: str


def build_schedule_url(event_id: str, club_id: str, *, base_url: str) -> str:
    event = quote(str(event_id).strip(), safe="")
    club = quote(str(club_id).strip(), safe="")
    return f"{base_url.rstrip('/')}/{event}/schedules?club={club}"


def _http_get(
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    timeout: float = 30.0,
    retries: int = 1,
    delay_seconds: float = 2.0,
) -> requests.Response:
    merged_headers = dict(REQUEST_HEADERS)
    if headers:
        merged_headers.update(headers)
    for attempt in range(retries):
        try:
            response = requests.get(url, timeout=timeout, headers=merged_headers)
            response.raise_for_status()
            return response
        except requests.RequestException as exc:
            if attempt == retries - 1:
                raise
            backoff = delay_seconds * (2 ** attempt)
            LOGGER.warning("Request to %s failed (%s), retrying in %.1fs", url, exc, backoff)
            time.sleep(backoff)
    raise FetchError("No request attempted.", url=url)


def fetch_html(
    url: str,
    *,
    timeout: float = 30.0,
    retries: int = 1,
    delay_seconds: float = 2.0,
) -> str:
    """Return the body of ``url``; every transport problem becomes a ``FetchError``."""

    try:
        response = _http_get(
            url,
            headers=HTML_ACCEPT_HEADER,
            timeout=timeout,
            retries=retries,
            delay_seconds=delay_seconds,
        )
    except requests.HTTPError as exc:
        status = exc.response.status_code if exc.response is not None else None
        LOGGER.error("Schedule request to %s returned HTTP %s", url, status)
        raise FetchError(f"Upstream returned HTTP {status}", url=url, status_code=status) from exc
    except requests.RequestException as exc:
        LOGGER.error("Schedule request to %s failed: %s", url, exc)
        raise FetchError(f"Could not reach upstream: {exc}", url=url) from exc

    try:
        return response.text
    except (requests.RequestException, UnicodeDecodeError) as exc:
        raise FetchError(f"Could not read upstream body: {exc}", url=url) from exc


def fetch_schedule(event_id: str, club_id: str, config: AppConfig) -> FetchedDocument:
    url = build_schedule_url(event_id, club_id, base_url=config.source_base_url)
    LOGGER.info("Fetching schedule %s", url)
    html = fetch_html(url, timeout=config.http_timeout, retries=config.http_retries)
    LOGGER.debug("Fetched %s characters from %s", len(html), url)
    return FetchedDocument(html=html, url=url)
