"""External score feed client.

This module downloads the Time-Mode and Twitch-Plays spreadsheets and
flattens their rows into lowercase field mappings. Feed failures are
logged and degrade to an empty table so catalog builds never block
on spreadsheet availability.
"""

from __future__ import annotations

from typing import Any, Mapping

import requests

from core.constants import LEGACY_FEED_FIELD_PREFIX, LEGACY_FEED_VALUE_KEY
from core.errors import CatalogFeedError
from core.logging_config import get_logger
from core.types import FeedTable

_LOGGER = get_logger(__name__)

TIME_MODE_FEED = "time_mode"
TWITCH_PLAYS_FEED = "twitch_plays"


def fetch_feed_table(
    feed_name: str,
    url: str,
    timeout_seconds: float,
    session: requests.Session | None = None,
) -> FeedTable:
    """Fetch one feed, substituting an empty table on any failure.

    Args:
        feed_name: Feed identifier used in logs.
        url: Feed URL returning JSON.
        timeout_seconds: Request timeout.
        session: Optional HTTP session; a new one is used when omitted.

    Returns:
        Feed table, empty when the feed is unavailable.
    """
    try:
        payload = _download_json(url, timeout_seconds, session)
        rows = extract_feed_rows(payload)
    except CatalogFeedError as error:
        _LOGGER.warning("feed_fetch_failed", feed=feed_name, url=url, error=str(error))
        return FeedTable(name=feed_name)
    _LOGGER.info("feed_fetched", feed=feed_name, row_count=len(rows))
    return FeedTable(name=feed_name, rows=rows)


def extract_feed_rows(payload: object) -> tuple[dict[str, str], ...]:
    """Flatten a feed document into rows.

    Supports the legacy spreadsheet list feed (``feed.entry`` with
    ``gsx$field: {"$t": value}`` cells) and plain row lists, optionally
    wrapped in a ``rows`` key.

    Args:
        payload: Decoded feed JSON.

    Returns:
        Rows with lowercase field names and string values.

    Raises:
        CatalogFeedError: If no row list can be located.
    """
    entries = _locate_entries(payload)
    return tuple(_flatten_row(entry) for entry in entries if isinstance(entry, Mapping))


def _download_json(
    url: str,
    timeout_seconds: float,
    session: requests.Session | None,
) -> object:
    """Download and decode a JSON document.

    Raises:
        CatalogFeedError: If the request fails or the body is not JSON.
    """
    client = session or requests.Session()
    try:
        response = client.get(url, timeout=timeout_seconds)
        response.raise_for_status()
        return response.json()
    except requests.RequestException as error:
        raise CatalogFeedError(f"Request to {url} failed: {error}") from error
    except ValueError as error:
        raise CatalogFeedError(f"Response from {url} is not valid JSON: {error}") from error
    finally:
        if session is None:
            client.close()


def _locate_entries(payload: object) -> list[Any]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, Mapping):
        feed = payload.get("feed")
        if isinstance(feed, Mapping) and isinstance(feed.get("entry"), list):
            return feed["entry"]
        if isinstance(payload.get("rows"), list):
            return payload["rows"]
    raise CatalogFeedError(
        "Unrecognized feed layout: expected a row list, 'rows', or 'feed.entry'."
    )


def _flatten_row(entry: Mapping[str, Any]) -> dict[str, str]:
    row: dict[str, str] = {}
    for key, value in entry.items():
        field_name = str(key).lower()
        if field_name.startswith(LEGACY_FEED_FIELD_PREFIX):
            field_name = field_name[len(LEGACY_FEED_FIELD_PREFIX) :]
            if isinstance(value, Mapping):
                value = value.get(LEGACY_FEED_VALUE_KEY)
        if value is None or isinstance(value, (Mapping, list)):
            continue
        row[field_name] = str(value)
    return row
