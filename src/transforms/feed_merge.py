"""External score feed merge transform.

This module links module records to Time-Mode and Twitch-Plays feed
rows by normalized name and folds the matched scores into the record.
Records are immutable; every merge returns a new record.
"""

from __future__ import annotations

from dataclasses import replace
from decimal import Decimal, InvalidOperation
from typing import Mapping

from core.constants import DEFAULT_TIME_MODE_SCORE, FEED_NAME_FIELD
from core.types import (
    FeedTable,
    ModuleRecord,
    ScoreFeeds,
    TimeModeInfo,
    TimeModeOrigin,
    TwitchPlaysInfo,
)
from transforms.name_normalization import names_match
from transforms.score_string import describe_score_string


def find_feed_row(table: FeedTable, record: ModuleRecord) -> Mapping[str, str] | None:
    """Find the first feed row matching a record's display name.

    Args:
        table: Feed rows to search.
        record: Module record to match.

    Returns:
        The first matching row, or None.
    """
    for row in table.rows:
        if names_match(row.get(FEED_NAME_FIELD, ""), record.label):
            return row
    return None


def merge_score_feeds(record: ModuleRecord, feeds: ScoreFeeds) -> ModuleRecord:
    """Apply both feed merges to a record.

    Args:
        record: Parsed module record.
        feeds: Feed tables for this run.

    Returns:
        Record with Time-Mode and Twitch-Plays data merged in.
    """
    time_mode_row = find_feed_row(feeds.time_mode, record)
    if time_mode_row is not None:
        record = merge_time_mode_row(record, time_mode_row)
    tp_row = find_feed_row(feeds.twitch_plays, record)
    if tp_row is not None:
        record = merge_twitch_plays_row(record, tp_row)
    return record


def merge_time_mode_row(record: ModuleRecord, row: Mapping[str, str]) -> ModuleRecord:
    """Merge one Time-Mode feed row into a record.

    The origin is always re-derived; scores are only filled when absent.

    Args:
        record: Module record.
        row: Matched Time-Mode row.

    Returns:
        Record with an updated Time-Mode block.
    """
    time_mode = record.time_mode or TimeModeInfo()
    score_text = row.get("resolvedscore", "").strip() or DEFAULT_TIME_MODE_SCORE
    score = time_mode.score
    if score is None:
        score = _parse_decimal(score_text)
    score_per_module = time_mode.score_per_module
    if score_per_module is None:
        score_per_module = _parse_decimal(row.get("resolvedbosspointspermodule", ""))
    merged = replace(
        time_mode,
        origin=_resolve_origin(row),
        score=score,
        score_per_module=score_per_module,
    )
    return replace(record, time_mode=merged)


def merge_twitch_plays_row(record: ModuleRecord, row: Mapping[str, str]) -> ModuleRecord:
    """Merge one Twitch-Plays feed row into a record.

    Args:
        record: Module record.
        row: Matched Twitch-Plays row.

    Returns:
        Record with the feed score string and its description.
    """
    twitch_plays = record.twitch_plays
    score_string = row.get("tpscore", "")
    if score_string:
        twitch_plays = replace(twitch_plays or TwitchPlaysInfo(), score_string=score_string)
    if twitch_plays is None or not twitch_plays.score_string:
        return record
    description = describe_score_string(twitch_plays.score_string)
    return replace(
        record,
        twitch_plays=replace(twitch_plays, score_string_description=description),
    )


def _resolve_origin(row: Mapping[str, str]) -> TimeModeOrigin:
    if row.get("assignedscore", ""):
        return TimeModeOrigin.ASSIGNED
    if row.get("communityscore", ""):
        return TimeModeOrigin.COMMUNITY
    if row.get("tpscore", "").strip():
        return TimeModeOrigin.TWITCH_PLAYS
    return TimeModeOrigin.UNASSIGNED


def _parse_decimal(raw_value: str) -> Decimal | None:
    try:
        value = Decimal(raw_value.strip())
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value
