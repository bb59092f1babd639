"""Decide whether the tracked team is the home side of a candidate fixture."""
from __future__ import annotations

import logging
import re
from typing import Optional

from . import markup
from .records import TBD
from .segments import LineCandidate, RowCandidate

LOGGER = logging.getLogger(__name__)

NOT_PLAYED_MARKERS = frozenset({"", "-", "–", "—", "vs", "vs.", "v"})
HOME_MARKER_RE = re.compile(r"\(\s*H\s*\)", re.IGNORECASE)
HOME_MARKER_DISTANCE = 300


def is_tracked_team(name: str, tracked_team: str) -> bool:
    return bool(name) and name != TBD and markup.contains_ci(name, tracked_team)


def is_not_played(result_cell: str) -> bool:
    return markup.strip_tags(result_cell).lower() in NOT_PLAYED_MARKERS


def has_home_marker(document: str, match_id: str, *, distance: int = HOME_MARKER_DISTANCE) -> bool:
    """Look for an ``(H)`` token near any occurrence of ``match_id`` in ``document``."""

    if not match_id or not document:
        return False
    pattern = re.compile(r"(?<![\w])" + re.escape(match_id) + r"(?![\w])")
    for occurrence in pattern.finditer(document):
        start = max(0, occurrence.start() - distance)
        end = min(len(document), occurrence.end() + distance)
        if HOME_MARKER_RE.search(document, start, end):
            return True
    return False


def is_home_row(
    row: RowCandidate,
    home_team: str,
    tracked_team: str,
    document: Optional[str] = None,
) -> bool:
    """Structured rows: the home cell names the tracked team and the game is unplayed
    or flagged ``(H)`` elsewhere on the page."""

    if not is_tracked_team(home_team, tracked_team):
        if markup.contains_ci(markup.strip_tags(row.away_cell), tracked_team):
            LOGGER.info("Skipping away game %s for %s", row.match_id or "?", tracked_team)
        return False
    if is_not_played(row.result_cell):
        return True
    if document is not None and has_home_marker(document, row.match_id):
        return True
    LOGGER.debug(
        "Row %s has result marker %r and no home marker",
        row.match_id or "?",
        markup.strip_tags(row.result_cell),
    )
    return False


def is_home_line(candidate: LineCandidate, tracked_team: str) -> bool:
    """Separator lines: home/away is positional, the tracked team must come first."""

    if markup.contains_ci(candidate.home_part, tracked_team):
        return True
    LOGGER.info("Skipping away game for %s: %r", tracked_team, candidate.line)
    return False
