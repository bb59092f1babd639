"""Field extractors for a single fixture fragment.

Every extractor walks an ordered list of strategies and stops at the first
hit. None of them raises: when nothing matches the field's sentinel is
returned so that a partial record can still be assembled.
"""
from __future__ import annotations

import bisect
import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from . import markup
from .dates import TargetWeekend
from .records import LEAGUE, TBD

LOGGER = logging.getLogger(__name__)

MIN_TEAM_NAME_LENGTH = 3
MIN_OPPONENT_LENGTH = 8

VENUE_WORDS = ("field", "park", "complex", "stadium", "center", "centre", "school", "pitch")
NAVIGATION_WORDS = ("schedule", "standings", "results", "bracket", "print", "details", "map")
PITCH_LINK_MARKERS = ("schedules?pitch", "pitch=", "/pitches/", "/venues/")
HOME_AWAY_MARKER_RE = re.compile(r"\((?:H|A|Home|Away)\)", re.IGNORECASE)
LEADING_MATCH_ID_RE = re.compile(r"^(?:#|No\.?\s*|Game\s+|Match\s+)?\d{1,6}\b\s*", re.IGNORECASE)
LETTER_RE = re.compile(r"[A-Za-z]")

# --- dates -------------------------------------------------------------------

FULL_MONTHS = (
    "January|February|March|April|May|June|July|August|September|October|November|December"
)
SHORT_MONTHS = "Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sept|Sep|Oct|Nov|Dec"

# (pattern, strptime format, joiner for the three captured groups)
DATE_PATTERNS: Tuple[Tuple[re.Pattern[str], str, str], ...] = (
    (re.compile(rf"\b({FULL_MONTHS})\s+(\d{{1,2}}),?\s+(\d{{4}})\b", re.IGNORECASE), "%B %d %Y", " "),
    (re.compile(rf"\b({SHORT_MONTHS})\.?\s+(\d{{1,2}}),?\s+(\d{{4}})\b", re.IGNORECASE), "%b %d %Y", " "),
    (re.compile(r"(?<!\d)(\d{1,2})/(\d{1,2})/(\d{4})(?!\d)"), "%m/%d/%Y", "/"),
    (re.compile(r"(?<!\d)(\d{4})-(\d{2})-(\d{2})(?!\d)"), "%Y-%m-%d", "-"),
)
WEEKDAY_RE = re.compile(
    r"\b(?:Monday|Tuesday|Wednesday|Thursday|Friday|Saturday|Sunday"
    r"|Mon|Tue|Tues|Wed|Thu|Thur|Thurs|Fri|Sat|Sun)\b\.?,?",
    re.IGNORECASE,
)

# --- times -------------------------------------------------------------------

TIMEZONE_ABBREVIATIONS = r"(?:AK[SD]T|H[SD]?T|P[SD]?T|M[SD]?T|C[SD]?T|E[SD]?T|UTC|GMT)"
TIME_PATTERNS: Tuple[re.Pattern[str], ...] = (
    # "10:30 AM PDT", "1:00PM PDT", "2:00 pm"
    re.compile(
        rf"\b(\d{{1,2}}):(\d{{2}})\s*([AP])\.?M\.?(?![A-Za-z])(?:\s*({TIMEZONE_ABBREVIATIONS})\b)?",
        re.IGNORECASE,
    ),
    # "x10:30AM" glued to a preceding word
    re.compile(r"(\d{1,2}):(\d{2})([AP])M", re.IGNORECASE),
    # "10:30 - AM", "10:30, PM"
    re.compile(r"(\d{1,2}):(\d{2})[^\w<>]{1,3}([AP])M\b", re.IGNORECASE),
)
TWENTY_FOUR_HOUR_RE = re.compile(r"(?<![\d:])([01]?\d|2[0-3]):([0-5]\d)(?![\d:])")
TIME_TOKEN_RE = re.compile(r"^(\d{1,2}):(\d{2})$")

# --- locations ---------------------------------------------------------------

FACILITY_WORDS = r"(?:Park|Complex|Fields?|Stadium|Center|Centre|School|Sportsplex|Pitch)"
FACILITY_RE = re.compile(rf"\b{FACILITY_WORDS}\b", re.IGNORECASE)
BULLET_MARKERS = "*•★►▸"
BULLET_LOCATION_RE = re.compile(rf"[{BULLET_MARKERS}]\s*([^<>\n|{BULLET_MARKERS}]{{3,120}})")
GENERIC_LOCATION_RE = re.compile(
    rf"((?:[A-Z0-9][\w'.&]*\s+){{0,6}}{FACILITY_WORDS}\b(?:\s+-\s+[A-Z0-9][\w'#.]*(?:\s+[\w#]+)?)?)"
)
LOCATION_SEPARATOR = " - "

# --- divisions ---------------------------------------------------------------

LEAGUE_WORDS = r"(?:NPL|Elite|Premier|Gold|Silver|Bronze)"
DIRECTION = r"(?:\s+(?:East|West|North|South|Central))?"
DIVISION_PATTERNS: Tuple[re.Pattern[str], ...] = (
    re.compile(rf"\b(\d{{4}}\s?[BG]\b[\w ]{{0,30}}?\b{LEAGUE_WORDS}\b{DIRECTION})", re.IGNORECASE),
    re.compile(rf"\b(U\d{{1,2}}\b[\w ]{{0,30}}?\b{LEAGUE_WORDS}\b{DIRECTION})", re.IGNORECASE),
    re.compile(rf"\b(\d{{2}}[BG]\b[\w ]{{0,30}}?\b{LEAGUE_WORDS}\b{DIRECTION})", re.IGNORECASE),
    re.compile(rf"\b(Premier\b{DIRECTION})", re.IGNORECASE),
    re.compile(rf"\b(NPL\b{DIRECTION})", re.IGNORECASE),
    re.compile(rf"\b(Elite\b{DIRECTION})", re.IGNORECASE),
    re.compile(rf"\b(Gold\b{DIRECTION})", re.IGNORECASE),
    re.compile(rf"\b(Silver\b{DIRECTION})", re.IGNORECASE),
    re.compile(rf"\b(Bronze\b{DIRECTION})", re.IGNORECASE),
    re.compile(r"\b(U\d{1,2}\s*(?:Boys|Girls|B|G))\b", re.IGNORECASE),
    re.compile(r"\b((?:19|20)\d{2}\s*(?:Boys|Girls|B|G))\b", re.IGNORECASE),
)
DIVISION_KEYWORDS = (("premier", "Premier"), ("npl", "NPL"), ("elite", "Elite"), ("gold", "Gold"))


@dataclass(frozen=True)
class Location:
    location: str
    venue: str
    field: str

    @property
    def found(self) -> bool:
        return self.location != TBD


UNKNOWN_LOCATION = Location(location=TBD, venue=TBD, field=TBD)


def _has_letters(value: str, minimum: int = 1) -> bool:
    return len(LETTER_RE.findall(value)) >= minimum


def _remove_schedule_noise(text: str) -> str:
    cleaned = HOME_AWAY_MARKER_RE.sub(" ", text)
    for pattern, _, _ in DATE_PATTERNS:
        cleaned = pattern.sub(" ", cleaned)
    for pattern in TIME_PATTERNS:
        cleaned = pattern.sub(" ", cleaned)
    cleaned = WEEKDAY_RE.sub(" ", cleaned)
    cleaned = markup.clean_text(cleaned)
    cleaned = LEADING_MATCH_ID_RE.sub("", cleaned)
    return cleaned.strip(" -:|,")


def _name_chunks(fragment: str) -> List[str]:
    texts = [link.text for link in markup.links(fragment)]
    texts.append(markup.strip_tags(fragment))
    chunks: List[str] = []
    for text in texts:
        for piece in text.split("|"):
            chunk = _remove_schedule_noise(piece)
            if chunk and chunk not in chunks:
                chunks.append(chunk)
    return chunks


# --- team names --------------------------------------------------------------


def extract_team_name(
    fragment: str,
    *,
    tracked_team: Optional[str] = None,
    min_length: int = MIN_TEAM_NAME_LENGTH,
) -> str:
    """Return the team named in ``fragment``.

    Link text is preferred over the surrounding text. With ``tracked_team``
    only names containing it (case-insensitive) qualify.
    """

    for chunk in _name_chunks(fragment):
        if len(chunk) < min_length or not _has_letters(chunk, 2):
            continue
        if tracked_team and not markup.contains_ci(chunk, tracked_team):
            continue
        return chunk
    return TBD


def _is_opponent_text(text: str, tracked_team: str, min_length: int) -> bool:
    lowered = text.lower()
    if len(text) < min_length or " " not in text or not _has_letters(text, 2):
        return False
    if tracked_team and tracked_team.lower() in lowered:
        return False
    if any(word in lowered for word in VENUE_WORDS):
        return False
    return not any(word in lowered for word in NAVIGATION_WORDS)


def extract_opponent(
    context: str,
    tracked_team: str,
    *,
    min_length: int = MIN_OPPONENT_LENGTH,
) -> str:
    """Pick the longest plausible team name in ``context`` that is not the tracked team."""

    candidates: List[str] = []
    for link in markup.links(context):
        if any(marker in link.href.lower() for marker in PITCH_LINK_MARKERS):
            continue
        text = _remove_schedule_noise(link.text)
        if _is_opponent_text(text, tracked_team, min_length):
            candidates.append(text)

    if not candidates:
        for line in markup.text_lines(context):
            for piece in line.split("|"):
                text = _remove_schedule_noise(piece)
                if _is_opponent_text(text, tracked_team, min_length):
                    candidates.append(text)

    best = ""
    for candidate in candidates:
        if len(candidate) > len(best):
            best = candidate
    if best:
        LOGGER.debug("Found opponent %r (from %s candidates)", best, len(candidates))
        return best
    LOGGER.debug("No opponent found in context")
    return TBD


# --- dates -------------------------------------------------------------------


def _parse_date_match(match: re.Match[str], fmt: str, joiner: str) -> Optional[str]:
    parts = list(match.groups())
    if fmt.startswith("%b"):
        # strptime knows "Sep" but not "Sept"
        parts[0] = parts[0][:3]
    try:
        parsed = datetime.strptime(joiner.join(parts), fmt)
    except ValueError:
        LOGGER.debug("Ignoring unparseable date %r", match.group(0))
        return None
    return parsed.date().isoformat()


def parse_date_text(context: str) -> Optional[str]:
    """Return the first calendar date in ``context`` as ``YYYY-MM-DD``."""

    text = markup.strip_tags(context)
    for pattern, fmt, joiner in DATE_PATTERNS:
        for match in pattern.finditer(text):
            parsed = _parse_date_match(match, fmt, joiner)
            if parsed:
                return parsed
    return None


def date_positions(text: str) -> List[Tuple[int, str]]:
    """Every parseable date in raw ``text`` as ``(offset, YYYY-MM-DD)``, by offset."""

    hits: List[Tuple[int, str]] = []
    for pattern, fmt, joiner in DATE_PATTERNS:
        for match in pattern.finditer(text):
            parsed = _parse_date_match(match, fmt, joiner)
            if parsed:
                hits.append((match.start(), parsed))
    hits.sort()
    return hits


def date_before(hits: Sequence[Tuple[int, str]], offset: int) -> Optional[str]:
    """The date of the last hit starting before ``offset``, i.e. the nearest heading above."""

    index = bisect.bisect_left(hits, (offset, ""))
    return hits[index - 1][1] if index else None


def extract_date(context: str, weekend: TargetWeekend, *, fallback: Optional[str] = None) -> str:
    """Date written in ``context``, else ``fallback``, else the target Saturday."""

    parsed = parse_date_text(context)
    if parsed:
        return parsed
    lowered = context.lower()
    for form, iso_date in weekend.form_lookup().items():
        if form in lowered:
            LOGGER.debug("Date resolved from target form %r", form)
            return iso_date
    if fallback:
        return fallback
    return weekend.saturday.isoformat()


# --- times -------------------------------------------------------------------


def _format_time(hour: int, minute: int, meridiem: Optional[str], zone: Optional[str]) -> Optional[str]:
    if minute > 59:
        return None
    if meridiem is None or hour > 12 or hour == 0:
        if hour > 23:
            return None
        meridiem = "PM" if hour >= 12 else "AM"
        hour = hour % 12 or 12
    formatted = f"{hour}:{minute:02d} {meridiem.upper()}"
    if zone:
        formatted = f"{formatted} {zone.upper()}"
    return formatted


def _scan_time_tokens(text: str) -> Optional[str]:
    words = text.split()
    for index, word in enumerate(words):
        if ":" not in word:
            continue
        upper = word.upper()
        if len(word) <= 6 and index + 1 < len(words):
            token = TIME_TOKEN_RE.match(word)
            following = words[index + 1].upper()
            if token and (following.startswith("AM") or following.startswith("PM")):
                return _format_time(int(token.group(1)), int(token.group(2)), following[:2], None)
        if upper.endswith("AM") or upper.endswith("PM"):
            token = TIME_TOKEN_RE.match(word[:-2])
            if token:
                return _format_time(int(token.group(1)), int(token.group(2)), upper[-2:], None)
    return None


def extract_time(context: str) -> str:
    """Return the kickoff time as ``"H:MM AM|PM[ TZ]"`` or ``TBD``."""

    text = markup.strip_tags(context)
    for pattern in TIME_PATTERNS:
        for match in pattern.finditer(text):
            groups = match.groups()
            zone = groups[3] if len(groups) > 3 else None
            formatted = _format_time(int(groups[0]), int(groups[1]), groups[2] + "M", zone)
            if formatted:
                LOGGER.debug("Found time %r with pattern %s", formatted, pattern.pattern)
                return formatted

    scanned = _scan_time_tokens(text)
    if scanned:
        LOGGER.debug("Found time %r by token scan", scanned)
        return scanned

    match = TWENTY_FOUR_HOUR_RE.search(text)
    if match:
        formatted = _format_time(int(match.group(1)), int(match.group(2)), None, None)
        if formatted:
            return formatted

    LOGGER.debug("No time found in context")
    return TBD


# --- locations ---------------------------------------------------------------


def split_location(text: str) -> Location:
    location = markup.clean_text(text).strip(" -|*")
    if not location:
        return UNKNOWN_LOCATION
    if LOCATION_SEPARATOR in location:
        venue, field = location.split(LOCATION_SEPARATOR, 1)
        venue, field = venue.strip(), field.strip()
        if venue and field:
            return Location(location=location, venue=venue, field=field)
    return Location(location=location, venue=location, field=TBD)


def _pitch_link(context: str) -> Optional[str]:
    for link in markup.links(context):
        if any(marker in link.href.lower() for marker in PITCH_LINK_MARKERS):
            return link.text
    return None


def _facility_link(context: str) -> Optional[str]:
    for link in markup.links(context):
        if FACILITY_RE.search(link.text):
            return link.text
    return None


def _bullet_location(context: str) -> Optional[str]:
    for match in BULLET_LOCATION_RE.finditer(context):
        text = markup.clean_text(match.group(1))
        if _has_letters(text, 3):
            return text
    return None


def _generic_location(context: str) -> Optional[str]:
    for line in markup.text_lines(context):
        for piece in line.split("|"):
            match = GENERIC_LOCATION_RE.search(piece)
            if match:
                return match.group(1)
    return None


LOCATION_STRATEGIES: Sequence[Tuple[str, Callable[[str], Optional[str]]]] = (
    ("pitch link", _pitch_link),
    ("facility link", _facility_link),
    ("bullet", _bullet_location),
    ("facility keyword", _generic_location),
)


def extract_location(context: str) -> Location:
    for name, strategy in LOCATION_STRATEGIES:
        text = strategy(context)
        if text:
            location = split_location(text)
            if location.found:
                LOGGER.debug("Found location %r via %s", location.location, name)
                return location
    return UNKNOWN_LOCATION


def location_from_cell(cell: str) -> Location:
    """Location of a table cell, using the bare cell text as the last resort."""

    location = extract_location(cell)
    if location.found:
        return location
    text = markup.strip_tags(cell)
    if _has_letters(text, 3):
        return split_location(text)
    return UNKNOWN_LOCATION


# --- divisions ---------------------------------------------------------------


def division_from_cell(cell: Optional[str]) -> Optional[str]:
    if not cell:
        return None
    text = markup.strip_tags(cell)
    if text in {"-", "–"} or not _has_letters(text, 2):
        return None
    return text


def division_from_team_name(home_team: str, club_prefixes: Iterable[str]) -> Optional[str]:
    """Return the part of ``home_team`` after the club prefix, e.g. ``"U12 Boys"``."""

    if not home_team or home_team == TBD:
        return None
    lowered = home_team.lower()
    for prefix in sorted((p for p in club_prefixes if p), key=len, reverse=True):
        index = lowered.find(prefix.lower())
        if index < 0:
            continue
        remainder = home_team[index + len(prefix):].strip(" -–:")
        if remainder:
            return remainder
    return None


def division_from_keywords(context: str) -> Optional[str]:
    text = markup.strip_tags(context)
    for pattern in DIVISION_PATTERNS:
        match = pattern.search(text)
        if match:
            return markup.clean_text(match.group(1))
    lowered = text.lower()
    for keyword, label in DIVISION_KEYWORDS:
        if keyword in lowered:
            return label
    return None


def extract_division(
    context: str,
    home_team: str,
    *,
    club_prefixes: Sequence[str],
    strategies: Sequence[str] = ("cell", "team_name", "keywords"),
    division_cell: Optional[str] = None,
) -> str:
    for strategy in strategies:
        if strategy == "cell":
            division = division_from_cell(division_cell)
        elif strategy == "team_name":
            division = division_from_team_name(home_team, club_prefixes)
        elif strategy == "keywords":
            division = division_from_keywords(context)
        else:
            LOGGER.warning("Unknown division strategy %r", strategy)
            continue
        if division:
            LOGGER.debug("Found division %r via %s", division, strategy)
            return division
    return LEAGUE
