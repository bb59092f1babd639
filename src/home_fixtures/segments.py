"""Split a schedule window into candidate fixtures.

Two strategies are available. ``segment_rows`` walks table markup and
returns every row with the expected number of cells. ``segment_lines``
flattens the markup to text and picks lines of the form
``<home team> - <away team>`` that mention the tracked team.
"""
from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from . import fields, markup

LOGGER = logging.getLogger(__name__)

DEFAULT_EXPECTED_CELLS = 7
LINE_SEPARATORS: Tuple[str, ...] = (" - ", " vs. ", " vs ", " v ")

ROW_TOKEN_RE = re.compile(r"<\s*(/?)\s*(tr|td|th)\b[^<>]*>", re.IGNORECASE)

# Cell positions of a GotSport style schedule row.
MATCH_ID_CELL = 0
DATE_CELL = 1
HOME_CELL = 2
RESULT_CELL = 3
AWAY_CELL = 4
LOCATION_CELL = 5
DIVISION_CELL = 6


class RowState(enum.Enum):
    SCANNING = "scanning"
    IN_ROW = "in_row"
    IN_CELL = "in_cell"


@dataclass(frozen=True)
class RowCandidate:
    cells: Tuple[str, ...]
    raw: str
    start: int = 0

    def cell(self, index: int) -> str:
        return self.cells[index] if index < len(self.cells) else ""

    @property
    def match_id(self) -> str:
        return markup.strip_tags(self.cell(MATCH_ID_CELL))

    @property
    def date_cell(self) -> str:
        return self.cell(DATE_CELL)

    @property
    def home_cell(self) -> str:
        return self.cell(HOME_CELL)

    @property
    def result_cell(self) -> str:
        return self.cell(RESULT_CELL)

    @property
    def away_cell(self) -> str:
        return self.cell(AWAY_CELL)

    @property
    def location_cell(self) -> str:
        return self.cell(LOCATION_CELL)

    @property
    def division_cell(self) -> str:
        return self.cell(DIVISION_CELL)


@dataclass(frozen=True)
class LineCandidate:
    """A ``home - away`` text line.

    ``heading`` is the nearest line at or above this one that carries a date.
    ``following`` holds the lines after it up to the next fixture or date
    heading, nearest first.
    """

    line: str
    home_part: str
    away_part: str
    separator: str
    context: str
    heading: str = ""
    following: Tuple[str, ...] = ()


class _RowScanner:
    """Explicit state machine over ``<tr>``/``<td>`` tokens.

    ``SCANNING`` waits for a row to open, ``IN_ROW`` waits for a cell,
    ``IN_CELL`` collects cell markup. Closing (or re-opening) a row emits
    it; a row still open when the text ends was cut by the window edge and
    is dropped.
    """

    def __init__(self, text: str, expected_cells: int) -> None:
        self.text = text
        self.expected_cells = expected_cells
        self.state = RowState.SCANNING
        self.row_start = 0
        self.cell_start = 0
        self.cells: List[str] = []
        self.rows: List[RowCandidate] = []
        self.skipped = 0

    def run(self) -> List[RowCandidate]:
        for token in ROW_TOKEN_RE.finditer(self.text):
            closing = bool(token.group(1))
            tag = token.group(2).lower()
            if tag == "tr":
                if self.state is not RowState.SCANNING:
                    self._emit(token.start())
                if not closing:
                    self._open_row(token.start())
            elif not closing:
                if self.state is RowState.IN_CELL:
                    self._close_cell(token.start())
                if self.state is not RowState.SCANNING:
                    self.state = RowState.IN_CELL
                    self.cell_start = token.end()
            elif self.state is RowState.IN_CELL:
                self._close_cell(token.start())
        if self.state is not RowState.SCANNING:
            LOGGER.debug("Dropping row cut off at the end of the window")
        if self.skipped:
            LOGGER.debug(
                "Skipped %s rows with fewer than %s cells", self.skipped, self.expected_cells
            )
        return self.rows

    def _open_row(self, position: int) -> None:
        self.state = RowState.IN_ROW
        self.row_start = position
        self.cells = []

    def _close_cell(self, position: int) -> None:
        self.cells.append(self.text[self.cell_start:position])
        self.state = RowState.IN_ROW

    def _emit(self, position: int) -> None:
        if self.state is RowState.IN_CELL:
            self._close_cell(position)
        if len(self.cells) >= self.expected_cells:
            self.rows.append(
                RowCandidate(
                    cells=tuple(self.cells),
                    raw=self.text[self.row_start:position],
                    start=self.row_start,
                )
            )
        elif self.cells:
            self.skipped += 1
        self.state = RowState.SCANNING
        self.cells = []


def segment_rows(window: str, *, expected_cells: int = DEFAULT_EXPECTED_CELLS) -> List[RowCandidate]:
    """Return the table rows of ``window`` that carry at least ``expected_cells`` cells."""

    if not window:
        return []
    return _RowScanner(window, expected_cells).run()


def split_on_separator(
    line: str, separators: Sequence[str] = LINE_SEPARATORS
) -> Optional[Tuple[str, str, str]]:
    """Split ``line`` at the earliest separator token."""

    lowered = line.lower()
    best: Optional[Tuple[int, str]] = None
    for separator in separators:
        index = lowered.find(separator)
        if index < 0:
            continue
        if best is None or index < best[0]:
            best = (index, separator)
    if best is None:
        return None
    index, separator = best
    return line[:index], line[index + len(separator):], separator


def _is_fixture_line(line: str, separators: Sequence[str]) -> bool:
    # Venue bullets such as "* Idlewild Park - Field 3" also carry a separator.
    if line.lstrip()[:1] in fields.BULLET_MARKERS:
        return False
    return split_on_separator(line, separators) is not None


def _following_lines(
    lines: Sequence[str],
    index: int,
    dated: Sequence[bool],
    limit: int,
    separators: Sequence[str],
) -> Tuple[str, ...]:
    following: List[str] = []
    for line_index in range(index + 1, min(len(lines), index + limit + 1)):
        line = lines[line_index]
        if dated[line_index] or _is_fixture_line(line, separators):
            break
        following.append(line)
    return tuple(following)


def segment_lines(
    window: str,
    tracked_team: str,
    *,
    context_lines: int = 3,
    separators: Sequence[str] = LINE_SEPARATORS,
) -> List[LineCandidate]:
    """Return text lines that name the tracked team next to a separator token."""

    lines = markup.text_lines(window)
    dated = [fields.parse_date_text(line) is not None for line in lines]
    candidates: List[LineCandidate] = []
    heading = ""
    for index, line in enumerate(lines):
        if dated[index]:
            heading = line
        if not markup.contains_ci(line, tracked_team):
            continue
        parts = split_on_separator(line, separators)
        if parts is None:
            continue
        home_part, away_part, separator = parts
        if not home_part.strip() or not away_part.strip():
            LOGGER.debug("Ignoring line with an empty side: %r", line)
            continue
        start = max(0, index - context_lines)
        context = "\n".join(lines[start:index + context_lines + 1])
        candidates.append(
            LineCandidate(
                line=line,
                home_part=home_part.strip(),
                away_part=away_part.strip(),
                separator=separator.strip(),
                context=context,
                heading=heading,
                following=_following_lines(lines, index, dated, context_lines, separators),
            )
        )
    return candidates
