"""Locate the parts of a schedule page around the target dates."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Sequence

LOGGER = logging.getLogger(__name__)

DEFAULT_WINDOW_RADIUS = 8000


@dataclass(frozen=True)
class DateWindow:
    """A slice of the document and the date form it was centred on.

    ``form`` is empty for the whole-document fallback.
    """

    text: str
    form: str = ""
    start: int = 0


def _form_pattern(form: str) -> re.Pattern[str]:
    # "2/3/2025" must not match inside "12/3/2025" or "2/3/20251".
    return re.compile(r"(?<!\d)" + re.escape(form) + r"(?!\d)", re.IGNORECASE)


def find_form(document: str, form: str) -> int:
    """Return the offset of the first occurrence of ``form`` or ``-1``."""

    if not form:
        return -1
    match = _form_pattern(form).search(document)
    return match.start() if match else -1


def locate_date_windows(
    document: str,
    forms: Sequence[str],
    *,
    radius: int = DEFAULT_WINDOW_RADIUS,
) -> List[DateWindow]:
    """Slice ``radius`` characters on each side of the first hit of every date form.

    Falls back to the whole document when none of the forms occurs, so pages
    that lost their date headings are still scanned.
    """

    if not document:
        return []

    windows: List[DateWindow] = []
    seen_bounds: set[tuple[int, int]] = set()
    for form in forms:
        offset = find_form(document, form)
        if offset < 0:
            continue
        start = max(0, offset - radius)
        end = min(len(document), offset + len(form) + radius)
        if (start, end) in seen_bounds:
            continue
        seen_bounds.add((start, end))
        LOGGER.debug("Date form %r found at offset %s, window %s-%s", form, offset, start, end)
        windows.append(DateWindow(text=document[start:end], form=form, start=start))

    if not windows:
        LOGGER.info("No target date found in document, scanning the whole page")
        return [DateWindow(text=document)]
    return windows


def locate_windows(
    document: str,
    forms: Sequence[str],
    *,
    radius: int = DEFAULT_WINDOW_RADIUS,
) -> List[str]:
    return [window.text for window in locate_date_windows(document, forms, radius=radius)]
