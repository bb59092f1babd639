"""Small markup helpers shared by the segmenters and field extractors."""
from __future__ import annotations

import re
from dataclasses import dataclass
from html import unescape
from typing import List

from bs4 import BeautifulSoup

TAG_RE = re.compile(r"<[^<>]*>")
BLOCK_BREAK_RE = re.compile(
    r"<\s*(?:br|/?tr|/?p|/?div|/?li|/?ul|/?ol|/?table|/?tbody|/?thead|/?h[1-6]|/?section)\b[^<>]*>",
    re.IGNORECASE,
)
CELL_BREAK_RE = re.compile(r"<\s*/\s*t[dh]\s*>", re.IGNORECASE)
SCRIPT_OPEN_RE = re.compile(r"<(script|style)\b[^<>]*>", re.IGNORECASE)
SCRIPT_CLOSE_RES = {
    tag: re.compile(rf"</\s*{tag}\s*>", re.IGNORECASE) for tag in ("script", "style")
}
WHITESPACE_RE = re.compile(r"\s+")

CELL_DIVIDER = " | "


@dataclass(frozen=True)
class Link:
    text: str
    href: str


def clean_text(value: str) -> str:
    return WHITESPACE_RE.sub(" ", unescape(value).replace("\xa0", " ")).strip()


def strip_tags(fragment: str) -> str:
    """Drop markup tags, decode entities and collapse whitespace."""

    if not fragment:
        return ""
    return clean_text(TAG_RE.sub(" ", fragment))


def drop_scripts(fragment: str) -> str:
    """Remove ``<script>`` and ``<style>`` elements in one forward pass.

    Each opener costs a single search for its closer. An element that is
    never closed swallows the rest of the fragment.
    """

    pieces: List[str] = []
    position = 0
    while position < len(fragment):
        opener = SCRIPT_OPEN_RE.search(fragment, position)
        if opener is None:
            break
        pieces.append(fragment[position:opener.start()])
        pieces.append(" ")
        closer = SCRIPT_CLOSE_RES[opener.group(1).lower()].search(fragment, opener.end())
        position = len(fragment) if closer is None else closer.end()
    pieces.append(fragment[position:])
    return "".join(pieces)


def text_lines(fragment: str) -> List[str]:
    """Flatten markup into non-empty text lines.

    Block-level tags become line breaks and table cells are joined with
    ``CELL_DIVIDER`` so that one table row stays on one line.
    """

    if not fragment:
        return []
    text = drop_scripts(fragment)
    text = CELL_BREAK_RE.sub(CELL_DIVIDER, text)
    text = BLOCK_BREAK_RE.sub("\n", text)
    text = TAG_RE.sub(" ", text)
    lines: List[str] = []
    for raw_line in text.split("\n"):
        line = clean_text(raw_line).strip(" |")
        if line:
            lines.append(line)
    return lines


def links(fragment: str) -> List[Link]:
    """Return the text and target of every ``<a>`` element in ``fragment``."""

    if not fragment or "<a" not in fragment.lower():
        return []
    soup = BeautifulSoup(fragment, "html.parser")
    found: List[Link] = []
    for anchor in soup.find_all("a"):
        text = clean_text(anchor.get_text(" ", strip=True))
        if not text:
            continue
        href = anchor.get("href") or ""
        found.append(Link(text=text, href=str(href)))
    return found


def contains_ci(haystack: str, needle: str) -> bool:
    return bool(needle) and needle.lower() in haystack.lower()
