"""
Segmentation of generated listing text into ordered sections.

Generated descriptions are markdown-ish: a bold title line, bold or
``#`` headings (optionally emoji-prefixed), bullet lists, short
standalone lines acting as headings, paragraphs and a hashtag line.

Pipeline:
    1. Split: one stripped line per entry, blanks and ``---`` rules dropped
    2. Fold: classify each line (heading, bullet, hashtag, paragraph)
       and accumulate sections
    3. Recombine: regroup runs of ``-``-prefixed headings into bullet tiles
    4. Title: extract the listing title and drop a heading that repeats it

The parser never raises; any text yields some list of sections.
"""

import re
from dataclasses import dataclass, field
from functools import reduce

from listsmith.core.text_utils import (
    EMOJI_PATTERN,
    clean_title,
    strip_bold,
    strip_emoji,
)

_SECTION_TITLE_RE = re.compile(
    rf"^(?:#+\s*)?({EMOJI_PATTERN})?\s*\*\*([^*]+?)\*\*:?\s*$"
    r"|^(#{1,6})\s+(.*?)$"
)
_BULLET_RE = re.compile(r"^[•♦\-*]")
_EXPLICIT_HEADER_RE = re.compile(
    r"^(box contents?|key features?|features?|benefits?|contents?"
    r"|specifications?|specs?|shipping|guarantee|why choose)$",
    re.IGNORECASE,
)
_LEADING_BOLD_RE = re.compile(r"^\s*\*\*(.*?)\*\*")
_LINE_SPLIT_RE = re.compile(r"\r?\n")

_SEPARATORS = frozenset({"---", "----", "-----"})

# Lines at least this long are paragraphs, never implicit headings
_MAX_IMPLICIT_HEADING_LENGTH = 50
_MAX_TITLE_LINE_LENGTH = 100


def _display_length(text: str) -> int:
    """Length in UTF-16 code units, so astral emoji count twice."""
    return len(text.encode("utf-16-le")) // 2


# Headings sniffed when naming a regrouped run of "-" headings
_GROUP_LOOKAHEAD = 5
_BOX_CONTENT_HINTS = ("booster", "pack", "card", "dice", "sleeve")
_BENEFIT_HINTS = ("benefit", "advantage", "why")
_CONTENT_ITEM_HINTS = (
    "booster", "pack", "card", "dice", "sleeve",
    "energy", "guide", "marker", "box", "code",
)


@dataclass
class Section:
    """One titled block of a generated description."""

    title: str = ""
    items: list[str] = field(default_factory=list)
    is_list: bool = False
    is_tile: bool = False

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "items": self.items,
            "isList": self.is_list,
            "isTile": self.is_tile,
        }


@dataclass
class SegmentedDescription:
    """Sections of a description plus the listing title found in it."""

    title: str
    sections: list[Section] = field(default_factory=list)


@dataclass
class _FoldState:
    sections: list[Section] = field(default_factory=list)
    current: Section | None = None

    def flush(self) -> None:
        if self.current is not None:
            self.sections.append(self.current)
        self.current = None


# ─── Public API ──────────────────────────────────────────────


def parse_sections(text: str) -> list[Section]:
    """
    Split generated text into ordered sections.

    Args:
        text: Raw description text as returned by the generator.

    Returns:
        Sections in document order, with ``-`` heading runs regrouped.
    """
    state = reduce(_fold_line, _meaningful_lines(text), _FoldState())
    state.flush()
    return _recombine(state.sections)


def extract_generated_title(text: str, product_title: str = "") -> str:
    """
    Find the listing title the generator put at the top of the text.

    Tries a leading ``**bold**`` run, then a short first line with its
    markdown markers removed, then falls back to the emoji-free
    ``product_title``.
    """
    match = _LEADING_BOLD_RE.match(text)
    if match:
        return match.group(1).strip()

    first_line = text.split("\n")[0].strip()
    if 0 < _display_length(first_line) < _MAX_TITLE_LINE_LENGTH:
        candidate = re.sub(r"^#+\s*", "", first_line.replace("**", "")).strip()
        if candidate:
            return candidate

    return strip_emoji(product_title)


def segment_description(text: str, product_title: str = "") -> SegmentedDescription:
    """
    Parse text into sections and pull out its listing title.

    A leading heading-only section that just repeats the title is dropped
    so the title is not rendered twice.
    """
    sections = parse_sections(text)
    title = extract_generated_title(text, product_title)

    if sections:
        first = sections[0]
        if (
            first.title
            and not first.items
            and first.title.strip().lower() == title.strip().lower()
        ):
            sections = sections[1:]

    return SegmentedDescription(title=title, sections=sections)


# ─── Line Classification ─────────────────────────────────────


def _meaningful_lines(text: str) -> list[str]:
    lines = (raw.strip() for raw in _LINE_SPLIT_RE.split(text))
    return [line for line in lines if line and line not in _SEPARATORS]


def _fold_line(state: _FoldState, line: str) -> _FoldState:
    """Apply one line to the fold: heading, bullet, hashtag or paragraph."""
    heading = _match_heading(line)
    if heading is not None:
        state.flush()
        state.current = Section(title=heading, is_tile=True)
        return state

    if _BULLET_RE.match(line):
        if state.current is None:
            state.current = Section(title="Key Features", is_list=True, is_tile=True)
        state.current.is_list = True
        state.current.items.append(strip_bold(line[1:].strip()))
        return state

    if line.startswith("#"):
        state.flush()
        state.current = Section(items=[line])
        return state

    if state.current is None:
        state.current = Section()

    paragraph = strip_bold(line)
    if _looks_like_heading(paragraph):
        if state.current.items:
            state.sections.append(state.current)
        state.current = Section(title=paragraph, is_tile=True)
    else:
        state.current.items.append(paragraph)
    return state


def _match_heading(line: str) -> str | None:
    """Return the cleaned heading text if ``line`` is a bold or ``#`` heading."""
    match = _SECTION_TITLE_RE.match(line)
    if not match:
        return None

    emoji, bold_title, _, hash_title = match.groups()
    if bold_title:
        title = bold_title.strip()
        if emoji:
            title = f"{emoji.strip()} {title}"
    else:
        title = (hash_title or "").strip()
    return clean_title(title)


def _looks_like_heading(paragraph: str) -> bool:
    """Short standalone lines without sentence punctuation act as headings."""
    if _EXPLICIT_HEADER_RE.match(paragraph.strip()):
        return True
    return (
        _display_length(paragraph) < _MAX_IMPLICIT_HEADING_LENGTH
        and not any(mark in paragraph for mark in ".!?")
        and "pokemon" not in paragraph.lower()
    )


# ─── Recombination ───────────────────────────────────────────


def _recombine(sections: list[Section]) -> list[Section]:
    """
    Regroup runs of empty ``-`` headings into bullet tiles.

    A run is split where its items switch between box contents and
    features. Each group takes at least one item, so every pass advances.
    """
    merged: list[Section] = []
    i = 0
    while i < len(sections):
        section = sections[i]
        if not (section.title.startswith("-") and not section.items):
            merged.append(section)
            i += 1
            continue

        group_name = _group_name(sections[i:i + _GROUP_LOOKAHEAD])
        group = Section(title=group_name, is_list=True, is_tile=True)
        group_kind = group_name.lower()

        while i < len(sections) and sections[i].title.startswith("-"):
            item = sections[i].title[1:].strip()
            if group.items and _kind_diverges(group_kind, _item_kind(item)):
                break
            group.items.append(item)
            i += 1

        merged.append(group)
    return merged


def _group_name(window: list[Section]) -> str:
    titles = [s.title.lower() for s in window]
    if any(hint in t for t in titles for hint in _BOX_CONTENT_HINTS):
        return "Box Contents"
    if any(hint in t for t in titles for hint in _BENEFIT_HINTS):
        return "Benefits"
    return "Key Features"


def _item_kind(item: str) -> str:
    lowered = item.lower()
    if any(hint in lowered for hint in _CONTENT_ITEM_HINTS):
        return "content"
    return "feature"


def _kind_diverges(group_kind: str, item_kind: str) -> bool:
    if "feature" in group_kind:
        return item_kind == "content"
    if "content" in group_kind:
        return item_kind == "feature"
    return False
