"""
Small text helpers shared by the section parser and the HTML renderer.

Generated descriptions arrive as loosely formatted markdown: bold runs,
``#`` headings, stray asterisks and emoji-prefixed headings. These helpers
normalize such fragments without touching anything else.
"""

import re

# Symbol/dingbat blocks plus the common pictograph planes
EMOJI_CHARS = (
    "\u2600-\u26FF"
    "\u2700-\u27BF"
    "\u2B50-\u2B55"
    "\U0001F300-\U0001F6FF"
    "\U0001F900-\U0001F9FF"
    "\U0001FA70-\U0001FAFF"
)

# One emoji, optionally followed by the emoji-presentation selector
EMOJI_PATTERN = f"[{EMOJI_CHARS}]\ufe0f?"

_EMOJI_RE = re.compile(f"[{EMOJI_CHARS}\ufe0f]")
_BOLD_RE = re.compile(r"\*\*(.*?)\*\*")
_WHITESPACE_RE = re.compile(r"\s+")

# Astral characters (most emoji) keep the space that follows them
_FIRST_CHAR_GAP_RE = re.compile(r"^([^\U00010000-\U0010FFFF])\s+(.*)$")
_FIRST_CHAR_SPACE_RE = re.compile(r"^([^\U00010000-\U0010FFFF])\s")


def collapse_whitespace(text: str) -> str:
    """Collapse runs of whitespace to one space and trim."""
    return _WHITESPACE_RE.sub(" ", text).strip()


def strip_bold(text: str) -> str:
    """Unwrap ``**bold**`` runs, keeping their content."""
    return _BOLD_RE.sub(r"\1", text)


def strip_emoji(text: str) -> str:
    """Remove emoji and collapse the whitespace they leave behind."""
    return collapse_whitespace(_EMOJI_RE.sub("", text))


def clean_title(text: str) -> str:
    """
    Normalize a section heading.

    Removes markdown heading/bold markers, collapses whitespace and drops
    any whitespace directly after the first character. Applying it twice
    gives the same result as applying it once.
    """
    text = re.sub(r"^#+\s*", "", text)
    text = re.sub(r"^\*+\s*", "", text)
    text = re.sub(r"\*+$", "", text)
    text = text.replace("*", "").replace("#", "")
    text = collapse_whitespace(text)
    text = _FIRST_CHAR_GAP_RE.sub(r"\1\2", text)
    text = _FIRST_CHAR_SPACE_RE.sub(r"\1", text)
    return text.strip()
