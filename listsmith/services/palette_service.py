"""
Color palette selection for rendered listings.

Resolution order:
    1. Product images + generator → AI-suggested palette
    2. Color words in the title (gold, silver, black, ...) → keyword palette
    3. Default blue palette

Never raises: a generator failure falls through to the title palette and
an unreadable reply yields the default palette.
"""

import json
import logging
import re

from listsmith.core.exceptions import ListSmithError
from listsmith.core.interfaces import ITextGenerator
from listsmith.core.models import ColorPalette

logger = logging.getLogger(__name__)

PALETTE_SYSTEM_PROMPT = (
    "You are a color design expert. Create professional, accessible color "
    "palettes for e-commerce listings."
)

_JSON_BLOCK_RE = re.compile(r"\{[\s\S]*\}")

# Checked in order; the first palette whose keyword appears in the title wins
KEYWORD_PALETTES: tuple[tuple[tuple[str, ...], ColorPalette], ...] = (
    (
        ("gold", "golden"),
        ColorPalette(
            primary_color="#FFD700",
            secondary_color="#B8860B",
            accent_color="#FFA500",
            background_color="#FFFEF7",
            text_color="#2C1810",
            light_backgrounds=["#FFFEF7", "#FFF8DC", "#FFEFD5"],
        ),
    ),
    (
        ("silver", "chrome", "steel"),
        ColorPalette(
            primary_color="#C0C0C0",
            secondary_color="#708090",
            accent_color="#4682B4",
            background_color="#F8F8FF",
            text_color="#2F4F4F",
            light_backgrounds=["#F8F8FF", "#F0F8FF", "#E6E6FA"],
        ),
    ),
    (
        ("black", "dark"),
        ColorPalette(
            primary_color="#2C2C2C",
            secondary_color="#696969",
            accent_color="#4169E1",
            background_color="#FAFAFA",
            text_color="#1C1C1C",
            light_backgrounds=["#FAFAFA", "#F5F5F5", "#E8E8E8"],
        ),
    ),
    (
        ("red", "crimson", "ruby"),
        ColorPalette(
            primary_color="#DC143C",
            secondary_color="#B22222",
            accent_color="#FF6347",
            background_color="#FFF5F5",
            text_color="#8B0000",
            light_backgrounds=["#FFF5F5", "#FFE4E1", "#FFCCCB"],
        ),
    ),
    (
        ("blue", "navy", "azure"),
        ColorPalette(
            primary_color="#1E90FF",
            secondary_color="#4682B4",
            accent_color="#00BFFF",
            background_color="#F0F8FF",
            text_color="#191970",
            light_backgrounds=["#F0F8FF", "#E6F2FF", "#DDEEFF"],
        ),
    ),
    (
        ("green", "emerald", "forest"),
        ColorPalette(
            primary_color="#228B22",
            secondary_color="#32CD32",
            accent_color="#00FF7F",
            background_color="#F0FFF0",
            text_color="#006400",
            light_backgrounds=["#F0FFF0", "#E6FFE6", "#CCFFCC"],
        ),
    ),
    (
        ("leather", "brown", "wood"),
        ColorPalette(
            primary_color="#8B4513",
            secondary_color="#A0522D",
            accent_color="#D2691E",
            background_color="#FFF8DC",
            text_color="#654321",
            light_backgrounds=["#FFF8DC", "#F5DEB3", "#DEB887"],
        ),
    ),
)


def default_palette() -> ColorPalette:
    return ColorPalette()


def palette_from_title(title: str) -> ColorPalette:
    """Pick a palette from color words in the title, else the default."""
    lowered = title.lower()
    for keywords, palette in KEYWORD_PALETTES:
        if any(keyword in lowered for keyword in keywords):
            return palette.model_copy(deep=True)
    return default_palette()


def parse_palette_reply(reply: str) -> ColorPalette:
    """
    Read a palette from the first ``{...}`` block of a reply.

    Missing or non-string colors fall back to the default palette's values.
    Returns the default palette when no JSON object can be read.
    """
    match = _JSON_BLOCK_RE.search(reply or "")
    if not match:
        return default_palette()
    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError:
        logger.warning("Palette reply JSON could not be decoded; using default palette")
        return default_palette()
    if not isinstance(parsed, dict):
        return default_palette()

    fallback = default_palette()
    colors = {}
    for field_name, field in ColorPalette.model_fields.items():
        if field_name == "light_backgrounds":
            continue
        value = parsed.get(field.alias)
        colors[field_name] = value if isinstance(value, str) and value else getattr(fallback, field_name)

    backgrounds = parsed.get("lightBackgrounds")
    if not (isinstance(backgrounds, list) and backgrounds and all(isinstance(b, str) for b in backgrounds)):
        backgrounds = fallback.light_backgrounds

    return ColorPalette(**colors, light_backgrounds=backgrounds)


def build_palette_prompt(image_urls: list[str]) -> str:
    return f"""Based on these product image URLs: {', '.join(image_urls)}, suggest a professional color palette for an eBay listing.

Consider the likely product colors and create a harmonious palette with:
- Primary color (main product color)
- Secondary color (complementary)
- Accent color (for highlights)
- Background color (light, readable)
- Text color (high contrast)
- 3 light background variations

Return as JSON:
{{
  "primaryColor": "#hex",
  "secondaryColor": "#hex",
  "accentColor": "#hex",
  "backgroundColor": "#hex",
  "textColor": "#hex",
  "lightBackgrounds": ["#hex1", "#hex2", "#hex3"]
}}

Ensure high contrast for readability and professional appearance."""


class PaletteService:
    """Chooses the color palette used to render a listing."""

    def __init__(self, generator: ITextGenerator | None = None):
        self._generator = generator

    async def generate_palette(self, images: list[str], title: str) -> ColorPalette:
        if not images or self._generator is None:
            return palette_from_title(title)

        try:
            reply = await self._generator.generate(
                build_palette_prompt(images),
                system_prompt=PALETTE_SYSTEM_PROMPT,
                max_tokens=300,
                temperature=0.3,
            )
        except ListSmithError as e:
            logger.warning(f"AI palette generation failed for '{title}': {e}")
            return palette_from_title(title)

        return parse_palette_reply(reply)
