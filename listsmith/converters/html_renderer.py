"""
Tiled HTML rendering of segmented listing descriptions.

Produces one self-contained HTML fragment with inline CSS only, since eBay
strips <style> tags. Tiles alternate through the palette's light
backgrounds; headings use the palette's primary color.

Usage:
    output = convert_to_html(generated_text, palette, product_title="Wireless Mouse")
    output.html       # the listing HTML
    output.sections   # the sections it was rendered from

Rendering is deterministic: the same text and palette always produce
identical bytes. Item text is emitted as-is (no HTML escaping), so
generated markup such as <br> survives into the listing.
"""

from dataclasses import dataclass, field

from listsmith.converters.section_parser import Section, segment_description
from listsmith.core.models import ColorPalette
from listsmith.core.text_utils import clean_title, strip_emoji

# Used when no product palette has been generated yet
FALLBACK_RENDER_PALETTE = ColorPalette(
    primary_color="#0066cc",
    text_color="#333",
    light_backgrounds=["#fff", "#f4f8fd"],
)

_TILE_BORDER = "#e0e0e0"
_TITLE_TEXT_COLOR = "#222"


@dataclass
class ConversionOutput:
    """Rendered HTML plus the intermediate results that produced it."""

    html: str
    title: str
    sections: list[Section] = field(default_factory=list)
    palette: ColorPalette = field(
        default_factory=lambda: FALLBACK_RENDER_PALETTE.model_copy(deep=True)
    )

    def to_dict(self) -> dict:
        return {
            "html": self.html,
            "title": self.title,
            "sections": [s.to_dict() for s in self.sections],
            "palette": self.palette.model_dump(by_alias=True),
        }


# ─── Public API ──────────────────────────────────────────────


def convert_to_html(
    text: str,
    palette: ColorPalette | None = None,
    product_title: str = "",
) -> ConversionOutput:
    """
    Convert generated description text into listing HTML.

    Args:
        text: Raw generated description.
        palette: Colors for tiles and headings; the fallback palette if None.
        product_title: Seller-entered title, used when the text has none.

    Returns:
        ConversionOutput with the full HTML document fragment.
    """
    if palette is None:
        palette = FALLBACK_RENDER_PALETTE.model_copy(deep=True)
    segmented = segment_description(text, product_title)

    top_title = (
        strip_emoji(segmented.title)
        or strip_emoji(product_title)
        or product_title
        or "Product Title"
    )
    body = render_sections(segmented.sections, palette)

    html = (
        '<div style="font-family:Arial,sans-serif;max-width:800px;margin:0 auto;padding:20px;">\n'
        "\n"
        f'<div style="font-size:2.2em;font-weight:bold;color:{_TITLE_TEXT_COLOR};'
        f'margin-bottom:0.5em;line-height:1.1;">{top_title}</div>\n'
        "\n"
        f"{body}\n"
        "\n"
        "</div>"
    )
    return ConversionOutput(
        html=html,
        title=top_title,
        sections=segmented.sections,
        palette=palette,
    )


def render_sections(sections: list[Section], palette: ColorPalette) -> str:
    """
    Render sections to HTML blocks separated by blank lines.

    Sections with no title and no meaningful item are skipped. Every
    remaining tile section advances the background rotation, even when it
    renders to nothing.
    """
    blocks: list[str] = []
    tile_idx = 0

    for section in sections:
        if not _has_content(section):
            continue

        if section.is_tile:
            block = _render_tile(section, palette, palette.tile_background(tile_idx))
            tile_idx += 1
        else:
            block = _render_plain(section, palette)

        if block.strip():
            blocks.append(block)

    return "\n\n".join(blocks)


# ─── Block Renderers ─────────────────────────────────────────


def _has_content(section: Section) -> bool:
    return bool(section.title.strip()) or any(
        item.strip() and item != "---" for item in section.items
    )


def _hashtag_line(items: list[str], palette: ColorPalette) -> str:
    return (
        f'<div style="color:{palette.primary_color};font-weight:bold;'
        f'margin-top:24px;font-size:16px;text-align:center;">{" ".join(items)}</div>'
    )


def _render_tile(section: Section, palette: ColorPalette, background: str) -> str:
    if "".join(section.title.lower().split()) == "hashtags":
        return _hashtag_line(section.items, palette)

    title = clean_title(section.title)
    if not title and not section.items:
        return ""

    tile_style = (
        f"background:{background};margin:24px 0;padding:20px 16px;"
        f"border-radius:8px;border:1px solid {_TILE_BORDER};"
    )
    title_style = (
        f"color:{palette.primary_color};font-size:18px;"
        "margin-bottom:12px;font-weight:bold;"
    )
    heading = f'<h3 style="{title_style}">{title}</h3>'

    if section.items:
        if section.is_list:
            lines = [
                f'<p style="margin:5px 0;color:{palette.text_color};font-size:16px;">• {item}</p>'
                for item in section.items
            ]
        else:
            lines = [
                f'<p style="margin:0;color:{palette.text_color};font-size:16px;">{item}</p>'
                for item in section.items
            ]
        return f'<div style="{tile_style}">\n{heading}\n' + "\n".join(lines) + "\n</div>"

    if title:
        return f'<div style="{tile_style}">\n{heading}\n</div>'
    return ""


def _render_plain(section: Section, palette: ColorPalette) -> str:
    if not section.items:
        return ""

    if section.is_list:
        return "".join(
            f"<p style='margin:5px 0;color:{palette.text_color};font-size:16px;'>• {item}</p>"
            for item in section.items
        )

    if section.items[0].startswith("#"):
        return _hashtag_line(section.items, palette)

    paragraph_style = f"line-height:1.6;color:{palette.text_color};margin:15px 0;"
    return "".join(f"<p style='{paragraph_style}'>{item}</p>" for item in section.items)
