"""
Tests for tiled HTML rendering.

Verifies:
- Tile backgrounds rotate through the palette's light backgrounds
- Hashtag sections render as a centered line
- The fallback palette is used when none is given
- Top-title fallbacks (generated → product title → "Product Title")
- Rendering is byte-for-byte deterministic
"""

import re

from listsmith.converters.html_renderer import (
    FALLBACK_RENDER_PALETTE,
    ConversionOutput,
    convert_to_html,
    render_sections,
)
from listsmith.converters.section_parser import Section
from listsmith.core.models import ColorPalette

_BACKGROUND_RE = re.compile(r"background:(#[0-9A-Fa-f]+);")


class TestRenderSections:
    """Tests for block rendering."""

    def test_tile_backgrounds_alternate(self, sample_palette):
        sections = [
            Section(title="Specs", items=["141 g"], is_list=True, is_tile=True),
            Section(title="Features", items=["Bluetooth"], is_list=True, is_tile=True),
            Section(title="Shipping", items=["Ships next day."], is_tile=True),
        ]
        html = render_sections(sections, sample_palette)

        assert _BACKGROUND_RE.findall(html) == ["#AAAAAA", "#BBBBBB", "#AAAAAA"]

    def test_list_items_get_bullets(self, sample_palette):
        sections = [Section(title="Specs", items=["141 g"], is_list=True, is_tile=True)]
        html = render_sections(sections, sample_palette)

        assert "• 141 g</p>" in html
        assert '<h3 style="color:#112233;' in html
        assert "color:#444444;" in html

    def test_empty_sections_skipped(self, sample_palette):
        sections = [
            Section(items=["---", "  "]),
            Section(title="Specs", items=["141 g"], is_tile=True),
        ]
        html = render_sections(sections, sample_palette)

        assert html.startswith("<div")
        assert _BACKGROUND_RE.findall(html) == ["#AAAAAA"]

    def test_heading_only_tile(self, sample_palette):
        html = render_sections([Section(title="Shipping", is_tile=True)], sample_palette)
        assert ">Shipping</h3>\n</div>" in html

    def test_hashtag_section(self, sample_palette):
        html = render_sections([Section(items=["#mouse #wireless"])], sample_palette)

        assert "text-align:center;" in html
        assert ">#mouse #wireless</div>" in html

    def test_plain_paragraphs(self, sample_palette):
        html = render_sections(
            [Section(items=["First paragraph.", "Second paragraph."])],
            sample_palette,
        )
        assert html.count("<p style='line-height:1.6;") == 2

    def test_blocks_joined_by_blank_line(self, sample_palette):
        sections = [
            Section(title="A", items=["1"], is_tile=True),
            Section(title="B", items=["2"], is_tile=True),
        ]
        html = render_sections(sections, sample_palette)
        assert "</div>\n\n<div" in html

    def test_empty_backgrounds_use_background_color(self):
        palette = ColorPalette(background_color="#123456", light_backgrounds=[])
        html = render_sections([Section(title="A", items=["1"], is_tile=True)], palette)
        assert _BACKGROUND_RE.findall(html) == ["#123456"]


class TestConvertToHtml:
    """Tests for the full conversion."""

    def test_wireless_mouse(self, wireless_mouse_text, sample_palette):
        output = convert_to_html(wireless_mouse_text, sample_palette)

        assert output.title == "Wireless Mouse"
        assert [s.title for s in output.sections] == ["Key Features", "Box Contents", ""]
        assert output.html.count(">Wireless Mouse</div>") == 1
        assert "<h3" in output.html and ">Key Features</h3>" in output.html
        assert _BACKGROUND_RE.findall(output.html) == ["#AAAAAA", "#BBBBBB"]
        assert ">#Wireless #Mouse</div>" in output.html
        assert output.html.startswith('<div style="font-family:Arial,sans-serif;')
        assert output.html.endswith("</div>")

    def test_fallback_palette(self, wireless_mouse_text):
        output = convert_to_html(wireless_mouse_text)

        assert output.palette == FALLBACK_RENDER_PALETTE
        assert "color:#0066cc;" in output.html
        assert _BACKGROUND_RE.findall(output.html) == ["#fff", "#f4f8fd"]

    def test_fallback_palette_not_shared_between_outputs(self):
        first = convert_to_html("**Lamp**")
        first.palette.light_backgrounds.append("#000")
        default_output = ConversionOutput(html="", title="")
        default_output.palette.primary_color = "#123456"

        second = convert_to_html("**Lamp**")

        assert first.palette is not FALLBACK_RENDER_PALETTE
        assert second.palette == FALLBACK_RENDER_PALETTE
        assert FALLBACK_RENDER_PALETTE.light_backgrounds == ["#fff", "#f4f8fd"]
        assert FALLBACK_RENDER_PALETTE.primary_color == "#0066cc"

    def test_title_from_product_title_without_emoji(self):
        output = convert_to_html("", product_title="\U0001F525 Hot Deal")
        assert output.title == "Hot Deal"

    def test_emoji_only_product_title_kept(self):
        output = convert_to_html("", product_title="\U0001F525")
        assert output.title == "\U0001F525"

    def test_placeholder_title(self):
        output = convert_to_html("")
        assert output.title == "Product Title"
        assert ">Product Title</div>" in output.html

    def test_deterministic(self, wireless_mouse_text, sample_palette):
        first = convert_to_html(wireless_mouse_text, sample_palette, "Wireless Mouse")
        second = convert_to_html(wireless_mouse_text, sample_palette, "Wireless Mouse")
        assert first.html == second.html

    def test_to_dict_uses_camel_case(self, wireless_mouse_text, sample_palette):
        data = convert_to_html(wireless_mouse_text, sample_palette).to_dict()

        assert set(data) == {"html", "title", "sections", "palette"}
        assert data["sections"][0]["isList"] is True
        assert data["palette"]["primaryColor"] == "#112233"
        assert data["palette"]["lightBackgrounds"] == ["#AAAAAA", "#BBBBBB"]
