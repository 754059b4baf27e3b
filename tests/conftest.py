"""
Shared test fixtures for ListSmith test suite.
"""

import pytest

from listsmith.core.exceptions import TextGenerationError
from listsmith.core.interfaces import ITextGenerator
from listsmith.core.models import (
    ColorPalette,
    ProductResearchData,
    ProductSourceData,
)


class FakeTextGenerator(ITextGenerator):
    """
    Scripted generator: returns queued replies in order.

    A queued exception instance is raised instead of returned. Every call is
    recorded in ``calls`` as a dict of its arguments.
    """

    def __init__(self, *replies, model: str = "test-model"):
        self.model = model
        self._replies = list(replies)
        self.calls: list[dict] = []

    async def generate(self, prompt, system_prompt="", max_tokens=1000, temperature=0.7):
        self.calls.append(
            {
                "prompt": prompt,
                "system_prompt": system_prompt,
                "max_tokens": max_tokens,
                "temperature": temperature,
            }
        )
        if not self._replies:
            raise TextGenerationError("No scripted reply left")
        reply = self._replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def fake_generator_factory():
    """Build a FakeTextGenerator with the given scripted replies."""
    return FakeTextGenerator


WIRELESS_MOUSE_TEXT = (
    "**Wireless Mouse**\n\n"
    "**Key Features**:\n"
    "- 2.4GHz connection\n"
    "- 6-month battery\n\n"
    "**Box Contents**:\n"
    "- 1x Mouse\n"
    "- 1x USB receiver\n\n"
    "#Wireless #Mouse"
)


@pytest.fixture
def wireless_mouse_text() -> str:
    """A short generated description with a title, two lists and hashtags."""
    return WIRELESS_MOUSE_TEXT


@pytest.fixture
def sample_palette() -> ColorPalette:
    """A palette with two tile backgrounds for rotation tests."""
    return ColorPalette(
        primary_color="#112233",
        text_color="#444444",
        light_backgrounds=["#AAAAAA", "#BBBBBB"],
    )


@pytest.fixture
def amazon_source() -> ProductSourceData:
    """A confident source naming the brand."""
    return ProductSourceData(
        source="Amazon (AI Research)",
        url="https://www.amazon.com/s?k=Logitech%20MX%20Master%203S",
        title="Logitech MX Master 3S",
        brand="Logitech",
        specifications=[
            "Weight: 141 g",
            "Sensor resolution: 8000 DPI",
            "High quality premium build",
        ],
        features=[
            "Connects via Bluetooth Low Energy or Logi Bolt USB receiver",
            "Amazing and beautiful",
        ],
        images=["https://img.example.com/mx-1.jpg", "https://img.example.com/mx-2.jpg"],
        confidence=0.9,
    )


@pytest.fixture
def ebay_source() -> ProductSourceData:
    """A less confident source without a brand."""
    return ProductSourceData(
        source="eBay (AI Research)",
        url="https://www.ebay.com/sch/i.html?_nkw=Logitech%20MX%20Master%203S",
        title="Logitech MX Master 3S",
        specifications=["Battery: 500 mAh rechargeable Li-Po", "Weight: 141 g"],
        features=["USB-C quick charging gives 3 hours of use in 1 minute"],
        images=["https://img.example.com/mx-2.jpg", "https://img.example.com/mx-3.jpg"],
        confidence=0.6,
    )


@pytest.fixture
def sample_research() -> ProductResearchData:
    """A reconciled research record for prompt-building tests."""
    return ProductResearchData(
        specifications=["Sensor resolution: 8000 DPI", "Weight: 141 g"],
        features=["Connects via Bluetooth Low Energy or Logi Bolt USB receiver"],
        market_keywords=["logitech", "wireless", "bluetooth"],
        product_categories=["Electronics"],
        brand_info="Logitech - verified from multiple sources",
        brand="Logitech",
        confidence=0.75,
        sources=["Amazon (AI Research)", "eBay (AI Research)"],
    )
