"""
Product sources for multi-source research.

No retail site is scraped. Each shipped source asks the text generator
what it knows about the product as that marketplace would list it, then
sorts the reply's lines into specifications and features. Scraping
sources can be added by implementing IProductSource.
"""

import logging
import re
from urllib.parse import quote

from listsmith.core.exceptions import ListSmithError
from listsmith.core.interfaces import IProductSource, ITextGenerator
from listsmith.core.models import ProductSourceData

logger = logging.getLogger(__name__)

LOOKUP_SYSTEM_PROMPT = (
    "You are a product research expert. Provide accurate product "
    "information based on your knowledge."
)

AI_SOURCE_CONFIDENCE = 0.6
MAX_FINDINGS_PER_SOURCE = 5

_SPEC_MARKERS = ("spec", "dimension", "weight", "material")
_FEATURE_MARKERS = ("feature", "capability", "function")
_BRAND_RE = re.compile(r"brand[:\s]+([a-zA-Z0-9\s]+)", re.IGNORECASE)


def parse_lookup_reply(reply: str) -> tuple[list[str], list[str], str]:
    """
    Sort a free-text lookup reply into (specifications, features, brand).

    Only lines of 11-199 characters are considered. The brand is the first
    word after a ``brand:`` mention.
    """
    specifications: list[str] = []
    features: list[str] = []

    for line in reply.split("\n"):
        cleaned = line.strip()
        if not (10 < len(cleaned) < 200):
            continue
        if any(marker in line for marker in _SPEC_MARKERS):
            specifications.append(cleaned)
        elif any(marker in line for marker in _FEATURE_MARKERS):
            features.append(cleaned)

    brand = ""
    match = _BRAND_RE.search(reply)
    if match:
        brand = match.group(1).strip().split(" ")[0]

    return specifications, features, brand


class AILookupSource(IProductSource):
    """
    Asks the generator about a product as listed on one marketplace.

    Args:
        name: Marketplace name, e.g. ``"Amazon"``.
        url_template: Search URL with a ``{query}`` placeholder, recorded
            on the result for reference.
        query_suffix: Appended to the title to form the lookup query.
        generator: Text generator; without one the source returns None.
    """

    def __init__(
        self,
        name: str,
        url_template: str,
        generator: ITextGenerator | None = None,
        query_suffix: str = "",
    ):
        self.name = name
        self.url_template = url_template
        self.query_suffix = query_suffix
        self._generator = generator

    def build_query(self, title: str) -> str:
        return f"{title}{self.query_suffix}"

    async def fetch(self, title: str) -> ProductSourceData | None:
        if self._generator is None:
            return None

        query = self.build_query(title)
        prompt = (
            f'Research detailed information about: "{query}". Provide specific '
            "technical specifications, features, brand information. Focus on "
            "factual information you are confident about."
        )

        try:
            reply = await self._generator.generate(
                prompt,
                system_prompt=LOOKUP_SYSTEM_PROMPT,
                max_tokens=600,
                temperature=0.2,
            )
        except ListSmithError as e:
            logger.warning(f"{self.name} lookup failed for '{query}': {e}")
            return None

        specifications, features, brand = parse_lookup_reply(reply)
        return ProductSourceData(
            source=f"{self.name} (AI Research)",
            url=self.url_template.format(query=quote(query)),
            title=query,
            brand=brand,
            specifications=specifications[:MAX_FINDINGS_PER_SOURCE],
            features=features[:MAX_FINDINGS_PER_SOURCE],
            confidence=AI_SOURCE_CONFIDENCE,
        )


def default_sources(generator: ITextGenerator | None) -> list[IProductSource]:
    """The marketplaces consulted for every research request, in order."""
    return [
        AILookupSource(
            "Google Shopping",
            "https://www.google.com/search?q={query}&tbm=shop",
            generator,
            query_suffix=" specs",
        ),
        AILookupSource("Amazon", "https://www.amazon.com/s?k={query}", generator),
        AILookupSource("eBay", "https://www.ebay.com/sch/i.html?_nkw={query}", generator),
    ]
