"""
Product research orchestration.

Research runs an ordered chain of strategies. Each strategy either returns
a record or raises ResearchUnavailableError, and the chain moves on:

    1. MultiSourceStrategy: query every product source, reconcile results
    2. EnhancedAIResearchStrategy: one strict single-shot generator call
    3. DefaultDataStrategy: fixed placeholder record, never fails

The service holds no per-request state; images travel inside the record.
"""

import logging

from listsmith.core.exceptions import ListSmithError, ResearchUnavailableError
from listsmith.core.interfaces import IProductSource, IResearchStrategy, ITextGenerator
from listsmith.core.models import ProductResearchData, ProductSourceData
from listsmith.research.reconciler import (
    ResearchReconciler,
    default_research_data,
    parse_research_reply,
)

logger = logging.getLogger(__name__)

ENHANCED_RESEARCH_SYSTEM_PROMPT = (
    "You are a product research expert with access to comprehensive product "
    "databases. Provide accurate, factual information."
)


def build_enhanced_research_prompt(title: str) -> str:
    return f"""
You are a professional product researcher with access to comprehensive technical databases. Provide accurate, detailed information about: "{title}"

Focus EXCLUSIVELY on factual, technical information you are confident about. Include:
- Specific technical specifications with exact measurements, weights, dimensions
- Key features that describe actual functionality and capabilities
- Brand information and product model details
- Product category classification
- Technical compatibility and requirements

Return as JSON:
{{
  "specifications": ["extremely specific technical specs with exact measurements, model numbers, part numbers, technical standards"],
  "features": ["specific functional features that describe what the product actually does or includes"],
  "marketKeywords": ["relevant search keywords based on actual product attributes"],
  "productCategories": ["accurate product categories"],
  "brandInfo": "factual brand information",
  "confidence": 0.7
}}

STRICT REQUIREMENTS:
- ONLY include specifications that contain numbers, measurements, or technical details
- REJECT marketing language like "high quality", "premium", "durable", "reliable"
- FEATURES must describe actual functionality, not subjective qualities
- Include exact dimensions, weights, capacities, voltages, frequencies
- Include model numbers, part numbers, version numbers where known
- Include technical standards and compatibility information
- Include specific quantities (e.g., "includes 3 cables", "pack of 12")
- AVOID vague descriptions like "compact", "portable", "easy to use"
- If you don't have specific technical information, don't guess or generalize
- Only provide information you are highly confident is accurate
"""


# ─── Strategies ──────────────────────────────────────────────


class MultiSourceStrategy(IResearchStrategy):
    """Look the product up in every source, then reconcile the findings."""

    name = "multi_source"

    def __init__(self, sources: list[IProductSource], reconciler: ResearchReconciler):
        self._sources = sources
        self._reconciler = reconciler

    async def _collect(self, title: str) -> list[ProductSourceData]:
        results: list[ProductSourceData] = []
        for source in self._sources:
            try:
                found = await source.fetch(title)
            except ListSmithError as e:
                logger.warning(f"Source '{source.name}' failed for '{title}': {e}")
                continue
            if found is not None:
                results.append(found)
        return results

    async def research(self, title: str) -> ProductResearchData:
        results = await self._collect(title)
        if not results:
            raise ResearchUnavailableError(self.name, "no source returned data")

        logger.info(f"Collected {len(results)} source(s) for '{title}'")
        return await self._reconciler.reconcile(results, title)


class EnhancedAIResearchStrategy(IResearchStrategy):
    """Ask the generator directly for a strict, facts-only research record."""

    name = "enhanced_ai"

    def __init__(self, generator: ITextGenerator | None):
        self._generator = generator

    async def research(self, title: str) -> ProductResearchData:
        if self._generator is None:
            raise ResearchUnavailableError(self.name, "no text generator configured")

        try:
            reply = await self._generator.generate(
                build_enhanced_research_prompt(title),
                system_prompt=ENHANCED_RESEARCH_SYSTEM_PROMPT,
                max_tokens=1000,
                temperature=0.2,
            )
            return parse_research_reply(reply)
        except ListSmithError as e:
            raise ResearchUnavailableError(self.name, str(e)) from e


class DefaultDataStrategy(IResearchStrategy):
    """Terminal strategy: the fixed placeholder record."""

    name = "default"

    async def research(self, title: str) -> ProductResearchData:
        return default_research_data()


# ─── Service ─────────────────────────────────────────────────


class ProductResearchService:
    """
    Researches a product title through the strategy chain.

    Usage:
        service = ProductResearchService(generator, default_sources(generator))
        record = await service.research("Pokemon Scarlet & Violet Elite Trainer Box")
    """

    def __init__(
        self,
        generator: ITextGenerator | None,
        sources: list[IProductSource],
        strategies: list[IResearchStrategy] | None = None,
    ):
        self._strategies = strategies or [
            MultiSourceStrategy(sources, ResearchReconciler(generator)),
            EnhancedAIResearchStrategy(generator),
            DefaultDataStrategy(),
        ]

    async def research(self, title: str) -> ProductResearchData:
        """Return the first record any strategy produces; the default record otherwise."""
        for strategy in self._strategies:
            try:
                record = await strategy.research(title)
            except ResearchUnavailableError as e:
                logger.info(f"Research fallback for '{title}': {e.message}")
                continue

            logger.info(
                f"Research for '{title}' resolved by '{strategy.name}' "
                f"(confidence {record.confidence:.2f})"
            )
            return record

        return default_research_data()
