"""
Reconciliation of per-source product findings into one research record.

Two paths produce the record:

    AI cross-validation: the generator reviews every source side by side
        and answers with a JSON profile; the specificity rules are then
        re-applied to its specifications and features.
    Deterministic merge: used when no generator is configured or the
        cross-validation call/reply fails in any way.

Both paths attach the deduplicated source images (at most five).
"""

import json
import logging
import math
import re

from pydantic import ValidationError

from listsmith.core.exceptions import ListSmithError, MalformedReplyError
from listsmith.core.interfaces import ITextGenerator
from listsmith.core.models import ProductResearchData, ProductSourceData
from listsmith.research.specificity import (
    DEFAULT_CATEGORY,
    categorize_product,
    generate_keywords,
    is_specific_feature,
    is_specific_specification,
)

logger = logging.getLogger(__name__)

MAX_SPECIFICATIONS = 15
MAX_FEATURES = 12
MAX_IMAGES = 5

# Raw findings outside these bounds are noise or pasted paragraphs
_MIN_FINDING_LENGTH = 5
_MAX_FINDING_LENGTH = 200

_BULLET_PREFIX_RE = re.compile(r"^[•\-*]\s*")
_EDGE_PUNCTUATION_RE = re.compile(r"^[:\-\s]+|[:\-\s]+$")
_WHITESPACE_RE = re.compile(r"\s+")
_JSON_BLOCK_RE = re.compile(r"\{[\s\S]*\}")

VALIDATION_SYSTEM_PROMPT = (
    "You are a product research analyst. Extract and structure product "
    "information from web search results into JSON format."
)


# ─── Deterministic Merge ─────────────────────────────────────


def _clean_finding(text: str) -> str:
    text = _BULLET_PREFIX_RE.sub("", text.strip())
    text = _WHITESPACE_RE.sub(" ", text)
    return _EDGE_PUNCTUATION_RE.sub("", text)


def _collect(findings: list[str], accepted: list[str], is_specific) -> None:
    """Append cleaned, specific, previously unseen findings to ``accepted``."""
    for finding in findings:
        if not (_MIN_FINDING_LENGTH < len(finding) < _MAX_FINDING_LENGTH):
            continue
        if finding in accepted or not is_specific(finding):
            continue

        cleaned = _clean_finding(finding)
        if len(cleaned) > _MIN_FINDING_LENGTH and cleaned not in accepted:
            accepted.append(cleaned)


def _unique_images(sources: list[ProductSourceData]) -> list[str]:
    images: list[str] = []
    for source in sources:
        for image in source.images:
            if image and image not in images:
                images.append(image)
    return images


def merge_sources(sources: list[ProductSourceData]) -> ProductResearchData:
    """
    Merge per-source findings without any generator involvement.

    Specifications and features are filtered by the specificity rules,
    deduplicated, ranked longest-first and capped. The brand comes from the
    most confident source that names one; on a tie the earlier source wins.
    """
    specifications: list[str] = []
    features: list[str] = []
    source_names: list[str] = []

    best_brand = ""
    best_brand_confidence = 0.0
    total_confidence = 0.0

    for source in sources:
        _collect(source.specifications, specifications, is_specific_specification)
        _collect(source.features, features, is_specific_feature)

        if source.brand and source.confidence > best_brand_confidence:
            best_brand = source.brand
            best_brand_confidence = source.confidence

        total_confidence += source.confidence
        if source.source not in source_names:
            source_names.append(source.source)

    specifications.sort(key=len, reverse=True)
    features.sort(key=len, reverse=True)

    if best_brand:
        brand_info = f"{best_brand} - verified from multiple sources"
    else:
        brand_info = "Brand information gathered from product research"

    return ProductResearchData(
        specifications=specifications[:MAX_SPECIFICATIONS],
        features=features[:MAX_FEATURES],
        market_keywords=generate_keywords(specifications, features, best_brand),
        product_categories=categorize_product(specifications, features),
        brand_info=brand_info,
        product_images=_unique_images(sources)[:MAX_IMAGES],
        brand=best_brand,
        confidence=total_confidence / len(sources) if sources else 0.0,
        sources=source_names,
    )


# ─── Reply Parsing ───────────────────────────────────────────


def _string_list(value) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def _confidence(value) -> float:
    """Clamp a reply confidence to [0, 1]; missing or non-finite values become 0.5."""
    if not isinstance(value, (int, float)) or not value:
        return 0.5
    try:
        value = float(value)
    except OverflowError:
        return 0.5
    if not math.isfinite(value):
        return 0.5
    return min(max(value, 0.0), 1.0)


def parse_research_reply(reply: str) -> ProductResearchData:
    """
    Build a research record from the first ``{...}`` block of a reply.

    Missing fields are defaulted (confidence 0.5, sources ``["AI Analysis"]``)
    and over-long lists are truncated to the record's caps.

    Raises:
        MalformedReplyError: If the reply holds no parsable JSON object.
    """
    match = _JSON_BLOCK_RE.search(reply or "")
    if not match:
        raise MalformedReplyError("Research reply contained no JSON object")

    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise MalformedReplyError(
            "Research reply JSON could not be decoded",
            details={"error": str(e)},
        ) from e

    if not isinstance(parsed, dict):
        raise MalformedReplyError("Research reply JSON is not an object")

    confidence = _confidence(parsed.get("confidence"))

    try:
        return ProductResearchData(
            specifications=_string_list(parsed.get("specifications"))[:MAX_SPECIFICATIONS],
            features=_string_list(parsed.get("features"))[:MAX_FEATURES],
            market_keywords=_string_list(parsed.get("marketKeywords")),
            product_categories=_string_list(parsed.get("productCategories")),
            brand_info=str(parsed.get("brandInfo") or ""),
            brand=str(parsed.get("brand") or ""),
            model=str(parsed.get("model") or ""),
            sku=str(parsed.get("sku") or ""),
            confidence=confidence,
            sources=_string_list(parsed.get("sources")) or ["AI Analysis"],
        )
    except ValidationError as e:
        raise MalformedReplyError(
            "Research reply does not fit a research record",
            details={"error": str(e)},
        ) from e


def default_research_data() -> ProductResearchData:
    """Placeholder record used when no research could be done."""
    return ProductResearchData(
        specifications=["Product research in progress - enhanced data requires API configuration"],
        features=["Professional-grade quality", "Reliable performance", "Excellent value"],
        market_keywords=["quality", "reliable", "fast shipping", "authentic"],
        product_categories=[DEFAULT_CATEGORY],
        brand_info="Brand information requires enhanced research configuration",
        confidence=0.3,
        sources=["Default Data"],
    )


# ─── AI Cross-Validation ─────────────────────────────────────


def build_validation_prompt(sources: list[ProductSourceData], title: str) -> str:
    """Prompt asking the generator to reconcile the sources into one JSON profile."""
    blocks = "\n".join(
        f"\nSource {index}: {source.source} (Confidence: {source.confidence})\n"
        f"Title: {source.title}\n"
        f"Brand: {source.brand or 'Not specified'}\n"
        f"Specifications: {'; '.join(source.specifications)}\n"
        f"Features: {'; '.join(source.features)}\n"
        for index, source in enumerate(sources, start=1)
    )

    return f"""
You are a product data analyst with expertise in technical specifications. Review the following product information collected from multiple sources and create a comprehensive, accurate product profile.

Product: "{title}"

Source Data:
{blocks}

Task: Create a unified, accurate product profile by:
1. Cross-referencing information across sources
2. Resolving conflicts by prioritizing higher-confidence sources
3. Extracting only verified, consistent information
4. Identifying the most reliable brand, specifications, and features
5. Filtering out marketing language and focusing on technical facts

Return as JSON:
{{
  "specifications": ["verified technical specifications with exact measurements, model numbers, part numbers, compatibility details"],
  "features": ["confirmed specific features that describe actual functionality, not marketing claims"],
  "marketKeywords": ["relevant eBay keywords based on the product data"],
  "productCategories": ["accurate categories based on specifications"],
  "brandInfo": "verified brand information and reputation",
  "brand": "confirmed brand name",
  "model": "product model if identified",
  "confidence": 0.8,
  "sources": ["source names that provided data"]
}}

CRITICAL RULES:
- ONLY include specifications that contain numbers, measurements, model numbers, or technical details
- REJECT any specifications that are marketing language (e.g., "high quality", "durable", "premium")
- FEATURES must describe actual functionality, not subjective qualities
- Include exact dimensions (e.g., "12.5 x 8.3 x 2.1 inches"), weights (e.g., "2.4 lbs"), capacities (e.g., "500GB storage")
- Include technical specifications like voltages, frequencies, compatibility standards
- Include model numbers, part numbers, SKUs, version numbers
- Include compatibility information (e.g., "compatible with iPhone 12/13/14")
- Include quantities and contents (e.g., "includes 2 cables, 1 adapter, 1 manual")
- AVOID vague terms like "compact", "portable", "easy to use", "reliable"
- PRIORITIZE information from Amazon and manufacturer specifications over eBay listings
- If conflicting information exists, use the most technically detailed source
"""


class ResearchReconciler:
    """
    Turns a set of source findings into one trusted research record.

    Usage:
        reconciler = ResearchReconciler(generator)
        record = await reconciler.reconcile(sources, "Logitech MX Master 3S")
    """

    def __init__(self, generator: ITextGenerator | None = None):
        self._generator = generator

    async def reconcile(
        self,
        sources: list[ProductSourceData],
        title: str,
    ) -> ProductResearchData:
        """
        Cross-validate sources with the generator, else merge them.

        Never raises for generator or reply failures; those fall back to
        the deterministic merge.
        """
        if self._generator is None:
            return merge_sources(sources)

        try:
            reply = await self._generator.generate(
                build_validation_prompt(sources, title),
                system_prompt=VALIDATION_SYSTEM_PROMPT,
                max_tokens=1000,
                temperature=0.3,
            )
            record = parse_research_reply(reply)
        except ListSmithError as e:
            logger.warning(f"Cross-validation failed for '{title}', merging sources: {e}")
            return merge_sources(sources)

        record.specifications = [
            s for s in record.specifications if is_specific_specification(s)
        ]
        record.features = [f for f in record.features if is_specific_feature(f)]
        record.product_images = _unique_images(sources)[:MAX_IMAGES]

        logger.info(
            f"Cross-validated {len(sources)} sources for '{title}': "
            f"{len(record.specifications)} specs, {len(record.features)} features"
        )
        return record
