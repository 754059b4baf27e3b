"""
Listing description generation.

Two entry points share one generator:

    generate(): title + research record → SEO description with a
        bold title line, Box Contents and hashtags.
    generate_listing(): free-text listing assistant with product-type
        rules (sneaker style codes, Pokemon ETB contents,
        presale notices).

Generated text for Pokemon products is corrected so an Elite Trainer Box
never claims 10 booster packs.
"""

import logging
import re
import time
from dataclasses import dataclass

from listsmith.core.exceptions import (
    ConfigurationError,
    DescriptionGenerationError,
    ListSmithError,
)
from listsmith.core.interfaces import ITextGenerator
from listsmith.core.models import (
    DescriptionRequest,
    GeneratedDescription,
    ListingOptions,
    ProductType,
)

logger = logging.getLogger(__name__)

DESCRIPTION_SYSTEM_PROMPT = (
    "You are an expert eBay listing description writer. Create compelling, "
    "SEO-optimized descriptions that drive sales."
)

# ─── Product Type Rules ──────────────────────────────────────

_SNEAKER_RE = re.compile(
    r"sneakers?|shoes?|nike|adidas|jordan|new.*balance|converse|vans|air.*max|boost|chuck.*taylor",
    re.IGNORECASE,
)
_POKEMON_RE = re.compile(r"pokemon|pokémon|elite.*trainer.*box|etb", re.IGNORECASE)
_PRESALE_RE = re.compile(r"presale", re.IGNORECASE)
_ETB_PACK_COUNT_RE = re.compile(r"10 (booster pack|Pokémon TCG booster pack)", re.IGNORECASE)

# Lowercased model/colorway name → manufacturer style code
STYLE_CODES: dict[str, str] = {
    # Air Jordan 1
    "jordan 1 chicago": "555088-101",
    "jordan 1 bred": "555088-010",
    "jordan 1 royal": "555088-007",
    "jordan 1 shadow": "555088-013",
    "jordan 1 bred toe": "555088-610",
    "jordan 1 shattered backboard": "555088-005",
    # Air Jordan 4
    "jordan 4 white cement": "840606-192",
    "jordan 4 bred": "308497-060",
    "jordan 4 black cat": "308497-002",
    "jordan 4 university blue": "308497-400",
    # Nike Dunk
    "dunk low panda": "DD1391-100",
    "dunk low chicago": "DD1503-101",
    # Adidas Yeezy
    "yeezy 350 v2 zebra": "CP9654",
    "yeezy 350 v2 bred": "CP9652",
    "yeezy 350 cream": "CP9366",
    # New Balance
    "new balance 990v5 grey": "M990GL5",
    "990v5 grey": "M990GL5",
}

LISTING_SYSTEM_PROMPT = """You are an expert eBay listing creator who generates accurate, compelling product descriptions.

CRITICAL RULES:
1. Generate ONLY ONE product description for the EXACT product requested
2. NEVER generate multiple product descriptions
3. NEVER add unrelated products or examples
4. For Pokemon Elite Trainer Boxes: ALWAYS 9 booster packs (never 10)
5. For Sneakers: MUST include Style Code/SKU prominently
6. Be factually accurate with specifications
7. Create engaging, conversion-focused copy
8. End with contextual "Happy Shopping!" message specific to the product type

Pokemon ETB Standard Contents:
- 9 booster packs (NEVER 10)
- 65 card sleeves
- 45 Energy cards
- 1 player's guide
- 6 damage-counter dice
- 1 coin-flip die
- 2 condition markers
- 1 collector's box with dividers
- 1 code card for online play

Output Structure:
- Title (exact product name)
- Description (compelling overview)
- Style Code/SKU (for sneakers only - in dedicated section)
- Key Features (4-6 bullet points)
- Specifications (technical details, materials)
- What's Included (exact contents)
- Sizing (for sneakers only)
- Authentication Details (for sneakers only)
- Condition (New in original packaging)
- Shipping (fast, secure, 1-2 days)
- Authenticity Guarantee
- Happy Shopping (contextual message)

Do NOT include "Research Sources" or "Important Notes" sections.
IMPORTANT: Generate ONLY the listing for the requested product. Do not add any additional products or examples."""

_SNEAKER_REQUIREMENTS = """SNEAKER REQUIREMENTS:
- Include Style Code/SKU in a dedicated prominent section
- Add comprehensive sizing information (US/UK/EU sizes, fit recommendations)
- Include authentication details (box labels, tags, unique features)
- Mention brand-specific technologies (Air Max, Boost, React, etc.)
- Include official colorway names
- Happy Shopping message should mention style, comfort, or the sneaker culture"""

_POKEMON_REQUIREMENTS = """POKEMON ETB REQUIREMENTS:
- MUST list 9 booster packs (not 10) - this is critical
- Include all standard ETB contents listed above
- Mention which Pokemon/set is featured
- Happy Shopping message should mention collecting, battles, or Pokemon journey"""


@dataclass(frozen=True)
class ProductProfile:
    """Product-type signals detected in a title or listing request."""

    is_sneaker: bool = False
    is_pokemon: bool = False
    is_presale: bool = False
    style_code: str | None = None

    @property
    def product_type(self) -> ProductType:
        if self.is_sneaker:
            return ProductType.SNEAKER
        if self.is_pokemon:
            return ProductType.POKEMON
        return ProductType.GENERAL


def find_style_code(product_name: str) -> str | None:
    """Look up a sneaker style code; the first table entry contained in the name wins."""
    lowered = product_name.lower()
    for name, code in STYLE_CODES.items():
        if name in lowered:
            return code
    return None


def detect_product(text: str) -> ProductProfile:
    is_sneaker = bool(_SNEAKER_RE.search(text))
    return ProductProfile(
        is_sneaker=is_sneaker,
        is_pokemon=bool(_POKEMON_RE.search(text)),
        is_presale=bool(_PRESALE_RE.search(text)),
        style_code=find_style_code(text) if is_sneaker else None,
    )


def fix_pokemon_pack_count(text: str) -> str:
    """Rewrite "10 booster pack" claims to the 9 packs an ETB actually holds."""
    return _ETB_PACK_COUNT_RE.sub(r"9 \1", text)


# ─── Prompt Builders ─────────────────────────────────────────


def build_prompt(request: DescriptionRequest) -> str:
    """Build the user prompt for title-based description generation."""
    title = request.product_title
    research_context = ""

    research = request.research_data
    if research is not None:
        specs = "\n".join(f"• {spec}" for spec in research.specifications)
        features = "\n".join(f"• {feature}" for feature in research.features)
        research_context = f"""

PRODUCT RESEARCH DATA:
Brand Information: {research.brand_info}
Product Categories: {', '.join(research.product_categories)}

Key Specifications:
{specs}

Key Features:
{features}

Market Keywords (use naturally for SEO):
{', '.join(research.market_keywords)}

Use this research data to create accurate, detailed, and SEO-optimized content."""

    include_features = "- Include key product features and benefits from research data" if request.include_features else ""
    include_shipping = "- Mention shipping and delivery information" if request.include_shipping else ""
    include_guarantee = "- Include satisfaction guarantee" if request.include_guarantee else ""

    return f"""Create a compelling, in-depth eBay listing description for: "{title}"

Style: {request.style}
Tone: {request.tone}
{research_context}

Requirements:
- The FIRST line must be the product title, exactly as provided, in bold markdown (e.g., **{title}**), with no extra words, adjectives, or embellishments.
- Do not add any other words to the product title.
- After the title, continue with the rest of the description as usual.
- Include SEO-optimized keywords naturally from the research data
- Use emojis strategically for visual appeal
- Structure with clear sections using markdown
- Include a dedicated section called "Box Contents" listing everything included in the box (use bullet points)
- Go into detail about unique features, accessories, and what makes this product stand out
- Include bullet points for features and benefits based on research data
- Add relevant hashtags at the end using market keywords
- If research data is available, incorporate specific product details, specifications, and competitive advantages
{include_features}
{include_shipping}
{include_guarantee}

Format the response with proper markdown formatting including:
- Product title at the very beginning in bold format, exactly as provided
- Bold headers with emojis (ensure no extra spaces in headers, e.g., **Key Features** not **K ey Features**)
- Bullet point lists
- Hashtags at the end with SEO keywords

IMPORTANT FORMATTING RULES:
- Ensure all headers are properly formatted without extra spaces between characters
- Use clean markdown syntax: **Header** not ** Header** or **H eader**
- Keep emojis attached to headers without extra spaces

Make it engaging, conversion-focused, and as detailed as possible using the research data provided."""


def build_listing_prompt(user_text: str, options: ListingOptions, profile: ProductProfile) -> str:
    """Build the user prompt for the listing assistant."""
    if profile.is_sneaker:
        type_label, type_noun = "SNEAKER", "sneaker"
    elif profile.is_pokemon:
        type_label, type_noun = "POKEMON TCG", "Pokemon product"
    else:
        type_label, type_noun = "GENERAL", "product"

    presale = "This is a PRESALE item - include presale information." if profile.is_presale else ""
    style_code = f"Known Style Code: {profile.style_code}" if profile.style_code else ""

    features = "- Include detailed features and benefits" if options.include_features else "- Skip features section"
    shipping = "- Include shipping and delivery information" if options.include_shipping else "- Skip shipping information"
    guarantee = "- Include satisfaction guarantee" if options.include_guarantee else "- Skip guarantee section"

    sneaker_rules = _SNEAKER_REQUIREMENTS if profile.is_sneaker else ""
    pokemon_rules = _POKEMON_REQUIREMENTS if profile.is_pokemon else ""

    return f"""Create ONE eBay listing for ONLY this product: "{user_text}"

IMPORTANT: Generate ONLY ONE description for the exact product above. Do not generate multiple products or add examples.

Product Type: {type_label}
{presale}
{style_code}

STYLE & TONE:
- Writing style: {options.style}
- Writing tone: {options.tone}

CONTENT OPTIONS:
{features}
{shipping}
{guarantee}

{sneaker_rules}

{pokemon_rules}

Create a complete, professional eBay listing following the structure. The Happy Shopping message should be warm and specific to what buyers will enjoy about this {type_noun}.

REMINDER: Generate ONLY the listing for "{user_text}". Do not add any other products.

Format with proper Markdown:
- Use ** for bold headers
- Use bullet points for lists
- Keep formatting clean and professional"""


# ─── Service ─────────────────────────────────────────────────


class DescriptionService:
    """
    Generates listing descriptions through a text generator.

    Args:
        generator: Configured text generator, or None when no API key is set.
            Every call raises ConfigurationError without one.
    """

    def __init__(self, generator: ITextGenerator | None):
        self._generator = generator

    def _require_generator(self) -> ITextGenerator:
        if self._generator is None:
            raise ConfigurationError("OpenAI API key not configured")
        return self._generator

    async def _complete(
        self,
        prompt: str,
        system_prompt: str,
        max_tokens: int,
        temperature: float,
        profile: ProductProfile,
    ) -> GeneratedDescription:
        generator = self._require_generator()
        start = time.monotonic()

        try:
            text = await generator.generate(
                prompt,
                system_prompt=system_prompt,
                max_tokens=max_tokens,
                temperature=temperature,
            )
        except ListSmithError as e:
            logger.error(f"Description generation failed: {e}")
            raise DescriptionGenerationError(
                "Failed to generate description",
                details={"cause": type(e).__name__},
            ) from e

        if profile.is_pokemon:
            text = fix_pokemon_pack_count(text)

        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.info(
            f"Generated {profile.product_type} description "
            f"({len(text)} chars) in {elapsed_ms}ms using {generator.model}"
        )
        return GeneratedDescription(
            text=text,
            model=generator.model,
            generation_time_ms=elapsed_ms,
            product_type=profile.product_type,
        )

    async def generate(self, request: DescriptionRequest) -> GeneratedDescription:
        """
        Generate an SEO description for a product title.

        Raises:
            ConfigurationError: If no generator is configured.
            DescriptionGenerationError: If the generator fails.
        """
        return await self._complete(
            build_prompt(request),
            system_prompt=DESCRIPTION_SYSTEM_PROMPT,
            max_tokens=1000,
            temperature=0.7,
            profile=detect_product(request.product_title),
        )

    async def generate_listing(
        self,
        user_text: str,
        options: ListingOptions | None = None,
    ) -> GeneratedDescription:
        """
        Generate a listing from free text with product-type specific rules.

        Raises:
            ConfigurationError: If no generator is configured.
            DescriptionGenerationError: If the generator fails.
        """
        options = options or ListingOptions()
        profile = detect_product(user_text)
        return await self._complete(
            build_listing_prompt(user_text, options, profile),
            system_prompt=LISTING_SYSTEM_PROMPT,
            max_tokens=1800,
            temperature=0.3,
            profile=profile,
        )
