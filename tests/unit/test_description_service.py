"""
Tests for description generation.

Verifies:
- Product detection (sneaker, Pokemon, presale) and style code lookup
- The Elite Trainer Box pack count correction
- Prompt contents for both entry points
- ConfigurationError without a generator
- Generator failures surface as DescriptionGenerationError
"""

import pytest
from pydantic import ValidationError

from listsmith.core.exceptions import (
    CircuitBreakerOpenError,
    ConfigurationError,
    DescriptionGenerationError,
    TextGenerationError,
)
from listsmith.core.models import (
    DescriptionRequest,
    DescriptionStyle,
    DescriptionTone,
    ListingOptions,
    ProductType,
)
from listsmith.services.description_service import (
    DESCRIPTION_SYSTEM_PROMPT,
    LISTING_SYSTEM_PROMPT,
    DescriptionService,
    build_listing_prompt,
    build_prompt,
    detect_product,
    find_style_code,
    fix_pokemon_pack_count,
)


# ─── Product Detection ───────────────────────────────────────


class TestDetectProduct:
    """Tests for product-type detection."""

    def test_sneaker_with_style_code(self):
        profile = detect_product("Nike Dunk Low Panda Size 10")

        assert profile.is_sneaker is True
        assert profile.style_code == "DD1391-100"
        assert profile.product_type == ProductType.SNEAKER

    def test_pokemon_presale(self):
        profile = detect_product("Pokemon Scarlet Violet Elite Trainer Box PRESALE")

        assert profile.is_pokemon is True
        assert profile.is_presale is True
        assert profile.is_sneaker is False
        assert profile.style_code is None
        assert profile.product_type == ProductType.POKEMON

    def test_general_product(self):
        profile = detect_product("Wireless Mouse")
        assert profile.product_type == ProductType.GENERAL

    def test_style_code_unknown(self):
        assert find_style_code("Nike Air Max 90") is None

    def test_style_code_case_insensitive(self):
        assert find_style_code("NEW BALANCE 990V5 GREY") == "M990GL5"


class TestFixPokemonPackCount:
    """Tests for the pack count correction."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Includes 10 booster packs", "Includes 9 booster packs"),
            ("- 10 Booster Packs", "- 9 Booster Packs"),
            ("10 Pokémon TCG booster packs", "9 Pokémon TCG booster packs"),
            ("Includes 9 booster packs", "Includes 9 booster packs"),
            ("10 card sleeves", "10 card sleeves"),
        ],
    )
    def test_rewrites(self, text, expected):
        assert fix_pokemon_pack_count(text) == expected


class TestListingOptions:
    """Blank or null options fall back to their defaults."""

    def test_blank_and_null_choices(self):
        options = ListingOptions.model_validate({"style": "", "tone": None})

        assert options.style == DescriptionStyle.PROFESSIONAL
        assert options.tone == DescriptionTone.FRIENDLY

    def test_null_flags_stay_on(self):
        options = ListingOptions.model_validate(
            {"includeFeatures": None, "includeShipping": "", "includeGuarantee": False}
        )

        assert options.include_features is True
        assert options.include_shipping is True
        assert options.include_guarantee is False

    def test_unknown_style_still_rejected(self):
        with pytest.raises(ValidationError):
            ListingOptions.model_validate({"style": "baroque"})


# ─── Prompt Builders ─────────────────────────────────────────


class TestBuildPrompt:
    """Tests for the title-based prompt."""

    def test_includes_research(self, sample_research):
        request = DescriptionRequest(product_title="MX Master 3S", research_data=sample_research)
        prompt = build_prompt(request)

        assert 'eBay listing description for: "MX Master 3S"' in prompt
        assert "Brand Information: Logitech - verified from multiple sources" in prompt
        assert "• Sensor resolution: 8000 DPI" in prompt
        assert "logitech, wireless, bluetooth" in prompt
        assert "Style: professional" in prompt

    def test_without_research(self):
        prompt = build_prompt(DescriptionRequest(product_title="MX Master 3S"))
        assert "PRODUCT RESEARCH DATA" not in prompt

    def test_options_toggle_requirements(self):
        request = DescriptionRequest(
            product_title="MX Master 3S",
            style=DescriptionStyle.LUXURY,
            include_shipping=False,
        )
        prompt = build_prompt(request)

        assert "Style: luxury" in prompt
        assert "Mention shipping" not in prompt
        assert "Include satisfaction guarantee" in prompt


class TestBuildListingPrompt:
    """Tests for the listing assistant prompt."""

    def test_sneaker(self):
        text = "Nike Dunk Low Panda"
        prompt = build_listing_prompt(text, ListingOptions(), detect_product(text))

        assert "Product Type: SNEAKER" in prompt
        assert "Known Style Code: DD1391-100" in prompt
        assert "SNEAKER REQUIREMENTS" in prompt
        assert "POKEMON ETB REQUIREMENTS" not in prompt

    def test_pokemon_presale(self):
        text = "Pokemon Elite Trainer Box presale"
        prompt = build_listing_prompt(text, ListingOptions(), detect_product(text))

        assert "Product Type: POKEMON TCG" in prompt
        assert "PRESALE item" in prompt
        assert "MUST list 9 booster packs" in prompt

    def test_skipped_sections(self):
        options = ListingOptions(include_features=False, include_guarantee=False)
        prompt = build_listing_prompt("Desk Lamp", options, detect_product("Desk Lamp"))

        assert "Product Type: GENERAL" in prompt
        assert "- Skip features section" in prompt
        assert "- Include shipping and delivery information" in prompt
        assert "- Skip guarantee section" in prompt


# ─── Service ─────────────────────────────────────────────────


class TestDescriptionService:
    """Tests for DescriptionService."""

    @pytest.mark.asyncio
    async def test_generate(self, fake_generator_factory):
        generator = fake_generator_factory("**MX Master 3S**\n\nGreat mouse.")
        service = DescriptionService(generator)

        result = await service.generate(DescriptionRequest(product_title="MX Master 3S"))

        assert result.text == "**MX Master 3S**\n\nGreat mouse."
        assert result.model == "test-model"
        assert result.product_type == ProductType.GENERAL
        assert result.generation_time_ms >= 0

        call = generator.calls[0]
        assert call["system_prompt"] == DESCRIPTION_SYSTEM_PROMPT
        assert call["max_tokens"] == 1000
        assert call["temperature"] == 0.7

    @pytest.mark.asyncio
    async def test_generate_fixes_pokemon_pack_count(self, fake_generator_factory):
        generator = fake_generator_factory("**Box Contents**\n- 10 booster packs")
        service = DescriptionService(generator)

        result = await service.generate(
            DescriptionRequest(product_title="Pokemon Elite Trainer Box")
        )

        assert result.text == "**Box Contents**\n- 9 booster packs"
        assert result.product_type == ProductType.POKEMON

    @pytest.mark.asyncio
    async def test_non_pokemon_text_untouched(self, fake_generator_factory):
        service = DescriptionService(fake_generator_factory("- 10 booster packs"))

        result = await service.generate(DescriptionRequest(product_title="Card Binder"))

        assert result.text == "- 10 booster packs"

    @pytest.mark.asyncio
    async def test_generate_listing(self, fake_generator_factory):
        generator = fake_generator_factory("**Pokemon ETB**\n- 10 Booster Packs")
        service = DescriptionService(generator)

        result = await service.generate_listing("Pokemon Elite Trainer Box")

        assert result.text == "**Pokemon ETB**\n- 9 Booster Packs"
        call = generator.calls[0]
        assert call["system_prompt"] == LISTING_SYSTEM_PROMPT
        assert call["max_tokens"] == 1800
        assert call["temperature"] == 0.3

    @pytest.mark.asyncio
    async def test_no_generator_raises_configuration_error(self):
        service = DescriptionService(None)

        with pytest.raises(ConfigurationError, match="OpenAI API key not configured"):
            await service.generate(DescriptionRequest(product_title="x"))

        with pytest.raises(ConfigurationError):
            await service.generate_listing("x")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [TextGenerationError("HTTP 401"), CircuitBreakerOpenError("openai", 12.0)],
    )
    async def test_generator_failure_wrapped(self, fake_generator_factory, error):
        service = DescriptionService(fake_generator_factory(error))

        with pytest.raises(DescriptionGenerationError) as exc_info:
            await service.generate(DescriptionRequest(product_title="x"))

        assert exc_info.value.message == "Failed to generate description"
        assert exc_info.value.__cause__ is error
