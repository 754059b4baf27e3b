"""
Pydantic domain models for ListSmith.

These models represent the data flowing through the listing pipeline:
ProductSourceData → ProductResearchData → DescriptionRequest → HTML.

All wire-facing models serialize with camelCase aliases
(``model_dump(by_alias=True)``) and accept either spelling on input.
"""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel


class DescriptionStyle(StrEnum):
    """Writing styles offered for generated descriptions."""
    PROFESSIONAL = "professional"
    CASUAL = "casual"
    LUXURY = "luxury"
    TECHNICAL = "technical"


class DescriptionTone(StrEnum):
    """Writing tones offered for generated descriptions."""
    FRIENDLY = "friendly"
    FORMAL = "formal"
    ENTHUSIASTIC = "enthusiastic"
    TRUSTWORTHY = "trustworthy"


class ProductType(StrEnum):
    """Product families that get dedicated listing rules."""
    SNEAKER = "sneaker"
    POKEMON = "pokemon"
    GENERAL = "general"


class CamelModel(BaseModel):
    """Base model exchanging camelCase JSON with the front-end."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ─── Research Models ──────────────────────────────────────────


class ProductSourceData(CamelModel):
    """One source's findings about a product."""

    source: str
    url: str = ""
    title: str = ""
    brand: str = ""
    model: str = ""
    specifications: list[str] = Field(default_factory=list)
    features: list[str] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)
    confidence: float = Field(default=0.5, ge=0, le=1)


class ProductResearchData(CamelModel):
    """The reconciled research record that grounds a description prompt."""

    specifications: list[str] = Field(default_factory=list, max_length=15)
    features: list[str] = Field(default_factory=list, max_length=12)
    market_keywords: list[str] = Field(default_factory=list)
    product_categories: list[str] = Field(default_factory=list)
    brand_info: str = ""
    product_images: list[str] = Field(default_factory=list, max_length=5)
    brand: str = ""
    model: str = ""
    sku: str = ""
    confidence: float = Field(default=0.0, ge=0, le=1)
    sources: list[str] = Field(default_factory=list)


# ─── Presentation Models ──────────────────────────────────────


class ColorPalette(CamelModel):
    """Colors used to style rendered description tiles."""

    primary_color: str = "#0066CC"
    secondary_color: str = "#4A90E2"
    accent_color: str = "#7B68EE"
    background_color: str = "#FFFFFF"
    text_color: str = "#333333"
    light_backgrounds: list[str] = Field(
        default_factory=lambda: ["#FFFFFF", "#F8F9FA", "#E9ECEF"]
    )

    def tile_background(self, index: int) -> str:
        """Background for the ``index``-th tile, cycling through light backgrounds."""
        if not self.light_backgrounds:
            return self.background_color
        return self.light_backgrounds[index % len(self.light_backgrounds)]


# ─── Generation Models ────────────────────────────────────────


class ListingOptions(CamelModel):
    """Style, tone and optional sections requested for a listing."""

    style: DescriptionStyle = DescriptionStyle.PROFESSIONAL
    tone: DescriptionTone = DescriptionTone.FRIENDLY
    include_features: bool = True
    include_shipping: bool = True
    include_guarantee: bool = True

    @field_validator("style", "tone", mode="before")
    @classmethod
    def blank_choice_uses_default(cls, value, info: ValidationInfo):
        if value is None or value == "":
            return cls.model_fields[info.field_name].default
        return value

    @field_validator("include_features", "include_shipping", "include_guarantee", mode="before")
    @classmethod
    def missing_flag_is_on(cls, value):
        # Only an explicit false turns a section off
        return True if value is None or value == "" else value


class DescriptionRequest(ListingOptions):
    """Options for generating a listing description from a product title."""

    product_title: str = Field(..., min_length=1)
    research_data: ProductResearchData | None = None


class GeneratedDescription(BaseModel):
    """Text returned by the generator plus timing metadata."""

    text: str
    model: str
    generation_time_ms: int = 0
    product_type: ProductType = ProductType.GENERAL
