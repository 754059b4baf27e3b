"""
Description API endpoints.

Provides:
- POST /api/generate-description: Generate listing text from a product title
  (or free text for the listing assistant)
- POST /api/convert-description: Convert generated text into tiled listing HTML
"""

import logging
from datetime import UTC, datetime

from fastapi import APIRouter, Depends
from pydantic import field_validator

from listsmith.api.dependencies import get_description_service, get_palette_service
from listsmith.converters.html_renderer import convert_to_html
from listsmith.core.exceptions import InputValidationError
from listsmith.core.models import (
    CamelModel,
    ColorPalette,
    DescriptionRequest,
    ListingOptions,
    ProductResearchData,
)
from listsmith.services.description_service import DescriptionService
from listsmith.services.palette_service import PaletteService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Descriptions"])

PROVIDER_NAME = "OpenAI"


# ─── Request Schemas ─────────────────────────────────────────


class GenerateDescriptionBody(ListingOptions):
    """Either ``productTitle`` (SEO description) or ``userText`` (listing assistant)."""
    product_title: str = ""
    user_text: str = ""
    debug: bool = False
    research_data: ProductResearchData | None = None

    @field_validator("product_title", "user_text", mode="before")
    @classmethod
    def null_text_is_empty(cls, value):
        return "" if value is None else value


class ConvertDescriptionBody(CamelModel):
    description: str = ""
    product_title: str = ""
    palette: ColorPalette | None = None


# ─── Endpoints ───────────────────────────────────────────────


@router.post("/generate-description", summary="Generate a listing description")
async def generate_description(
    body: GenerateDescriptionBody,
    service: DescriptionService = Depends(get_description_service),
):
    """
    Generate a markdown listing description.

    ``productTitle`` takes precedence; ``userText`` switches to the listing
    assistant with product-type rules. Set ``debug`` to receive generation
    metadata.
    """
    product_title = body.product_title.strip()
    user_text = body.user_text.strip()

    if product_title:
        result = await service.generate(
            DescriptionRequest(
                product_title=product_title,
                style=body.style,
                tone=body.tone,
                include_features=body.include_features,
                include_shipping=body.include_shipping,
                include_guarantee=body.include_guarantee,
                research_data=body.research_data,
            )
        )
    elif user_text:
        options = ListingOptions(
            style=body.style,
            tone=body.tone,
            include_features=body.include_features,
            include_shipping=body.include_shipping,
            include_guarantee=body.include_guarantee,
        )
        result = await service.generate_listing(user_text, options)
    else:
        raise InputValidationError("Product title is required")

    payload = {
        "description": result.text,
        "provider": PROVIDER_NAME,
        "timestamp": datetime.now(UTC).isoformat(),
    }
    if body.debug:
        payload["meta"] = {
            "model": result.model,
            "generationTime": result.generation_time_ms,
            "optimized": True,
        }
    return payload


@router.post("/convert-description", summary="Convert a description to HTML")
async def convert_description(
    body: ConvertDescriptionBody,
    palette_service: PaletteService = Depends(get_palette_service),
):
    """
    Render generated description text as tiled HTML.

    Without a palette in the request, one is chosen from the product title.
    """
    if not body.description.strip():
        raise InputValidationError("No description to convert")

    palette = body.palette
    if palette is None:
        palette = await palette_service.generate_palette([], body.product_title.strip())

    output = convert_to_html(body.description, palette, product_title=body.product_title)
    logger.info(f"Converted description to HTML: {len(output.sections)} sections")
    return output.to_dict()
