"""
Color palette API endpoint.

Provides:
- POST /api/generate-colors: Choose a listing color palette for a product
"""

from fastapi import APIRouter, Depends
from pydantic import Field

from listsmith.api.dependencies import get_palette_service
from listsmith.core.exceptions import InputValidationError
from listsmith.core.models import CamelModel
from listsmith.services.palette_service import PaletteService

router = APIRouter(tags=["Colors"])


class GenerateColorsBody(CamelModel):
    product_title: str = ""
    product_images: list[str] = Field(default_factory=list)


@router.post("/generate-colors", summary="Generate a color palette")
async def generate_colors(
    body: GenerateColorsBody,
    service: PaletteService = Depends(get_palette_service),
):
    """Suggest a palette from product images, else from color words in the title."""
    title = body.product_title.strip()
    if not title:
        raise InputValidationError("Product title is required")

    palette = await service.generate_palette(body.product_images, title)
    return palette.model_dump(by_alias=True)
