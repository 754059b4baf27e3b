"""
Research API endpoints.

Provides:
- POST /api/research-product: Research a product title into a ProductResearchData record
- POST /api/research: Retired route, always 410
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from listsmith.api.dependencies import get_research_service
from listsmith.core.exceptions import InputValidationError
from listsmith.core.models import CamelModel
from listsmith.services.research_service import ProductResearchService

router = APIRouter(tags=["Research"])


class ResearchBody(CamelModel):
    product_title: str = ""


@router.post("/research-product", summary="Research a product")
async def research_product(
    body: ResearchBody,
    service: ProductResearchService = Depends(get_research_service),
):
    """
    Gather specifications, features, keywords and categories for a product.

    Always answers with a record: when no research source or generator is
    available the placeholder record (confidence 0.3) is returned.
    """
    title = body.product_title.strip()
    if not title:
        raise InputValidationError("Product title is required")

    record = await service.research(title)
    return record.model_dump(by_alias=True)


@router.post("/research", summary="Retired research route", deprecated=True)
async def research_retired():
    return JSONResponse(
        status_code=410,
        content={
            "error": "This endpoint has been retired. Use /api/research-product instead.",
            "redirect": "/api/research-product",
        },
    )
