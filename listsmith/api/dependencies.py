"""
FastAPI dependency providers.

The text generator (and with it the circuit breaker guarding the OpenAI
API) is built once per process. Services are cheap and built per request.
Tests replace any of these through ``app.dependency_overrides``.
"""

from functools import lru_cache

from fastapi import Depends

from listsmith.config import get_settings
from listsmith.core.exceptions import TransientTextGenerationError
from listsmith.core.interfaces import IProductSource, ITextGenerator
from listsmith.core.resilience import CircuitBreaker, RetryPolicy
from listsmith.research.sources import default_sources
from listsmith.services.description_service import DescriptionService
from listsmith.services.palette_service import PaletteService
from listsmith.services.research_service import ProductResearchService
from listsmith.services.text_generation import OpenAITextGenerator


@lru_cache
def get_text_generator() -> ITextGenerator | None:
    """Process-wide generator, or None when OPENAI_API_KEY is not set."""
    settings = get_settings()
    if not settings.text_generation_configured:
        return None

    return OpenAITextGenerator(
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        base_url=settings.openai_base_url,
        timeout=settings.openai_timeout_seconds,
        breaker=CircuitBreaker(
            name="openai",
            failure_threshold=settings.circuit_breaker_failure_threshold,
            cooldown_seconds=settings.circuit_breaker_cooldown_seconds,
        ),
        retry_policy=RetryPolicy(
            max_retries=settings.openai_max_retries,
            retryable_exceptions=(TransientTextGenerationError,),
        ),
    )


def get_product_sources(
    generator: ITextGenerator | None = Depends(get_text_generator),
) -> list[IProductSource]:
    return default_sources(generator)


def get_description_service(
    generator: ITextGenerator | None = Depends(get_text_generator),
) -> DescriptionService:
    return DescriptionService(generator)


def get_research_service(
    generator: ITextGenerator | None = Depends(get_text_generator),
    sources: list[IProductSource] = Depends(get_product_sources),
) -> ProductResearchService:
    return ProductResearchService(generator, sources)


def get_palette_service(
    generator: ITextGenerator | None = Depends(get_text_generator),
) -> PaletteService:
    return PaletteService(generator)
