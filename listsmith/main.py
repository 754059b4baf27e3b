"""
ListSmith FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from listsmith import __version__
from listsmith.api import colors, descriptions, research
from listsmith.api.dependencies import get_text_generator
from listsmith.config import get_settings
from listsmith.core.health import get_health_status
from listsmith.core.interfaces import ITextGenerator
from listsmith.core.logging_config import setup_logging
from listsmith.core.sentry_config import init_sentry
from listsmith.middleware.exception_handler import register_exception_handlers
from listsmith.middleware.logging_middleware import LoggingMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown lifecycle management."""
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} v{__version__} ({settings.app_env.value})")
    if not settings.text_generation_configured:
        logger.warning("OPENAI_API_KEY is not set; generation endpoints will answer 500")
    yield
    logger.info(f"Shutting down {settings.app_name}")


def create_app() -> FastAPI:
    """Application factory: creates and configures the FastAPI instance."""
    settings = get_settings()

    # 1. Configure structured logging (before anything else)
    setup_logging(
        app_env=settings.app_env,
        log_level=settings.log_level,
        log_format=settings.log_format,
    )

    # 2. Initialize Sentry (before app creation so ASGI integration hooks in)
    init_sentry(
        dsn=settings.sentry_dsn,
        app_env=settings.app_env,
        app_version=__version__,
        traces_sample_rate=settings.sentry_traces_sample_rate,
        profiles_sample_rate=settings.sentry_profiles_sample_rate,
    )

    openapi_tags = [
        {
            "name": "Descriptions",
            "description": "Generate eBay listing descriptions and convert them to tiled HTML.",
        },
        {
            "name": "Research",
            "description": "Research a product title into verified specifications and features.",
        },
        {
            "name": "Colors",
            "description": "Product-specific color palettes for rendered listings.",
        },
        {
            "name": "System",
            "description": "Health checks and operational endpoints.",
        },
    ]

    app = FastAPI(
        title=settings.app_name,
        description=(
            "ListSmith drafts eBay listings from a product title: it researches the "
            "product, generates an SEO description and converts it into "
            "color-styled HTML ready to paste into eBay."
        ),
        version=__version__,
        lifespan=lifespan,
        openapi_tags=openapi_tags,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        redirect_slashes=False,
    )

    # Middleware order: Logging → GZip → CORS (LIFO, CORS outermost)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(GZipMiddleware, minimum_size=settings.gzip_minimum_size)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health", tags=["System"])
    async def health_check(
        generator: ITextGenerator | None = Depends(get_text_generator),
    ):
        return get_health_status(
            app_name=settings.app_name,
            app_version=__version__,
            app_env=settings.app_env.value,
            generator=generator,
        )

    app.include_router(descriptions.router, prefix="/api")
    app.include_router(research.router, prefix="/api")
    app.include_router(colors.router, prefix="/api")

    # Register global exception handlers (after routers)
    register_exception_handlers(app)

    return app


app = create_app()
