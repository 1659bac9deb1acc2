"""FastAPI application for the questionnaire import service.

Run with ``uvicorn app.main:app`` from the backend directory.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1.router import api_router
from app.config import settings
from app.core.logging_middleware import RequestLoggingMiddleware

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)-5s [%(name)s] %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Build the application with its middleware and routers."""
    application = FastAPI(
        title=settings.app_name,
        description="Turns extracted survey documents into typed, multi-locale questionnaires",
        version="0.1.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    # Added last runs first: CORS wraps request logging
    application.add_middleware(RequestLoggingMiddleware)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(api_router, prefix=settings.api_v1_prefix)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Report that the service is up."""
        return {"status": "healthy"}

    logger.debug(f"API mounted at {settings.api_v1_prefix}")
    return application


app = create_app()
