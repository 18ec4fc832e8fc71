"""
FastAPI application entrypoint for running the IDP outside Lambda.
"""

from __future__ import annotations

from fastapi import FastAPI

from idp.api.routes import router as idp_router
from idp.core.config import get_settings
from idp.core.logging import configure_logging


def create_app() -> FastAPI:
    """Factory for the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Velux Alexa IDP",
        version="0.1.0",
        description="OAuth authorization-code bridge between an Alexa skill and Velux ACTIVE.",
    )
    app.include_router(idp_router)
    return app


app = create_app()

__all__ = ["app", "create_app"]
