"""
Main application entry point for the Extendable Entities API.

This module creates the FastAPI application, builds the catalog once at
startup and mounts the read-only routes under /api/v1.
"""

from typing import Optional

import uvicorn
from fastapi import FastAPI

from extendable import __version__
from extendable.api import api_router
from extendable.composition.catalog import RecordTypeCatalog
from extendable.core.middleware import setup_all_middleware
from extendable.services.bootstrap import build_catalog


def create_app(catalog: Optional[RecordTypeCatalog] = None) -> FastAPI:
    """
    Build the FastAPI application around a catalog.

    Args:
        catalog: Catalog to serve; built from settings when omitted
    """
    app = FastAPI(
        title="Extendable Entities API",
        description="Field sets, record types and their effective schemas",
        version=__version__,
    )
    app.state.catalog = catalog if catalog is not None else build_catalog()

    setup_all_middleware(app)
    app.include_router(api_router, prefix="/api/v1")

    @app.get("/")
    async def root():
        """
        Root endpoint providing basic API information.
        """
        return {
            "status": "online",
            "api": "Extendable Entities API",
            "version": __version__,
        }

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run("extendable.main:app", host="0.0.0.0", port=8000, reload=True)
