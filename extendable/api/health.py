"""
@file: health.py
@description:
Simple health check endpoint to verify that the server is running and that
its catalog was built.

@dependencies:
- FastAPI APIRouter for route definitions.
- extendable.core.logger: For component-specific logging
"""

from fastapi import APIRouter, Depends

from extendable.api.deps import get_catalog
from extendable.composition.catalog import RecordTypeCatalog
from extendable.core.logger import setup_logger

logger = setup_logger("extendable.api.health")

router = APIRouter()


@router.get("/health", tags=["Health"])
async def health_check(catalog: RecordTypeCatalog = Depends(get_catalog)):
    """
    Health Check Endpoint

    Returns:
        dict: Status plus the size of the loaded catalog.
    """
    logger.debug("Health check requested")
    return {
        "status": "OK",
        "message": "Health check successful",
        "record_types": len(catalog),
        "field_sets": len(catalog.registry),
    }
