"""
API Package for Extendable Entities.

Read-only HTTP routes over the catalog and the schema synchronizer.
"""

from fastapi import APIRouter

from . import health, record_types, schema

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(record_types.router)
api_router.include_router(schema.router)

__all__ = ["api_router"]
