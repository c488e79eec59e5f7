"""
Shared FastAPI dependencies.
"""

from fastapi import Request

from extendable.composition.catalog import RecordTypeCatalog


def get_catalog(request: Request) -> RecordTypeCatalog:
    """The catalog built when the application was created."""
    return request.app.state.catalog
