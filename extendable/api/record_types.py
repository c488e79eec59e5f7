"""
@file: record_types.py
@description:
Read-only endpoints over the catalog: field sets, record types and their
effective schemas.

Endpoints:
- GET /field-sets: All registered field sets
- GET /field-sets/{name}: One field set
- GET /record-types: Discovery listing of record types, in registration order
- GET /record-types/{name}: Effective schema of one record type

@notes:
- Names may be alias-qualified (e.g. `App:User`).
- Unknown names return 404; composition errors (conflicts, unknown field
  sets) return 422 with the error message.
"""

from fastapi import APIRouter, Depends, HTTPException, Path, status

from extendable.api.deps import get_catalog
from extendable.composition.catalog import RecordTypeCatalog
from extendable.core.exceptions import ExtendableError, UnknownRecordTypeError, UnknownUnitError
from extendable.core.logger import setup_logger
from extendable.schemas.responses import (
    EffectiveSchemaOut,
    FieldSetOut,
    FieldSetsResponse,
    RecordTypeSummary,
    RecordTypesResponse,
)

logger = setup_logger("extendable.api.record_types")

router = APIRouter()


@router.get("/field-sets", response_model=FieldSetsResponse, tags=["Field sets"])
async def list_field_sets(catalog: RecordTypeCatalog = Depends(get_catalog)):
    return FieldSetsResponse(
        field_sets=[FieldSetOut.from_field_set(fs) for fs in catalog.registry]
    )


@router.get("/field-sets/{name}", response_model=FieldSetOut, tags=["Field sets"])
async def get_field_set(
    name: str = Path(..., description="Field set name, optionally alias-qualified"),
    catalog: RecordTypeCatalog = Depends(get_catalog),
):
    try:
        return FieldSetOut.from_field_set(catalog.resolve_field_set(name))
    except UnknownUnitError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("/record-types", response_model=RecordTypesResponse, tags=["Record types"])
async def list_record_types(catalog: RecordTypeCatalog = Depends(get_catalog)):
    """
    Enumerate all record types, the discovery listing the synchronizer iterates.
    """
    return RecordTypesResponse(
        record_types=[RecordTypeSummary.from_record_type(rt) for rt in catalog.list_record_types()]
    )


@router.get("/record-types/{name}", response_model=EffectiveSchemaOut, tags=["Record types"])
async def get_effective_schema(
    name: str = Path(..., description="Record type name, optionally alias-qualified"),
    catalog: RecordTypeCatalog = Depends(get_catalog),
):
    """
    Effective schema of a record type after composition.
    """
    try:
        schema = catalog.effective_schema(name)
    except UnknownRecordTypeError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ExtendableError as e:
        logger.warning(f"Cannot compose record type '{name}': {str(e)}")
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    return EffectiveSchemaOut.from_schema(schema)
