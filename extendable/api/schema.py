"""
@file: schema.py
@description:
Dry-run view of the schema synchronizer. Applying changes is only possible
from the command line.

Endpoints:
- GET /schema/pending: Statements needed to bring the database in line
"""

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.engine import Engine

from extendable.api.deps import get_catalog
from extendable.composition.catalog import RecordTypeCatalog
from extendable.core.exceptions import ExtendableError, SchemaSyncError
from extendable.core.logger import setup_logger
from extendable.db.session import get_engine
from extendable.schemas.responses import PendingChangesOut
from extendable.services.schema_sync import SchemaSynchronizer

logger = setup_logger("extendable.api.schema")

router = APIRouter()


@router.get("/schema/pending", response_model=PendingChangesOut, tags=["Schema"])
async def pending_schema_changes(
    catalog: RecordTypeCatalog = Depends(get_catalog),
    engine: Engine = Depends(get_engine),
):
    synchronizer = SchemaSynchronizer(engine, catalog)
    try:
        statements = await run_in_threadpool(synchronizer.pending_changes)
    except SchemaSyncError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    except ExtendableError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    return PendingChangesOut.from_statements(statements)
