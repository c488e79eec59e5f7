"""
@file: schema_sync.py
@description:
Schema synchronizer adapter. Compares the declared schema of a catalog with a
live database through Alembic's autogenerate API and either renders the
difference as SQL (dry run) or applies it.

Key features:
- Dry run: operations are rendered offline (as_sql) for the engine's dialect,
  one statement per list entry, nothing is executed
- Apply: the same operations run on the live connection in one transaction
- Non-destructive by default: tables, columns, indexes and constraints that
  only exist in the database are left alone unless include_drops is set
- Column types are compared, so changed lengths show up as ALTER statements
- SQLite has no ALTER COLUMN: per-table changes it cannot run natively go
  through Alembic batch mode, which copies the table into a new one

@dependencies:
- alembic: produce_migrations, MigrationContext, Operations, batch_alter_table
- SQLAlchemy: engine and connection handling, table reflection
- extendable.db.tables: builds the declared MetaData

@notes:
- The diffing and DDL generation belong to Alembic; this module only feeds it
  and collects its output.
- Definition errors (unknown field sets, unresolved relationships) propagate
  unchanged; database and Alembic failures are wrapped in SchemaSyncError.
"""

import re
from io import StringIO
from typing import Any, Iterable, List, Optional

from alembic.autogenerate import produce_migrations
from alembic.migration import MigrationContext
from alembic.operations import Operations
from alembic.operations.ops import (
    AddColumnOp,
    CreateIndexOp,
    DropIndexOp,
    MigrateOperation,
    ModifyTableOps,
)
from alembic.util import CommandError
from sqlalchemy import MetaData, Table
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from extendable.composition.catalog import RecordTypeCatalog
from extendable.core.exceptions import SchemaSyncError
from extendable.core.logger import setup_logger
from extendable.db.base import NAMING_CONVENTION
from extendable.db.tables import build_metadata

logger = setup_logger("extendable.services.schema_sync")

_STATEMENT_END = re.compile(r";\s*\n")

# Per-table operations SQLite runs without recreating the table
_SQLITE_NATIVE = (AddColumnOp, CreateIndexOp, DropIndexOp)


def _flatten(operations: Iterable[MigrateOperation]) -> List[MigrateOperation]:
    """Unwrap container operations (per-table groups) into invokable ones."""
    flat: List[MigrateOperation] = []
    stack = list(operations)
    while stack:
        op = stack.pop(0)
        if hasattr(op, "ops"):
            stack[:0] = list(op.ops)
        else:
            flat.append(op)
    return flat


class SchemaSynchronizer:
    """
    Reconciles a database with the record types of a catalog.

    Args:
        engine: Engine of the database to synchronize
        catalog: Catalog providing the declared schema
        include_drops: Also drop tables/columns the catalog does not declare
    """

    def __init__(self, engine: Engine, catalog: RecordTypeCatalog, include_drops: bool = False) -> None:
        self.engine = engine
        self.catalog = catalog
        self.include_drops = include_drops

    @property
    def uses_batch_mode(self) -> bool:
        return self.engine.dialect.name == "sqlite"

    def declared_metadata(self) -> MetaData:
        return build_metadata(self.catalog)

    def _include_object(self, object_: Any, name: Optional[str], type_: str,
                        reflected: bool, compare_to: Any) -> bool:
        # Reflected with nothing to compare to means: only in the database
        if reflected and compare_to is None:
            return self.include_drops
        return True

    def _needs_batch(self, op: MigrateOperation) -> bool:
        return (
            self.uses_batch_mode
            and isinstance(op, ModifyTableOps)
            and not all(isinstance(sub, _SQLITE_NATIVE) for sub in _flatten(op.ops))
        )

    def _diff(self, connection: Connection, metadata: MetaData) -> List[MigrateOperation]:
        """
        Compare the database with `metadata`.

        Returns top-level operations; per-table groups are kept together only
        where they have to run in batch mode.
        """
        context = MigrationContext.configure(
            connection,
            opts={
                "compare_type": True,
                "include_object": self._include_object,
                "target_metadata": metadata,
            },
        )
        script = produce_migrations(context, metadata)

        operations: List[MigrateOperation] = []
        for op in script.upgrade_ops.ops:
            if self._needs_batch(op):
                operations.append(op)
            else:
                operations.extend(_flatten([op]))
        return operations

    def _invoke(self, operations: Operations, ops: List[MigrateOperation],
                connection: Optional[Connection] = None) -> None:
        """
        Run `ops` through `operations`, batching grouped per-table changes.

        Offline rendering cannot reflect, so the current table is read from
        `connection` and handed to batch mode as the table to copy.
        """
        for op in ops:
            if not isinstance(op, ModifyTableOps):
                operations.invoke(op)
                continue
            copy_from = None
            if connection is not None:
                copy_from = Table(op.table_name, MetaData(), schema=op.schema, autoload_with=connection)
            with operations.batch_alter_table(
                op.table_name,
                schema=op.schema,
                copy_from=copy_from,
                naming_convention=NAMING_CONVENTION,
            ) as batch_op:
                for sub in _flatten(op.ops):
                    batch_op.invoke(sub)

    def _render(self, ops: List[MigrateOperation], connection: Connection) -> List[str]:
        buffer = StringIO()
        context = MigrationContext.configure(
            dialect=self.engine.dialect,
            opts={"as_sql": True, "output_buffer": buffer},
        )
        self._invoke(Operations(context), ops, connection)
        return [s.strip() for s in _STATEMENT_END.split(buffer.getvalue()) if s.strip()]

    def pending_changes(self) -> List[str]:
        """
        Compute the statements needed to bring the database in line (dry run).

        Returns:
            List[str]: SQL statements in execution order; empty when in sync

        Raises:
            UnresolvedRelationshipError: If a relationship target is missing
            SchemaSyncError: If the database cannot be inspected
        """
        metadata = self.declared_metadata()
        try:
            with self.engine.connect() as connection:
                operations = self._diff(connection, metadata)
                statements = self._render(operations, connection)
        except (SQLAlchemyError, CommandError, NotImplementedError) as e:
            logger.error(f"Failed to compute pending schema changes: {str(e)}")
            raise SchemaSyncError(f"Failed to compute pending schema changes: {str(e)}") from e

        logger.info(f"{len(statements)} pending schema statement(s)")
        return statements

    def apply(self) -> List[str]:
        """
        Apply pending changes in a single transaction.

        Returns:
            List[str]: The statements that were applied; empty when in sync

        Raises:
            UnresolvedRelationshipError: If a relationship target is missing
            SchemaSyncError: If applying fails; the transaction is rolled back
        """
        metadata = self.declared_metadata()
        try:
            with self.engine.begin() as connection:
                operations = self._diff(connection, metadata)
                statements = self._render(operations, connection)
                live = Operations(MigrationContext.configure(connection))
                # Online batch mode reflects the table itself
                self._invoke(live, operations)
        except (SQLAlchemyError, CommandError, NotImplementedError) as e:
            logger.error(f"Failed to apply schema changes: {str(e)}")
            raise SchemaSyncError(f"Failed to apply schema changes: {str(e)}") from e

        if statements:
            logger.info(f"Applied {len(statements)} schema statement(s)")
        else:
            logger.info("Database schema is already in sync")
        return statements

    def is_in_sync(self) -> bool:
        return not self.pending_changes()
