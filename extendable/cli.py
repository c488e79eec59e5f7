"""
Command line interface for Extendable Entities.

Usage:
    extendable list
    extendable show User
    extendable schema-update --dump-sql
    extendable schema-update --force [--complete]

Global options:
    --database-url URL   Database to synchronize (defaults to DATABASE_URL)
    --manifest PATH      JSON manifest with extra definitions (defaults to MANIFEST_PATH)

Exit codes: 0 on success, 1 on definition or synchronization errors,
2 on usage errors (including schema-update without --dump-sql or --force).
"""

import argparse
import json
import sys
from typing import List, Optional

from extendable.core.exceptions import ExtendableError
from extendable.core.logger import setup_logger
from extendable.db.session import create_db_engine
from extendable.schemas.responses import dump_schema
from extendable.services.bootstrap import build_catalog
from extendable.services.schema_sync import SchemaSynchronizer

logger = setup_logger("extendable.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="extendable",
        description="Compose record types from field sets and synchronize the database schema",
    )
    parser.add_argument("--database-url", default=None, help="Database URL (default: DATABASE_URL)")
    parser.add_argument("--manifest", default=None, help="JSON manifest of extra definitions")

    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("list", help="List record types and their tables")

    show = commands.add_parser("show", help="Print the effective schema of a record type as JSON")
    show.add_argument("name", help="Record type name, optionally alias-qualified")

    update = commands.add_parser("schema-update", help="Compare the database with the record types")
    update.add_argument("--dump-sql", action="store_true", help="Print the statements that would run")
    update.add_argument("--force", action="store_true", help="Apply the statements")
    update.add_argument(
        "--complete",
        action="store_true",
        help="Also drop tables and columns that no record type declares",
    )
    return parser


def _list(catalog) -> int:
    for record_type in catalog.list_record_types():
        uses = ", ".join(record_type.uses) or "-"
        print(f"{record_type.name:<24} {record_type.table:<24} {uses}")
    return 0


def _show(catalog, name: str) -> int:
    print(json.dumps(dump_schema(catalog.effective_schema(name)), indent=2))
    return 0


def _schema_update(catalog, args: argparse.Namespace) -> int:
    if not (args.dump_sql or args.force):
        print(
            "Nothing to do: pass --dump-sql to print the pending statements "
            "or --force to apply them.",
            file=sys.stderr,
        )
        return 2

    synchronizer = SchemaSynchronizer(
        create_db_engine(args.database_url),
        catalog,
        include_drops=args.complete,
    )

    if args.force:
        statements = synchronizer.apply()
        if args.dump_sql:
            for statement in statements:
                print(f"{statement};")
        print(f"Database schema updated successfully! {len(statements)} statement(s) executed.")
        return 0

    statements = synchronizer.pending_changes()
    if not statements:
        print("Nothing to update - your database is already in sync with the current record types.")
        return 0
    for statement in statements:
        print(f"{statement};")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        catalog = build_catalog(manifest_path=args.manifest)
        if args.command == "list":
            return _list(catalog)
        if args.command == "show":
            return _show(catalog, args.name)
        return _schema_update(catalog, args)
    except ExtendableError as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
