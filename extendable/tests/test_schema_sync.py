"""
@file: test_schema_sync.py
@description:
Test suite for the schema synchronizer adapter, focusing on:
- Dry run output against an empty and an up-to-date database
- Applying changes, including added columns
- Non-destructive behavior unless drops are requested
- Error handling for unresolved relationships and unreachable databases

@dependencies:
- pytest: For test framework
- SQLAlchemy: inspect() on temporary SQLite databases

@notes:
- Tests run against SQLite files under tmp_path; statements are matched
  loosely since quoting is dialect specific
"""

import re

import pytest
from sqlalchemy import inspect, text

from extendable.composition.catalog import RecordTypeCatalog
from extendable.core.exceptions import SchemaSyncError, UnresolvedRelationshipError
from extendable.db.session import create_db_engine
from extendable.fieldsets import POST_TRAIT, USER_TRAIT
from extendable.services.schema_sync import SchemaSynchronizer


def creates(statements, table):
    pattern = re.compile(rf'^CREATE TABLE "?{table}"?\s*\(', re.IGNORECASE)
    return any(pattern.match(s) for s in statements)


def user_catalog(extra_attributes=()):
    catalog = RecordTypeCatalog()
    catalog.add_field_set(USER_TRAIT)
    catalog.define_record_type("User", uses=["UserTrait"], attributes=extra_attributes)
    return catalog


def test_dry_run_on_empty_database(catalog, engine):
    statements = SchemaSynchronizer(engine, catalog).pending_changes()

    assert creates(statements, "user")
    assert creates(statements, "user2")
    assert creates(statements, "post")
    # Referenced table is created before the table referencing it
    user_at = next(i for i, s in enumerate(statements) if creates([s], "user"))
    post_at = next(i for i, s in enumerate(statements) if creates([s], "post"))
    assert user_at < post_at
    assert any("ix_post_user_id" in s for s in statements)
    # Nothing was executed
    assert inspect(engine).get_table_names() == []


def test_apply_creates_tables(catalog, engine):
    synchronizer = SchemaSynchronizer(engine, catalog)

    applied = synchronizer.apply()

    assert creates(applied, "post")
    assert set(inspect(engine).get_table_names()) == {"user", "user2", "post"}
    remaining = synchronizer.pending_changes()
    assert not any(s.upper().startswith("CREATE TABLE") for s in remaining)


def test_in_sync_after_apply(engine):
    synchronizer = SchemaSynchronizer(engine, user_catalog())
    synchronizer.apply()

    assert synchronizer.pending_changes() == []
    assert synchronizer.is_in_sync()
    assert synchronizer.apply() == []


def test_added_attribute_becomes_add_column(engine):
    SchemaSynchronizer(engine, user_catalog()).apply()
    extended = user_catalog([{"name": "phone", "type": "string", "length": 32, "nullable": True}])
    synchronizer = SchemaSynchronizer(engine, extended)

    statements = synchronizer.pending_changes()

    assert len(statements) == 1
    assert "ADD COLUMN phone" in statements[0]

    synchronizer.apply()
    columns = [c["name"] for c in inspect(engine).get_columns("user")]
    assert columns == ["id", "firstname", "lastname", "email", "phone"]


def test_undeclared_tables_are_kept(engine):
    with engine.begin() as connection:
        connection.execute(text("CREATE TABLE legacy (id INTEGER PRIMARY KEY)"))

    synchronizer = SchemaSynchronizer(engine, user_catalog())
    assert not any("legacy" in s for s in synchronizer.pending_changes())

    synchronizer.apply()
    assert "legacy" in inspect(engine).get_table_names()


def test_include_drops_removes_undeclared_tables(engine):
    with engine.begin() as connection:
        connection.execute(text("CREATE TABLE legacy (id INTEGER PRIMARY KEY)"))

    synchronizer = SchemaSynchronizer(engine, user_catalog(), include_drops=True)
    statements = synchronizer.pending_changes()

    assert any(re.match(r'DROP TABLE "?legacy"?', s) for s in statements)
    synchronizer.apply()
    assert "legacy" not in inspect(engine).get_table_names()


def test_unresolved_relationship_fails_synchronization(engine):
    catalog = RecordTypeCatalog()
    catalog.add_field_set(POST_TRAIT)
    catalog.define_record_type("Post", uses=["PostTrait"])
    synchronizer = SchemaSynchronizer(engine, catalog)

    with pytest.raises(UnresolvedRelationshipError):
        synchronizer.pending_changes()
    with pytest.raises(UnresolvedRelationshipError):
        synchronizer.apply()
    assert inspect(engine).get_table_names() == []


def test_resolved_relationship_synchronizes(engine):
    catalog = user_catalog()
    catalog.add_field_set(POST_TRAIT)
    catalog.define_record_type("Post", uses=["PostTrait"])

    SchemaSynchronizer(engine, catalog).apply()

    (foreign_key,) = inspect(engine).get_foreign_keys("post")
    assert foreign_key["referred_table"] == "user"
    assert foreign_key["constrained_columns"] == ["user_id"]


def test_unreachable_database_is_wrapped(tmp_path, catalog):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'missing' / 'nested' / 'db.sqlite'}")

    with pytest.raises(SchemaSyncError):
        SchemaSynchronizer(engine, catalog).pending_changes()


def test_widened_string_column_is_applied_on_sqlite(engine):
    SchemaSynchronizer(engine, user_catalog()).apply()
    widened = user_catalog([{"name": "firstname", "type": "string", "length": 100}])
    synchronizer = SchemaSynchronizer(engine, widened)

    statements = synchronizer.pending_changes()

    # SQLite cannot ALTER COLUMN; the table is copied into a new one instead
    assert statements
    assert not any("ALTER COLUMN" in s.upper() for s in statements)
    assert any(s.upper().startswith("INSERT INTO") for s in statements)

    synchronizer.apply()
    columns = {c["name"]: c for c in inspect(engine).get_columns("user")}
    assert columns["firstname"]["type"].length == 100
    assert list(columns) == ["id", "firstname", "lastname", "email"]
    assert synchronizer.is_in_sync()


def test_widening_keeps_rows(engine):
    SchemaSynchronizer(engine, user_catalog()).apply()
    with engine.begin() as connection:
        connection.execute(text(
            "INSERT INTO user (firstname, lastname, email) VALUES ('Ada', 'Lovelace', 'ada@example.com')"
        ))

    widened = user_catalog([{"name": "firstname", "type": "string", "length": 100}])
    SchemaSynchronizer(engine, widened).apply()

    with engine.connect() as connection:
        rows = connection.execute(text("SELECT firstname, lastname FROM user")).all()
    assert [tuple(r) for r in rows] == [("Ada", "Lovelace")]
