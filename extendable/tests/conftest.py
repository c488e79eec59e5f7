"""
@file: conftest.py
@description:
Pytest fixtures shared by the Extendable Entities test suite.

Fixtures include:
- Catalogs with the project's built-in definitions
- Temporary SQLite databases and engines
- A TestClient bound to a test catalog and engine

@notes:
- Every test gets fresh catalogs; nothing registered in one test leaks into another
- SQLite files live under pytest's tmp_path so tests never touch ./extendable.db
"""

import pytest
from fastapi.testclient import TestClient

from extendable.composition.catalog import RecordTypeCatalog
from extendable.db.session import create_db_engine, get_engine
from extendable.entities import register_record_types
from extendable.fieldsets import register_field_sets
from extendable.main import create_app


def make_builtin_catalog(policy: str = "fail") -> RecordTypeCatalog:
    catalog = RecordTypeCatalog(policy=policy)
    register_field_sets(catalog)
    register_record_types(catalog)
    return catalog


@pytest.fixture
def catalog():
    """
    Catalog holding UserTrait/PostTrait and the User, User2 and Post record types.
    """
    return make_builtin_catalog()


@pytest.fixture
def empty_catalog():
    return RecordTypeCatalog()


@pytest.fixture
def database_url(tmp_path):
    """
    URL of a fresh SQLite database file.
    """
    return f"sqlite:///{tmp_path / 'extendable-test.db'}"


@pytest.fixture
def engine(database_url):
    engine = create_db_engine(database_url, echo=False)
    yield engine
    engine.dispose()


@pytest.fixture
def test_client(catalog, engine):
    """
    TestClient for an app serving `catalog` against the temporary database.
    """
    app = create_app(catalog)
    app.dependency_overrides[get_engine] = lambda: engine
    with TestClient(app) as client:
        yield client
