"""
@file: test_api.py
@description:
Tests for the HTTP API through the FastAPI TestClient:
- Root and health endpoints
- Field set and record type discovery
- Effective schema lookups, including qualified and unknown names
- Dry-run schema endpoint against a temporary database

@dependencies:
- pytest: For test framework
- fastapi.testclient: For testing FastAPI endpoints
"""

from fastapi.testclient import TestClient
from sqlalchemy import inspect

from extendable.composition.catalog import RecordTypeCatalog
from extendable.db.session import get_engine
from extendable.main import create_app


def test_root(test_client):
    response = test_client.get("/")

    assert response.status_code == 200
    assert response.json()["status"] == "online"


def test_health(test_client):
    response = test_client.get("/api/v1/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "OK"
    assert data["record_types"] == 3
    assert data["field_sets"] == 2


def test_list_field_sets(test_client):
    response = test_client.get("/api/v1/field-sets")

    assert response.status_code == 200
    field_sets = response.json()["field_sets"]
    assert [fs["name"] for fs in field_sets] == ["UserTrait", "PostTrait"]
    assert field_sets[0]["behavior"] == "extendable.fieldsets.user.UserBehavior"
    assert field_sets[1]["relationships"][0]["target"] == "User"


def test_get_field_set(test_client):
    response = test_client.get("/api/v1/field-sets/App:UserTrait")

    assert response.status_code == 200
    assert [a["name"] for a in response.json()["attributes"]] == ["id", "firstname", "lastname", "email"]
    assert test_client.get("/api/v1/field-sets/NopeTrait").status_code == 404


def test_list_record_types(test_client):
    response = test_client.get("/api/v1/record-types")

    assert response.status_code == 200
    record_types = response.json()["record_types"]
    assert [(rt["name"], rt["table"]) for rt in record_types] == [
        ("User", "user"), ("User2", "user2"), ("Post", "post"),
    ]
    assert record_types[1]["uses"] == ["UserTrait"]


def test_effective_schema(test_client):
    response = test_client.get("/api/v1/record-types/User2")

    assert response.status_code == 200
    data = response.json()
    attributes = {a["name"]: a for a in data["attributes"]}
    assert list(attributes) == ["id", "firstname", "lastname", "email", "phone"]
    assert attributes["firstname"]["length"] == 100
    assert attributes["firstname"]["source"] == "User2"
    assert attributes["lastname"]["source"] == "UserTrait"
    assert data["behaviors"] == ["extendable.fieldsets.user.UserBehavior"]


def test_effective_schema_with_relationship(test_client):
    data = test_client.get("/api/v1/record-types/App:Post").json()

    (relationship,) = data["relationships"]
    assert relationship["column"] == "user_id"
    assert relationship["kind"] == "many_to_one"
    assert relationship["source"] == "PostTrait"


def test_unknown_record_type(test_client):
    response = test_client.get("/api/v1/record-types/Comment")

    assert response.status_code == 404
    assert "Comment" in response.json()["detail"]


def test_composition_error_is_reported():
    catalog = RecordTypeCatalog()
    catalog.define_record_type("Invoice", uses=["InvoiceTrait"])

    with TestClient(create_app(catalog)) as client:
        response = client.get("/api/v1/record-types/Invoice")

    assert response.status_code == 422
    assert "InvoiceTrait" in response.json()["detail"]


def test_pending_schema_changes(test_client, engine):
    response = test_client.get("/api/v1/schema/pending")

    assert response.status_code == 200
    data = response.json()
    assert data["in_sync"] is False
    assert any(s.startswith("CREATE TABLE") for s in data["statements"])
    # Dry run only
    assert inspect(engine).get_table_names() == []


def test_pending_schema_changes_unresolved(engine):
    catalog = RecordTypeCatalog()
    catalog.define_record_type(
        "Post",
        attributes=[{"name": "id", "type": "integer", "primary_key": True}],
        relationships=[{"name": "user", "target": "User"}],
    )
    app = create_app(catalog)
    app.dependency_overrides[get_engine] = lambda: engine

    with TestClient(app) as client:
        response = client.get("/api/v1/schema/pending")

    assert response.status_code == 422
    assert "User" in response.json()["detail"]
