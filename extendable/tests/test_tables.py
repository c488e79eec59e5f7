"""
@file: test_tables.py
@description:
Tests for turning effective schemas into SQLAlchemy tables:
- Column types, lengths and nullability
- Join columns and foreign keys for relationships
- Relationship resolution failures

@dependencies:
- pytest: For test framework
- SQLAlchemy: Type classes checked on the built tables
"""

import pytest
from sqlalchemy import DateTime, Integer, Numeric, String, Text, Uuid

from extendable.composition.catalog import RecordTypeCatalog
from extendable.core.exceptions import SchemaDefinitionError, UnresolvedRelationshipError
from extendable.db.tables import build_metadata
from extendable.fieldsets import POST_TRAIT, USER_TRAIT

ID = {"name": "id", "type": "integer", "primary_key": True}


def test_builtin_tables(catalog):
    metadata = build_metadata(catalog)

    assert set(metadata.tables) == {"user", "user2", "post"}

    user = metadata.tables["user"]
    assert list(user.c.keys()) == ["id", "firstname", "lastname", "email"]
    assert isinstance(user.c.firstname.type, String)
    assert user.c.firstname.type.length == 50
    assert user.c.firstname.nullable is False
    assert user.c.id.primary_key

    user2 = metadata.tables["user2"]
    assert list(user2.c.keys()) == ["id", "firstname", "lastname", "email", "phone"]
    assert user2.c.firstname.type.length == 100
    assert user2.c.phone.nullable is True


def test_relationship_becomes_foreign_key(catalog):
    post = build_metadata(catalog).tables["post"]

    assert list(post.c.keys()) == ["id", "title", "body", "published_at", "user_id"]
    assert isinstance(post.c.body.type, Text)
    assert isinstance(post.c.published_at.type, DateTime)
    assert isinstance(post.c.user_id.type, Integer)
    assert post.c.user_id.nullable is True
    assert post.c.user_id.index is True

    (foreign_key,) = post.c.user_id.foreign_keys
    assert foreign_key.target_fullname == "user.id"


def test_unresolved_relationship_fails():
    """PostTrait points at User; without a User record type the build fails."""
    catalog = RecordTypeCatalog()
    catalog.add_field_set(POST_TRAIT)
    catalog.define_record_type("Post", uses=["PostTrait"])

    with pytest.raises(UnresolvedRelationshipError) as exc_info:
        build_metadata(catalog)

    error = exc_info.value
    assert (error.record_type, error.relationship, error.target) == ("Post", "user", "User")


def test_relationship_resolves_once_target_exists():
    catalog = RecordTypeCatalog()
    catalog.add_field_set(USER_TRAIT)
    catalog.add_field_set(POST_TRAIT)
    catalog.define_record_type("Post", uses=["PostTrait"])
    catalog.define_record_type("User", uses=["UserTrait"])

    metadata = build_metadata(catalog)

    assert "post" in metadata.tables and "user" in metadata.tables


def test_one_to_one_join_column_is_unique(catalog):
    catalog.define_record_type(
        "Profile",
        attributes=[ID],
        relationships=[{"name": "owner", "target": "User", "kind": "one_to_one",
                        "nullable": False, "on_delete": "CASCADE"}],
    )

    profile = build_metadata(catalog).tables["profile"]

    assert profile.c.owner_id.unique is True
    assert profile.c.owner_id.nullable is False
    (foreign_key,) = profile.c.owner_id.foreign_keys
    assert foreign_key.ondelete == "CASCADE"


def test_join_column_type_follows_target_key(catalog):
    catalog.define_record_type("Device", attributes=[{"name": "serial", "type": "uuid", "primary_key": True}])
    catalog.define_record_type(
        "Reading",
        attributes=[ID, {"name": "value", "type": "decimal", "precision": 10, "scale": 3}],
        relationships=[{"name": "device", "target": "Device"}],
    )

    reading = build_metadata(catalog).tables["reading"]

    assert isinstance(reading.c.device_id.type, Uuid)
    assert isinstance(reading.c.value.type, Numeric)
    assert (reading.c.value.type.precision, reading.c.value.type.scale) == (10, 3)


def test_join_column_clash_fails(catalog):
    catalog.define_record_type(
        "Ticket",
        attributes=[ID, {"name": "user_id", "type": "integer"}],
        relationships=[{"name": "user", "target": "User"}],
    )

    with pytest.raises(SchemaDefinitionError):
        build_metadata(catalog)


def test_metadata_uses_naming_convention(catalog):
    metadata = build_metadata(catalog)

    assert metadata.naming_convention["fk"].startswith("fk_")
