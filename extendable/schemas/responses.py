"""
@file: responses.py
@description:
Pydantic schemas for serializing definitions and effective schemas, shared by
the HTTP API and the `show` command of the CLI.

Schemas:
- AttributeOut / RelationshipOut: one member, JSON friendly
- FieldSetOut: a registered field set
- RecordTypeSummary: entry of the record type listing
- EffectiveSchemaOut: composed schema of one record type
- PendingChangesOut: dry-run output of the schema synchronizer

@notes:
- Behavior mixins are reported by dotted import path, never as objects.
"""

from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, Field

from extendable.schemas.definitions import (
    AttributeSpec,
    EffectiveSchema,
    FieldSet,
    RecordType,
    RelationshipSpec,
)


def behavior_path(behavior: Type[Any]) -> str:
    return f"{behavior.__module__}.{behavior.__qualname__}"


class AttributeOut(BaseModel):
    name: str
    type: str
    length: Optional[int] = None
    precision: Optional[int] = None
    scale: Optional[int] = None
    nullable: bool
    default: Any = None
    primary_key: bool = False
    unique: bool = False
    index: bool = False
    source: Optional[str] = Field(None, description="Field set or record type the definition came from.")

    @classmethod
    def from_spec(cls, spec: AttributeSpec, source: Optional[str] = None) -> "AttributeOut":
        data = spec.model_dump(exclude={"autoincrement", "doc"}, mode="json")
        return cls(**data, source=source)


class RelationshipOut(BaseModel):
    name: str
    target: str
    kind: str
    column: str
    nullable: bool
    inversed_by: Optional[str] = None
    on_delete: Optional[str] = None
    source: Optional[str] = None

    @classmethod
    def from_spec(cls, spec: RelationshipSpec, source: Optional[str] = None) -> "RelationshipOut":
        return cls(
            name=spec.name,
            target=spec.target,
            kind=spec.kind.value,
            column=spec.column_name,
            nullable=spec.nullable,
            inversed_by=spec.inversed_by,
            on_delete=spec.on_delete.value if spec.on_delete else None,
            source=source,
        )


class FieldSetOut(BaseModel):
    name: str
    doc: Optional[str] = None
    attributes: List[AttributeOut]
    relationships: List[RelationshipOut]
    behavior: Optional[str] = None

    @classmethod
    def from_field_set(cls, field_set: FieldSet) -> "FieldSetOut":
        return cls(
            name=field_set.name,
            doc=field_set.doc,
            attributes=[AttributeOut.from_spec(a) for a in field_set.attributes],
            relationships=[RelationshipOut.from_spec(r) for r in field_set.relationships],
            behavior=behavior_path(field_set.behavior) if field_set.behavior else None,
        )


class RecordTypeSummary(BaseModel):
    name: str
    table: str
    uses: List[str]
    doc: Optional[str] = None

    @classmethod
    def from_record_type(cls, record_type: RecordType) -> "RecordTypeSummary":
        return cls(
            name=record_type.name,
            table=record_type.table,
            uses=list(record_type.uses),
            doc=record_type.doc,
        )


class EffectiveSchemaOut(BaseModel):
    """
    Composed schema of a record type, members in resolution order.
    """
    name: str
    table: str
    attributes: List[AttributeOut]
    relationships: List[RelationshipOut]
    behaviors: List[str]

    @classmethod
    def from_schema(cls, schema: EffectiveSchema) -> "EffectiveSchemaOut":
        return cls(
            name=schema.name,
            table=schema.table,
            attributes=[AttributeOut.from_spec(a, schema.sources.get(a.name)) for a in schema.attributes],
            relationships=[RelationshipOut.from_spec(r, schema.sources.get(r.name)) for r in schema.relationships],
            behaviors=[behavior_path(b) for b in schema.behaviors],
        )


class PendingChangesOut(BaseModel):
    """
    Statements the schema synchronizer would run; empty when in sync.
    """
    in_sync: bool
    statements: List[str]

    @classmethod
    def from_statements(cls, statements: List[str]) -> "PendingChangesOut":
        return cls(in_sync=not statements, statements=list(statements))


class RecordTypesResponse(BaseModel):
    record_types: List[RecordTypeSummary]


class FieldSetsResponse(BaseModel):
    field_sets: List[FieldSetOut]


def dump_schema(schema: EffectiveSchema) -> Dict[str, Any]:
    """JSON-ready dict of an effective schema."""
    return EffectiveSchemaOut.from_schema(schema).model_dump(mode="json")
