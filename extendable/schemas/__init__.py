"""
Schemas Package for Extendable Entities.

This package contains Pydantic models used for:
- Declarative field set and record type definitions
- The effective schema produced by composition
- Response serialization for the HTTP API and CLI
"""

from .definitions import (
    AttributeSpec,
    AttributeType,
    EffectiveSchema,
    FieldSet,
    OnDelete,
    RecordType,
    RelationshipKind,
    RelationshipSpec,
)

__all__ = [
    "AttributeSpec",
    "AttributeType",
    "EffectiveSchema",
    "FieldSet",
    "OnDelete",
    "RecordType",
    "RelationshipKind",
    "RelationshipSpec",
]
