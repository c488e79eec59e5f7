"""
Extendable Entities.

Compose reusable field sets (trait-like bundles of columns, relationships and
accessor behavior) into thin, project-local record types mapped with
SQLAlchemy, and keep the database schema in step with Alembic.
"""

from .composition.catalog import RecordTypeCatalog
from .composition.composer import ConflictPolicy, compose
from .composition.registry import FieldSetRegistry
from .schemas.definitions import (
    AttributeSpec,
    EffectiveSchema,
    FieldSet,
    RecordType,
    RelationshipSpec,
)

__version__ = "0.1.0"

__all__ = [
    "AttributeSpec",
    "RelationshipSpec",
    "FieldSet",
    "RecordType",
    "EffectiveSchema",
    "FieldSetRegistry",
    "RecordTypeCatalog",
    "ConflictPolicy",
    "compose",
]
