"""
Composition Package for Extendable Entities.

This package turns declarative definitions into effective schemas:
- Field set registry (define/resolve reusable bundles)
- Record type composer (ordered merge with override and conflict rules)
- Record type catalog (registration, discovery, qualified names)
"""

from .catalog import MappingConfig, RecordTypeCatalog
from .composer import ConflictPolicy, compose
from .registry import FieldSetRegistry

__all__ = [
    "ConflictPolicy",
    "FieldSetRegistry",
    "MappingConfig",
    "RecordTypeCatalog",
    "compose",
]
