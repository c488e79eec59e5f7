"""
@file: manifest.py
@description:
Loads field sets and record types from a JSON build-time manifest, as an
alternative to registering them in code. The manifest is the explicit list of
definitions; nothing is discovered by walking the filesystem.

Manifest shape:
    {
      "field_sets": [
        {"name": "AuditTrait",
         "attributes": [{"name": "created_at", "type": "datetime"}],
         "behavior": "myproject.behaviors.Audited"}
      ],
      "record_types": [
        {"name": "Invoice", "uses": ["UserTrait", "AuditTrait"],
         "attributes": [{"name": "total", "type": "decimal", "precision": 10, "scale": 2}]}
      ]
    }

@dependencies:
- pydantic: manifest validation
- importlib: resolving behavior classes from dotted paths
"""

import importlib
import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Type, Union

from pydantic import BaseModel, Field, ValidationError

from extendable.composition.catalog import RecordTypeCatalog
from extendable.core.exceptions import ManifestError
from extendable.core.logger import setup_logger
from extendable.schemas.definitions import AttributeSpec, RelationshipSpec

logger = setup_logger("extendable.services.manifest")


class _ManifestEntry(BaseModel):
    name: str
    attributes: List[AttributeSpec] = Field(default_factory=list)
    relationships: List[RelationshipSpec] = Field(default_factory=list)
    behavior: Optional[str] = None
    doc: Optional[str] = None


class FieldSetEntry(_ManifestEntry):
    pass


class RecordTypeEntry(_ManifestEntry):
    table: Optional[str] = None
    uses: List[str] = Field(default_factory=list)


class Manifest(BaseModel):
    field_sets: List[FieldSetEntry] = Field(default_factory=list)
    record_types: List[RecordTypeEntry] = Field(default_factory=list)


def import_behavior(path: str) -> Type[Any]:
    """
    Import a behavior class from a dotted path such as `pkg.module.Class`.

    Raises:
        ManifestError: If the module or attribute cannot be found, or is not a class
    """
    module_name, _, attr = path.rpartition(".")
    if not module_name:
        raise ManifestError(f"Behavior '{path}' must be a dotted path to a class")
    try:
        behavior = getattr(importlib.import_module(module_name), attr)
    except (ImportError, AttributeError) as e:
        raise ManifestError(f"Cannot import behavior '{path}': {str(e)}") from e
    if not isinstance(behavior, type):
        raise ManifestError(f"Behavior '{path}' is not a class")
    return behavior


def parse_manifest(data: Dict[str, Any]) -> Manifest:
    try:
        return Manifest.model_validate(data)
    except ValidationError as e:
        raise ManifestError(f"Invalid manifest: {str(e)}") from e


def read_manifest(path: Union[str, Path]) -> Manifest:
    """
    Read and validate a manifest file.

    Raises:
        ManifestError: If the file is missing, not JSON, or does not validate
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ManifestError(f"Cannot read manifest {path}: {str(e)}") from e
    except json.JSONDecodeError as e:
        raise ManifestError(f"Manifest {path} is not valid JSON: {str(e)}") from e
    if not isinstance(data, dict):
        raise ManifestError(f"Manifest {path} must contain a JSON object")
    return parse_manifest(data)


def register_manifest(manifest: Manifest, catalog: RecordTypeCatalog) -> None:
    """
    Register every field set, then every record type, of a manifest.

    Raises:
        ManifestError: If a behavior cannot be imported or a definition is invalid
        DuplicateDefinitionError: If a name is already registered
    """
    try:
        for entry in manifest.field_sets:
            catalog.define_field_set(
                entry.name,
                attributes=entry.attributes,
                relationships=entry.relationships,
                behavior=import_behavior(entry.behavior) if entry.behavior else None,
                doc=entry.doc,
            )
        for entry in manifest.record_types:
            catalog.define_record_type(
                entry.name,
                uses=entry.uses,
                attributes=entry.attributes,
                relationships=entry.relationships,
                table=entry.table,
                behavior=import_behavior(entry.behavior) if entry.behavior else None,
                doc=entry.doc,
            )
    except ValidationError as e:
        raise ManifestError(f"Invalid definition in manifest: {str(e)}") from e


def load_manifest(path: Union[str, Path], catalog: RecordTypeCatalog) -> RecordTypeCatalog:
    """
    Read a manifest file and register its definitions in `catalog`.
    """
    manifest = read_manifest(path)
    register_manifest(manifest, catalog)
    logger.info(
        f"Loaded {len(manifest.field_sets)} field set(s) and "
        f"{len(manifest.record_types)} record type(s) from {path}"
    )
    return catalog
