"""
@file: bootstrap.py
@description:
Builds the catalog a process works with, once, from configuration:
1. the project's own field sets and record types (LOAD_BUILTIN_DEFINITIONS)
2. the JSON manifest at MANIFEST_PATH, when set

@dependencies:
- extendable.core.config: Settings
- extendable.fieldsets / extendable.entities: project definitions
- extendable.services.manifest: manifest loading
"""

from typing import Optional

from extendable.composition.catalog import MappingConfig, RecordTypeCatalog
from extendable.core.config import Settings, get_settings
from extendable.core.logger import setup_logger
from extendable.entities import register_record_types
from extendable.fieldsets import register_field_sets
from extendable.services.manifest import load_manifest

logger = setup_logger("extendable.services.bootstrap")


def build_catalog(settings: Optional[Settings] = None, manifest_path: Optional[str] = None) -> RecordTypeCatalog:
    """
    Create and populate a catalog.

    Args:
        settings: Settings to use; the global settings by default
        manifest_path: Overrides MANIFEST_PATH when given

    Returns:
        RecordTypeCatalog: Catalog with all definitions registered
    """
    settings = settings or get_settings()
    catalog = RecordTypeCatalog(
        policy=settings.CONFLICT_POLICY,
        mapping=MappingConfig.from_settings(settings),
    )

    if settings.LOAD_BUILTIN_DEFINITIONS:
        register_field_sets(catalog)
        register_record_types(catalog)

    manifest = manifest_path or settings.MANIFEST_PATH
    if manifest:
        load_manifest(manifest, catalog)

    logger.info(
        f"Catalog ready: {len(catalog.registry)} field set(s), "
        f"{len(catalog)} record type(s), conflict policy '{catalog.policy.value}'"
    )
    return catalog
