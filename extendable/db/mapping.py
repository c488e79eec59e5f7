"""
@file: mapping.py
@description:
Builds mapped ORM classes for every record type in a catalog.

Each class is created at bootstrap with the record type's name, derives from
the effective behaviors (record type first, then field sets, later ones
first) and RecordMixin, and is mapped imperatively onto the table built by
extendable.db.tables. Relationships are wired as SQLAlchemy relationship()
properties over their join columns, with a backref when `inversed_by` is set.
The target primary key is always the remote side, so a record type may
reference itself (`parent -> Category`) and still get a scalar attribute.

Mapping failures are raised as SchemaDefinitionError.

@dependencies:
- SQLAlchemy ORM: registry.map_imperatively, relationship, backref
"""

from typing import Dict, Iterator, List, Set, Tuple, Type

from sqlalchemy import MetaData
from sqlalchemy.exc import ArgumentError, InvalidRequestError
from sqlalchemy.orm import backref, relationship

from extendable.composition.catalog import RecordTypeCatalog
from extendable.core.exceptions import SchemaDefinitionError, UnknownRecordTypeError
from extendable.core.logger import setup_logger
from extendable.db.base import RecordMixin, new_mapper_registry
from extendable.db.tables import build_metadata, target_primary_key
from extendable.schemas.definitions import EffectiveSchema, RelationshipKind

logger = setup_logger("extendable.db.mapping")


class MappedModels:
    """
    Mapped record classes by record type name, plus their metadata.
    """

    def __init__(self, metadata: MetaData, classes: Dict[str, Type[RecordMixin]]) -> None:
        self.metadata = metadata
        self.classes = classes

    def get(self, name: str) -> Type[RecordMixin]:
        try:
            return self.classes[name]
        except KeyError:
            raise UnknownRecordTypeError(name) from None

    def __getitem__(self, name: str) -> Type[RecordMixin]:
        return self.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self.classes

    def __iter__(self) -> Iterator[Type[RecordMixin]]:
        return iter(self.classes.values())


def _build_class(schema: EffectiveSchema, module: str) -> Type[RecordMixin]:
    bases = tuple(schema.behaviors) + (RecordMixin,)
    try:
        return type(schema.name, bases, {"__module__": module, "__doc__": f"Record type {schema.name}."})
    except TypeError as e:
        raise SchemaDefinitionError(
            f"Record type '{schema.name}': behaviors cannot be combined: {e}"
        ) from e


def map_record_types(catalog: RecordTypeCatalog) -> MappedModels:
    """
    Map every record type of the catalog on a fresh mapper registry.

    Args:
        catalog: Catalog to map

    Returns:
        MappedModels: Classes ready to be used with a Session

    Raises:
        UnresolvedRelationshipError: If a relationship target is missing
        SchemaDefinitionError: If a table or a class cannot be built
    """
    mapper_registry = new_mapper_registry()
    metadata = build_metadata(catalog, mapper_registry.metadata)
    schemas = catalog.effective_schemas()

    classes = {
        schema.name: _build_class(schema, catalog.mapping.entity_prefix)
        for schema in schemas
    }

    by_name = {schema.name: schema for schema in schemas}
    _check_backrefs(by_name)

    try:
        for schema in schemas:
            table = metadata.tables[schema.table]
            properties = {}
            for rel in schema.relationships:
                target, pk = target_primary_key(schema, rel, by_name)
                # The join column is always on this side, including self references
                options = {
                    "foreign_keys": [table.c[rel.column_name]],
                    "remote_side": [metadata.tables[target.table].c[pk.name]],
                }
                if rel.inversed_by:
                    many = rel.kind == RelationshipKind.MANY_TO_ONE
                    options["backref"] = backref(rel.inversed_by, uselist=many)
                properties[rel.name] = relationship(classes[rel.target], **options)
            mapper_registry.map_imperatively(classes[schema.name], table, properties=properties)
            logger.debug(f"Mapped record type '{schema.name}' onto table '{schema.table}'")

        mapper_registry.configure()
    except (ArgumentError, InvalidRequestError) as e:
        logger.error(f"Failed to map record types: {str(e)}")
        raise SchemaDefinitionError(f"Failed to map record types: {str(e)}") from e
    return MappedModels(metadata, classes)


def _check_backrefs(schemas: Dict[str, EffectiveSchema]) -> None:
    """
    Reject `inversed_by` names already taken on the target record type.

    Raises:
        SchemaDefinitionError: If the name is a member or join column of the
            target, or another relationship already uses it
    """
    taken: Dict[str, Set[str]] = {}
    for name, schema in schemas.items():
        members: List[str] = list(schema.attribute_names)
        for rel in schema.relationships:
            members.extend((rel.name, rel.column_name))
        taken[name] = set(members)

    claimed: Dict[Tuple[str, str], str] = {}
    for schema in schemas.values():
        for rel in schema.relationships:
            if not rel.inversed_by or rel.target not in taken:
                continue
            key = (rel.target, rel.inversed_by)
            owner = f"{schema.name}.{rel.name}"
            if rel.inversed_by in taken[rel.target]:
                problem = f"'{rel.inversed_by}' is already a member of '{rel.target}'"
            elif key in claimed:
                problem = f"'{rel.inversed_by}' is already the inverse of {claimed[key]}"
            else:
                claimed[key] = owner
                continue
            logger.error(f"Relationship '{owner}': {problem}")
            raise SchemaDefinitionError(f"Relationship '{owner}': inverse side {problem}")
