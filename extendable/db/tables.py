"""
@file: tables.py
@description:
Turns the effective schemas of a catalog into SQLAlchemy tables on a single
MetaData. That MetaData is the declared schema the synchronizer compares
against the live database.

@notes:
- Relationships become join columns named `<relationship>_id`, typed like the
  target's primary key and constrained by a foreign key to it.
- many_to_one join columns are indexed; one_to_one join columns are unique.
- Relationship targets are resolved here; a missing target is fatal.

@dependencies:
- SQLAlchemy: Table, Column and type construction
"""

from typing import Dict, List, Optional

from sqlalchemy import (
    JSON,
    BigInteger,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    MetaData,
    Numeric,
    SmallInteger,
    String,
    Table,
    Text,
    Time,
    Uuid,
)
from sqlalchemy.types import TypeEngine

from extendable.composition.catalog import RecordTypeCatalog
from extendable.core.exceptions import SchemaDefinitionError, UnresolvedRelationshipError
from extendable.core.logger import setup_logger
from extendable.db.base import new_metadata
from extendable.schemas.definitions import (
    AttributeSpec,
    AttributeType,
    EffectiveSchema,
    RelationshipKind,
    RelationshipSpec,
)

logger = setup_logger("extendable.db.tables")


def column_type(attribute: AttributeSpec) -> TypeEngine:
    """
    SQLAlchemy type for an attribute's storage type.
    """
    kind = attribute.type
    if kind == AttributeType.STRING:
        return String(attribute.length)
    if kind == AttributeType.DECIMAL:
        return Numeric(precision=attribute.precision, scale=attribute.scale)
    if kind == AttributeType.DATETIME:
        return DateTime(timezone=True)
    simple = {
        AttributeType.INTEGER: Integer,
        AttributeType.BIGINT: BigInteger,
        AttributeType.SMALLINT: SmallInteger,
        AttributeType.TEXT: Text,
        AttributeType.BOOLEAN: Boolean,
        AttributeType.FLOAT: Float,
        AttributeType.DATE: Date,
        AttributeType.TIME: Time,
        AttributeType.JSON: JSON,
        AttributeType.UUID: Uuid,
    }
    return simple[kind]()


def build_column(attribute: AttributeSpec) -> Column:
    return Column(
        attribute.name,
        column_type(attribute),
        primary_key=attribute.primary_key,
        nullable=attribute.nullable,
        default=attribute.default,
        unique=attribute.unique or None,
        index=attribute.index or None,
        autoincrement=True if attribute.autoincrement else "auto",
        doc=attribute.doc,
    )


def target_primary_key(schema: EffectiveSchema, relationship: RelationshipSpec,
                       schemas: Dict[str, EffectiveSchema]) -> tuple:
    """
    Resolve a relationship to (target schema, target primary key attribute).

    Raises:
        UnresolvedRelationshipError: If the target record type does not exist
        SchemaDefinitionError: If the target has a composite primary key
    """
    target = schemas.get(relationship.target)
    if target is None:
        logger.error(
            f"Relationship '{schema.name}.{relationship.name}' targets unknown "
            f"record type '{relationship.target}'"
        )
        raise UnresolvedRelationshipError(schema.name, relationship.name, relationship.target)
    primary_key = target.primary_key
    if len(primary_key) != 1:
        raise SchemaDefinitionError(
            f"Relationship '{schema.name}.{relationship.name}': target '{target.name}' "
            f"must have exactly one primary key attribute"
        )
    return target, primary_key[0]


def build_join_column(schema: EffectiveSchema, relationship: RelationshipSpec,
                      schemas: Dict[str, EffectiveSchema]) -> Column:
    target, pk = target_primary_key(schema, relationship, schemas)
    one_to_one = relationship.kind == RelationshipKind.ONE_TO_ONE
    foreign_key = ForeignKey(
        f"{target.table}.{pk.name}",
        ondelete=relationship.on_delete.value if relationship.on_delete else None,
    )
    return Column(
        relationship.column_name,
        column_type(pk),
        foreign_key,
        nullable=relationship.nullable,
        unique=True if one_to_one else None,
        index=None if one_to_one else True,
        doc=relationship.doc,
    )


def build_table(schema: EffectiveSchema, schemas: Dict[str, EffectiveSchema], metadata: MetaData) -> Table:
    """
    Add the table of one effective schema to `metadata`.
    """
    columns: List[Column] = [build_column(a) for a in schema.attributes]
    names = {c.name for c in columns}
    for relationship in schema.relationships:
        column = build_join_column(schema, relationship, schemas)
        if column.name in names:
            raise SchemaDefinitionError(
                f"Record type '{schema.name}': join column '{column.name}' of relationship "
                f"'{relationship.name}' clashes with an attribute"
            )
        names.add(column.name)
        columns.append(column)
    return Table(schema.table, metadata, *columns)


def build_metadata(catalog: RecordTypeCatalog, metadata: Optional[MetaData] = None) -> MetaData:
    """
    Build the declared schema of every record type in the catalog.

    Args:
        catalog: Catalog to iterate
        metadata: MetaData to populate; a new one with the naming convention by default

    Returns:
        MetaData: One table per record type

    Raises:
        UnresolvedRelationshipError: If any relationship target is missing
    """
    metadata = metadata if metadata is not None else new_metadata()
    schemas = {schema.name: schema for schema in catalog.effective_schemas()}
    for schema in schemas.values():
        build_table(schema, schemas, metadata)
    logger.debug(f"Built metadata for {len(schemas)} record types: {sorted(metadata.tables)}")
    return metadata
