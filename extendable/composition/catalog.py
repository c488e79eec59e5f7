"""
@file: catalog.py
@description:
The catalog of record types, together with the field set registry they draw
from. It is the single discovery point the table builder, the ORM mapper and
the schema synchronizer iterate over.

Names can be given plain (`User`) or qualified by the mapping declaration,
either with the alias (`App:User`) or with the namespace prefix of the kind
(`extendable.entities.User`, `extendable.fieldsets.UserTrait`). Qualified
names are stored unqualified.

@dependencies:
- extendable.composition.registry: Field set registry
- extendable.composition.composer: Effective schema computation
- pydantic: Mapping declaration model
"""

from typing import Any, Iterable, List, Optional, Type, Union

from pydantic import BaseModel, Field

from extendable.composition.composer import ConflictPolicy, compose
from extendable.composition.registry import AttributeLike, FieldSetRegistry, RelationshipLike
from extendable.core.exceptions import DuplicateDefinitionError, UnknownRecordTypeError
from extendable.core.logger import setup_logger
from extendable.schemas.definitions import (
    EffectiveSchema,
    FieldSet,
    RecordType,
    RelationshipSpec,
)

logger = setup_logger("extendable.composition.catalog")


class MappingConfig(BaseModel):
    """
    Where record types and field sets live, and the alias that stands for both.
    """
    alias: str = Field("App")
    entity_prefix: str = Field("extendable.entities")
    fieldset_prefix: str = Field("extendable.fieldsets")

    @classmethod
    def from_settings(cls, settings: Any) -> "MappingConfig":
        return cls(
            alias=settings.MAPPING_ALIAS,
            entity_prefix=settings.MAPPING_ENTITY_PREFIX,
            fieldset_prefix=settings.MAPPING_FIELDSET_PREFIX,
        )

    def unqualify(self, name: str, prefix: str) -> str:
        """Strip the alias or namespace prefix from a name; foreign qualifiers are kept."""
        if ":" in name:
            alias, _, rest = name.partition(":")
            if alias == self.alias:
                return rest
            return name
        if prefix and name.startswith(prefix + "."):
            return name[len(prefix) + 1:]
        return name


class RecordTypeCatalog:
    """
    Record types in registration order plus their field set registry.

    Args:
        registry: Field set registry; a new empty one by default
        policy: Conflict policy used when composing
        mapping: Mapping declaration used to resolve qualified names
    """

    def __init__(
        self,
        registry: Optional[FieldSetRegistry] = None,
        policy: Union[ConflictPolicy, str] = ConflictPolicy.FAIL,
        mapping: Optional[MappingConfig] = None,
    ) -> None:
        self.registry = registry if registry is not None else FieldSetRegistry()
        self.policy = ConflictPolicy(policy)
        self.mapping = mapping or MappingConfig()
        self._record_types: dict = {}

    # Name resolution

    def record_type_name(self, name: str) -> str:
        return self.mapping.unqualify(name, self.mapping.entity_prefix)

    def field_set_name(self, name: str) -> str:
        return self.mapping.unqualify(name, self.mapping.fieldset_prefix)

    def _normalize_relationships(self, relationships: Iterable[RelationshipSpec]) -> tuple:
        return tuple(
            r.model_copy(update={"target": self.record_type_name(r.target)})
            for r in relationships
        )

    # Field sets

    def define_field_set(
        self,
        name: str,
        attributes: Iterable[AttributeLike] = (),
        relationships: Iterable[RelationshipLike] = (),
        behavior: Optional[Type[Any]] = None,
        doc: Optional[str] = None,
    ) -> FieldSet:
        field_set = FieldSet(
            name=self.field_set_name(name),
            attributes=tuple(attributes),
            relationships=tuple(relationships),
            behavior=behavior,
            doc=doc,
        )
        return self.add_field_set(field_set)

    def add_field_set(self, field_set: FieldSet) -> FieldSet:
        field_set = field_set.model_copy(update={
            "relationships": self._normalize_relationships(field_set.relationships),
        })
        return self.registry.register(field_set)

    def resolve_field_set(self, name: str) -> FieldSet:
        return self.registry.resolve(self.field_set_name(name))

    # Record types

    def define_record_type(
        self,
        name: str,
        uses: Iterable[str] = (),
        attributes: Iterable[AttributeLike] = (),
        relationships: Iterable[RelationshipLike] = (),
        table: Optional[str] = None,
        behavior: Optional[Type[Any]] = None,
        doc: Optional[str] = None,
    ) -> RecordType:
        """
        Build and register a record type.

        Raises:
            DuplicateDefinitionError: If the name or the table is taken
        """
        record_type = RecordType(
            name=self.record_type_name(name),
            table=table,
            uses=tuple(uses),
            attributes=tuple(attributes),
            relationships=tuple(relationships),
            behavior=behavior,
            doc=doc,
        )
        return self.add_record_type(record_type)

    def add_record_type(self, record_type: RecordType) -> RecordType:
        record_type = record_type.model_copy(update={
            "uses": tuple(self.field_set_name(u) for u in record_type.uses),
            "relationships": self._normalize_relationships(record_type.relationships),
        })
        if record_type.name in self._record_types:
            logger.error(f"Record type '{record_type.name}' is already defined")
            raise DuplicateDefinitionError("Record type", record_type.name)
        for existing in self._record_types.values():
            if existing.table == record_type.table:
                logger.error(
                    f"Table '{record_type.table}' of record type '{record_type.name}' "
                    f"is already used by '{existing.name}'"
                )
                raise DuplicateDefinitionError("Table", record_type.table)

        self._record_types[record_type.name] = record_type
        logger.debug(
            f"Registered record type '{record_type.name}' (table '{record_type.table}', "
            f"uses {list(record_type.uses)})"
        )
        return record_type

    def get_record_type(self, name: str) -> RecordType:
        try:
            return self._record_types[self.record_type_name(name)]
        except KeyError:
            raise UnknownRecordTypeError(name) from None

    def list_record_types(self) -> List[RecordType]:
        """
        Enumerate all record types in registration order.
        """
        return list(self._record_types.values())

    def record_type_names(self) -> List[str]:
        return list(self._record_types)

    def effective_schema(self, name: str) -> EffectiveSchema:
        """
        Compose the effective schema of one record type.

        Raises:
            UnknownRecordTypeError: If the record type does not exist
            UnknownUnitError: If it incorporates an undefined field set
            ConflictingAttributeError: If field sets conflict under the `fail` policy
        """
        return compose(self.get_record_type(name), self.registry, self.policy)

    def effective_schemas(self) -> List[EffectiveSchema]:
        return [compose(rt, self.registry, self.policy) for rt in self._record_types.values()]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.record_type_name(name) in self._record_types

    def __len__(self) -> int:
        return len(self._record_types)
