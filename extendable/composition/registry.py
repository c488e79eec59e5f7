"""
@file: registry.py
@description:
Catalog of named field sets available for incorporation into record types.

Registration is purely additive: a name can be defined once, and the stored
FieldSet is immutable, so every record type that resolves it sees the same
definition.

@dependencies:
- extendable.schemas.definitions: FieldSet and member descriptors
- extendable.core.logger: For component-specific logging
"""

from typing import Any, Dict, Iterable, Iterator, List, Optional, Type, Union

from extendable.core.exceptions import DuplicateDefinitionError, UnknownUnitError
from extendable.core.logger import setup_logger
from extendable.schemas.definitions import AttributeSpec, FieldSet, RelationshipSpec

logger = setup_logger("extendable.composition.registry")

AttributeLike = Union[AttributeSpec, Dict[str, Any]]
RelationshipLike = Union[RelationshipSpec, Dict[str, Any]]


class FieldSetRegistry:
    """
    Holds field sets by name, in definition order.
    """

    def __init__(self) -> None:
        self._field_sets: Dict[str, FieldSet] = {}

    def define(
        self,
        name: str,
        attributes: Iterable[AttributeLike] = (),
        relationships: Iterable[RelationshipLike] = (),
        behavior: Optional[Type[Any]] = None,
        doc: Optional[str] = None,
    ) -> FieldSet:
        """
        Build and register a field set.

        Args:
            name: Unique field set name
            attributes: Attribute specs (or dicts in the same shape)
            relationships: Relationship specs (or dicts in the same shape)
            behavior: Optional mixin class with accessor behavior
            doc: Optional description

        Returns:
            FieldSet: The registered definition

        Raises:
            DuplicateDefinitionError: If the name is already registered
        """
        field_set = FieldSet(
            name=name,
            attributes=tuple(attributes),
            relationships=tuple(relationships),
            behavior=behavior,
            doc=doc,
        )
        return self.register(field_set)

    def register(self, field_set: FieldSet) -> FieldSet:
        if field_set.name in self._field_sets:
            logger.error(f"Field set '{field_set.name}' defined twice")
            raise DuplicateDefinitionError("Field set", field_set.name)
        self._field_sets[field_set.name] = field_set
        logger.debug(f"Registered field set '{field_set.name}' with members {field_set.member_names()}")
        return field_set

    def resolve(self, name: str, referenced_by: Optional[str] = None) -> FieldSet:
        """
        Return the field set registered under `name`.

        Raises:
            UnknownUnitError: If no such field set exists
        """
        try:
            return self._field_sets[name]
        except KeyError:
            raise UnknownUnitError(name, referenced_by) from None

    def names(self) -> List[str]:
        return list(self._field_sets)

    def __contains__(self, name: object) -> bool:
        return name in self._field_sets

    def __len__(self) -> int:
        return len(self._field_sets)

    def __iter__(self) -> Iterator[FieldSet]:
        return iter(list(self._field_sets.values()))
