"""
@file: composer.py
@description:
Merges the field sets a record type incorporates with its own declarations
into the record type's effective schema.

Resolution order:
1. Start from an empty, ordered member map.
2. Merge every incorporated field set in declaration order; a later field set
   redefining a name is subject to the conflict policy.
3. Merge the record type's own attributes and relationships last. A local
   declaration always wins and silences any conflict on that name.

A replaced member keeps the position of the first declaration of its name, so
overriding `firstname` does not move it behind members added later.

@notes:
- Attributes and relationships share one namespace; a later declaration of one
  kind replaces an earlier declaration of the other kind.
- Identical redefinitions from two field sets are not conflicts.
- The result is built fresh on every call; nothing is cached or shared.
"""

from enum import Enum
from typing import Any, Dict, List, Tuple, Type, Union

from extendable.composition.registry import FieldSetRegistry
from extendable.core.exceptions import ConflictingAttributeError, SchemaDefinitionError
from extendable.core.logger import setup_logger
from extendable.schemas.definitions import (
    AttributeSpec,
    EffectiveSchema,
    RecordType,
    RelationshipSpec,
)

logger = setup_logger("extendable.composition.composer")

Member = Union[AttributeSpec, RelationshipSpec]


class ConflictPolicy(str, Enum):
    """What to do when two field sets disagree on a member."""
    FAIL = "fail"
    LAST_WINS = "last_wins"


def _merge_behaviors(record_type: RecordType, registry: FieldSetRegistry) -> Tuple[Type[Any], ...]:
    # Later field sets come first in the MRO, matching last-writer-wins for members
    candidates: List[Type[Any]] = []
    if record_type.behavior is not None:
        candidates.append(record_type.behavior)
    for unit_name in reversed(record_type.uses):
        behavior = registry.resolve(unit_name, record_type.name).behavior
        if behavior is not None:
            candidates.append(behavior)

    behaviors: List[Type[Any]] = []
    for behavior in candidates:
        if behavior not in behaviors:
            behaviors.append(behavior)
    return tuple(behaviors)


def compose(
    record_type: RecordType,
    registry: FieldSetRegistry,
    policy: Union[ConflictPolicy, str] = ConflictPolicy.FAIL,
) -> EffectiveSchema:
    """
    Compute the effective schema of a record type.

    Args:
        record_type: The record type to resolve
        registry: Registry the incorporated field sets are resolved against
        policy: Conflict policy between field sets

    Returns:
        EffectiveSchema: Members in resolution order, with their sources

    Raises:
        UnknownUnitError: If an incorporated field set is not registered
        ConflictingAttributeError: Under the `fail` policy, when two field sets
            define a member differently and the record type does not override it
        SchemaDefinitionError: If the result has no primary key
    """
    policy = ConflictPolicy(policy)
    members: Dict[str, Member] = {}
    sources: Dict[str, str] = {}
    conflicts: Dict[str, Tuple[str, str]] = {}

    for unit_name in record_type.uses:
        unit = registry.resolve(unit_name, record_type.name)
        for member in unit.members():
            previous = members.get(member.name)
            if previous is not None and previous != member:
                if policy == ConflictPolicy.FAIL:
                    conflicts.setdefault(member.name, (sources[member.name], unit.name))
                else:
                    logger.warning(
                        f"Record type '{record_type.name}': '{member.name}' from field set "
                        f"'{unit.name}' replaces the one from '{sources[member.name]}'"
                    )
            members[member.name] = member
            sources[member.name] = unit.name

    for member in record_type.members():
        if member.name in sources:
            logger.debug(
                f"Record type '{record_type.name}' overrides '{member.name}' "
                f"from field set '{sources[member.name]}'"
            )
        conflicts.pop(member.name, None)
        members[member.name] = member
        sources[member.name] = record_type.name

    if conflicts:
        name, (first, second) = next(iter(conflicts.items()))
        logger.error(f"Conflicting definitions of '{name}' in record type '{record_type.name}'")
        raise ConflictingAttributeError(record_type.name, name, first, second)

    attributes = tuple(m for m in members.values() if isinstance(m, AttributeSpec))
    relationships = tuple(m for m in members.values() if isinstance(m, RelationshipSpec))

    if not any(a.primary_key for a in attributes):
        logger.error(f"Record type '{record_type.name}' has no primary key attribute")
        raise SchemaDefinitionError(f"Record type '{record_type.name}' has no primary key attribute")

    return EffectiveSchema(
        name=record_type.name,
        table=record_type.table,
        attributes=attributes,
        relationships=relationships,
        behaviors=_merge_behaviors(record_type, registry),
        sources=sources,
    )
