"""
Field Sets Package.

Namespace root of the project's reusable field sets. Field sets are never
mapped on their own; record types under extendable.entities incorporate them
by name.
"""

from typing import Tuple

from extendable.schemas.definitions import FieldSet

from .post import POST_TRAIT, PostBehavior
from .user import USER_TRAIT, UserBehavior

FIELD_SETS: Tuple[FieldSet, ...] = (USER_TRAIT, POST_TRAIT)


def register_field_sets(catalog) -> None:
    """Register every field set of this package in `catalog`."""
    for field_set in FIELD_SETS:
        catalog.add_field_set(field_set)


__all__ = [
    "FIELD_SETS",
    "POST_TRAIT",
    "PostBehavior",
    "USER_TRAIT",
    "UserBehavior",
    "register_field_sets",
]
