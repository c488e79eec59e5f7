"""
Entities Package.

Namespace root of the project's record types. Each record type is a thin
definition that incorporates field sets from extendable.fieldsets and adds or
overrides what the project needs.
"""

from typing import Tuple

from extendable.schemas.definitions import RecordType

from .post import POST
from .user import USER, USER2

RECORD_TYPES: Tuple[RecordType, ...] = (USER, USER2, POST)


def register_record_types(catalog) -> None:
    """Register every record type of this package in `catalog`."""
    for record_type in RECORD_TYPES:
        catalog.add_record_type(record_type)


__all__ = ["POST", "RECORD_TYPES", "USER", "USER2", "register_record_types"]
