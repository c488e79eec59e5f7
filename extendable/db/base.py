"""
SQLAlchemy Base Definition Module.

Record types are mapped imperatively (their classes are built at bootstrap
from effective schemas), so instead of a declarative base this module holds
what every mapped record class shares: the metadata naming convention and the
RecordMixin base class.
"""

from typing import Any, Dict

from sqlalchemy import MetaData, inspect
from sqlalchemy.orm import registry

# Named constraints keep schema comparison stable across databases
NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


def new_metadata() -> MetaData:
    return MetaData(naming_convention=NAMING_CONVENTION)


def new_mapper_registry() -> registry:
    return registry(metadata=new_metadata())


class RecordMixin:
    """
    Base class of every mapped record type.

    Provides the keyword constructor declarative classes usually get, plus
    small conveniences for inspection.
    """

    def __init__(self, **kwargs: Any) -> None:
        cls_ = type(self)
        for key, value in kwargs.items():
            if not hasattr(cls_, key):
                raise TypeError(f"{key!r} is an invalid keyword argument for {cls_.__name__}")
            setattr(self, key, value)

    def to_dict(self) -> Dict[str, Any]:
        return {attr.key: getattr(self, attr.key) for attr in inspect(type(self)).column_attrs}

    def __repr__(self) -> str:
        mapper = inspect(type(self))
        keys = ", ".join(
            f"{col.key}={getattr(self, col.key)!r}" for col in mapper.primary_key
        )
        return f"<{type(self).__name__}({keys})>"
