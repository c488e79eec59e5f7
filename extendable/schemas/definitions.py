"""
@file: definitions.py
@description:
Declarative, data-only descriptors for field sets and record types.

Schemas:
- AttributeSpec: a single column (storage type, length, nullability, default, ...)
- RelationshipSpec: a reference from the owning record type to another record type
- FieldSet: a reusable, named bundle of attributes, relationships and behavior
- RecordType: a concrete definition bound to a table, incorporating field sets
- EffectiveSchema: the merged result of composing a record type

@notes:
- All descriptors are frozen pydantic models; composition never mutates them.
- Column defaults follow the usual ORM mapping conventions: columns are NOT
  NULL unless declared nullable, string columns default to length 255, and
  join columns are nullable.
- Member names are unique within one descriptor; attributes and relationships
  share a single namespace.

@dependencies:
- pydantic: for validation and immutability
"""

import re
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple, Type

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

IDENTIFIER = r"^[A-Za-z_][A-Za-z0-9_]*$"
DEFAULT_STRING_LENGTH = 255


class AttributeType(str, Enum):
    """Storage types an attribute can be declared with."""
    INTEGER = "integer"
    BIGINT = "bigint"
    SMALLINT = "smallint"
    STRING = "string"
    TEXT = "text"
    BOOLEAN = "boolean"
    FLOAT = "float"
    DECIMAL = "decimal"
    DATE = "date"
    DATETIME = "datetime"
    TIME = "time"
    JSON = "json"
    UUID = "uuid"


class RelationshipKind(str, Enum):
    """Owning-side relationship kinds; both carry a join column."""
    MANY_TO_ONE = "many_to_one"
    ONE_TO_ONE = "one_to_one"


class OnDelete(str, Enum):
    CASCADE = "CASCADE"
    SET_NULL = "SET NULL"
    RESTRICT = "RESTRICT"


def _snake_case(name: str) -> str:
    return re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", name).lower()


class AttributeSpec(BaseModel):
    """
    Definition of one column.
    """
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., pattern=IDENTIFIER, description="Attribute (and column) name.")
    type: AttributeType = Field(..., description="Storage type.")
    length: Optional[int] = Field(None, gt=0, description="Length, for string columns.")
    precision: Optional[int] = Field(None, gt=0, description="Total digits, for decimal columns.")
    scale: Optional[int] = Field(None, ge=0, description="Fractional digits, for decimal columns.")
    nullable: bool = Field(False, description="Whether NULL is allowed.")
    default: Any = Field(None, description="Client-side default value.")
    primary_key: bool = Field(False)
    autoincrement: bool = Field(False)
    unique: bool = Field(False)
    index: bool = Field(False)
    doc: Optional[str] = Field(None)

    @model_validator(mode="before")
    @classmethod
    def default_string_length(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("length") is None and data.get("type") in ("string", AttributeType.STRING):
            data = dict(data)
            data["length"] = DEFAULT_STRING_LENGTH
        return data

    @model_validator(mode="after")
    def check_type_options(self) -> "AttributeSpec":
        if self.length is not None and self.type != AttributeType.STRING:
            raise ValueError(f"'{self.name}': length only applies to string attributes")
        if (self.precision is not None or self.scale is not None) and self.type != AttributeType.DECIMAL:
            raise ValueError(f"'{self.name}': precision/scale only apply to decimal attributes")
        if self.primary_key and self.nullable:
            raise ValueError(f"'{self.name}': a primary key cannot be nullable")
        return self


class RelationshipSpec(BaseModel):
    """
    Owning side of a relationship to another record type.

    The owning table gets a join column named `<name>_id` pointing at the
    target's primary key.
    """
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., pattern=IDENTIFIER)
    target: str = Field(..., min_length=1, description="Name of the referenced record type.")
    kind: RelationshipKind = Field(RelationshipKind.MANY_TO_ONE)
    nullable: bool = Field(True, description="Whether the join column allows NULL.")
    inversed_by: Optional[str] = Field(None, pattern=IDENTIFIER, description="Collection name on the target.")
    on_delete: Optional[OnDelete] = Field(None)
    doc: Optional[str] = Field(None)

    @property
    def column_name(self) -> str:
        return f"{self.name}_id"


class _MemberContainer(BaseModel):
    """Shared validation for descriptors that own attributes and relationships."""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str = Field(..., pattern=IDENTIFIER)
    attributes: Tuple[AttributeSpec, ...] = Field(default=())
    relationships: Tuple[RelationshipSpec, ...] = Field(default=())
    behavior: Optional[Type[Any]] = Field(None, description="Mixin class contributing accessor behavior.")
    doc: Optional[str] = Field(None)

    @model_validator(mode="after")
    def check_unique_members(self):
        seen = set()
        for member in self.members():
            if member.name in seen:
                raise ValueError(f"'{self.name}' declares '{member.name}' more than once")
            seen.add(member.name)
        return self

    def members(self) -> Iterator[Any]:
        """Attributes then relationships, in declaration order."""
        yield from self.attributes
        yield from self.relationships

    def member_names(self) -> List[str]:
        return [member.name for member in self.members()]


class FieldSet(_MemberContainer):
    """
    A reusable bundle of attribute and relationship definitions.

    Field sets are templates: they have no table of their own and are only
    ever incorporated into record types.
    """


class RecordType(_MemberContainer):
    """
    A concrete definition mapped 1:1 to a table.

    `uses` lists incorporated field sets in declaration order; the record
    type's own attributes and relationships are merged last and win.
    """
    table: Optional[str] = Field(None, pattern=IDENTIFIER, description="Table name; defaults to snake_case name.")
    uses: Tuple[str, ...] = Field(default=())

    @model_validator(mode="before")
    @classmethod
    def default_table_name(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("table") and isinstance(data.get("name"), str):
            data = dict(data)
            data["table"] = _snake_case(data["name"])
        return data

    @field_validator("uses")
    @classmethod
    def check_unique_uses(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        if len(set(v)) != len(v):
            raise ValueError("a field set can only be incorporated once")
        return v


class EffectiveSchema(BaseModel):
    """
    Final attribute/relationship set of a record type after composition.

    `sources` maps every member name to the field set or record type whose
    declaration won.
    """
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    table: str
    attributes: Tuple[AttributeSpec, ...] = ()
    relationships: Tuple[RelationshipSpec, ...] = ()
    behaviors: Tuple[Type[Any], ...] = ()
    sources: Dict[str, str] = Field(default_factory=dict)

    def attribute(self, name: str) -> Optional[AttributeSpec]:
        return next((a for a in self.attributes if a.name == name), None)

    def relationship(self, name: str) -> Optional[RelationshipSpec]:
        return next((r for r in self.relationships if r.name == name), None)

    @property
    def attribute_names(self) -> List[str]:
        return [a.name for a in self.attributes]

    @property
    def primary_key(self) -> List[AttributeSpec]:
        return [a for a in self.attributes if a.primary_key]
