"""
User record types.

`User` takes UserTrait as is. `User2` shows how a project extends it: a longer
`firstname` replaces the field set's definition, and `phone` is added.
"""

from extendable.schemas.definitions import AttributeSpec, RecordType

USER = RecordType(
    name="User",
    uses=("UserTrait",),
)

USER2 = RecordType(
    name="User2",
    uses=("UserTrait",),
    attributes=(
        AttributeSpec(name="firstname", type="string", length=100),
        AttributeSpec(name="phone", type="string", length=32, nullable=True),
    ),
)
