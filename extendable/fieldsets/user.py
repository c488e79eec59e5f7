"""
Field set with the identity and naming attributes of a person.
"""

from extendable.schemas.definitions import AttributeSpec, FieldSet


class UserBehavior:
    """Accessors shared by every record type built from UserTrait."""

    @property
    def full_name(self) -> str:
        parts = [self.firstname, self.lastname]
        return " ".join(p for p in parts if p)

    def has_email(self) -> bool:
        return bool(self.email)


USER_TRAIT = FieldSet(
    name="UserTrait",
    doc="Identity and naming attributes of a user.",
    attributes=(
        AttributeSpec(name="id", type="integer", primary_key=True, autoincrement=True),
        AttributeSpec(name="firstname", type="string", length=50),
        AttributeSpec(name="lastname", type="string", length=50),
        AttributeSpec(name="email", type="string", length=255),
    ),
    behavior=UserBehavior,
)
