"""
Field set for authored content. Carries its author relationship, so every
record type incorporating it gets a join column to User.
"""

from extendable.schemas.definitions import AttributeSpec, FieldSet, RelationshipSpec


class PostBehavior:

    @property
    def is_published(self) -> bool:
        return self.published_at is not None


POST_TRAIT = FieldSet(
    name="PostTrait",
    doc="Title, body and author of a piece of content.",
    attributes=(
        AttributeSpec(name="id", type="integer", primary_key=True, autoincrement=True),
        AttributeSpec(name="title", type="string", length=255),
        AttributeSpec(name="body", type="text", nullable=True),
        AttributeSpec(name="published_at", type="datetime", nullable=True),
    ),
    relationships=(
        RelationshipSpec(name="user", target="User", kind="many_to_one", inversed_by="posts"),
    ),
    behavior=PostBehavior,
)
