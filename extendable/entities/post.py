from extendable.schemas.definitions import RecordType

POST = RecordType(
    name="Post",
    uses=("PostTrait",),
)
