"""
@file: exceptions.py
@description:
Error hierarchy for Extendable Entities.

Every error is raised while definitions are registered, composed, mapped or
synchronized; nothing here is raised per request. All errors derive from
ExtendableError so callers (CLI, API) can catch the family in one place.
"""


class ExtendableError(Exception):
    """Base class for all composition and synchronization errors."""
    pass


class DuplicateDefinitionError(ExtendableError):
    """A field set, record type or table name was registered twice."""

    def __init__(self, kind: str, name: str):
        self.kind = kind
        self.name = name
        super().__init__(f"{kind} '{name}' is already defined")


class UnknownUnitError(ExtendableError):
    """A field set was referenced but never defined."""

    def __init__(self, name: str, referenced_by: str = None):
        self.name = name
        self.referenced_by = referenced_by
        message = f"Field set '{name}' is not defined"
        if referenced_by:
            message += f" (used by record type '{referenced_by}')"
        super().__init__(message)


class UnknownRecordTypeError(ExtendableError):
    """A record type was looked up but never defined."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Record type '{name}' is not defined")


class ConflictingAttributeError(ExtendableError):
    """Two incorporated field sets disagree on a member and the record type does not override it."""

    def __init__(self, record_type: str, member: str, first: str, second: str):
        self.record_type = record_type
        self.member = member
        self.first = first
        self.second = second
        super().__init__(
            f"Record type '{record_type}': '{member}' is defined differently by "
            f"field sets '{first}' and '{second}'; declare it on the record type to resolve"
        )


class UnresolvedRelationshipError(ExtendableError):
    """A relationship names a record type that does not exist."""

    def __init__(self, record_type: str, relationship: str, target: str):
        self.record_type = record_type
        self.relationship = relationship
        self.target = target
        super().__init__(
            f"Record type '{record_type}': relationship '{relationship}' targets "
            f"unknown record type '{target}'"
        )


class SchemaDefinitionError(ExtendableError):
    """An effective schema cannot be turned into a table (e.g. no primary key)."""
    pass


class ManifestError(ExtendableError):
    """A definitions manifest could not be read or validated."""
    pass


class SchemaSyncError(ExtendableError):
    """Comparing or applying the schema against the database failed."""
    pass
