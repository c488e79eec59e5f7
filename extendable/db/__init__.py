"""
Database Package for Extendable Entities.

This package turns effective schemas into SQLAlchemy structures:
- Table construction on a shared MetaData (the declared schema)
- Imperative ORM mapping of record type classes
- Engine and session management
"""
