"""
Services Package for Extendable Entities.

This package wires definitions to the outside world:
- Catalog bootstrap from settings
- JSON manifest loading
- Schema synchronization through Alembic
"""
