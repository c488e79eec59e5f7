"""
Core Package for Extendable Entities.

Configuration, logging, error hierarchy and HTTP middleware shared by the
library, the CLI and the API.
"""
