"""
Database Session Management Module.

This module handles the creation of the database engine and sessions used by
the schema synchronizer and by code working with mapped record types.

Usage:
- The CLI builds its engine with `create_db_engine()`, honoring --database-url
- FastAPI route handlers use the `get_engine` dependency
- Code persisting mapped records uses `make_session_factory(engine)`
"""

from functools import lru_cache
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from extendable.core.config import settings


def create_db_engine(database_url: Optional[str] = None, echo: Optional[bool] = None) -> Engine:
    """
    Create an engine for `database_url` (defaults to DATABASE_URL).
    """
    url = database_url or settings.DATABASE_URL
    return create_engine(
        url,
        pool_pre_ping=True,  # Check connection before using it
        echo=settings.DB_ECHO if echo is None else echo,
    )


def make_session_factory(engine: Engine) -> sessionmaker:
    """
    Create a sessionmaker bound to `engine`.
    """
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )


@lru_cache()
def get_engine() -> Engine:
    """
    FastAPI dependency returning the process-wide engine for DATABASE_URL.
    """
    return create_db_engine()
