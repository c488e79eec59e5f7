"""
@file: config.py
@description:
Centralized configuration for Extendable Entities. Settings are loaded from
environment variables (and an optional .env file) once, at bootstrap.

The configuration includes settings for:
- Application general settings (environment, debug mode)
- Database connection used by the schema synchronizer
- Composition policy for conflicting field sets
- The mapping declaration: alias and namespace prefixes of record types
  and field sets, plus an optional JSON manifest of extra definitions
- Logging parameters

@dependencies:
- pydantic: For settings validation
- pydantic_settings: For environment variable loading
- dotenv: For loading environment variables from .env file
"""

from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    """
    # Application Settings
    APP_ENV: str = Field(default="development")
    DEBUG: bool = Field(default=False)

    # Database
    DATABASE_URL: str = Field(default="sqlite:///./extendable.db")
    DB_ECHO: bool = Field(default=False)

    # Composition
    CONFLICT_POLICY: str = Field(default="fail")
    LOAD_BUILTIN_DEFINITIONS: bool = Field(default=True)
    MANIFEST_PATH: Optional[str] = Field(default=None)

    # Mapping declaration
    MAPPING_ALIAS: str = Field(default="App")
    MAPPING_ENTITY_PREFIX: str = Field(default="extendable.entities")
    MAPPING_FIELDSET_PREFIX: str = Field(default="extendable.fieldsets")

    # Logging
    LOG_LEVEL: str = Field(default="INFO")

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    @field_validator("CONFLICT_POLICY", mode="before")
    def normalize_conflict_policy(cls, v: str) -> str:
        """
        Accept any casing and dashes, reject unknown policies early.
        """
        value = str(v).strip().lower().replace("-", "_")
        if value not in ("fail", "last_wins"):
            raise ValueError(f"CONFLICT_POLICY must be 'fail' or 'last_wins', got {v!r}")
        return value

    @field_validator("MANIFEST_PATH", mode="before")
    def empty_manifest_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not str(v).strip():
            return None
        return str(v).strip()


# Create a global settings object
settings = Settings()


def get_settings() -> Settings:
    """
    Function to get the settings object for dependency injection in FastAPI.
    """
    return settings
