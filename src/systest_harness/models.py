"""Base Pydantic models for harness documents and records.

This module defines the foundational model classes used by test documents,
registry metadata and result records. It enforces immutability and strict
schema validation so that loaded packages are deterministic and explicit.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SchemaModel(BaseModel):
    """Base immutable model for all harness models.

    Design principles enforced by this model:
        - Immutability: documents and records cannot be modified after
          creation, so a loaded package cannot change while it runs.
        - Strict schema validation: unknown or extra fields are rejected
          to avoid silent errors caused by typos in test documents.

    All document models must inherit from this class.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        frozen=True,
        extra='forbid',
    )


class DescribedMixin(SchemaModel):
    """Mixin providing element self-documentation.

    The fields defined in this model do not affect execution semantics
    and are used purely for descriptive purposes.
    """

    description: str | None = Field(
        default=None,
        title='Description',
        description='Detailed human-readable description of the element.',
    )


class SettingsModel(BaseSettings):
    """Base immutable model for harness runtime settings.

    Design principles enforced by this model:
        - Immutability: resolved settings cannot be modified after creation.
        - Tolerant schema handling: unknown or extra fields are ignored,
          so unrelated environment variables do not break resolution.

    All runtime settings models must inherit from this class.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        extra='ignore',
    )
