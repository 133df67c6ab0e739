"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, cglctl.toml only contains
overrides.  A fresh library needs no config file at all.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from cglctl.domain.numbering import step_hundredths


class LibraryConfig(BaseModel):
    """[library] section."""

    model_config = {"frozen": True}

    name: str = "my-library"


class DatabaseConfig(BaseModel):
    """[database] section."""

    model_config = {"frozen": True}

    filename: str = "cglctl.db"
    busy_timeout: float = Field(default=5.0, gt=0)


class NumberingConfig(BaseModel):
    """[numbering] section.

    Steps leave room for manual insertions between assigned numbers.
    """

    model_config = {"frozen": True}

    book_step: float = 5
    chapter_step: float = 5
    record_step: float = 10
    strict_parse: bool = False
    max_attempts: int = Field(default=3, ge=1)

    @field_validator("book_step", "chapter_step", "record_step")
    @classmethod
    def _valid_step(cls, value: float) -> float:
        step_hundredths(value)
        return value
