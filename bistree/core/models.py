"""
Pydantic models for runner settings.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RunnerSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    view_limit: int = Field(default=10, ge=1)
    separator: str = " > "
    live: Literal["auto", "always", "never"] = "auto"
    errors_as_failures: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    log_file: Optional[str] = None

    @field_validator("separator")
    @classmethod
    def separator_nonempty(cls, v: str) -> str:
        if not v:
            raise ValueError("separator must not be empty")
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def level_upper(cls, v):
        return v.upper() if isinstance(v, str) else v
