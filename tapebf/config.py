from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator

from .tape import DEFAULT_SEGMENT_SIZE


class EofPolicy(str, Enum):
    """What a read stores once the input stream is exhausted."""

    UNCHANGED = "unchanged"
    ZERO = "zero"
    MAX = "max"


class InterpreterConfig(BaseModel):
    segment_size: int = Field(default=DEFAULT_SEGMENT_SIZE, ge=2)
    eof: EofPolicy = EofPolicy.MAX
    flush_output: bool = True

    @field_validator("eof", mode="before")
    @classmethod
    def normalize_eof(cls, value: object) -> object:
        if isinstance(value, str):
            return value.lower()
        return value


__all__ = ["EofPolicy", "InterpreterConfig"]
