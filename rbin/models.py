"""
Pydantic models for paste operation results and API responses.
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Outcome(str, Enum):
    """Result of a paste operation, one value per caller-visible case."""

    OK = "ok"
    INVALID_ID = "invalid_id"
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    IO_FAILURE = "io_failure"
    EMPTY_CONTENT = "empty_content"
    MISSING_FIELD = "missing_field"
    TOO_LARGE = "too_large"


class WriteResult(BaseModel):
    """Result of persisting a paste."""

    model_config = ConfigDict(frozen=True)

    outcome: Outcome
    paste_id: Optional[str] = Field(None, description="Id the paste is stored under")
    error: Optional[str] = Field(None, description="Underlying error message, if any")

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.OK


class ReadResult(BaseModel):
    """Result of fetching a paste."""

    model_config = ConfigDict(frozen=True)

    outcome: Outcome
    content: Optional[bytes] = Field(None, description="Raw paste bytes")
    error: Optional[str] = Field(None, description="Underlying error message, if any")

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.OK


class HealthCheck(BaseModel):
    """Schema for health check response."""
    ok: bool = Field(..., description="Is the paste directory writable?")
