"""Client-facing error payload.

Only client-safe fields cross this boundary: debug messages, metadata, source,
tags and stack traces stay internal.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .code import Code


class ErrorPayload(BaseModel):
    """Serializable error body for API responses."""

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "title": "Error Payload",
            "examples": [{
                "code": "not_found",
                "message": "user not found",
                "details": {"user_id": 42},
                "retryable": False,
            }],
        },
    )

    code: str = Field(description="Canonical error code name")
    message: str = Field(description="Client-safe message")
    details: dict[str, Any] = Field(default_factory=dict, description="Client-safe details")
    retryable: bool = Field(default=False, description="Whether the same request may succeed on retry")

    @field_validator("code", mode="before")
    @classmethod
    def _code_name(cls, v: Code | str) -> str:
        """Accept Code members as well as names."""
        return str(v) if isinstance(v, Code) else v
