"""Request and response models for the HTTP API."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from ..mapping.resolver import ResolutionResult


class ConferenceRequest(BaseModel):
    """POST body. A ``message`` field sent by clients is ignored."""

    id: int = Field(default=0, ge=0)
    conference: str = ""


class ConferenceResponse(BaseModel):
    message: Optional[str] = None
    id: int = 0
    conference: str = ""

    @classmethod
    def from_result(cls, result: ResolutionResult) -> "ConferenceResponse":
        return cls(
            message=result.message or None,
            id=result.id,
            conference=result.name,
        )
