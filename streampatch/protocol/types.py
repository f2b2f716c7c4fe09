"""Wire types for session events."""

from __future__ import annotations

from typing import Any, Dict, Literal

from pydantic import BaseModel, ConfigDict, Field

PROTOCOL_VERSION = "1.0.0"

EventType = Literal[
    "document.partial",
    "document.final",
    "block.outcome",
    "session.complete",
    "session.error",
]


class EventEnvelope(BaseModel):
    """Session event envelope."""

    model_config = ConfigDict(extra="forbid")

    session_id: str = Field(min_length=1)
    seq: int = Field(ge=1)
    ts_ms: int = Field(ge=0)
    event_type: EventType
    payload: Dict[str, Any] = Field(default_factory=dict)


class EventFrame(BaseModel):
    """Wire frame for emitted events."""

    model_config = ConfigDict(extra="forbid")

    version: Literal["1.0.0"] = PROTOCOL_VERSION
    method: Literal["event"] = "event"
    params: EventEnvelope
