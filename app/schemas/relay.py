"""Relay (WebSocket) schemas.

Every frame on the relay socket is a JSON envelope::

    {"event": "message", "data": {"text": "...", "systemPrompt": "..."}}
    {"event": "response", "data": {"text": "..."}}
"""

from enum import Enum
from typing import Any, Optional

from pydantic import Field

from .base import BaseSchema


class RelayEventType(str, Enum):
    """Event names used on the relay socket."""

    MESSAGE = "message"
    RESPONSE = "response"
    ERROR = "error"


class RelayEnvelope(BaseSchema):
    """Wire envelope around every relay event."""

    event: str = Field(..., min_length=1)
    data: dict[str, Any] = Field(default_factory=dict)


class RelayMessage(BaseSchema):
    """Client to server: a user utterance plus the active system prompt."""

    text: str = Field(..., min_length=1, description="User text (typed or transcribed)")
    system_prompt: Optional[str] = Field(
        default=None, description="Empty or null means use the server default"
    )


class RelayResponse(BaseSchema):
    """Server to client: the assistant's reply (or a fallback message)."""

    text: str
