"""Conversation schemas for request/response serialization."""

from pydantic import ConfigDict, Field

from .base import BaseModelSchema, BaseSchema


class ConversationBase(BaseSchema):
    """Fields shared by conversation input and output."""

    user_message: str = Field(..., min_length=1, description="What the user said or typed")
    ai_response: str = Field(..., min_length=1, description="What the assistant replied")
    system_prompt: str = Field(
        ..., min_length=1, description="Instruction context active for the reply"
    )


class ConversationCreate(ConversationBase):
    """Schema for logging a conversation.

    ``id`` and ``createdAt`` are assigned by the server; if a caller sends
    them they are dropped.
    """

    model_config = ConfigDict(extra="ignore")


class ConversationResponse(BaseModelSchema, ConversationBase):
    """Schema for a stored conversation record."""

    # Stored rows are returned verbatim, even if they predate validation.
    user_message: str
    ai_response: str
    system_prompt: str
