"""
Conversation model: one logged exchange between the user and the assistant.
"""

from sqlalchemy import Column, Text

from .base import BaseModel


class Conversation(BaseModel):
    """
    Represents a single (user message, AI response) pair together with the
    system prompt that was active when the response was generated.
    """

    __tablename__ = "conversations"

    user_message = Column(Text, nullable=False)
    ai_response = Column(Text, nullable=False)
    system_prompt = Column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<Conversation id={self.id} created_at={self.created_at}>"
