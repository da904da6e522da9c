"""Conversation service layer: the append-only exchange log."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.exceptions.base import PersistenceError
from app.schemas.conversation import ConversationCreate
from models.conversation import Conversation


logger = logging.getLogger(__name__)


class ConversationService:
    """Service class for reading and appending conversation records."""

    def __init__(self, db: AsyncSession):
        """Initialize conversation service with database session.

        Args:
            db: Async database session for data operations.
        """
        self.db = db

    async def list_conversations(self) -> list[Conversation]:
        """Return every stored conversation, oldest first."""
        try:
            result = await self.db.execute(select(Conversation).order_by(Conversation.id))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Failed to list conversations: {str(e)}")
            raise PersistenceError("Failed to load conversation history") from e

    async def create_conversation(self, data: ConversationCreate) -> Conversation:
        """Insert a complete (user message, AI response) pair.

        Args:
            data: Validated conversation fields

        Returns:
            The stored row with its server-assigned id and timestamp
        """
        conversation = Conversation(
            user_message=data.user_message,
            ai_response=data.ai_response,
            system_prompt=data.system_prompt,
        )
        try:
            self.db.add(conversation)
            await self.db.commit()
            await self.db.refresh(conversation)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to store conversation: {str(e)}")
            raise PersistenceError("Failed to store conversation") from e

        logger.debug(f"Stored conversation {conversation.id}")
        return conversation
