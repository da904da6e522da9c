"""Relay service: forwards user messages to the AI gateway and logs exchanges."""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.config import settings
from app.domains.ai.service import AIGateway
from app.domains.conversation.service import ConversationService
from app.schemas.conversation import ConversationCreate
from app.schemas.relay import RelayMessage, RelayResponse


logger = logging.getLogger(__name__)


class RelayService:
    """Turns one relay message into one relay response.

    Generation failures never propagate: the caller always gets a response,
    either the model's text or a fixed fallback. Successful exchanges are
    written to the conversation log in background tasks, so a slow or broken
    database never delays or changes the reply. Writes are best effort and
    at most once.
    """

    def __init__(self, gateway: AIGateway, session_factory: async_sessionmaker[AsyncSession]):
        self.gateway = gateway
        self.session_factory = session_factory
        self._pending_writes: set[asyncio.Task] = set()

    @property
    def pending_writes(self) -> int:
        return len(self._pending_writes)

    @staticmethod
    def resolve_system_prompt(system_prompt: str | None) -> str:
        return system_prompt or settings.default_system_prompt

    @staticmethod
    def build_system_instruction(system_prompt: str) -> str:
        return f"{system_prompt} {settings.conversation_style_suffix}"

    async def reply(self, message: RelayMessage) -> RelayResponse:
        """Generate the reply for a relay message.

        Args:
            message: User text and the client's system prompt

        Returns:
            Response carrying generated text or a fallback message
        """
        system_prompt = self.resolve_system_prompt(message.system_prompt)

        try:
            generated = await self.gateway.generate(
                system_instruction=self.build_system_instruction(system_prompt),
                user_text=message.text,
            )
        except Exception as e:
            logger.error(f"Gemini Error: {str(e)}")
            return RelayResponse(text=settings.generation_failure_message)

        ai_text = generated or settings.empty_response_message
        self._schedule_persist(message.text, ai_text, system_prompt)
        return RelayResponse(text=ai_text)

    def _schedule_persist(self, user_message: str, ai_response: str, system_prompt: str) -> None:
        task = asyncio.create_task(self._persist(user_message, ai_response, system_prompt))
        self._pending_writes.add(task)
        task.add_done_callback(self._pending_writes.discard)

    async def _persist(self, user_message: str, ai_response: str, system_prompt: str) -> None:
        try:
            record = ConversationCreate(
                user_message=user_message,
                ai_response=ai_response,
                system_prompt=system_prompt,
            )
            async with self.session_factory() as db:
                await ConversationService(db).create_conversation(record)
        except Exception as e:
            logger.error(f"DB Error: {str(e)}")

    async def drain(self) -> None:
        """Wait for outstanding conversation writes."""
        if self._pending_writes:
            await asyncio.gather(*list(self._pending_writes), return_exceptions=True)
