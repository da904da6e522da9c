"""Unit tests for Conversation Service."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from app.domains.conversation.service import ConversationService
from app.exceptions.base import PersistenceError
from tests.factories import ConversationCreateFactory


@pytest.mark.asyncio
class TestConversationService:
    """Test cases for ConversationService."""

    async def test_create_assigns_id_and_timestamp(self, test_db):
        """Created records get a server id and creation time."""
        service = ConversationService(test_db)

        conversation = await service.create_conversation(ConversationCreateFactory())

        assert conversation.id is not None
        assert conversation.created_at is not None

    async def test_create_stores_all_fields(self, test_db):
        service = ConversationService(test_db)
        data = ConversationCreateFactory(
            user_message="नमस्ते",
            ai_response="नमस्ते जी",
            system_prompt="Answer in Hindi.",
        )

        conversation = await service.create_conversation(data)

        assert conversation.user_message == "नमस्ते"
        assert conversation.ai_response == "नमस्ते जी"
        assert conversation.system_prompt == "Answer in Hindi."

    async def test_ids_are_monotonic(self, test_db):
        service = ConversationService(test_db)

        first = await service.create_conversation(ConversationCreateFactory())
        second = await service.create_conversation(ConversationCreateFactory())

        assert second.id > first.id

    async def test_list_returns_oldest_first(self, test_db):
        service = ConversationService(test_db)
        created = [await service.create_conversation(ConversationCreateFactory()) for _ in range(3)]

        listed = await service.list_conversations()

        assert [c.id for c in listed] == [c.id for c in created]

    async def test_list_empty(self, test_db):
        assert await ConversationService(test_db).list_conversations() == []

    async def test_create_failure_rolls_back(self):
        """Database errors are rolled back and reported as PersistenceError."""
        db = AsyncMock()
        db.add = MagicMock()
        db.commit.side_effect = OperationalError("INSERT", {}, Exception("disk I/O error"))

        with pytest.raises(PersistenceError):
            await ConversationService(db).create_conversation(ConversationCreateFactory())

        db.rollback.assert_awaited_once()

    async def test_list_failure(self):
        db = AsyncMock()
        db.execute.side_effect = OperationalError("SELECT", {}, Exception("no such table"))

        with pytest.raises(PersistenceError) as exc_info:
            await ConversationService(db).list_conversations()

        assert exc_info.value.status_code == 500
