# app/core/dependencies.py
import logging
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.database import get_db, get_session_factory
from app.domains.ai.service import AIGateway, GeminiGateway
from app.domains.relay.service import RelayService

logger = logging.getLogger(__name__)

__all__ = ["get_db", "get_session_factory", "get_ai_gateway", "get_relay_service"]


@lru_cache
def get_ai_gateway() -> AIGateway:
    """Process-wide AI gateway, built once from settings.

    Override this dependency to substitute a fake gateway in tests.
    """
    gateway = GeminiGateway.from_settings()
    if not gateway.is_configured:
        logger.warning("Gemini API key not configured, relay replies will use the fallback message")
    return gateway


def get_relay_service(
    gateway: AIGateway = Depends(get_ai_gateway),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> RelayService:
    """One relay service per connection, sharing the gateway."""
    return RelayService(gateway, session_factory)
