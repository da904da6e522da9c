"""Conversation history API controller with FastAPI endpoints."""

import logging

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_db
from app.domains.conversation.service import ConversationService
from app.exceptions.base import PersistenceError
from app.schemas.base import ErrorSchema
from app.schemas.conversation import ConversationCreate, ConversationResponse


logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/conversations",
    tags=["conversations"],
)


def _persistence_failure(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"status": "error", "message": message},
    )


@router.get("", response_model=list[ConversationResponse])
async def list_conversations(
    db: AsyncSession = Depends(get_db),
):
    """List every logged conversation, oldest first.

    Returns:
        Array of conversation records
    """
    try:
        service = ConversationService(db)
        conversations = await service.list_conversations()
        return [ConversationResponse.model_validate(conv) for conv in conversations]
    except PersistenceError as e:
        return _persistence_failure(e.message)


@router.post(
    "",
    response_model=ConversationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={status.HTTP_400_BAD_REQUEST: {"model": ErrorSchema}},
)
async def create_conversation(
    conversation_data: ConversationCreate = Body(...),
    db: AsyncSession = Depends(get_db),
):
    """Log a conversation pair.

    Args:
        conversation_data: User message, AI response and system prompt
        db: Database session

    Returns:
        The created record
    """
    try:
        service = ConversationService(db)
        conversation = await service.create_conversation(conversation_data)
        return ConversationResponse.model_validate(conversation)
    except PersistenceError as e:
        return _persistence_failure(e.message)
