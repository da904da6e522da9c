"""Relay WebSocket controller."""

import asyncio
import json
import logging
import uuid
from typing import Any

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from pydantic import ValidationError as PydanticValidationError

from app.core.config import settings
from app.core.dependencies import get_relay_service
from app.domains.relay.service import RelayService
from app.schemas.base import ErrorSchema
from app.schemas.relay import RelayEnvelope, RelayEventType, RelayMessage


logger = logging.getLogger(__name__)

router = APIRouter(tags=["relay"])


async def emit(websocket: WebSocket, event: RelayEventType, data: dict[str, Any]) -> None:
    envelope = RelayEnvelope(event=event.value, data=data)
    await websocket.send_text(envelope.model_dump_json(by_alias=True))


def parse_envelope(raw: str) -> RelayEnvelope | None:
    """Decode a relay frame, returning None for anything that is not an envelope."""
    try:
        return RelayEnvelope.model_validate(json.loads(raw))
    except (json.JSONDecodeError, PydanticValidationError):
        return None


def validation_error_payload(error: PydanticValidationError) -> dict[str, Any]:
    first = error.errors()[0]
    loc = [str(part) for part in first.get("loc", ())]
    return ErrorSchema(
        message=str(first.get("msg", "Invalid message")),
        field=".".join(loc) or None,
    ).model_dump(by_alias=True)


async def _answer(
    websocket: WebSocket, service: RelayService, message: RelayMessage, connection_id: str
) -> None:
    response = await service.reply(message)
    try:
        await emit(websocket, RelayEventType.RESPONSE, response.model_dump(by_alias=True))
    except (WebSocketDisconnect, RuntimeError) as e:
        logger.warning(f"Dropped reply for {connection_id}, connection closed: {str(e)}")


@router.websocket(settings.relay_path)
async def relay_socket(
    websocket: WebSocket,
    service: RelayService = Depends(get_relay_service),
):
    """Relay endpoint.

    Each ``message`` event is answered with exactly one ``response`` event on
    the same connection. Messages are handled concurrently, so replies can
    arrive in a different order than the messages were sent.
    """
    await websocket.accept()
    connection_id = uuid.uuid4().hex[:12]
    logger.info(f"New client connected {connection_id}")

    in_flight: set[asyncio.Task] = set()
    try:
        while True:
            frame = await websocket.receive()
            if frame["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(frame.get("code", 1000), frame.get("reason"))
            raw = frame.get("text")
            if raw is None:
                logger.warning(f"Ignoring binary frame from {connection_id}")
                continue

            envelope = parse_envelope(raw)
            if envelope is None:
                logger.warning(f"Ignoring malformed frame from {connection_id}")
                continue
            if envelope.event != RelayEventType.MESSAGE.value:
                logger.debug(f"Ignoring '{envelope.event}' event from {connection_id}")
                continue

            try:
                message = RelayMessage.model_validate(envelope.data)
            except PydanticValidationError as e:
                await emit(websocket, RelayEventType.ERROR, validation_error_payload(e))
                continue

            logger.info(f"Received message from {connection_id}: {message.text}")
            task = asyncio.create_task(_answer(websocket, service, message, connection_id))
            in_flight.add(task)
            task.add_done_callback(in_flight.discard)

    except WebSocketDisconnect:
        logger.info(f"Client disconnected {connection_id}")
    finally:
        if in_flight:
            await asyncio.gather(*list(in_flight), return_exceptions=True)
        await service.drain()
