"""Chat session controller.

Owns the client half of a conversation: the message list, the text input, the
relay connection and the voice adapter. The session moves through

    idle -> listening -> (message sent) -> awaiting response -> speaking -> idle

where listening and speaking are read off the voice adapter and awaiting
response counts messages that have not been answered yet.
"""

import logging
import uuid
from collections.abc import Iterable
from datetime import datetime
from enum import Enum
from typing import Any, Protocol

from pydantic import BaseModel

from app.client.history import HistoryClient
from app.client.speech import SpeechState, VoiceAdapter
from app.schemas.conversation import ConversationResponse
from app.schemas.relay import RelayEventType, RelayMessage, RelayResponse


logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_PROMPT = (
    "You are a helpful, witty, and intelligent Hindi assistant. You answer primarily in Hindi, "
    "using English words only when necessary for technical terms. Your name is 'Sarthi'. "
    "Keep answers concise."
)

LISTENING_PLACEHOLDER = "Listening..."


class MessageRole(str, Enum):
    USER = "user"
    AI = "ai"


class SessionPhase(str, Enum):
    IDLE = "idle"
    LISTENING = "listening"
    AWAITING_RESPONSE = "awaiting_response"
    SPEAKING = "speaking"


class ClientMessage(BaseModel):
    """A message as displayed in the chat transcript."""

    id: str
    role: MessageRole
    text: str
    timestamp: str


class RelayConnection(Protocol):
    """Client side of the relay socket."""

    def emit(self, event: str, data: dict[str, Any]) -> None: ...


def format_timestamp(moment: datetime | None) -> str:
    return moment.strftime("%H:%M:%S") if moment else ""


class ChatSession:
    def __init__(
        self,
        voice: VoiceAdapter,
        connection: RelayConnection | None = None,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
    ):
        self.voice = voice
        self.connection = connection
        self.system_prompt = system_prompt
        self.messages: list[ClientMessage] = []
        self.input_text = ""
        self.pending_responses = 0

        self._unsubscribe = voice.subscribe(self._on_voice_change)

    # Connection

    def connect(self, connection: RelayConnection) -> None:
        self.connection = connection
        logger.info("Connected to relay")

    def disconnect(self) -> None:
        self.connection = None
        self.pending_responses = 0

    def close(self) -> None:
        self.disconnect()
        self._unsubscribe()

    # History

    def load_history(self, records: Iterable[ConversationResponse]) -> None:
        """Replace the transcript with stored conversations, two entries per record."""
        messages: list[ClientMessage] = []
        for record in records:
            stamp = format_timestamp(record.created_at)
            messages.append(
                ClientMessage(
                    id=f"h-{record.id}-user", role=MessageRole.USER,
                    text=record.user_message, timestamp=stamp,
                )
            )
            messages.append(
                ClientMessage(
                    id=f"h-{record.id}-ai", role=MessageRole.AI,
                    text=record.ai_response, timestamp=stamp,
                )
            )
        self.messages = messages

    async def refresh_history(self, client: HistoryClient) -> None:
        self.load_history(await client.list_conversations())

    # Outgoing

    def update_system_prompt(self, prompt: str) -> None:
        self.system_prompt = prompt

    def send_message(self, text: str) -> bool:
        """Show ``text`` locally and relay it to the server.

        Blank text, or no connection, is silently dropped.
        """
        if not text.strip() or self.connection is None:
            return False

        self._append(MessageRole.USER, text)
        payload = RelayMessage(text=text, system_prompt=self.system_prompt)
        self.connection.emit(RelayEventType.MESSAGE.value, payload.model_dump(by_alias=True))
        self.pending_responses += 1
        self.input_text = ""
        return True

    def submit_input(self) -> bool:
        return self.send_message(self.input_text)

    # Incoming

    def handle_response(self, data: dict[str, Any]) -> ClientMessage:
        response = RelayResponse.model_validate(data)
        message = self._append(MessageRole.AI, response.text)
        if self.pending_responses:
            self.pending_responses -= 1
        self.voice.speak(response.text)
        return message

    def handle_event(self, event: str, data: dict[str, Any]) -> None:
        """Dispatch a relay event received from the server."""
        if event == RelayEventType.RESPONSE.value:
            self.handle_response(data)
        elif event == RelayEventType.ERROR.value:
            logger.warning(f"Relay rejected message: {data.get('message')}")
            if self.pending_responses:
                self.pending_responses -= 1

    # Voice controls

    def toggle_listening(self) -> None:
        if self.voice.state.is_listening:
            self.voice.stop_listening()
        else:
            self.voice.cancel_speech()
            self.voice.start_listening()

    def cancel_speech(self) -> None:
        self.voice.cancel_speech()

    def _on_voice_change(self, state: SpeechState) -> None:
        if state.transcript and not state.is_listening:
            transcript = state.transcript
            self.voice.reset_transcript()
            self.send_message(transcript)

    # View state

    @property
    def phase(self) -> SessionPhase:
        state = self.voice.state
        if state.is_speaking:
            return SessionPhase.SPEAKING
        if state.is_listening:
            return SessionPhase.LISTENING
        if self.pending_responses:
            return SessionPhase.AWAITING_RESPONSE
        return SessionPhase.IDLE

    @property
    def status_indicator(self) -> str | None:
        state = self.voice.state
        if state.is_speaking:
            return "speaking"
        if state.is_listening and not state.interim_transcript:
            return "listening"
        return None

    @property
    def live_transcript(self) -> str | None:
        state = self.voice.state
        if state.interim_transcript:
            return state.interim_transcript
        if state.is_listening:
            return LISTENING_PLACEHOLDER
        return None

    def _append(self, role: MessageRole, text: str) -> ClientMessage:
        message = ClientMessage(
            id=uuid.uuid4().hex,
            role=role,
            text=text,
            timestamp=format_timestamp(datetime.now()),
        )
        self.messages.append(message)
        return message
