# ruff: noqa: F401
"""Client-side building blocks: voice adapter, chat session, history client."""

from .backends import ScriptedSpeechBackend
from .history import HistoryClient, HistoryClientError
from .session import (
    DEFAULT_SYSTEM_PROMPT,
    ChatSession,
    ClientMessage,
    MessageRole,
    RelayConnection,
    SessionPhase,
)
from .speech import (
    RecognitionEvent,
    RecognitionResult,
    SpeechBackend,
    SpeechState,
    Utterance,
    VoiceAdapter,
)
