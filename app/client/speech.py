"""Voice I/O adapter.

Wraps a speech backend (speech-to-text and text-to-speech) behind a single
observable state object. The backend is any object implementing
``SpeechBackend``; it reports progress back through the ``SpeechListener``
methods, which ``VoiceAdapter`` implements.
"""

import logging
import uuid
from collections.abc import Callable
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field

from app.core.config import settings


logger = logging.getLogger(__name__)


class SpeechState(BaseModel):
    """Snapshot of the adapter state. Immutable; every change produces a new one."""

    model_config = ConfigDict(frozen=True)

    is_listening: bool = False
    is_speaking: bool = False
    transcript: str = ""
    interim_transcript: str = ""
    error: str | None = None


class RecognitionResult(BaseModel):
    """One recognition hypothesis, final or still subject to revision."""

    transcript: str
    is_final: bool = False


class RecognitionEvent(BaseModel):
    """A batch of results; only results from ``result_index`` on are new."""

    result_index: int = 0
    results: list[RecognitionResult] = Field(default_factory=list)


class Utterance(BaseModel):
    """Text queued for synthesis."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    text: str
    lang: str
    rate: float = 1.0
    pitch: float = 1.0


class SpeechListener(Protocol):
    def on_recognition_start(self) -> None: ...

    def on_recognition_result(self, event: RecognitionEvent) -> None: ...

    def on_recognition_error(self, code: str) -> None: ...

    def on_recognition_end(self) -> None: ...

    def on_synthesis_start(self, utterance: Utterance) -> None: ...

    def on_synthesis_end(self, utterance: Utterance) -> None: ...

    def on_synthesis_error(self, utterance: Utterance, code: str) -> None: ...


class SpeechBackend(Protocol):
    """Platform speech capabilities (browser APIs, OS engines, test doubles)."""

    def attach(self, listener: SpeechListener) -> None: ...

    def start_recognition(self, language: str, continuous: bool, interim_results: bool) -> None: ...

    def stop_recognition(self) -> None: ...

    def synthesize(self, utterance: Utterance) -> None: ...

    def cancel_synthesis(self) -> None: ...


StateCallback = Callable[[SpeechState], None]


class VoiceAdapter:
    """Uniform listening/speaking state on top of a speech backend.

    Without a backend every operation is a no-op, mirroring a browser without
    speech support.
    """

    def __init__(self, backend: SpeechBackend | None = None, language: str | None = None):
        self.backend = backend
        self.language = language or settings.speech_language
        self._state = SpeechState()
        self._subscribers: list[StateCallback] = []
        self._current_utterance: Utterance | None = None

        if backend is not None:
            backend.attach(self)

    @property
    def state(self) -> SpeechState:
        return self._state

    @property
    def supported(self) -> bool:
        return self.backend is not None

    def subscribe(self, callback: StateCallback) -> Callable[[], None]:
        """Call ``callback`` with the new state after every change.

        Returns a function that removes the subscription.
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _set_state(self, **changes) -> None:
        new_state = self._state.model_copy(update=changes)
        if new_state == self._state:
            return
        self._state = new_state
        # A subscriber may change state again; later subscribers get the latest
        for callback in list(self._subscribers):
            callback(self._state)

    # Commands

    def start_listening(self) -> None:
        if self.backend is None or self._state.is_listening:
            return

        self._set_state(transcript="", interim_transcript="")
        try:
            self.backend.start_recognition(
                language=self.language,
                continuous=False,
                interim_results=True,
            )
        except Exception as e:
            logger.error(f"Failed to start recognition: {str(e)}")

    def stop_listening(self) -> None:
        if self.backend is None or not self._state.is_listening:
            return
        self.backend.stop_recognition()

    def speak(self, text: str) -> None:
        if self.backend is None:
            return

        self.backend.cancel_synthesis()
        utterance = Utterance(text=text, lang=self.language)
        self._current_utterance = utterance
        self.backend.synthesize(utterance)

    def cancel_speech(self) -> None:
        if self.backend is None:
            return

        self.backend.cancel_synthesis()
        self._current_utterance = None
        self._set_state(is_speaking=False)

    def reset_transcript(self) -> None:
        self._set_state(transcript="", interim_transcript="")

    # Backend callbacks

    def on_recognition_start(self) -> None:
        self._set_state(is_listening=True, error=None)

    def on_recognition_result(self, event: RecognitionEvent) -> None:
        finals = []
        interim = ""
        for result in event.results[event.result_index:]:
            if result.is_final:
                finals.append(result.transcript)
            else:
                interim += result.transcript

        # Interim text is replaced by every event; the final transcript only by
        # events that carry final results.
        if finals:
            self._set_state(transcript="".join(finals), interim_transcript=interim)
        else:
            self._set_state(interim_transcript=interim)

    def on_recognition_error(self, code: str) -> None:
        logger.error(f"Speech recognition error: {code}")
        self._set_state(is_listening=False, error=code)

    def on_recognition_end(self) -> None:
        self._set_state(is_listening=False)

    def _is_current(self, utterance: Utterance) -> bool:
        # Events from cancelled or replaced utterances must not touch state
        return self._current_utterance is not None and utterance.id == self._current_utterance.id

    def on_synthesis_start(self, utterance: Utterance) -> None:
        if self._is_current(utterance):
            self._set_state(is_speaking=True)

    def on_synthesis_end(self, utterance: Utterance) -> None:
        if self._is_current(utterance):
            self._current_utterance = None
            self._set_state(is_speaking=False)

    def on_synthesis_error(self, utterance: Utterance, code: str) -> None:
        if self._is_current(utterance):
            logger.error(f"Speech synthesis error: {code}")
            self._current_utterance = None
            self._set_state(is_speaking=False)
