"""Speech backends.

``ScriptedSpeechBackend`` implements the ``SpeechBackend`` protocol without
any audio hardware: recognition results and synthesis progress are pushed in
by the caller. Used by the test-suite and for headless demos of the chat
session.
"""

from app.client.speech import (
    RecognitionEvent,
    RecognitionResult,
    SpeechListener,
    Utterance,
)


class ScriptedSpeechBackend:
    """In-memory speech backend driven by explicit ``emit_*`` calls."""

    def __init__(self, fail_on_start: Exception | None = None):
        self.listener: SpeechListener | None = None
        self.fail_on_start = fail_on_start

        self.recognizing = False
        self.recognition_config: dict | None = None
        self.start_count = 0
        self.stop_count = 0

        self.current_utterance: Utterance | None = None
        self.synthesized: list[Utterance] = []
        self.cancel_count = 0

    def attach(self, listener: SpeechListener) -> None:
        self.listener = listener

    # Recognition

    def start_recognition(self, language: str, continuous: bool, interim_results: bool) -> None:
        if self.fail_on_start is not None:
            raise self.fail_on_start
        if self.recognizing:
            raise RuntimeError("recognition has already started")

        self.start_count += 1
        self.recognizing = True
        self.recognition_config = {
            "language": language,
            "continuous": continuous,
            "interim_results": interim_results,
        }
        self.listener.on_recognition_start()

    def stop_recognition(self) -> None:
        self.stop_count += 1
        self.end_recognition()

    def emit_results(self, *results: RecognitionResult, result_index: int = 0) -> None:
        self.listener.on_recognition_result(
            RecognitionEvent(result_index=result_index, results=list(results))
        )

    def emit_final(self, text: str) -> None:
        self.emit_results(RecognitionResult(transcript=text, is_final=True))

    def emit_interim(self, text: str) -> None:
        self.emit_results(RecognitionResult(transcript=text, is_final=False))

    def emit_error(self, code: str) -> None:
        # Recognition engines report the error, then end the session
        self.recognizing = False
        self.listener.on_recognition_error(code)
        self.listener.on_recognition_end()

    def end_recognition(self) -> None:
        if not self.recognizing:
            return
        self.recognizing = False
        self.listener.on_recognition_end()

    # Synthesis

    @property
    def is_synthesizing(self) -> bool:
        return self.current_utterance is not None

    def synthesize(self, utterance: Utterance) -> None:
        self.synthesized.append(utterance)
        self.current_utterance = utterance
        self.listener.on_synthesis_start(utterance)

    def cancel_synthesis(self) -> None:
        self.cancel_count += 1
        self.current_utterance = None

    def finish_speaking(self) -> None:
        if self.current_utterance is None:
            return
        utterance, self.current_utterance = self.current_utterance, None
        self.listener.on_synthesis_end(utterance)

    def fail_speaking(self, code: str = "synthesis-failed") -> None:
        if self.current_utterance is None:
            return
        utterance, self.current_utterance = self.current_utterance, None
        self.listener.on_synthesis_error(utterance, code)
