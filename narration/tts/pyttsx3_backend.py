"""
pyttsx3 speech backend.

Speaks through the platform's native synthesiser (SAPI5, NSSpeech or
eSpeak) using pyttsx3's external event loop, so callbacks fire only
from :meth:`Pyttsx3Backend.pump` on the caller's thread.

pyttsx3 has no native pause.  Pausing stops the engine and remembers
the last word boundary; resuming speaks the rest of the text as a new
engine segment and shifts its word offsets back into the coordinates
of the original utterance.  The narration handle stays the same.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from core.errors import BackendRuntimeError, BackendUnavailable

from .base_backend import SpeechBackend
from .events import SpeechEvent, UtteranceHandle
from .models import Voice

logger = logging.getLogger(__name__)


def normalize_language_tag(raw: Any) -> str:
    """
    Turn a pyttsx3 language entry into a ``xx-YY`` style tag.

    eSpeak reports bytes with a leading priority byte (``b"\\x05en-us"``);
    other drivers report strings such as ``"en_US"``.
    """
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="ignore")
    tag = str(raw or "").lstrip("".join(chr(c) for c in range(32))).strip()
    return tag.replace("_", "-")


@dataclass
class _Utterance:
    handle: UtteranceHandle
    text: str
    segment: str = ""
    base_offset: int = 0
    last_offset: int = 0
    segments_started: int = 0
    paused: bool = False


class Pyttsx3Backend(SpeechBackend):
    """
    Speech backend over a ``pyttsx3`` engine.

    Usage::

        backend = Pyttsx3Backend()
        handle = backend.speak("Hello world")
        while backend.is_busy():
            backend.pump()
    """

    def __init__(self, engine: Optional[Any] = None, driver_name: Optional[str] = None):
        """
        Initialise the backend.

        Args:
            engine:      An already initialised pyttsx3 engine (mainly for
                         tests); one is created when omitted.
            driver_name: Force a pyttsx3 driver (``"sapi5"``, ``"nsss"``,
                         ``"espeak"``).

        Raises:
            BackendUnavailable: If pyttsx3 is missing or no driver loads.
        """
        super().__init__()
        if engine is None:
            try:
                import pyttsx3
            except ImportError as e:
                raise BackendUnavailable(
                    "pyttsx3 is required for speech output. "
                    "Install with: pip install pyttsx3"
                ) from e
            try:
                engine = pyttsx3.init(driver_name)
            except Exception as e:
                raise BackendUnavailable(f"Speech engine failed to start: {e}") from e

        self._engine = engine
        self._active: Optional[_Utterance] = None
        self._loop_running = False
        self._tokens = [
            engine.connect("started-word", self._on_word),
            engine.connect("finished-utterance", self._on_finished),
            engine.connect("error", self._on_error),
        ]

    @property
    def backend_name(self) -> str:
        return "pyttsx3"

    # ------------------------------------------------------------------
    # Voices
    # ------------------------------------------------------------------

    def list_voices(self) -> Sequence[Any]:
        return list(self._engine.getProperty("voices") or [])

    def describe_voice(self, raw_voice: Any) -> Voice:
        languages = getattr(raw_voice, "languages", None) or [""]
        return Voice(
            name=raw_voice.name,
            language_tag=normalize_language_tag(languages[0]),
            backend_id=raw_voice.id,
        )

    # ------------------------------------------------------------------
    # Speech
    # ------------------------------------------------------------------

    def speak(self, text: str, raw_voice: Optional[Any] = None) -> UtteranceHandle:
        utterance = _Utterance(handle=UtteranceHandle(), text=text)
        try:
            if raw_voice is not None:
                self._engine.setProperty("voice", raw_voice.id)
            self._say(utterance, text, base_offset=0)
        except Exception as e:
            raise BackendRuntimeError(f"pyttsx3 could not queue the utterance: {e}") from e
        self._active = utterance
        return utterance.handle

    def pause(self, handle: UtteranceHandle) -> None:
        utterance = self._active
        if utterance is None or utterance.handle != handle or utterance.paused:
            return
        utterance.paused = True
        self._engine.stop()
        logger.debug("Paused at offset %d", utterance.last_offset)

    def resume(self, handle: UtteranceHandle) -> None:
        utterance = self._active
        if utterance is None or utterance.handle != handle or not utterance.paused:
            return
        utterance.paused = False
        remaining = utterance.text[utterance.last_offset:]
        self._say(utterance, remaining, base_offset=utterance.last_offset)

    def cancel_all(self) -> None:
        self._active = None
        self._engine.stop()

    # ------------------------------------------------------------------
    # Event loop
    # ------------------------------------------------------------------

    def pump(self) -> None:
        """Run one iteration of the engine loop, dispatching callbacks."""
        if not self._loop_running:
            self._engine.startLoop(False)
            self._loop_running = True
        self._engine.iterate()

    def is_busy(self) -> bool:
        return self._active is not None and not self._active.paused

    def close(self) -> None:
        """Cancel speech, detach callbacks, and end the engine loop."""
        self.cancel_all()
        for token in self._tokens:
            self._engine.disconnect(token)
        self._tokens = []
        if self._loop_running:
            self._engine.endLoop()
            self._loop_running = False

    # ------------------------------------------------------------------
    # pyttsx3 callbacks
    # ------------------------------------------------------------------

    def _say(self, utterance: _Utterance, text: str, base_offset: int) -> None:
        utterance.segments_started += 1
        utterance.segment = f"{utterance.handle.id}.{utterance.segments_started}"
        utterance.base_offset = base_offset
        self._engine.say(text, utterance.segment)

    def _current(self, name: str) -> Optional[_Utterance]:
        utterance = self._active
        if utterance is None or utterance.segment != name:
            return None
        return utterance

    def _on_word(self, name, location, length):
        utterance = self._current(name)
        if utterance is None or utterance.paused:
            return
        offset = utterance.base_offset + location
        utterance.last_offset = offset
        self._emit(SpeechEvent.boundary(utterance.handle, offset))

    def _on_finished(self, name, completed):
        utterance = self._current(name)
        if utterance is None or utterance.paused:
            return
        self._active = None
        if completed:
            self._emit(SpeechEvent.end(utterance.handle))
        else:
            self._emit(SpeechEvent.error(utterance.handle, "utterance interrupted"))

    def _on_error(self, name, exception):
        utterance = self._current(name)
        if utterance is None:
            return
        self._active = None
        self._emit(SpeechEvent.error(utterance.handle, exception))

    def __repr__(self) -> str:
        return f"Pyttsx3Backend(active={self._active.handle if self._active else None})"
