"""
Narration controller: playback state machine and word cursor.

Owns the loaded text, its word tokens, and the ``Idle → Speaking ⇄
Paused → Idle`` lifecycle of a single utterance on a
:class:`~narration.tts.base_backend.SpeechBackend`.  Progress arrives
asynchronously as :class:`~narration.tts.events.SpeechEvent` messages;
each one is checked against the handle of the utterance the controller
currently owns, so events from a cancelled or replaced utterance are
dropped instead of moving the cursor.

Usage::

    controller = NarrationController(backend, catalog)
    controller.load("Hello brave world")
    controller.play()
    ...
    controller.pause()
    controller.play()       # resumes the same utterance
    controller.stop()
"""

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, Optional, Tuple

from core.errors import BackendRuntimeError, NoResolvableVoice
from narration.script.words import tokenize_words, word_index_at_offset
from narration.tts.base_backend import SpeechBackend
from narration.tts.events import SpeechEvent, SpeechEventKind, UtteranceHandle
from narration.tts.models import Voice
from narration.tts.voices import VoiceCatalog

logger = logging.getLogger(__name__)

NO_WORD = -1


class PlayState(Enum):
    IDLE = auto()
    SPEAKING = auto()
    PAUSED = auto()


@dataclass
class NarrationSession:
    """
    Mutable narration state for one loaded text.

    ``word_tokens`` is derived from ``source_text`` at construction and
    never edited; loading new text builds a new session.
    """

    source_text: str = ""
    word_tokens: Tuple[str, ...] = field(init=False)
    play_state: PlayState = PlayState.IDLE
    current_word_index: int = NO_WORD

    def __post_init__(self):
        self.word_tokens = tokenize_words(self.source_text)


@dataclass(frozen=True)
class NarrationSnapshot:
    """Read-only view of narration state for a UI."""

    available_voices: Tuple[Voice, ...]
    selected_voice: Optional[Voice]
    play_state: PlayState
    current_word_index: int
    word_tokens: Tuple[str, ...]

    @property
    def current_word(self) -> Optional[str]:
        if 0 <= self.current_word_index < len(self.word_tokens):
            return self.word_tokens[self.current_word_index]
        return None


@dataclass
class NarrationCallbacks:
    """
    Optional observers for narration changes.

    Attributes:
        on_word:  Called with the new word index (``-1`` when cleared).
        on_state: Called with the new :class:`PlayState`.
    """

    on_word: Optional[Callable[[int], None]] = None
    on_state: Optional[Callable[[PlayState], None]] = None


class NarrationController:
    """
    Drives one speech backend through play / pause / resume / stop.

    At most one utterance is active backend-wide: every fresh play
    cancels whatever the backend is doing first.
    """

    def __init__(
        self,
        backend: SpeechBackend,
        catalog: VoiceCatalog,
        callbacks: Optional[NarrationCallbacks] = None,
    ):
        self.backend = backend
        self.catalog = catalog
        self.callbacks = callbacks or NarrationCallbacks()
        self.session = NarrationSession()
        self._handle: Optional[UtteranceHandle] = None
        self.backend.add_event_listener(self.handle_event)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def play_state(self) -> PlayState:
        return self.session.play_state

    @property
    def current_word_index(self) -> int:
        return self.session.current_word_index

    @property
    def word_tokens(self) -> Tuple[str, ...]:
        return self.session.word_tokens

    @property
    def active_handle(self) -> Optional[UtteranceHandle]:
        return self._handle

    def snapshot(self) -> NarrationSnapshot:
        return NarrationSnapshot(
            available_voices=self.catalog.available_voices,
            selected_voice=self.catalog.selected_voice,
            play_state=self.session.play_state,
            current_word_index=self.session.current_word_index,
            word_tokens=self.session.word_tokens,
        )

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def load(self, text: str) -> None:
        """Stop any narration and start a new session for *text*."""
        self.stop()
        self.session = NarrationSession(source_text=text)
        logger.info("Loaded text: %d words", len(self.session.word_tokens))

    def play(self, text: Optional[str] = None) -> bool:
        """
        Start or resume narration.

        With *text*, loads it and starts a new utterance, cancelling any
        current one even mid-speech.  Without *text*, resumes a paused
        utterance, or starts the loaded text from the beginning when idle.

        Returns:
            ``True`` if the backend was asked to speak or resume.

        Raises:
            BackendUnavailable: If the speech backend cannot be used.
        """
        if text is not None and not text.strip():
            logger.debug("Nothing to narrate")
            return False

        if text is None:
            if self.session.play_state is PlayState.PAUSED and self._handle:
                self.backend.resume(self._handle)
                self._set_state(PlayState.SPEAKING)
                logger.debug("Resumed %s", self._handle)
                return True
            if self.session.play_state is PlayState.SPEAKING:
                return False
            text = self.session.source_text
        elif text != self.session.source_text:
            self.load(text)

        if not text or not text.strip():
            logger.debug("Nothing to narrate")
            return False

        return self._start_utterance(text)

    def pause(self) -> None:
        """Pause the current utterance; no-op unless speaking."""
        if self.session.play_state is not PlayState.SPEAKING or not self._handle:
            return
        self.backend.pause(self._handle)
        self._set_state(PlayState.PAUSED)
        logger.debug("Paused %s", self._handle)

    def stop(self) -> None:
        """Cancel speech and reset the cursor.  Safe to call when idle."""
        self.backend.cancel_all()
        self._handle = None
        self._finish()

    def close(self) -> None:
        """Stop speaking and detach from the backend."""
        self.stop()
        self.backend.remove_event_listener(self.handle_event)

    # ------------------------------------------------------------------
    # Backend events
    # ------------------------------------------------------------------

    def handle_event(self, event: SpeechEvent) -> None:
        """
        Apply one backend event if it belongs to the active utterance.

        Events for the active utterance are also applied while paused:
        audio can lag the pause request, so late boundaries still move
        the cursor and a late end still finishes the session.
        """
        if self._handle is None or event.handle != self._handle:
            logger.debug("Ignoring stale %s event for %s", event.kind.name, event.handle)
            return

        if event.kind is SpeechEventKind.BOUNDARY:
            self._on_boundary(int(event.payload))
        elif event.kind is SpeechEventKind.END:
            logger.debug("Utterance %s finished", event.handle)
            self._handle = None
            self._finish()
        elif event.kind is SpeechEventKind.ERROR:
            logger.warning("Speech synthesis error: %s", event.payload)
            self._handle = None
            self._finish()

    def _on_boundary(self, char_offset: int) -> None:
        tokens = self.session.word_tokens
        if not tokens:
            return
        index = word_index_at_offset(self.session.source_text, char_offset)
        index = min(max(index, self.session.current_word_index), len(tokens) - 1)
        self._set_word(index)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _start_utterance(self, text: str) -> bool:
        self.backend.cancel_all()
        self._handle = None
        self._set_word(NO_WORD)

        raw_voice = self._resolve_voice()
        try:
            handle = self.backend.speak(text, raw_voice)
        except BackendRuntimeError as e:
            logger.warning("Speech backend refused the utterance: %s", e)
            self._finish()
            return False

        self._handle = handle
        self._set_state(PlayState.SPEAKING)
        logger.info("Speaking %s (%d chars)", handle, len(text))
        return True

    def _resolve_voice(self):
        """Return the live raw voice for the selection, or ``None`` for the default."""
        selected = self.catalog.selected_voice
        if selected is None:
            logger.debug("No voice selected; using backend default")
            return None
        raw = self.backend.resolve_voice(selected.backend_id)
        if raw is None:
            logger.warning(
                "%s; using backend default",
                NoResolvableVoice(f"Voice {selected.label} is no longer available"),
            )
        return raw

    def _finish(self) -> None:
        self._set_word(NO_WORD)
        self._set_state(PlayState.IDLE)

    def _set_state(self, state: PlayState) -> None:
        if self.session.play_state is state:
            return
        self.session.play_state = state
        if self.callbacks.on_state:
            self.callbacks.on_state(state)

    def _set_word(self, index: int) -> None:
        if self.session.current_word_index == index:
            return
        self.session.current_word_index = index
        if self.callbacks.on_word:
            self.callbacks.on_word(index)

    def __repr__(self) -> str:
        return (
            f"NarrationController(state={self.session.play_state.name}, "
            f"word={self.session.current_word_index}, "
            f"words={len(self.session.word_tokens)})"
        )
