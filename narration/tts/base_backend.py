"""
Abstract base class for speech backends.

Provides a unified capability interface (enumerate, speak, pause,
resume, cancel) so the narration controller can drive any engine, or a
fake one in tests, without touching global speech state.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional, Sequence

from .events import SpeechEvent, UtteranceHandle
from .models import Voice

logger = logging.getLogger(__name__)

EventListener = Callable[[SpeechEvent], None]
VoicesChangedListener = Callable[[], None]


class SpeechBackend(ABC):
    """
    Common interface for all speech backends used by the narration core.

    Subclasses implement the capability methods.  Progress is reported by
    calling :meth:`_emit` with a :class:`SpeechEvent`; voice list changes
    by calling :meth:`_notify_voices_changed`.  Both may happen at any
    time after the triggering request, including after the utterance
    has been cancelled.
    """

    def __init__(self):
        self._event_listeners: List[EventListener] = []
        self._voices_listeners: List[VoicesChangedListener] = []

    # ------------------------------------------------------------------
    # Capabilities
    # ------------------------------------------------------------------

    @abstractmethod
    def list_voices(self) -> Sequence[Any]:
        """Return the backend's raw voice objects (may be empty)."""

    @abstractmethod
    def describe_voice(self, raw_voice: Any) -> Voice:
        """Convert one raw voice object into a :class:`Voice`."""

    @abstractmethod
    def speak(self, text: str, raw_voice: Optional[Any] = None) -> UtteranceHandle:
        """
        Start vocalising *text*.

        Args:
            text:      Text to speak.
            raw_voice: A raw voice from :meth:`list_voices`, or ``None`` for
                       the backend's default voice.

        Returns:
            Handle that every event for this utterance will carry.

        Raises:
            BackendRuntimeError: If the engine refuses the request.
        """

    @abstractmethod
    def pause(self, handle: UtteranceHandle) -> None:
        """Request that the utterance pause."""

    @abstractmethod
    def resume(self, handle: UtteranceHandle) -> None:
        """Request that a paused utterance continue where it stopped."""

    @abstractmethod
    def cancel_all(self) -> None:
        """Stop all speech.  Must be safe with nothing active."""

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Human-readable backend identifier."""

    # ------------------------------------------------------------------
    # Voice resolution
    # ------------------------------------------------------------------

    def resolve_voice(self, backend_id: str) -> Optional[Any]:
        """Find the live raw voice whose id is *backend_id*, if any."""
        for raw in self.list_voices():
            if self.describe_voice(raw).backend_id == backend_id:
                return raw
        return None

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def add_event_listener(self, listener: EventListener) -> None:
        self._event_listeners.append(listener)

    def remove_event_listener(self, listener: EventListener) -> None:
        if listener in self._event_listeners:
            self._event_listeners.remove(listener)

    def add_voices_changed_listener(self, listener: VoicesChangedListener) -> None:
        self._voices_listeners.append(listener)

    def remove_voices_changed_listener(self, listener: VoicesChangedListener) -> None:
        if listener in self._voices_listeners:
            self._voices_listeners.remove(listener)

    def _emit(self, event: SpeechEvent) -> None:
        """Deliver *event* to every event listener."""
        logger.debug("%s: %s", self.backend_name, event)
        for listener in list(self._event_listeners):
            listener(event)

    def _notify_voices_changed(self) -> None:
        for listener in list(self._voices_listeners):
            listener()
