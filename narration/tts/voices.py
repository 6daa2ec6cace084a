"""
Voice discovery and selection.

Speech backends tend to report their voices late: the first query after
start-up may come back empty, and the list can be re-announced any
number of times afterwards.  :class:`VoiceCatalog` re-reads the list on
every announcement, keeps only the supported language families, and
holds on to the selected voice across refreshes.

Usage::

    catalog = VoiceCatalog(backend)
    catalog.start()          # refresh now and on every voices-changed signal
    catalog.select(catalog.available_voices[2])
    ...
    catalog.close()
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple

from .base_backend import SpeechBackend
from .models import Voice

logger = logging.getLogger(__name__)

# Language families offered to the user
DEFAULT_LANGUAGE_PREFIXES: Tuple[str, ...] = ("en", "es", "pt")

DEFAULT_PREFERRED_ENGINE = "Google"
DEFAULT_PRIMARY_LANGUAGE = "en"

VoicePredicate = Callable[[Voice], bool]


def prefer_engine(marker: str, language_prefix: str) -> VoicePredicate:
    """
    Build a default-voice predicate.

    The returned predicate accepts voices whose name contains *marker*
    and whose language tag starts with *language_prefix*.
    """
    prefix = language_prefix.lower()

    def _predicate(voice: Voice) -> bool:
        return marker in voice.name and voice.language_tag.lower().startswith(prefix)

    _predicate.__name__ = f"prefer_engine({marker!r}, {language_prefix!r})"
    return _predicate


@dataclass
class VoiceCatalogConfig:
    """
    Filtering and default-selection settings for :class:`VoiceCatalog`.

    Attributes:
        language_prefixes: Language-tag prefixes to keep (case-insensitive).
        preferred:         Predicate picking the default voice; the first
                           available voice is used when nothing matches.
    """

    language_prefixes: Tuple[str, ...] = DEFAULT_LANGUAGE_PREFIXES
    preferred: VoicePredicate = field(
        default_factory=lambda: prefer_engine(
            DEFAULT_PREFERRED_ENGINE, DEFAULT_PRIMARY_LANGUAGE
        )
    )

    def accepts(self, voice: Voice) -> bool:
        tag = voice.language_tag.lower()
        return any(tag.startswith(p.lower()) for p in self.language_prefixes)


class VoiceCatalog:
    """
    Available voices for one backend plus the current selection.

    The selection is only ever set by :meth:`select` or, while nothing is
    selected, by the default rule during :meth:`refresh`.  A refresh never
    replaces an existing selection.
    """

    def __init__(
        self,
        backend: SpeechBackend,
        config: Optional[VoiceCatalogConfig] = None,
    ):
        self.backend = backend
        self.config = config or VoiceCatalogConfig()
        self._voices: Tuple[Voice, ...] = ()
        self._selected: Optional[Voice] = None
        self._started = False

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def available_voices(self) -> Tuple[Voice, ...]:
        return self._voices

    @property
    def selected_voice(self) -> Optional[Voice]:
        return self._selected

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def refresh(self) -> None:
        """
        Re-read the backend's voice list.

        Safe to call at start-up and from the voices-changed signal; with
        an unchanged backend list the observable state is unchanged.
        """
        voices: List[Voice] = []
        for raw in self.backend.list_voices():
            voice = self.backend.describe_voice(raw)
            if self.config.accepts(voice):
                voices.append(voice)
        self._voices = tuple(voices)

        if self._selected is None and self._voices:
            self._selected = self._default_voice(self._voices)
            logger.info("Default voice: %s", self._selected.label)

        logger.debug(
            "Voice catalog refreshed: %d usable voices, selected=%s",
            len(self._voices),
            self._selected.label if self._selected else None,
        )

    def select(self, voice: Voice) -> None:
        """Make *voice* the selected voice.  No backend call is made."""
        if voice not in self._voices:
            logger.debug("Selecting voice not in catalog: %s", voice.label)
        self._selected = voice

    def find(self, name: str) -> Optional[Voice]:
        """Return the first voice whose name contains *name* (case-insensitive)."""
        needle = name.lower()
        for voice in self._voices:
            if needle in voice.name.lower():
                return voice
        return None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Subscribe to voice list changes and refresh immediately."""
        if not self._started:
            self.backend.add_voices_changed_listener(self.refresh)
            self._started = True
        self.refresh()

    def close(self) -> None:
        """Unsubscribe and halt the backend so no utterance outlives us."""
        if self._started:
            self.backend.remove_voices_changed_listener(self.refresh)
            self._started = False
        self.backend.cancel_all()

    def _default_voice(self, voices: Sequence[Voice]) -> Voice:
        for voice in voices:
            if self.config.preferred(voice):
                return voice
        return voices[0]

    def __repr__(self) -> str:
        selected = self._selected.label if self._selected else None
        return f"VoiceCatalog(voices={len(self._voices)}, selected={selected!r})"
