"""
Narration pipeline: document → text → spoken words with a live cursor.

Wires the three parts a reader UI talks to:

1. **Decoding**: :class:`~core.document.DocumentDecoder` turns PDF or
   DOCX bytes into plain text.  A failed decode leaves the current
   session untouched.
2. **Voices**: :class:`~narration.tts.voices.VoiceCatalog` tracks the
   backend's voices and the selection.
3. **Narration**: :class:`~narration.controller.NarrationController`
   speaks the loaded text and maintains the current word index.

Usage::

    from narration.pipeline import NarrationConfig, NarrationPipeline

    with NarrationPipeline(backend, config=NarrationConfig()) as pipeline:
        pipeline.open_file("input.pdf")
        pipeline.play()
        print(pipeline.snapshot().current_word)
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple, Union

from core.document import DocumentDecoder
from narration.controller import (
    NarrationCallbacks,
    NarrationController,
    NarrationSnapshot,
)
from narration.tts.base_backend import SpeechBackend
from narration.tts.models import Voice
from narration.tts.voices import (
    DEFAULT_LANGUAGE_PREFIXES,
    DEFAULT_PREFERRED_ENGINE,
    DEFAULT_PRIMARY_LANGUAGE,
    VoiceCatalog,
    VoiceCatalogConfig,
    prefer_engine,
)

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Configuration
# ------------------------------------------------------------------


@dataclass
class NarrationConfig:
    """
    All tuneable parameters for the reader.

    Attributes:
        language_prefixes: Voice language-tag prefixes to offer.
        preferred_engine:  Substring of the default voice's name.
        primary_language:  Language prefix the default voice must have.
    """

    language_prefixes: Tuple[str, ...] = DEFAULT_LANGUAGE_PREFIXES
    preferred_engine: str = DEFAULT_PREFERRED_ENGINE
    primary_language: str = DEFAULT_PRIMARY_LANGUAGE

    def catalog_config(self) -> VoiceCatalogConfig:
        return VoiceCatalogConfig(
            language_prefixes=tuple(self.language_prefixes),
            preferred=prefer_engine(self.preferred_engine, self.primary_language),
        )


# ------------------------------------------------------------------
# Pipeline
# ------------------------------------------------------------------


class NarrationPipeline:
    """
    UI-facing facade over decoding, voice selection and narration.

    Construction subscribes to the backend's voice announcements and
    reads the voice list once; :meth:`close` (or leaving the ``with``
    block) unsubscribes and halts the backend.
    """

    def __init__(
        self,
        backend: SpeechBackend,
        config: Optional[NarrationConfig] = None,
        decoder: Optional[DocumentDecoder] = None,
        callbacks: Optional[NarrationCallbacks] = None,
    ):
        self.config = config or NarrationConfig()
        self.backend = backend
        self.decoder = decoder or DocumentDecoder()
        self.catalog = VoiceCatalog(backend, self.config.catalog_config())
        self.controller = NarrationController(backend, self.catalog, callbacks)
        self.catalog.start()

    # ------------------------------------------------------------------
    # Document intake
    # ------------------------------------------------------------------

    def open_document(self, file_bytes: bytes, mime_kind: str) -> str:
        """
        Decode a document and load its text for narration.

        Raises:
            DocumentError:      If the document cannot be decoded; the
                                previous session is kept.
            BackendUnavailable: If the decoding library is missing.
        """
        text = self.decoder.decode(file_bytes, mime_kind)
        self.load(text)
        return text

    def open_file(self, path: Union[str, Path]) -> str:
        """Decode the file at *path* and load its text for narration."""
        text = self.decoder.decode_file(path)
        logger.info("Opened %s", Path(path).name)
        self.load(text)
        return text

    def load(self, text: str) -> None:
        self.controller.load(text)

    # ------------------------------------------------------------------
    # UI operations
    # ------------------------------------------------------------------

    def select(self, voice: Voice) -> None:
        self.catalog.select(voice)

    def play(self) -> bool:
        """Start narrating the loaded text, or resume when paused."""
        return self.controller.play()

    def pause(self) -> None:
        self.controller.pause()

    def stop(self) -> None:
        self.controller.stop()

    def snapshot(self) -> NarrationSnapshot:
        return self.controller.snapshot()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        self.controller.close()
        self.catalog.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False

    def __repr__(self) -> str:
        return f"NarrationPipeline({self.backend.backend_name}, {self.controller!r})"
