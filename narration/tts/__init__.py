"""Speech backends, utterance events, and voice management."""

from .base_backend import SpeechBackend
from .events import SpeechEvent, SpeechEventKind, UtteranceHandle
from .models import Voice
from .pyttsx3_backend import Pyttsx3Backend
from .voices import VoiceCatalog, VoiceCatalogConfig, prefer_engine

__all__ = [
    "Pyttsx3Backend",
    "SpeechBackend",
    "SpeechEvent",
    "SpeechEventKind",
    "UtteranceHandle",
    "Voice",
    "VoiceCatalog",
    "VoiceCatalogConfig",
    "prefer_engine",
]
