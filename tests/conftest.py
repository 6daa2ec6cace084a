"""Shared fixtures: a recording in-memory speech backend."""

from dataclasses import dataclass
from typing import List

import pytest

from narration.controller import NarrationController
from narration.tts.base_backend import SpeechBackend
from narration.tts.events import SpeechEvent, UtteranceHandle
from narration.tts.models import Voice
from narration.tts.voices import VoiceCatalog


@dataclass(frozen=True)
class RawVoice:
    id: str
    name: str
    lang: str


class FakeSpeechBackend(SpeechBackend):
    """Records every request; tests deliver events by hand."""

    def __init__(self, voices=None):
        super().__init__()
        self.voices: List[RawVoice] = list(voices or [])
        self.spoken = []  # (text, raw_voice, handle)
        self.paused = []
        self.resumed = []
        self.cancel_count = 0

    @property
    def backend_name(self) -> str:
        return "fake"

    def list_voices(self):
        return list(self.voices)

    def describe_voice(self, raw_voice):
        return Voice(name=raw_voice.name, language_tag=raw_voice.lang, backend_id=raw_voice.id)

    def speak(self, text, raw_voice=None):
        handle = UtteranceHandle()
        self.spoken.append((text, raw_voice, handle))
        return handle

    def pause(self, handle):
        self.paused.append(handle)

    def resume(self, handle):
        self.resumed.append(handle)

    def cancel_all(self):
        self.cancel_count += 1

    # -- test helpers -------------------------------------------------------

    def announce_voices(self, voices):
        self.voices = list(voices)
        self._notify_voices_changed()

    def boundary(self, handle, offset):
        self._emit(SpeechEvent.boundary(handle, offset))

    def end(self, handle):
        self._emit(SpeechEvent.end(handle))

    def error(self, handle, info="synthesis-failed"):
        self._emit(SpeechEvent.error(handle, info))

    @property
    def last_handle(self):
        return self.spoken[-1][2]


GOOGLE_US = RawVoice("google-us", "Google US English", "en-US")
SAMANTHA = RawVoice("samantha", "Samantha", "en-US")
MONICA = RawVoice("monica", "Monica", "es-ES")
LUCIANA = RawVoice("luciana", "Luciana", "pt-BR")
ANNA = RawVoice("anna", "Anna", "de-DE")


@pytest.fixture
def raw_voices():
    return [SAMANTHA, ANNA, GOOGLE_US, MONICA, LUCIANA]


@pytest.fixture
def backend(raw_voices):
    return FakeSpeechBackend(raw_voices)


@pytest.fixture
def silent_backend():
    """A backend that has not reported any voices (yet)."""
    return FakeSpeechBackend()


@pytest.fixture
def catalog(backend):
    catalog = VoiceCatalog(backend)
    catalog.start()
    return catalog


@pytest.fixture
def controller(backend, catalog):
    return NarrationController(backend, catalog)
