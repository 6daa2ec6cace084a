"""Tests for voice discovery, filtering and selection."""

from narration.tts.models import Voice
from narration.tts.voices import VoiceCatalog, VoiceCatalogConfig, prefer_engine

from .conftest import ANNA, GOOGLE_US, LUCIANA, MONICA, SAMANTHA, RawVoice


def _voice(raw):
    return Voice(name=raw.name, language_tag=raw.lang, backend_id=raw.id)


# --- Filtering ---


def test_refresh_keeps_supported_languages_in_discovery_order(catalog):
    ids = [v.backend_id for v in catalog.available_voices]
    assert ids == ["samantha", "google-us", "monica", "luciana"]


def test_custom_language_prefixes(backend):
    catalog = VoiceCatalog(backend, VoiceCatalogConfig(language_prefixes=("de",)))
    catalog.refresh()
    assert catalog.available_voices == (_voice(ANNA),)


def test_prefix_match_is_case_insensitive(silent_backend):
    silent_backend.voices = [RawVoice("daniel", "Daniel", "EN-gb")]
    catalog = VoiceCatalog(silent_backend)
    catalog.refresh()
    assert [v.backend_id for v in catalog.available_voices] == ["daniel"]


# --- Default selection ---


def test_default_prefers_engine_marker_in_primary_language(catalog):
    assert catalog.selected_voice == _voice(GOOGLE_US)


def test_default_falls_back_to_first_available(silent_backend):
    silent_backend.voices = [MONICA, SAMANTHA]
    catalog = VoiceCatalog(silent_backend)
    catalog.refresh()
    assert catalog.selected_voice == _voice(MONICA)


def test_marker_in_other_language_is_not_preferred(silent_backend):
    google_es = RawVoice("google-es", "Google español", "es-ES")
    silent_backend.voices = [SAMANTHA, google_es]
    catalog = VoiceCatalog(silent_backend)
    catalog.refresh()
    assert catalog.selected_voice == _voice(SAMANTHA)


def test_custom_preferred_predicate(backend):
    config = VoiceCatalogConfig(preferred=lambda v: v.language_tag.startswith("pt"))
    catalog = VoiceCatalog(backend, config)
    catalog.refresh()
    assert catalog.selected_voice == _voice(LUCIANA)


def test_prefer_engine_predicate():
    predicate = prefer_engine("Google", "en")
    assert predicate(_voice(GOOGLE_US))
    assert not predicate(_voice(SAMANTHA))


# --- Refresh semantics ---


def test_empty_backend_leaves_catalog_empty(silent_backend):
    catalog = VoiceCatalog(silent_backend)
    catalog.start()
    assert catalog.available_voices == ()
    assert catalog.selected_voice is None


def test_late_voice_announcement_populates_catalog(silent_backend):
    catalog = VoiceCatalog(silent_backend)
    catalog.start()
    silent_backend.announce_voices([SAMANTHA, GOOGLE_US])
    assert len(catalog.available_voices) == 2
    assert catalog.selected_voice == _voice(GOOGLE_US)


def test_refresh_is_idempotent(catalog):
    before = (catalog.available_voices, catalog.selected_voice)
    catalog.refresh()
    catalog.refresh()
    assert (catalog.available_voices, catalog.selected_voice) == before


def test_refresh_preserves_user_selection(backend, catalog):
    catalog.select(_voice(MONICA))
    backend.announce_voices([LUCIANA, MONICA, GOOGLE_US])
    assert catalog.selected_voice == _voice(MONICA)


def test_refresh_never_overwrites_selection_when_voice_vanishes(backend, catalog):
    catalog.select(_voice(MONICA))
    backend.announce_voices([GOOGLE_US])
    assert catalog.selected_voice == _voice(MONICA)


def test_select_makes_no_backend_call(backend, catalog):
    catalog.select(_voice(SAMANTHA))
    assert backend.cancel_count == 0
    assert backend.spoken == []


def test_find_by_name(catalog):
    assert catalog.find("mon") == _voice(MONICA)
    assert catalog.find("nobody") is None


# --- Lifecycle ---


def test_close_unsubscribes_and_halts_backend(backend, catalog):
    catalog.close()
    assert backend.cancel_count == 1
    backend.announce_voices([LUCIANA])
    assert len(catalog.available_voices) == 4


def test_start_twice_subscribes_once(backend):
    catalog = VoiceCatalog(backend)
    catalog.start()
    catalog.start()
    assert len(backend._voices_listeners) == 1
