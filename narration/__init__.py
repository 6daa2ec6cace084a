"""
Inkshade document narration core.

Voice discovery, playback control, and word-level progress tracking for
reading documents aloud through a pluggable speech backend.
"""

from .controller import (
    NarrationCallbacks,
    NarrationController,
    NarrationSession,
    NarrationSnapshot,
    PlayState,
)
from .pipeline import NarrationConfig, NarrationPipeline

__all__ = [
    "NarrationCallbacks",
    "NarrationConfig",
    "NarrationController",
    "NarrationPipeline",
    "NarrationSession",
    "NarrationSnapshot",
    "PlayState",
]
