"""
Data models for speech voices.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Voice:
    """
    A synthesis voice as discovered from a speech backend.

    ``backend_id`` is the only stable key back to the backend's live voice
    object; ``name`` and ``language_tag`` are for display and need not be
    unique.
    """

    name: str
    language_tag: str
    backend_id: str

    @property
    def label(self) -> str:
        return f"{self.name} ({self.language_tag})"
