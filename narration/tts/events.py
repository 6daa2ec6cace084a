"""
Speech progress events correlated with the utterance that produced them.

Backends never call into narration state directly.  They deliver
:class:`SpeechEvent` messages, and the consumer compares the event's
handle against the utterance it currently owns before acting on it.
"""

import itertools
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Optional

_handle_ids = itertools.count(1)


@dataclass(frozen=True)
class UtteranceHandle:
    """Opaque identity of one speak request."""

    id: int = field(default_factory=lambda: next(_handle_ids))

    def __repr__(self) -> str:
        return f"UtteranceHandle(#{self.id})"


class SpeechEventKind(Enum):
    BOUNDARY = auto()  # payload: character offset into the utterance text
    END = auto()  # payload: None
    ERROR = auto()  # payload: backend-specific error info


@dataclass(frozen=True)
class SpeechEvent:
    """One ``(handle, kind, payload)`` notification from a speech backend."""

    handle: UtteranceHandle
    kind: SpeechEventKind
    payload: Optional[Any] = None

    @classmethod
    def boundary(cls, handle: UtteranceHandle, char_offset: int) -> "SpeechEvent":
        return cls(handle, SpeechEventKind.BOUNDARY, char_offset)

    @classmethod
    def end(cls, handle: UtteranceHandle) -> "SpeechEvent":
        return cls(handle, SpeechEventKind.END)

    @classmethod
    def error(cls, handle: UtteranceHandle, info: Any = None) -> "SpeechEvent":
        return cls(handle, SpeechEventKind.ERROR, info)
