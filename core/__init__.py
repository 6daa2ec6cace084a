"""
Core backend for the Inkshade document reader.
Document decoding and the shared error taxonomy only. No speech, no UI.
"""

from .document import DOCX_MIME, PDF_MIME, DocumentDecoder, mime_kind_for_path
from .errors import (
    BackendRuntimeError,
    BackendUnavailable,
    CorruptDocument,
    DocumentError,
    NarrationError,
    NoResolvableVoice,
    UnsupportedFormat,
)

__all__ = [
    "DocumentDecoder",
    "DOCX_MIME",
    "PDF_MIME",
    "mime_kind_for_path",
    "NarrationError",
    "BackendUnavailable",
    "NoResolvableVoice",
    "BackendRuntimeError",
    "DocumentError",
    "UnsupportedFormat",
    "CorruptDocument",
]
