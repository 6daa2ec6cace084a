"""Document decoding: PDF and DOCX to plain text."""

from .decoder import (
    DOCX_MIME,
    PDF_MIME,
    DocumentDecoder,
    mime_kind_for_path,
)

__all__ = [
    "DocumentDecoder",
    "DOCX_MIME",
    "PDF_MIME",
    "mime_kind_for_path",
]
