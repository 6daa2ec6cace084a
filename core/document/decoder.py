"""
Document decoder: file bytes → plain text.

Dispatches on the mime kind reported for a file to the PDF or DOCX
reader.  Decoding either yields the full text or raises a
:class:`~core.errors.DocumentError`; partial text is never returned.

Usage::

    decoder = DocumentDecoder()
    text = decoder.decode(data, PDF_MIME)
    text = decoder.decode_file("report.docx")
"""

import logging
from pathlib import Path
from typing import Callable, Dict, Union

from core.errors import BackendUnavailable, UnsupportedFormat

logger = logging.getLogger(__name__)

PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

UNSUPPORTED_MESSAGE = "Unsupported file type. Please upload a PDF or DOCX file."

# File suffix → mime kind for path-based intake
SUFFIX_TO_MIME: Dict[str, str] = {
    ".pdf": PDF_MIME,
    ".docx": DOCX_MIME,
}


def mime_kind_for_path(path: Union[str, Path]) -> str:
    """
    Infer the mime kind of a document from its file suffix.

    Raises:
        UnsupportedFormat: If the suffix is not ``.pdf`` or ``.docx``.
    """
    suffix = Path(path).suffix.lower()
    if suffix not in SUFFIX_TO_MIME:
        raise UnsupportedFormat(UNSUPPORTED_MESSAGE)
    return SUFFIX_TO_MIME[suffix]


def _pdf_extractor() -> Callable[[bytes], str]:
    try:
        from core.document.pdf_reader import extract_pdf_text
    except ImportError as e:
        raise BackendUnavailable(
            "PDF processing library failed to load. "
            "Install with: pip install PyMuPDF"
        ) from e
    return extract_pdf_text


def _docx_extractor() -> Callable[[bytes], str]:
    try:
        from core.document.docx_reader import extract_docx_text
    except ImportError as e:
        raise BackendUnavailable(
            "Word document processing library failed to load. "
            "Install with: pip install python-docx"
        ) from e
    return extract_docx_text


class DocumentDecoder:
    """Turns PDF and DOCX bytes into plain text for narration."""

    def __init__(self):
        self._extractors: Dict[str, Callable[[], Callable[[bytes], str]]] = {
            PDF_MIME: _pdf_extractor,
            DOCX_MIME: _docx_extractor,
        }

    def decode(self, file_bytes: bytes, mime_kind: str) -> str:
        """
        Decode *file_bytes* of the given *mime_kind* to text.

        Args:
            file_bytes: Complete file contents.
            mime_kind:  ``application/pdf`` or the DOCX mime type.

        Returns:
            The extracted plain text.

        Raises:
            UnsupportedFormat:  For any other mime kind.
            CorruptDocument:    If the bytes cannot be parsed.
            BackendUnavailable: If the parsing library is not installed.
        """
        factory = self._extractors.get(mime_kind)
        if factory is None:
            logger.debug("Rejecting unsupported mime kind %r", mime_kind)
            raise UnsupportedFormat(UNSUPPORTED_MESSAGE)

        text = factory()(file_bytes)
        logger.info(
            "Decoded %s document: %d chars", mime_kind.rsplit("/", 1)[-1], len(text)
        )
        return text

    def decode_file(self, path: Union[str, Path]) -> str:
        """Read *path* from disk and decode it based on its suffix."""
        path = Path(path)
        mime_kind = mime_kind_for_path(path)
        return self.decode(path.read_bytes(), mime_kind)
