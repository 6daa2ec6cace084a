"""
DOCX text extraction via python-docx.
"""

import io
import logging

from docx import Document

from core.errors import CorruptDocument

logger = logging.getLogger(__name__)

CORRUPT_DOCX_MESSAGE = (
    "Could not parse the DOCX file. It may be corrupt or not a valid .docx file."
)


def extract_docx_text(data: bytes) -> str:
    """
    Decode DOCX bytes to plain text.

    Paragraphs are separated by a blank line.

    Raises:
        CorruptDocument: If the bytes are not a readable Word package.
    """
    try:
        document = Document(io.BytesIO(data))
    except Exception as e:
        logger.debug("python-docx rejected the package: %s", e)
        raise CorruptDocument(CORRUPT_DOCX_MESSAGE) from e

    return "\n\n".join(p.text for p in document.paragraphs)
