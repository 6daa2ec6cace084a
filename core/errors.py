"""
Error taxonomy shared by document decoding and narration.

Every failure either degrades gracefully or ends the current operation
cleanly; nothing here is retried.
"""


class NarrationError(RuntimeError):
    """Base class for all reader errors."""


class BackendUnavailable(NarrationError):
    """
    A speech or decode capability is missing at call time.

    Raised when a required library cannot be imported or an engine fails
    to initialise.  The message is meant to be shown to the user as-is.
    """


class NoResolvableVoice(NarrationError):
    """
    The selected voice is absent from the backend's live voice set.

    The controller recovers from this locally by speaking with the
    backend's default voice, so it is logged rather than raised.
    """


class BackendRuntimeError(NarrationError):
    """A speech backend failed while speaking an utterance."""


class DocumentError(NarrationError):
    """A document could not be turned into text."""


class UnsupportedFormat(DocumentError):
    """The file type is neither PDF nor DOCX."""


class CorruptDocument(DocumentError):
    """The file claims a supported type but cannot be parsed."""
