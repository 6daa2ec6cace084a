"""
Word segmentation and boundary-offset mapping for highlighting.

Both functions split on runs of whitespace with the same regex, so a
leading whitespace run produces an empty first token in both and the
indices stay aligned.  Backends whose boundary units differ from
whitespace-delimited words (punctuation, Unicode spacing) only get a
best-effort alignment.
"""

import re
from typing import Tuple

_RE_WHITESPACE_RUN = re.compile(r"\s+")


def tokenize_words(text: str) -> Tuple[str, ...]:
    """
    Split *text* into word tokens on whitespace runs.

    Empty text yields no tokens.

    >>> tokenize_words("Hello brave world")
    ('Hello', 'brave', 'world')
    """
    if not text:
        return ()
    return tuple(_RE_WHITESPACE_RUN.split(text))


def word_index_at_offset(text: str, char_offset: int) -> int:
    """
    Map a backend character offset to the index of the word being spoken.

    Counts the whitespace-delimited tokens in ``text[:char_offset]``; the
    last of them is the word the offset falls in (or, when the offset
    sits right after a space, the word that starts there).

    >>> word_index_at_offset("Hello brave world", 6)
    1
    """
    prefix = text[: max(0, char_offset)]
    return len(_RE_WHITESPACE_RUN.split(prefix)) - 1
