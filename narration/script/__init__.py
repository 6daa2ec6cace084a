"""Word segmentation of the narrated text."""

from .words import tokenize_words, word_index_at_offset

__all__ = ["tokenize_words", "word_index_at_offset"]
