"""Tests for word segmentation and boundary-offset mapping."""

from narration.script.words import tokenize_words, word_index_at_offset


def test_tokenize_splits_on_whitespace_runs():
    assert tokenize_words("Hello brave world") == ("Hello", "brave", "world")
    assert tokenize_words("one \t two\n\nthree") == ("one", "two", "three")


def test_tokenize_is_deterministic():
    text = "The quick  brown\nfox"
    assert tokenize_words(text) == tokenize_words(text)


def test_tokenize_empty_text():
    assert tokenize_words("") == ()


def test_tokenize_keeps_leading_empty_token():
    """Leading whitespace yields an empty first token, like the offset mapping."""
    assert tokenize_words("  Hello world") == ("", "Hello", "world")


def test_offset_at_word_start():
    text = "Hello brave world"
    assert word_index_at_offset(text, 0) == 0
    assert word_index_at_offset(text, 6) == 1
    assert word_index_at_offset(text, 12) == 2


def test_offset_inside_word():
    assert word_index_at_offset("Hello brave world", 8) == 1


def test_offset_past_end():
    assert word_index_at_offset("Hello brave world", 500) == 2


def test_offset_with_leading_whitespace_matches_tokens():
    text = "  Hello world"
    tokens = tokenize_words(text)
    assert tokens[word_index_at_offset(text, 2)] == "Hello"
    assert tokens[word_index_at_offset(text, 8)] == "world"


def test_negative_offset_is_first_word():
    assert word_index_at_offset("Hello", -3) == 0
