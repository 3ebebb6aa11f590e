# tests/test_text_processing.py
import pytest

from utils.text_processing import (
    coerce_field_text,
    normalize_entity_name,
    replace_whole_word,
    truncate_for_log,
    word_pattern,
)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("  Alex  ", "Alex"),
        ("Captain   James\tMorrison", "Captain James Morrison"),
        ("O’Brien", "O'Brien"),
        (None, ""),
        (42, ""),
    ],
)
def test_normalize_entity_name(raw, expected):
    assert normalize_entity_name(raw) == expected


@pytest.mark.parametrize(
    "value,expected",
    [
        ("plain text", "plain text"),
        (["a", "b"], "a b"),
        (["a", 1, None, "b"], "a b"),
        ([], ""),
        (42, None),
        (None, None),
        ({"text": "x"}, None),
    ],
)
def test_coerce_field_text(value, expected):
    assert coerce_field_text(value) == expected


def test_word_pattern_handles_punctuated_phrases():
    assert word_pattern("Dr. Smith").search("Ask Dr. Smith.")
    assert not word_pattern("Al").search("Alex")
    assert word_pattern("al").search("AL!")
    assert not word_pattern("al", ignore_case=False).search("AL!")


class TestReplaceWholeWord:
    def test_bare_and_possessive(self):
        assert replace_whole_word("Alex met Alex's rival.", "Alex", "Sam") == ("Sam met Sam's rival.", 2)

    def test_curly_possessive(self):
        assert replace_whole_word("Alex’s hat", "Alex", "Sam") == ("Sam’s hat", 1)

    def test_case_sensitive(self):
        assert replace_whole_word("alex and ALEX", "Alex", "Sam") == ("alex and ALEX", 0)

    def test_partial_words_untouched(self):
        assert replace_whole_word("Alexander", "Alex", "Sam") == ("Alexander", 0)

    def test_new_name_containing_old(self):
        assert replace_whole_word("Alex's bar", "Alex", "Alex Stone") == ("Alex Stone's bar", 1)

    def test_replacement_is_literal(self):
        assert replace_whole_word("Alex", "Alex", r"\1 Sam") == (r"\1 Sam", 1)

    def test_empty_inputs(self):
        assert replace_whole_word("", "Alex", "Sam") == ("", 0)
        assert replace_whole_word("Alex", "", "Sam") == ("Alex", 0)


def test_truncate_for_log():
    assert truncate_for_log("short") == "short"
    assert truncate_for_log("x" * 100, limit=10) == "x" * 10 + "..."
    assert truncate_for_log(None) == ""
