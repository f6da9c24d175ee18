"""Tests for recovering entries from model output"""

import json

import pytest

from songvocab.exceptions import InvalidModelOutputError
from songvocab.response_parser import extract_json_array, parse_vocabulary_response


class TestExtractJsonArray:
    """Test bracket matching on raw text"""

    def test_strips_surrounding_prose_and_fences(self):
        text = 'Sure! ```json\n[{"word": "shine"}]\n``` Hope this helps.'
        assert extract_json_array(text) == '[{"word": "shine"}]'

    def test_nested_arrays_are_kept_whole(self):
        text = 'x [{"word": "a", "synonyms": ["b", "c"]}] y'
        assert extract_json_array(text) == '[{"word": "a", "synonyms": ["b", "c"]}]'

    def test_no_bracket_returns_trimmed_text(self):
        assert extract_json_array("  not valid json array  ") == "not valid json array"

    def test_unbalanced_returns_trimmed_text(self):
        assert extract_json_array(' [1, 2 ') == "[1, 2"


class TestParseVocabularyResponse:
    """Test parsing, normalization and dedup"""

    def test_case_insensitive_dedup_counts_occurrences(self):
        """Duplicates fold into the first entry and add to its count"""
        raw = '[{"word":"shine","score":8},{"word":"Shine","score":5},{"word":"forever","score":7}]'

        entries = parse_vocabulary_response(raw, max_words=10, min_length=2)

        assert [e.word for e in entries] == ["shine", "forever"]
        assert entries[0].score == 8
        assert entries[0].occurrences == 2
        assert entries[1].score == 7
        assert entries[1].occurrences == 1

    def test_invalid_text_raises(self):
        with pytest.raises(InvalidModelOutputError):
            parse_vocabulary_response("not valid json array", 10, 2)

    def test_unbalanced_array_raises(self):
        with pytest.raises(InvalidModelOutputError):
            parse_vocabulary_response('[{"word": "shine"}', 10, 2)

    def test_non_array_json_returns_empty(self):
        assert parse_vocabulary_response('{"word": "shine"}', 10, 2) == []

    def test_skips_non_objects_and_non_string_words(self):
        raw = json.dumps(["shine", 3, None, {"word": 5}, {"meaning": "x"}, {"word": "glow"}])

        entries = parse_vocabulary_response(raw, 10, 2)

        assert [e.word for e in entries] == ["glow"]

    def test_fields_are_type_checked(self):
        raw = json.dumps([{
            "word": "  diamond ",
            "score": "9",
            "meaning": 42,
            "example": "shine bright like a diamond",
            "synonyms": [" gem ", "", 7, "jewel", "gem"],
        }])

        entry = parse_vocabulary_response(raw, 10, 2)[0]

        assert entry.word == "diamond"
        assert entry.score is None
        assert entry.meaning is None
        assert entry.example == "shine bright like a diamond"
        assert entry.synonyms == ["gem", "jewel"]

    def test_boolean_score_is_dropped(self):
        entry = parse_vocabulary_response('[{"word": "bright", "score": true}]', 10, 2)[0]
        assert entry.score is None

    def test_float_score_passes(self):
        entry = parse_vocabulary_response('[{"word": "bright", "score": 7.5}]', 10, 2)[0]
        assert entry.score == 7.5

    def test_empty_synonyms_are_omitted(self):
        entry = parse_vocabulary_response('[{"word": "bright", "synonyms": ["", "  "]}]', 10, 2)[0]
        assert entry.synonyms is None
        assert "synonyms" not in entry.to_dict()

    def test_min_length_applies_to_trimmed_word(self):
        raw = '[{"word": " a "}, {"word": "to"}, {"word": "ever"}]'

        entries = parse_vocabulary_response(raw, 10, 3)

        assert [e.word for e in entries] == ["ever"]

    def test_short_duplicates_do_not_count(self):
        """Occurrences are counted after the length filter"""
        raw = '[{"word": "go"}, {"word": "GO"}, {"word": "going"}]'

        entries = parse_vocabulary_response(raw, 10, 3)

        assert len(entries) == 1
        assert entries[0].occurrences == 1

    def test_truncates_to_max_words_in_order(self):
        words = [{"word": f"word{i}"} for i in range(20)]

        entries = parse_vocabulary_response(json.dumps(words), max_words=5, min_length=2)

        assert [e.word for e in entries] == [f"word{i}" for i in range(5)]

    def test_occurrences_counted_beyond_truncation(self):
        raw = '[{"word": "shine"}, {"word": "bright"}, {"word": "SHINE"}]'

        entries = parse_vocabulary_response(raw, max_words=1, min_length=2)

        assert len(entries) == 1
        assert entries[0].occurrences == 2

    def test_output_properties_hold(self):
        """Length bound, min length and case-insensitive uniqueness"""
        raw = json.dumps([{"word": w} for w in ["Love", "love", "LOVE", "me", "x", "night", "Night", "sky"]])

        entries = parse_vocabulary_response(raw, max_words=3, min_length=2)

        keys = [e.word.casefold() for e in entries]
        assert len(entries) <= 3
        assert all(len(e.word) >= 2 for e in entries)
        assert len(keys) == len(set(keys))
        assert entries[0].occurrences == 3
