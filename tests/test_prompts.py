"""Tests for prompt construction"""

from songvocab.models import VocabularyOptions
from songvocab.prompts import LYRICS_DELIMITER, build_prompt


class TestBuildPrompt:
    """Test the instruction text sent to the model"""

    def test_is_deterministic(self, sample_lyrics):
        options = VocabularyOptions()
        assert build_prompt(sample_lyrics, options) == build_prompt(sample_lyrics, options)

    def test_lyrics_follow_delimiter(self, sample_lyrics):
        prompt = build_prompt(sample_lyrics, VocabularyOptions())
        assert prompt.endswith(f"{LYRICS_DELIMITER}\n{sample_lyrics}")

    def test_limits_are_spelled_out(self):
        prompt = build_prompt("la la", VocabularyOptions(max_words=12, min_length=4))

        assert "at most 12 words" in prompt
        assert "shorter than 4 characters" in prompt

    def test_level_blocks_differ(self):
        prompts = {
            level: build_prompt("la la", VocabularyOptions(level=level))
            for level in ("beginner", "intermediate", "advanced")
        }

        assert "high-frequency" in prompts["beginner"]
        assert "Target level: intermediate" in prompts["intermediate"]
        assert "idioms" in prompts["advanced"]
        assert len(set(prompts.values())) == 3

    def test_language_specific_tokenizing(self):
        english = build_prompt("la la", VocabularyOptions(language="en"))
        korean = build_prompt("la la", VocabularyOptions(language="ko"))

        assert "Lowercase" in english
        assert "Hangul" in korean
        assert "Hangul" not in english

    def test_output_contract(self):
        prompt = build_prompt("la la", VocabularyOptions())

        assert "single JSON array" in prompt
        for field in ('"word"', '"score"', '"meaning"', '"example"', '"synonyms"'):
            assert field in prompt
        assert "1-5 synonym" in prompt
        assert "stop words" in prompt
        assert "No markdown" in prompt

    def test_braces_in_lyrics_are_verbatim(self):
        lyrics = "{curly} [square] \"quotes\""
        assert build_prompt(lyrics, VocabularyOptions()).endswith(lyrics)
