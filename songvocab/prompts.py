"""Build the instruction text sent to the extraction model"""
from songvocab.models import VocabularyOptions


LYRICS_DELIMITER = "--- Lyrics ---"

LEVEL_INSTRUCTIONS = {
    "beginner": (
        "Target level: beginner. Prefer high-frequency, essential words. "
        "Give short, simple definitions and easy example phrases."
    ),
    "intermediate": (
        "Target level: intermediate. Mix common and some less common words. "
        "Use clear definitions and example phrases from the lyrics."
    ),
    "advanced": (
        "Target level: advanced. Include less common words, idioms, or phrasal verbs where they appear. "
        "Definitions can be more precise or nuanced."
    ),
}

TOKENIZE_INSTRUCTIONS = {
    "en": (
        "Tokenize: split the text into English words. Lowercase every word "
        "and strip punctuation before comparing words."
    ),
    "ko": (
        "Tokenize: split the text into Korean words on whitespace. Strip punctuation "
        "and symbols, keep Hangul word forms as written, and do not romanize."
    ),
}


def build_prompt(lyrics: str, options: VocabularyOptions) -> str:
    """
    Build the full prompt for one lyrics text.

    The result depends only on the arguments, so identical inputs always
    produce identical prompts.
    """
    lang_label = "English" if options.language == "en" else "Korean"
    level_instruction = LEVEL_INSTRUCTIONS.get(options.level, LEVEL_INSTRUCTIONS["intermediate"])

    return "\n".join([
        f"You are a vocabulary tutor. Below are song lyrics in plain text ({lang_label}).",
        "",
        level_instruction,
        "",
        "Tasks (do all yourself):",
        f"1. {TOKENIZE_INSTRUCTIONS[options.language]}",
        f"2. Filter: ignore words shorter than {options.min_length} characters and common "
        "stop words (articles, pronouns, auxiliary verbs, prepositions, conjunctions, etc.).",
        f"3. Select: choose at most {options.max_words} words that are most useful for "
        "vocabulary memorization at the target level above.",
        f'4. Synonyms: for each selected word, add "synonyms" (array of 1-5 synonym words in '
        f"the same language as the word, {lang_label}, useful for vocabulary learning).",
        "",
        'Output: Return a single JSON array. Each element must have exactly these fields: '
        '"word" (string), "score" (number 1-10, importance), "meaning" (short definition in Korean only), '
        '"example" (short phrase from or inspired by the lyrics), "synonyms" (array of strings). '
        "No markdown, no code fences, no explanation. Only the JSON array.",
        "",
        LYRICS_DELIMITER,
        lyrics,
    ])
