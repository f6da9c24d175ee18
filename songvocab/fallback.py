"""Local word extraction used when the model cannot help"""
import re
from typing import List

from songvocab.models import VocabularyEntry
from songvocab.utils import dedupe


FALLBACK_SCORE = 5
FALLBACK_MEANING = "단어 정의"
FALLBACK_EXAMPLE = "가사에서 추출된 단어"

STOP_WORDS = frozenset([
    "the", "a", "an", "is", "are", "was", "were", "be", "been", "being",
    "have", "has", "had", "do", "does", "did", "will", "would", "could",
    "should", "may", "might", "must", "shall", "can", "need",
    "and", "or", "but", "if", "then", "when", "where", "what", "which",
    "who", "whom", "whose", "why", "how", "this", "that", "these", "those",
    "it", "its", "in", "on", "at", "to", "for", "of", "with", "by", "from",
    "up", "down", "over", "under", "again", "further", "once", "here",
    "there", "all", "any", "both", "each", "few", "more", "most", "other",
    "some", "such", "no", "nor", "not", "only", "own", "same", "so", "than",
    "too", "very", "just", "im", "i", "you", "we", "they", "my", "your",
    "our", "their",
])

_NON_WORD = re.compile(r"[^\w\s]")


def fallback_vocabulary(lyrics: str, max_words: int, min_length: int) -> List[VocabularyEntry]:
    """
    Pick words straight from the lyrics with placeholder annotations.

    Lowercases, replaces punctuation with spaces, drops short tokens and
    stop words, keeps first-seen order. Never raises.
    """
    if not isinstance(lyrics, str):
        return []

    tokens = _NON_WORD.sub(" ", lyrics.lower()).split()
    words = dedupe(
        token for token in tokens
        if len(token) >= min_length and token not in STOP_WORDS
    )

    return [
        VocabularyEntry(
            word=word,
            score=FALLBACK_SCORE,
            meaning=FALLBACK_MEANING,
            example=FALLBACK_EXAMPLE,
            synonyms=[],
            occurrences=1,
        )
        for word in words[:max(max_words, 0)]
    ]
