"""Recover vocabulary entries from free-form model output"""
import json
from collections import Counter
from numbers import Real
from typing import List, Optional

from loguru import logger

from songvocab.exceptions import InvalidModelOutputError
from songvocab.models import VocabularyEntry
from songvocab.utils import clean_strings, word_key


def extract_json_array(text: str) -> str:
    """
    Cut the first balanced [...] block out of the text.

    Falls back to the whole trimmed text when there is no '[' or the
    brackets never balance.
    """
    trimmed = text.strip()
    start = trimmed.find("[")
    if start == -1:
        return trimmed

    depth = 0
    for i in range(start, len(trimmed)):
        char = trimmed[i]
        if char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
        if depth == 0:
            return trimmed[start:i + 1]
    return trimmed


def _normalize_item(item: dict) -> dict:
    score = item.get("score")
    meaning = item.get("meaning")
    example = item.get("example")
    synonyms: Optional[List[str]] = None
    if isinstance(item.get("synonyms"), list):
        synonyms = clean_strings(item["synonyms"]) or None

    return {
        "word": item["word"].strip(),
        # bool is a Real in Python, but not a score
        "score": score if isinstance(score, Real) and not isinstance(score, bool) else None,
        "meaning": meaning if isinstance(meaning, str) else None,
        "example": example if isinstance(example, str) else None,
        "synonyms": synonyms,
    }


def parse_vocabulary_response(text: str, max_words: int, min_length: int) -> List[VocabularyEntry]:
    """
    Turn raw model text into deduplicated vocabulary entries.

    Raises InvalidModelOutputError when the candidate payload is not JSON.
    A JSON value that is not an array yields an empty list.
    """
    payload = extract_json_array(text)
    try:
        data = json.loads(payload)
    except (json.JSONDecodeError, ValueError) as e:
        logger.debug(f"Tried to parse: {payload[:500]}")
        raise InvalidModelOutputError(
            "Model returned invalid JSON for vocabulary",
            details={"error": str(e)}
        ) from e

    if not isinstance(data, list):
        return []

    normalized = [
        _normalize_item(item)
        for item in data
        if isinstance(item, dict) and isinstance(item.get("word"), str)
    ]
    normalized = [item for item in normalized if item["word"] and len(item["word"]) >= min_length]

    occurrences = Counter(word_key(item["word"]) for item in normalized)

    entries = []
    seen = set()
    for item in normalized:
        key = word_key(item["word"])
        if key in seen:
            continue
        if len(entries) >= max_words:
            break
        seen.add(key)
        entries.append(VocabularyEntry(**item, occurrences=occurrences[key]))

    return entries
