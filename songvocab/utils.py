"""Utility functions"""
from typing import Iterable, List


def word_key(word: str) -> str:
    """
    Case-insensitive identity of a word, used for dedup and storage keys.

    Example: ' Shine ' -> 'shine'
    """
    return word.strip().casefold()


def dedupe(values: Iterable[str]) -> List[str]:
    """Drop repeated strings while keeping first-seen order"""
    seen = set()
    result = []
    for value in values:
        if value not in seen:
            seen.add(value)
            result.append(value)
    return result


def clean_strings(values: Iterable[object]) -> List[str]:
    """Keep only non-empty trimmed strings, deduplicated in order"""
    return dedupe(v.strip() for v in values if isinstance(v, str) and v.strip())
