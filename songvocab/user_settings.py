"""Map a user's stored vocabulary settings to extraction options"""
from typing import Any, Callable, Mapping, Optional

from loguru import logger

from songvocab.models import VocabularyOptions


SettingsLookup = Callable[[str], Optional[Mapping[str, Any]]]

MAX_WORDS_RANGE = (1, 200)
MIN_LENGTH_RANGE = (1, 20)


def default_options() -> VocabularyOptions:
    """Fresh default options: en, intermediate, 30 words, length 2"""
    return VocabularyOptions()


def _coerce_int(value: Any, bounds: tuple, default: int) -> int:
    if isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return default
    if not number.is_integer():
        return default
    low, high = bounds
    return int(number) if low <= number <= high else default


def options_from_row(row: Mapping[str, Any]) -> VocabularyOptions:
    """
    Coerce a stored settings row into valid options.

    Unknown language/level values fall back to en/intermediate and
    out-of-range numbers fall back to that field's default.
    """
    defaults = default_options()
    language = "ko" if row.get("language") == "ko" else "en"
    level = row.get("level")
    if level not in ("beginner", "advanced"):
        level = "intermediate"

    return VocabularyOptions(
        language=language,
        level=level,
        max_words=_coerce_int(row.get("max_words"), MAX_WORDS_RANGE, defaults.max_words),
        min_length=_coerce_int(row.get("min_length"), MIN_LENGTH_RANGE, defaults.min_length),
    )


def resolve_options(user_id: str, settings_lookup: Optional[SettingsLookup]) -> VocabularyOptions:
    """Look up the user's settings, falling back to defaults; never raises"""
    if settings_lookup is None:
        return default_options()

    try:
        row = settings_lookup(user_id)
    except Exception as e:
        logger.warning(f"⚠ Could not load vocabulary settings for {user_id}: {e}")
        return default_options()

    if not row:
        return default_options()
    return options_from_row(row)
