"""
Merge extracted entries into a user's durable vocabulary.

Word rows are keyed by (user, case-folded word): re-saving a word adds its
occurrences to the stored count, and a meaning is only replaced by a new
non-null one. Synonyms form a set per word. Every saved extraction is also
kept as an append-only list snapshot.

Each word's upsert is independent, so a crash halfway through a batch is
healed by simply saving the batch again.
"""
from typing import Dict, List, Optional, Protocol, Sequence

from loguru import logger

from songvocab.exceptions import PersistenceError
from songvocab.models import VocabularyEntry
from songvocab.utils import word_key


class VocabularyStore(Protocol):
    def upsert_word(
        self, user_id: str, word: str, meaning: Optional[str], occurrences: int
    ) -> str: ...

    def insert_synonym_if_absent(self, word_id: str, synonym: str) -> None: ...

    def append_list_snapshot(
        self, user_id: str, title: Optional[str], entries: Sequence[VocabularyEntry]
    ) -> str: ...


def upsert_entries(
    user_id: str,
    entries: Sequence[VocabularyEntry],
    store: VocabularyStore
) -> Dict[str, str]:
    """
    Upsert every entry's word, then attach its synonyms.

    Returns a mapping of case-folded word to stored word id. A word whose
    upsert fails is skipped along with its synonyms; synonym failures are
    logged per word and never stop the batch.
    """
    word_ids: Dict[str, str] = {}

    for entry in entries:
        word = entry.word.strip()
        if not word:
            continue
        try:
            word_ids[word_key(word)] = store.upsert_word(
                user_id, word, entry.meaning, max(entry.occurrences, 1)
            )
        except PersistenceError as e:
            logger.error(f"⚠ Failed to save word '{word}': {e}")

    for entry in entries:
        if not entry.synonyms:
            continue
        word_id = word_ids.get(word_key(entry.word))
        if word_id is None:
            continue
        try:
            for synonym in entry.synonyms:
                synonym = synonym.strip()
                if synonym:
                    store.insert_synonym_if_absent(word_id, synonym)
        except PersistenceError as e:
            logger.warning(f"⚠ Failed to save synonyms for '{entry.word}': {e}")

    return word_ids


def save_vocabulary_list(
    user_id: str,
    entries: List[VocabularyEntry],
    store: VocabularyStore,
    title: Optional[str] = None
) -> Dict[str, str]:
    """
    Append the snapshot, then merge its words into the user's vocabulary.

    A failed snapshot append propagates; word-level failures do not.
    """
    list_id = store.append_list_snapshot(user_id, title, entries)
    logger.info(f"💾 Saved vocabulary list {list_id} ({len(entries)} words)")

    word_ids = upsert_entries(user_id, entries, store)
    logger.success(f"✓ Updated {len(word_ids)}/{len(entries)} words for user {user_id}")
    return word_ids
