"""Main pipeline: song query -> lyrics -> vocabulary -> storage"""
import asyncio
from pathlib import Path
from typing import Optional

from loguru import logger

from songvocab.config.settings import Settings, get_settings, ensure_directories
from songvocab.database import Database
from songvocab.extractor import ModelClient, VocabularyExtractor
from songvocab.exceptions import PersistenceError
from songvocab.genius_client import GeniusClient
from songvocab.llm_processor import LLMProcessor
from songvocab.models import GenerationResult, SongInfo
from songvocab.persistence import save_vocabulary_list
from songvocab.user_settings import resolve_options


HISTORY_ORIGIN = "Genius"


class VocabularyPipeline:
    """Generate a vocabulary list for a user from a song query"""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        database: Optional[Database] = None,
        lyrics_client: Optional[GeniusClient] = None,
        model_client: Optional[ModelClient] = None
    ):
        self.settings = settings or get_settings()
        if database is None:
            ensure_directories()
            database = Database(Path(self.settings.database_path))
        self.database = database
        self.lyrics_client = lyrics_client or GeniusClient(self.settings)
        self.extractor = VocabularyExtractor(model_client or LLMProcessor(self.settings))

    async def generate_vocabulary_async(
        self,
        user_id: str,
        song_query: str,
        list_title: Optional[str] = None,
        persist: bool = True
    ) -> GenerationResult:
        """
        Steps: Query -> Genius lyrics -> user options -> model extraction -> save.

        Raises NotFoundError, FetchFailedError, ConfigurationError, and
        PersistenceError when the list snapshot cannot be written.
        """
        query = song_query.strip()
        logger.info(f"🎵 Looking up lyrics for: {query}")
        song = await self.lyrics_client.resolve(query)

        options = resolve_options(user_id, self.database.get_vocabulary_settings)
        logger.info(
            f"🤖 Extracting vocabulary ({options.language}, {options.level}, "
            f"max {options.max_words} words)"
        )
        entries = await self.extractor.extract(song.lyrics, options)

        entries = [
            entry.model_copy(update={"song_title": song.title, "song_artist": song.artist})
            for entry in entries
        ]

        if persist:
            title = (list_title or "").strip() or f"{song.title} - {song.artist}"
            save_vocabulary_list(user_id, entries, self.database, title=title)
            self._record_history(user_id, query, song.title, song.artist)

        return GenerationResult(
            entries=entries,
            song=SongInfo(title=song.title, artist=song.artist),
            saved=persist,
        )

    def _record_history(self, user_id: str, query: str, title: str, artist: str) -> None:
        try:
            self.database.insert_music_history(
                user_id,
                video_id=query,
                title=f"{title} - {artist}",
                origin=HISTORY_ORIGIN,
            )
        except PersistenceError as e:
            logger.warning(f"⚠ Could not record music history: {e}")

    def generate_vocabulary(
        self,
        user_id: str,
        song_query: str,
        list_title: Optional[str] = None,
        persist: bool = True
    ) -> GenerationResult:
        """Synchronous wrapper for generate_vocabulary_async"""
        return asyncio.run(
            self.generate_vocabulary_async(user_id, song_query, list_title, persist)
        )

    def close(self) -> None:
        """Release the database connection"""
        self.database.close()
