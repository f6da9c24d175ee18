"""
Thread-safe SQLite storage for songvocab.

Schema:
    user_vocabulary_settings:  Per-user extraction options (absent row = defaults)
    user_words:                One row per (user, case-folded word) with a running count
    word_synonyms:             Synonym set per user word
    vocabulary_lists:          Append-only snapshots of extraction results (entries as JSON)
    user_music_history:        Songs/videos a user has looked at

Usage:
    db = Database(Path("data/songvocab.db"))
    word_id = db.upsert_word(user_id, "shine", "빛나다", occurrences=2)
    db.insert_synonym_if_absent(word_id, "glow")
"""

import json
import sqlite3
import threading
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Generator, List, Optional, Sequence

from songvocab.exceptions import PersistenceError
from songvocab.models import MusicHistoryRecord, UserWord, VocabularyEntry, VocabularyList
from songvocab.utils import word_key


DATABASE_VERSION = 1
DEFAULT_HISTORY_ORIGIN = "YouTube"


_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY
);

CREATE TABLE IF NOT EXISTS user_vocabulary_settings (
    user_id TEXT PRIMARY KEY,
    language TEXT NOT NULL DEFAULT 'en',
    level TEXT NOT NULL DEFAULT 'intermediate',
    max_words INTEGER NOT NULL DEFAULT 30,
    min_length INTEGER NOT NULL DEFAULT 2
);

CREATE TABLE IF NOT EXISTS user_words (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    word TEXT NOT NULL,
    word_key TEXT NOT NULL,  -- case-folded word, the identity used for upserts
    meaning TEXT,
    count INTEGER NOT NULL DEFAULT 1,
    created_at TEXT NOT NULL,
    UNIQUE (user_id, word_key)
);

CREATE TABLE IF NOT EXISTS word_synonyms (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_word_id TEXT NOT NULL,
    synonym TEXT NOT NULL,
    FOREIGN KEY (user_word_id) REFERENCES user_words(id) ON DELETE CASCADE,
    UNIQUE (user_word_id, synonym)
);

CREATE TABLE IF NOT EXISTS vocabulary_lists (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    title TEXT,
    entries TEXT NOT NULL DEFAULT '[]',  -- JSON array
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS user_music_history (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    video_id TEXT NOT NULL,
    title TEXT,
    capture_time INTEGER,
    origin TEXT DEFAULT 'YouTube',
    created_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_user_words_user ON user_words(user_id);
CREATE INDEX IF NOT EXISTS idx_synonyms_word ON word_synonyms(user_word_id);
CREATE INDEX IF NOT EXISTS idx_vocab_lists_user ON vocabulary_lists(user_id);
CREATE INDEX IF NOT EXISTS idx_music_history_user ON user_music_history(user_id);
"""


class Database:
    """
    Thread-safe SQLite store implementing the settings, vocabulary and
    history operations.

    Uses a single persistent connection with thread locking for safety.
    All public methods acquire self._lock before executing.
    """

    def __init__(self, db_path: Path) -> None:
        self.db_path = Path(db_path)
        self._lock = threading.Lock()
        self._conn: sqlite3.Connection | None = None

        if not self.db_path.parent.exists():
            raise PersistenceError(
                f"Parent directory does not exist: {self.db_path.parent}",
                details={"path": str(self.db_path.parent)}
            )

        try:
            self._init_database()
        except sqlite3.Error as e:
            raise PersistenceError(
                f"Failed to initialize database: {e}",
                details={"path": str(self.db_path)}
            ) from e

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(
                str(self.db_path),
                timeout=30.0,
                check_same_thread=False  # We handle thread safety with _lock
            )
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA foreign_keys = ON")
        return self._conn

    @contextmanager
    def _transaction(self, action: str) -> Generator[sqlite3.Connection, None, None]:
        """Run a unit of work under the lock; commit on success, roll back on error."""
        with self._lock:
            conn = self._connection()
            try:
                yield conn
                conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                raise PersistenceError(f"Failed to {action}: {e}") from e

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def _init_database(self) -> None:
        conn = self._connection()
        conn.executescript(_SCHEMA_SQL)

        row = conn.execute("SELECT version FROM schema_version LIMIT 1").fetchone()
        if row is None:
            conn.execute("INSERT INTO schema_version (version) VALUES (?)", (DATABASE_VERSION,))
        elif row[0] != DATABASE_VERSION:
            raise PersistenceError(
                f"Database version mismatch: expected {DATABASE_VERSION}, got {row[0]}",
                details={"expected": DATABASE_VERSION, "actual": row[0]}
            )
        conn.commit()

    def _now_iso(self) -> str:
        return datetime.now(timezone.utc).isoformat()

    # =========================================================================
    # Settings
    # =========================================================================

    def get_vocabulary_settings(self, user_id: str) -> dict[str, Any] | None:
        with self._transaction("read vocabulary settings") as conn:
            row = conn.execute(
                "SELECT language, level, max_words, min_length "
                "FROM user_vocabulary_settings WHERE user_id = ? LIMIT 1",
                (user_id,)
            ).fetchone()
            return dict(row) if row else None

    def update_vocabulary_settings(
        self,
        user_id: str,
        language: Optional[str] = None,
        level: Optional[str] = None,
        max_words: Optional[int] = None,
        min_length: Optional[int] = None
    ) -> dict[str, Any]:
        """
        Create or update a user's settings row.

        Fields left as None keep their stored value, or the column default
        when the user has no row yet.
        """
        with self._transaction("update vocabulary settings") as conn:
            conn.execute(
                "INSERT INTO user_vocabulary_settings (user_id) VALUES (?) "
                "ON CONFLICT(user_id) DO NOTHING",
                (user_id,)
            )
            conn.execute("""
                UPDATE user_vocabulary_settings SET
                    language = COALESCE(?, language),
                    level = COALESCE(?, level),
                    max_words = COALESCE(?, max_words),
                    min_length = COALESCE(?, min_length)
                WHERE user_id = ?
            """, (language, level, max_words, min_length, user_id))
            row = conn.execute(
                "SELECT language, level, max_words, min_length "
                "FROM user_vocabulary_settings WHERE user_id = ?",
                (user_id,)
            ).fetchone()
            return dict(row)

    # =========================================================================
    # Words & Synonyms
    # =========================================================================

    def upsert_word(
        self, user_id: str, word: str, meaning: Optional[str], occurrences: int
    ) -> str:
        """
        Add occurrences to the user's word, creating it if needed. Returns the word id.

        Matching is case-insensitive; the first stored casing is kept.
        """
        with self._transaction(f"upsert word '{word}'") as conn:
            conn.execute("""
                INSERT INTO user_words (id, user_id, word, word_key, meaning, count, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(user_id, word_key) DO UPDATE SET
                    count = user_words.count + excluded.count,
                    meaning = COALESCE(excluded.meaning, user_words.meaning)
            """, (str(uuid.uuid4()), user_id, word, word_key(word), meaning, occurrences, self._now_iso()))
            row = conn.execute(
                "SELECT id FROM user_words WHERE user_id = ? AND word_key = ?",
                (user_id, word_key(word))
            ).fetchone()
            return row["id"]

    def insert_synonym_if_absent(self, word_id: str, synonym: str) -> None:
        with self._transaction(f"insert synonym '{synonym}'") as conn:
            conn.execute(
                "INSERT OR IGNORE INTO word_synonyms (user_word_id, synonym) VALUES (?, ?)",
                (word_id, synonym)
            )

    def get_user_words(self, user_id: str) -> List[UserWord]:
        """All of a user's words with synonyms, newest first."""
        with self._transaction("read user words") as conn:
            rows = conn.execute("""
                SELECT id, word, meaning, count FROM user_words
                WHERE user_id = ?
                ORDER BY created_at DESC, rowid DESC
            """, (user_id,)).fetchall()

            words = []
            for row in rows:
                synonyms = conn.execute(
                    "SELECT synonym FROM word_synonyms WHERE user_word_id = ? ORDER BY id",
                    (row["id"],)
                ).fetchall()
                words.append(UserWord(
                    id=row["id"],
                    word=row["word"],
                    meaning=row["meaning"],
                    count=row["count"],
                    synonyms=[s["synonym"] for s in synonyms],
                ))
            return words

    # =========================================================================
    # Vocabulary Lists
    # =========================================================================

    def append_list_snapshot(
        self, user_id: str, title: Optional[str], entries: Sequence[VocabularyEntry]
    ) -> str:
        list_id = str(uuid.uuid4())
        entries_json = json.dumps([entry.to_dict() for entry in entries], ensure_ascii=False)
        with self._transaction("save vocabulary list") as conn:
            conn.execute(
                "INSERT INTO vocabulary_lists (id, user_id, title, entries, created_at) "
                "VALUES (?, ?, ?, ?, ?)",
                (list_id, user_id, title, entries_json, self._now_iso())
            )
        return list_id

    def get_vocabulary_lists(self, user_id: str) -> List[VocabularyList]:
        with self._transaction("read vocabulary lists") as conn:
            rows = conn.execute("""
                SELECT id, title, entries, created_at FROM vocabulary_lists
                WHERE user_id = ?
                ORDER BY created_at DESC, rowid DESC
            """, (user_id,)).fetchall()

        return [
            VocabularyList(
                id=row["id"],
                title=row["title"],
                entries=json.loads(row["entries"]),
                created_at=row["created_at"],
            )
            for row in rows
        ]

    # =========================================================================
    # Music History
    # =========================================================================

    def insert_music_history(
        self,
        user_id: str,
        video_id: str,
        title: str,
        capture_time: Optional[int] = None,
        origin: Optional[str] = None
    ) -> MusicHistoryRecord:
        record = MusicHistoryRecord(
            id=str(uuid.uuid4()),
            video_id=video_id,
            title=title,
            capture_time=capture_time,
            origin=origin or DEFAULT_HISTORY_ORIGIN,
            created_at=self._now_iso(),
        )
        with self._transaction("insert music history") as conn:
            conn.execute("""
                INSERT INTO user_music_history (id, user_id, video_id, title, capture_time, origin, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
            """, (record.id, user_id, record.video_id, record.title,
                  record.capture_time, record.origin, record.created_at))
        return record

    def get_music_history(self, user_id: str) -> List[MusicHistoryRecord]:
        with self._transaction("read music history") as conn:
            rows = conn.execute("""
                SELECT id, video_id, title, capture_time, origin, created_at
                FROM user_music_history
                WHERE user_id = ?
                ORDER BY created_at DESC, rowid DESC
            """, (user_id,)).fetchall()
        return [MusicHistoryRecord(**dict(row)) for row in rows]
