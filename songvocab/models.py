"""Pydantic models for vocabulary extraction and storage"""
from typing import List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field


VocabularyLanguage = Literal["en", "ko"]
VocabularyLevel = Literal["beginner", "intermediate", "advanced"]


class VocabularyEntry(BaseModel):
    """One extracted word candidate"""
    model_config = ConfigDict(frozen=True)

    word: str = Field(min_length=1)
    score: Optional[Union[int, float]] = Field(default=None, description="Importance rank 1-10")
    meaning: Optional[str] = Field(default=None, description="Short gloss in Korean")
    example: Optional[str] = Field(default=None, description="Short usage phrase")
    synonyms: Optional[List[str]] = None
    occurrences: int = Field(default=1, ge=1)
    # Attached by the pipeline so snapshots remember where a word came from
    song_title: Optional[str] = None
    song_artist: Optional[str] = None

    def to_dict(self) -> dict:
        return self.model_dump(exclude_none=True)


class VocabularyOptions(BaseModel):
    """Extraction policy for one user"""
    language: VocabularyLanguage = "en"
    level: VocabularyLevel = "intermediate"
    max_words: int = Field(default=30, ge=1, le=200)
    min_length: int = Field(default=2, ge=1, le=20)


class VocabularyItem(BaseModel):
    """Single word as requested from the model in structured-output mode"""
    word: str = Field(description="The vocabulary word as it appears in the lyrics")
    score: Optional[float] = Field(default=None, description="Importance for memorization, 1-10")
    meaning: Optional[str] = Field(default=None, description="Short definition in Korean")
    example: Optional[str] = Field(default=None, description="Short phrase from or inspired by the lyrics")
    synonyms: Optional[List[str]] = Field(default=None, description="1-5 synonyms in the same language")


class VocabularyItems(BaseModel):
    """Wrapper object for structured output, since the schema root must be an object."""
    items: List[VocabularyItem] = Field(default_factory=list)


class SongSearchResult(BaseModel):
    """One Genius search hit"""
    id: int
    title: str
    artist: str
    album_art: str
    url: str


class SongLyrics(BaseModel):
    """Song metadata together with its plain-text lyrics"""
    id: int
    title: str
    artist: str
    lyrics: str


class SongInfo(BaseModel):
    title: str
    artist: str


class GenerationResult(BaseModel):
    """What generate_vocabulary hands back to the caller"""
    entries: List[VocabularyEntry]
    song: SongInfo
    saved: bool = False


class UserWord(BaseModel):
    """Aggregated word row for a user, with its synonym set"""
    id: str
    word: str
    meaning: Optional[str] = None
    count: int
    synonyms: List[str] = Field(default_factory=list)


class VocabularyList(BaseModel):
    """Immutable snapshot of one extraction result"""
    id: str
    title: Optional[str] = None
    entries: List[VocabularyEntry]
    created_at: str


class MusicHistoryRecord(BaseModel):
    id: str
    video_id: str
    title: Optional[str] = None
    capture_time: Optional[int] = None
    origin: Optional[str] = None
    created_at: str
