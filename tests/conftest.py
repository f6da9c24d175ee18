"""Test configuration and fixtures"""

import pytest

from songvocab.config.settings import Settings
from songvocab.database import Database
from songvocab.models import VocabularyItems


SAMPLE_LYRICS = "We shine bright like a diamond. Forever and ever."


class FakeModelClient:
    """Stands in for LLMProcessor: canned stream chunks and structured result"""

    def __init__(
        self,
        chunks=None,
        stream_error=None,
        structured=None,
        structured_error=None,
        configured=True
    ):
        self.chunks = chunks or []
        self.stream_error = stream_error
        self.structured = structured if structured is not None else VocabularyItems()
        self.structured_error = structured_error
        self.is_configured = configured
        self.stream_prompts = []
        self.structured_prompts = []

    async def stream_text(self, prompt):
        self.stream_prompts.append(prompt)
        if self.stream_error:
            raise self.stream_error
        for chunk in self.chunks:
            yield chunk

    async def generate_structured(self, prompt, schema):
        self.structured_prompts.append(prompt)
        if self.structured_error:
            raise self.structured_error
        return self.structured


@pytest.fixture
def settings():
    """Settings that ignore any local .env file"""
    return Settings(
        _env_file=None,
        azure_openai_api_key="test-key",
        azure_openai_endpoint="https://example.openai.azure.com",
        genius_api_key="test-genius-key",
        genius_api_url="https://api.genius.com",
    )


@pytest.fixture
def db(tmp_path):
    """Fresh SQLite database per test"""
    database = Database(tmp_path / "songvocab.db")
    yield database
    database.close()


@pytest.fixture
def sample_lyrics():
    return SAMPLE_LYRICS
