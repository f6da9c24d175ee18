from pydantic_settings import BaseSettings
from pathlib import Path


class Settings(BaseSettings):
    # Azure OpenAI (an empty key means the extraction model is unconfigured)
    azure_openai_api_key: str = ""
    azure_openai_endpoint: str = ""
    openai_api_version: str = "2024-08-01-preview"

    # LLM settings
    llm_model: str = "gpt-4o-mini"
    llm_temperature: float = 0.3

    # Genius lyrics source
    genius_api_key: str = ""
    genius_api_url: str = "https://api.genius.com"
    http_timeout: float = 30.0

    # Storage
    database_path: str = "data/songvocab.db"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


def get_settings() -> Settings:
    return Settings()


def ensure_directories():
    """Create the directory holding the SQLite database if it doesn't exist"""
    settings = get_settings()
    Path(settings.database_path).parent.mkdir(parents=True, exist_ok=True)
