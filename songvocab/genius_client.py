"""Resolve a song query to lyrics through the Genius API and song pages"""
from typing import List, Optional

import httpx
from bs4 import BeautifulSoup
from loguru import logger
from pydantic import BaseModel, ValidationError

from songvocab.config.settings import Settings, get_settings
from songvocab.exceptions import ConfigurationError, FetchFailedError, NotFoundError
from songvocab.models import SongLyrics, SongSearchResult


class _Artist(BaseModel):
    name: str


class _SongResult(BaseModel):
    id: int
    title: str
    primary_artist: _Artist
    song_art_image_url: str = ""
    url: str


class _Hit(BaseModel):
    result: _SongResult


class _Meta(BaseModel):
    status: int


class _SearchBody(BaseModel):
    hits: List[_Hit]


class _SearchResponse(BaseModel):
    meta: _Meta
    response: _SearchBody


class _SongBody(BaseModel):
    song: _SongResult


class _SongResponse(BaseModel):
    meta: _Meta
    response: _SongBody


def extract_lyrics_from_html(html: str) -> str:
    """
    Pull lyrics out of a Genius song page.

    Genius stores lyrics in div elements with data-lyrics-container="true".
    Line breaks become newlines, other markup is dropped, and the parser
    decodes each character reference exactly once.
    """
    soup = BeautifulSoup(html, "html.parser")

    parts = []
    for container in soup.find_all(attrs={"data-lyrics-container": "true"}):
        for br in container.find_all("br"):
            br.replace_with("\n")
        text = container.get_text().strip()
        if text:
            parts.append(text)

    if not parts:
        raise FetchFailedError("Could not extract lyrics from page")

    return "\n\n".join(parts)


class GeniusClient:
    """Search Genius and fetch lyrics for the first hit"""

    HEADERS = {
        "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
    }

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.settings = settings or get_settings()
        self.base_url = self.settings.genius_api_url.rstrip("/")
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.settings.http_timeout,
            headers=self.HEADERS,
            transport=self.transport,
            follow_redirects=True
        )

    def _auth_headers(self) -> dict:
        if not self.settings.genius_api_key:
            raise ConfigurationError("Genius API key is not configured")
        return {"Authorization": f"Bearer {self.settings.genius_api_key}"}

    async def search_songs(self, query: str) -> List[SongSearchResult]:
        """Search for songs by name and/or artist, in Genius' order"""
        headers = self._auth_headers()

        try:
            async with self._client() as client:
                response = await client.get(
                    f"{self.base_url}/search", params={"q": query}, headers=headers
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise FetchFailedError(
                f"Genius search failed: {e}", details={"query": query}
            ) from e

        try:
            data = _SearchResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise FetchFailedError(
                f"Unexpected Genius search response: {e}", details={"query": query}
            ) from e

        if data.meta.status != 200:
            raise FetchFailedError(
                f"Genius API returned status: {data.meta.status}", details={"query": query}
            )

        return [
            SongSearchResult(
                id=hit.result.id,
                title=hit.result.title,
                artist=hit.result.primary_artist.name,
                album_art=hit.result.song_art_image_url,
                url=hit.result.url,
            )
            for hit in data.response.hits
        ]

    async def get_lyrics_by_id(self, song_id: int) -> SongLyrics:
        """Fetch song details, then scrape the song page for lyrics"""
        headers = self._auth_headers()

        try:
            async with self._client() as client:
                song_response = await client.get(f"{self.base_url}/songs/{song_id}", headers=headers)
                song_response.raise_for_status()

                try:
                    song_data = _SongResponse.model_validate(song_response.json())
                except (ValueError, ValidationError) as e:
                    raise FetchFailedError(
                        f"Unexpected Genius song response: {e}", details={"song_id": song_id}
                    ) from e

                if song_data.meta.status != 200:
                    raise FetchFailedError(
                        f"Genius API returned status: {song_data.meta.status}",
                        details={"song_id": song_id}
                    )

                song = song_data.response.song
                page_response = await client.get(song.url)
                page_response.raise_for_status()
        except httpx.HTTPError as e:
            raise FetchFailedError(
                f"Failed to fetch Genius song {song_id}: {e}", details={"song_id": song_id}
            ) from e

        lyrics = extract_lyrics_from_html(page_response.text)

        return SongLyrics(
            id=song.id,
            title=song.title,
            artist=song.primary_artist.name,
            lyrics=lyrics,
        )

    async def resolve(self, query: str) -> SongLyrics:
        """
        Resolve a free-text query to lyrics using the first search hit.

        Raises NotFoundError on zero hits and FetchFailedError when the
        lyrics cannot be retrieved.
        """
        hits = await self.search_songs(query)
        if not hits:
            raise NotFoundError("No song found for the given title", details={"query": query})

        first = hits[0]
        logger.info(f"🎵 Found: {first.title} - {first.artist}")
        return await self.get_lyrics_by_id(first.id)
