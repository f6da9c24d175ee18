"""Sequence prompt, model call, parsing and fallbacks into one extraction"""
from typing import AsyncIterator, List, Protocol, Type

from loguru import logger

from songvocab.exceptions import ConfigurationError
from songvocab.fallback import fallback_vocabulary
from songvocab.models import VocabularyEntry, VocabularyItems, VocabularyOptions
from songvocab.prompts import build_prompt
from songvocab.response_parser import parse_vocabulary_response
from songvocab.utils import clean_strings, word_key


class ModelClient(Protocol):
    """What the extractor needs from the model; LLMProcessor satisfies it."""

    @property
    def is_configured(self) -> bool: ...

    def stream_text(self, prompt: str) -> AsyncIterator[str]: ...

    async def generate_structured(self, prompt: str, schema: Type[VocabularyItems]) -> VocabularyItems: ...


class VocabularyExtractor:
    """
    Extract vocabulary from lyrics with three stages, each tried once:

    1. Stream free text from the model, drain it, parse the JSON array.
    2. Ask for structured output with the same prompt. Occurrence counts are
       not computed here; duplicates are dropped and every entry gets
       occurrences=1.
    3. Local fallback extraction, which cannot fail.
    """

    def __init__(self, model_client: ModelClient):
        self.model_client = model_client

    async def extract(self, lyrics: str, options: VocabularyOptions) -> List[VocabularyEntry]:
        if not self.model_client.is_configured:
            raise ConfigurationError("Extraction model API key is not configured")

        prompt = build_prompt(lyrics, options)

        try:
            return await self._extract_streaming(prompt, options)
        except Exception as e:
            logger.warning(f"⚠ Streaming extraction failed, trying structured output: {e}")

        try:
            return await self._extract_structured(prompt, options)
        except Exception as e:
            logger.error(f"⚠ Structured extraction failed, using local fallback: {e}")

        entries = fallback_vocabulary(lyrics, options.max_words, options.min_length)
        logger.info(f"Fallback extracted {len(entries)} words")
        return entries

    async def _extract_streaming(self, prompt: str, options: VocabularyOptions) -> List[VocabularyEntry]:
        chunks = []
        async for chunk in self.model_client.stream_text(prompt):
            chunks.append(chunk)
        full_text = "".join(chunks)

        entries = parse_vocabulary_response(full_text, options.max_words, options.min_length)
        logger.success(f"✓ Model extracted {len(entries)} words")
        return entries

    async def _extract_structured(self, prompt: str, options: VocabularyOptions) -> List[VocabularyEntry]:
        result = await self.model_client.generate_structured(prompt, VocabularyItems)

        entries = []
        seen = set()
        for item in result.items:
            word = item.word.strip() if isinstance(item.word, str) else ""
            if not word or len(word) < options.min_length:
                continue
            key = word_key(word)
            if key in seen:
                continue
            if len(entries) >= options.max_words:
                break
            seen.add(key)
            entries.append(VocabularyEntry(
                word=word,
                score=item.score,
                meaning=item.meaning,
                example=item.example,
                synonyms=clean_strings(item.synonyms or []) or None,
                occurrences=1,
            ))

        logger.success(f"✓ Structured output returned {len(entries)} words")
        return entries
