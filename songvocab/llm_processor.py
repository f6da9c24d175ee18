"""Talk to the extraction model through LangChain"""
from typing import AsyncIterator, Optional, Type, TypeVar

from pydantic import BaseModel
from langchain_openai import AzureChatOpenAI
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.prompts import ChatPromptTemplate

from songvocab.config.settings import Settings, get_settings


SchemaT = TypeVar("SchemaT", bound=BaseModel)

SYSTEM_MESSAGE = (
    "You are an expert vocabulary teacher for Korean learners. "
    "You read song lyrics and answer with machine-readable JSON only."
)


def _chunk_text(content) -> str:
    """Flatten a message chunk's content into plain text"""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and isinstance(part.get("text"), str):
                parts.append(part["text"])
        return "".join(parts)
    return ""


class LLMProcessor:
    """
    Text-in/text-out client for the extraction model.

    Offers a streaming free-text call and a schema-constrained call. The
    chat model is built lazily so an unconfigured processor can still be
    constructed and asked whether it is usable.
    """

    def __init__(self, settings: Optional[Settings] = None, llm: Optional[BaseChatModel] = None):
        self.settings = settings or get_settings()
        self._llm = llm
        self.prompt = ChatPromptTemplate.from_messages([
            ("system", SYSTEM_MESSAGE),
            ("human", "{prompt}"),
        ])

    @property
    def is_configured(self) -> bool:
        return self._llm is not None or bool(self.settings.azure_openai_api_key)

    @property
    def llm(self) -> BaseChatModel:
        if self._llm is None:
            self._llm = AzureChatOpenAI(
                model=self.settings.llm_model,
                api_key=self.settings.azure_openai_api_key,
                azure_endpoint=self.settings.azure_openai_endpoint,
                api_version=self.settings.openai_api_version,
                temperature=self.settings.llm_temperature
            )
        return self._llm

    async def stream_text(self, prompt: str) -> AsyncIterator[str]:
        """Yield text chunks as the model produces them"""
        chain = self.prompt | self.llm
        async for chunk in chain.astream({"prompt": prompt}):
            text = _chunk_text(getattr(chunk, "content", chunk))
            if text:
                yield text

    async def generate_structured(self, prompt: str, schema: Type[SchemaT]) -> SchemaT:
        """Ask the model for one object conforming to the schema"""
        structured_llm = self.llm.with_structured_output(schema)
        chain = self.prompt | structured_llm

        result = await chain.ainvoke({"prompt": prompt})
        if isinstance(result, schema):
            return result
        return schema.model_validate(result)
