"""
Vita - Gemini Adapters
=======================
Hosted implementations of ``Embedder`` and ``Completer`` backed by
``langchain-google-genai``.

Both wrap every SDK failure in ``ProviderError`` and never retry: the
chat loop decides what a failure means.

Usage:
    embedder  = GeminiEmbedder.from_settings(settings)
    completer = GeminiCompleter.from_settings(settings)
    vector    = embedder.embed("What should I eat before a workout?")
    answer    = completer.complete(messages)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_core.output_parsers import StrOutputParser
from langchain_google_genai import ChatGoogleGenerativeAI, GoogleGenerativeAIEmbeddings

from vita.src.core.errors import ProviderError
from vita.src.core.interfaces import PromptMessage
from vita.src.utils.logger import get_logger

if TYPE_CHECKING:
    from vita.config.settings import Settings

logger = get_logger(__name__)

_MESSAGE_TYPES: dict[str, type[BaseMessage]] = {
    "system": SystemMessage,
    "user": HumanMessage,
    "assistant": AIMessage,
}


def to_langchain_messages(messages: Sequence[PromptMessage]) -> list[BaseMessage]:
    """Map ``PromptMessage`` roles onto LangChain message classes."""
    converted: list[BaseMessage] = []
    for message in messages:
        message_cls = _MESSAGE_TYPES.get(message.role)
        if message_cls is None:
            raise ValueError(f"Unsupported message role: {message.role!r}")
        converted.append(message_cls(content=message.content))
    return converted


class GeminiEmbedder:
    """Text → vector via ``GoogleGenerativeAIEmbeddings``."""

    __slots__ = ("_model", "_client")

    def __init__(self, model: str, api_key: str) -> None:
        self._model = model
        self._client = GoogleGenerativeAIEmbeddings(model=model, google_api_key=api_key)
        logger.info("Embedding model initialised: %s", model)


    @classmethod
    def from_settings(cls, settings: Settings) -> GeminiEmbedder:
        return cls(model=settings.EMBEDDING_MODEL, api_key=settings.GOOGLE_API_KEY.get_secret_value())


    def embed(self, text: str) -> list[float]:
        if not text.strip():
            raise ValueError("Cannot embed empty text.")
        try:
            vector = self._client.embed_query(text)
        except Exception as exc:
            logger.error("Embedding call failed (%s): %s", self._model, exc)
            raise ProviderError("gemini-embeddings", str(exc)) from exc
        if not vector:
            raise ProviderError("gemini-embeddings", "empty embedding returned")
        return list(vector)


    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        if any(not t.strip() for t in texts):
            raise ValueError("Cannot embed empty text.")
        try:
            vectors = self._client.embed_documents(texts)
        except Exception as exc:
            logger.error("Batch embedding of %d text(s) failed (%s): %s", len(texts), self._model, exc)
            raise ProviderError("gemini-embeddings", str(exc)) from exc
        if len(vectors) != len(texts):
            raise ProviderError("gemini-embeddings", f"expected {len(texts)} vectors, got {len(vectors)}")
        return [list(v) for v in vectors]


class GeminiCompleter:
    """Messages → text via ``ChatGoogleGenerativeAI`` piped into ``StrOutputParser``."""

    __slots__ = ("_model", "_chain")

    def __init__(self, model: str, api_key: str, max_output_tokens: int, temperature: float) -> None:
        self._model = model
        llm = ChatGoogleGenerativeAI(model=model, google_api_key=api_key, max_output_tokens=max_output_tokens, temperature=temperature)
        self._chain = llm | StrOutputParser()
        logger.info("LLM initialised: %s (max_output_tokens=%d, temperature=%.1f)", model, max_output_tokens, temperature)


    @classmethod
    def from_settings(cls, settings: Settings) -> GeminiCompleter:
        return cls(model=settings.LLM_MODEL, api_key=settings.GOOGLE_API_KEY.get_secret_value(), max_output_tokens=settings.LLM_MAX_OUTPUT_TOKENS, temperature=settings.LLM_TEMPERATURE)


    def complete(self, messages: Sequence[PromptMessage]) -> str:
        lc_messages = to_langchain_messages(messages)
        try:
            answer = self._chain.invoke(lc_messages)
        except Exception as exc:
            logger.error("Chat completion failed (%s): %s", self._model, exc)
            raise ProviderError("gemini-chat", str(exc)) from exc
        logger.debug("LLM returned %d chars.", len(answer))
        return answer
