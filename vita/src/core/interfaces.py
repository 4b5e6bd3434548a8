"""
Vita - Capability Interfaces
=============================
The chat pipeline depends on these protocols, never on a concrete SDK.
Each has a hosted implementation (``vita.src.providers.gemini``,
``vita.src.database.vector_store``) and an in-memory one
(``vita.src.providers.memory``) for offline runs and tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Protocol, Sequence, runtime_checkable

Role = Literal["system", "user", "assistant"]
MetadataFilter = dict[str, str]


@dataclass(frozen=True)
class PromptMessage:
    """One ``(role, content)`` entry of the message list sent to the chat model."""

    role: Role
    content: str


@dataclass(frozen=True)
class SearchHit:
    """A vector search match, higher ``score`` = more similar."""

    text: str
    score: float
    metadata: dict[str, str | int] = field(default_factory=dict)


@runtime_checkable
class Embedder(Protocol):
    """Anything that can turn text into a fixed-size embedding vector."""

    def embed(self, text: str) -> list[float]: ...

    def embed_batch(self, texts: list[str]) -> list[list[float]]: ...


@runtime_checkable
class VectorSearcher(Protocol):
    """Nearest-neighbour lookup over stored documents."""

    def search(self, query_vector: Sequence[float], k: int = 1, filter_dict: MetadataFilter | None = None) -> list[SearchHit]: ...


@runtime_checkable
class Completer(Protocol):
    """Chat completion: ordered messages in, assistant text out."""

    def complete(self, messages: Sequence[PromptMessage]) -> str: ...
