"""
Vita - In-Memory Adapters
==========================
Network-free implementations of the capability interfaces, for offline
demos and tests.  They do no similarity math: results are whatever was
loaded, filtered by metadata.

``StaticEmbedder``
    Returns one fixed vector for every text and records what it was asked.
``StaticVectorStore``
    Holds pre-scored ``SearchHit`` records; ``search`` applies the metadata
    filter, orders by score and truncates to *k*.
``EchoCompleter``
    Replies with the system message verbatim, so a test can see exactly
    which context reached the model.
"""

from __future__ import annotations

from typing import Sequence

from vita.src.core.interfaces import MetadataFilter, PromptMessage, SearchHit


class StaticEmbedder:
    def __init__(self, vector: Sequence[float] = (0.1, 0.2, 0.3)) -> None:
        self._vector = [float(x) for x in vector]
        self.calls: list[str] = []


    def embed(self, text: str) -> list[float]:
        if not text.strip():
            raise ValueError("Cannot embed empty text.")
        self.calls.append(text)
        return list(self._vector)


    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        return [self.embed(text) for text in texts]


class StaticVectorStore:
    def __init__(self, hits: Sequence[SearchHit] = ()) -> None:
        self._hits = list(hits)
        self.queries: list[tuple[list[float], int, MetadataFilter | None]] = []


    def add(self, text: str, score: float = 1.0, **metadata: str | int) -> None:
        self._hits.append(SearchHit(text=text, score=score, metadata=dict(metadata)))


    def search(self, query_vector: Sequence[float], k: int = 1, filter_dict: MetadataFilter | None = None) -> list[SearchHit]:
        self.queries.append((list(query_vector), k, filter_dict))
        matches = [
            hit for hit in self._hits
            if not filter_dict or all(str(hit.metadata.get(key)) == value for key, value in filter_dict.items())
        ]
        matches.sort(key=lambda hit: hit.score, reverse=True)
        return matches[:k]


class EchoCompleter:
    def __init__(self) -> None:
        self.calls: list[list[PromptMessage]] = []


    def complete(self, messages: Sequence[PromptMessage]) -> str:
        self.calls.append(list(messages))
        system = next((m.content for m in messages if m.role == "system"), "")
        return system
