"""
Vita - Context Retrieval
=========================
Turns a user query into a context string: one embedding call, one
filtered vector search, hit texts joined with newlines.

No caching, batching or deduplication: every call hits both providers.
An empty search result is the only graceful case and yields ``""``.
"""

from __future__ import annotations

import time

from vita.src.core.interfaces import Embedder, MetadataFilter, VectorSearcher
from vita.src.utils.logger import get_logger

logger = get_logger(__name__)


class ContextRetriever:
    """
    Parameters
    ----------
    embedder
        Produces the query vector.
    store
        Searched with ``k`` and ``{"source": source}``.
    source
        The single document source retrieval is restricted to.
    k
        Number of hits to request (1 in the standard configuration).
    """

    __slots__ = ("_embedder", "_store", "_filter", "_k")

    def __init__(self, embedder: Embedder, store: VectorSearcher, source: str, k: int = 1) -> None:
        self._embedder = embedder
        self._store = store
        self._filter: MetadataFilter = {"source": source}
        self._k = k


    def retrieve_context(self, query: str) -> str:
        t_start = time.perf_counter()

        query_vector = self._embedder.embed(query)
        hits = self._store.search(query_vector, k=self._k, filter_dict=self._filter)

        if not hits:
            logger.info("[RETRIEVE] No document matched %s, continuing with empty context.", self._filter)
            return ""

        context = "\n".join(hit.text for hit in hits)
        elapsed_ms = (time.perf_counter() - t_start) * 1000
        logger.info("[RETRIEVE] %d hit(s), top score=%.3f, %d chars in %.1fms", len(hits), hits[0].score, len(context), elapsed_ms)
        return context
