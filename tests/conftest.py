from __future__ import annotations

import pytest

from vita.src.core.errors import ProviderError
from vita.src.core.history import SessionRegistry
from vita.src.core.retriever import ContextRetriever
from vita.src.core.runner import ChatRunner
from vita.src.providers.memory import EchoCompleter, StaticEmbedder, StaticVectorStore

SOURCE = "./client.txt"

REQUIRED_ENV = {
    "GOOGLE_API_KEY": "test-google-key-1234",
    "LANCEDB_API_KEY": "test-lancedb-key-5678",
    "LANCEDB_URI": "db://vita-test",
    "LANCEDB_TABLE_NAME": "vita_docs",
}


class FailingCompleter:
    def __init__(self) -> None:
        self.calls = 0

    def complete(self, messages):
        self.calls += 1
        raise ProviderError("gemini-chat", "quota exceeded")


class ScriptedCompleter:
    """Returns canned replies in order."""

    def __init__(self, *replies: str) -> None:
        self._replies = list(replies)
        self.calls: list = []

    def complete(self, messages):
        self.calls.append(list(messages))
        return self._replies.pop(0)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every Vita variable from the environment."""
    for name in list(REQUIRED_ENV) + ["ENV", "LANCEDB_REGION", "HISTORY_WINDOW", "LLM_MAX_OUTPUT_TOKENS", "LLM_TEMPERATURE", "CONTEXT_SOURCE", "SEARCH_RESULTS_LIMIT", "SESSION_ID", "CHUNK_SIZE"]:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def full_env(clean_env):
    for name, value in REQUIRED_ENV.items():
        clean_env.setenv(name, value)
    return clean_env


@pytest.fixture
def embedder():
    return StaticEmbedder()


@pytest.fixture
def store():
    return StaticVectorStore()


@pytest.fixture
def echo():
    return EchoCompleter()


@pytest.fixture
def registry():
    return SessionRegistry()


@pytest.fixture
def retriever(embedder, store):
    return ContextRetriever(embedder, store, source=SOURCE, k=1)


@pytest.fixture
def runner(echo, registry):
    return ChatRunner(echo, registry)
