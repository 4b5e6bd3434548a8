"""
Vita - Centralized Configuration
=================================
Uses ``pydantic-settings`` (``BaseSettings``) to load *all* configuration
from environment variables and the project-level ``.env`` file.

Security
--------
- ``GOOGLE_API_KEY`` and ``LANCEDB_API_KEY`` are typed as ``SecretStr`` and
  have **no default value**.  The raw values are never exposed in repr,
  logs, or tracebacks.
- ``LANCEDB_URI`` and ``LANCEDB_TABLE_NAME`` are also required: the chat
  loop cannot do anything useful without knowing which index to search.

Fail-fast
---------
``get_settings()`` converts Pydantic's ``ValidationError`` into a
``ConfigurationError`` listing every missing or invalid field, so the
entry scripts can refuse to start with one clear message.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from vita.src.core.errors import ConfigurationError


class Settings(BaseSettings):
    """
    Application-wide settings.

    Every field is loaded from environment variables (or ``.env``).
    Fields *without* a default are **required**.

    Attributes
    ----------
    GOOGLE_API_KEY : SecretStr
        API key for Google AI Studio (Gemini chat + embeddings).  **Required.**
    LANCEDB_API_KEY : SecretStr
        API key for LanceDB Cloud.  **Required.**  Ignored by LanceDB when
        ``LANCEDB_URI`` is a local directory.
    LANCEDB_URI : str
        ``db://<project>`` for LanceDB Cloud, or a local directory.  **Required.**
    LANCEDB_TABLE_NAME : str
        Name of the vector table (the "index").  **Required.**
    ENV : Literal["dev", "prod"]
        Environment mode controlling logging verbosity.
    CONTEXT_SOURCE : str
        Metadata ``source`` value that retrieval is restricted to.
    HISTORY_WINDOW : int
        Number of most recent turns rendered into the prompt; 0 keeps all.
    """

    # ── Environment Mode ───────────────────────────────────────────────
    ENV: Literal["dev", "prod"] = "prod"

    # ── API Keys (REQUIRED, no default) ────────────────────────────────
    GOOGLE_API_KEY: SecretStr
    LANCEDB_API_KEY: SecretStr

    # ── LanceDB (REQUIRED, no default) ─────────────────────────────────
    LANCEDB_URI: str
    LANCEDB_TABLE_NAME: str
    LANCEDB_REGION: str = "us-east-1"

    # ── Model Configuration ────────────────────────────────────────────
    EMBEDDING_MODEL: str = "gemini-embedding-001"
    LLM_MODEL: str = "gemini-2.0-flash"
    LLM_MAX_OUTPUT_TOKENS: int = 8192
    LLM_TEMPERATURE: float = 0.7

    # ── Retrieval ──────────────────────────────────────────────────────
    CONTEXT_SOURCE: str = "./client.txt"
    CONTEXT_FILE_PATH: Path = Path("./context/client.txt")
    SEARCH_RESULTS_LIMIT: int = 1

    # ── Conversation ───────────────────────────────────────────────────
    SESSION_ID: str = "1"
    HISTORY_WINDOW: int = 0

    # ── Ingestion Parameters ───────────────────────────────────────────
    CHUNK_SIZE: int = 1000
    CHUNK_OVERLAP: int = 200

    # ── Validators ─────────────────────────────────────────────────────

    @field_validator("LANCEDB_URI", "LANCEDB_TABLE_NAME", "CONTEXT_SOURCE")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()


    @field_validator("LLM_MAX_OUTPUT_TOKENS", "SEARCH_RESULTS_LIMIT")
    @classmethod
    def _positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"must be ≥ 1, got {v}")
        return v


    @field_validator("LLM_TEMPERATURE")
    @classmethod
    def _temperature_range(cls, v: float) -> float:
        if not 0.0 <= v <= 2.0:
            raise ValueError(f"LLM_TEMPERATURE must be 0.0–2.0, got {v}")
        return v


    @field_validator("HISTORY_WINDOW")
    @classmethod
    def _window_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"HISTORY_WINDOW must be ≥ 0, got {v}")
        return v


    @field_validator("CHUNK_SIZE")
    @classmethod
    def _chunk_size_min(cls, v: int) -> int:
        if v < 50:
            raise ValueError(f"CHUNK_SIZE must be ≥ 50, got {v}")
        return v

    # ── Pydantic Settings Configuration ────────────────────────────────
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


def load_settings(**overrides: object) -> Settings:
    """
    Build a ``Settings`` instance, raising ``ConfigurationError`` on failure.

    Keyword overrides are passed straight to the model (handy in tests,
    e.g. ``load_settings(_env_file=None)``).
    """
    try:
        return Settings(**overrides)  # type: ignore[arg-type]
    except ValidationError as exc:
        problems = []
        for err in exc.errors():
            field = ".".join(str(part) for part in err["loc"]) or "<settings>"
            reason = "missing required environment variable" if err["type"] == "missing" else err["msg"]
            problems.append(f"{field}: {reason}")
        raise ConfigurationError("Invalid configuration: " + "; ".join(problems)) from exc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings singleton (loaded on first call)."""
    return load_settings()
