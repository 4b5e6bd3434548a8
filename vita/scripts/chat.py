"""
Vita - Console Chat
====================
CLI entry point that orchestrates:
    1. Load settings (fail-fast on any missing variable).
    2. Initialise the Gemini embedder + completer and the LanceDB store.
    3. Run the ``ChatLoop`` on stdin/stdout until EOF, a quit command,
       Ctrl-C, or a provider failure.

Usage:
    vita-chat
    python -m vita.scripts.chat
"""

from __future__ import annotations

import sys

from vita.config.settings import Settings, get_settings
from vita.src.core.chat_loop import ChatLoop
from vita.src.core.errors import VitaError
from vita.src.utils.logger import apply_env, get_logger

logger = get_logger(__name__)


def build_loop(settings: Settings) -> ChatLoop:
    """
    Wire the hosted adapters into a ready-to-run ``ChatLoop``.

    Raises ``ConfigurationError`` if the vector table is missing, before any
    prompt is shown.
    """
    from vita.src.core.history import SessionRegistry
    from vita.src.core.retriever import ContextRetriever
    from vita.src.core.runner import ChatRunner
    from vita.src.database.vector_store import VitaVectorStore
    from vita.src.providers.gemini import GeminiCompleter, GeminiEmbedder

    store = VitaVectorStore.from_settings(settings)
    store.require_table()
    embedder = GeminiEmbedder.from_settings(settings)
    completer = GeminiCompleter.from_settings(settings)

    retriever = ContextRetriever(embedder, store, source=settings.CONTEXT_SOURCE, k=settings.SEARCH_RESULTS_LIMIT)
    runner = ChatRunner(completer, SessionRegistry(), history_window=settings.HISTORY_WINDOW)
    return ChatLoop(retriever, runner, session_id=settings.SESSION_ID)


def main() -> None:
    # ── 0. Load settings + .env ────────────────────────────────────────
    try:
        settings = get_settings()
    except VitaError as exc:
        print("\n[FATAL] Configuration error, check your environment or .env file:\n", file=sys.stderr)
        print(f"  {exc}\n", file=sys.stderr)
        sys.exit(1)

    apply_env(settings.ENV)
    logger.info("Settings loaded (env=%s, llm=%s, table=%s).", settings.ENV, settings.LLM_MODEL, settings.LANCEDB_TABLE_NAME)

    # ── 1. Initialise adapters ─────────────────────────────────────────
    try:
        loop = build_loop(settings)
    except VitaError as exc:
        logger.error("Startup failed: %s", exc)
        sys.exit(1)

    # ── 2. Chat ────────────────────────────────────────────────────────
    sys.exit(loop.run())


if __name__ == "__main__":
    main()
