"""
Vita - Vector Table Setup & Ingestion Script
=============================================
CLI entry point that orchestrates:
    1. Validate settings (fail-fast).
    2. Initialise ``VitaVectorStore`` (optionally drop the existing table).
    3. Ingest ``CONTEXT_FILE_PATH`` tagged with ``CONTEXT_SOURCE``.
    4. Print a structured execution summary.

Flags:
    --drop       Drop the table before ingesting.
    --drop-only  Drop the table and exit immediately (no ingestion).
    --file PATH  Ingest PATH instead of ``CONTEXT_FILE_PATH``.

Usage:
    vita-setup-db
    python -m vita.scripts.setup_db --drop
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path
from typing import TYPE_CHECKING

from vita.src.core.errors import VitaError
from vita.src.utils.logger import apply_env, get_logger

if TYPE_CHECKING:
    from vita.config.settings import Settings

logger = get_logger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="setup_db", description="Vita: initialise the vector table and ingest the context document.")
    parser.add_argument("--drop", action="store_true", default=False, help="Drop the vector table before ingesting.")
    parser.add_argument("--drop-only", action="store_true", default=False, help="Drop the vector table and exit (no ingestion).")
    parser.add_argument("--file", type=Path, default=None, help="Document to ingest (defaults to CONTEXT_FILE_PATH).")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    t_start = time.perf_counter()

    # ── 0. Load settings ───────────────────────────────────────────────
    from vita.config.settings import get_settings

    try:
        settings = get_settings()
    except VitaError as exc:
        print("\n[FATAL] Configuration error, check your environment or .env file:\n")
        print(f"  {exc}")
        print()
        sys.exit(1)

    apply_env(settings.ENV)
    _print_header(settings)

    from vita.src.core.ingestor import IngestionPipeline
    from vita.src.database.vector_store import VitaVectorStore
    from vita.src.providers.gemini import GeminiEmbedder

    try:
        # ── 1. Store ───────────────────────────────────────────────────
        store = VitaVectorStore.from_settings(settings)
        if args.drop or args.drop_only:
            logger.warning("Dropping table '%s' as requested.", settings.LANCEDB_TABLE_NAME)
            store.drop_table()
            if args.drop_only:
                _print_footer(settings.CONTEXT_SOURCE, 0, store.count(), time.perf_counter() - t_start)
                return

        # ── 2. Ingest ──────────────────────────────────────────────────
        embedder = GeminiEmbedder.from_settings(settings)
        pipeline = IngestionPipeline(store, embedder, chunk_size=settings.CHUNK_SIZE, chunk_overlap=settings.CHUNK_OVERLAP)
        summary = pipeline.ingest_file(args.file or settings.CONTEXT_FILE_PATH, source=settings.CONTEXT_SOURCE)
    except FileNotFoundError as exc:
        logger.error("%s", exc)
        sys.exit(1)
    except VitaError as exc:
        logger.error("Ingestion failed: %s", exc)
        sys.exit(1)

    # ── 3. Summary ─────────────────────────────────────────────────────
    _print_footer(summary["source"], summary["chunks"], store.count(), time.perf_counter() - t_start)


# ── Pretty-print helpers ──────────────────────────────────────────────

def _mask(secret: str) -> str:
    return f"****{secret[-4:]}" if len(secret) > 4 else "****"


def _print_header(settings: Settings) -> None:
    print()
    print("=" * 60)
    print("  VITA  Vector Table Setup & Ingestion")
    print("=" * 60)
    print(f"  Environment  : {settings.ENV}")
    print(f"  Embedding    : {settings.EMBEDDING_MODEL}")
    print(f"  LanceDB URI  : {settings.LANCEDB_URI}")
    print(f"  Table        : {settings.LANCEDB_TABLE_NAME}")
    print(f"  Context file : {settings.CONTEXT_FILE_PATH}")
    print(f"  Source tag   : {settings.CONTEXT_SOURCE}")
    print(f"  Chunk size   : {settings.CHUNK_SIZE} chars")
    print(f"  Google key   : {_mask(settings.GOOGLE_API_KEY.get_secret_value())}")
    print(f"  LanceDB key  : {_mask(settings.LANCEDB_API_KEY.get_secret_value())}")
    print("=" * 60)
    print()


def _print_footer(source: str, chunks: int, total_rows: int, elapsed: float) -> None:
    print()
    print("=" * 60)
    print("  EXECUTION SUMMARY")
    print("-" * 60)
    print(f"  Source               : {source}")
    print(f"  Chunks stored        : {chunks}")
    print(f"  Table rows (total)   : {total_rows}")
    print(f"  Total elapsed        : {elapsed:>8.2f}s")
    print("=" * 60)
    print()


if __name__ == "__main__":
    main()
