"""
Vita - IngestionPipeline
=========================
Loads the context document(s) into the vector table so the chat loop
has something to retrieve.

    read → clean → chunk → embed → store

Key design decisions:
    • **Dependency Injection** – receives a ``VitaVectorStore``-like store
      and an ``Embedder``.
    • **Recursive splitting** – ``RecursiveCharacterTextSplitter`` with
      ``CHUNK_SIZE`` / ``CHUNK_OVERLAP``.
    • **Source replacement** – re-ingesting a source first deletes its old
      rows, so a second run never duplicates chunks.
    • **Source tagging** – every chunk carries ``source`` (the value the
      chat retriever filters on) and its ``chunk_index``.

Usage:
    from vita.src.core.ingestor import IngestionPipeline
    pipeline = IngestionPipeline(store, embedder, chunk_size=1000, chunk_overlap=200)
    result   = pipeline.ingest_file(Path("./context/client.txt"), source="./client.txt")
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Any, Protocol

from langchain_text_splitters import RecursiveCharacterTextSplitter

from vita.src.core.interfaces import Embedder
from vita.src.utils.logger import get_logger
from vita.src.utils.text_utils import clean_text, source_label

logger = get_logger(__name__)

_SUPPORTED_EXTENSIONS = {".txt", ".md"}
_EMBED_BATCH_SIZE = 64


class DocumentSink(Protocol):
    def add_documents(self, texts: list[str], vectors: list[list[float]], metadatas: list[dict[str, str | int]]) -> int: ...

    def delete_documents(self, filter_dict: dict[str, str]) -> int: ...


class IngestionPipeline:
    """
    Parameters
    ----------
    store
        Destination for embedded chunks (``add_documents``).
    embedder
        Produces one vector per chunk via ``embed_batch``.
    chunk_size, chunk_overlap
        Splitter parameters in characters.
    """

    def __init__(self, store: DocumentSink, embedder: Embedder, chunk_size: int = 1000, chunk_overlap: int = 200) -> None:
        self._store = store
        self._embedder = embedder
        self._splitter = RecursiveCharacterTextSplitter(chunk_size=chunk_size, chunk_overlap=chunk_overlap, separators=["\n\n", "\n", ". ", " ", ""])

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC ENTRY POINTS
    # ══════════════════════════════════════════════════════════════════

    def ingest_file(self, filepath: Path, source: str | None = None) -> dict[str, Any]:
        """
        Ingest one file.

        Parameters
        ----------
        filepath
            The document to load.
        source
            ``source`` metadata for its chunks; defaults to ``./<filename>``.

        Returns
        -------
        dict
            ``source``, ``chunks`` and ``elapsed_seconds``.

        Raises
        ------
        FileNotFoundError
            If *filepath* does not exist.
        """
        t_start = time.perf_counter()
        source = source or source_label(filepath)

        if not filepath.is_file():
            raise FileNotFoundError(f"Context file not found: {filepath}")

        logger.info("Processing file: %s (source=%s)", filepath, source)
        raw_text = self._read_file(filepath)
        chunks = self.chunk(raw_text)
        if not chunks:
            logger.warning("Skipping empty file: %s", filepath.name)
            return self._summary(source, 0, time.perf_counter() - t_start)

        added = self._embed_and_store(chunks, source)
        elapsed = time.perf_counter() - t_start
        logger.info("File '%s' complete: %d chunk(s) in %.2fs.", filepath.name, added, elapsed)
        return self._summary(source, added, elapsed)


    def ingest_directory(self, directory: Path) -> list[dict[str, Any]]:
        """Ingest every supported file in *directory*, each under its own ``./<filename>`` source."""
        files = sorted(f for f in directory.iterdir() if f.suffix.lower() in _SUPPORTED_EXTENSIONS)
        if not files:
            logger.warning("No supported files found in %s", directory)
        return [self.ingest_file(f) for f in files]


    def chunk(self, raw_text: str) -> list[str]:
        """Clean *raw_text* and split it into non-empty chunks."""
        cleaned = clean_text(raw_text)
        if not cleaned:
            return []
        return [c.strip() for c in self._splitter.split_text(cleaned) if c.strip()]

    # ══════════════════════════════════════════════════════════════════
    #  INTERNALS
    # ══════════════════════════════════════════════════════════════════

    def _embed_and_store(self, chunks: list[str], source: str) -> int:
        vectors: list[list[float]] = []
        for i in range(0, len(chunks), _EMBED_BATCH_SIZE):
            batch = chunks[i : i + _EMBED_BATCH_SIZE]
            vectors.extend(self._embedder.embed_batch(batch))
            logger.debug("Embedded chunks %d–%d.", i, i + len(batch) - 1)

        metadatas: list[dict[str, str | int]] = [{"source": source, "chunk_index": idx} for idx in range(len(chunks))]
        replaced = self._store.delete_documents({"source": source})
        if replaced:
            logger.info("Replacing %d previously stored chunk(s) for source '%s'.", replaced, source)
        return self._store.add_documents(chunks, vectors, metadatas)


    @staticmethod
    def _read_file(filepath: Path) -> str:
        try:
            return filepath.read_text(encoding="utf-8")
        except UnicodeDecodeError:
            return filepath.read_text(encoding="latin-1")


    @staticmethod
    def _summary(source: str, chunks: int, elapsed: float) -> dict[str, Any]:
        return {
            "source": source,
            "chunks": chunks,
            "elapsed_seconds": round(elapsed, 2),
        }
