"""
Vita - VitaVectorStore
========================
OOP wrapper around LanceDB providing a clean interface for:
  • Table creation with a strict PyArrow schema
  • Document insertion (pre-computed vectors + metadata)
  • Vector similarity search with metadata filtering
  • Per-source deletion, so re-ingesting a document replaces its rows

Design decisions:
  • **Singleton DB connection**: ``_get_connection()`` caches the
    ``lancedb.DBConnection`` per URI so every store shares one client.
  • **Hosted or local**: a ``db://`` URI connects to LanceDB Cloud with
    ``api_key`` + ``region``; anything else is treated as a local directory.
  • **Vectors in, vectors out**: the store never embeds.  Callers pass
    vectors produced by an ``Embedder``, keeping the remote calls separate.
  • **Pre-filtering**: the metadata WHERE clause is applied *before* the
    nearest-neighbour limit, so ``k=1`` never returns a non-matching row.
  • **Lazy table creation**: the vector column is a fixed-size list whose
    width comes from the first inserted vector.

Usage:
    from vita.src.database.vector_store import VitaVectorStore

    store = VitaVectorStore.from_settings(settings)
    store.add_documents(texts=[...], vectors=[...], metadatas=[...])
    hits = store.search(query_vector, k=1, filter_dict={"source": "./client.txt"})
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Sequence

import lancedb
import pyarrow as pa

from vita.src.core.errors import ConfigurationError, ProviderError
from vita.src.core.interfaces import MetadataFilter, SearchHit
from vita.src.utils.logger import get_logger

if TYPE_CHECKING:
    from vita.config.settings import Settings

logger = get_logger(__name__)

# ── Type Aliases ──────────────────────────────────────────────────────
DocumentMetadata = dict[str, str | int]
DocumentRecord = dict[str, str | int | list[float]]

_PROVIDER = "lancedb"
_METADATA_COLUMNS = ("source", "chunk_index")
_DB_LOCK = threading.Lock()
_db_connection_cache: dict[str, lancedb.DBConnection] = {}


def build_schema(dimension: int) -> pa.Schema:
    """Return the table schema for vectors of width *dimension*."""
    return pa.schema([
        pa.field("vector", pa.list_(pa.float32(), dimension)),
        pa.field("text", pa.utf8()),
        pa.field("source", pa.utf8()),
        pa.field("chunk_index", pa.int32()),
    ])


def build_where(filter_dict: MetadataFilter) -> str:
    """Render an equality filter as a SQL WHERE clause (single quotes escaped)."""
    clauses = []
    for key, value in filter_dict.items():
        if not key.isidentifier():
            raise ValueError(f"Invalid filter column: {key!r}")
        escaped = str(value).replace("'", "''")
        clauses.append(f"{key} = '{escaped}'")
    return " AND ".join(clauses)


def _get_connection(uri: str, api_key: str | None = None, region: str | None = None) -> lancedb.DBConnection:
    """
    Return a **singleton** ``lancedb.DBConnection`` for *uri*.

    Thread-safe via ``_DB_LOCK``.
    """
    if uri not in _db_connection_cache:
        with _DB_LOCK:
            if uri not in _db_connection_cache:
                logger.info("Opening new LanceDB connection: %s", uri)
                if uri.startswith("db://"):
                    _db_connection_cache[uri] = lancedb.connect(uri, api_key=api_key, region=region)
                else:
                    _db_connection_cache[uri] = lancedb.connect(uri)
    return _db_connection_cache[uri]


class VitaVectorStore:
    """
    High-level abstraction over a LanceDB vector table.

    Parameters
    ----------
    uri
        ``db://<project>`` (LanceDB Cloud) or a local directory.
    table_name
        Name of the vector table.
    api_key, region
        LanceDB Cloud credentials; unused for local directories.
    """

    __slots__ = ("_uri", "_table_name", "db", "table")

    def __init__(self, uri: str, table_name: str, api_key: str | None = None, region: str | None = None) -> None:
        self._uri = uri
        self._table_name = table_name
        self.db: lancedb.DBConnection | None = None
        self.table: lancedb.table.Table | None = None
        self._connect(api_key, region)


    @classmethod
    def from_settings(cls, settings: Settings) -> VitaVectorStore:
        return cls(uri=settings.LANCEDB_URI, table_name=settings.LANCEDB_TABLE_NAME, api_key=settings.LANCEDB_API_KEY.get_secret_value(), region=settings.LANCEDB_REGION)


    def _connect(self, api_key: str | None, region: str | None) -> None:
        """Open (or re-use) the connection and the table, if it exists."""
        try:
            self.db = _get_connection(self._uri, api_key, region)
        except Exception as exc:
            logger.error("Could not connect to LanceDB at %s: %s", self._uri, exc)
            raise ProviderError(_PROVIDER, f"connection to {self._uri} failed: {exc}") from exc

        try:
            self.table = self.db.open_table(self._table_name)
            logger.info("Opened existing table '%s'.", self._table_name)
        except (ValueError, FileNotFoundError):
            # Unknown table name.
            logger.warning("Table '%s' does not exist yet.", self._table_name)


    def require_table(self) -> None:
        """Raise ``ConfigurationError`` unless the table exists (startup check for readers)."""
        if self.table is None:
            raise ConfigurationError(f"Vector table '{self._table_name}' does not exist at {self._uri}. Run the setup_db script first.")


    def add_documents(self, texts: list[str], vectors: list[list[float]], metadatas: list[DocumentMetadata]) -> int:
        """
        Persist pre-embedded text chunks with their metadata.

        Creates the table on first insert, sized from ``vectors[0]``.

        Returns
        -------
        int
            Number of rows added.

        Raises
        ------
        ValueError
            If the three lists have mismatched lengths.
        ProviderError
            If LanceDB rejects the write.
        """
        if not len(texts) == len(vectors) == len(metadatas):
            raise ValueError(f"Length mismatch: {len(texts)} texts, {len(vectors)} vectors, {len(metadatas)} metadatas.")
        if not texts:
            return 0

        records: list[DocumentRecord] = [
            {"vector": [float(x) for x in vec], "text": txt, "source": str(meta.get("source", "unknown")), "chunk_index": int(meta.get("chunk_index", 0))}
            for txt, vec, meta in zip(texts, vectors, metadatas)
        ]

        try:
            if self.table is None:
                self.table = self.db.create_table(self._table_name, schema=build_schema(len(vectors[0])))  # type: ignore[union-attr]
                logger.info("Created new table '%s' (dim=%d).", self._table_name, len(vectors[0]))
            self.table.add(records)
        except Exception as exc:
            logger.error("Failed to write records to LanceDB: %s", exc)
            raise ProviderError(_PROVIDER, f"write to '{self._table_name}' failed: {exc}") from exc

        logger.info("Added %d chunk(s) to table '%s'.", len(records), self._table_name)
        return len(records)


    def delete_documents(self, filter_dict: MetadataFilter) -> int:
        """
        Remove every row matching *filter_dict* (used to replace a source on re-ingestion).

        Returns
        -------
        int
            Number of rows removed; 0 when the table does not exist yet.
        """
        if self.table is None:
            return 0
        where_str = build_where(filter_dict)
        try:
            removed = self.table.count_rows(where_str)
            if removed:
                self.table.delete(where_str)
        except Exception as exc:
            logger.error("Failed to delete records from LanceDB: %s", exc)
            raise ProviderError(_PROVIDER, f"delete on '{self._table_name}' failed: {exc}") from exc

        logger.info("Removed %d existing row(s) where %s.", removed, where_str)
        return removed


    def search(self, query_vector: Sequence[float], k: int = 1, filter_dict: MetadataFilter | None = None) -> list[SearchHit]:
        """
        Nearest-neighbour search with optional equality filters.

        Returns
        -------
        list[SearchHit]
            At most *k* hits, most similar first; ``[]`` when nothing matches.
        """
        self.require_table()

        try:
            query = self.table.search(list(query_vector)).distance_type("cosine").limit(k)
            if filter_dict:
                where_str = build_where(filter_dict)
                query = query.where(where_str, prefilter=True)
                logger.debug("Searching with filter: %s (k=%d)", where_str, k)
            rows = query.to_list()
        except Exception as exc:
            logger.error("Vector search failed: %s", exc)
            raise ProviderError(_PROVIDER, f"search on '{self._table_name}' failed: {exc}") from exc

        hits = [
            SearchHit(text=str(row.get("text", "")), score=1.0 - float(row.get("_distance", 1.0)), metadata={col: row[col] for col in _METADATA_COLUMNS if col in row})
            for row in rows
        ]
        hits.sort(key=lambda hit: hit.score, reverse=True)
        logger.info("Search returned %d hit(s).", len(hits))
        return hits[:k]


    def count(self) -> int:
        """Return the total number of rows in the table."""
        if self.table is None:
            return 0
        return self.table.count_rows()


    def drop_table(self) -> None:
        """Drop the vector table (used before a clean re-ingestion)."""
        if self.db is None or self.table is None:
            logger.warning("Table '%s' does not exist; nothing to drop.", self._table_name)
            return
        try:
            self.db.drop_table(self._table_name)
        except Exception as exc:
            raise ProviderError(_PROVIDER, f"drop of '{self._table_name}' failed: {exc}") from exc
        self.table = None
        logger.info("Dropped table '%s'.", self._table_name)


    def __repr__(self) -> str:
        return f"VitaVectorStore(uri='{self._uri}', table='{self._table_name}', rows={self.count()})"
