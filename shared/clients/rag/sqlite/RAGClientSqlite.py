import asyncio
import json
import os
import sqlite3
import threading
from typing import Callable, TypeVar

from shared.clients.rag.RAGClientInterface import RAGClientInterface, cosine_similarity
from shared.clients.rag.models.VectorPoint import VectorPoint
from shared.helper.HelperConfig import HelperConfig
from shared.models.search import SearchResultItem

T = TypeVar("T")


class RAGClientSqlite(RAGClientInterface):
    """
    File-backed index engine.

    Vectors are stored as JSON arrays next to their chunk payload and scored in
    Python at query time. All sqlite calls run in a worker thread through one
    shared connection guarded by a lock.
    """

    def __init__(self, helper_config: HelperConfig, location: str, transport=None):
        super().__init__(helper_config=helper_config, location=location)
        self._conn: sqlite3.Connection | None = None
        self._conn_lock = threading.Lock()

    ##########################################
    ################ GETTER ##################
    ##########################################

    def _get_engine_name(self) -> str:
        return "Sqlite"

    ##########################################
    ############### INTERNAL #################
    ##########################################

    def _connect(self) -> sqlite3.Connection:
        if self._conn is None:
            if self._location != ":memory:":
                directory = os.path.dirname(os.path.abspath(self._location))
                os.makedirs(directory, exist_ok=True)
            self._conn = sqlite3.connect(self._location, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS chunks (
                    source_id TEXT NOT NULL,
                    sequence_index INTEGER NOT NULL,
                    chunk_text TEXT NOT NULL,
                    start_offset INTEGER NOT NULL,
                    end_offset INTEGER NOT NULL,
                    vector TEXT NOT NULL,
                    PRIMARY KEY (source_id, sequence_index)
                )
            """)
            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS index_meta (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
            """)
            self._conn.commit()
        return self._conn

    async def _run(self, fn: Callable[[sqlite3.Connection], T]) -> T:
        def locked() -> T:
            with self._conn_lock:
                return fn(self._connect())
        return await asyncio.to_thread(locked)

    @staticmethod
    def _read_dimension(conn: sqlite3.Connection) -> int | None:
        row = conn.execute("SELECT value FROM index_meta WHERE key = 'dimension'").fetchone()
        return int(row["value"]) if row else None

    @staticmethod
    def _write_dimension(conn: sqlite3.Connection, dimension: int) -> None:
        conn.execute(
            "INSERT OR REPLACE INTO index_meta (key, value) VALUES ('dimension', ?)",
            (str(dimension),),
        )

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_open(self, dimension: int | None = None) -> int | None:
        def op(conn: sqlite3.Connection) -> int | None:
            stored = self._read_dimension(conn)
            if stored is None and dimension:
                self._write_dimension(conn, dimension)
                conn.commit()
            return stored
        stored = await self._run(op)
        self.logging.debug("Opened sqlite index at %s (stored dimension: %s)", self._location, stored)
        return stored

    async def do_replace_source(self, source_id: str, points: list[VectorPoint], vectors: list[list[float]]) -> None:
        if len(points) != len(vectors):
            raise ValueError(f"Got {len(points)} points but {len(vectors)} vectors for '{source_id}'.")

        def op(conn: sqlite3.Connection) -> None:
            # one transaction: readers never see a half-replaced source
            with conn:
                conn.execute("DELETE FROM chunks WHERE source_id = ?", (source_id,))
                conn.executemany(
                    """
                    INSERT INTO chunks (source_id, sequence_index, chunk_text, start_offset, end_offset, vector)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    [
                        (p.source_id, p.sequence_index, p.chunk_text, p.start_offset, p.end_offset, json.dumps(v))
                        for p, v in zip(points, vectors)
                    ],
                )
                if vectors and self._read_dimension(conn) is None:
                    self._write_dimension(conn, len(vectors[0]))
        await self._run(op)

    async def do_delete_source(self, source_id: str) -> None:
        def op(conn: sqlite3.Connection) -> None:
            with conn:
                conn.execute("DELETE FROM chunks WHERE source_id = ?", (source_id,))
        await self._run(op)

    async def do_clear(self, reset_dimension: bool = False) -> None:
        def op(conn: sqlite3.Connection) -> None:
            with conn:
                conn.execute("DELETE FROM chunks")
                if reset_dimension:
                    conn.execute("DELETE FROM index_meta WHERE key = 'dimension'")
        await self._run(op)

    async def do_search(self, vector: list[float], limit: int) -> list[SearchResultItem]:
        def op(conn: sqlite3.Connection) -> list[sqlite3.Row]:
            return conn.execute(
                "SELECT source_id, sequence_index, chunk_text, start_offset, end_offset, vector FROM chunks"
            ).fetchall()
        rows = await self._run(op)
        scored: list[SearchResultItem] = []
        for row in rows:
            point = VectorPoint(
                source_id=row["source_id"],
                sequence_index=row["sequence_index"],
                chunk_text=row["chunk_text"],
                start_offset=row["start_offset"],
                end_offset=row["end_offset"],
            )
            scored.append(point.to_result(cosine_similarity(vector, json.loads(row["vector"]))))
        scored.sort(key=lambda item: (-item.score, item.source_id, item.sequence_index))
        return scored[:limit]

    async def do_count(self) -> int:
        def op(conn: sqlite3.Connection) -> int:
            return conn.execute("SELECT COUNT(*) AS n FROM chunks").fetchone()["n"]
        return await self._run(op)

    async def close(self) -> None:
        def op() -> None:
            with self._conn_lock:
                if self._conn is not None:
                    self._conn.close()
                    self._conn = None
        await asyncio.to_thread(op)
