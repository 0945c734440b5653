"""SQLite-backed storage for .segpack files."""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from segpack.codec import decode, encode
from segpack.models import Page
from segpack.storage.schema import SCHEMA
from segpack.traversal import plain_text, search_words

logger = logging.getLogger(__name__)


class SegPackStore:
    """SQLite-backed storage for .segpack files."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Context manager for database connections."""
        conn = sqlite3.connect(self.path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def initialize(self) -> None:
        """Create schema if not exists."""
        with self.connection() as conn:
            conn.executescript(SCHEMA)

    def store_page(self, page: Page) -> None:
        """Store a page, replacing any earlier version and its search words."""
        blob = encode(page.segments)
        with self.connection() as conn:
            conn.execute("DELETE FROM search_words WHERE page_number = ?", (page.number,))
            conn.execute(
                """INSERT OR REPLACE INTO pages (number, segments, plain_text, size_bytes)
                   VALUES (?, ?, ?, ?)""",
                (page.number, blob, plain_text(page.segments), len(blob)),
            )
            conn.executemany(
                """INSERT INTO search_words (page_number, segment_index, piece_index, word)
                   VALUES (?, ?, ?, ?)""",
                [
                    (page.number, hit.segment_index, hit.piece_index, hit.word)
                    for hit in search_words(page.segments)
                ],
            )
        logger.debug(f"Stored page {page.number} ({len(blob)} bytes)")

    def load_page(self, number: int) -> Optional[Page]:
        """Load and decode a page, or None if absent.

        Raises:
            DecodeError: the stored blob is corrupt
        """
        with self.connection() as conn:
            row = conn.execute(
                "SELECT segments FROM pages WHERE number = ?", (number,)
            ).fetchone()
        if row is None:
            return None
        return Page(number=number, segments=decode(row["segments"]))

    def set_metadata(self, key: str, value: str) -> None:
        """Store a metadata key-value pair."""
        with self.connection() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO metadata (key, value) VALUES (?, ?)",
                (key, value),
            )

    def get_metadata(self, key: str) -> Optional[str]:
        """Retrieve a metadata value by key."""
        with self.connection() as conn:
            row = conn.execute(
                "SELECT value FROM metadata WHERE key = ?", (key,)
            ).fetchone()
            return row["value"] if row else None

    # Query methods for MCP tools

    def list_pages(self) -> list[dict]:
        """List stored pages with their sizes, in page order."""
        with self.connection() as conn:
            cursor = conn.execute(
                """SELECT p.number, p.size_bytes, COUNT(w.id) AS search_words
                   FROM pages p LEFT JOIN search_words w ON w.page_number = p.number
                   GROUP BY p.number ORDER BY p.number"""
            )
            return [dict(row) for row in cursor]

    def read_text(self, number: int) -> Optional[str]:
        """Plain text of a page (for read tool)."""
        with self.connection() as conn:
            row = conn.execute(
                "SELECT plain_text FROM pages WHERE number = ?", (number,)
            ).fetchone()
            return row["plain_text"] if row else None

    def find_word(self, word: str, limit: int = 50) -> list[dict]:
        """Find search word anchors, case-insensitively, in document order."""
        with self.connection() as conn:
            cursor = conn.execute(
                """SELECT page_number, segment_index, piece_index, word
                   FROM search_words WHERE word = ? COLLATE NOCASE
                   ORDER BY page_number, segment_index, piece_index
                   LIMIT ?""",
                (word, limit),
            )
            return [dict(row) for row in cursor]
