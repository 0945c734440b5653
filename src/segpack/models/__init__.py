"""Data models for SegPack."""

from segpack.models.document import (
    Alignment,
    Chunk,
    ChunkStyle,
    Link,
    Page,
    PageRef,
    Piece,
    SearchWord,
    Segment,
    Segments,
    SegmentStyle,
)

__all__ = [
    "Alignment",
    "Chunk",
    "ChunkStyle",
    "Link",
    "Page",
    "PageRef",
    "Piece",
    "SearchWord",
    "Segment",
    "Segments",
    "SegmentStyle",
]
