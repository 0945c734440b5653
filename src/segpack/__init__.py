"""SegPack - styled, paginated rich text and its binary wire codec."""

from segpack.builder import SegmentsBuilder
from segpack.codec import (
    DecodeError,
    EmptyUnionError,
    MalformedError,
    TruncatedError,
    decode,
    encode,
)
from segpack.models import (
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
    "encode",
    "decode",
    "DecodeError",
    "TruncatedError",
    "MalformedError",
    "EmptyUnionError",
    "SegmentsBuilder",
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
