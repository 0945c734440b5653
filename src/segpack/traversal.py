"""Read-only walks over a document for renderers and indexers."""

from dataclasses import dataclass
from typing import Iterator

from segpack.models import Chunk, Link, PageRef, Piece, SearchWord, Segments, SegmentStyle


@dataclass(frozen=True)
class PiecePosition:
    """A piece with its address and paragraph style."""

    segment_index: int
    piece_index: int
    segment_style: SegmentStyle
    piece: Piece


@dataclass(frozen=True)
class SearchHit:
    """A search word and where it sits in the document."""

    segment_index: int
    piece_index: int
    word: str


def iter_pieces(doc: Segments) -> Iterator[PiecePosition]:
    """Yield every piece in reading order."""
    for segment_index, segment in enumerate(doc.segments):
        for piece_index, piece in enumerate(segment.pieces):
            yield PiecePosition(segment_index, piece_index, segment.style, piece)


def search_words(doc: Segments) -> list[SearchHit]:
    return [
        SearchHit(pos.segment_index, pos.piece_index, pos.piece.word)
        for pos in iter_pieces(doc)
        if isinstance(pos.piece, SearchWord)
    ]


def page_refs(doc: Segments) -> list[int]:
    return [pos.piece.ref for pos in iter_pieces(doc) if isinstance(pos.piece, PageRef)]


def plain_text(doc: Segments) -> str:
    """Visible text: chunk text and link display text, segments split by newlines."""
    parts = []
    for segment in doc.segments:
        parts.append(
            "".join(
                p.text for p in segment.pieces if isinstance(p, (Chunk, Link))
            )
        )
    return "\n".join(parts)
