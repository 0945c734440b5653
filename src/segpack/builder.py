"""Producer-side accumulation of pieces into a Segments document."""

from segpack.models import (
    Chunk,
    ChunkStyle,
    Link,
    PageRef,
    Piece,
    SearchWord,
    Segment,
    Segments,
    SegmentStyle,
)


class SegmentsBuilder:
    """Collect converter output into segments.

    - A chunk whose paragraph style differs from the current segment's
      starts a new segment.
    - Consecutive chunks with the same character style are merged.
    - Links, page refs and search words join the current segment.

    Implements the PieceSink protocol.
    """

    def __init__(self) -> None:
        self._plain: list[str] = []
        self._segments: list[tuple[SegmentStyle, list[Piece]]] = [(SegmentStyle(), [])]

    @property
    def plain(self) -> str:
        """Plain text of every chunk pushed so far."""
        return "".join(self._plain)

    def _push_samestyle(self, piece: Piece) -> None:
        pieces = self._segments[-1][1]
        if isinstance(piece, Chunk) and pieces:
            last = pieces[-1]
            if isinstance(last, Chunk) and last.style == piece.style:
                pieces[-1] = Chunk(text=last.text + piece.text, style=last.style)
                return
        pieces.append(piece)

    def chunk(self, text: str, chunk_style: ChunkStyle, segment_style: SegmentStyle) -> None:
        self._plain.append(text)
        piece = Chunk(text=text, style=chunk_style)
        if self._segments[-1][0] == segment_style:
            self._push_samestyle(piece)
        else:
            self._segments.append((segment_style, [piece]))

    def link(self, url: str, text: str) -> None:
        self._push_samestyle(Link(url=url, text=text))

    def pageref(self, page: int) -> None:
        self._push_samestyle(PageRef(ref=page))

    def searchword(self, word: str) -> None:
        self._push_samestyle(SearchWord(word=word))

    def build(self) -> Segments:
        """Snapshot the document. Segments without pieces are left out."""
        return Segments(
            segments=tuple(
                Segment(style=style, pieces=tuple(pieces))
                for style, pieces in self._segments
                if pieces
            )
        )
