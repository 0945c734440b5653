"""Protocol for receivers of converted book content."""

from typing import Protocol, runtime_checkable

from segpack.models import ChunkStyle, SegmentStyle


@runtime_checkable
class PieceSink(Protocol):
    """What a converter drives while walking a source page.

    Text arrives with its full style; links, page references and search
    words attach to whatever paragraph is current.
    """

    def chunk(self, text: str, chunk_style: ChunkStyle, segment_style: SegmentStyle) -> None:
        ...

    def link(self, url: str, text: str) -> None:
        ...

    def pageref(self, page: int) -> None:
        ...

    def searchword(self, word: str) -> None:
        ...
