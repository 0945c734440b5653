"""Core data models for styled, paginated rich text."""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Union

import numpy as np

UINT32_MAX = 0xFFFFFFFF


def to_float32(value: float) -> float:
    """Round a Python float to the nearest single-precision value.

    NaN and infinities pass through; magnitudes beyond float32 range become inf.
    """
    with np.errstate(over="ignore"):
        return float(np.float32(value))


class Alignment(IntEnum):
    """Paragraph alignment. ``JUSTIFIED`` is the default."""

    JUSTIFIED = 0
    CENTER = 1
    RIGHT = 2
    UNJUSTIFIED = 3


@dataclass(frozen=True)
class ChunkStyle:
    """Character-level style for a run of text.

    ``size`` is a relative multiplier; 0.0 means inherit the default size.
    """

    emphasis: bool = False
    strong: bool = False
    superscript: bool = False
    subscript: bool = False
    strikethrough: bool = False
    underline: bool = False
    wide_spacing: bool = False
    colour_gray: bool = False
    size: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "size", to_float32(self.size))

    @property
    def is_default(self) -> bool:
        return self == _DEFAULT_CHUNK_STYLE


@dataclass(frozen=True)
class SegmentStyle:
    """Paragraph-level style shared by every piece of a segment."""

    left_padding: float = 0.0
    alignment: Alignment = Alignment.JUSTIFIED

    def __post_init__(self) -> None:
        object.__setattr__(self, "left_padding", to_float32(self.left_padding))
        object.__setattr__(self, "alignment", Alignment(self.alignment))

    @property
    def is_default(self) -> bool:
        return self == _DEFAULT_SEGMENT_STYLE


_DEFAULT_CHUNK_STYLE = ChunkStyle()
_DEFAULT_SEGMENT_STYLE = SegmentStyle()


@dataclass(frozen=True)
class Chunk:
    """A run of literal text with one character style."""

    text: str = ""
    style: ChunkStyle = field(default_factory=ChunkStyle)


@dataclass(frozen=True)
class Link:
    """A hyperlink. An empty url is kept as-is."""

    url: str = ""
    text: str = ""


@dataclass(frozen=True)
class PageRef:
    """Anchor pointing at another page number."""

    ref: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.ref <= UINT32_MAX:
            raise ValueError(f"page ref out of range: {self.ref}")


@dataclass(frozen=True)
class SearchWord:
    """Invisible search anchor at this position."""

    word: str = ""


# A piece is exactly one of these classes
Piece = Union[Chunk, Link, PageRef, SearchWord]
PIECE_TYPES = (Chunk, Link, PageRef, SearchWord)


@dataclass(frozen=True)
class Segment:
    """Ordered pieces sharing one paragraph style."""

    style: SegmentStyle = field(default_factory=SegmentStyle)
    pieces: tuple[Piece, ...] = ()

    def __post_init__(self) -> None:
        pieces = tuple(self.pieces)
        for piece in pieces:
            if not isinstance(piece, PIECE_TYPES):
                raise TypeError(f"not a piece: {piece!r}")
        object.__setattr__(self, "pieces", pieces)


@dataclass(frozen=True)
class Segments:
    """A document: segments in reading order."""

    segments: tuple[Segment, ...] = ()

    def __post_init__(self) -> None:
        segments = tuple(self.segments)
        for segment in segments:
            if not isinstance(segment, Segment):
                raise TypeError(f"not a segment: {segment!r}")
        object.__setattr__(self, "segments", segments)

    def __len__(self) -> int:
        return len(self.segments)


@dataclass(frozen=True)
class Page:
    """One page of a book, as stored in a pack."""

    number: int
    segments: Segments = field(default_factory=Segments)
