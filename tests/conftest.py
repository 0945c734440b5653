"""
Shared test fixtures for the SegPack test suite.

Provides: sample documents, wire-building helpers, temporary page packs
"""

import pytest

from segpack.codec.wire import encode_varint
from segpack.models import (
    Alignment,
    Chunk,
    ChunkStyle,
    Link,
    PageRef,
    SearchWord,
    Segment,
    Segments,
    SegmentStyle,
)
from segpack.storage import SegPackStore


def wire_field(number: int, body: bytes) -> bytes:
    """Length-delimited field, built by hand for decoder tests."""
    return encode_varint(number << 3 | 2) + encode_varint(len(body)) + body


def wire_varint(number: int, value: int) -> bytes:
    return encode_varint(number << 3) + encode_varint(value)


@pytest.fixture
def hello_doc() -> Segments:
    """One centred segment: a strong "Hello" chunk and a search word."""
    return Segments(
        segments=(
            Segment(
                style=SegmentStyle(left_padding=2.0, alignment=Alignment.CENTER),
                pieces=(
                    Chunk(text="Hello", style=ChunkStyle(strong=True)),
                    SearchWord(word="hello"),
                ),
            ),
        )
    )


@pytest.fixture
def book_doc() -> Segments:
    """Several segments covering every piece kind and style field."""
    return Segments(
        segments=(
            Segment(
                style=SegmentStyle(),
                pieces=(
                    Chunk(text="Chapter One", style=ChunkStyle(strong=True, size=1.33)),
                    SearchWord(word="chapter"),
                ),
            ),
            Segment(
                style=SegmentStyle(left_padding=0.5, alignment=Alignment.UNJUSTIFIED),
                pieces=(
                    Chunk(text="It was a ", style=ChunkStyle()),
                    Chunk(text="dark", style=ChunkStyle(emphasis=True, underline=True)),
                    Chunk(text=" night", style=ChunkStyle(colour_gray=True, wide_spacing=True)),
                    Chunk(text="1", style=ChunkStyle(superscript=True)),
                    Chunk(text="2", style=ChunkStyle(subscript=True, strikethrough=True)),
                    PageRef(ref=42),
                    SearchWord(word="night"),
                ),
            ),
            Segment(
                style=SegmentStyle(alignment=Alignment.RIGHT),
                pieces=(
                    Link(url="https://example.org/notes", text="see notes"),
                    Link(url="", text="dead link"),
                    Chunk(text="", style=ChunkStyle()),
                ),
            ),
        )
    )


@pytest.fixture
def pack(tmp_path) -> SegPackStore:
    store = SegPackStore(tmp_path / "book.segpack")
    store.initialize()
    return store
