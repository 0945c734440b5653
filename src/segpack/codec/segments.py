"""Binary encoding of Segments documents.

Field numbers (message: number name):

- ChunkStyle: 1-8 boolean flags, 9 size (float)
- SegmentStyle: 1 left_padding (float), 2 alignment (enum)
- Chunk: 1 style, 2 text
- Link: 1 url, 2 text
- PageRef: 1 ref (uint32)
- SearchWord: 1 word
- Piece: oneof 1 chunk, 2 link, 3 page_ref, 4 search_word
- Segment: 1 style, 2 pieces (repeated)
- Segments: 1 segments (repeated)

When a piece carries several body branches the last one on the wire wins.
A singular field sent more than once keeps its last occurrence.
"""

import logging
from typing import Optional

from segpack.codec.errors import EmptyUnionError, MalformedError
from segpack.codec.wire import (
    FIXED32,
    LEN,
    VARINT,
    WIRE_TYPE_NAMES,
    Field,
    WireWriter,
    float32_from_bytes,
    iter_fields,
)
from segpack.models.document import (
    UINT32_MAX,
    Alignment,
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

logger = logging.getLogger(__name__)

CHUNK_STYLE_FLAGS = (
    "emphasis",
    "strong",
    "superscript",
    "subscript",
    "strikethrough",
    "underline",
    "wide_spacing",
    "colour_gray",
)
CHUNK_STYLE_SIZE = 9

PIECE_CHUNK = 1
PIECE_LINK = 2
PIECE_PAGE_REF = 3
PIECE_SEARCH_WORD = 4


# Encoding


def _encode_chunk_style(style: ChunkStyle) -> bytes:
    w = WireWriter()
    for number, name in enumerate(CHUNK_STYLE_FLAGS, start=1):
        w.flag(number, getattr(style, name))
    w.float32(CHUNK_STYLE_SIZE, style.size)
    return w.getvalue()


def _encode_segment_style(style: SegmentStyle) -> bytes:
    w = WireWriter()
    w.float32(1, style.left_padding)
    w.varint(2, int(style.alignment))
    return w.getvalue()


def _encode_piece(piece: Piece) -> bytes:
    body = WireWriter()
    if isinstance(piece, Chunk):
        body.message(1, _encode_chunk_style(piece.style))
        body.string(2, piece.text)
        number = PIECE_CHUNK
    elif isinstance(piece, Link):
        body.string(1, piece.url)
        body.string(2, piece.text)
        number = PIECE_LINK
    elif isinstance(piece, PageRef):
        body.varint(1, piece.ref)
        number = PIECE_PAGE_REF
    elif isinstance(piece, SearchWord):
        body.string(1, piece.word)
        number = PIECE_SEARCH_WORD
    else:
        raise TypeError(f"not a piece: {piece!r}")

    # The chosen branch is always written, even with an empty body
    w = WireWriter()
    w.message(number, body.getvalue(), always=True)
    return w.getvalue()


def _encode_segment(segment: Segment) -> bytes:
    w = WireWriter()
    w.message(1, _encode_segment_style(segment.style))
    for piece in segment.pieces:
        w.message(2, _encode_piece(piece), always=True)
    return w.getvalue()


def encode(doc: Segments) -> bytes:
    """Encode a document to its binary wire form.

    Only non-default fields are written, so the output is a deterministic
    function of the content.
    """
    w = WireWriter()
    for segment in doc.segments:
        w.message(1, _encode_segment(segment), always=True)
    return w.getvalue()


# Decoding


def _expect(field: Field, wire_type: int, message: str) -> None:
    if field.wire_type != wire_type:
        raise MalformedError(
            f"{message} field {field.number} must be {WIRE_TYPE_NAMES[wire_type]}, "
            f"got {WIRE_TYPE_NAMES[field.wire_type]}",
            field.offset,
        )


def _skip(field: Field, message: str) -> None:
    logger.debug(f"Skipping unknown {message} field {field.number} at byte {field.offset}")


def _string(field: Field, message: str) -> str:
    _expect(field, LEN, message)
    try:
        return bytes(field.value).decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedError(f"{message} field {field.number} is not valid UTF-8", field.offset) from e


def _float32(field: Field, message: str) -> float:
    _expect(field, FIXED32, message)
    return float32_from_bytes(field.value)


def _decode_chunk_style(data: bytes, base: int) -> ChunkStyle:
    values: dict = {}
    for field in iter_fields(data, base):
        if 1 <= field.number <= len(CHUNK_STYLE_FLAGS):
            _expect(field, VARINT, "ChunkStyle")
            values[CHUNK_STYLE_FLAGS[field.number - 1]] = field.value != 0
        elif field.number == CHUNK_STYLE_SIZE:
            values["size"] = _float32(field, "ChunkStyle")
        else:
            _skip(field, "ChunkStyle")
    return ChunkStyle(**values)


def _decode_segment_style(data: bytes, base: int) -> SegmentStyle:
    left_padding = 0.0
    alignment = Alignment.JUSTIFIED
    for field in iter_fields(data, base):
        if field.number == 1:
            left_padding = _float32(field, "SegmentStyle")
        elif field.number == 2:
            _expect(field, VARINT, "SegmentStyle")
            try:
                alignment = Alignment(field.value)
            except ValueError:
                # Values added by newer writers read as the default
                logger.debug(f"Unknown alignment {field.value} at byte {field.offset}; using Justified")
                alignment = Alignment.JUSTIFIED
        else:
            _skip(field, "SegmentStyle")
    return SegmentStyle(left_padding=left_padding, alignment=alignment)


def _decode_chunk(data: bytes, base: int) -> Chunk:
    style = ChunkStyle()
    text = ""
    for field in iter_fields(data, base):
        if field.number == 1:
            _expect(field, LEN, "Chunk")
            style = _decode_chunk_style(field.value, field.offset)
        elif field.number == 2:
            text = _string(field, "Chunk")
        else:
            _skip(field, "Chunk")
    return Chunk(text=text, style=style)


def _decode_link(data: bytes, base: int) -> Link:
    url = ""
    text = ""
    for field in iter_fields(data, base):
        if field.number == 1:
            url = _string(field, "Link")
        elif field.number == 2:
            text = _string(field, "Link")
        else:
            _skip(field, "Link")
    return Link(url=url, text=text)


def _decode_page_ref(data: bytes, base: int) -> PageRef:
    ref = 0
    for field in iter_fields(data, base):
        if field.number == 1:
            _expect(field, VARINT, "PageRef")
            # uint32 readers keep the low 32 bits
            ref = field.value & UINT32_MAX
        else:
            _skip(field, "PageRef")
    return PageRef(ref=ref)


def _decode_search_word(data: bytes, base: int) -> SearchWord:
    word = ""
    for field in iter_fields(data, base):
        if field.number == 1:
            word = _string(field, "SearchWord")
        else:
            _skip(field, "SearchWord")
    return SearchWord(word=word)


_PIECE_DECODERS = {
    PIECE_CHUNK: _decode_chunk,
    PIECE_LINK: _decode_link,
    PIECE_PAGE_REF: _decode_page_ref,
    PIECE_SEARCH_WORD: _decode_search_word,
}


def _decode_piece(data: bytes, base: int) -> Piece:
    piece: Optional[Piece] = None
    for field in iter_fields(data, base):
        decoder = _PIECE_DECODERS.get(field.number)
        if decoder is None:
            _skip(field, "Piece")
            continue
        _expect(field, LEN, "Piece")
        if piece is not None:
            logger.debug(f"Piece at byte {base} has several bodies; keeping the last")
        piece = decoder(field.value, field.offset)

    if piece is None:
        raise EmptyUnionError("piece has no known body", base)
    return piece


def _decode_segment(data: bytes, base: int) -> Segment:
    style = SegmentStyle()
    pieces: list[Piece] = []
    for field in iter_fields(data, base):
        if field.number == 1:
            _expect(field, LEN, "Segment")
            style = _decode_segment_style(field.value, field.offset)
        elif field.number == 2:
            _expect(field, LEN, "Segment")
            pieces.append(_decode_piece(field.value, field.offset))
        else:
            _skip(field, "Segment")
    return Segment(style=style, pieces=tuple(pieces))


def decode(data: bytes) -> Segments:
    """Decode a document from its binary wire form.

    Unknown fields are skipped. Empty input is an empty document.

    Raises:
        TruncatedError: data ends in the middle of a field
        MalformedError: inconsistent lengths, keys or values
        EmptyUnionError: a piece carries no known body
    """
    segments: list[Segment] = []
    for field in iter_fields(bytes(data)):
        if field.number == 1:
            _expect(field, LEN, "Segments")
            segments.append(_decode_segment(field.value, field.offset))
        else:
            _skip(field, "Segments")
    return Segments(segments=tuple(segments))
