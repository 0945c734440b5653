"""Tests for Segments wire encoding and decoding."""

import math

import pytest
from conftest import wire_field, wire_varint

from segpack.codec import (
    DecodeError,
    EmptyUnionError,
    MalformedError,
    TruncatedError,
    decode,
    encode,
)
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


def _one_piece(piece_body: bytes) -> bytes:
    """A document with one segment holding one raw piece body."""
    return wire_field(1, wire_field(2, piece_body))


class TestRoundTrip:
    """Test decode(encode(doc)) == doc."""

    def test_hello_scenario(self, hello_doc: Segments) -> None:
        """Should restore the centred segment and its two pieces in order."""
        result = decode(encode(hello_doc))

        assert len(result.segments) == 1
        segment = result.segments[0]
        assert segment.style.alignment is Alignment.CENTER
        assert segment.style.left_padding == 2.0
        assert segment.pieces == (
            Chunk(text="Hello", style=ChunkStyle(strong=True)),
            SearchWord(word="hello"),
        )
        assert result == hello_doc

    def test_book(self, book_doc: Segments) -> None:
        """Should restore every piece kind and style field."""
        assert decode(encode(book_doc)) == book_doc

    def test_empty_document(self) -> None:
        """Should encode an empty document to no bytes."""
        assert encode(Segments()) == b""
        assert decode(encode(Segments())) == Segments()

    def test_empty_segments_and_pieces(self) -> None:
        """Should keep segments without pieces and pieces without content."""
        doc = Segments(
            [
                Segment(),
                Segment(pieces=[Chunk(), Link(), PageRef(), SearchWord()]),
                Segment(),
            ]
        )

        assert decode(encode(doc)) == doc

    def test_order_is_preserved(self) -> None:
        """Should decode [A, B] as [A, B] for distinguishable segments."""
        a = Segment(pieces=[SearchWord("a")])
        b = Segment(style=SegmentStyle(alignment=Alignment.RIGHT), pieces=[SearchWord("b")])

        assert decode(encode(Segments([a, b]))).segments == (a, b)
        assert decode(encode(Segments([b, a]))).segments == (b, a)

    def test_unicode_text(self) -> None:
        """Should carry non-ASCII text unchanged."""
        doc = Segments([Segment(pieces=[Chunk(text="Ἐν ἀρχῇ ἦν ὁ λόγος ✓")])])

        assert decode(encode(doc)) == doc

    def test_empty_url_is_preserved(self) -> None:
        """Should keep a link whose url is empty."""
        doc = Segments([Segment(pieces=[Link(url="", text="nowhere")])])

        assert decode(encode(doc)).segments[0].pieces == (Link(url="", text="nowhere"),)

    def test_page_ref_extremes(self) -> None:
        """Should carry page refs up to the uint32 maximum."""
        doc = Segments([Segment(pieces=[PageRef(0), PageRef(1), PageRef(0xFFFFFFFF)])])

        assert decode(encode(doc)) == doc

    def test_non_finite_floats(self) -> None:
        """Should pass NaN, infinities and -0.0 through unchanged."""
        doc = Segments(
            [
                Segment(
                    style=SegmentStyle(left_padding=-0.0),
                    pieces=[
                        Chunk(text="a", style=ChunkStyle(size=float("nan"))),
                        Chunk(text="b", style=ChunkStyle(size=float("inf"))),
                    ],
                )
            ]
        )

        result = decode(encode(doc)).segments[0]

        assert math.copysign(1.0, result.style.left_padding) == -1.0
        assert math.isnan(result.pieces[0].style.size)
        assert result.pieces[1].style.size == float("inf")

    def test_encoding_is_deterministic(self, book_doc: Segments) -> None:
        """Should produce identical bytes for equal documents."""
        copy = decode(encode(book_doc))

        assert encode(copy) == encode(book_doc)


class TestEncoding:
    """Test exact wire bytes."""

    def test_page_ref_bytes(self) -> None:
        """Should nest Segments > Segment > Piece > PageRef."""
        doc = Segments([Segment(pieces=[PageRef(300)])])

        assert encode(doc) == b"\x0a\x07\x12\x05\x1a\x03\x08\xac\x02"

    def test_empty_chunk_still_writes_branch(self) -> None:
        """Should write the union branch even when its body is empty."""
        doc = Segments([Segment(pieces=[Chunk()])])

        assert encode(doc) == b"\x0a\x04\x12\x02\x0a\x00"

    def test_hello_bytes(self, hello_doc: Segments) -> None:
        """Should write style fields in field-number order."""
        expected = wire_field(
            1,
            wire_field(1, b"\x0d\x00\x00\x00\x40" + b"\x10\x01")
            + wire_field(2, wire_field(1, wire_field(1, b"\x10\x01") + wire_field(2, b"Hello")))
            + wire_field(2, wire_field(4, wire_field(1, b"hello"))),
        )

        assert encode(hello_doc) == expected
        assert len(expected) == 37

    def test_default_styles_are_omitted(self) -> None:
        """Should leave out style messages whose fields are all default."""
        doc = Segments([Segment(pieces=[Chunk(text="a", style=ChunkStyle())])])

        assert encode(doc) == _one_piece(wire_field(1, wire_field(2, b"a")))


class TestDefaults:
    """Test absent and explicitly-default fields decode alike."""

    def test_explicit_defaults_equal_omitted(self) -> None:
        """Should treat zero-valued fields on the wire as absent."""
        explicit_style = (
            wire_varint(1, 0)
            + wire_varint(2, 0)
            + wire_varint(8, 0)
            + b"\x4d\x00\x00\x00\x00"  # size = 0.0
        )
        explicit = _one_piece(wire_field(1, wire_field(1, explicit_style) + wire_field(2, b"a")))
        omitted = _one_piece(wire_field(1, wire_field(2, b"a")))

        assert decode(explicit) == decode(omitted)
        assert decode(explicit).segments[0].pieces[0].style.is_default

    def test_explicit_justified_alignment(self) -> None:
        """Should read alignment 0 as Justified."""
        data = wire_field(1, wire_field(1, wire_varint(2, 0)))

        assert decode(data).segments[0].style == SegmentStyle()

    def test_bool_accepts_any_nonzero_varint(self) -> None:
        """Should read any non-zero flag value as True."""
        data = _one_piece(wire_field(1, wire_field(1, wire_varint(6, 7))))

        assert decode(data).segments[0].pieces[0].style.underline is True


class TestUnionPolicy:
    """Test piece union decoding."""

    def test_last_branch_wins(self) -> None:
        """Should keep the last branch on the wire and drop earlier ones."""
        body = wire_field(1, b"") + wire_field(4, wire_field(1, b"x"))

        assert decode(_one_piece(body)).segments[0].pieces == (SearchWord("x"),)

    def test_last_branch_wins_reversed(self) -> None:
        """Should keep the chunk when it comes after the search word."""
        body = wire_field(4, wire_field(1, b"x")) + wire_field(1, b"")

        assert decode(_one_piece(body)).segments[0].pieces == (Chunk(),)

    def test_repeated_same_branch(self) -> None:
        """Should replace rather than merge a repeated branch."""
        body = wire_field(2, wire_field(1, b"first")) + wire_field(2, wire_field(2, b"second"))

        assert decode(_one_piece(body)).segments[0].pieces == (Link(url="", text="second"),)

    def test_empty_piece(self) -> None:
        """Should raise EmptyUnionError for a piece with no body."""
        with pytest.raises(EmptyUnionError):
            decode(_one_piece(b""))

    def test_piece_with_only_unknown_fields(self) -> None:
        """Should raise EmptyUnionError when no branch is recognised."""
        with pytest.raises(EmptyUnionError):
            decode(_one_piece(wire_varint(9, 1) + wire_field(5, b"future")))


class TestForwardCompatibility:
    """Test that unknown fields are skipped."""

    @pytest.mark.parametrize(
        "extra",
        [
            wire_varint(2, 5),
            wire_field(7, b"ab"),
            b"\x19" + b"\x00" * 8,  # field 3, fixed64
            b"\x25" + b"\x00" * 4,  # field 4, fixed32
            b"\x1b\x08\x01\x1c",  # field 3, group
            b"\x1b\x2b\x08\x01\x2c\x12\x00\x1c",  # field 3, group holding a group
        ],
    )
    def test_unknown_top_level_fields(self, hello_doc: Segments, extra: bytes) -> None:
        """Should ignore unknown fields of any wire type."""
        data = extra + encode(hello_doc) + extra

        assert decode(data) == hello_doc

    def test_unknown_group_inside_piece(self) -> None:
        """Should skip a group on an unknown piece field."""
        body = b"\x33" + wire_field(1, b"ignored") + b"\x34" + wire_field(4, wire_field(1, b"x"))

        assert decode(_one_piece(body)).segments[0].pieces == (SearchWord(word="x"),)

    def test_unknown_alignment_reads_as_justified(self) -> None:
        """Should read an alignment value it does not know as Justified and keep the segment."""
        style = wire_field(1, wire_varint(2, 4))
        piece = wire_field(2, wire_field(4, wire_field(1, b"x")))

        result = decode(wire_field(1, style + piece))

        assert result == Segments([Segment(style=SegmentStyle(), pieces=[SearchWord(word="x")])])
        assert result.segments[0].style.alignment is Alignment.JUSTIFIED

    def test_unknown_nested_fields(self) -> None:
        """Should ignore unknown fields inside every message."""
        chunk_style = wire_varint(2, 1) + wire_varint(10, 1)
        chunk = wire_field(1, chunk_style) + wire_field(2, b"a") + wire_field(3, b"?")
        segment_style = wire_varint(2, 2) + wire_field(3, b"?")
        piece = wire_field(1, chunk) + wire_varint(5, 1)
        segment = wire_field(1, segment_style) + wire_field(2, piece) + wire_varint(3, 1)

        result = decode(wire_field(1, segment))

        assert result == Segments(
            [
                Segment(
                    style=SegmentStyle(alignment=Alignment.RIGHT),
                    pieces=[Chunk(text="a", style=ChunkStyle(strong=True))],
                )
            ]
        )


class TestDecodeErrors:
    """Test the decode error taxonomy."""

    def test_empty_input(self) -> None:
        """Should decode empty bytes as a document with no segments."""
        assert decode(b"") == Segments()
        assert decode(b"").segments == ()

    def test_truncation_inside_field(self, hello_doc: Segments) -> None:
        """Should never return a value for a cut inside the field."""
        data = encode(hello_doc)

        for cut in range(1, len(data)):
            with pytest.raises((TruncatedError, MalformedError)):
                decode(data[:cut])

    def test_truncated_key(self) -> None:
        """Should raise TruncatedError for a key cut mid-varint."""
        with pytest.raises(TruncatedError):
            decode(b"\x80")

    def test_length_overrun(self) -> None:
        """Should raise MalformedError when a length overruns the buffer."""
        with pytest.raises(MalformedError):
            decode(b"\x0a\x05\x12")

    def test_nested_length_overrun(self) -> None:
        """Should raise MalformedError when an inner length overruns its message."""
        with pytest.raises(MalformedError):
            decode(wire_field(1, b"\x12\x09\x0a\x00"))

    def test_wrong_wire_type_for_known_field(self) -> None:
        """Should raise MalformedError when a known field has the wrong wire type."""
        with pytest.raises(MalformedError):
            decode(wire_varint(1, 1))

    def test_wrong_wire_type_for_float(self) -> None:
        """Should raise MalformedError for a size sent as a varint."""
        with pytest.raises(MalformedError):
            decode(_one_piece(wire_field(1, wire_field(1, wire_varint(9, 1)))))

    def test_invalid_utf8(self) -> None:
        """Should raise MalformedError for text that is not UTF-8."""
        with pytest.raises(MalformedError):
            decode(_one_piece(wire_field(4, wire_field(1, b"\xff"))))

    @pytest.mark.parametrize(
        "data",
        [
            b"\x0b\x0c",  # segments field sent as a group
            b"\x1c",  # group end without a start
            b"\x1b\x24",  # group end for another field
            b"\x0e",  # wire type 6
            b"\x0f",  # wire type 7
        ],
    )
    def test_bad_group_and_wire_types(self, data: bytes) -> None:
        """Should raise MalformedError for misplaced groups and reserved wire types."""
        with pytest.raises(MalformedError):
            decode(data)

    def test_unterminated_group(self) -> None:
        """Should raise TruncatedError when data ends inside a group."""
        with pytest.raises(TruncatedError):
            decode(b"\x1b\x08\x01")

    def test_errors_share_base_class(self) -> None:
        """Should let callers catch every failure as DecodeError."""
        with pytest.raises(DecodeError) as exc_info:
            decode(b"\x0a\x05\x12")

        assert isinstance(exc_info.value, ValueError)
        assert exc_info.value.offset == 2

    def test_wide_page_ref_keeps_low_bits(self) -> None:
        """Should truncate page refs wider than 32 bits like uint32 readers do."""
        body = wire_field(3, b"\x08" + encode_varint((1 << 32) + 5))

        assert decode(_one_piece(body)).segments[0].pieces == (PageRef(5),)

    def test_accepts_bytearray_and_memoryview(self, hello_doc: Segments) -> None:
        """Should decode any bytes-like input."""
        data = encode(hello_doc)

        assert decode(bytearray(data)) == hello_doc
        assert decode(memoryview(data)) == hello_doc
