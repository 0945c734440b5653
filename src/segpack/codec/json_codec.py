"""JSON interchange form for Segments documents.

Pieces are single-key objects naming their kind::

    {"chunk": {"text": "Hello", "style": {"strong": true}}}
    {"link": {"url": "https://example.org", "text": "example"}}
    {"page_ref": 12}
    {"search_word": "hello"}

Style keys equal to their defaults are left out when writing and filled in
when reading.
"""

import json
from dataclasses import fields
from typing import Any

from segpack.models.document import (
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

_CHUNK_STYLE_DEFAULTS = {f.name: f.default for f in fields(ChunkStyle)}


def _require(value: Any, kind: type | tuple[type, ...], what: str) -> Any:
    # bool is an int subclass and never stands in for a number
    if not isinstance(value, kind) or (isinstance(value, bool) and kind is not bool):
        raise ValueError(f"{what} has the wrong type: {value!r}")
    return value


_NUMBER = (int, float)


def chunk_style_to_dict(style: ChunkStyle) -> dict[str, Any]:
    return {
        name: getattr(style, name)
        for name, default in _CHUNK_STYLE_DEFAULTS.items()
        if getattr(style, name) != default
    }


def chunk_style_from_dict(data: dict[str, Any]) -> ChunkStyle:
    _require(data, dict, "chunk style")
    unknown = set(data) - set(_CHUNK_STYLE_DEFAULTS)
    if unknown:
        raise ValueError(f"unknown chunk style keys: {sorted(unknown)}")
    for name, value in data.items():
        _require(value, _NUMBER if name == "size" else bool, f"chunk style {name}")
    return ChunkStyle(**data)


def segment_style_to_dict(style: SegmentStyle) -> dict[str, Any]:
    out: dict[str, Any] = {}
    if style.left_padding != 0.0:
        out["left_padding"] = style.left_padding
    if style.alignment != Alignment.JUSTIFIED:
        out["alignment"] = style.alignment.name.lower()
    return out


def segment_style_from_dict(data: dict[str, Any]) -> SegmentStyle:
    _require(data, dict, "segment style")
    name = _require(data.get("alignment", "justified"), str, "alignment")
    try:
        alignment = Alignment[name.upper()]
    except KeyError as e:
        raise ValueError(f"unknown alignment: {name!r}") from e
    left_padding = _require(data.get("left_padding", 0.0), _NUMBER, "left_padding")
    return SegmentStyle(left_padding=left_padding, alignment=alignment)


def piece_to_dict(piece: Piece) -> dict[str, Any]:
    if isinstance(piece, Chunk):
        body: dict[str, Any] = {"text": piece.text}
        style = chunk_style_to_dict(piece.style)
        if style:
            body["style"] = style
        return {"chunk": body}
    if isinstance(piece, Link):
        return {"link": {"url": piece.url, "text": piece.text}}
    if isinstance(piece, PageRef):
        return {"page_ref": piece.ref}
    if isinstance(piece, SearchWord):
        return {"search_word": piece.word}
    raise TypeError(f"not a piece: {piece!r}")


def piece_from_dict(data: dict[str, Any]) -> Piece:
    if not isinstance(data, dict) or len(data) != 1:
        raise ValueError(f"a piece is an object with exactly one kind, got {data!r}")
    ((kind, body),) = data.items()
    if kind in ("chunk", "link") and not isinstance(body, dict):
        raise ValueError(f"{kind} body must be an object, got {body!r}")
    if kind == "chunk":
        return Chunk(
            text=_require(body.get("text", ""), str, "chunk text"),
            style=chunk_style_from_dict(body.get("style", {})),
        )
    if kind == "link":
        return Link(
            url=_require(body.get("url", ""), str, "link url"),
            text=_require(body.get("text", ""), str, "link text"),
        )
    if kind == "page_ref":
        if isinstance(body, bool) or not isinstance(body, int):
            raise ValueError(f"page_ref must be an integer, got {body!r}")
        return PageRef(ref=body)
    if kind == "search_word":
        return SearchWord(word=_require(body, str, "search_word"))
    raise ValueError(f"unknown piece kind: {kind!r}")


def to_dict(doc: Segments) -> dict[str, Any]:
    """Convert a document to plain JSON-compatible data."""
    segments = []
    for segment in doc.segments:
        entry: dict[str, Any] = {}
        style = segment_style_to_dict(segment.style)
        if style:
            entry["style"] = style
        entry["pieces"] = [piece_to_dict(p) for p in segment.pieces]
        segments.append(entry)
    return {"segments": segments}


def from_dict(data: dict[str, Any]) -> Segments:
    """Build a document from the output of ``to_dict`` (or hand-written JSON).

    Raises:
        ValueError: unknown piece kinds, alignment names or style keys, and
            values of the wrong JSON type
    """
    _require(data, dict, "document")
    segments = []
    for entry in _require(data.get("segments", []), list, "segments"):
        _require(entry, dict, "segment")
        pieces = _require(entry.get("pieces", []), list, "pieces")
        segments.append(
            Segment(
                style=segment_style_from_dict(entry.get("style", {})),
                pieces=tuple(piece_from_dict(p) for p in pieces),
            )
        )
    return Segments(segments=tuple(segments))


def dumps(doc: Segments, indent: int | None = 2) -> str:
    return json.dumps(to_dict(doc), indent=indent, ensure_ascii=False)


def loads(text: str | bytes) -> Segments:
    return from_dict(json.loads(text))
