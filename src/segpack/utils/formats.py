"""Input format detection for page files."""

import json
from pathlib import Path
from typing import Optional

from segpack.codec import decode
from segpack.codec.json_codec import loads
from segpack.models import Segments

# Extensions of page files
WIRE_EXTENSIONS = {".seg", ".bin"}
JSON_EXTENSIONS = {".json"}
PAGE_EXTENSIONS = WIRE_EXTENSIONS | JSON_EXTENSIONS


def is_json_extension(path: str | Path) -> bool:
    """Check if file extension indicates JSON interchange form."""
    return Path(path).suffix.lower() in JSON_EXTENSIONS


def is_json_content(content: bytes) -> bool:
    """Detect the JSON form by parsing it.

    Whitespace and ``{`` are also valid leading wire bytes (keys of fields 1, 4
    and 15), so a leading brace alone is not enough. Content that starts
    like a JSON object but does not parse is treated as wire data.
    """
    if not content.lstrip(b" \t\r\n").startswith(b"{"):
        return False
    try:
        json.loads(content)
    except ValueError:
        return False
    return True


def is_json_payload(path: str | Path, content: bytes) -> bool:
    """Decide between JSON and wire form using extension, then content."""
    if is_json_extension(path):
        return True
    if Path(path).suffix.lower() in WIRE_EXTENSIONS:
        return False
    return is_json_content(content)


def page_number(path: str | Path) -> Optional[int]:
    """Page number encoded in a page file name (``0042.seg`` -> 42).

    Returns None for files that are not page files.
    """
    p = Path(path)
    if p.suffix.lower() not in PAGE_EXTENSIONS or not p.stem.isdigit():
        return None
    return int(p.stem)


def load_segments(path: str | Path, content: bytes) -> Segments:
    """Decode page content in whichever form it is stored.

    Raises:
        DecodeError: wire content is invalid
        ValueError: JSON content is invalid
    """
    if is_json_payload(path, content):
        return loads(content)
    return decode(content)
