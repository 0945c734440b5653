"""Protocol definitions for extensible components."""

from segpack.protocols.page_source import PageSource
from segpack.protocols.piece_sink import PieceSink

__all__ = ["PageSource", "PieceSink"]
