"""Page pack storage."""

from segpack.storage.store import SegPackStore

__all__ = ["SegPackStore"]
