"""Protocol for page sources."""

from pathlib import Path
from typing import Iterator, Protocol, runtime_checkable

from segpack.models import Page


@runtime_checkable
class PageSource(Protocol):
    """Protocol for input sources that yield decoded pages.

    Implementations handle different containers (folder, zip).
    Uses structural subtyping - no inheritance required.
    """

    @property
    def source_type(self) -> str:
        """Return identifier for this source type (e.g., 'zip', 'folder')."""
        ...

    def can_handle(self, source: Path) -> bool:
        """Check if this source can process the given path."""
        ...

    def ingest(self, source: Path) -> Iterator[Page]:
        """Yield pages from the source, in ascending page order."""
        ...
