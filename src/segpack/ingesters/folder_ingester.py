"""Page source for local folders."""

import logging
import os
from pathlib import Path
from typing import Iterator

from segpack.models import Page
from segpack.utils.formats import load_segments, page_number

logger = logging.getLogger(__name__)


class FolderIngester:
    """Page source for folders of page files (``<number>.seg`` or ``.json``)."""

    source_type = "folder"

    def can_handle(self, source: Path) -> bool:
        """Check if this is an existing directory."""
        return source.is_dir()

    def ingest(self, source: Path) -> Iterator[Page]:
        """Yield pages from a folder recursively.

        Args:
            source: Path to the folder

        Yields:
            Page objects in ascending page number
        """
        found: list[tuple[int, Path]] = []
        for root, _, files in os.walk(source):
            for filename in files:
                full_path = Path(root) / filename
                rel_path = full_path.relative_to(source)

                if self._should_skip(rel_path):
                    continue

                number = page_number(full_path)
                if number is None:
                    logger.warning(f"Skipping non-page file: {rel_path}")
                    continue
                found.append((number, full_path))

        for number, full_path in sorted(found):
            yield Page(number=number, segments=load_segments(full_path, full_path.read_bytes()))

    def _should_skip(self, path: Path) -> bool:
        """Skip hidden files and folders."""
        return any(part.startswith(".") for part in path.parts)
