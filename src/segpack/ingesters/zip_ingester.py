"""Page source for ZIP archives."""

import logging
import zipfile
from pathlib import Path
from typing import Iterator

from segpack.models import Page
from segpack.utils.formats import load_segments, page_number

logger = logging.getLogger(__name__)


class ZipIngester:
    """Page source for ZIP archives of page files."""

    source_type = "zip"

    def can_handle(self, source: Path) -> bool:
        """Check if this is a zip file."""
        return source.suffix.lower() == ".zip" and source.exists()

    def ingest(self, source: Path) -> Iterator[Page]:
        """Yield pages from a ZIP archive.

        Args:
            source: Path to the ZIP file

        Yields:
            Page objects in ascending page number
        """
        with zipfile.ZipFile(source, "r") as zf:
            entries = []
            for info in zf.infolist():
                if info.is_dir():
                    continue

                number = page_number(info.filename)
                if number is None:
                    logger.warning(f"Skipping non-page entry: {info.filename}")
                    continue
                entries.append((number, info.filename))

            for number, filename in sorted(entries):
                raw_content = zf.read(filename)
                yield Page(number=number, segments=load_segments(filename, raw_content))
