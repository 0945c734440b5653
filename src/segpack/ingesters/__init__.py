"""Page sources (ingesters) for SegPack."""

from pathlib import Path
from typing import Optional

from segpack.ingesters.folder_ingester import FolderIngester
from segpack.ingesters.zip_ingester import ZipIngester
from segpack.protocols import PageSource

# Registry of available ingesters
_INGESTERS: list[PageSource] = [
    ZipIngester(),
    FolderIngester(),
]


def get_ingester(source: Path | str) -> Optional[PageSource]:
    """Find an ingester that can handle the given source.

    Args:
        source: Path to the input source (folder or zip file)

    Returns:
        A PageSource instance that can handle the source, or None
    """
    source_path = Path(source)
    for ingester in _INGESTERS:
        if ingester.can_handle(source_path):
            return ingester
    return None


def register_ingester(ingester: PageSource) -> None:
    """Register a custom ingester (for plugins/extensions).

    Args:
        ingester: An object implementing the PageSource protocol
    """
    _INGESTERS.append(ingester)


__all__ = ["get_ingester", "register_ingester", "ZipIngester", "FolderIngester"]
