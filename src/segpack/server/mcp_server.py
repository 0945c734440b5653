"""FastMCP server implementation for SegPack."""

from pathlib import Path

from mcp.server.fastmcp import FastMCP

from segpack.codec.json_codec import dumps
from segpack.storage import SegPackStore


def create_mcp_server(segpack_path: Path) -> FastMCP:
    """Create an MCP server for a specific page pack.

    Design: 1 process = 1 pack.

    Args:
        segpack_path: Path to the .segpack file to serve

    Returns:
        Configured FastMCP server instance
    """
    mcp = FastMCP(
        name="segpack",
    )

    store = SegPackStore(segpack_path)

    @mcp.tool()
    def pages() -> str:
        """List pages in the pack.

        Returns:
            One line per page with encoded size and number of search words
        """
        rows = store.list_pages()

        if not rows:
            return "No pages in this pack"

        lines = []
        for row in rows:
            lines.append(
                f"page {row['number']:>6}  {row['size_bytes']:>8} B  {row['search_words']:>5} words"
            )
        return "\n".join(lines)

    @mcp.tool()
    def read_page(number: int, structured: bool = False) -> str:
        """Read a page from the pack.

        Args:
            number: Page number (as shown in pages output)
            structured: Return styled segments as JSON instead of plain text

        Returns:
            Plain text of the page, or its JSON form when structured is set
        """
        if structured:
            page = store.load_page(number)
            if page is None:
                return f"Error: Page not found: {number}"
            return dumps(page.segments)

        text = store.read_text(number)
        if text is None:
            return f"Error: Page not found: {number}"
        return text

    @mcp.tool()
    def find(word: str, limit: int = 50) -> str:
        """Find search word anchors across the pack.

        Args:
            word: The word to look up (case-insensitive)
            limit: Maximum number of hits to return (default: 50)

        Returns:
            Hits as page / segment / piece positions
        """
        hits = store.find_word(word, limit=limit)

        if not hits:
            return f"No results found for: {word}"

        return "\n".join(
            f"page {h['page_number']}, segment {h['segment_index']}, piece {h['piece_index']}: {h['word']}"
            for h in hits
        )

    return mcp
