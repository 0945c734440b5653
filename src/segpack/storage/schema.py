"""Database schema for .segpack files."""

SCHEMA = """
-- Pages table: one wire-encoded Segments document per page
CREATE TABLE IF NOT EXISTS pages (
    number INTEGER PRIMARY KEY,
    segments BLOB NOT NULL,
    plain_text TEXT NOT NULL,
    size_bytes INTEGER NOT NULL
);

-- Search words table: position of every SearchWord piece
CREATE TABLE IF NOT EXISTS search_words (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    page_number INTEGER NOT NULL,
    segment_index INTEGER NOT NULL,
    piece_index INTEGER NOT NULL,
    word TEXT NOT NULL,
    FOREIGN KEY (page_number) REFERENCES pages(number)
);

-- Metadata table: stores pack metadata
CREATE TABLE IF NOT EXISTS metadata (
    key TEXT PRIMARY KEY,
    value TEXT
);

-- Indexes for efficient queries
CREATE INDEX IF NOT EXISTS idx_search_words_word ON search_words(word COLLATE NOCASE);
CREATE INDEX IF NOT EXISTS idx_search_words_page ON search_words(page_number);
"""
