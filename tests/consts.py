"""Shared constants for the test suite."""

TEST_FILE_NAME = "a1.txt"
TEST_FILE_CONTENT = b"Hello, world!"
TEST_FILE_CONTENT_TYPE = "text/plain"
UPDATED_FILE_CONTENT = b"updated content"

# First two hex characters of sha256(name), precomputed.
SHARD_KEYS = {
    "a1.txt": "0c",
    "photo_03.png": "25",
    "data-set.csv": "34",
    "report.pdf": "64",
    "b2.txt": "7b",
    "photo_01.png": "aa",
    "notes.txt": "e3",
    "photo_02.png": "fb",
}
