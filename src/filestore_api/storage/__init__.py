"""
Local storage core.

Files are spread across shard directories named after the first two hex
characters of the SHA-256 of their name:

    <root>/0c/a1.txt
    <root>/7b/b2.txt
"""

from filestore_api.storage.engine import StorageEngine, init_storage
from filestore_api.storage.listing import (
    CountEngine,
    FileDescriptor,
    ListingPage,
    RegexListingEngine,
)
from filestore_api.storage.paths import PathResolver, shard_key

__all__ = [
    "CountEngine",
    "FileDescriptor",
    "ListingPage",
    "PathResolver",
    "RegexListingEngine",
    "StorageEngine",
    "init_storage",
    "shard_key",
]
