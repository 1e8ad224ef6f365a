"""File storage REST service with hash-sharded local storage and regex search."""

__version__ = "1.0.0"
