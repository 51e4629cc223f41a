"""snipfind package.

Personal snippet retrieval over a directory of flat text files. Files are
split into blocks, filtered by path and content, and a picked title is
resolved back to the exact block body.
"""

__all__ = [
    "cli",
    "config",
    "errors",
    "query",
    "session",
]

__version__ = "0.3.0"
