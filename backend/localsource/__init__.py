"""localsource — local filesystem items exposed as content sources."""

__version__ = "0.1.0"
