"""A small SQL server over MySQL-style packets, with JSON-file table storage."""

__version__ = "0.1.0"