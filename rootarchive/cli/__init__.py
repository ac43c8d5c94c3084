"""Command-line interface for rootarchive."""
