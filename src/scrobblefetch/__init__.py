"""scrobblefetch - adaptive paginated bulk fetcher for Last.fm user collections."""

__version__ = "0.1.0"
