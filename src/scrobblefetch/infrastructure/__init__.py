"""Infrastructure layer: Last.fm integration, persistence, observability."""
