"""Application layer: bulk fetch and incremental update services."""
