"""HTTP API for mosaic generation."""
