"""Image ingestion and recognition services."""
