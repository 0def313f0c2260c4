"""Application core: settings."""
