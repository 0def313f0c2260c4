"""Key-value storage connections."""
