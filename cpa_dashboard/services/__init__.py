"""Dashboard services: sync, aggregation and export."""
