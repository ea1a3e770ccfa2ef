"""Read-only document inspection tools."""
