"""Object graph, parsing and serialization primitives for IntelliForm."""
