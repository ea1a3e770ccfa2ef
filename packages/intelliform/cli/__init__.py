"""Command line entry points for IntelliForm."""
