"""Subcommand definitions for the ``intelliform`` CLI."""
