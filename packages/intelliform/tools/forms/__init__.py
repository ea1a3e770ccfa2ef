"""Tools that add fields to or update the form of a document."""
