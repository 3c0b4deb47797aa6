"""Command-line interface for timet."""
