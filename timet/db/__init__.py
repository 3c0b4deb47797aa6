"""Storage layer for timet."""
