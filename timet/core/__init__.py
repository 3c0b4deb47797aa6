"""Reporting core and tracking service for timet."""
