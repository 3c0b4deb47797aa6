"""
Main entry point for timet when run as a module.

Allows running with: python -m timet
"""

from timet.cli.main import app

if __name__ == "__main__":
    app()
