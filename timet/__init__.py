"""timet: a small command-line time tracker."""

__version__ = "1.0.0"
