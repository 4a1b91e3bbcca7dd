"""Guess-the-number game built around one controller and pluggable views."""

__version__ = "1.0.0"
