# trigeval/cli/__init__.py

"""Command-line interface for trigeval."""

from .main import cli

__all__ = ["cli"]
