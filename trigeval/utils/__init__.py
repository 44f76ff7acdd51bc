# trigeval/utils/__init__.py

"""Shared helpers: logging setup."""

from .logging_config import setup_logging

__all__ = ["setup_logging"]
