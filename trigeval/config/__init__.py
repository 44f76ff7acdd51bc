# trigeval/config/__init__.py

"""
Configuration management for trigeval.

This package handles loading configuration from files (TOML),
environment variables, and internal defaults, providing a unified
configuration object.
"""

from .models import TrigevalConfig, EngineConfig
from .loaders import load_configuration

__all__ = [
    "TrigevalConfig",
    "EngineConfig",
    "load_configuration",
]
