"""Core shared infrastructure for errorlearning.

This package contains foundational utilities:
    - config: Application configuration management
    - console: Rich console output and logging
    - result: Error handling patterns
    - runtime: Runtime context holding the active registry
"""

from __future__ import annotations

from . import config, console

__all__ = ["config", "console"]
