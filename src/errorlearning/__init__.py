"""errorlearning - recurring error pattern tracker for Bau-Structura.

This package records reported errors, groups them into recurring patterns,
escalates repeat offenders and exports the learned knowledge base.

Exports:
    __version__: Package version string.
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.3.0"
