"""Graph analysis utilities for fallback configuration.

Python 3.13+.
"""

from .graph import detect_cycles

__all__ = [
    "detect_cycles",
]
