"""Runtime support shared by the store and resolver.

Python 3.13+.
"""

from .rwlock import RWLock

__all__ = ["RWLock"]
