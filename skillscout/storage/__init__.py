"""
Persistence for repositories, skills profiles and jobs.
"""

from .store import JsonStore

__all__ = [
    "JsonStore",
]
