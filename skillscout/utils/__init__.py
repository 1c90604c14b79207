"""
Utility modules for skillscout.
"""

from .config import Config

__all__ = [
    "Config",
]
