"""Utility modules for scopelex.

Provides:
- hashing: hash_str, hash_data for content and grammar fingerprints
- logger: get_logger for logging
"""

from scopelex.utils.hashing import hash_data, hash_str
from scopelex.utils.logger import get_logger

__all__ = [
    "get_logger",
    "hash_data",
    "hash_str",
]
