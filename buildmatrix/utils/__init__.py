"""Utility helpers used across buildmatrix.

This package contains small, self-contained utilities that do not depend on
project internals.
"""

from buildmatrix.utils.keys import normalize_key, normalize_mapping_keys

__all__ = [
    "normalize_key",
    "normalize_mapping_keys",
]
