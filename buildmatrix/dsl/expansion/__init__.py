"""Matrix expansion for buildmatrix documents.

This package turns a nested matrix document into flat partial records.

Usage:
    from buildmatrix.dsl.expansion import flatten, cartesian_merge

    records = flatten({"os": ["mac", "linux"], "label": "build"})
    # [PartialRecord(fields={"os": "mac", "label": "build"}), ...]
"""

from .cartesian import cartesian, cartesian_merge, merge
from .flatten import flatten, flatten_keyed

__all__ = [
    # Combination
    "cartesian",
    "merge",
    "cartesian_merge",
    # Flattening
    "flatten",
    "flatten_keyed",
]
