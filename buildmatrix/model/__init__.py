"""Record model package.

Defines `PartialRecord`, the immutable unit the flattener produces and the
merger combines.
"""

from buildmatrix.model.record import PartialRecord

__all__ = [
    "PartialRecord",
]
