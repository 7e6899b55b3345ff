"""Exception hierarchy for the packer and its layout validator.

A request that does not fit is not an error: packing calls return ``None``
for it. Exceptions are reserved for contract violations by the caller and
for invariant violations detected by the validator.
"""


class PackerError(Exception):
    """Base class for all packer errors."""


class InvalidArgumentError(PackerError, ValueError):
    """Caller passed an unknown heuristic, a bad dimension or a malformed request."""


class LayoutError(PackerError):
    """Base class for layout invariant violations found by the validator."""


class OutOfBoundsError(LayoutError):
    """A used or free rectangle extends outside the bin."""


class OverlapError(LayoutError):
    """Two used rectangles overlap."""


class CoverageError(LayoutError):
    """Free and used rectangles do not exactly partition the bin area."""
