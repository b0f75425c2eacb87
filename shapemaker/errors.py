"""Exception types raised by the generators."""
from __future__ import annotations


class ShapeError(ValueError):
    """Base class for every generation failure."""


class InvalidParameterError(ShapeError):
    """A scalar parameter is out of range (segment counts, thickness, scale...)."""


class InvalidProfileError(ShapeError):
    """Revolution profile has fewer than 2 points or a negative radius."""


class InvalidLoopSetError(ShapeError):
    """No usable outer loop, or more than one outer loop."""


class TriangulationError(ShapeError):
    """The polygon could not be triangulated (self-intersection, degenerate outline...)."""


class InvalidEdgeTreatmentError(ShapeError):
    """Edge treatment offset is large enough to fold the offset contour."""
