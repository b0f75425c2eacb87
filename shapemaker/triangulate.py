"""
Polygon-with-holes triangulation.

The heavy lifting is done by ``mapbox_earcut``; this module only prepares its
input and checks its output:

* the loop set is validated with shapely first, so self-intersections and
  stray holes surface as ``TriangulationError`` instead of garbage triangles;
* every input point gets a tiny deterministic jitter before triangulating
  (points lying exactly on another edge trip up most triangulators), while the
  triangles returned refer back to the original, unjittered points;
* the returned triangles must cover the polygon area, otherwise the call fails.

Triangles are returned as index triples into ``Triangulation.points``: the
outer loop's points first, then each hole's points in order.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Sequence

import mapbox_earcut as earcut
import numpy as np
from shapely.geometry import Polygon
from shapely.validation import explain_validity

from .config import Jitter, Tolerances
from .errors import TriangulationError
from .geometry import Tri, Vec2, cross2, poly_area

logger = logging.getLogger(__name__)


@dataclass
class Triangulation:
    points: List[Vec2] = field(default_factory=list)
    triangles: List[Tri] = field(default_factory=list)

    def area(self) -> float:
        total = 0.0
        for a, b, c in self.triangles:
            total += abs(cross2(self.points[a], self.points[b], self.points[c])) * 0.5
        return total


class _JitterSequence:
    """LCG offsets; a fresh instance per triangulation keeps calls reproducible."""

    def __init__(self, seed: int = Jitter.SEED) -> None:
        self.seed = seed

    def _next(self) -> float:
        self.seed = (self.seed * Jitter.MULTIPLIER + Jitter.INCREMENT) & Jitter.MASK
        return ((self.seed % 1000) / 1000.0 - 0.5) * Jitter.EPSILON

    def offset(self, pt: Vec2) -> Vec2:
        dx = self._next()
        dy = self._next()
        return (pt[0] + dx, pt[1] + dy)


def validate_loops(outer: Sequence[Vec2], holes: Sequence[Sequence[Vec2]]) -> None:
    if len(outer) < 3:
        raise TriangulationError(f"outer loop needs at least 3 points, got {len(outer)}")
    if poly_area(outer) <= Tolerances.DEGENERATE_AREA:
        raise TriangulationError("outer loop is degenerate (zero area)")
    for i, hole in enumerate(holes):
        if len(hole) < 3:
            raise TriangulationError(f"hole {i} needs at least 3 points, got {len(hole)}")

    poly = Polygon(outer, [list(h) for h in holes])
    if not poly.is_valid:
        raise TriangulationError(f"invalid polygon: {explain_validity(poly)}")


def triangulate(outer: Sequence[Vec2], holes: Sequence[Sequence[Vec2]] = ()) -> Triangulation:
    """Triangulate one outer loop with zero or more holes."""
    validate_loops(outer, holes)

    rings = [list(outer)] + [list(h) for h in holes]
    points: List[Vec2] = []
    jittered: List[Vec2] = []
    ring_ends: List[int] = []
    jitter = _JitterSequence()
    for ring in rings:
        for pt in ring:
            p = (float(pt[0]), float(pt[1]))
            points.append(p)
            jittered.append(jitter.offset(p))
        ring_ends.append(len(points))

    coords = np.asarray(jittered, dtype=np.float64).reshape(-1, 2)
    ends = np.asarray(ring_ends, dtype=np.uint32)
    raw = np.asarray(earcut.triangulate_float64(coords, ends), dtype=np.int64).reshape(-1, 3)

    result = Triangulation(points=points)
    dropped = 0
    for a, b, c in raw.tolist():
        if abs(cross2(points[a], points[b], points[c])) * 0.5 <= Tolerances.DEGENERATE_AREA:
            dropped += 1
            continue
        result.triangles.append((a, b, c))
    if dropped:
        logger.debug("dropped %d degenerate triangles", dropped)

    expected = poly_area(outer) - sum(poly_area(h) for h in holes)
    covered = result.area()
    if abs(covered - expected) > Tolerances.TRIANGULATION_AREA * max(1.0, expected):
        raise TriangulationError(
            f"triangulation covers area {covered:.6g}, polygon area is {expected:.6g}"
        )
    logger.debug("triangulated %d points into %d triangles", len(points), len(result.triangles))
    return result
