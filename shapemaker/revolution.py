"""
Revolution and spiral sweep of a 2D profile about the Y axis.

Profiles are ``(radius, height)`` points. Open profiles run bottom to top with
the outer surface on their right; closed profiles (donut cross-sections) are
turned counter-clockwise before sweeping so the same rule holds. Each profile
point becomes a ring of vertices:

    position = (cos(a) * radius, height, sin(a) * radius)

and the profile's 2D normal is rotated the same way.

Usage:
    from shapemaker.revolution import generate_revolution, SpiralParams

    mesh = generate_revolution([(0.5, 0.0), (0.5, 1.0)], radial_segments=32)
    coil = generate_revolution(donut_points, kind=ProfileKind.CLOSED,
                               spiral=SpiralParams(turns=4, pitch=0.3))
"""
from __future__ import annotations

import dataclasses
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from .config import Tolerances
from .errors import InvalidParameterError, InvalidProfileError
from .geometry import DOWN, UP, Vec2, Vec3, cross2, ensure_ccw, profile_tangent, tangent_normal, v_norm
from .mesh import Mesh, log_summary

logger = logging.getLogger(__name__)


class ProfileKind(Enum):
    OPEN = "open"
    CLOSED = "closed"


@dataclass
class SpiralParams:
    turns: int = 3
    pitch: float = 0.35


@dataclass
class RevolutionParams:
    radial_segments: int = 24
    close_top: bool = True
    close_bottom: bool = True
    kind: ProfileKind = ProfileKind.OPEN
    spiral: Optional[SpiralParams] = None
    pivot_y: float = 0.0
    flip_y: bool = False
    flip_z: bool = False
    name: str = "Revolution"

    @classmethod
    def default(cls) -> "RevolutionParams":
        return cls()

    @property
    def closed(self) -> bool:
        return self.kind is ProfileKind.CLOSED


# -----------------------------
# Validation & profile framing
# -----------------------------

def _validate(profile: Sequence[Vec2], params: RevolutionParams) -> List[Vec2]:
    pts = [(float(x), float(y)) for x, y in profile]
    if len(pts) < 2:
        raise InvalidProfileError(f"profile needs at least 2 points, got {len(pts)}")
    if params.closed and len(pts) < 3:
        raise InvalidProfileError(f"closed profile needs at least 3 points, got {len(pts)}")
    for i, (r, _) in enumerate(pts):
        if r < 0.0:
            raise InvalidProfileError(f"profile point {i} has negative radius {r}")
    if params.radial_segments < 3:
        raise InvalidParameterError(f"radial_segments must be >= 3, got {params.radial_segments}")
    if params.spiral is not None and params.spiral.turns < 1:
        raise InvalidParameterError(f"spiral turns must be >= 1, got {params.spiral.turns}")
    if params.closed:
        pts = ensure_ccw(pts)
    return pts


def _height_frame(pts: Sequence[Vec2], pivot_y: float) -> Tuple[float, float, float]:
    """(min_y, height, pivot offset) for UVs and vertical placement."""
    min_y = min(p[1] for p in pts)
    max_y = max(p[1] for p in pts)
    height = max_y - min_y
    if height < Tolerances.MIN_HEIGHT:
        height = 1.0
    return min_y, height, pivot_y * height + (min_y + max_y) * 0.5


def _ring_normal(n2: Vec2, c: float, s: float) -> Vec3:
    return v_norm((c * n2[0], n2[1], s * n2[0]))


def _on_axis(radius: float) -> bool:
    return radius <= Tolerances.DUPLICATE_POINT


# -----------------------------
# Simple revolution
# -----------------------------

def _revolve(mesh: Mesh, pts: List[Vec2], params: RevolutionParams) -> None:
    segs = params.radial_segments
    closed = params.closed
    n = len(pts)
    cols = segs + 1
    min_y, height, pivot = _height_frame(pts, params.pivot_y)
    step = 2.0 * math.pi / segs

    for j, (radius, y) in enumerate(pts):
        n2 = tangent_normal(profile_tangent(pts, j, closed))
        v = (y - min_y) / height
        for r in range(cols):
            a = r * step
            c, s = math.cos(a), math.sin(a)
            mesh.add_vertex((c * radius, y - pivot, s * radius), (r / segs, v), _ring_normal(n2, c, s))

    rows = n if closed else n - 1
    for j in range(rows):
        k = (j + 1) % n
        low, high = _on_axis(pts[j][0]), _on_axis(pts[k][0])
        if low and high:
            continue
        for r in range(segs):
            i0 = j * cols + r
            i1 = i0 + 1
            i2 = k * cols + r + 1
            i3 = k * cols + r
            if low:
                mesh.add_triangle(i0, i3, i2)
            elif high:
                mesh.add_triangle(i0, i3, i1)
            else:
                mesh.add_quad(i0, i3, i2, i1)

    if closed:
        return
    if params.close_top and pts[-1][0] > Tolerances.CAP_RADIUS:
        _flat_cap(mesh, pts[-1], pivot, segs, UP)
    if params.close_bottom and pts[0][0] > Tolerances.CAP_RADIUS:
        _flat_cap(mesh, pts[0], pivot, segs, DOWN)


def _flat_cap(mesh: Mesh, end: Vec2, pivot: float, segs: int, normal: Vec3) -> None:
    """Fan an end ring closed with its own hard-edged vertices."""
    radius, y = end
    y -= pivot
    center = mesh.add_vertex((0.0, y, 0.0), (0.5, 0.5), normal)
    ring: List[int] = []
    for r in range(segs + 1):
        a = r * 2.0 * math.pi / segs
        c, s = math.cos(a), math.sin(a)
        ring.append(mesh.add_vertex((c * radius, y, s * radius), (0.5 + 0.5 * c, 0.5 + 0.5 * s), normal))
    up = normal[1] > 0.0
    for r in range(segs):
        if up:
            mesh.add_triangle(center, ring[r + 1], ring[r])
        else:
            mesh.add_triangle(center, ring[r], ring[r + 1])


# -----------------------------
# Spiral sweep
# -----------------------------

def _spiral(mesh: Mesh, pts: List[Vec2], params: RevolutionParams, spiral: SpiralParams) -> None:
    segs = params.radial_segments
    closed = params.closed
    n = len(pts)
    total = segs * spiral.turns
    _, _, pivot = _height_frame(pts, params.pivot_y)
    step = 2.0 * math.pi / segs
    normals2 = [tangent_normal(profile_tangent(pts, j, closed)) for j in range(n)]

    for r in range(total + 1):
        a = r * step
        c, s = math.cos(a), math.sin(a)
        rise = r * spiral.pitch / segs
        for j, (radius, y) in enumerate(pts):
            mesh.add_vertex((c * radius, y + rise - pivot, s * radius),
                            (r / total, j / (n - 1)),
                            _ring_normal(normals2[j], c, s))

    rows = n if closed else n - 1
    for r in range(total):
        for j in range(rows):
            k = (j + 1) % n
            i0 = r * n + j
            i1 = r * n + k
            i2 = (r + 1) * n + k
            i3 = (r + 1) * n + j
            mesh.add_quad(i0, i1, i2, i3)

    if params.close_bottom and pts[0][0] > Tolerances.CAP_RADIUS:
        _section_cap(mesh, pts, closed, 0.0, -pivot, False)
    if params.close_top and pts[-1][0] > Tolerances.CAP_RADIUS:
        _section_cap(mesh, pts, closed, total * step, total * spiral.pitch / segs - pivot, True)


def _section_cap(mesh: Mesh, pts: List[Vec2], closed: bool, angle: float,
                 lift: float, forward: bool) -> None:
    """
    Close one end of a spiral with a fan around the rotated profile centre.

    The cross-section lies in the vertical plane at ``angle``; its normal is the
    horizontal sweep tangent, pointing forward at the end and backward at the
    start. Each fan triangle is wound from its own 2D orientation so concave
    sections still face the right way.
    """
    c, s = math.cos(angle), math.sin(angle)
    tangent = (-s, 0.0, c)
    normal = tangent if forward else (s, 0.0, -c)

    xs = [p[0] for p in pts]
    ys = [p[1] for p in pts]
    center2 = (sum(xs) / len(xs), (min(ys) + max(ys)) * 0.5)
    w = max(max(xs) - min(xs), Tolerances.MIN_HEIGHT)
    h = max(max(ys) - min(ys), Tolerances.MIN_HEIGHT)

    def add(p: Vec2) -> int:
        uv = ((p[0] - min(xs)) / w, (p[1] - min(ys)) / h)
        return mesh.add_vertex((c * p[0], p[1] + lift, s * p[0]), uv, normal)

    center = add(center2)
    ring = [add(p) for p in pts]
    n = len(pts)
    edges = n if closed else n - 1
    for j in range(edges):
        k = (j + 1) % n
        area2 = cross2(center2, pts[j], pts[k])
        if abs(area2) * 0.5 <= Tolerances.DEGENERATE_AREA:
            continue
        # profile (x, y) maps to (radial, up), whose cross product is the forward tangent
        if (area2 > 0.0) == forward:
            mesh.add_triangle(center, ring[j], ring[k])
        else:
            mesh.add_triangle(center, ring[k], ring[j])


# -----------------------------
# Entry point
# -----------------------------

def generate_revolution(profile: Sequence[Vec2], params: Optional[RevolutionParams] = None,
                        **overrides) -> Mesh:
    """
    Sweep ``profile`` around the Y axis.

    ``params`` defaults to ``RevolutionParams()``; keyword arguments override
    single fields, e.g. ``generate_revolution(pts, radial_segments=8)``.
    """
    if params is None:
        params = RevolutionParams(**overrides)
    elif overrides:
        params = dataclasses.replace(params, **overrides)

    pts = _validate(profile, params)
    mesh = Mesh(name=params.name)
    if params.spiral is not None:
        _spiral(mesh, pts, params, params.spiral)
    else:
        _revolve(mesh, pts, params)
    mesh.flip(params.flip_y, params.flip_z)
    log_summary(mesh)
    return mesh
