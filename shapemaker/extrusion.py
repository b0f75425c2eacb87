"""
Extrusion of a polygon-with-holes into a solid, with optional edge treatment.

The loop set (one outer loop, any number of holes) is moved into place by
``scale``/``offset``/``flip_y`` and every loop is turned counter-clockwise.
From there:

* thickness 0 gives a single face at z = 0 facing -Z;
* otherwise the front face sits at z = -thickness/2 (facing -Z), the back face
  at +thickness/2 (facing +Z), and side walls join them loop by loop.

Each face may carry an ``EdgeTreatment``. With ``segments == 1`` the edge is a
flat bevel, with more it is a quarter round made of that many quads. The mode
decides which contour gives way:

    INWARD        face shrinks by ``size``, side wall stays on the outline
    OUTWARD       face keeps the outline, side wall moves out by ``size``
    LEGACY_BEVEL  face shrinks, a flat ring in the face plane joins it to a
                  full-depth side wall

Hole loops offset the other way (into the material) and their side walls and
strips are wound the other way round, so inner surfaces face into the hole.
"""
from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from .config import Tolerances
from .errors import InvalidEdgeTreatmentError, InvalidLoopSetError, InvalidParameterError, TriangulationError
from .geometry import BACK, FRONT, Vec2, Vec3, cross2, ensure_ccw, p_add, p_len, p_norm, p_scale, p_sub, v_neg, v_norm
from .mesh import Mesh, log_summary
from .rounding import add_edge_strip
from .triangulate import triangulate, validate_loops

logger = logging.getLogger(__name__)


class LoopRole(Enum):
    OUTER = "outer"
    HOLE = "hole"


@dataclass
class Loop2D:
    points: List[Vec2]
    role: LoopRole = LoopRole.OUTER

    @property
    def is_hole(self) -> bool:
        return self.role is LoopRole.HOLE


class EdgeMode(Enum):
    INWARD = "inward"
    OUTWARD = "outward"
    LEGACY_BEVEL = "legacy"


@dataclass
class EdgeTreatment:
    segments: int = 0
    size: float = 0.1
    mode: EdgeMode = EdgeMode.INWARD

    @property
    def active(self) -> bool:
        return self.segments > 0 and self.size > Tolerances.EDGE_SIZE

    @property
    def depth(self) -> float:
        """How far the treatment eats into the thickness."""
        if not self.active or self.mode is EdgeMode.LEGACY_BEVEL:
            return 0.0
        return self.size


@dataclass
class ExtrusionParams:
    scale: float = 1.0
    offset: Vec2 = (0.0, 0.0)
    flip_y: bool = False
    thickness: float = 0.0
    front: EdgeTreatment = field(default_factory=EdgeTreatment)
    back: EdgeTreatment = field(default_factory=EdgeTreatment)
    name: str = "Profile2DExtrude"


# -----------------------------
# Input preparation
# -----------------------------

def _validate_params(params: ExtrusionParams) -> None:
    if params.thickness < 0.0:
        raise InvalidParameterError(f"thickness must be >= 0, got {params.thickness}")
    if params.scale == 0.0:
        raise InvalidParameterError("scale must be non-zero")
    for label, t in (("front", params.front), ("back", params.back)):
        if t.segments < 0:
            raise InvalidParameterError(f"{label} segments must be >= 0, got {t.segments}")
        if t.size < 0.0:
            raise InvalidParameterError(f"{label} size must be >= 0, got {t.size}")


def prepare_loops(loops: Sequence[Loop2D], params: ExtrusionParams) -> List[Loop2D]:
    """Transformed, counter-clockwise copies of the loops, outer loop first."""
    outers = [l for l in loops if not l.is_hole]
    if not outers:
        raise InvalidLoopSetError("no outer loop in loop set")
    if len(outers) > 1:
        raise InvalidLoopSetError(f"expected exactly one outer loop, got {len(outers)}")
    if len(outers[0].points) < 3:
        raise InvalidLoopSetError(f"outer loop needs at least 3 points, got {len(outers[0].points)}")

    ox, oy = params.offset
    s = params.scale

    def place(loop: Loop2D) -> Loop2D:
        pts = []
        for x, y in loop.points:
            y = -y if params.flip_y else y
            pts.append((float(x) * s + ox, float(y) * s + oy))
        return Loop2D(ensure_ccw(pts), loop.role)

    result = [place(outers[0])]
    for i, loop in enumerate(loops):
        if not loop.is_hole:
            continue
        if len(loop.points) < 3:
            logger.warning("skipping hole %d with %d points", i, len(loop.points))
            continue
        result.append(place(loop))
    return result


# -----------------------------
# Contour offsets
# -----------------------------

def bisector_offset(points: Sequence[Vec2], distance: float, hole: bool) -> List[Vec2]:
    """
    Move every vertex along the averaged normal of its two edges.

    Counter-clockwise outer loops move inward, holes move outward (into the
    material). A negative distance moves the other way.
    """
    n = len(points)
    sign = -1.0 if hole else 1.0
    out: List[Vec2] = []
    for i, p in enumerate(points):
        e1 = p_norm(p_sub(p, points[i - 1]))
        e2 = p_norm(p_sub(points[(i + 1) % n], p))
        n1 = (-e1[1], e1[0])
        n2 = (-e2[1], e2[0])
        avg = p_norm(p_add(n1, n2))
        if avg == (0.0, 0.0):
            # edges fold back on each other
            avg = n1
        out.append(p_add(p, p_scale(avg, distance * sign)))
    return out


def legacy_bevel_offset(points: Sequence[Vec2], distance: float, hole: bool) -> List[Vec2]:
    """
    Offset along the sum of the directions to both neighbours.

    At reflex corners that sum points out of the material, so it is reversed
    there.
    """
    n = len(points)
    sign = -1.0 if hole else 1.0
    out: List[Vec2] = []
    for i, p in enumerate(points):
        to_prev = p_norm(p_sub(points[i - 1], p))
        to_next = p_norm(p_sub(points[(i + 1) % n], p))
        bisector = p_add(to_prev, to_next)
        if p_len(bisector) < 1e-3:
            # straight run: perpendicular to the edge
            bisector = (-to_next[1], to_next[0])
        elif cross2(points[i - 1], p, points[(i + 1) % n]) < 0.0:
            bisector = (-bisector[0], -bisector[1])
        out.append(p_add(p, p_scale(p_norm(bisector), distance * sign)))
    return out


def _check_offset(base: Sequence[Loop2D], moved: Sequence[List[Vec2]], label: str) -> None:
    for li, (loop, pts) in enumerate(zip(base, moved)):
        n = len(pts)
        for i in range(n):
            k = (i + 1) % n
            e0 = p_sub(loop.points[k], loop.points[i])
            e1 = p_sub(pts[k], pts[i])
            if e0[0] * e1[0] + e0[1] * e1[1] <= 0.0:
                raise InvalidEdgeTreatmentError(
                    f"{label} edge treatment folds edge {i} of loop {li}; reduce its size")
    try:
        validate_loops(moved[0], moved[1:])
    except TriangulationError as exc:
        raise InvalidEdgeTreatmentError(f"{label} edge treatment makes contours cross: {exc}") from exc


@dataclass
class _FacePlan:
    """Where one face sits and where the side wall meets it, per loop."""
    face: List[List[Vec2]]
    side: List[List[Vec2]]
    treatment: EdgeTreatment


def _plan_face(loops: List[Loop2D], treatment: EdgeTreatment, label: str) -> _FacePlan:
    base = [list(l.points) for l in loops]
    if not treatment.active:
        return _FacePlan(base, base, treatment)

    size = treatment.size
    if treatment.mode is EdgeMode.INWARD:
        face = [bisector_offset(l.points, size, l.is_hole) for l in loops]
        _check_offset(loops, face, label)
        return _FacePlan(face, base, treatment)
    if treatment.mode is EdgeMode.OUTWARD:
        side = [bisector_offset(l.points, -size, l.is_hole) for l in loops]
        _check_offset(loops, side, label)
        return _FacePlan(base, side, treatment)
    face = [legacy_bevel_offset(l.points, size, l.is_hole) for l in loops]
    _check_offset(loops, face, label)
    return _FacePlan(face, base, treatment)


# -----------------------------
# Emission
# -----------------------------

def _flat_face(mesh: Mesh, rings: List[List[Vec2]], z: float, normal: Vec3) -> None:
    """Triangulate ``rings`` (outer first) into a face at depth z."""
    tri = triangulate(rings[0], rings[1:])
    index: Dict[int, int] = {}

    def vid(i: int) -> int:
        if i not in index:
            x, y = tri.points[i]
            index[i] = mesh.add_vertex((x, y, z), (x, y), normal)
        return index[i]

    facing_back = normal[2] > 0.0
    for a, b, c in tri.triangles:
        ccw = cross2(tri.points[a], tri.points[b], tri.points[c]) > 0.0
        if ccw != facing_back:
            b, c = c, b
        mesh.add_triangle(vid(a), vid(b), vid(c))


def _side_wall(mesh: Mesh, front: Tuple[Vec2, Vec2], back: Tuple[Vec2, Vec2],
               front_z: float, back_z: float, normal: Vec3, hole: bool) -> None:
    ids = [
        mesh.add_vertex((front[0][0], front[0][1], front_z), (0.0, 0.0), normal),
        mesh.add_vertex((front[1][0], front[1][1], front_z), (1.0, 0.0), normal),
        mesh.add_vertex((back[1][0], back[1][1], back_z), (1.0, 1.0), normal),
        mesh.add_vertex((back[0][0], back[0][1], back_z), (0.0, 1.0), normal),
    ]
    if hole:
        mesh.add_quad(ids[0], ids[3], ids[2], ids[1])
    else:
        mesh.add_quad(ids[0], ids[1], ids[2], ids[3])


def _solid(mesh: Mesh, loops: List[Loop2D], params: ExtrusionParams) -> None:
    half = params.thickness * 0.5
    front = _plan_face(loops, params.front, "front")
    back = _plan_face(loops, params.back, "back")
    if params.front.depth + params.back.depth > params.thickness:
        raise InvalidEdgeTreatmentError(
            f"edge treatments ({params.front.depth} + {params.back.depth}) exceed thickness {params.thickness}")

    _flat_face(mesh, front.face, -half, FRONT)
    _flat_face(mesh, back.face, half, BACK)

    front_z = -half + params.front.depth
    back_z = half - params.back.depth
    for li, loop in enumerate(loops):
        hole = loop.is_hole
        pts = loop.points
        n = len(pts)
        for i in range(n):
            k = (i + 1) % n
            ex, ey = p_sub(pts[k], pts[i])
            side_n = v_norm((ey, -ex, 0.0))
            if hole:
                side_n = v_neg(side_n)

            ff = (front.face[li][i], front.face[li][k])
            fs = (front.side[li][i], front.side[li][k])
            bf = (back.face[li][i], back.face[li][k])
            bs = (back.side[li][i], back.side[li][k])

            if front.treatment.active:
                if front.treatment.mode is EdgeMode.LEGACY_BEVEL:
                    add_edge_strip(mesh, ff, fs, -half, -half, FRONT, side_n, 1, False, hole)
                else:
                    add_edge_strip(mesh, ff, fs, -half, front_z, FRONT, side_n,
                                   front.treatment.segments, True, hole)

            if back_z > front_z:
                _side_wall(mesh, fs, bs, front_z, back_z, side_n, hole)

            if back.treatment.active:
                if back.treatment.mode is EdgeMode.LEGACY_BEVEL:
                    add_edge_strip(mesh, bs, bf, half, half, side_n, BACK, 1, False, hole)
                else:
                    add_edge_strip(mesh, bs, bf, back_z, half, side_n, BACK,
                                   back.treatment.segments, False, hole)


def generate_loop_extrusion(loops: Sequence[Loop2D], params: Optional[ExtrusionParams] = None,
                            **overrides) -> Mesh:
    """
    Build a flat face or an extruded solid from one outer loop and its holes.

    Keyword arguments override single ``ExtrusionParams`` fields, e.g.
    ``generate_loop_extrusion(loops, thickness=0.2, front=EdgeTreatment(4, 0.05))``.
    """
    if params is None:
        params = ExtrusionParams(**overrides)
    elif overrides:
        params = dataclasses.replace(params, **overrides)

    _validate_params(params)
    placed = prepare_loops(loops, params)
    validate_loops(placed[0].points, [l.points for l in placed[1:]])

    mesh = Mesh(name=params.name)
    if params.thickness <= Tolerances.FLAT_THICKNESS:
        _flat_face(mesh, [l.points for l in placed], 0.0, FRONT)
    else:
        _solid(mesh, placed, params)
    log_summary(mesh)
    return mesh
