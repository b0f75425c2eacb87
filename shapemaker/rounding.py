"""
Quarter-round blends between two contours.

A blend walks from a start contour to an end contour while moving between two
depths. The planar and depth weights come from the same angle swept from 0 to
90 degrees, so the strip leaves one surface tangentially and meets the other
one tangentially:

    planar, depth = blend_factors(t, concave)

* convex:  planar = 1 - cos(a), depth = sin(a)   (depth moves first)
* concave: planar = sin(a),     depth = 1 - cos(a) (planar moves first)

The same blend is used for extruded edge strips (``add_edge_strip``) and for
rounding the corners of revolution profiles (``corner_arc``).
"""
from __future__ import annotations

import math
from typing import List, Tuple

from .geometry import Vec2, Vec3, p_add, p_lerp, p_scale, p_sub, v_add, v_norm, v_slerp
from .mesh import Mesh

Sample = Tuple[Vec2, float]


def blend_factors(t: float, concave: bool) -> Tuple[float, float]:
    """(planar, depth) weights at parameter t in [0, 1]."""
    # pinned so both ends land exactly on the contours
    if t <= 0.0:
        return 0.0, 0.0
    if t >= 1.0:
        return 1.0, 1.0
    angle = t * math.pi * 0.5
    if concave:
        return math.sin(angle), 1.0 - math.cos(angle)
    return 1.0 - math.cos(angle), math.sin(angle)


def blend_samples(start: Vec2, end: Vec2, start_z: float, end_z: float,
                  segments: int, concave: bool) -> List[Sample]:
    """``segments + 1`` (point, depth) samples running from start to end."""
    if segments <= 1:
        return [(start, start_z), (end, end_z)]
    out: List[Sample] = []
    for s in range(segments + 1):
        planar, depth = blend_factors(s / segments, concave)
        out.append((p_lerp(start, end, planar), start_z * (1.0 - depth) + end_z * depth))
    return out


def add_edge_strip(mesh: Mesh, start: Tuple[Vec2, Vec2], end: Tuple[Vec2, Vec2],
                   start_z: float, end_z: float, start_normal: Vec3, end_normal: Vec3,
                   segments: int, concave: bool, flip: bool = False) -> List[int]:
    """
    Emit the strip joining edge ``start`` (at start_z) to edge ``end`` (at end_z).

    ``start`` and ``end`` are the two endpoints of the same contour edge on each
    side of the strip. With one segment a single bevel quad is emitted carrying
    the 45 degree blend of both normals; with more, one quad per step, normals
    slerped from start_normal to end_normal. ``flip`` reverses the winding
    (hole loops). Returns the indices of the new faces.
    """
    if segments <= 0:
        return []

    faces: List[int] = []
    if segments == 1:
        n = v_norm(v_add(start_normal, end_normal))
        corners = [
            (start[0], start_z, (0.0, 0.0)),
            (start[1], start_z, (1.0, 0.0)),
            (end[1], end_z, (1.0, 1.0)),
            (end[0], end_z, (0.0, 1.0)),
        ]
        ids = [mesh.add_vertex((p[0], p[1], z), uv, n) for p, z, uv in corners]
        faces.append(_add_quad(mesh, ids, flip))
        return faces

    rail0 = blend_samples(start[0], end[0], start_z, end_z, segments, concave)
    rail1 = blend_samples(start[1], end[1], start_z, end_z, segments, concave)
    for s in range(segments):
        t0 = s / segments
        t1 = (s + 1) / segments
        n0 = v_slerp(start_normal, end_normal, t0)
        n1 = v_slerp(start_normal, end_normal, t1)
        (a0, z0), (a1, z1) = rail0[s], rail0[s + 1]
        (b0, _), (b1, _) = rail1[s], rail1[s + 1]
        ids = [
            mesh.add_vertex((a0[0], a0[1], z0), (0.0, t0), n0),
            mesh.add_vertex((b0[0], b0[1], z0), (1.0, t0), n0),
            mesh.add_vertex((b1[0], b1[1], z1), (1.0, t1), n1),
            mesh.add_vertex((a1[0], a1[1], z1), (0.0, t1), n1),
        ]
        faces.append(_add_quad(mesh, ids, flip))
    return faces


def _add_quad(mesh: Mesh, ids: List[int], flip: bool) -> int:
    if flip:
        return mesh.add_quad(ids[0], ids[3], ids[2], ids[1])
    return mesh.add_quad(ids[0], ids[1], ids[2], ids[3])


def corner_arc(start: Vec2, corner: Vec2, end: Vec2, segments: int) -> List[Vec2]:
    """
    Round the polyline corner start -> corner -> end.

    ``start`` and ``end`` are the tangent points on the incoming and outgoing
    edges; the arc leaves along the incoming direction and arrives along the
    outgoing one. Zero segments keeps the sharp corner.
    """
    if segments <= 0:
        return [corner]
    incoming = p_sub(corner, start)
    outgoing = p_sub(end, corner)
    pts: List[Vec2] = []
    for s in range(segments + 1):
        along, across = blend_factors(s / segments, concave=True)
        pts.append(p_add(start, p_add(p_scale(incoming, along), p_scale(outgoing, across))))
    return pts
