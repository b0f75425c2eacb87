"""
Small tuple-based vector helpers shared by the generators.

Vectors are plain tuples so they hash, compare and copy for free. Only the
handful of operations the kernel needs are here; nothing allocates more than a
tuple.
"""
from __future__ import annotations

import math
from typing import List, Sequence, Tuple

Vec3 = Tuple[float, float, float]
Vec2 = Tuple[float, float]
Tri = Tuple[int, int, int]

UP: Vec3 = (0.0, 1.0, 0.0)
DOWN: Vec3 = (0.0, -1.0, 0.0)
FRONT: Vec3 = (0.0, 0.0, -1.0)
BACK: Vec3 = (0.0, 0.0, 1.0)

# -----------------------------
# 3D vectors
# -----------------------------

def v_add(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def v_sub(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def v_scale(a: Vec3, s: float) -> Vec3:
    return (a[0] * s, a[1] * s, a[2] * s)


def v_neg(a: Vec3) -> Vec3:
    return (-a[0], -a[1], -a[2])


def v_dot(a: Vec3, b: Vec3) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def v_cross(a: Vec3, b: Vec3) -> Vec3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def v_len(a: Vec3) -> float:
    return math.sqrt(v_dot(a, a))


def v_norm(a: Vec3) -> Vec3:
    l = v_len(a)
    if l == 0:
        return (0.0, 0.0, 0.0)
    return (a[0] / l, a[1] / l, a[2] / l)


def v_lerp(a: Vec3, b: Vec3, t: float) -> Vec3:
    s = 1.0 - t
    return (a[0] * s + b[0] * t, a[1] * s + b[1] * t, a[2] * s + b[2] * t)


def v_slerp(a: Vec3, b: Vec3, t: float) -> Vec3:
    """Spherical interpolation between two directions; result is unit length."""
    a = v_norm(a)
    b = v_norm(b)
    cos_angle = max(-1.0, min(1.0, v_dot(a, b)))
    angle = math.acos(cos_angle)
    sin_angle = math.sin(angle)
    if sin_angle < 1e-9:
        # parallel (or opposite) directions, nothing to arc around
        return v_norm(v_lerp(a, b, t))
    wa = math.sin((1.0 - t) * angle) / sin_angle
    wb = math.sin(t * angle) / sin_angle
    return v_norm(v_add(v_scale(a, wa), v_scale(b, wb)))


# -----------------------------
# 2D points
# -----------------------------

def p_add(a: Vec2, b: Vec2) -> Vec2:
    return (a[0] + b[0], a[1] + b[1])


def p_sub(a: Vec2, b: Vec2) -> Vec2:
    return (a[0] - b[0], a[1] - b[1])


def p_scale(a: Vec2, s: float) -> Vec2:
    return (a[0] * s, a[1] * s)


def p_len(a: Vec2) -> float:
    return math.hypot(a[0], a[1])


def p_norm(a: Vec2) -> Vec2:
    l = p_len(a)
    if l == 0:
        return (0.0, 0.0)
    return (a[0] / l, a[1] / l)


def p_lerp(a: Vec2, b: Vec2, t: float) -> Vec2:
    # weighted form so t == 0 and t == 1 land exactly on the endpoints
    s = 1.0 - t
    return (a[0] * s + b[0] * t, a[1] * s + b[1] * t)


def p_dist(a: Vec2, b: Vec2) -> float:
    return p_len(p_sub(a, b))


def tangent_normal(t: Vec2) -> Vec2:
    """Rotate a tangent 90 degrees clockwise: (tx, ty) -> (ty, -tx).

    For a counter-clockwise loop, or a revolution profile running bottom to top,
    this points out of the solid. Face winding in the generators is chosen to
    agree with it.
    """
    return (t[1], -t[0])


def profile_tangent(points: Sequence[Vec2], i: int, closed: bool) -> Vec2:
    """Unit tangent at points[i] by central difference.

    Open profiles fall back to one-sided differences at both ends; closed
    profiles wrap around.
    """
    n = len(points)
    if closed:
        t = p_sub(points[(i + 1) % n], points[(i - 1) % n])
    elif i == 0:
        t = p_sub(points[1], points[0])
    elif i == n - 1:
        t = p_sub(points[i], points[i - 1])
    else:
        t = p_sub(points[i + 1], points[i - 1])
    return p_norm(t)


# -----------------------------
# 2D polygons
# -----------------------------

def poly_area2(poly: Sequence[Vec2]) -> float:
    """Signed 2D polygon area * 2. CCW => positive."""
    s = 0.0
    n = len(poly)
    for i in range(n):
        x0, y0 = poly[i]
        x1, y1 = poly[(i + 1) % n]
        s += x0 * y1 - x1 * y0
    return s


def poly_area(poly: Sequence[Vec2]) -> float:
    return abs(poly_area2(poly)) * 0.5


def is_ccw(poly: Sequence[Vec2]) -> bool:
    return poly_area2(poly) > 0.0


def ensure_ccw(poly: Sequence[Vec2]) -> List[Vec2]:
    pts = list(poly)
    if poly_area2(pts) < 0.0:
        pts.reverse()
    return pts


def cross2(a: Vec2, b: Vec2, c: Vec2) -> float:
    """2D cross (b-a)x(c-a) z-component."""
    return (b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0])


def triangle_area(a: Vec3, b: Vec3, c: Vec3) -> float:
    return 0.5 * v_len(v_cross(v_sub(b, a), v_sub(c, a)))
