"""
Ready-made revolution profiles.

Every preset returns plain ``(radius, height)`` points; ``create_preset`` also
tells you whether the profile is a closed cross-section:

    pts, kind = create_preset("donut", major=0.6, minor=0.15)
    mesh = generate_revolution(pts, kind=kind)
"""
from __future__ import annotations

import math
from typing import Callable, Dict, List, Tuple

from .config import Tolerances
from .errors import InvalidParameterError
from .geometry import Vec2
from .revolution import ProfileKind
from .rounding import corner_arc


def default() -> List[Vec2]:
    return [(0.3, 0.0), (0.5, 0.2), (0.5, 0.6), (0.35, 0.8), (0.4, 1.0)]


def donut(major: float = 0.5, minor: float = 0.2, tube_segments: int = 12) -> List[Vec2]:
    """Circle of radius ``minor`` centred ``major`` away from the axis, resting on y = 0.1."""
    if tube_segments < 3:
        raise InvalidParameterError(f"tube_segments must be >= 3, got {tube_segments}")
    if minor <= 0.0 or minor > major:
        raise InvalidParameterError(f"donut needs 0 < minor <= major, got minor={minor} major={major}")
    cy = minor + 0.1
    pts: List[Vec2] = []
    for i in range(tube_segments):
        a = i * 2.0 * math.pi / tube_segments
        pts.append((major + minor * math.cos(a), cy + minor * math.sin(a)))
    return pts


def rounded_pipe(inner_radius: float = 0.3, outer_radius: float = 0.5, height: float = 1.0,
                 inner_corner_radius: float = 0.05, outer_corner_radius: float = 0.05,
                 inner_corner_segments: int = 4, outer_corner_segments: int = 4) -> List[Vec2]:
    """Wall cross-section of a tube, centred on y = 0, with rounded corners."""
    if not 0.0 <= inner_radius < outer_radius:
        raise InvalidParameterError(
            f"pipe needs 0 <= inner_radius < outer_radius, got {inner_radius}, {outer_radius}")
    wall = outer_radius - inner_radius
    ir = inner_corner_radius
    orad = outer_corner_radius
    if ir + orad >= wall or 2.0 * max(ir, orad) >= height:
        raise InvalidParameterError("corner radii do not fit the pipe wall")

    hh = height * 0.5

    def corner(c: Vec2, back: Vec2, ahead: Vec2, radius: float, segments: int) -> List[Vec2]:
        if radius <= Tolerances.CAP_RADIUS or segments <= 0:
            return [c]
        start = (c[0] + back[0] * radius, c[1] + back[1] * radius)
        end = (c[0] + ahead[0] * radius, c[1] + ahead[1] * radius)
        return corner_arc(start, c, end, segments)

    # counter-clockwise: inner bottom, outer bottom, outer top, inner top
    pts: List[Vec2] = []
    pts += corner((inner_radius, -hh), (0.0, 1.0), (1.0, 0.0), ir, inner_corner_segments)
    pts += corner((outer_radius, -hh), (-1.0, 0.0), (0.0, 1.0), orad, outer_corner_segments)
    pts += corner((outer_radius, hh), (0.0, -1.0), (-1.0, 0.0), orad, outer_corner_segments)
    pts += corner((inner_radius, hh), (1.0, 0.0), (0.0, -1.0), ir, inner_corner_segments)
    return pts


def vase() -> List[Vec2]:
    return [(0.3, 0.0), (0.5, 0.1), (0.6, 0.3), (0.5, 0.6), (0.3, 0.8), (0.25, 0.9), (0.3, 1.0)]


def goblet() -> List[Vec2]:
    return [(0.3, 0.0), (0.35, 0.02), (0.08, 0.1), (0.08, 0.5), (0.15, 0.55), (0.4, 0.7), (0.45, 1.0)]


def bell() -> List[Vec2]:
    return [(0.5, 0.0), (0.45, 0.1), (0.35, 0.3), (0.2, 0.6), (0.1, 0.85), (0.05, 1.0)]


def hourglass() -> List[Vec2]:
    return [(0.4, 0.0), (0.35, 0.15), (0.15, 0.4), (0.1, 0.5), (0.15, 0.6), (0.35, 0.85), (0.4, 1.0)]


PRESETS: Dict[str, Tuple[Callable[..., List[Vec2]], ProfileKind]] = {
    "default": (default, ProfileKind.OPEN),
    "donut": (donut, ProfileKind.CLOSED),
    "rounded_pipe": (rounded_pipe, ProfileKind.CLOSED),
    "vase": (vase, ProfileKind.OPEN),
    "goblet": (goblet, ProfileKind.OPEN),
    "bell": (bell, ProfileKind.OPEN),
    "hourglass": (hourglass, ProfileKind.OPEN),
}


def create_preset(name: str, **kw) -> Tuple[List[Vec2], ProfileKind]:
    try:
        build, kind = PRESETS[name.lower()]
    except KeyError:
        raise InvalidParameterError(
            f"unknown preset {name!r}, expected one of {', '.join(sorted(PRESETS))}") from None
    return build(**kw), kind
