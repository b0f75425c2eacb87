"""
Plain-text loop and profile files.

Loop files hold one point per line, blank lines between loops:

    # OUTER
    -1,-1
    1,-1
    1,1
    -1,1

    # HOLE
    -0.3 -0.3
    ...

Values may be separated by commas, tabs, semicolons or spaces. ``# OUTER`` and
``# HOLE`` tag the next block, any other ``#`` line is a comment. A loop that
repeats its first point at the end loses the duplicate. Without any hole tag,
every loop after the first is taken as a hole.

Profile files carry ``$key=value`` settings before the ``x,y`` rows:

    $radialSegments=32
    $closeLoop=false
    X,Y
    0.3,0.0
    0.5,0.2
"""
from __future__ import annotations

import dataclasses
import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from .config import Tolerances
from .errors import InvalidProfileError
from .extrusion import Loop2D, LoopRole
from .geometry import Vec2, p_dist
from .mesh import Mesh
from .revolution import ProfileKind, RevolutionParams, SpiralParams, generate_revolution

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[,\t; ]+")


def _parse_point(line: str) -> Optional[Vec2]:
    tokens = [t for t in _SEPARATORS.split(line) if t]
    if len(tokens) < 2:
        return None
    try:
        return float(tokens[0]), float(tokens[1])
    except ValueError:
        return None


# -----------------------------
# Loops
# -----------------------------

def parse_loops(lines: Iterable[str]) -> List[Loop2D]:
    loops: List[Loop2D] = []
    current: Optional[List[Vec2]] = None
    role = LoopRole.OUTER
    next_role = LoopRole.OUTER
    tagged_hole = False

    def close() -> None:
        nonlocal current
        if current is not None:
            if len(current) >= 3:
                loops.append(Loop2D(current, role))
            else:
                logger.warning("discarding loop with %d points", len(current))
        current = None

    for lineno, raw in enumerate(lines, 1):
        line = raw.strip()
        if not line:
            close()
            continue
        if line.startswith("#"):
            word = line[1:].strip().upper()
            if word in ("OUTER", "HOLE"):
                close()
                next_role = LoopRole.HOLE if word == "HOLE" else LoopRole.OUTER
                tagged_hole = tagged_hole or word == "HOLE"
            continue

        pt = _parse_point(line)
        if pt is None:
            logger.warning("line %d: cannot read a point from %r", lineno, line)
            continue
        if current is None:
            current = []
            role = next_role
            next_role = LoopRole.OUTER
        current.append(pt)
    close()

    for loop in loops:
        pts = loop.points
        if len(pts) >= 4 and p_dist(pts[0], pts[-1]) < Tolerances.DUPLICATE_POINT:
            pts.pop()

    if not tagged_hole:
        for loop in loops[1:]:
            loop.role = LoopRole.HOLE
    return loops


def load_loops(path: str) -> List[Loop2D]:
    with open(path, "r", encoding="utf-8") as f:
        return parse_loops(f)


# -----------------------------
# Revolution profiles
# -----------------------------

def _parse_bool(value: str) -> bool:
    v = value.strip().lower()
    if v == "true":
        return True
    if v == "false":
        return False
    raise ValueError(f"not a boolean: {value!r}")


# key (lower case) -> (settings field, converter)
_PROFILE_KEYS = {
    "radialsegments": ("radial_segments", int),
    "closetop": ("close_top", _parse_bool),
    "closebottom": ("close_bottom", _parse_bool),
    "closeloop": ("close_loop", _parse_bool),
    "spiral": ("spiral", _parse_bool),
    "pivoty": ("pivot_y", float),
    "spiralturns": ("spiral_turns", int),
    "spiralpitch": ("spiral_pitch", float),
    "flipy": ("flip_y", _parse_bool),
    "flipz": ("flip_z", _parse_bool),
}


@dataclass
class ProfileDocument:
    points: List[Vec2] = field(default_factory=list)
    params: RevolutionParams = field(default_factory=RevolutionParams)

    def generate(self) -> Mesh:
        return generate_revolution(self.points, self.params)


def _read_setting(line: str, settings: dict, lineno: int) -> None:
    key, sep, value = line.partition("=")
    if not sep:
        logger.warning("line %d: ignoring setting without '=': %r", lineno, line)
        return
    entry = _PROFILE_KEYS.get(key.strip().lower())
    if entry is None:
        logger.warning("line %d: unknown setting %r", lineno, key.strip())
        return
    name, convert = entry
    try:
        settings[name] = convert(value.strip())
    except ValueError:
        logger.warning("line %d: bad value for %s: %r", lineno, key.strip(), value.strip())


def parse_profile(lines: Iterable[str], base: Optional[RevolutionParams] = None) -> ProfileDocument:
    """Read a profile file; settings not present keep the values of ``base``."""
    base = base or RevolutionParams()
    spiral = base.spiral or SpiralParams()
    settings = {
        "radial_segments": base.radial_segments,
        "close_top": base.close_top,
        "close_bottom": base.close_bottom,
        "close_loop": base.closed,
        "spiral": base.spiral is not None,
        "pivot_y": base.pivot_y,
        "spiral_turns": spiral.turns,
        "spiral_pitch": spiral.pitch,
        "flip_y": base.flip_y,
        "flip_z": base.flip_z,
    }
    points: List[Vec2] = []

    for lineno, raw in enumerate(lines, 1):
        line = raw.strip()
        if not line or line.startswith("#") or line.startswith("//"):
            continue
        if line.startswith("$"):
            _read_setting(line[1:].strip(), settings, lineno)
            continue
        lower = line.lower()
        if "x" in lower and "y" in lower:
            # column header
            continue
        pt = _parse_point(line)
        if pt is None:
            logger.warning("line %d: cannot read a point from %r", lineno, line)
            continue
        points.append(pt)

    if len(points) < 2:
        raise InvalidProfileError(f"profile file needs at least 2 points, got {len(points)}")

    params = dataclasses.replace(
        base,
        radial_segments=settings["radial_segments"],
        close_top=settings["close_top"],
        close_bottom=settings["close_bottom"],
        kind=ProfileKind.CLOSED if settings["close_loop"] else ProfileKind.OPEN,
        spiral=SpiralParams(settings["spiral_turns"], settings["spiral_pitch"]) if settings["spiral"] else None,
        pivot_y=settings["pivot_y"],
        flip_y=settings["flip_y"],
        flip_z=settings["flip_z"],
    )
    return ProfileDocument(points, params)


def load_profile(path: str, base: Optional[RevolutionParams] = None) -> ProfileDocument:
    with open(path, "r", encoding="utf-8") as f:
        return parse_profile(f, base)
