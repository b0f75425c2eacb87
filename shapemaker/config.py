"""
Central tolerances and small runtime knobs shared by the generators.

Usage:
    from shapemaker.config import Tolerances

    if radius > Tolerances.CAP_RADIUS:
        ...
"""
from __future__ import annotations

import logging
from typing import Union


class Tolerances:
    """Numeric thresholds used by the kernel (all in model units)."""

    # an end ring narrower than this gets no cap fan
    CAP_RADIUS = 1e-3

    # thickness at or below this produces a single flat face
    FLAT_THICKNESS = 1e-3

    # edge treatments smaller than this are ignored
    EDGE_SIZE = 1e-3

    # profiles flatter than this use a unit height for UVs and pivoting
    MIN_HEIGHT = 1e-3

    # closing point of a loop is dropped when it sits this close to the first one
    DUPLICATE_POINT = 1e-6

    # triangles below this area are not emitted
    DEGENERATE_AREA = 1e-12

    # relative mismatch allowed between polygon area and triangulated area
    TRIANGULATION_AREA = 1e-6


class Jitter:
    """Deterministic sub-pixel jitter applied to triangulator input."""

    SEED = 12345
    MULTIPLIER = 1103515245
    INCREMENT = 12345
    MASK = 0x7FFFFFFF
    EPSILON = 1e-5


def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    """Install a basic stream handler for command line use."""
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
