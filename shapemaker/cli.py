"""Command line front end: ``python -m shapemaker revolve|extrude ...``."""
from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from .config import configure_logging
from .csvio import load_loops, load_profile
from .errors import ShapeError
from .export import save_obj
from .extrusion import EdgeMode, EdgeTreatment, ExtrusionParams, generate_loop_extrusion
from .mesh import Mesh
from .profiles import PRESETS, create_preset
from .revolution import RevolutionParams, SpiralParams, generate_revolution

logger = logging.getLogger(__name__)

_DEF_HELP = """
Examples:
  python -m shapemaker revolve --preset vase --radial 48 --out vase.obj
  python -m shapemaker revolve --preset donut --spiral-turns 4 --spiral-pitch 0.3 --out coil.obj
  python -m shapemaker revolve --csv profile.csv --no-top --out cup.obj
  python -m shapemaker extrude --csv plate.csv --thickness 0.2 --out plate.obj
  python -m shapemaker extrude --csv plate.csv --thickness 0.4 --front-segments 4 --front-size 0.05 \\
      --back-segments 1 --back-size 0.05 --mode outward --smooth --out rounded.obj
"""

_MODES = {"inward": EdgeMode.INWARD, "outward": EdgeMode.OUTWARD, "legacy": EdgeMode.LEGACY_BEVEL}


def _parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="shapemaker", description="shapemaker: procedural solid mesh generator",
                                epilog=_DEF_HELP, formatter_class=argparse.RawTextHelpFormatter)
    p.add_argument("--log-level", default="WARNING", help="DEBUG, INFO, WARNING or ERROR")
    sub = p.add_subparsers(dest="command", required=True)

    rev = sub.add_parser("revolve", help="Sweep a profile around the Y axis")
    src = rev.add_mutually_exclusive_group()
    src.add_argument("--preset", choices=sorted(PRESETS), default="default")
    src.add_argument("--csv", help="Profile file with optional $key=value settings")
    rev.add_argument("--radial", type=int, help="Radial segments (default 24)")
    rev.add_argument("--spiral-turns", type=int, help="Sweep as a spiral with this many turns")
    rev.add_argument("--spiral-pitch", type=float, default=0.35)
    rev.add_argument("--no-top", action="store_true", help="Leave the top end open")
    rev.add_argument("--no-bottom", action="store_true", help="Leave the bottom end open")

    ext = sub.add_parser("extrude", help="Extrude outer/hole loops into a solid")
    ext.add_argument("--csv", required=True, help="Loop file (# OUTER / # HOLE blocks)")
    ext.add_argument("--thickness", type=float, default=0.0)
    ext.add_argument("--scale", type=float, default=1.0)
    ext.add_argument("--flip-y", action="store_true")
    ext.add_argument("--front-segments", type=int, default=0)
    ext.add_argument("--front-size", type=float, default=0.1)
    ext.add_argument("--back-segments", type=int, default=0)
    ext.add_argument("--back-size", type=float, default=0.1)
    ext.add_argument("--mode", choices=sorted(_MODES), default="inward")

    for sp in (rev, ext):
        sp.add_argument("--out", required=True, help="Output .obj path")
        sp.add_argument("--smooth", action="store_true", help="Recalculate smooth normals")
    return p


def _revolve(args: argparse.Namespace) -> Mesh:
    if args.csv:
        doc = load_profile(args.csv)
        points, params = doc.points, doc.params
    else:
        points, kind = create_preset(args.preset)
        params = RevolutionParams(kind=kind)
    if args.radial is not None:
        params.radial_segments = args.radial
    if args.spiral_turns is not None:
        params.spiral = SpiralParams(args.spiral_turns, args.spiral_pitch)
    if args.no_top:
        params.close_top = False
    if args.no_bottom:
        params.close_bottom = False
    return generate_revolution(points, params)


def _extrude(args: argparse.Namespace) -> Mesh:
    mode = _MODES[args.mode]
    params = ExtrusionParams(
        scale=args.scale,
        flip_y=args.flip_y,
        thickness=args.thickness,
        front=EdgeTreatment(args.front_segments, args.front_size, mode),
        back=EdgeTreatment(args.back_segments, args.back_size, mode),
    )
    return generate_loop_extrusion(load_loops(args.csv), params)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        mesh = _revolve(args) if args.command == "revolve" else _extrude(args)
    except (ShapeError, OSError) as exc:
        logger.error("%s failed: %s", args.command, exc)
        return 1

    if args.smooth:
        mesh.recalculate_smooth_normals()
    save_obj(args.out, mesh)
    logger.info("%s: %d vertices, %d faces -> %s", mesh.name, mesh.vertex_count, mesh.face_count, args.out)
    return 0
