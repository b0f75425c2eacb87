"""
shapemaker: procedural solids from 2D cross-sections.

Two generators share one indexed mesh type:

* ``generate_revolution`` sweeps a (radius, height) profile around the Y axis,
  as a closed ring or as a rising spiral;
* ``generate_loop_extrusion`` triangulates an outer loop with holes and
  extrudes it, optionally bevelling or rounding the front and back edges.

Both are plain functions of their parameters: same input, same mesh.
"""
from .errors import (
    InvalidEdgeTreatmentError,
    InvalidLoopSetError,
    InvalidParameterError,
    InvalidProfileError,
    ShapeError,
    TriangulationError,
)
from .extrusion import EdgeMode, EdgeTreatment, ExtrusionParams, Loop2D, LoopRole, generate_loop_extrusion
from .mesh import Face, Mesh, Vertex
from .profiles import create_preset
from .revolution import ProfileKind, RevolutionParams, SpiralParams, generate_revolution

__version__ = "0.1.0"
