from typing import Callable, List

import pytest

from shapemaker.extrusion import Loop2D, LoopRole
from shapemaker.geometry import triangle_area
from shapemaker.mesh import Mesh, oriented

OUTER = [(-1.0, -1.0), (1.0, -1.0), (1.0, 1.0), (-1.0, 1.0)]
HOLE = [(-0.3, -0.3), (0.3, -0.3), (0.3, 0.3), (-0.3, 0.3)]


@pytest.fixture
def square_with_hole() -> List[Loop2D]:
    return [Loop2D(list(OUTER)), Loop2D(list(HOLE), LoopRole.HOLE)]


def _winding_violations(mesh: Mesh) -> List[int]:
    """Faces with a non-degenerate triangle wound against its stored normal."""
    bad = []
    for fi, face in enumerate(mesh.faces):
        normal = mesh.stored_normal(face)
        for a, b, c in face.triangles():
            pa = mesh.vertices[a].position
            pb = mesh.vertices[b].position
            pc = mesh.vertices[c].position
            if triangle_area(pa, pb, pc) <= 1e-12:
                continue
            if not oriented(pa, pb, pc, normal):
                bad.append(fi)
                break
    return bad


@pytest.fixture
def winding_violations() -> Callable[[Mesh], List[int]]:
    return _winding_violations


def mesh_arrays(mesh: Mesh):
    return ([(v.position, tuple(v.uvs), tuple(v.normals)) for v in mesh.vertices],
            [(f.indices, f.material) for f in mesh.faces])


@pytest.fixture
def snapshot() -> Callable[[Mesh], tuple]:
    return mesh_arrays
