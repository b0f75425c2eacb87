"""
Indexed polygon mesh used as the output of every generator.

A mesh is an append-only arena: ``add_vertex`` hands back the index of the new
vertex and faces are built from those indices, so callers never compute
offsets by hand. Faces are triangles or quads with a material slot. Vertices
keep lists of UV layers and normals; hard edges are made by adding a second
vertex at the same position rather than by sharing.

Winding is right-handed: seen from the side the normal points to, face
corners run counter-clockwise.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

import numpy as np

from .geometry import (
    Tri,
    Vec2,
    Vec3,
    triangle_area,
    v_add,
    v_cross,
    v_dot,
    v_norm,
    v_sub,
)

logger = logging.getLogger(__name__)

FALLBACK_NORMAL: Vec3 = (0.0, 0.0, 1.0)


@dataclass
class Vertex:
    position: Vec3
    uvs: List[Vec2] = field(default_factory=list)
    normals: List[Vec3] = field(default_factory=list)

    @property
    def uv(self) -> Vec2:
        return self.uvs[0] if self.uvs else (0.0, 0.0)

    @property
    def normal(self) -> Vec3:
        return self.normals[0] if self.normals else (0.0, 0.0, 0.0)

    def copy(self) -> "Vertex":
        return Vertex(self.position, list(self.uvs), list(self.normals))


@dataclass
class Face:
    indices: Tuple[int, ...]
    material: int = 0

    @property
    def is_triangle(self) -> bool:
        return len(self.indices) == 3

    @property
    def is_quad(self) -> bool:
        return len(self.indices) == 4

    def triangles(self) -> List[Tri]:
        """Fan decomposition: (v0, v1, v2), (v0, v2, v3)."""
        ids = self.indices
        return [(ids[0], ids[i], ids[i + 1]) for i in range(1, len(ids) - 1)]


@dataclass
class Mesh:
    vertices: List[Vertex] = field(default_factory=list)
    faces: List[Face] = field(default_factory=list)
    name: str = "mesh"

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def face_count(self) -> int:
        return len(self.faces)

    # ---- construction ----
    def add_vertex(self, position: Vec3, uv: Vec2 = (0.0, 0.0), normal: Optional[Vec3] = None) -> int:
        v = Vertex(
            (float(position[0]), float(position[1]), float(position[2])),
            [(float(uv[0]), float(uv[1]))],
            [] if normal is None else [(float(normal[0]), float(normal[1]), float(normal[2]))],
        )
        self.vertices.append(v)
        return len(self.vertices) - 1

    def add_triangle(self, i0: int, i1: int, i2: int, material: int = 0) -> int:
        return self._add_face((i0, i1, i2), material)

    def add_quad(self, i0: int, i1: int, i2: int, i3: int, material: int = 0) -> int:
        return self._add_face((i0, i1, i2, i3), material)

    def _add_face(self, indices: Tuple[int, ...], material: int) -> int:
        count = len(self.vertices)
        for i in indices:
            if i < 0 or i >= count:
                raise IndexError(f"face index {i} out of range for {count} vertices")
        self.faces.append(Face(indices, material))
        return len(self.faces) - 1

    # ---- per-face geometry ----
    def face_normal(self, face: Face) -> Vec3:
        """Geometric normal from the first three corners."""
        a = self.vertices[face.indices[0]].position
        b = self.vertices[face.indices[1]].position
        c = self.vertices[face.indices[2]].position
        return v_norm(v_cross(v_sub(b, a), v_sub(c, a)))

    def stored_normal(self, face: Face) -> Vec3:
        """Normalised sum of the corners' first stored normals."""
        acc: Vec3 = (0.0, 0.0, 0.0)
        for i in face.indices:
            acc = v_add(acc, self.vertices[i].normal)
        return v_norm(acc)

    def iter_triangles(self) -> Iterator[Tuple[Tri, Face]]:
        for face in self.faces:
            for tri in face.triangles():
                yield tri, face

    # ---- shading ----
    def recalculate_smooth_normals(self) -> "Mesh":
        """Replace each vertex's normals by the plain average of its faces' normals."""
        sums: List[Vec3] = [(0.0, 0.0, 0.0) for _ in self.vertices]
        for face in self.faces:
            n = self.face_normal(face)
            for i in face.indices:
                sums[i] = v_add(sums[i], n)
        for vertex, total in zip(self.vertices, sums):
            n = v_norm(total)
            if n == (0.0, 0.0, 0.0):
                n = FALLBACK_NORMAL
            vertex.normals = [n]
        return self

    # ---- transforms ----
    def flip(self, flip_y: bool = False, flip_z: bool = False) -> "Mesh":
        """Half-turn about Y and/or Z; both keep handedness so winding stays valid."""
        if not flip_y and not flip_z:
            return self

        def apply(v: Vec3) -> Vec3:
            x, y, z = v
            if flip_y:
                x, z = -x, -z
            if flip_z:
                x, y = -x, -y
            return (x, y, z)

        for vertex in self.vertices:
            vertex.position = apply(vertex.position)
            vertex.normals = [apply(n) for n in vertex.normals]
        return self

    def copy(self) -> "Mesh":
        return Mesh([v.copy() for v in self.vertices],
                    [Face(f.indices, f.material) for f in self.faces],
                    self.name)

    # ---- analysis ----
    def bounds(self) -> Tuple[Vec3, Vec3]:
        xs = [v.position[0] for v in self.vertices]
        ys = [v.position[1] for v in self.vertices]
        zs = [v.position[2] for v in self.vertices]
        return (min(xs), min(ys), min(zs)), (max(xs), max(ys), max(zs))

    def surface_area(self) -> float:
        area = 0.0
        for (a, b, c), _ in self.iter_triangles():
            area += triangle_area(self.vertices[a].position,
                                  self.vertices[b].position,
                                  self.vertices[c].position)
        return area

    def volume(self) -> float:
        """
        Signed volume for a closed, consistently oriented mesh.
        Uses origin-based tetrahedron summation: V = sum(dot(a, cross(b,c))) / 6
        """
        vol6 = 0.0
        for (a, b, c), _ in self.iter_triangles():
            pa = self.vertices[a].position
            pb = self.vertices[b].position
            pc = self.vertices[c].position
            vol6 += v_dot(pa, v_cross(pb, pc))
        return vol6 / 6.0

    def to_arrays(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
        """(positions, normals, uvs, triangles) as numpy arrays for renderers."""
        positions = np.array([v.position for v in self.vertices], dtype=np.float64).reshape(-1, 3)
        normals = np.array([v.normal for v in self.vertices], dtype=np.float64).reshape(-1, 3)
        uvs = np.array([v.uv for v in self.vertices], dtype=np.float64).reshape(-1, 2)
        tris = np.array([tri for tri, _ in self.iter_triangles()], dtype=np.int64).reshape(-1, 3)
        return positions, normals, uvs, tris


def indices_valid(mesh: Mesh) -> bool:
    """True when every face index points at an existing vertex."""
    count = mesh.vertex_count
    return all(0 <= i < count for face in mesh.faces for i in face.indices)


def oriented(a: Vec3, b: Vec3, c: Vec3, normal: Vec3) -> bool:
    """Whether triangle (a, b, c) winds counter-clockwise around ``normal``."""
    return v_dot(v_cross(v_sub(b, a), v_sub(c, a)), normal) > 0.0


def log_summary(mesh: Mesh) -> None:
    logger.debug("%s: %d vertices, %d faces", mesh.name, mesh.vertex_count, mesh.face_count)


