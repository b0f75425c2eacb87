"""Wavefront OBJ output for generated meshes."""
from __future__ import annotations

import logging

from .mesh import Mesh

logger = logging.getLogger(__name__)


def save_obj(path: str, mesh: Mesh) -> None:
    """
    Save OBJ with vt/vn taken from each vertex's first UV layer and normal.

    Quads stay quads. Normals are written only when every vertex has one.
    Material slots become ``usemtl slotN`` switches.
    """
    use_vn = all(v.normals for v in mesh.vertices)
    with open(path, "w", encoding="utf-8") as f:
        f.write(f"o {mesh.name}\n")
        for v in mesh.vertices:
            x, y, z = v.position
            f.write(f"v {x:.6f} {y:.6f} {z:.6f}\n")
        for v in mesh.vertices:
            u, w = v.uv
            f.write(f"vt {u:.6f} {w:.6f}\n")
        if use_vn:
            for v in mesh.vertices:
                nx, ny, nz = v.normal
                f.write(f"vn {nx:.6f} {ny:.6f} {nz:.6f}\n")

        def idx(i: int) -> str:
            vi = i + 1
            if use_vn:
                return f"{vi}/{vi}/{vi}"
            return f"{vi}/{vi}"

        material = None
        for face in mesh.faces:
            if face.material != material and (material is not None or face.material != 0):
                f.write(f"usemtl slot{face.material}\n")
            material = face.material
            f.write("f " + " ".join(idx(i) for i in face.indices) + "\n")
    logger.debug("wrote %s (%d vertices, %d faces)", path, mesh.vertex_count, mesh.face_count)
