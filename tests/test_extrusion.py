"""Loop extrusion: flat faces, solids and edge treatments."""
import logging

import pytest

from shapemaker.errors import (
    InvalidEdgeTreatmentError,
    InvalidLoopSetError,
    InvalidParameterError,
    TriangulationError,
)
from shapemaker.extrusion import (
    EdgeMode,
    EdgeTreatment,
    ExtrusionParams,
    Loop2D,
    LoopRole,
    bisector_offset,
    generate_loop_extrusion,
    legacy_bevel_offset,
)
from shapemaker.mesh import indices_valid

SQUARE = [(-1.0, -1.0), (1.0, -1.0), (1.0, 1.0), (-1.0, 1.0)]
L_SHAPE = [(0.0, 0.0), (2.0, 0.0), (2.0, 1.0), (1.0, 1.0), (1.0, 2.0), (0.0, 2.0)]
L_HOLE = [(0.2, 0.2), (0.7, 0.2), (0.7, 0.4), (0.4, 0.4), (0.4, 0.7), (0.2, 0.7)]


class TestFlat:
    def test_area_with_hole(self, square_with_hole) -> None:
        mesh = generate_loop_extrusion(square_with_hole)
        assert mesh.surface_area() == pytest.approx(3.64)
        assert all(f.is_triangle for f in mesh.faces)
        assert all(v.position[2] == 0.0 for v in mesh.vertices)
        assert all(v.normal == (0.0, 0.0, -1.0) for v in mesh.vertices)

    def test_faces_point_to_front(self, square_with_hole, winding_violations) -> None:
        mesh = generate_loop_extrusion(square_with_hole)
        assert winding_violations(mesh) == []
        for f in mesh.faces:
            assert mesh.face_normal(f) == pytest.approx((0.0, 0.0, -1.0))

    def test_uv_is_planar_position(self, square_with_hole) -> None:
        mesh = generate_loop_extrusion(square_with_hole)
        for v in mesh.vertices:
            assert v.uv == v.position[:2]

    def test_thin_thickness_is_flat(self, square_with_hole) -> None:
        mesh = generate_loop_extrusion(square_with_hole, thickness=0.0005)
        assert mesh.surface_area() == pytest.approx(3.64)


class TestSolid:
    def test_plain_slab(self, square_with_hole, winding_violations) -> None:
        mesh = generate_loop_extrusion(square_with_hole, thickness=0.4)
        assert mesh.volume() == pytest.approx(3.64 * 0.4)
        assert winding_violations(mesh) == []
        lo, hi = mesh.bounds()
        assert lo == pytest.approx((-1.0, -1.0, -0.2))
        assert hi == pytest.approx((1.0, 1.0, 0.2))

    def test_side_walls_per_edge(self, square_with_hole) -> None:
        mesh = generate_loop_extrusion(square_with_hole, thickness=0.4)
        quads = [f for f in mesh.faces if f.is_quad]
        assert len(quads) == 8

    def test_hole_walls_face_into_hole(self, square_with_hole) -> None:
        mesh = generate_loop_extrusion(square_with_hole, thickness=0.4)
        for f in mesh.faces:
            if not f.is_quad:
                continue
            xs = [mesh.vertices[i].position[0] for i in f.indices]
            ys = [mesh.vertices[i].position[1] for i in f.indices]
            if max(map(abs, xs)) < 0.5 and max(map(abs, ys)) < 0.5:
                cx, cy = sum(xs) / 4, sum(ys) / 4
                nx, ny, _ = mesh.face_normal(f)
                assert nx * cx + ny * cy < 0.0

    @pytest.mark.parametrize("mode", list(EdgeMode))
    @pytest.mark.parametrize("segments", [1, 2, 5])
    def test_treated_edges_keep_winding(self, square_with_hole, winding_violations,
                                        mode: EdgeMode, segments: int) -> None:
        params = ExtrusionParams(
            thickness=0.4,
            front=EdgeTreatment(segments, 0.1, mode),
            back=EdgeTreatment(segments, 0.05, mode),
        )
        mesh = generate_loop_extrusion(square_with_hole, params)
        assert indices_valid(mesh)
        assert winding_violations(mesh) == []
        assert mesh.volume() > 0.0

    @pytest.mark.parametrize("mode", list(EdgeMode))
    @pytest.mark.parametrize("segments", [1, 3])
    def test_reflex_corners_keep_winding(self, winding_violations, mode: EdgeMode, segments: int) -> None:
        loops = [Loop2D(list(L_SHAPE)), Loop2D(list(L_HOLE), LoopRole.HOLE)]
        params = ExtrusionParams(
            thickness=0.4,
            front=EdgeTreatment(segments, 0.05, mode),
            back=EdgeTreatment(segments, 0.05, mode),
        )
        mesh = generate_loop_extrusion(loops, params)
        assert indices_valid(mesh)
        assert winding_violations(mesh) == []
        assert mesh.volume() > 0.0

    def test_inward_shrinks_the_face(self, square_with_hole) -> None:
        mesh = generate_loop_extrusion(square_with_hole, thickness=0.4,
                                       front=EdgeTreatment(3, 0.1, EdgeMode.INWARD))
        front = [v.position for v in mesh.vertices
                 if v.normals[0] == (0.0, 0.0, -1.0) and abs(v.position[0]) > 0.5]
        assert front
        assert max(abs(p[0]) for p in front) < 1.0
        lo, hi = mesh.bounds()
        assert hi[0] == pytest.approx(1.0)

    def test_outward_pushes_the_wall(self, square_with_hole) -> None:
        mesh = generate_loop_extrusion(square_with_hole, thickness=0.4,
                                       front=EdgeTreatment(3, 0.1, EdgeMode.OUTWARD))
        front = [v.position for v in mesh.vertices if v.normals[0] == (0.0, 0.0, -1.0)]
        assert max(abs(p[0]) for p in front) == pytest.approx(1.0)
        assert mesh.bounds()[1][0] > 1.0

    def test_legacy_ring_stays_in_face_plane(self, square_with_hole) -> None:
        mesh = generate_loop_extrusion(square_with_hole, thickness=0.4,
                                       front=EdgeTreatment(1, 0.1, EdgeMode.LEGACY_BEVEL))
        s = 2 ** -0.5
        ring = [v for v in mesh.vertices if v.normal == pytest.approx((0.0, -s, -s))]
        assert ring
        assert all(v.position[2] == pytest.approx(-0.2) for v in ring)
        # the ring fills the gap between inset face and full-depth wall
        assert mesh.volume() == pytest.approx(3.64 * 0.4)

    def test_round_strip_reaches_side_wall(self, square_with_hole) -> None:
        mesh = generate_loop_extrusion(square_with_hole, thickness=0.4,
                                       front=EdgeTreatment(4, 0.1), back=EdgeTreatment(4, 0.1))
        zs = sorted({round(v.position[2], 9) for v in mesh.vertices})
        assert zs[0] == pytest.approx(-0.2)
        assert zs[-1] == pytest.approx(0.2)
        assert -0.1 in zs and 0.1 in zs

    def test_idempotent(self, square_with_hole, snapshot) -> None:
        params = ExtrusionParams(thickness=0.3, front=EdgeTreatment(3, 0.05), back=EdgeTreatment(1, 0.05))
        first = generate_loop_extrusion(square_with_hole, params)
        second = generate_loop_extrusion(square_with_hole, params)
        assert snapshot(first) == snapshot(second)


class TestTransform:
    def test_scale_offset_flip(self) -> None:
        loops = [Loop2D([(0.0, 0.0), (1.0, 0.0), (1.0, 2.0)])]
        mesh = generate_loop_extrusion(loops, scale=2.0, offset=(1.0, 0.5), flip_y=True)
        lo, hi = mesh.bounds()
        assert lo[:2] == pytest.approx((1.0, -3.5))
        assert hi[:2] == pytest.approx((3.0, 0.5))
        assert mesh.surface_area() == pytest.approx(4.0)

    def test_clockwise_loops_are_normalised(self, winding_violations) -> None:
        loops = [Loop2D(SQUARE[::-1])]
        mesh = generate_loop_extrusion(loops, thickness=0.2, front=EdgeTreatment(2, 0.05))
        assert winding_violations(mesh) == []
        assert mesh.volume() > 0.0


class TestOffsets:
    def test_bisector_offset_moves_inward(self) -> None:
        moved = bisector_offset(SQUARE, 0.1, hole=False)
        s = 0.1 * 2 ** -0.5
        assert moved[0] == pytest.approx((-1.0 + s, -1.0 + s))

    def test_hole_offset_moves_outward(self) -> None:
        moved = bisector_offset(SQUARE, 0.1, hole=True)
        s = 0.1 * 2 ** -0.5
        assert moved[2] == pytest.approx((1.0 + s, 1.0 + s))

    def test_legacy_offset_matches_on_convex_corners(self) -> None:
        for a, b in zip(legacy_bevel_offset(SQUARE, 0.1, False), bisector_offset(SQUARE, 0.1, False)):
            assert a == pytest.approx(b)

    def test_legacy_offset_at_reflex_corner(self) -> None:
        legacy = legacy_bevel_offset(L_SHAPE, 0.05, False)
        assert legacy[3] == pytest.approx(bisector_offset(L_SHAPE, 0.05, False)[3])
        assert legacy[3][0] < 1.0 and legacy[3][1] < 1.0

    def test_legacy_hole_reflex_corner_moves_into_material(self) -> None:
        moved = legacy_bevel_offset(L_HOLE, 0.05, True)[3]
        assert moved[0] > 0.4 and moved[1] > 0.4

    def test_straight_run(self) -> None:
        pts = [(0.0, 0.0), (1.0, 0.0), (2.0, 0.0), (2.0, 1.0), (0.0, 1.0)]
        assert bisector_offset(pts, 0.1, False)[1] == pytest.approx((1.0, 0.1))
        assert legacy_bevel_offset(pts, 0.1, False)[1] == pytest.approx((1.0, 0.1))


class TestErrors:
    def test_no_outer_loop(self) -> None:
        with pytest.raises(InvalidLoopSetError):
            generate_loop_extrusion([Loop2D(SQUARE, LoopRole.HOLE)])

    def test_two_outer_loops(self) -> None:
        with pytest.raises(InvalidLoopSetError):
            generate_loop_extrusion([Loop2D(SQUARE), Loop2D(SQUARE)])

    def test_outer_too_small(self) -> None:
        with pytest.raises(InvalidLoopSetError):
            generate_loop_extrusion([Loop2D([(0.0, 0.0), (1.0, 0.0)])])

    def test_short_hole_is_skipped(self, caplog) -> None:
        loops = [Loop2D(SQUARE), Loop2D([(0.0, 0.0), (0.1, 0.0)], LoopRole.HOLE)]
        with caplog.at_level(logging.WARNING, logger="shapemaker.extrusion"):
            mesh = generate_loop_extrusion(loops)
        assert mesh.surface_area() == pytest.approx(4.0)
        assert "skipping hole" in caplog.text

    def test_self_intersecting(self) -> None:
        with pytest.raises(TriangulationError):
            generate_loop_extrusion([Loop2D([(0, 0), (1, 1), (1, 0), (0, 1), (0.5, -1)])])

    @pytest.mark.parametrize("kw", [
        {"thickness": -1.0},
        {"scale": 0.0},
        {"front": EdgeTreatment(segments=-1)},
        {"back": EdgeTreatment(size=-0.1)},
    ])
    def test_bad_parameters(self, square_with_hole, kw) -> None:
        with pytest.raises(InvalidParameterError):
            generate_loop_extrusion(square_with_hole, **kw)

    def test_treatments_deeper_than_thickness(self, square_with_hole) -> None:
        with pytest.raises(InvalidEdgeTreatmentError):
            generate_loop_extrusion(square_with_hole, thickness=0.1,
                                    front=EdgeTreatment(2, 0.08), back=EdgeTreatment(2, 0.08))

    def test_offset_swallows_the_face(self) -> None:
        with pytest.raises(InvalidEdgeTreatmentError):
            generate_loop_extrusion([Loop2D(SQUARE)], thickness=4.0, front=EdgeTreatment(2, 1.6))

    def test_offset_hits_the_hole(self, square_with_hole) -> None:
        with pytest.raises(InvalidEdgeTreatmentError):
            generate_loop_extrusion(square_with_hole, thickness=2.0, front=EdgeTreatment(2, 0.6))
