import math

import pytest

from enginesim.geometry import (
    Cam2dParameters,
    Circle2dParameters,
    GeometryCapacityError,
    GeometryGenerator,
    PathParameters,
    Rhombus2dParameters,
    Ring2dParameters,
    Trapezoid2dParameters,
)


def _xy(vertex):
    return vertex.pos[0], vertex.pos[1]


def _faces_valid(gen):
    return all(0 <= i < len(gen.vertices) for i in gen.indices)


def test_line2d_quad_layout():
    gen = GeometryGenerator(100, 100)
    gen.start_shape()
    gen.generate_line2d(0.0, 0.0, 10.0, 0.0, 2.0)
    shape = gen.end_shape()

    points = [_xy(v) for v in gen.vertices]
    assert points == [(0.0, 1.0), (0.0, -1.0), (10.0, 1.0), (10.0, -1.0)]
    assert gen.indices == [0, 1, 2, 1, 3, 2]
    assert shape.face_count == 2
    assert shape.index_count == len(gen.indices)


def test_line2d_capacity_error():
    gen = GeometryGenerator(3, 6)
    gen.start_shape()
    with pytest.raises(GeometryCapacityError):
        gen.generate_line2d(0.0, 0.0, 1.0, 1.0, 1.0)
    assert gen.vertices == []


def test_zero_length_line_rejected():
    gen = GeometryGenerator(10, 10)
    gen.start_shape()
    with pytest.raises(ValueError):
        gen.generate_line2d(1.0, 1.0, 1.0, 1.0, 1.0)


def test_subshapes_offset_indices():
    gen = GeometryGenerator(100, 100)
    gen.start_shape()
    gen.generate_line2d(0.0, 0.0, 1.0, 0.0, 1.0)
    gen.generate_line2d(0.0, 1.0, 1.0, 1.0, 1.0)
    first = gen.indices[:6]
    second = gen.indices[6:]
    assert second == [i + 4 for i in first]


def test_second_shape_records_base():
    gen = GeometryGenerator(100, 100)
    gen.start_shape()
    gen.generate_line2d(0.0, 0.0, 1.0, 0.0, 1.0)
    gen.end_shape()
    gen.start_shape()
    gen.generate_line2d(0.0, 0.0, 1.0, 0.0, 1.0)
    shape = gen.end_shape()
    assert shape.base_vertex == 4
    assert shape.base_index == 6
    assert gen.indices[6:] == gen.indices[:6]


def test_frame_success_and_rollback():
    gen = GeometryGenerator(16, 100)
    gen.start_shape()
    gen.generate_frame(0.0, 0.0, 10.0, 5.0, 1.0)
    assert len(gen.vertices) == 16
    assert gen.end_shape().face_count == 8

    small = GeometryGenerator(12, 100)
    small.start_shape()
    with pytest.raises(GeometryCapacityError):
        small.generate_frame(0.0, 0.0, 10.0, 5.0, 1.0)
    assert small.vertices == []
    assert small.indices == []
    assert small.end_shape().face_count == 0


def test_grid_rejects_non_positive_division():
    gen = GeometryGenerator(100, 100)
    gen.start_shape()
    with pytest.raises(ValueError):
        gen.generate_grid(0.0, 0.0, 10.0, 10.0, 0.0, 1.0, 1.0)


def test_grid_rollback_on_overflow():
    gen = GeometryGenerator(20, 1000)
    gen.start_shape()
    with pytest.raises(GeometryCapacityError):
        gen.generate_grid(0.0, 0.0, 10.0, 10.0, 1.0, 1.0, 0.1)
    assert gen.vertices == []


def test_grid_lines_within_bounds():
    gen = GeometryGenerator(1000, 1000)
    gen.start_shape()
    gen.generate_grid(0.0, 0.0, 10.0, 10.0, 2.5, 2.5, 0.0)
    assert len(gen.vertices) % 4 == 0
    assert all(abs(x) <= 5.0 and abs(y) <= 5.0 for x, y in map(_xy, gen.vertices))
    assert _faces_valid(gen)


def test_ring_vertices_on_radii():
    gen = GeometryGenerator(1000, 3000)
    gen.start_shape()
    gen.generate_ring2d(
        Ring2dParameters(0.0, 0.0, 8.0, 10.0, 0.0, math.pi / 2, 1.0)
    )
    shape = gen.end_shape()
    assert shape.face_count == len(gen.vertices) - 2
    for k, vertex in enumerate(gen.vertices):
        radius = math.hypot(*_xy(vertex))
        assert radius == pytest.approx(10.0 if k % 2 == 0 else 8.0)
    assert _xy(gen.vertices[0]) == pytest.approx((10.0, 0.0))
    assert _xy(gen.vertices[-2]) == pytest.approx((0.0, 10.0), abs=1e-9)
    assert _faces_valid(gen)


def test_ring_arrow_tapers_to_point():
    gen = GeometryGenerator(1000, 3000)
    gen.start_shape()
    gen.generate_ring2d(
        Ring2dParameters(
            0.0, 0.0, 8.0, 10.0, 0.0, math.pi / 2, 1.0,
            draw_arrow=True, arrow_on_end=True, arrow_length=0.5,
        )
    )
    outer, inner = gen.vertices[-2], gen.vertices[-1]
    assert math.hypot(*_xy(outer)) == pytest.approx(math.hypot(*_xy(inner)), abs=1e-6)
    assert math.hypot(*_xy(gen.vertices[0])) == pytest.approx(10.0)


def test_ring_edge_longer_than_diameter_rejected():
    gen = GeometryGenerator(1000, 3000)
    gen.start_shape()
    with pytest.raises(ValueError):
        gen.generate_ring2d(Ring2dParameters(0.0, 0.0, 1.0, 2.0, 0.0, 1.0, 5.0))


def test_circle_vertices_and_fan():
    gen = GeometryGenerator(1000, 3000)
    gen.start_shape()
    gen.generate_circle2d(Circle2dParameters(1.0, 2.0, 3.0, 0.5))
    center = gen.vertices[0]
    assert _xy(center) == (1.0, 2.0)
    assert center.tex_coord == (0.5, 0.5)
    for vertex in gen.vertices[1:]:
        x, y = _xy(vertex)
        assert math.hypot(x - 1.0, y - 2.0) == pytest.approx(3.0)
    assert gen.end_shape().face_count == len(gen.vertices) - 1
    assert gen.indices[0::3] == [0] * (len(gen.vertices) - 1)


def test_circle_has_at_least_three_segments():
    gen = GeometryGenerator(100, 100)
    gen.start_shape()
    gen.generate_circle2d(Circle2dParameters(0.0, 0.0, 1.0, 2.0))
    assert gen.end_shape().face_count == 3


def test_circle_capacity_error():
    gen = GeometryGenerator(5, 1000)
    gen.start_shape()
    with pytest.raises(GeometryCapacityError):
        gen.generate_circle2d(Circle2dParameters(0.0, 0.0, 10.0, 0.1))
    assert gen.vertices == []


class _ConstantLift:
    def __init__(self, value):
        self.value = value

    def sample_triangle(self, x):
        return self.value


def test_cam_fan_structure_and_lift():
    flat = GeometryGenerator(1000, 3000)
    flat.start_shape()
    flat.generate_cam(Cam2dParameters(0.0, 0.0, 5.0, 1.0, 0.5))
    assert flat.end_shape().face_count == len(flat.vertices) - 1
    assert _faces_valid(flat)

    lifted = GeometryGenerator(1000, 3000)
    lifted.start_shape()
    lifted.generate_cam(Cam2dParameters(0.0, 0.0, 5.0, 1.0, 0.5, lift=_ConstantLift(2.0)))
    assert len(lifted.vertices) == len(flat.vertices)
    flat_r = sum(math.hypot(*_xy(v)) for v in flat.vertices[1:])
    lifted_r = sum(math.hypot(*_xy(v)) for v in lifted.vertices[1:])
    assert lifted_r > flat_r


def test_rhombus_and_trapezoid():
    gen = GeometryGenerator(100, 100)
    gen.start_shape()
    gen.generate_rhombus(Rhombus2dParameters(0.0, 0.0, 2.0, 2.0, shear=0.0))
    xs = sorted(x for x, _ in map(_xy, gen.vertices))
    assert xs == [-1.0, -1.0, 1.0, 1.0]
    assert gen.indices == [0, 1, 2, 1, 3, 2]

    gen.generate_trapezoid2d(Trapezoid2dParameters(0.0, 0.0, 4.0, 2.0, 2.0))
    trap = [_xy(v) for v in gen.vertices[4:]]
    assert trap == [(-2.0, -1.0), (2.0, -1.0), (-1.0, 1.0), (1.0, 1.0)]
    assert gen.indices[6:] == [4, 5, 6, 5, 7, 6]


def test_isosceles_triangle():
    gen = GeometryGenerator(100, 100)
    gen.start_shape()
    gen.generate_isosceles_triangle(0.0, 0.0, 2.0, 3.0)
    assert [_xy(v) for v in gen.vertices] == [(-1.0, 0.0), (1.0, 0.0), (0.0, 3.0)]
    assert gen.indices == [0, 1, 2]


def _run_path(gen, params, detached=False):
    gen.start_path(params)
    for i in range(1, params.count):
        params.i = i
        gen.generate_path_segment(params, detached)


def test_straight_path_across_split_buffers():
    gen = GeometryGenerator(100, 100)
    gen.start_shape()
    params = PathParameters(p0=[(0.0, 0.0), (1.0, 0.0)], p1=[(2.0, 0.0)], width=2.0)
    _run_path(gen, params)
    assert len(gen.vertices) == 2 * params.count
    assert gen.end_shape().face_count == 2 * (params.count - 1)
    assert all(abs(abs(y) - 1.0) < 1e-12 for _, y in map(_xy, gen.vertices))
    assert [x for x, _ in map(_xy, gen.vertices)] == [0.0, 0.0, 1.0, 1.0, 2.0, 2.0]
    assert _faces_valid(gen)


def test_detached_path_has_no_faces():
    gen = GeometryGenerator(100, 100)
    gen.start_shape()
    params = PathParameters(p0=[(0.0, 0.0), (1.0, 1.0), (2.0, 0.0)], width=1.0)
    _run_path(gen, params, detached=True)
    assert len(gen.vertices) == 2 * params.count
    assert gen.indices == []


def test_short_path_writes_nothing():
    gen = GeometryGenerator(100, 100)
    gen.start_shape()
    gen.start_path(PathParameters(p0=[(0.0, 0.0)]))
    assert gen.vertices == []


def test_path_capacity_error():
    gen = GeometryGenerator(3, 100)
    gen.start_shape()
    with pytest.raises(GeometryCapacityError):
        gen.start_path(PathParameters(p0=[(0.0, 0.0), (1.0, 0.0)]))


def test_reset_clears_buffers():
    gen = GeometryGenerator(100, 100)
    gen.start_shape()
    gen.generate_isosceles_triangle(0.0, 0.0, 1.0, 1.0)
    gen.reset()
    assert gen.vertex_pointer == 0
    assert gen.index_pointer == 0
    assert gen.check_capacity(100, 100)
    assert not gen.check_capacity(101, 0)


def test_write_vertex_pads_position():
    gen = GeometryGenerator(1, 3)
    vertex = gen.write_vertex((1.0, 2.0))
    assert vertex.pos == (1.0, 2.0, 0.0, 1.0)
    with pytest.raises(GeometryCapacityError):
        gen.write_vertex((0.0, 0.0))


def test_negative_buffer_size_rejected():
    with pytest.raises(ValueError):
        GeometryGenerator(-1, 10)