"""Triangle-mesh generation for shapes placed on an arbitrary plane in 3D."""

from __future__ import annotations

import dataclasses
import math
from collections.abc import Sequence
from dataclasses import dataclass

from enginesim.geometry import GeometryCapacityError, GeometryGenerator, Vector4

Vec3 = tuple[float, float, float]

_X_AXIS: Vec3 = (1.0, 0.0, 0.0)
_Y_AXIS: Vec3 = (0.0, 1.0, 0.0)
_Z_AXIS: Vec3 = (0.0, 0.0, 1.0)
_LINE_TAPER_STEPS = 10


def _vec3(v: Sequence[float]) -> Vec3:
    if not 3 <= len(v) <= 4:
        raise ValueError("vector must have 3 or 4 components")
    return (float(v[0]), float(v[1]), float(v[2]))


def _direction(v: Vec3) -> Vector4:
    return (v[0], v[1], v[2], 0.0)


def _sub(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def _dot(a: Vec3, b: Vec3) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def _cross(a: Vec3, b: Vec3) -> Vec3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def _magnitude(v: Vec3) -> float:
    return math.sqrt(_dot(v, v))


def _normalize(v: Vec3) -> Vec3:
    length = _magnitude(v)
    if length == 0:
        raise ValueError("cannot normalize a zero vector")
    return (v[0] / length, v[1] / length, v[2] / length)


@dataclass(frozen=True)
class _Frame:
    """Local coordinate frame: local (x, y, z) maps onto x_axis, y_axis, z_axis about origin."""

    x_axis: Vec3
    y_axis: Vec3
    z_axis: Vec3
    origin: Vec3

    def place(self, x: float, y: float, z: float = 0.0) -> Vec3:
        return tuple(  # type: ignore[return-value]
            x * a + y * b + z * c + o
            for a, b, c, o in zip(self.x_axis, self.y_axis, self.z_axis, self.origin)
        )


def _require(generator: GeometryGenerator, vertex_count: int, index_count: int) -> None:
    if not generator.check_capacity(vertex_count, index_count):
        raise GeometryCapacityError(
            f"shape needs {vertex_count} vertices and {index_count} indices"
        )


@dataclass
class LineRingParameters:
    center: Sequence[float]
    radius: float
    pattern_height: float
    start_angle: float
    end_angle: float
    max_edge_length: float
    normal: Sequence[float] = _Z_AXIS
    taper_tail: float = 0.0
    texture_offset: float = 0.0
    texture_width_height_ratio: float = 1.0


@dataclass
class LineParameters:
    start: Sequence[float]
    end: Sequence[float]
    pattern_height: float
    normal: Sequence[float] = _Z_AXIS
    taper_tail: float = 0.0
    texture_offset: float = 0.0
    texture_width_height_ratio: float = 1.0


def find_orthogonal(v: Sequence[float]) -> Vector4:
    """A unit direction perpendicular to ``v``."""
    vec = _vec3(v)
    base = _Y_AXIS if abs(_dot(vec, _X_AXIS)) > 0.99 else _X_AXIS
    return _direction(_normalize(_cross(vec, base)))


def generate_filled_circle(
    generator: GeometryGenerator,
    normal: Sequence[float],
    center: Sequence[float],
    radius: float,
    max_edge_length: float,
) -> None:
    """Disc facing ``normal`` whose rim edges are no longer than ``max_edge_length``."""
    angle = math.asin(max_edge_length / (2 * radius))
    steps = max(3, math.ceil(2 * math.pi / angle))
    generate_filled_fan_polygon(
        generator, normal, find_orthogonal(normal), center, radius, 0.0, steps
    )


def generate_filled_fan_polygon(
    generator: GeometryGenerator,
    normal: Sequence[float],
    up: Sequence[float],
    center: Sequence[float],
    radius: float,
    rotation: float,
    segment_count: int,
) -> None:
    """Regular polygon fanned from its centre, lying in the plane spanned by ``up``."""
    if segment_count < 1:
        raise ValueError("segment_count must be at least 1")
    generator.start_subshape()
    _require(generator, 1 + segment_count, segment_count * 3)

    n = _vec3(normal)
    u = _vec3(up)
    c = _vec3(center)
    normal4 = _direction(n)

    generator.write_vertex(c, normal=normal4, tex_coord=(0.5, 0.5))

    frame = _Frame(_cross(u, n), u, n, c)
    angle_step = 2 * math.pi / segment_count
    for i in range(segment_count):
        angle0 = angle_step * i + rotation
        x0 = math.cos(angle0)
        y0 = math.sin(angle0)
        generator.write_vertex(
            frame.place(x0 * radius, y0 * radius),
            normal=normal4,
            tex_coord=(0.5 * x0 + 0.5, 0.5 * y0 + 0.5),
        )

    for i in range(segment_count):
        generator.write_face(0, i + 1, 1 + (i + 1) % segment_count)


def generate_line_ring(generator: GeometryGenerator, params: LineRingParameters) -> None:
    """Textured arc band, optionally tapering to nothing past both ends."""
    generator.start_subshape()

    actual_start = params.start_angle - params.taper_tail
    actual_end = params.end_angle + params.taper_tail
    max_outer_radius = params.radius + params.pattern_height / 2

    angle = math.asin(params.max_edge_length / (2 * max_outer_radius))
    segments = max(3, math.ceil((actual_end - actual_start) / angle))

    n = _vec3(params.normal)
    up = _vec3(find_orthogonal(n))
    _require(generator, (segments + 1) * 2, segments * 2 * 3)

    angle_step = (actual_end - actual_start) / segments
    frame = _Frame(_cross(up, n), up, n, _vec3(params.center))
    normal4 = _direction(n)
    texture_scale = params.radius / (
        params.pattern_height * params.texture_width_height_ratio
    )

    for i in range(segments + 1):
        angle0 = angle_step * i + actual_start
        x0 = math.cos(angle0)
        y0 = math.sin(angle0)

        angle0 = min(max(angle0, actual_start), actual_end)

        taper = 1.0
        if params.taper_tail != 0:
            if actual_start <= angle0 < params.start_angle:
                taper = (angle0 - actual_start) / params.taper_tail
            elif params.end_angle < angle0 <= actual_end:
                taper = 1.0 - (angle0 - params.end_angle) / params.taper_tail

        half = (params.pattern_height / 2) * taper
        inner = params.radius - half
        outer = params.radius + half
        s = params.texture_offset + angle0 * texture_scale

        generator.write_vertex(
            frame.place(x0 * outer, y0 * outer), normal=normal4, tex_coord=(s, 1.0)
        )
        generator.write_vertex(
            frame.place(x0 * inner, y0 * inner), normal=normal4, tex_coord=(s, 0.0)
        )

    for i in range(segments):
        outer_i, inner_i = 2 * i, 2 * i + 1
        outer_n, inner_n = 2 * (i + 1), 2 * (i + 1) + 1
        generator.write_face(inner_i, outer_n, inner_n)
        generator.write_face(inner_i, outer_i, outer_n)


def generate_line_ring_balanced(
    generator: GeometryGenerator, params: LineRingParameters
) -> None:
    """Line ring whose texture is centred on the middle of the arc."""
    midpoint = (params.start_angle + params.end_angle) / 2.0
    offset = params.texture_offset - (midpoint * params.radius) / (
        params.pattern_height * params.texture_width_height_ratio
    )
    generate_line_ring(generator, dataclasses.replace(params, texture_offset=offset))


def generate_line(generator: GeometryGenerator, params: LineParameters) -> None:
    """Textured straight band, optionally tapering past both ends."""
    generator.start_subshape()

    start = _vec3(params.start)
    end = _vec3(params.end)
    n = _vec3(params.normal)

    delta = _sub(end, start)
    tangent = _normalize(delta)
    right = _cross(n, tangent)
    length = _magnitude(delta)

    tapered = params.taper_tail > 0
    extra = _LINE_TAPER_STEPS if tapered else 0
    _require(generator, 4 + 4 * extra, (2 + 4 * extra) * 3)

    t0 = _Frame(right, tangent, n, start)
    t1 = _Frame(right, tangent, n, end)
    normal4 = _direction(n)
    half = params.pattern_height / 2.0
    ds = 1 / (params.pattern_height * params.texture_width_height_ratio)
    offset = params.texture_offset

    generator.write_vertex(t0.place(half, 0.0), normal=normal4, tex_coord=(0.0, 1.0))
    generator.write_vertex(t0.place(-half, 0.0), normal=normal4, tex_coord=(0.0, 0.0))
    generator.write_vertex(
        t1.place(half, 0.0), normal=normal4, tex_coord=(ds * length + offset, 1.0)
    )
    generator.write_vertex(
        t1.place(-half, 0.0), normal=normal4, tex_coord=(ds * length + offset, 0.0)
    )
    generator.write_face(0, 1, 2)
    generator.write_face(1, 3, 2)

    if not tapered:
        return

    step = params.taper_tail / _LINE_TAPER_STEPS
    for i in range(_LINE_TAPER_STEPS):
        scale = (_LINE_TAPER_STEPS - i - 1) / _LINE_TAPER_STEPS
        reach = step * (i + 1)
        u_tail = -ds * reach + offset
        u_head = ds * (length + reach) + offset

        generator.write_vertex(
            t0.place(scale * half, -reach), normal=normal4, tex_coord=(u_tail, 1.0)
        )
        generator.write_vertex(
            t0.place(-scale * half, -reach), normal=normal4, tex_coord=(u_tail, 0.0)
        )
        generator.write_vertex(
            t1.place(scale * half, reach), normal=normal4, tex_coord=(u_head, 1.0)
        )
        generator.write_vertex(
            t1.place(-scale * half, reach), normal=normal4, tex_coord=(u_head, 0.0)
        )

        cur, nxt = i * 4, (i + 1) * 4
        generator.write_face(nxt, nxt + 1, cur)
        generator.write_face(nxt + 1, cur + 1, cur)
        generator.write_face(cur + 2, cur + 3, nxt + 2)
        generator.write_face(cur + 3, nxt + 3, nxt + 2)