"""Triangle-mesh generation for flat 2D shapes drawn by the instrument panel."""

from __future__ import annotations

import math
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Optional, Protocol

Vector4 = tuple[float, float, float, float]
TexCoord = tuple[float, float]
Point = tuple[float, float]

Z_AXIS: Vector4 = (0.0, 0.0, 1.0, 0.0)
_NO_TEXTURE: TexCoord = (0.0, 0.0)


class GeometryCapacityError(RuntimeError):
    """Raised when a shape does not fit in the remaining vertex or index space."""


class LiftProfile(Protocol):
    """Cam lift as a function of cam angle."""

    def sample_triangle(self, x: float) -> float: ...


@dataclass(frozen=True)
class Vertex:
    pos: Vector4
    normal: Vector4 = Z_AXIS
    tex_coord: TexCoord = _NO_TEXTURE


@dataclass(frozen=True)
class GeometryIndices:
    """Location of a finished shape inside the generator's buffers."""

    base_index: int
    base_vertex: int
    face_count: int

    @property
    def index_count(self) -> int:
        return self.face_count * 3


@dataclass
class Ring2dParameters:
    center_x: float
    center_y: float
    inner_radius: float
    outer_radius: float
    start_angle: float
    end_angle: float
    max_edge_length: float
    draw_arrow: bool = False
    arrow_on_end: bool = False
    arrow_length: float = 0.0


@dataclass
class Circle2dParameters:
    center_x: float
    center_y: float
    radius: float
    max_edge_length: float
    smallest_angle: float = 0.0


@dataclass
class Cam2dParameters:
    center_x: float
    center_y: float
    base_radius: float
    roller_radius: float
    max_edge_length: float
    lift: Optional[LiftProfile] = None
    smallest_angle: float = 0.0


@dataclass
class Rhombus2dParameters:
    center_x: float
    center_y: float
    width: float
    height: float
    shear: float = 0.0


@dataclass
class Trapezoid2dParameters:
    center_x: float
    center_y: float
    base: float
    top: float
    height: float


@dataclass
class PathParameters:
    """A polyline split over two point sequences, walked one segment at a time.

    The caller sets ``i`` to the point being emitted before each call to
    ``GeometryGenerator.generate_path_segment``; the remaining fields carry
    state from one segment to the next.
    """

    p0: Sequence[Point]
    p1: Sequence[Point] = ()
    width: float = 1.0
    i: int = 0
    v0: int = 0
    v1: int = 0
    pdir_x: float = 0.0
    pdir_y: float = 0.0
    perp_x: float = 0.0
    perp_y: float = 0.0

    @property
    def n0(self) -> int:
        return len(self.p0)

    @property
    def n1(self) -> int:
        return len(self.p1)

    @property
    def count(self) -> int:
        return self.n0 + self.n1

    def point(self, index: int) -> Point:
        return self.p0[index] if index < self.n0 else self.p1[index - self.n0]


def _segment_count(steps: float) -> int:
    return max(3, math.ceil(steps))


def _c_divide(numerator: float, denominator: float) -> float:
    if denominator != 0:
        return numerator / denominator
    if numerator == 0 or math.isnan(numerator):
        return math.nan
    return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)


def _clamp01(s: float) -> float:
    if math.isnan(s):
        return 0.0
    return min(1.0, max(s, 0.0))


class GeometryGenerator:
    """Writes vertices and triangle indices into fixed-capacity buffers."""

    def __init__(self, vertex_buffer_size: int, index_buffer_size: int) -> None:
        if vertex_buffer_size < 0 or index_buffer_size < 0:
            raise ValueError("buffer sizes must not be negative")
        self.vertex_buffer_size = vertex_buffer_size
        self.index_buffer_size = index_buffer_size
        self.vertices: list[Vertex] = []
        self.indices: list[int] = []
        self.subshape_vertex_pointer = 0
        self._base_index = 0
        self._base_vertex = 0
        self._face_count = 0

    @property
    def vertex_pointer(self) -> int:
        return len(self.vertices)

    @property
    def index_pointer(self) -> int:
        return len(self.indices)

    def reset(self) -> None:
        self.vertices.clear()
        self.indices.clear()
        self.subshape_vertex_pointer = 0

    def start_shape(self) -> None:
        self._base_index = self.index_pointer
        self._base_vertex = self.vertex_pointer
        self._face_count = 0

    def end_shape(self) -> GeometryIndices:
        return GeometryIndices(self._base_index, self._base_vertex, self._face_count)

    def start_subshape(self) -> None:
        self.subshape_vertex_pointer = self.vertex_pointer - self._base_vertex

    def write_vertex(
        self,
        pos: Sequence[float],
        normal: Vector4 = Z_AXIS,
        tex_coord: TexCoord = _NO_TEXTURE,
    ) -> Vertex:
        """Append a vertex; a 2- or 3-component position gets z = 0 and w = 1."""
        if self.vertex_pointer >= self.vertex_buffer_size:
            raise GeometryCapacityError("vertex buffer is full")
        coords = tuple(float(c) for c in pos)
        if not 2 <= len(coords) <= 4:
            raise ValueError("position must have 2 to 4 components")
        padded = coords + (0.0, 1.0)[len(coords) - 2:]
        vertex = Vertex(padded, tuple(normal), tuple(tex_coord))  # type: ignore[arg-type]
        self.vertices.append(vertex)
        return vertex

    def write_face(self, i0: int, i1: int, i2: int) -> None:
        """Append a triangle whose indices are relative to the current subshape."""
        if self.index_pointer + 3 > self.index_buffer_size:
            raise GeometryCapacityError("index buffer is full")
        offset = self.subshape_vertex_pointer
        self.indices.extend((i0 + offset, i1 + offset, i2 + offset))
        self._face_count += 1

    def check_capacity(self, vertex_count: int, index_count: int) -> bool:
        return (
            vertex_count + self.vertex_pointer <= self.vertex_buffer_size
            and index_count + self.index_pointer <= self.index_buffer_size
        )

    def _require(self, vertex_count: int, index_count: int) -> None:
        if not self.check_capacity(vertex_count, index_count):
            raise GeometryCapacityError(
                f"shape needs {vertex_count} vertices and {index_count} indices"
            )

    @contextmanager
    def _transaction(self) -> Iterator[None]:
        vertex_count = self.vertex_pointer
        index_count = self.index_pointer
        saved = (
            self.subshape_vertex_pointer,
            self._base_index,
            self._base_vertex,
            self._face_count,
        )
        try:
            yield
        except GeometryCapacityError:
            del self.vertices[vertex_count:]
            del self.indices[index_count:]
            (
                self.subshape_vertex_pointer,
                self._base_index,
                self._base_vertex,
                self._face_count,
            ) = saved
            raise

    def generate_line2d(
        self, x0: float, y0: float, x1: float, y1: float, line_width: float
    ) -> None:
        self.start_subshape()

        dx = x1 - x0
        dy = y1 - y0
        length = math.hypot(dx, dy)
        if length == 0:
            raise ValueError("line has zero length")
        perp_x = -dy / length
        perp_y = dx / length
        half = line_width / 2

        self._require(4, 6)
        self.write_vertex((x0 + perp_x * half, y0 + perp_y * half))
        self.write_vertex((x0 - perp_x * half, y0 - perp_y * half))
        self.write_vertex((x1 + perp_x * half, y1 + perp_y * half))
        self.write_vertex((x1 - perp_x * half, y1 - perp_y * half))
        self.write_face(0, 1, 2)
        self.write_face(1, 3, 2)

    def generate_frame(
        self,
        x: float,
        y: float,
        frame_width: float,
        frame_height: float,
        line_width: float,
    ) -> None:
        """Rectangle outline; nothing is written if it does not fit."""
        hw, hh, hl = frame_width / 2, frame_height / 2, line_width / 2
        with self._transaction():
            for edge_y in (y + hh, y - hh):
                self.generate_line2d(x - hw - hl, edge_y, x + hw + hl, edge_y, line_width)
            for edge_x in (x + hw, x - hw):
                self.generate_line2d(edge_x, y - hh - hl, edge_x, y + hh + hl, line_width)

    def generate_grid(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        div_x: float,
        div_y: float,
        line_width: float,
    ) -> None:
        """Grid lines mirrored about the centre; nothing is written if it does not fit."""
        if div_x <= 0 or div_y <= 0:
            raise ValueError("grid divisions must be positive")
        with self._transaction():
            offset = 0.0
            while offset <= height / 2.0:
                for line_y in (y + offset, y - offset):
                    self.generate_line2d(
                        x - width / 2, line_y, x + width / 2, line_y, line_width
                    )
                offset += div_y

            offset = 0.0
            while offset <= width / 2.0:
                for line_x in (x + offset, x - offset):
                    self.generate_line2d(
                        line_x, y - height / 2, line_x, y + height / 2, line_width
                    )
                offset += div_x

    def generate_ring2d(self, params: Ring2dParameters) -> None:
        self.start_subshape()

        angle = math.asin(params.max_edge_length / (2 * params.outer_radius))
        segments = _segment_count((params.end_angle - params.start_angle) / angle)
        self._require((segments + 1) * 2, segments * 2 * 3)

        angle_step = (params.end_angle - params.start_angle) / segments

        arrow_start = arrow_end = 0.0
        if params.draw_arrow:
            if params.arrow_on_end:
                arrow_start = params.end_angle - params.arrow_length
                arrow_end = params.end_angle
            else:
                arrow_start = params.start_angle + params.arrow_length
                arrow_end = params.start_angle

        mid_radius = (params.outer_radius + params.inner_radius) / 2
        full_width = params.outer_radius - params.inner_radius
        for i in range(segments + 1):
            angle0 = angle_step * i + params.start_angle
            x0 = math.cos(angle0)
            y0 = math.sin(angle0)

            s = (
                _c_divide(angle0 - arrow_start, arrow_end - arrow_start)
                if params.draw_arrow
                else 0.0
            )
            width = full_width * (1 - _clamp01(s))
            inner = mid_radius - width / 2
            outer = mid_radius + width / 2

            self.write_vertex(
                (x0 * outer + params.center_x, y0 * outer + params.center_y)
            )
            self.write_vertex(
                (x0 * inner + params.center_x, y0 * inner + params.center_y)
            )

        for i in range(segments):
            outer_i, inner_i = 2 * i, 2 * i + 1
            outer_n, inner_n = 2 * (i + 1), 2 * (i + 1) + 1
            self.write_face(inner_i, outer_n, inner_n)
            self.write_face(inner_i, outer_i, outer_n)

    def _fan_faces(self, segments: int) -> None:
        for i in range(segments):
            self.write_face(0, i + 1, 1 + (i + 1) % segments)

    def _round_segments(
        self, max_edge_length: float, radius: float, smallest_angle: float
    ) -> int:
        angle = math.asin(max_edge_length / (2 * radius)) * 2
        angle = min(angle, math.pi - smallest_angle)
        return _segment_count(2 * math.pi / angle)

    def generate_circle2d(self, params: Circle2dParameters) -> None:
        self.start_subshape()

        segments = self._round_segments(
            params.max_edge_length, params.radius, params.smallest_angle
        )
        self._require(1 + segments, segments * 3)

        self.write_vertex((params.center_x, params.center_y), tex_coord=(0.5, 0.5))

        angle_step = 2 * math.pi / segments
        for i in range(segments):
            x = math.cos(angle_step * i)
            y = math.sin(angle_step * i)
            self.write_vertex(
                (params.center_x + x * params.radius, params.center_y + y * params.radius),
                tex_coord=(0.5 * x + 0.5, 0.5 * y + 0.5),
            )

        self._fan_faces(segments)

    def generate_cam(self, params: Cam2dParameters) -> None:
        """Cam profile traced by a roller follower riding on the base circle plus lift."""
        self.start_subshape()

        segments = self._round_segments(
            params.max_edge_length, params.base_radius, params.smallest_angle
        )
        self._require(1 + segments, segments * 3)

        self.write_vertex((params.center_x, params.center_y), tex_coord=(0.5, 0.5))

        angle_step = 2 * math.pi / segments
        base_roller_position = params.base_radius + params.roller_radius

        last_roller = (0.0, 0.0)
        tangents: list[Point] = []
        for i in range(segments):
            angle0 = angle_step * i
            x = math.cos(angle0 + math.pi / 2)
            y = math.sin(angle0 + math.pi / 2)

            lift = (
                0.0
                if params.lift is None
                else float(params.lift.sample_triangle(angle0 - math.pi))
            )
            roller_position = base_roller_position + lift
            roller = (
                params.center_x + x * roller_position,
                params.center_y + y * roller_position,
            )

            dx, dy = -1.0, 0.0
            if i != 0:
                dx = roller[0] - last_roller[0]
                dy = roller[1] - last_roller[1]
                mag = math.hypot(dx, dy)
                dx /= mag
                dy /= mag
            last_roller = roller

            tangents.append(
                (roller[0] - dy * params.roller_radius, roller[1] + dx * params.roller_radius)
            )

        for i in range(segments):
            prev_x, prev_y = tangents[i - 1]
            next_x, next_y = tangents[(i + 1) % segments]
            self.write_vertex(
                ((prev_x + next_x) / 2, (prev_y + next_y) / 2), tex_coord=(0.0, 0.5)
            )

        self._fan_faces(segments)

    def generate_rhombus(self, params: Rhombus2dParameters) -> None:
        self.start_subshape()
        self._require(4, 6)

        cx, cy = params.center_x, params.center_y
        hw, hh, shear = params.width / 2, params.height / 2, params.shear
        self.write_vertex((cx + shear + hw, cy + hh), tex_coord=(1.0, 1.0))
        self.write_vertex((cx + shear - hw, cy + hh), tex_coord=(0.0, 1.0))
        self.write_vertex((cx - shear + hw, cy - hh), tex_coord=(1.0, 0.0))
        self.write_vertex((cx - shear - hw, cy - hh), tex_coord=(0.0, 0.0))
        self.write_face(0, 1, 2)
        self.write_face(1, 3, 2)

    def generate_trapezoid2d(self, params: Trapezoid2dParameters) -> None:
        self.start_subshape()
        self._require(4, 6)

        cx, cy = params.center_x, params.center_y
        hh = params.height / 2
        self.write_vertex((cx - params.base / 2, cy - hh), tex_coord=(1.0, 1.0))
        self.write_vertex((cx + params.base / 2, cy - hh), tex_coord=(0.0, 1.0))
        self.write_vertex((cx - params.top / 2, cy + hh), tex_coord=(1.0, 0.0))
        self.write_vertex((cx + params.top / 2, cy + hh), tex_coord=(1.0, 0.0))
        self.write_face(0, 1, 2)
        self.write_face(1, 3, 2)

    def generate_isosceles_triangle(
        self, x: float, y: float, width: float, height: float
    ) -> None:
        self.start_subshape()
        self._require(3, 3)

        self.write_vertex((x - width / 2, y), tex_coord=(1.0, 1.0))
        self.write_vertex((x + width / 2, y), tex_coord=(0.0, 1.0))
        self.write_vertex((x, y + height), tex_coord=(1.0, 0.0))
        self.write_face(0, 1, 2)

    def _write_path_pair(self, p: Point, perp_x: float, perp_y: float, width: float) -> None:
        half = width / 2
        self.write_vertex((p[0] + perp_x * half, p[1] + perp_y * half))
        self.write_vertex((p[0] - perp_x * half, p[1] - perp_y * half))

    def start_path(self, params: PathParameters) -> None:
        """Begin a path: reserve space for all of it and emit its first point."""
        self.start_subshape()

        n = params.count
        if n < 2:
            return

        first = params.point(0)
        second = params.point(1)
        dx = second[0] - first[0]
        dy = second[1] - first[1]
        length = math.hypot(dx, dy)
        if length == 0:
            raise ValueError("path starts with a zero-length segment")
        dir_x, dir_y = dx / length, dy / length
        perp_x, perp_y = -dir_y, dir_x

        self._require(n * 2, (n - 1) * 6)
        self._write_path_pair(first, perp_x, perp_y, params.width)

        params.v0 = 0
        params.v1 = 1
        params.pdir_x, params.pdir_y = dir_x, dir_y
        params.perp_x, params.perp_y = perp_x, perp_y

    def generate_path_segment(self, params: PathParameters, detached: bool) -> None:
        """Emit point ``params.i`` and, unless ``detached``, join it to the previous one."""
        n = params.count
        if params.i > n - 1:
            return

        p = params.point(params.i)

        if params.i == n - 1:
            self._write_path_pair(p, params.perp_x, params.perp_y, params.width)
            if not detached:
                self.write_face(params.v0, params.v1, params.v1 + 1)
                self.write_face(params.v1, params.v1 + 2, params.v1 + 1)
            return

        nxt = params.point(params.i + 1)
        dx = nxt[0] - p[0]
        dy = nxt[1] - p[1]
        length = math.hypot(dx, dy)
        if length == 0:
            raise ValueError("path has a zero-length segment")
        dir_x, dir_y = dx / length, dy / length

        perp_x = -dir_y - params.pdir_y
        perp_y = dir_x + params.pdir_x
        perp_l = math.hypot(perp_x, perp_y)
        if perp_l == 0:
            perp_x, perp_y = -dir_y, dir_x
        else:
            perp_x /= perp_l
            perp_y /= perp_l

        self._write_path_pair(p, perp_x, perp_y, params.width)
        if not detached:
            self.write_face(params.v0, params.v1, params.v1 + 1)
            self.write_face(params.v1, params.v1 + 2, params.v1 + 1)

        params.v0 = params.v1 + 1
        params.v1 = params.v1 + 2
        params.pdir_x, params.pdir_y = dir_x, dir_y
        params.perp_x, params.perp_y = perp_x, perp_y