from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Union

from domain.models import LayoutItem, Point
from domain.services.geometry import resolve_padding


class ShapeType(StrEnum):
    RECTANGLE = "shape_rectangle"
    ROUNDED_RECTANGLE = "shape_rounded_rectangle"
    CIRCLE = "shape_circle"
    ELLIPSE = "shape_ellipse"
    TRIANGLE = "shape_triangle"
    L_AREA = "shape_l_area"
    U_AREA = "shape_u_area"
    T_AREA = "shape_t_area"
    LOADING_BAY = "shape_loading_bay"
    CONVEYOR_CURVE = "shape_conveyor_curve"
    RAMP = "shape_ramp"
    POLYGON = "shape_polygon"
    BEZIER_CURVE = "shape_bezier_curve"
    CUSTOM_PATH = "shape_custom_path"


DEFAULT_POLYGON_SIDES = 6
STAR_POINTS = 5
STAR_INNER_RATIO = 0.5


@dataclass(frozen=True)
class MoveTo:
    point: Point


@dataclass(frozen=True)
class LineTo:
    point: Point


@dataclass(frozen=True)
class ArcTo:
    """Elliptical arc in center form; angles are radians, y axis pointing down."""

    center: Point
    rx: float
    ry: float
    start_angle: float
    end_angle: float

    def point_at(self, angle: float) -> Point:
        return Point(
            self.center.x + self.rx * math.cos(angle),
            self.center.y + self.ry * math.sin(angle),
        )

    @property
    def end(self) -> Point:
        return self.point_at(self.end_angle)


@dataclass(frozen=True)
class CubicTo:
    control1: Point
    control2: Point
    end: Point


@dataclass(frozen=True)
class ClosePath:
    pass


PathSegment = Union[MoveTo, LineTo, ArcTo, CubicTo, ClosePath]


@dataclass(frozen=True)
class ShapePath:
    shape_type: ShapeType
    segments: list[PathSegment] = field(default_factory=list)

    @property
    def is_closed(self) -> bool:
        return bool(self.segments) and isinstance(self.segments[-1], ClosePath)

    def to_svg(self) -> str:
        commands: list[str] = []
        for segment in self.segments:
            if isinstance(segment, MoveTo):
                commands.append(f"M {_fmt(segment.point.x)} {_fmt(segment.point.y)}")
            elif isinstance(segment, LineTo):
                commands.append(f"L {_fmt(segment.point.x)} {_fmt(segment.point.y)}")
            elif isinstance(segment, ArcTo):
                sweep = segment.end_angle - segment.start_angle
                large_arc = 1 if abs(sweep) > math.pi else 0
                sweep_flag = 1 if sweep > 0 else 0
                end = segment.end
                commands.append(
                    f"A {_fmt(segment.rx)} {_fmt(segment.ry)} 0 {large_arc} {sweep_flag} "
                    f"{_fmt(end.x)} {_fmt(end.y)}"
                )
            elif isinstance(segment, CubicTo):
                commands.append(
                    f"C {_fmt(segment.control1.x)} {_fmt(segment.control1.y)} "
                    f"{_fmt(segment.control2.x)} {_fmt(segment.control2.y)} "
                    f"{_fmt(segment.end.x)} {_fmt(segment.end.y)}"
                )
            else:
                commands.append("Z")
        return " ".join(commands)

    def sample_points(self, steps: int = 16) -> list[Point]:
        steps = max(1, steps)
        points: list[Point] = []
        start: Point | None = None
        current: Point | None = None
        for segment in self.segments:
            if isinstance(segment, MoveTo):
                start = current = segment.point
                points.append(segment.point)
            elif isinstance(segment, LineTo):
                if current is not None:
                    points.extend(_sample_line(current, segment.point, steps))
                current = segment.point
            elif isinstance(segment, ArcTo):
                for step in range(1, steps + 1):
                    t = step / steps
                    angle = segment.start_angle + (segment.end_angle - segment.start_angle) * t
                    points.append(segment.point_at(angle))
                current = segment.end
            elif isinstance(segment, CubicTo):
                if current is not None:
                    points.extend(_sample_cubic(current, segment, steps))
                current = segment.end
            elif start is not None and current is not None:
                points.extend(_sample_line(current, start, steps))
                current = start
        return points


ShapeBuilder = Callable[[float, float, float, float, int], list[PathSegment]]


def generate_shape_path(
    shape_type: ShapeType | str,
    width: float,
    height: float,
    origin_x: float = 0.0,
    origin_y: float = 0.0,
    *,
    sides: int = DEFAULT_POLYGON_SIDES,
) -> ShapePath:
    resolved = _resolve_shape_type(shape_type)
    w = max(0.0, float(width))
    h = max(0.0, float(height))
    builder = _BUILDERS[resolved]
    return ShapePath(shape_type=resolved, segments=builder(origin_x, origin_y, w, h, sides))


def container_outline(item: LayoutItem, padding: float | None = None) -> ShapePath | None:
    if not item.is_container:
        return None
    inset = resolve_padding(item, padding)
    return generate_shape_path(
        item.type,
        item.width - inset * 2,
        item.height - inset * 2,
        item.x + inset,
        item.y + inset,
    )


def _resolve_shape_type(shape_type: ShapeType | str) -> ShapeType:
    if isinstance(shape_type, ShapeType):
        return shape_type
    try:
        return ShapeType(str(shape_type or "").strip())
    except ValueError:
        return ShapeType.RECTANGLE


def _polyline(points: list[tuple[float, float]]) -> list[PathSegment]:
    segments: list[PathSegment] = [MoveTo(Point(*points[0]))]
    segments.extend(LineTo(Point(*point)) for point in points[1:])
    segments.append(ClosePath())
    return segments


def _rectangle(x: float, y: float, w: float, h: float, _sides: int) -> list[PathSegment]:
    return _polyline([(x, y), (x + w, y), (x + w, y + h), (x, y + h)])


def _rounded_rectangle(x: float, y: float, w: float, h: float, _sides: int) -> list[PathSegment]:
    r = min(10.0, w / 4, h / 4)
    half_pi = math.pi / 2
    return [
        MoveTo(Point(x + r, y)),
        LineTo(Point(x + w - r, y)),
        ArcTo(Point(x + w - r, y + r), r, r, -half_pi, 0.0),
        LineTo(Point(x + w, y + h - r)),
        ArcTo(Point(x + w - r, y + h - r), r, r, 0.0, half_pi),
        LineTo(Point(x + r, y + h)),
        ArcTo(Point(x + r, y + h - r), r, r, half_pi, math.pi),
        LineTo(Point(x, y + r)),
        ArcTo(Point(x + r, y + r), r, r, math.pi, 3 * half_pi),
        ClosePath(),
    ]


def _ellipse_segments(center: Point, rx: float, ry: float) -> list[PathSegment]:
    return [
        MoveTo(Point(center.x - rx, center.y)),
        ArcTo(center, rx, ry, math.pi, 2 * math.pi),
        ArcTo(center, rx, ry, 0.0, math.pi),
        ClosePath(),
    ]


def _circle(x: float, y: float, w: float, h: float, _sides: int) -> list[PathSegment]:
    radius = min(w, h) / 2
    return _ellipse_segments(Point(x + w / 2, y + h / 2), radius, radius)


def _ellipse(x: float, y: float, w: float, h: float, _sides: int) -> list[PathSegment]:
    return _ellipse_segments(Point(x + w / 2, y + h / 2), w / 2, h / 2)


def _triangle(x: float, y: float, w: float, h: float, _sides: int) -> list[PathSegment]:
    return _polyline([(x + w / 2, y), (x + w, y + h), (x, y + h)])


def _l_area(x: float, y: float, w: float, h: float, _sides: int) -> list[PathSegment]:
    t = min(40.0, w / 3, h / 3)
    return _polyline(
        [
            (x, y),
            (x + w, y),
            (x + w, y + t),
            (x + t, y + t),
            (x + t, y + h),
            (x, y + h),
        ]
    )


def _u_area(x: float, y: float, w: float, h: float, _sides: int) -> list[PathSegment]:
    t = min(30.0, w / 4, h / 3)
    opening = max(0.0, min(w * 0.4, w - 2 * t))
    opening_start = x + (w - opening) / 2
    return _polyline(
        [
            (x, y),
            (x + w, y),
            (x + w, y + h),
            (x + w - t, y + h),
            (x + w - t, y + t),
            (opening_start + opening, y + t),
            (opening_start + opening, y + h),
            (opening_start, y + h),
            (opening_start, y + t),
            (x + t, y + t),
            (x + t, y + h),
            (x, y + h),
        ]
    )


def _t_area(x: float, y: float, w: float, h: float, _sides: int) -> list[PathSegment]:
    bar = min(30.0, h / 3)
    stem = min(40.0, w / 3)
    stem_start = x + (w - stem) / 2
    return _polyline(
        [
            (x, y),
            (x + w, y),
            (x + w, y + bar),
            (stem_start + stem, y + bar),
            (stem_start + stem, y + h),
            (stem_start, y + h),
            (stem_start, y + bar),
            (x, y + bar),
        ]
    )


def _loading_bay(x: float, y: float, w: float, h: float, _sides: int) -> list[PathSegment]:
    dock_width = w * 0.8
    dock_height = h * 0.6
    return _polyline(
        [
            (x, y),
            (x + dock_width, y),
            (x + dock_width, y + dock_height),
            (x + w, y + dock_height + h * 0.2),
            (x + w, y + h),
            (x, y + h),
        ]
    )


def _conveyor_curve(x: float, y: float, w: float, h: float, _sides: int) -> list[PathSegment]:
    radius = min(w, h) / 2
    center = Point(x + w / 2, y + h / 2)
    quarter = math.pi / 2
    segments: list[PathSegment] = [MoveTo(Point(center.x - radius, center.y))]
    for step in range(4):
        start = math.pi + step * quarter
        segments.append(ArcTo(center, radius, radius, start, start + quarter))
    segments.append(ClosePath())
    return segments


def _ramp(x: float, y: float, w: float, h: float, _sides: int) -> list[PathSegment]:
    return _polyline([(x, y + h), (x + w, y), (x + w, y + h * 0.2)])


def _regular_points(
    center: Point,
    radii: list[float],
    count: int,
) -> list[tuple[float, float]]:
    points: list[tuple[float, float]] = []
    for index in range(count):
        angle = index * 2 * math.pi / count - math.pi / 2
        radius = radii[index % len(radii)]
        points.append(
            (center.x + radius * math.cos(angle), center.y + radius * math.sin(angle))
        )
    return points


def _polygon(x: float, y: float, w: float, h: float, sides: int) -> list[PathSegment]:
    count = max(3, sides)
    radius = min(w, h) / 2
    return _polyline(_regular_points(Point(x + w / 2, y + h / 2), [radius], count))


def _bezier_curve(x: float, y: float, w: float, h: float, _sides: int) -> list[PathSegment]:
    return [
        MoveTo(Point(x, y + h / 2)),
        CubicTo(
            control1=Point(x + w * 0.25, y),
            control2=Point(x + w * 0.75, y + h),
            end=Point(x + w, y + h / 2),
        ),
    ]


def _star(x: float, y: float, w: float, h: float, _sides: int) -> list[PathSegment]:
    outer = min(w, h) / 2
    radii = [outer, outer * STAR_INNER_RATIO]
    return _polyline(_regular_points(Point(x + w / 2, y + h / 2), radii, STAR_POINTS * 2))


_BUILDERS: dict[ShapeType, ShapeBuilder] = {
    ShapeType.RECTANGLE: _rectangle,
    ShapeType.ROUNDED_RECTANGLE: _rounded_rectangle,
    ShapeType.CIRCLE: _circle,
    ShapeType.ELLIPSE: _ellipse,
    ShapeType.TRIANGLE: _triangle,
    ShapeType.L_AREA: _l_area,
    ShapeType.U_AREA: _u_area,
    ShapeType.T_AREA: _t_area,
    ShapeType.LOADING_BAY: _loading_bay,
    ShapeType.CONVEYOR_CURVE: _conveyor_curve,
    ShapeType.RAMP: _ramp,
    ShapeType.POLYGON: _polygon,
    ShapeType.BEZIER_CURVE: _bezier_curve,
    ShapeType.CUSTOM_PATH: _star,
}


def _sample_line(start: Point, end: Point, steps: int) -> list[Point]:
    return [
        Point(start.x + (end.x - start.x) * step / steps, start.y + (end.y - start.y) * step / steps)
        for step in range(1, steps + 1)
    ]


def _sample_cubic(start: Point, curve: CubicTo, steps: int) -> list[Point]:
    points: list[Point] = []
    for step in range(1, steps + 1):
        t = step / steps
        u = 1 - t
        points.append(
            Point(
                u**3 * start.x
                + 3 * u**2 * t * curve.control1.x
                + 3 * u * t**2 * curve.control2.x
                + t**3 * curve.end.x,
                u**3 * start.y
                + 3 * u**2 * t * curve.control1.y
                + 3 * u * t**2 * curve.control2.y
                + t**3 * curve.end.y,
            )
        )
    return points


def _fmt(value: float) -> str:
    rounded = round(value, 4)
    if float(rounded).is_integer():
        return str(int(rounded))
    return str(rounded)
