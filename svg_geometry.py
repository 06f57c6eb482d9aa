# ============================================================================
# svg_geometry.py - Points, Curve Primitives and Curve Conversions
# ============================================================================

from dataclasses import dataclass
from typing import List, Tuple, Union
import math

from ezdxf.math import Vec3

from svg_config import Config


def map_point(x: float, y: float) -> Vec3:
    """Map an SVG (Y-down) coordinate onto the Y-up working plane at Z=0"""
    return Vec3(x, -y, 0)


def point_distance(p1: Vec3, p2: Vec3) -> float:
    """Calculate distance between two points"""
    return math.sqrt((p2.x - p1.x)**2 + (p2.y - p1.y)**2 + (p2.z - p1.z)**2)


def reflect_point(point: Vec3, center: Vec3) -> Vec3:
    """Reflect point through center (2*center - point)"""
    return Vec3(2 * center.x - point.x, 2 * center.y - point.y, 0)


@dataclass(frozen=True)
class Line:
    """Straight segment between two points"""
    start: Vec3
    end: Vec3

    @property
    def points(self) -> Tuple[Vec3, Vec3]:
        return (self.start, self.end)

    def point_at(self, t: float) -> Vec3:
        return self.start + (self.end - self.start) * t


@dataclass(frozen=True)
class CubicBezier:
    """Cubic Bezier segment: two end points and two control points"""
    p0: Vec3
    cp1: Vec3
    cp2: Vec3
    p3: Vec3

    @property
    def start(self) -> Vec3:
        return self.p0

    @property
    def end(self) -> Vec3:
        return self.p3

    @property
    def points(self) -> Tuple[Vec3, Vec3, Vec3, Vec3]:
        return (self.p0, self.cp1, self.cp2, self.p3)

    def point_at(self, t: float) -> Vec3:
        """Evaluate the Bernstein form at parameter t"""
        s = 1.0 - t
        return (self.p0 * (s * s * s) + self.cp1 * (3 * s * s * t)
                + self.cp2 * (3 * s * t * t) + self.p3 * (t * t * t))


CurvePrimitive = Union[Line, CubicBezier]


def elevate_quadratic(p0: Vec3, p1: Vec3, p2: Vec3) -> Tuple[Vec3, Vec3, Vec3, Vec3]:
    """
    Convert quadratic Bezier to cubic Bezier
    P0: start point, P1: control point, P2: end point
    Returns (P0, CP1, CP2, P2) for the exactly equivalent cubic
    """
    # CP1 = P0 + 2/3 * (P1 - P0)
    cp1 = Vec3(p0.x + (2 / 3) * (p1.x - p0.x), p0.y + (2 / 3) * (p1.y - p0.y), 0)

    # CP2 = P2 + 2/3 * (P1 - P2)
    cp2 = Vec3(p2.x + (2 / 3) * (p1.x - p2.x), p2.y + (2 / 3) * (p1.y - p2.y), 0)

    return p0, cp1, cp2, p2


def _vector_angle(ux: float, uy: float, vx: float, vy: float) -> float:
    return math.atan2(ux * vy - uy * vx, ux * vx + uy * vy)


def arc_to_cubics(start: Vec3, end: Vec3, rx: float, ry: float, rotation_deg: float,
                  large_arc: bool, sweep: bool, max_segment_angle: float = None) -> List[CubicBezier]:
    """
    Decompose an elliptical arc (endpoint parameterization) into cubic Beziers.

    Works on the plane the points live in: callers on the mapped Y-up plane
    must pass the negated SVG rotation and the flipped sweep flag.
    Returns an empty list when the end points coincide. A zero radius
    degrades the arc to its chord, returned as a flat cubic.
    """
    if max_segment_angle is None:
        max_segment_angle = Config.ARC_MAX_SEGMENT_ANGLE

    if point_distance(start, end) == 0:
        return []

    rx = abs(rx)
    ry = abs(ry)
    if rx == 0 or ry == 0:
        return [CubicBezier(start, start, end, end)]

    phi = math.radians(rotation_deg % 360.0)
    cos_phi = math.cos(phi)
    sin_phi = math.sin(phi)

    # Step 1: transform to the ellipse-aligned frame
    dx = (start.x - end.x) / 2.0
    dy = (start.y - end.y) / 2.0
    x1p = cos_phi * dx + sin_phi * dy
    y1p = -sin_phi * dx + cos_phi * dy

    # Step 2: scale up radii that cannot span the end points
    lam = (x1p * x1p) / (rx * rx) + (y1p * y1p) / (ry * ry)
    if lam > 1:
        scale = math.sqrt(lam)
        rx *= scale
        ry *= scale

    # Step 3: center in the aligned frame, then in the plane
    sign = -1 if large_arc == sweep else 1
    numerator = rx * rx * ry * ry - rx * rx * y1p * y1p - ry * ry * x1p * x1p
    denom = rx * rx * y1p * y1p + ry * ry * x1p * x1p
    coef = sign * math.sqrt(max(0.0, numerator / denom))
    cxp = coef * (rx * y1p) / ry
    cyp = coef * -(ry * x1p) / rx

    cx = cos_phi * cxp - sin_phi * cyp + (start.x + end.x) / 2.0
    cy = sin_phi * cxp + cos_phi * cyp + (start.y + end.y) / 2.0

    # Step 4: start angle and sweep extent
    ux = (x1p - cxp) / rx
    uy = (y1p - cyp) / ry
    vx = (-x1p - cxp) / rx
    vy = (-y1p - cyp) / ry
    theta1 = _vector_angle(1.0, 0.0, ux, uy)
    delta_theta = _vector_angle(ux, uy, vx, vy)
    if not sweep and delta_theta > 0:
        delta_theta -= 2 * math.pi
    elif sweep and delta_theta < 0:
        delta_theta += 2 * math.pi

    segments = max(1, int(math.ceil(abs(delta_theta) / (max_segment_angle + 1e-9))))
    delta = delta_theta / segments
    e = 4 * math.tan(delta / 4) / 3

    def on_ellipse(t: float) -> Tuple[float, float]:
        return (cx + rx * cos_phi * math.cos(t) - ry * sin_phi * math.sin(t),
                cy + rx * sin_phi * math.cos(t) + ry * cos_phi * math.sin(t))

    def derivative(t: float) -> Tuple[float, float]:
        return (-rx * cos_phi * math.sin(t) - ry * sin_phi * math.cos(t),
                -rx * sin_phi * math.sin(t) + ry * cos_phi * math.cos(t))

    cubics = []
    p_start = start
    for i in range(segments):
        t1 = theta1 + i * delta
        t2 = t1 + delta
        if i == segments - 1:
            p_end = end  # land exactly on the requested end point
        else:
            p_end = Vec3(*on_ellipse(t2), 0)
        d1 = derivative(t1)
        d2 = derivative(t2)
        ctrl1 = Vec3(p_start.x + e * d1[0], p_start.y + e * d1[1], 0)
        ctrl2 = Vec3(p_end.x - e * d2[0], p_end.y - e * d2[1], 0)
        cubics.append(CubicBezier(p_start, ctrl1, ctrl2, p_end))
        p_start = p_end

    return cubics
