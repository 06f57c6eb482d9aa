# ============================================================================
# shape_reducer.py - Basic Shape to Path Data Reduction
# ============================================================================

from typing import List, Mapping, Optional, Tuple
import re

from svg_config import Config


_FLOAT_RE = re.compile(r'[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?')


def _fmt(value: float) -> str:
    """Shortest string that parses back to exactly the same float"""
    return repr(float(value))


def _pt(x: float, y: float) -> str:
    return f"{_fmt(x)},{_fmt(y)}"


class ShapeReducer:
    """Rewrites rect, circle, ellipse, line, polyline and polygon as path data"""

    @staticmethod
    def number(attributes: Mapping[str, str], name: str, default: float = 0.0) -> float:
        """Read a numeric attribute; units are ignored, missing or invalid values give default"""
        value = attributes.get(name)
        if value is None:
            return default
        match = _FLOAT_RE.match(value.strip())
        if not match:
            return default
        return float(match.group(0))

    @staticmethod
    def parse_points(points: Optional[str]) -> List[Tuple[float, float]]:
        """Parse a points attribute into coordinate pairs; a trailing odd value is dropped"""
        if not points:
            return []
        values = [float(v) for v in _FLOAT_RE.findall(points)]
        return list(zip(values[0::2], values[1::2]))

    @staticmethod
    def rect(attributes: Mapping[str, str]) -> Optional[str]:
        num = ShapeReducer.number
        x, y = num(attributes, 'x'), num(attributes, 'y')
        w, h = num(attributes, 'width'), num(attributes, 'height')
        if w <= 0 or h <= 0:
            return None

        rx = max(0.0, num(attributes, 'rx'))
        ry = max(0.0, num(attributes, 'ry'))
        # Assumption: a single given radius is used for both corners axes
        if ry == 0:
            ry = rx
        if rx == 0:
            rx = ry
        rx = min(rx, w / 2)
        ry = min(ry, h / 2)

        if rx == 0 or ry == 0:
            return f"M{_pt(x, y)} h{_fmt(w)} v{_fmt(h)} h{_fmt(-w)} Z"

        corner = f"A{_fmt(rx)} {_fmt(ry)} 0 0 1"
        parts = [f"M{_pt(x + rx, y)}"]
        if w > 2 * rx:
            parts.append(f"H{_fmt(x + w - rx)}")
        parts.append(f"{corner} {_pt(x + w, y + ry)}")
        if h > 2 * ry:
            parts.append(f"V{_fmt(y + h - ry)}")
        parts.append(f"{corner} {_pt(x + w - rx, y + h)}")
        if w > 2 * rx:
            parts.append(f"H{_fmt(x + rx)}")
        parts.append(f"{corner} {_pt(x, y + h - ry)}")
        if h > 2 * ry:
            parts.append(f"V{_fmt(y + ry)}")
        parts.append(f"{corner} {_pt(x + rx, y)}")
        parts.append("Z")
        return " ".join(parts)

    @staticmethod
    def _four_arc_ellipse(cx: float, cy: float, rx: float, ry: float) -> str:
        """Leftmost point, then clockwise through top, right and bottom"""
        kx = Config.CIRCLE_KAPPA * rx
        ky = Config.CIRCLE_KAPPA * ry
        return " ".join([
            f"M{_pt(cx - rx, cy)}",
            f"C{_pt(cx - rx, cy - ky)} {_pt(cx - kx, cy - ry)} {_pt(cx, cy - ry)}",
            f"C{_pt(cx + kx, cy - ry)} {_pt(cx + rx, cy - ky)} {_pt(cx + rx, cy)}",
            f"C{_pt(cx + rx, cy + ky)} {_pt(cx + kx, cy + ry)} {_pt(cx, cy + ry)}",
            f"C{_pt(cx - kx, cy + ry)} {_pt(cx - rx, cy + ky)} {_pt(cx - rx, cy)}",
            "Z",
        ])

    @staticmethod
    def circle(attributes: Mapping[str, str]) -> Optional[str]:
        num = ShapeReducer.number
        r = num(attributes, 'r')
        if r <= 0:
            return None
        return ShapeReducer._four_arc_ellipse(num(attributes, 'cx'), num(attributes, 'cy'), r, r)

    @staticmethod
    def ellipse(attributes: Mapping[str, str]) -> Optional[str]:
        num = ShapeReducer.number
        rx, ry = num(attributes, 'rx'), num(attributes, 'ry')
        if rx <= 0 or ry <= 0:
            return None
        return ShapeReducer._four_arc_ellipse(num(attributes, 'cx'), num(attributes, 'cy'), rx, ry)

    @staticmethod
    def line(attributes: Mapping[str, str]) -> Optional[str]:
        num = ShapeReducer.number
        return (f"M{_pt(num(attributes, 'x1'), num(attributes, 'y1'))} "
                f"L{_pt(num(attributes, 'x2'), num(attributes, 'y2'))}")

    @staticmethod
    def polyline(attributes: Mapping[str, str], closed: bool = False) -> Optional[str]:
        points = ShapeReducer.parse_points(attributes.get('points'))
        if len(points) < 2:
            return None
        parts = [f"M{_pt(*points[0])}"] + [f"L{_pt(*p)}" for p in points[1:]]
        if closed:
            parts.append("Z")
        return " ".join(parts)

    @staticmethod
    def polygon(attributes: Mapping[str, str]) -> Optional[str]:
        return ShapeReducer.polyline(attributes, closed=True)

    @staticmethod
    def reduce(tag: str, attributes: Mapping[str, str]) -> Optional[str]:
        """Path data for a basic shape element, or None if it has no usable geometry"""
        reducers = {
            'rect': ShapeReducer.rect,
            'circle': ShapeReducer.circle,
            'ellipse': ShapeReducer.ellipse,
            'line': ShapeReducer.line,
            'polyline': ShapeReducer.polyline,
            'polygon': ShapeReducer.polygon,
        }
        reducer = reducers.get(tag)
        if reducer is None:
            raise ValueError(f"Not a basic shape element: {tag}")
        return reducer(attributes)
