import pytest

from svg_geometry import point_distance


class FakeShapeFactory:
    """Pure-Python stand-in for the CadQuery kernel; records every call"""

    def __init__(self, fail_lines=False, fail_beziers=False, fail_wire=False):
        self.fail_lines = fail_lines
        self.fail_beziers = fail_beziers
        self.fail_wire = fail_wire
        self.calls = []

    def line(self, start, end):
        self.calls.append(('line', start, end))
        if self.fail_lines:
            return None, "Line creation failed: kernel refused"
        if point_distance(start, end) == 0:
            return None, "Line creation failed: Both points are equal"
        return ('edge', 'line', start, end), ""

    def bezier(self, points):
        self.calls.append(('bezier', tuple(points)))
        if self.fail_beziers:
            return None, "Bezier creation failed: kernel refused"
        return ('edge', 'bezier', tuple(points)), ""

    def wire(self, edges):
        self.calls.append(('wire', len(edges)))
        if self.fail_wire:
            return None, "Wire creation failed: edges are not connected"
        return ('wire', tuple(edges)), ""


@pytest.fixture
def fake_factory():
    return FakeShapeFactory()


def assert_point(p, x, y, z=0.0, abs_tol=1e-9):
    """Assert a Vec3 matches the expected coordinates"""
    assert (p.x, p.y, p.z) == pytest.approx((x, y, z), abs=abs_tol), f"{p} != ({x}, {y}, {z})"
