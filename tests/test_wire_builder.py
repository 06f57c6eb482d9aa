"""
Integration tests against the CadQuery kernel: edge and wire construction,
STEP export and the command line entry point.
"""
import pytest

cq = pytest.importorskip("cadquery")

from ezdxf.math import Vec3

from conversion_result import ErrorKind
from svg_converter import SVGToWireConverter, main
from wire_builder import ShapeFactory, make_compound


SQUARE_SVG = '<svg xmlns="http://www.w3.org/2000/svg"><rect id="square" width="10" height="10"/></svg>'


class TestShapeFactory:

    def test_line(self):
        edge, error = ShapeFactory.line(Vec3(0, 0, 0), Vec3(10, 0, 0))
        assert error == ""
        assert edge.Length() == pytest.approx(10)

    def test_degenerate_line(self):
        edge, error = ShapeFactory.line(Vec3(1, 1, 0), Vec3(1, 1, 0))
        assert edge is None
        assert error.startswith("Line creation failed:")

    def test_bezier(self):
        points = [Vec3(0, 0, 0), Vec3(0, 5, 0), Vec3(10, 5, 0), Vec3(10, 0, 0)]
        edge, error = ShapeFactory.bezier(points)
        assert error == ""
        assert edge.startPoint().toTuple() == pytest.approx((0, 0, 0))
        assert edge.endPoint().toTuple() == pytest.approx((10, 0, 0))

    def test_bezier_needs_four_points(self):
        edge, error = ShapeFactory.bezier([Vec3(0, 0, 0), Vec3(1, 1, 0)])
        assert edge is None
        assert error == "Bezier creation failed: expected 4 points, got 2"

    def test_closed_wire(self):
        corners = [Vec3(0, 0, 0), Vec3(10, 0, 0), Vec3(10, 10, 0), Vec3(0, 0, 0)]
        edges = [ShapeFactory.line(a, b)[0] for a, b in zip(corners, corners[1:])]
        wire, error = ShapeFactory.wire(edges)
        assert error == ""
        assert wire.IsClosed()

    def test_empty_wire(self):
        wire, error = ShapeFactory.wire([])
        assert wire is None
        assert error == "Wire creation failed: no edges"


class TestKernelConversion:

    def test_rect_becomes_closed_wire(self):
        result = SVGToWireConverter().convert(SQUARE_SVG)
        assert result.is_ok
        node, = result.group
        assert isinstance(node.wire, cq.Wire)
        assert node.wire.IsClosed()
        assert len(node.wire.Edges()) == 4

    def test_circle_wire(self):
        result = SVGToWireConverter().convert('<svg><circle cx="0" cy="0" r="10"/></svg>')
        node, = result.group
        assert node.wire.IsClosed()
        assert node.wire.Length() == pytest.approx(2 * 3.141592653589793 * 10, rel=1e-3)

    def test_degenerate_line_fails(self):
        result = SVGToWireConverter().convert('<svg><line x1="2" y1="2" x2="2" y2="2"/></svg>')
        assert result.error_kind == ErrorKind.NO_VALID_ELEMENTS

    def test_compound(self):
        result = SVGToWireConverter().convert(
            '<svg><rect width="2" height="2"/><line x2="5"/></svg>')
        compound = make_compound(result.group)
        assert len(compound.Wires()) == 2

    def test_export_step(self, tmp_path):
        converter = SVGToWireConverter()
        converter.convert(SQUARE_SVG)
        output = tmp_path / "square.step"
        assert converter.export_step(str(output))
        assert output.stat().st_size > 0


class TestCommandLine:

    def test_main_writes_step_and_dxf(self, tmp_path):
        svg = tmp_path / "drawing.svg"
        svg.write_text(SQUARE_SVG, encoding='utf-8')
        dxf = tmp_path / "drawing.dxf"
        assert main([str(svg), "--dxf", str(dxf), "--arcs", "bezier"]) == 0
        assert (tmp_path / "drawing.step").exists()
        assert dxf.exists()

    def test_main_reports_failure(self, tmp_path):
        svg = tmp_path / "empty.svg"
        svg.write_text("<svg><text>hi</text></svg>", encoding='utf-8')
        assert main([str(svg), "-o", str(tmp_path / "out.step")]) == 1
        assert not (tmp_path / "out.step").exists()
