"""
Tests for the SVGToWireConverter orchestration, run against a pure-Python
shape factory so no CAD kernel is needed.
"""
import re

import ezdxf
import pytest

from conversion_result import ElementStatus, ErrorKind
from svg_converter import ConversionLog, SVGToWireConverter, dxf_layer_name
from svg_geometry import CubicBezier, Line
from conftest import FakeShapeFactory, assert_point


SVG_NS = 'xmlns="http://www.w3.org/2000/svg"'


def convert(content, factory=None, **kwargs):
    converter = SVGToWireConverter(factory or FakeShapeFactory(), **kwargs)
    return converter, converter.convert(content)


class TestEndToEnd:

    def test_triangle_path(self):
        _, result = convert('<svg><path d="M0,0 L10,0 L10,10 Z"/></svg>')
        assert result.is_ok
        node, = result.group
        assert len(node.primitives) == 3
        expected = [((0, 0), (10, 0)), ((10, 0), (10, -10)), ((10, -10), (0, 0))]
        for line, (start, end) in zip(node.primitives, expected):
            assert isinstance(line, Line)
            assert_point(line.start, *start)
            assert_point(line.end, *end)

    def test_rect(self):
        _, result = convert('<svg><rect x="0" y="0" width="10" height="5"/></svg>')
        node, = result.group
        assert len(node.primitives) == 4
        assert node.primitives[0].start == node.primitives[-1].end
        assert node.name == "Rect 1"

    def test_no_supported_elements(self):
        converter, result = convert('<svg><text>hi</text></svg>')
        assert not result.is_ok
        assert result.group is None
        assert result.error_kind == ErrorKind.NO_RECOGNIZED_ELEMENTS
        assert result.error == "No supported elements found in SVG"
        assert converter.get_error_log() == ["No supported elements found in SVG"]

    def test_single_point_polyline(self):
        _, result = convert('<svg><polyline points="0,0"/></svg>')
        assert result.error_kind == ErrorKind.NO_VALID_ELEMENTS
        assert result.error == "No valid elements could be imported"
        outcome, = result.outcomes
        assert outcome.status == ElementStatus.SKIPPED
        assert outcome.error_kind == ErrorKind.ELEMENT_REDUCTION_EMPTY
        assert result.stats.skipped == 1

    def test_malformed_document(self):
        _, result = convert('<svg><path d="M0,0"></svg')
        assert result.error_kind == ErrorKind.DOCUMENT_MALFORMED
        assert result.error == "Invalid SVG file"
        assert result.stats.attempted == 0

    def test_circle_curves(self):
        _, result = convert(f'<svg {SVG_NS}><circle id="c" cx="5" cy="5" r="5"/></svg>')
        node, = result.group
        assert node.name == "c"
        assert len(node.primitives) == 4
        assert all(isinstance(p, CubicBezier) for p in node.primitives)

    def test_group_name(self):
        _, result = convert('<svg><line x2="5"/></svg>')
        assert result.group.name == "SVG Import"
        _, result = convert('<svg><line x2="5"/></svg>', group_name="Layer 1")
        assert result.group.name == "Layer 1"


class TestElementFailures:

    def test_mixed_document_stats(self):
        svg = f"""<svg {SVG_NS}>
            <path id="good" d="M0,0 L10,0"/>
            <path id="bad" d="M0,0 L10"/>
            <path id="empty"/>
            <rect width="0" height="4"/>
            <ellipse cx="0" cy="0" rx="3" ry="2"/>
        </svg>"""
        converter, result = convert(svg)
        assert result.is_ok
        assert result.group.names() == ["good", "Ellipse 1"]
        stats = result.stats
        assert (stats.attempted, stats.succeeded, stats.skipped, stats.failed) == (5, 2, 2, 1)

        bad = next(o for o in result.outcomes if o.name == "bad")
        assert bad.status == ElementStatus.FAILED
        assert bad.error_kind == ErrorKind.GRAMMAR_PARSE_FAILURE
        assert bad.reason.startswith("Path conversion error:")
        assert len(converter.get_error_log()) == 1
        assert any("Import completed: 2 success, 1 failed, 2 skipped" in line for line in result.logs)

    def test_partial_primitive_failure(self):
        factory = FakeShapeFactory(fail_beziers=True)
        _, result = convert('<svg><path d="M0,0 L10,0 C10,5 5,10 0,10"/></svg>', factory)
        node, = result.group
        assert len(node.primitives) == 1
        outcome, = result.outcomes
        assert outcome.status == ElementStatus.CONVERTED
        assert outcome.error_kind == ErrorKind.PRIMITIVE_CONSTRUCTION_FAILURE
        assert outcome.reason == "1 of 2 primitives skipped"
        assert (outcome.primitive_count, outcome.edge_count) == (2, 1)
        assert any("primitive 2 skipped" in line for line in result.logs)

    def test_all_primitives_fail(self):
        factory = FakeShapeFactory(fail_beziers=True)
        _, result = convert('<svg><circle r="4"/></svg>', factory)
        assert result.error_kind == ErrorKind.NO_VALID_ELEMENTS
        outcome, = result.outcomes
        assert outcome.error_kind == ErrorKind.WIRE_ASSEMBLY_FAILURE
        assert outcome.reason == "no edges could be constructed"

    def test_degenerate_line(self):
        _, result = convert('<svg><line x1="1" y1="1" x2="1" y2="1"/><line x2="3"/></svg>')
        assert result.group.names() == ["Line 2"]
        assert result.outcomes[0].status == ElementStatus.FAILED

    def test_moveto_only_path(self):
        _, result = convert('<svg><path d="M5,5"/><line x2="3"/></svg>')
        outcome = result.outcomes[0]
        assert outcome.error_kind == ErrorKind.WIRE_ASSEMBLY_FAILURE
        assert outcome.reason == "no primitives generated"

    def test_wire_failure(self):
        factory = FakeShapeFactory(fail_wire=True)
        _, result = convert('<svg><path d="M0,0 L10,0"/></svg>', factory)
        assert result.error_kind == ErrorKind.NO_VALID_ELEMENTS
        assert result.outcomes[0].reason == "Wire creation failed: edges are not connected"

    def test_unexpected_exception_is_contained(self):
        class ExplodingFactory(FakeShapeFactory):
            def wire(self, edges):
                raise RuntimeError("boom")

        _, result = convert('<svg><path d="M0,0 L10,0"/></svg>', ExplodingFactory())
        outcome, = result.outcomes
        assert outcome.status == ElementStatus.FAILED
        assert outcome.reason == "Unexpected error: boom"
        assert result.error_kind == ErrorKind.NO_VALID_ELEMENTS


class TestOptions:

    SVG = f'<svg {SVG_NS}><rect id="r" width="2" height="2"/><path id="p" d="M0,0 L1,1"/></svg>'

    def test_type_grouped_order(self):
        _, result = convert(self.SVG)
        assert result.group.names() == ["p", "r"]

    def test_document_order(self):
        _, result = convert(self.SVG, element_order='document')
        assert result.group.names() == ["r", "p"]

    def test_bezier_arcs(self):
        svg = '<svg><path d="M0,0 A5,5 0 0 1 10,0"/></svg>'
        _, chord = convert(svg)
        _, bezier = convert(svg, arc_approximation='bezier')
        assert [type(p) for p in chord.group.children[0].primitives] == [Line]
        assert [type(p) for p in bezier.group.children[0].primitives] == [CubicBezier, CubicBezier]

    def test_verbose_error_has_debug_log(self, capsys):
        _, result = convert('<svg', verbose=True)
        assert result.error.startswith("Invalid SVG file\n\n--- Debug Log ---\n[")
        assert "Parser error detected" in result.error
        assert "SVG import started" in capsys.readouterr().out

    def test_quiet_by_default(self, capsys):
        convert('<svg><line x2="5"/></svg>')
        assert capsys.readouterr().out == ""

    def test_logs_are_timestamped(self):
        _, result = convert('<svg><line x2="5"/></svg>')
        assert result.logs[0].endswith("SVG import started")
        assert all(re.match(r"\[\d\d:\d\d:\d\d\] ", line) for line in result.logs)

    def test_logs_reset_between_runs(self):
        converter, first = convert('<svg><line x2="5"/></svg>')
        second = converter.convert('<svg><line x2="5"/></svg>')
        assert len(second.logs) == len(first.logs)
        assert converter.result is second


class TestFilesAndExport:

    def test_convert_file(self, tmp_path):
        svg = tmp_path / "shape.svg"
        svg.write_text('<svg><polygon points="0,0 4,0 4,4"/></svg>', encoding='utf-8')
        result = SVGToWireConverter(FakeShapeFactory()).convert_file(svg)
        assert result.group.names() == ["Polygon 1"]

    def test_convert_missing_file(self, tmp_path):
        result = SVGToWireConverter(FakeShapeFactory()).convert_file(tmp_path / "missing.svg")
        assert result.error_kind == ErrorKind.DOCUMENT_MALFORMED
        assert result.error.startswith("Cannot read SVG file:")

    def test_export_dxf(self, tmp_path):
        svg = f'<svg {SVG_NS}><circle id="dot" r="3"/><path id="tri/1" d="M0,0 L4,0 L4,4 Z"/></svg>'
        converter, result = convert(svg)
        output = tmp_path / "out.dxf"
        assert converter.export_dxf(str(output))

        doc = ezdxf.readfile(str(output))
        msp = doc.modelspace()
        splines = msp.query('SPLINE')
        lines = msp.query('LINE')
        assert len(splines) == 4
        assert len(lines) == 3
        assert {e.dxf.layer for e in splines} == {"dot"}
        assert {e.dxf.layer for e in lines} == {"tri_1"}

    def test_export_without_result(self, tmp_path):
        converter = SVGToWireConverter(FakeShapeFactory())
        assert converter.export_dxf(str(tmp_path / "out.dxf")) is False
        assert converter.export_step(str(tmp_path / "out.step")) is False

    def test_export_after_failure(self, tmp_path):
        converter, _ = convert('<svg><text>hi</text></svg>')
        assert converter.export_dxf(str(tmp_path / "out.dxf")) is False

    def test_print_summary(self, capsys):
        converter, _ = convert('<svg><line x2="5"/><path d="M0"/></svg>')
        converter.print_summary()
        out = capsys.readouterr().out
        assert "PROCESSING SUMMARY" in out
        assert "Converted: 1, skipped: 0, failed: 1" in out
        assert "Errors Encountered:" in out

    def test_print_summary_before_convert(self, capsys):
        SVGToWireConverter(FakeShapeFactory()).print_summary()
        assert "Nothing converted yet." in capsys.readouterr().out


class TestHelpers:

    @pytest.mark.parametrize("name, expected", [
        ("Path 1", "Path 1"),
        ("a/b:c", "a_b_c"),
        ('q"*?', "q___"),
        ("   ", "0"),
        ("", "0"),
    ])
    def test_dxf_layer_name(self, name, expected):
        assert dxf_layer_name(name) == expected

    def test_conversion_log(self):
        log = ConversionLog()
        log.add("one")
        assert log.attach_to("Failed").startswith("Failed\n\n--- Debug Log ---\n[")
        log.clear()
        assert log.lines == []
