# ============================================================================
# svg_converter.py - Main Converter Orchestration
# ============================================================================

from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union
import argparse
import re
import sys

import ezdxf

from svg_config import Config
from svg_geometry import CurvePrimitive, Line
from svg_parser import SvgDocumentParser, SvgElement
from path_interpreter import PathInterpreter
from scene_nodes import GroupNode, ShapeNode
from conversion_result import ConversionResult, ElementOutcome, ElementStatus, ErrorKind


class ConversionLog:
    """Timestamped diagnostic lines collected during one conversion"""

    def __init__(self, echo: bool = False):
        self.lines: List[str] = []
        self.echo = echo

    def add(self, message: str):
        timestamp = datetime.now().strftime('%H:%M:%S')
        line = f"[{timestamp}] {message}"
        self.lines.append(line)
        if self.echo:
            print(line)

    def clear(self):
        self.lines = []

    def attach_to(self, error_message: str) -> str:
        """Error message followed by the full debug log"""
        return f"{error_message}\n\n--- Debug Log ---\n" + "\n".join(self.lines)


class SVGToWireConverter:
    """Main orchestrator for SVG to wire conversion"""

    def __init__(self, factory=None, verbose: bool = None, arc_approximation: str = None,
                 element_order: str = None, group_name: str = None):
        if factory is None:
            from wire_builder import ShapeFactory
            factory = ShapeFactory()
        self.factory = factory
        self.verbose = Config.VERBOSE if verbose is None else verbose
        self.arc_approximation = arc_approximation or Config.ARC_APPROXIMATION
        self.element_order = element_order or Config.ELEMENT_ORDER
        self.group_name = group_name or Config.GROUP_NAME
        self.log = ConversionLog(echo=self.verbose)
        self.error_log: List[str] = []
        self.result: Optional[ConversionResult] = None

    def convert(self, svg_content: Union[str, bytes]) -> ConversionResult:
        """Convert every supported element of an SVG document into a named wire"""
        self.log.clear()
        self.error_log = []
        self.log.add("SVG import started")
        result = ConversionResult(logs=self.log.lines)
        self.result = result

        # Step 1: Parse the document
        parser = SvgDocumentParser(self.element_order, log=self.log.add)
        loaded, _ = parser.load(svg_content)
        if not loaded:
            return self._fail(result, "Invalid SVG file", ErrorKind.DOCUMENT_MALFORMED)

        # Step 2: Collect supported elements
        elements = parser.extract_elements()
        self.log.add(f"Found {len(elements)} supported elements")
        if not elements:
            return self._fail(result, "No supported elements found in SVG", ErrorKind.NO_RECOGNIZED_ELEMENTS)

        # Step 3: Convert each element, containing failures per element
        group = GroupNode(self.group_name)
        interpreter = PathInterpreter(self.arc_approximation, log=self.log.add)
        for element in elements:
            try:
                outcome, node = self.convert_element(element, interpreter)
            except Exception as e:
                self.log.add(f"{self._label(element)}: exception caught: {e}")
                outcome, node = ElementOutcome(element.display_name, element.tag, ElementStatus.FAILED,
                                               reason=f"Unexpected error: {e}"), None

            result.outcomes.append(outcome)
            result.stats.record(outcome)
            if node is not None:
                group.add(node)
            elif outcome.status == ElementStatus.FAILED:
                self.error_log.append(str(outcome))

        stats = result.stats
        self.log.add(f"Import completed: {stats.succeeded} success, {stats.failed} failed, "
                     f"{stats.skipped} skipped")

        if not group.children:
            return self._fail(result, "No valid elements could be imported", ErrorKind.NO_VALID_ELEMENTS)

        result.group = group
        return result

    def convert_file(self, svg_path: Union[str, Path]) -> ConversionResult:
        """Read an SVG file and convert it"""
        try:
            content = Path(svg_path).read_bytes()
        except OSError as e:
            self.log.clear()
            self.error_log = []
            result = ConversionResult(logs=self.log.lines)
            self.result = result
            self.log.add(f"Cannot read {svg_path}: {e}")
            return self._fail(result, f"Cannot read SVG file: {svg_path}", ErrorKind.DOCUMENT_MALFORMED)
        return self.convert(content)

    def convert_element(self, element: SvgElement,
                        interpreter: PathInterpreter) -> Tuple[ElementOutcome, Optional[ShapeNode]]:
        """Convert one element; failures are reported in the outcome, never raised"""
        label = self._label(element)
        name = element.display_name

        def failed(kind: ErrorKind, reason: str) -> Tuple[ElementOutcome, None]:
            self.log.add(f"{label} conversion failed: {reason}")
            return ElementOutcome(name, element.tag, ElementStatus.FAILED, error_kind=kind, reason=reason), None

        d = element.resolve_path_data()
        if not d:
            self.log.add(f"{label}: no path data, skipping")
            return ElementOutcome(name, element.tag, ElementStatus.SKIPPED,
                                  error_kind=ErrorKind.ELEMENT_REDUCTION_EMPTY, reason="no path data"), None

        preview = d[:Config.LOG_PREVIEW_LENGTH]
        self.log.add(f'Processing {label}: d="{preview}{"..." if len(d) > len(preview) else ""}"')

        primitives, error = interpreter.interpret_path(d)
        if primitives is None:
            return failed(ErrorKind.GRAMMAR_PARSE_FAILURE, error)
        if not primitives:
            return failed(ErrorKind.WIRE_ASSEMBLY_FAILURE, "no primitives generated")

        edges, built = self.build_edges(primitives, label)
        self.log.add(f"{label}: generated {len(edges)} edges")
        if not edges:
            return failed(ErrorKind.WIRE_ASSEMBLY_FAILURE, "no edges could be constructed")

        wire, error = self.factory.wire(edges)
        if wire is None:
            return failed(ErrorKind.WIRE_ASSEMBLY_FAILURE, error)

        outcome = ElementOutcome(name, element.tag, ElementStatus.CONVERTED,
                                 primitive_count=len(primitives), edge_count=len(edges))
        skipped = len(primitives) - len(built)
        if skipped:
            outcome.error_kind = ErrorKind.PRIMITIVE_CONSTRUCTION_FAILURE
            outcome.reason = f"{skipped} of {len(primitives)} primitives skipped"
        self.log.add(f'{label}: successfully created as "{name}"')
        return outcome, ShapeNode(name, wire, built)

    def build_edges(self, primitives: Sequence[CurvePrimitive], label: str = "") -> Tuple[list, List[CurvePrimitive]]:
        """
        Construct one kernel edge per primitive, omitting the ones that fail
        Returns: (edges, primitives that produced an edge)
        """
        edges = []
        built: List[CurvePrimitive] = []
        for i, primitive in enumerate(primitives, 1):
            if isinstance(primitive, Line):
                edge, error = self.factory.line(primitive.start, primitive.end)
            else:
                edge, error = self.factory.bezier(list(primitive.points))
            if edge is None:
                self.log.add(f"{label}: primitive {i} skipped: {error}")
                continue
            edges.append(edge)
            built.append(primitive)
        return edges, built

    def _label(self, element: SvgElement) -> str:
        return f"{element.tag.capitalize()} {element.index}"

    def _fail(self, result: ConversionResult, message: str, kind: ErrorKind) -> ConversionResult:
        self.log.add(message)
        self.error_log.append(message)
        result.error = self.log.attach_to(message) if self.verbose else message
        result.error_kind = kind
        result.group = None
        return result

    def export_step(self, output_path: str = None) -> bool:
        """Export converted wires to a STEP file"""
        output_path = output_path or Config.DEFAULT_STEP_OUTPUT
        print(f"\nExporting to STEP: {output_path}")

        if self.result is None or not self.result.is_ok:
            print("✗ No wires to export! Run convert() first.")
            return False

        try:
            import cadquery as cq
            from wire_builder import make_compound
            cq.exporters.export(make_compound(self.result.group), output_path)
            print(f"✓ STEP file exported successfully: {output_path}")
            return True
        except Exception as e:
            error = f"Export failed: {str(e)}"
            print(f"✗ {error}")
            self.error_log.append(error)
            return False

    def export_dxf(self, output_path: str) -> bool:
        """Export converted primitives to a DXF file, one layer per shape node"""
        print(f"\nExporting to DXF: {output_path}")

        if self.result is None or not self.result.is_ok:
            print("✗ Nothing to export! Run convert() first.")
            return False

        try:
            doc = ezdxf.new(Config.DXF_VERSION)
            msp = doc.modelspace()
            for node in self.result.group:
                layer = dxf_layer_name(node.name)
                if not doc.layers.has_entry(layer):
                    doc.layers.add(layer)
                attribs = {'layer': layer}
                for primitive in node.primitives:
                    if isinstance(primitive, Line):
                        msp.add_line(primitive.start, primitive.end, dxfattribs=attribs)
                    else:
                        # a clamped degree-3 spline over 4 control points is exactly the Bezier
                        msp.add_open_spline(list(primitive.points), degree=3, dxfattribs=attribs)
            doc.saveas(output_path)
            print(f"✓ DXF file exported successfully: {output_path}")
            return True
        except Exception as e:
            error = f"DXF export failed: {str(e)}"
            print(f"✗ {error}")
            self.error_log.append(error)
            return False

    def get_error_log(self) -> List[str]:
        """Get list of all errors encountered"""
        return self.error_log

    def print_summary(self):
        """Print processing summary"""
        print("\n" + "="*60)
        print("PROCESSING SUMMARY")
        print("="*60)
        if self.result is None:
            print("Nothing converted yet.")
            print("="*60)
            return

        stats = self.result.stats
        print(f"Elements attempted: {stats.attempted}")
        print(f"Converted: {stats.succeeded}, skipped: {stats.skipped}, failed: {stats.failed}")

        if self.result.outcomes:
            print("\nElement Details:")
            for i, outcome in enumerate(self.result.outcomes, 1):
                mark = {ElementStatus.CONVERTED: "✓", ElementStatus.SKIPPED: "⚠"}.get(outcome.status, "✗")
                print(f"  {i}. {mark} {outcome}")

        if self.error_log:
            print("\nErrors Encountered:")
            for i, error in enumerate(self.error_log, 1):
                print(f"  {i}. {error}")

        print("="*60)


def dxf_layer_name(name: str) -> str:
    """Layer-safe version of a node name"""
    layer = re.sub(r'[<>/\\":;?*|=`]', '_', name).strip()
    return layer or '0'


def main(argv: Sequence[str] = None) -> int:
    parser = argparse.ArgumentParser(
        prog='svg2wire',
        description="Convert SVG paths and basic shapes into wires and export them as STEP/DXF.")
    parser.add_argument('input', help="SVG file to convert")
    parser.add_argument('-o', '--output', help="STEP output file. Default: input name with .step")
    parser.add_argument('--dxf', help="also write the curve primitives to this DXF file")
    parser.add_argument('-v', '--verbose', action='store_true', help="print the conversion log")
    parser.add_argument('--arcs', choices=('chord', 'bezier'), default=None,
                        help=f"elliptical arc approximation. Default: {Config.ARC_APPROXIMATION}")
    parser.add_argument('--document-order', action='store_true',
                        help="process elements in document order instead of grouped by type")
    args = parser.parse_args(argv)

    output = args.output or re.sub(r'\.svg$', '', args.input, flags=re.I) + '.step'

    converter = SVGToWireConverter(verbose=args.verbose, arc_approximation=args.arcs,
                                   element_order='document' if args.document_order else None)
    result = converter.convert_file(args.input)
    if not result.is_ok:
        print(f"\n✗ Conversion failed: {result.error}")
        converter.print_summary()
        return 1

    ok = converter.export_step(output)
    if args.dxf:
        ok = converter.export_dxf(args.dxf) and ok
    converter.print_summary()
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
