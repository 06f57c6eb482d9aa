# ============================================================================
# path_interpreter.py - Path Command Interpretation into Curve Primitives
# ============================================================================

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from ezdxf.math import Vec3

from svg_config import Config
from svg_geometry import (CubicBezier, CurvePrimitive, Line, arc_to_cubics, elevate_quadratic,
                          map_point, point_distance, reflect_point)
from path_commands import (ClosePath, CubicCurveTo, EllipticalArcTo, HorizontalLineTo, LineTo,
                           MoveTo, PathCommand, PathSyntaxError, QuadraticCurveTo,
                           SmoothCubicCurveTo, SmoothQuadraticCurveTo, VerticalLineTo, parse_path)


@dataclass
class InterpreterState:
    """Mutable cursor of one path: current point, sub-path start, last control point"""
    current_point: Vec3 = field(default_factory=lambda: Vec3(0, 0, 0))
    subpath_start: Vec3 = field(default_factory=lambda: Vec3(0, 0, 0))
    last_control: Optional[Vec3] = None

    def reflected_control(self) -> Vec3:
        """Reflection of the last control point, or the current point if there is none"""
        if self.last_control is None:
            return self.current_point
        return reflect_point(self.last_control, self.current_point)


class PathInterpreter:
    """Folds absolute path commands into an ordered list of curve primitives"""

    def __init__(self, arc_approximation: str = None, close_tolerance: float = None,
                 log: Callable[[str], None] = None):
        self.arc_approximation = arc_approximation or Config.ARC_APPROXIMATION
        if self.arc_approximation not in ('chord', 'bezier'):
            raise ValueError(f"Unknown arc approximation: {self.arc_approximation}")
        self.close_tolerance = Config.CLOSE_PATH_TOLERANCE if close_tolerance is None else close_tolerance
        self.log = log or (lambda message: None)
        self._handlers = {
            MoveTo: self._move_to,
            LineTo: self._line_to,
            HorizontalLineTo: self._horizontal_line_to,
            VerticalLineTo: self._vertical_line_to,
            CubicCurveTo: self._cubic_to,
            SmoothCubicCurveTo: self._smooth_cubic_to,
            QuadraticCurveTo: self._quadratic_to,
            SmoothQuadraticCurveTo: self._smooth_quadratic_to,
            EllipticalArcTo: self._arc_to,
            ClosePath: self._close_path,
        }

    def interpret(self, commands: List[PathCommand]) -> List[CurvePrimitive]:
        """Convert commands to primitives; unsupported commands are skipped"""
        state = InterpreterState()
        primitives: List[CurvePrimitive] = []

        for cmd in commands:
            handler = self._handlers.get(type(cmd))
            if handler is None:
                self.log(f"Unsupported SVG path command: {type(cmd).__name__}")
                continue
            primitives.extend(handler(state, cmd))

        self.log(f"Total primitives generated: {len(primitives)}")
        return primitives

    def interpret_path(self, d: str) -> Tuple[Optional[List[CurvePrimitive]], str]:
        """
        Parse path data and interpret it
        Returns: (primitives, error_message)
        """
        try:
            commands = parse_path(d)
        except PathSyntaxError as e:
            self.log(f"Path conversion exception: {e}")
            return None, f"Path conversion error: {e}"

        self.log(f"Parsed {len(commands)} path commands")
        return self.interpret(commands), ""

    # ------------------------------------------------------------------
    # Command handlers: update state, return the emitted primitives
    # ------------------------------------------------------------------

    def _move_to(self, state: InterpreterState, cmd: MoveTo) -> List[CurvePrimitive]:
        state.current_point = map_point(cmd.x, cmd.y)
        state.subpath_start = state.current_point
        state.last_control = None
        return []

    def _line_to(self, state: InterpreterState, cmd: LineTo) -> List[CurvePrimitive]:
        return self._straight(state, map_point(cmd.x, cmd.y))

    def _horizontal_line_to(self, state: InterpreterState, cmd: HorizontalLineTo) -> List[CurvePrimitive]:
        # current_point.y is already mapped
        return self._straight(state, Vec3(cmd.x, state.current_point.y, 0))

    def _vertical_line_to(self, state: InterpreterState, cmd: VerticalLineTo) -> List[CurvePrimitive]:
        return self._straight(state, Vec3(state.current_point.x, -cmd.y, 0))

    def _straight(self, state: InterpreterState, end: Vec3) -> List[CurvePrimitive]:
        line = Line(state.current_point, end)
        state.current_point = end
        state.last_control = None
        return [line]

    def _cubic_to(self, state: InterpreterState, cmd: CubicCurveTo) -> List[CurvePrimitive]:
        cp1 = map_point(cmd.x1, cmd.y1)
        cp2 = map_point(cmd.x2, cmd.y2)
        end = map_point(cmd.x, cmd.y)
        return self._cubic(state, cp1, cp2, end)

    def _smooth_cubic_to(self, state: InterpreterState, cmd: SmoothCubicCurveTo) -> List[CurvePrimitive]:
        cp1 = state.reflected_control()
        cp2 = map_point(cmd.x2, cmd.y2)
        end = map_point(cmd.x, cmd.y)
        return self._cubic(state, cp1, cp2, end)

    def _cubic(self, state: InterpreterState, cp1: Vec3, cp2: Vec3, end: Vec3) -> List[CurvePrimitive]:
        curve = CubicBezier(state.current_point, cp1, cp2, end)
        state.last_control = cp2
        state.current_point = end
        return [curve]

    def _quadratic_to(self, state: InterpreterState, cmd: QuadraticCurveTo) -> List[CurvePrimitive]:
        return self._quadratic(state, map_point(cmd.x1, cmd.y1), map_point(cmd.x, cmd.y))

    def _smooth_quadratic_to(self, state: InterpreterState, cmd: SmoothQuadraticCurveTo) -> List[CurvePrimitive]:
        return self._quadratic(state, state.reflected_control(), map_point(cmd.x, cmd.y))

    def _quadratic(self, state: InterpreterState, control: Vec3, end: Vec3) -> List[CurvePrimitive]:
        curve = CubicBezier(*elevate_quadratic(state.current_point, control, end))
        # the pre-elevation control point is what a following smooth command reflects
        state.last_control = control
        state.current_point = end
        return [curve]

    def _arc_to(self, state: InterpreterState, cmd: EllipticalArcTo) -> List[CurvePrimitive]:
        end = map_point(cmd.x, cmd.y)
        start = state.current_point
        state.current_point = end
        state.last_control = None

        if self.arc_approximation == 'chord':
            self.log("Elliptical arc (A) command not fully supported yet, using line approximation")
            return [Line(start, end)]

        # Y-axis mirroring reverses the rotation and the sweep direction
        return arc_to_cubics(start, end, cmd.rx, cmd.ry, -cmd.x_rotation,
                             cmd.large_arc, not cmd.sweep)

    def _close_path(self, state: InterpreterState, cmd: ClosePath) -> List[CurvePrimitive]:
        emitted: List[CurvePrimitive] = []
        if point_distance(state.current_point, state.subpath_start) > self.close_tolerance:
            emitted.append(Line(state.current_point, state.subpath_start))
        state.current_point = state.subpath_start
        state.last_control = None
        return emitted
