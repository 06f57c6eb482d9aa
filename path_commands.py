# ============================================================================
# path_commands.py - Path Grammar Parsing and Normalization
# ============================================================================

from dataclasses import dataclass
from typing import List, Tuple, Union
import re


class PathSyntaxError(ValueError):
    """Raised when SVG path data cannot be parsed"""


@dataclass(frozen=True)
class MoveTo:
    x: float
    y: float


@dataclass(frozen=True)
class LineTo:
    x: float
    y: float


@dataclass(frozen=True)
class HorizontalLineTo:
    x: float


@dataclass(frozen=True)
class VerticalLineTo:
    y: float


@dataclass(frozen=True)
class CubicCurveTo:
    x1: float
    y1: float
    x2: float
    y2: float
    x: float
    y: float


@dataclass(frozen=True)
class SmoothCubicCurveTo:
    x2: float
    y2: float
    x: float
    y: float


@dataclass(frozen=True)
class QuadraticCurveTo:
    x1: float
    y1: float
    x: float
    y: float


@dataclass(frozen=True)
class SmoothQuadraticCurveTo:
    x: float
    y: float


@dataclass(frozen=True)
class EllipticalArcTo:
    rx: float
    ry: float
    x_rotation: float
    large_arc: bool
    sweep: bool
    x: float
    y: float


@dataclass(frozen=True)
class ClosePath:
    pass


PathCommand = Union[MoveTo, LineTo, HorizontalLineTo, VerticalLineTo, CubicCurveTo,
                    SmoothCubicCurveTo, QuadraticCurveTo, SmoothQuadraticCurveTo,
                    EllipticalArcTo, ClosePath]


_COMMAND_LETTERS = 'MmLlHhVvCcSsQqTtAaZz'
_NUMBER_RE = re.compile(r'[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?')
_SEPARATOR_RE = re.compile(r'[\s,]*')


class _PathScanner:
    """Reads command letters, numbers and arc flags from a path string"""

    def __init__(self, d: str):
        self.d = d
        self.pos = 0

    def skip_separators(self):
        self.pos = _SEPARATOR_RE.match(self.d, self.pos).end()

    def at_end(self) -> bool:
        self.skip_separators()
        return self.pos >= len(self.d)

    def peek_command(self) -> bool:
        """True if the next token is a command letter"""
        return not self.at_end() and self.d[self.pos] in _COMMAND_LETTERS

    def has_number(self) -> bool:
        return not self.at_end() and _NUMBER_RE.match(self.d, self.pos) is not None

    def read_command(self) -> str:
        if not self.peek_command():
            found = self.d[self.pos] if self.pos < len(self.d) else 'end of data'
            raise PathSyntaxError(f"Expected path command at position {self.pos}, found '{found}'")
        letter = self.d[self.pos]
        self.pos += 1
        return letter

    def read_number(self, command: str) -> float:
        self.skip_separators()
        match = _NUMBER_RE.match(self.d, self.pos)
        if not match:
            found = self.d[self.pos] if self.pos < len(self.d) else 'end of data'
            raise PathSyntaxError(
                f"Missing argument for '{command}' at position {self.pos}, found '{found}'")
        self.pos = match.end()
        return float(match.group(0))

    def read_flag(self, command: str) -> bool:
        # Flags are single characters and may be written without separators ("a1 1 0 00 5,5")
        self.skip_separators()
        if self.pos >= len(self.d) or self.d[self.pos] not in '01':
            found = self.d[self.pos] if self.pos < len(self.d) else 'end of data'
            raise PathSyntaxError(f"Invalid arc flag for '{command}' at position {self.pos}, found '{found}'")
        flag = self.d[self.pos] == '1'
        self.pos += 1
        return flag


def parse_path(d: str) -> List[PathCommand]:
    """
    Parse SVG path data into absolute PathCommand objects.

    Relative commands are resolved against the current point at the start
    of each segment, implicit repeats are expanded, and extra coordinate
    pairs after a moveto become linetos.
    """
    scanner = _PathScanner(d)
    commands: List[PathCommand] = []
    cx, cy = 0.0, 0.0          # current point
    sx, sy = 0.0, 0.0          # sub-path start

    def point(command: str, relative: bool) -> Tuple[float, float]:
        x = scanner.read_number(command)
        y = scanner.read_number(command)
        if relative:
            return cx + x, cy + y
        return x, y

    if not scanner.at_end() and not scanner.peek_command():
        raise PathSyntaxError(f"Path data must start with a command, found '{scanner.d[scanner.pos]}'")

    while not scanner.at_end():
        letter = scanner.read_command()
        command = letter.upper()
        relative = letter.islower()

        if command == 'Z':
            commands.append(ClosePath())
            cx, cy = sx, sy
            continue

        first = True
        while first or scanner.has_number():
            if command == 'M':
                x, y = point(letter, relative)
                if first:
                    commands.append(MoveTo(x, y))
                    sx, sy = x, y
                else:
                    # Assumption: extra pairs after a moveto are implicit linetos
                    commands.append(LineTo(x, y))
                cx, cy = x, y

            elif command == 'L':
                x, y = point(letter, relative)
                commands.append(LineTo(x, y))
                cx, cy = x, y

            elif command == 'H':
                x = scanner.read_number(letter)
                if relative:
                    x += cx
                commands.append(HorizontalLineTo(x))
                cx = x

            elif command == 'V':
                y = scanner.read_number(letter)
                if relative:
                    y += cy
                commands.append(VerticalLineTo(y))
                cy = y

            elif command == 'C':
                x1, y1 = point(letter, relative)
                x2, y2 = point(letter, relative)
                x, y = point(letter, relative)
                commands.append(CubicCurveTo(x1, y1, x2, y2, x, y))
                cx, cy = x, y

            elif command == 'S':
                x2, y2 = point(letter, relative)
                x, y = point(letter, relative)
                commands.append(SmoothCubicCurveTo(x2, y2, x, y))
                cx, cy = x, y

            elif command == 'Q':
                x1, y1 = point(letter, relative)
                x, y = point(letter, relative)
                commands.append(QuadraticCurveTo(x1, y1, x, y))
                cx, cy = x, y

            elif command == 'T':
                x, y = point(letter, relative)
                commands.append(SmoothQuadraticCurveTo(x, y))
                cx, cy = x, y

            elif command == 'A':
                rx = scanner.read_number(letter)
                ry = scanner.read_number(letter)
                rotation = scanner.read_number(letter)
                large_arc = scanner.read_flag(letter)
                sweep = scanner.read_flag(letter)
                x, y = point(letter, relative)
                commands.append(EllipticalArcTo(rx, ry, rotation, large_arc, sweep, x, y))
                cx, cy = x, y

            first = False

    return commands
