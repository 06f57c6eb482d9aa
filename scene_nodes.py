# ============================================================================
# scene_nodes.py - Named Shape Nodes and Import Group
# ============================================================================

from typing import Any, Iterator, List

from svg_config import Config
from svg_geometry import CurvePrimitive


class ShapeNode:
    """One converted SVG element: a named wire and the primitives it was built from"""

    def __init__(self, name: str, wire: Any, primitives: List[CurvePrimitive]):
        self.name = name
        self.wire = wire
        self.primitives = primitives

    def __repr__(self):
        return f"ShapeNode({self.name!r}, {len(self.primitives)} primitives)"


class GroupNode:
    """Named, ordered collection of shape nodes"""

    def __init__(self, name: str = None):
        self.name = name or Config.GROUP_NAME
        self.children: List[ShapeNode] = []

    def add(self, node: ShapeNode):
        self.children.append(node)

    def __len__(self):
        return len(self.children)

    def __iter__(self) -> Iterator[ShapeNode]:
        return iter(self.children)

    def names(self) -> List[str]:
        return [node.name for node in self.children]

    def __repr__(self):
        return f"GroupNode({self.name!r}, {len(self.children)} children)"
