# ============================================================================
# wire_builder.py - Edge and Wire Construction
# ============================================================================

from typing import List, Optional, Sequence, Tuple

import cadquery as cq
from ezdxf.math import Vec3

from scene_nodes import GroupNode


def to_cq_vector(p: Vec3) -> cq.Vector:
    return cq.Vector(p.x, p.y, p.z)


class ShapeFactory:
    """Handles edge and wire construction using CadQuery"""

    @staticmethod
    def line(start: Vec3, end: Vec3) -> Tuple[Optional[cq.Edge], str]:
        """
        Create a straight edge
        Returns: (edge, error_message)
        """
        try:
            return cq.Edge.makeLine(to_cq_vector(start), to_cq_vector(end)), ""
        except Exception as e:
            return None, f"Line creation failed: {str(e)}"

    @staticmethod
    def bezier(points: Sequence[Vec3]) -> Tuple[Optional[cq.Edge], str]:
        """
        Create a cubic Bezier edge from exactly 4 points
        Returns: (edge, error_message)
        """
        if len(points) != 4:
            return None, f"Bezier creation failed: expected 4 points, got {len(points)}"
        try:
            return cq.Edge.makeBezier([to_cq_vector(p) for p in points]), ""
        except Exception as e:
            return None, f"Bezier creation failed: {str(e)}"

    @staticmethod
    def wire(edges: List[cq.Edge]) -> Tuple[Optional[cq.Wire], str]:
        """
        Assemble ordered edges into a wire
        Returns: (wire, error_message)
        """
        if not edges:
            return None, "Wire creation failed: no edges"
        try:
            return cq.Wire.assembleEdges(edges), ""
        except Exception as e:
            return None, f"Wire creation failed: {str(e)}"


def make_compound(group: GroupNode) -> cq.Compound:
    """Collect all wires of a group into one compound for export"""
    return cq.Compound.makeCompound([node.wire for node in group])
