# ============================================================================
# svg_parser.py - SVG Loading and Element Extraction
# ============================================================================

from typing import Callable, Dict, List, Optional, Tuple
import xml.etree.ElementTree as ET

from svg_config import Config
from shape_reducer import ShapeReducer


def _local_name(tag) -> str:
    """Tag name without its XML namespace; comments and PIs give ''"""
    if not isinstance(tag, str):
        return ''
    if tag.startswith('{'):
        return tag.split('}', 1)[1]
    return tag


class SvgElement:
    """Wrapper for a supported SVG element with its naming and path data"""

    def __init__(self, node: ET.Element, tag: str, index: int):
        self.node = node
        self.tag = tag  # 'path', 'rect', 'circle', 'ellipse', 'line', 'polyline', 'polygon'
        self.index = index  # 1-based position among elements of the same tag
        self.attributes: Dict[str, str] = dict(node.attrib)

    @property
    def display_name(self) -> str:
        """id attribute, else data-name, else a positional label like 'Path 1'"""
        for key in ('id', 'data-name'):
            value = self.attributes.get(key, '').strip()
            if value:
                return value
        return f"{self.tag.capitalize()} {self.index}"

    def resolve_path_data(self) -> Optional[str]:
        """Path data for this element; None or '' when there is nothing to convert"""
        if self.tag == 'path':
            d = self.attributes.get('d')
            return d.strip() if d else None
        return ShapeReducer.reduce(self.tag, self.attributes)

    def __repr__(self):
        return f"SvgElement({self.tag!r}, {self.display_name!r})"


class SvgDocumentParser:
    """Handles SVG text loading and supported element extraction"""

    def __init__(self, element_order: str = None, log: Callable[[str], None] = None):
        self.element_order = element_order or Config.ELEMENT_ORDER
        if self.element_order not in ('by_type', 'document'):
            raise ValueError(f"Unknown element order: {self.element_order}")
        self.log = log or print
        self.root: Optional[ET.Element] = None
        self.elements: List[SvgElement] = []

    def load(self, svg_content: str) -> Tuple[bool, str]:
        """
        Parse SVG text
        Returns: (success, error_message)
        """
        try:
            self.root = ET.fromstring(svg_content)
        except ET.ParseError as e:
            self.log(f"Parser error detected: {e}")
            return False, str(e)
        self.log("SVG content parsed")
        return True, ""

    def extract_elements(self) -> List[SvgElement]:
        """Collect supported elements in the configured order"""
        if self.root is None:
            raise RuntimeError("No SVG loaded. Call load() first.")

        by_tag: Dict[str, List[ET.Element]] = {tag: [] for tag in Config.SUPPORTED_ELEMENTS}
        in_document_order: List[Tuple[str, ET.Element]] = []
        for node in self.root.iter():
            tag = _local_name(node.tag)
            if tag in by_tag:
                by_tag[tag].append(node)
                in_document_order.append((tag, node))

        for tag in Config.SUPPORTED_ELEMENTS:
            if by_tag[tag]:
                self.log(f"Found {len(by_tag[tag])} {tag} elements")

        counters = {tag: 0 for tag in Config.SUPPORTED_ELEMENTS}
        wrapped: Dict[int, SvgElement] = {}
        for tag, node in in_document_order:
            counters[tag] += 1
            wrapped[id(node)] = SvgElement(node, tag, counters[tag])

        if self.element_order == 'document':
            elements = [wrapped[id(node)] for _, node in in_document_order]
        else:
            # Assumption: types are processed in a fixed order, document order within a type
            elements = [wrapped[id(node)] for tag in Config.SUPPORTED_ELEMENTS for node in by_tag[tag]]

        self.elements = elements
        return elements
