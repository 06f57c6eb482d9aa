# ============================================================================
# conversion_result.py - Error Taxonomy and Conversion Outcomes
# ============================================================================

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class ErrorKind(Enum):
    # document level: end the whole conversion
    DOCUMENT_MALFORMED = "document_malformed"
    NO_RECOGNIZED_ELEMENTS = "no_recognized_elements"
    NO_VALID_ELEMENTS = "no_valid_elements"
    # element level: contained, the element is skipped or failed
    ELEMENT_REDUCTION_EMPTY = "element_reduction_empty"
    GRAMMAR_PARSE_FAILURE = "grammar_parse_failure"
    PRIMITIVE_CONSTRUCTION_FAILURE = "primitive_construction_failure"
    WIRE_ASSEMBLY_FAILURE = "wire_assembly_failure"


class ElementStatus(Enum):
    CONVERTED = "converted"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class ElementOutcome:
    """What happened to one SVG element"""
    name: str
    tag: str
    status: ElementStatus
    primitive_count: int = 0
    edge_count: int = 0
    error_kind: Optional[ErrorKind] = None
    reason: str = ""

    def __str__(self):
        text = f"{self.tag} '{self.name}': {self.status.value}"
        if self.status == ElementStatus.CONVERTED:
            text += f" ({self.edge_count} edges)"
        if self.reason:
            text += f" - {self.reason}"
        return text


@dataclass
class ConversionStats:
    """Document level tally"""
    attempted: int = 0
    succeeded: int = 0
    skipped: int = 0
    failed: int = 0

    def record(self, outcome: ElementOutcome):
        self.attempted += 1
        if outcome.status == ElementStatus.CONVERTED:
            self.succeeded += 1
        elif outcome.status == ElementStatus.SKIPPED:
            self.skipped += 1
        else:
            self.failed += 1


@dataclass
class ConversionResult:
    """Outcome of converting one SVG document"""
    group: Optional[object] = None  # GroupNode on success
    error: str = ""
    error_kind: Optional[ErrorKind] = None
    stats: ConversionStats = field(default_factory=ConversionStats)
    outcomes: List[ElementOutcome] = field(default_factory=list)
    logs: List[str] = field(default_factory=list)

    @property
    def is_ok(self) -> bool:
        return self.group is not None and self.error_kind is None
