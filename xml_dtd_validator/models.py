"""
Core data models for the XML DTD validation system.

This module defines the data structures passed between the compiler, the
scanner, the correlator, the structural validator and the orchestrator. Every
structure here is scoped to a single validation run.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple


UNKNOWN_LINE_MARKER = "?"


class ContentType(Enum):
    """Content model categories an element declaration can compile to."""
    EMPTY = "EMPTY"
    ANY = "ANY"
    PCDATA = "PCDATA"
    MIXED = "MIXED"
    CHILDREN = "CHILDREN"


class ValidationStatus(Enum):
    """Lifecycle of one orchestrator run. SUCCESS and ERROR are terminal."""
    IDLE = "IDLE"
    VALIDATING = "VALIDATING"
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"

    @property
    def is_terminal(self) -> bool:
        return self in (ValidationStatus.SUCCESS, ValidationStatus.ERROR)


@dataclass(frozen=True)
class ElementDefinition:
    """
    Compiled form of one ``<!ELEMENT name spec>`` declaration.

    Attributes:
        name: Element name as declared
        content_type: Classified content model
        raw_spec: Content spec with inline comments removed, used for display
        declaration_line: 1-based line of the declaration in the DTD text
        allowed_mixed_children: Child names permitted in MIXED content, in declaration order
        matcher: Compiled content-model matcher (CHILDREN only)
    """
    name: str
    content_type: ContentType
    raw_spec: str
    declaration_line: int
    allowed_mixed_children: Tuple[str, ...] = ()
    matcher: Optional[Any] = None

    @property
    def display_spec(self) -> str:
        """Content spec with all whitespace runs collapsed to single spaces."""
        return " ".join(self.raw_spec.split())

    def allows_mixed_child(self, tag_name: str) -> bool:
        return tag_name in self.allowed_mixed_children


class DefinitionTable:
    """
    Read-only mapping of element name to ElementDefinition for one DTD text.

    Later declarations of the same name replace earlier ones.
    """

    def __init__(self, definitions: Optional[Dict[str, ElementDefinition]] = None):
        self._definitions: Dict[str, ElementDefinition] = dict(definitions or {})

    def get(self, name: str) -> Optional[ElementDefinition]:
        return self._definitions.get(name)

    def names(self) -> List[str]:
        return list(self._definitions)

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)

    def __iter__(self) -> Iterator[ElementDefinition]:
        return iter(self._definitions.values())

    def __repr__(self) -> str:
        return f"DefinitionTable({self.names()!r})"


@dataclass(frozen=True)
class TagOccurrence:
    """One physical start tag found by the scanner."""
    tag_name: str
    offset: int
    line: int


@dataclass(frozen=True)
class ValidationError:
    """
    A single structural diagnostic.

    ``str()`` renders the wire format consumed by presentation layers:
    ``[XML: <line>] [DTD: <line>] <message>``, with ``?`` for an unknown
    XML line and the DTD marker omitted when no definition exists.
    """
    xml_line: Optional[int]
    dtd_line: Optional[int]
    message: str

    @property
    def location_prefix(self) -> str:
        xml_line = self.xml_line if self.xml_line is not None else UNKNOWN_LINE_MARKER
        prefix = f"[XML: {xml_line}]"
        if self.dtd_line:
            prefix += f" [DTD: {self.dtd_line}]"
        return prefix

    def __str__(self) -> str:
        return f"{self.location_prefix} {self.message}"


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of one validation run. Produced once, never mutated.

    Attributes:
        is_valid: True only when the run completed with zero diagnostics
        errors: Ordered diagnostic strings
        summary: One sentence describing the outcome
        timestamp: When the result was produced
    """
    is_valid: bool
    errors: Tuple[str, ...]
    summary: str
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def error_count(self) -> int:
        return len(self.errors)

    def to_dict(self) -> Dict[str, Any]:
        """Serializable representation (timestamp as ISO-8601)."""
        return {
            'is_valid': self.is_valid,
            'errors': list(self.errors),
            'summary': self.summary,
            'timestamp': self.timestamp.isoformat(),
        }
