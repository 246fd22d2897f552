"""Text indexing, tag scanning, XML parsing and line correlation components."""

from .source_index import SourcePositionIndex, normalize_line_endings
from .tag_scanner import TagOccurrenceScanner, mask_literal_blocks
from .xml_parser import XMLParser, child_elements, direct_text, qualified_name
from .line_correlator import ElementLineCorrelator, ElementLineMap

__all__ = [
    'SourcePositionIndex',
    'normalize_line_endings',
    'TagOccurrenceScanner',
    'mask_literal_blocks',
    'XMLParser',
    'child_elements',
    'direct_text',
    'qualified_name',
    'ElementLineCorrelator',
    'ElementLineMap',
]
