"""
Diagnostic marker parsing and plain-text result formatting.

Every structural diagnostic starts with an ``[XML: <line>]`` marker (``?`` when
the line is unknown), optionally followed by a ``[DTD: <line>]`` marker. A
presentation layer extracts these to offer jump-to-source actions; the rest of
the message is free text.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .models import UNKNOWN_LINE_MARKER, ValidationResult


MARKER_PATTERN = re.compile(r'^(?:\[XML: (\d+|\?)\])?\s*(?:\[DTD: (\d+)\])?\s*')


@dataclass(frozen=True)
class DiagnosticLocation:
    """Source positions and free text extracted from one diagnostic string."""
    xml_line: Optional[int]
    dtd_line: Optional[int]
    message: str
    has_xml_marker: bool = False

    def jump_targets(self) -> List[Tuple[str, int]]:
        """``('xml', line)`` / ``('dtd', line)`` pairs for every known location."""
        targets = []
        if self.xml_line is not None:
            targets.append(('xml', self.xml_line))
        if self.dtd_line is not None:
            targets.append(('dtd', self.dtd_line))
        return targets


def parse_diagnostic(text: str) -> DiagnosticLocation:
    """
    Split a diagnostic into its location markers and message.

    Strings without markers (fatal errors) come back with both lines None and
    the full text as message.
    """
    match = MARKER_PATTERN.match(text)
    xml_marker, dtd_marker = match.group(1), match.group(2)
    if xml_marker is None and dtd_marker is None:
        return DiagnosticLocation(None, None, text)

    xml_line = int(xml_marker) if xml_marker and xml_marker != UNKNOWN_LINE_MARKER else None
    dtd_line = int(dtd_marker) if dtd_marker else None
    return DiagnosticLocation(xml_line, dtd_line, text[match.end():], has_xml_marker=xml_marker is not None)


def format_result(result: ValidationResult, label: Optional[str] = None) -> str:
    """
    Render a result for terminal output.

    Multi-line diagnostics keep their line breaks, indented under the bullet.
    """
    title = 'Validation Successful' if result.is_valid else 'Validation Failed'
    if label:
        title = f"{label}: {title}"

    lines = [title, f"  {result.summary}"]
    for error in result.errors:
        first, *rest = error.split('\n')
        lines.append(f"  - {first}")
        lines.extend(f"    {continuation}" for continuation in rest)
    return "\n".join(lines)
