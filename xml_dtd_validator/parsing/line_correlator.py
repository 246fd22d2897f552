"""
Element-to-line correlation.

Maps parsed tree nodes back to the source line of their start tag by walking
the tree in pre-order and consuming the scanner's ordered tag occurrences with
a single forward-only cursor.
"""

import logging
from typing import Dict, Iterator, List, Optional, Sequence

from ..models import TagOccurrence
from .xml_parser import child_elements, qualified_name


class ElementLineMap:
    """
    Node-to-line lookup for one validation run.

    Keys are the element proxies of a single tree. lxml elements cannot be
    weakly referenced, so the map holds them only for the lifetime of the run
    that built it.
    """

    def __init__(self, fallback_to_parser_lines: bool = False):
        self._lines: Dict[object, int] = {}
        self.fallback_to_parser_lines = fallback_to_parser_lines

    def set_line(self, element, line: int) -> None:
        self._lines[element] = line

    def line_for(self, element) -> Optional[int]:
        """
        Resolved line for ``element``, or None when unknown.

        With parser-line fallback enabled, an unmapped element reports the
        line recorded by the parser for its start tag.
        """
        line = self._lines.get(element)
        if line is None and self.fallback_to_parser_lines:
            line = getattr(element, 'sourceline', None)
        return line

    def __contains__(self, element) -> bool:
        return element in self._lines

    def __len__(self) -> int:
        return len(self._lines)


def iter_preorder(root) -> Iterator:
    """Depth-first pre-order walk over element nodes, children in document order."""
    stack = [root]
    while stack:
        element = stack.pop()
        yield element
        stack.extend(reversed(child_elements(element)))


class ElementLineCorrelator:
    """
    Best-effort correlation of tree nodes with scanned start tags.

    For each node in pre-order, the first occurrence at or after the cursor
    with the same tag name is taken and the cursor moves past it. When no
    occurrence is found the node stays unmapped and the cursor does not move.
    """

    def __init__(self, fallback_to_parser_lines: bool = False):
        self.logger = logging.getLogger(__name__)
        self.fallback_to_parser_lines = fallback_to_parser_lines

    def correlate(self, root, occurrences: Sequence[TagOccurrence]) -> ElementLineMap:
        """
        Args:
            root: Root element of the parsed tree
            occurrences: Start tags in source order

        Returns:
            ElementLineMap covering the root's subtree
        """
        line_map = ElementLineMap(fallback_to_parser_lines=self.fallback_to_parser_lines)
        cursor = 0
        unmapped: List[str] = []

        for element in iter_preorder(root):
            tag_name = qualified_name(element)
            position = cursor
            while position < len(occurrences):
                if occurrences[position].tag_name == tag_name:
                    line_map.set_line(element, occurrences[position].line)
                    cursor = position + 1
                    break
                position += 1
            else:
                unmapped.append(tag_name)

        if unmapped:
            self.logger.debug(f"{len(unmapped)} element(s) could not be correlated to a start tag: {unmapped[:10]}")
        return line_map
