"""
Offset to line-number resolution for a block of normalized text.
"""

from bisect import bisect_right
from typing import List

from ..utils import StringUtils


def normalize_line_endings(text: str) -> str:
    """Normalize CRLF/CR to LF. Offsets must only be computed on the result."""
    return StringUtils.normalize_line_endings(text)


class SourcePositionIndex:
    """
    Ascending line-start offsets for one text, with binary-search lookup.

    The text is expected to be newline-normalized already; a stray ``\\r`` is
    treated as ordinary content.
    """

    def __init__(self, text: str):
        self._line_starts: List[int] = [0]
        for offset, ch in enumerate(text or ''):
            if ch == '\n':
                self._line_starts.append(offset + 1)
        self.text_length = len(text or '')

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    @property
    def line_starts(self) -> List[int]:
        return list(self._line_starts)

    def line_for_offset(self, offset: int) -> int:
        """
        Return the 1-based line containing ``offset``.

        The answer is the highest line whose start offset is <= ``offset``;
        negative offsets resolve to line 1.
        """
        if offset <= 0:
            return 1
        return bisect_right(self._line_starts, offset)

    def offset_for_line(self, line: int) -> int:
        """Start offset of a 1-based line."""
        if line < 1 or line > len(self._line_starts):
            raise IndexError(f"line {line} out of range 1..{len(self._line_starts)}")
        return self._line_starts[line - 1]
