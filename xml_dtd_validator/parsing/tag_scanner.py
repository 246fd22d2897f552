"""
Start-tag occurrence scanner.

Finds every opening tag in a normalized XML text, in source order, after
comment, CDATA and processing-instruction blocks have been blanked out. The
result feeds the element-to-line correlator.
"""

import logging
import re
from typing import List, Optional

from ..models import TagOccurrence
from ..utils import StringUtils
from .source_index import SourcePositionIndex


COMMENT_PATTERN = re.compile(r'<!--.*?-->', re.DOTALL)
CDATA_PATTERN = re.compile(r'<!\[CDATA\[.*?\]\]>', re.DOTALL)
PI_PATTERN = re.compile(r'<\?.*?\?>', re.DOTALL)
# Leftmost block wins, so markup inside one kind of block never opens another
LITERAL_BLOCK_PATTERN = re.compile(
    '|'.join(p.pattern for p in (COMMENT_PATTERN, CDATA_PATTERN, PI_PATTERN)), re.DOTALL
)
START_TAG_PATTERN = re.compile(r'<([\w\-.:]+)[^>]*>')


def mask_pattern(text: str, pattern: re.Pattern) -> str:
    """Replace every match of ``pattern`` with an equal-length blank span."""
    return pattern.sub(lambda m: StringUtils.blank_out(m.group(0)), text)


def mask_comments(text: str) -> str:
    return mask_pattern(text, COMMENT_PATTERN)


def mask_literal_blocks(text: str) -> str:
    """Blank out comments, CDATA sections and processing instructions, preserving every offset."""
    return mask_pattern(text, LITERAL_BLOCK_PATTERN)


class TagOccurrenceScanner:
    """
    Scans XML text for start tags and records their line numbers.

    One TagOccurrence is produced per physical start tag (self-closing tags
    included). Closing tags, declarations and processing instructions never
    match.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def scan(self, xml_text: str, index: Optional[SourcePositionIndex] = None) -> List[TagOccurrence]:
        """
        Args:
            xml_text: Newline-normalized XML text
            index: Position index built over the same text; built here if omitted

        Returns:
            Occurrences in left-to-right order
        """
        if index is None:
            index = SourcePositionIndex(xml_text)

        masked = mask_literal_blocks(xml_text)
        occurrences = [
            TagOccurrence(
                tag_name=match.group(1),
                offset=match.start(),
                line=index.line_for_offset(match.start()),
            )
            for match in START_TAG_PATTERN.finditer(masked)
        ]

        self.logger.debug(f"Scanned {len(occurrences)} start tags over {index.line_count} lines")
        return occurrences
