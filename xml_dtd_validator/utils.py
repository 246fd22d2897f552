"""
Utility functions for common text patterns across the DTD validation system.
"""

import re
from typing import Any


class StringUtils:
    """Utility methods for text normalization and inspection."""

    # Cached regex patterns for performance
    _regex_cache = {
        'line_endings': re.compile(r'\r\n?'),
        'whitespace': re.compile(r'\s+'),
    }

    @staticmethod
    def normalize_line_endings(text: str) -> str:
        """
        Convert CRLF and lone CR line endings to LF.

        Must run before any offset is computed against the text.
        """
        if not text:
            return ''
        return StringUtils._regex_cache['line_endings'].sub('\n', text)

    @staticmethod
    def strip_bom(text: str) -> str:
        """Remove a leading UTF-8 byte order mark, if present."""
        if text and text.startswith('\ufeff'):
            return text[1:]
        return text

    @staticmethod
    def normalize_whitespace(value: Any) -> str:
        """
        Collapse whitespace runs to single spaces and strip the ends.

        Args:
            value: Input value

        Returns:
            String with normalized whitespace
        """
        if value is None:
            return ''
        return StringUtils._regex_cache['whitespace'].sub(' ', str(value).strip())

    @staticmethod
    def remove_whitespace(value: str) -> str:
        """Remove every whitespace character."""
        if not value:
            return ''
        return StringUtils._regex_cache['whitespace'].sub('', value)

    @staticmethod
    def has_text(value: Any) -> bool:
        """True if value contains at least one non-whitespace character."""
        return value is not None and str(value).strip() != ''

    @staticmethod
    def blank_out(match_text: str) -> str:
        """
        Equal-length replacement for a masked span.

        Newlines are kept so that line counts on either side stay the same.
        """
        return ''.join('\n' if ch == '\n' else ' ' for ch in match_text)
