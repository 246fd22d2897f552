"""
DTD content-model compiler.

Extracts every ``<!ELEMENT name spec>`` declaration from a DTD text and
compiles it into an ElementDefinition. Attribute lists, entities and notations
are not interpreted.

Classification (on the whitespace-free spec, first rule wins):
- ``EMPTY`` -> EMPTY
- ``ANY`` -> ANY
- ``(#PCDATA)`` -> PCDATA
- starts with ``(#PCDATA`` -> MIXED, allowed children taken from the ``|`` list
- anything else -> CHILDREN, with a compiled content-model matcher

A CHILDREN spec that cannot be compiled degrades that element to ANY; the
rest of the DTD is still compiled.
"""

import logging
import re
from typing import Dict, List, Optional, Tuple

from ..exceptions import ContentModelError, DTDParsingError
from ..interfaces import ContentModelCompilerInterface
from ..models import ContentType, DefinitionTable, ElementDefinition
from ..parsing.source_index import SourcePositionIndex
from ..parsing.tag_scanner import mask_comments
from ..utils import StringUtils
from .content_model import compile_content_model


ELEMENT_DECLARATION_PATTERN = re.compile(r'<!ELEMENT\s+([\w\-:.]+)\s+([^>]+)>')
INLINE_COMMENT_PATTERN = re.compile(r'--.*?--')

PCDATA_PREFIX = '(#PCDATA'
NO_DEFINITIONS_MESSAGE = "No valid ELEMENT definitions found in DTD."


def strip_inline_comments(spec: str) -> str:
    return INLINE_COMMENT_PATTERN.sub('', spec)


def parse_mixed_children(clean_spec: str) -> Tuple[str, ...]:
    """
    Allowed child names of a whitespace-free mixed spec.

    ``(#PCDATA|a|b)*`` -> ``('a', 'b')``; ``(#PCDATA)*`` -> ``()``.
    """
    remainder = clean_spec[len(PCDATA_PREFIX):]
    if remainder.endswith(')*'):
        remainder = remainder[:-2]
    elif remainder.endswith(')'):
        remainder = remainder[:-1]

    names: List[str] = []
    for name in remainder.split('|'):
        if name and name not in names:
            names.append(name)
    return tuple(names)


class ContentModelCompiler(ContentModelCompilerInterface):
    """
    Compiles DTD element declarations into a DefinitionTable.

    Tracks the number of degraded declarations of the last compile in
    ``degraded_elements`` for reporting.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self.degraded_elements: List[str] = []

    def compile(self, dtd_text: str, index: Optional[SourcePositionIndex] = None) -> DefinitionTable:
        """
        Compile every element declaration in ``dtd_text``.

        Args:
            dtd_text: Newline-normalized DTD text
            index: Position index over the same text; built here if omitted

        Returns:
            DefinitionTable with one entry per distinct element name

        Raises:
            DTDParsingError: If the text holds no element declaration
        """
        dtd_text = dtd_text or ''
        if index is None:
            index = SourcePositionIndex(dtd_text)

        self.degraded_elements = []
        definitions: Dict[str, ElementDefinition] = {}

        # Commented-out declarations are blanked without moving any offset
        searchable = mask_comments(dtd_text)
        for match in ELEMENT_DECLARATION_PATTERN.finditer(searchable):
            name = match.group(1)
            line = index.line_for_offset(match.start())
            definition = self.compile_declaration(name, match.group(2), line)
            if name in definitions:
                self.logger.debug(f"Element <{name}> redeclared on line {line}; later declaration wins")
            definitions[name] = definition

        if not definitions:
            raise DTDParsingError(NO_DEFINITIONS_MESSAGE)

        self.logger.info(
            f"Compiled {len(definitions)} element definition(s)"
            + (f", {len(self.degraded_elements)} degraded to ANY" if self.degraded_elements else "")
        )
        return DefinitionTable(definitions)

    def compile_declaration(self, name: str, spec: str, line: int) -> ElementDefinition:
        """
        Build the definition for a single declaration.

        Args:
            name: Declared element name
            spec: Content spec text as written
            line: 1-based declaration line
        """
        raw_spec = strip_inline_comments(spec.strip()).strip()
        clean_spec = StringUtils.remove_whitespace(raw_spec)

        if clean_spec == 'EMPTY':
            return ElementDefinition(name, ContentType.EMPTY, raw_spec, line)
        if clean_spec == 'ANY':
            return ElementDefinition(name, ContentType.ANY, raw_spec, line)
        if clean_spec == '(#PCDATA)':
            return ElementDefinition(name, ContentType.PCDATA, raw_spec, line)
        if clean_spec.startswith(PCDATA_PREFIX):
            return ElementDefinition(
                name, ContentType.MIXED, raw_spec, line,
                allowed_mixed_children=parse_mixed_children(clean_spec),
            )

        try:
            matcher = compile_content_model(raw_spec)
        except ContentModelError as e:
            self.logger.warning(f"Failed to parse content spec for <{name}> (line {line}): {raw_spec!r}: {e}")
            self.degraded_elements.append(name)
            return ElementDefinition(name, ContentType.ANY, raw_spec, line)

        return ElementDefinition(name, ContentType.CHILDREN, raw_spec, line, matcher=matcher)
