"""
XML parsing collaborator built on lxml.

This module turns normalized XML text into an element tree, reporting
well-formedness faults as XMLParsingError. It also provides the small set of
namespace-unaware tree accessors the correlator and validator rely on.
"""

import logging
from typing import List

from lxml import etree

from ..exceptions import XMLParsingError
from ..interfaces import XMLParserInterface


def qualified_name(element) -> str:
    """
    Tag name as written in the source (``prefix:local`` or ``local``).

    lxml reports namespaced tags in Clark notation; DTD content models are
    namespace-unaware, so the prefix is restored instead.
    """
    tag = element.tag
    if not isinstance(tag, str):
        return ''
    if tag.startswith('{'):
        local_name = etree.QName(tag).localname
        return f"{element.prefix}:{local_name}" if element.prefix else local_name
    return tag


def is_element(node) -> bool:
    """True for element nodes; comments, PIs and entity references have non-string tags."""
    return isinstance(node.tag, str)


def child_elements(element) -> List:
    """Direct child elements in document order."""
    return [child for child in element if is_element(child)]


def direct_text(element) -> str:
    """
    Concatenated character data directly under ``element``.

    Includes the leading text and the tail of every child node (CDATA content
    is merged into these by lxml).
    """
    parts = [element.text or '']
    for child in element:
        parts.append(child.tail or '')
    return ''.join(parts)


class XMLParser(XMLParserInterface):
    """
    Well-formedness-checking XML parser.

    Recovery is disabled so that any syntax fault is reported rather than
    silently repaired. External entities, DTD loading and network access are
    all disabled; the document's own DOCTYPE is never used for validation.
    """

    def __init__(self, huge_tree: bool = False):
        """
        Args:
            huge_tree: Lift libxml2's size and depth safety limits
        """
        self.logger = logging.getLogger(__name__)
        self.huge_tree = huge_tree
        self.parse_count = 0

    def _build_parser(self) -> etree.XMLParser:
        return etree.XMLParser(
            recover=False,
            resolve_entities=False,  # Security: don't resolve external entities
            no_network=True,  # Security: disable network access
            load_dtd=False,
            huge_tree=self.huge_tree,
            encoding='utf-8',  # Overrides any encoding declared in the prolog
        )

    def parse_document(self, xml_content: str):
        """
        Parse XML text into a tree.

        Args:
            xml_content: Newline-normalized XML text

        Returns:
            The root element, or None when the text contains no document at all

        Raises:
            XMLParsingError: If the XML is not well-formed
        """
        self.parse_count += 1

        if xml_content is None or not xml_content.strip():
            self.logger.debug("XML content is empty, no root element")
            return None

        try:
            root = etree.fromstring(xml_content.encode('utf-8'), self._build_parser())
        except etree.XMLSyntaxError as e:
            line, column = e.position if e.position else (None, None)
            self.logger.info(f"XML is not well-formed: {e}")
            raise XMLParsingError(str(e), xml_content, line, column) from e

        return root

    def is_well_formed(self, xml_content: str) -> bool:
        """
        Quick well-formedness check.

        Args:
            xml_content: XML text

        Returns:
            True if the text parses to a document with a root element
        """
        try:
            return self.parse_document(xml_content) is not None
        except XMLParsingError:
            return False
