"""
Structural validation of an element tree against compiled DTD definitions.

Traversal is depth-first pre-order with children in document order, and a
node's own diagnostics always precede those of its descendants. Children of an
undeclared element are not visited.
"""

import logging
from typing import List, Optional

from ..config.processing_defaults import ValidationDefaults
from ..interfaces import StructuralValidatorInterface
from ..models import ContentType, DefinitionTable, ElementDefinition, ValidationError
from ..parsing.line_correlator import ElementLineMap
from ..parsing.xml_parser import child_elements, direct_text, qualified_name
from ..utils import StringUtils


class StructuralValidator(StructuralValidatorInterface):
    """
    Checks each element's content against its declared content model.

    - undeclared element: one diagnostic, subtree skipped
    - EMPTY: no child elements and no non-whitespace text
    - PCDATA: no child elements
    - MIXED: every child element must be in the allowed list
    - CHILDREN: no non-whitespace text, and the child sequence must match the model
    - ANY: unconstrained
    """

    def __init__(self, text_preview_length: int = ValidationDefaults.TEXT_PREVIEW_LENGTH):
        self.logger = logging.getLogger(__name__)
        self.text_preview_length = text_preview_length

    def validate(self, root, definitions: DefinitionTable,
                 line_map: Optional[ElementLineMap] = None) -> List[str]:
        """
        Validate ``root`` and its entire subtree.

        Returns:
            Diagnostic strings in traversal order
        """
        return [str(error) for error in self.collect_errors(root, definitions, line_map)]

    def collect_errors(self, root, definitions: DefinitionTable,
                       line_map: Optional[ElementLineMap] = None) -> List[ValidationError]:
        """Same traversal as ``validate`` but returns structured diagnostics."""
        line_map = line_map or ElementLineMap()
        errors: List[ValidationError] = []

        # Explicit stack keeps deep documents clear of the recursion limit
        stack = [root]
        while stack:
            node = stack.pop()
            definition = definitions.get(qualified_name(node))
            errors.extend(self.check_node(node, definition, line_map.line_for(node)))
            if definition is not None:
                stack.extend(reversed(child_elements(node)))

        self.logger.debug(f"Structural validation produced {len(errors)} diagnostic(s)")
        return errors

    def check_node(self, node, definition: Optional[ElementDefinition],
                   xml_line: Optional[int]) -> List[ValidationError]:
        """Diagnostics for ``node`` alone, not its descendants."""
        tag_name = qualified_name(node)

        if definition is None:
            return [ValidationError(xml_line, None, f"Element <{tag_name}> is used in XML but not defined in DTD.")]

        dtd_line = definition.declaration_line
        children = child_elements(node)
        errors: List[ValidationError] = []

        def report(message: str) -> None:
            errors.append(ValidationError(xml_line, dtd_line, message))

        content_type = definition.content_type
        if content_type is ContentType.EMPTY:
            if children or StringUtils.has_text(direct_text(node)):
                report(f"Element <{tag_name}> is declared EMPTY but contains content.")

        elif content_type is ContentType.PCDATA:
            if children:
                report(f"Element <{tag_name}> is declared (#PCDATA) but contains child elements.")

        elif content_type is ContentType.MIXED:
            allowed = ', '.join(definition.allowed_mixed_children)
            for child in children:
                child_name = qualified_name(child)
                if not definition.allows_mixed_child(child_name):
                    report(f"Element <{tag_name}> contains unexpected child <{child_name}>. "
                           f"Allowed mixed content: {allowed}.")

        elif content_type is ContentType.CHILDREN:
            text = direct_text(node).strip()
            if text:
                report(f"Element <{tag_name}> has element-only content definition but contains text data: "
                       f"\"{text[:self.text_preview_length]}...\"")

            child_names = [qualified_name(child) for child in children]
            if definition.matcher is not None and not definition.matcher.matches(child_names):
                found = ', '.join(child_names) if child_names else 'None'
                report(f"Element <{tag_name}> has invalid content structure.\n"
                       f"Found children: [{found}]\n"
                       f"Expected DTD sequence: {definition.display_spec}")

        return errors
