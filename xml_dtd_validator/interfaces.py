"""
Abstract interfaces for the XML DTD validation system.

This module defines the contracts that the pluggable components implement,
so that the orchestrator can be assembled with alternative parsers or
validators (and mocks in tests).
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from .models import DefinitionTable, ValidationResult


class XMLParserInterface(ABC):
    """Abstract interface for XML parsing components."""

    @abstractmethod
    def parse_document(self, xml_content: str) -> Optional[Any]:
        """
        Parse XML content into an element tree.

        Args:
            xml_content: Newline-normalized XML text

        Returns:
            Root element, or None if the document has no root

        Raises:
            XMLParsingError: If XML is malformed or cannot be parsed
        """
        pass


class ContentModelCompilerInterface(ABC):
    """Abstract interface for DTD compilation components."""

    @abstractmethod
    def compile(self, dtd_text: str) -> DefinitionTable:
        """
        Compile every element declaration in a DTD text.

        Args:
            dtd_text: Newline-normalized DTD text

        Returns:
            Definition table

        Raises:
            DTDParsingError: If no element declaration can be extracted
        """
        pass


class StructuralValidatorInterface(ABC):
    """Abstract interface for tree validation components."""

    @abstractmethod
    def validate(self, root: Any, definitions: DefinitionTable, line_map: Any) -> List[str]:
        """
        Validate a subtree against compiled definitions.

        Args:
            root: Element to start from
            definitions: Compiled definitions
            line_map: Node to source line lookup

        Returns:
            Ordered diagnostic strings for the node and its subtree
        """
        pass


class ValidationRunnerInterface(ABC):
    """Abstract interface for components that execute validation requests."""

    @abstractmethod
    def validate(self, dtd_text: str, xml_text: str) -> ValidationResult:
        """
        Validate one XML document against one DTD text.

        Returns:
            ValidationResult, always; no exception crosses this boundary
        """
        pass


class PerformanceMonitorInterface(ABC):
    """Abstract interface for performance monitoring components."""

    @abstractmethod
    def start_stage(self, stage_name: str) -> None:
        """Start timing a validation stage."""
        pass

    @abstractmethod
    def end_stage(self, stage_name: str) -> float:
        """
        End timing a validation stage.

        Returns:
            Stage duration in seconds
        """
        pass

    @abstractmethod
    def record_result(self, result: ValidationResult, errored: bool = False) -> None:
        """Record the outcome of one validation run."""
        pass

    @abstractmethod
    def get_summary(self) -> Dict[str, Any]:
        """
        Get aggregate metrics.

        Returns:
            Dictionary of metric values
        """
        pass
