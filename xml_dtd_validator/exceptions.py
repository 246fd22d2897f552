"""
Custom exceptions for the XML DTD validation system.

This module defines specific exception types for the error conditions that can
occur while compiling DTD declarations and parsing XML. None of these cross the
public validation boundary: the orchestrator converts them into results.
"""


class DTDValidatorError(Exception):
    """Base exception for all DTD validation related errors."""


class DTDParsingError(DTDValidatorError):
    """Exception raised when DTD text cannot be turned into element definitions."""

    def __init__(self, message: str, dtd_line: int = None):
        """
        Initialize DTD parsing error.

        Args:
            message: Error description
            dtd_line: Optional line in the DTD where the problem was found
        """
        super().__init__(message)
        self.dtd_line = dtd_line


class ContentModelError(DTDValidatorError):
    """Exception raised when a content spec cannot be compiled into a matcher."""

    def __init__(self, message: str, element_name: str = None, spec: str = None):
        """
        Initialize content model error.

        Args:
            message: Error description
            element_name: Name of the element whose declaration failed
            spec: The offending content spec text
        """
        super().__init__(message)
        self.element_name = element_name
        self.spec = spec


class XMLParsingError(DTDValidatorError):
    """Exception raised when the XML document is not well-formed."""

    def __init__(self, message: str, xml_content: str = None,
                 line: int = None, column: int = None):
        """
        Initialize XML parsing error.

        Args:
            message: Parser fault text
            xml_content: Optional XML content that failed to parse (truncated for logging)
            line: Line reported by the parser, if any
            column: Column reported by the parser, if any
        """
        super().__init__(message)
        # Store truncated XML content for debugging (first 500 chars)
        self.xml_content = xml_content[:500] + "..." if xml_content and len(xml_content) > 500 else xml_content
        self.line = line
        self.column = column


class ConfigurationError(DTDValidatorError):
    """Exception raised when configuration is invalid or missing."""
