"""
XML DTD Validation System

Checks the element structure of XML documents against the <!ELEMENT> content
models of a DTD and reports every violation with XML and DTD line numbers.
"""

__version__ = "1.0.0"
__author__ = "XML DTD Validator Team"

# Import core models and interfaces for easy access
from .models import (
    ContentType,
    ValidationStatus,
    ElementDefinition,
    DefinitionTable,
    TagOccurrence,
    ValidationError,
    ValidationResult
)

from .interfaces import (
    XMLParserInterface,
    ContentModelCompilerInterface,
    StructuralValidatorInterface,
    ValidationRunnerInterface,
    PerformanceMonitorInterface
)

from .exceptions import (
    DTDValidatorError,
    DTDParsingError,
    ContentModelError,
    XMLParsingError,
    ConfigurationError
)

from .validation import ValidationOrchestrator, ValidationRun, validate_xml_with_dtd
from .reporting import parse_diagnostic, format_result

__all__ = [
    # Core models
    "ContentType",
    "ValidationStatus",
    "ElementDefinition",
    "DefinitionTable",
    "TagOccurrence",
    "ValidationError",
    "ValidationResult",

    # Interfaces
    "XMLParserInterface",
    "ContentModelCompilerInterface",
    "StructuralValidatorInterface",
    "ValidationRunnerInterface",
    "PerformanceMonitorInterface",

    # Exceptions
    "DTDValidatorError",
    "DTDParsingError",
    "ContentModelError",
    "XMLParsingError",
    "ConfigurationError",

    # Entry points
    "ValidationOrchestrator",
    "ValidationRun",
    "validate_xml_with_dtd",
    "parse_diagnostic",
    "format_result"
]
