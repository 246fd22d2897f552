"""
Structural validation and run orchestration.

- StructuralValidator: checks an element tree against compiled definitions
- ValidationRun: one IDLE -> VALIDATING -> SUCCESS/ERROR validation cycle
- ValidationOrchestrator: reusable factory of independent runs
- validate_xml_with_dtd: one-call entry point that never raises
"""

from .structural_validator import StructuralValidator
from .orchestrator import ValidationOrchestrator, ValidationRun, validate_xml_with_dtd

__all__ = [
    'StructuralValidator',
    'ValidationOrchestrator',
    'ValidationRun',
    'validate_xml_with_dtd',
]
