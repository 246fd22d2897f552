"""
Validation orchestrator.

Sequences one request/response cycle: normalize both texts, compile the DTD,
parse the XML, correlate elements with source lines, validate the tree and
assemble the ValidationResult. Every fault, expected or not, ends as a result;
nothing is raised across ``validate_xml_with_dtd``.

Run lifecycle: IDLE -> VALIDATING -> SUCCESS | ERROR. SUCCESS means the run
reached structural validation (the document may still be invalid); ERROR means
it stopped early.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from ..config.config_manager import ValidatorSettings
from ..dtd.compiler import NO_DEFINITIONS_MESSAGE, ContentModelCompiler
from ..exceptions import DTDParsingError, XMLParsingError
from ..interfaces import PerformanceMonitorInterface, ValidationRunnerInterface, XMLParserInterface
from ..models import ValidationResult, ValidationStatus
from ..parsing.line_correlator import ElementLineCorrelator
from ..parsing.source_index import SourcePositionIndex
from ..parsing.tag_scanner import TagOccurrenceScanner
from ..parsing.xml_parser import XMLParser
from ..utils import StringUtils
from .structural_validator import StructuralValidator


NO_DEFINITIONS_ERROR = NO_DEFINITIONS_MESSAGE
NO_DEFINITIONS_SUMMARY = "DTD parsing failed or input was empty."
SYNTAX_ERROR_PREFIX = "XML Syntax Error: "
SYNTAX_ERROR_SUMMARY = "The XML document is not well-formed."
NO_ROOT_ERROR = "XML document has no root element."
NO_ROOT_SUMMARY = "The XML document has no root element."
INTERNAL_ERROR_PREFIX = "Internal Validator Error: "
INTERNAL_ERROR_SUMMARY = "An unexpected error occurred during validation."
SUCCESS_SUMMARY = "Validation Successful. The XML strictly adheres to the DTD structure."


def failure_summary(error_count: int) -> str:
    return f"Validation Failed. Found {error_count} structural error(s)."


class ValidationRun:
    """
    A single validation of one XML text against one DTD text.

    A run executes at most once; asking a finished run to execute again
    returns the result it already produced.
    """

    def __init__(self, dtd_text: str, xml_text: str,
                 settings: Optional[ValidatorSettings] = None,
                 parser: Optional[XMLParserInterface] = None,
                 monitor: Optional[PerformanceMonitorInterface] = None,
                 clock: Callable[[], datetime] = datetime.now):
        """
        Args:
            dtd_text: DTD text holding element declarations
            xml_text: XML document to check
            settings: Runtime settings; defaults apply when omitted
            parser: XML parser collaborator; lxml-backed parser when omitted
            monitor: Optional stage timing collector
            clock: Timestamp source for the result
        """
        self.logger = logging.getLogger(__name__)
        self.dtd_text = dtd_text
        self.xml_text = xml_text
        self.settings = settings or ValidatorSettings()
        self.parser = parser or XMLParser(huge_tree=self.settings.huge_tree)
        self.monitor = monitor
        self.clock = clock

        self._status = ValidationStatus.IDLE
        self._result: Optional[ValidationResult] = None

    @property
    def status(self) -> ValidationStatus:
        return self._status

    @property
    def result(self) -> Optional[ValidationResult]:
        return self._result

    def execute(self) -> ValidationResult:
        """Run the validation and return its result."""
        if self._status.is_terminal:
            return self._result
        if self._status is ValidationStatus.VALIDATING:
            raise RuntimeError("Validation run is already in progress")

        self._status = ValidationStatus.VALIDATING
        try:
            result = self._run()
        except Exception as e:
            self.logger.exception(f"Validation logic error: {e}")
            result = self._finish(ValidationStatus.ERROR, [f"{INTERNAL_ERROR_PREFIX}{e}"], INTERNAL_ERROR_SUMMARY)

        if self.monitor is not None:
            self.monitor.record_result(result, errored=self._status is ValidationStatus.ERROR)
        return result

    def _finish(self, status: ValidationStatus, errors, summary: str, is_valid: bool = False) -> ValidationResult:
        self._result = ValidationResult(
            is_valid=is_valid,
            errors=tuple(errors),
            summary=summary,
            timestamp=self.clock(),
        )
        self._status = status
        return self._result

    def _start(self, stage: str) -> None:
        if self.monitor is not None:
            self.monitor.start_stage(stage)

    def _end(self, stage: str) -> None:
        if self.monitor is not None:
            self.monitor.end_stage(stage)

    def _run(self) -> ValidationResult:
        # Step 1: each text is normalized independently, before any offset is taken
        dtd_text = StringUtils.normalize_line_endings(self.dtd_text)
        xml_text = StringUtils.strip_bom(StringUtils.normalize_line_endings(self.xml_text))

        # Step 2: compile the DTD
        self._start('compile')
        try:
            definitions = ContentModelCompiler().compile(dtd_text, SourcePositionIndex(dtd_text))
        except DTDParsingError as e:
            self.logger.info(f"DTD rejected: {e}")
            return self._finish(ValidationStatus.ERROR, [NO_DEFINITIONS_ERROR], NO_DEFINITIONS_SUMMARY)
        finally:
            self._end('compile')

        # Step 3: parse the XML
        self._start('parse')
        try:
            root = self.parser.parse_document(xml_text)
        except XMLParsingError as e:
            return self._finish(ValidationStatus.ERROR, [f"{SYNTAX_ERROR_PREFIX}{e}"], SYNTAX_ERROR_SUMMARY)
        finally:
            self._end('parse')

        # Step 4: a document without a root cannot be checked
        if root is None:
            return self._finish(ValidationStatus.ERROR, [NO_ROOT_ERROR], NO_ROOT_SUMMARY)

        # Step 5: element-to-line map over the root's subtree
        self._start('correlate')
        try:
            xml_index = SourcePositionIndex(xml_text)
            occurrences = TagOccurrenceScanner().scan(xml_text, xml_index)
            line_map = ElementLineCorrelator(
                fallback_to_parser_lines=self.settings.use_parser_lines
            ).correlate(root, occurrences)
        finally:
            self._end('correlate')

        # Step 6: structural validation
        self._start('validate')
        try:
            errors = StructuralValidator(self.settings.text_preview_length).validate(root, definitions, line_map)
        finally:
            self._end('validate')

        # Step 7: assemble
        is_valid = not errors
        summary = SUCCESS_SUMMARY if is_valid else failure_summary(len(errors))
        self.logger.info(summary)
        return self._finish(ValidationStatus.SUCCESS, errors, summary, is_valid=is_valid)


class ValidationOrchestrator(ValidationRunnerInterface):
    """
    Reusable entry point that creates one independent ValidationRun per request.

    Holds only immutable settings and an optional shared monitor, so a single
    orchestrator can serve concurrent callers.
    """

    def __init__(self, settings: Optional[ValidatorSettings] = None,
                 monitor: Optional[PerformanceMonitorInterface] = None):
        self.logger = logging.getLogger(__name__)
        self.settings = settings or ValidatorSettings()
        self.monitor = monitor

    def create_run(self, dtd_text: str, xml_text: str) -> ValidationRun:
        return ValidationRun(dtd_text, xml_text, settings=self.settings, monitor=self.monitor)

    def validate(self, dtd_text: str, xml_text: str) -> ValidationResult:
        """
        Validate one XML document against one DTD text.

        Returns:
            ValidationResult, always
        """
        return self.create_run(dtd_text, xml_text).execute()


def validate_xml_with_dtd(dtd_text: str, xml_text: str,
                          settings: Optional[ValidatorSettings] = None) -> ValidationResult:
    """
    Validate ``xml_text`` against the element declarations in ``dtd_text``.

    Args:
        dtd_text: DTD text
        xml_text: XML document text
        settings: Optional runtime settings

    Returns:
        ValidationResult; never raises
    """
    return ValidationRun(dtd_text, xml_text, settings=settings).execute()
