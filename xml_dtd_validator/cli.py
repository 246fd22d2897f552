"""
Command-line interface for the XML DTD validation system.

Validates one or more XML documents against the element declarations of a
DTD file and prints the diagnostics.

Usage:
    xml-dtd-validate schema.dtd document.xml
    xml-dtd-validate schema.dtd a.xml b.xml --workers 8 --json
    xml-dtd-validate schema.dtd document.xml --stats --log-level INFO

Exit codes: 0 when every document is valid, 1 when any document is invalid
or could not be checked, 2 for unusable input or configuration.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config.config_manager import get_config_manager
from .config.processing_defaults import ValidationDefaults
from .exceptions import ConfigurationError
from .monitoring.performance_monitor import PerformanceMonitor
from .processing.parallel_coordinator import ParallelCoordinator
from .reporting import format_result


EXIT_VALID = 0
EXIT_INVALID = 1
EXIT_USAGE = 2


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='xml-dtd-validate',
        description="Validate XML element structure against DTD content models.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('dtd', help="DTD file holding <!ELEMENT> declarations")
    parser.add_argument('xml', nargs='+', help="XML document(s) to validate")
    parser.add_argument('--json', action='store_true', help="Print results as JSON")
    parser.add_argument('--log-level', choices=['CRITICAL', 'ERROR', 'WARNING', 'INFO', 'DEBUG'],
                        help=f"Logging level (default: {ValidationDefaults.LOG_LEVEL})")
    parser.add_argument('--workers', type=int, help=f"Worker count (default: {ValidationDefaults.MAX_WORKERS})")
    parser.add_argument('--executor', choices=['thread', 'process'],
                        help=f"Pool type for multiple documents (default: {ValidationDefaults.EXECUTOR})")
    parser.add_argument('--settings', help="JSON or YAML settings file")
    parser.add_argument('--stats', action='store_true', help="Print stage timings and memory usage")
    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")
    return parser


def _configure_logging(level: str) -> None:
    # Set up logging without reconfiguring root if already configured
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
        root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level, logging.WARNING))


def _read_text(path: str, kind: str) -> str:
    try:
        return Path(path).read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        raise ValueError(f"Cannot read {kind} file {path}: {e}")


def main(args: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI application.

    Args:
        args: Optional command line arguments (defaults to sys.argv)

    Returns:
        Exit code
    """
    if args is None:
        args = sys.argv[1:]

    options = build_argument_parser().parse_args(args)
    logger = logging.getLogger(__name__)

    try:
        config_manager = get_config_manager()
        if options.settings:
            config_manager.load_settings_file(options.settings)

        overrides = {}
        if options.log_level:
            overrides['log_level'] = options.log_level
        if options.workers is not None:
            overrides['max_workers'] = options.workers
        if options.executor:
            overrides['executor'] = options.executor
        settings = config_manager.get_settings().updated(overrides)
        config_manager.settings = settings
        config_manager.validate_configuration()
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_USAGE

    _configure_logging(settings.log_level)
    if settings.log_level == 'DEBUG':
        ValidationDefaults.log_summary(logger)
        logger.debug(f"Active configuration: {config_manager.get_configuration_summary()}")

    try:
        dtd_text = _read_text(options.dtd, 'DTD')
        xml_texts = [_read_text(path, 'XML') for path in options.xml]
    except ValueError as e:
        print(str(e), file=sys.stderr)
        return EXIT_USAGE

    if not dtd_text.strip():
        print(f"DTD file {options.dtd} is empty", file=sys.stderr)
        return EXIT_USAGE
    empty = [path for path, text in zip(options.xml, xml_texts) if not text.strip()]
    if empty:
        print(f"XML file(s) empty: {', '.join(empty)}", file=sys.stderr)
        return EXIT_USAGE

    monitor = PerformanceMonitor() if options.stats else None
    with ParallelCoordinator(settings, monitor=monitor) as coordinator:
        results = coordinator.validate_batch([(dtd_text, xml_text) for xml_text in xml_texts])

    if options.json:
        payload = [dict(file=path, **result.to_dict()) for path, result in zip(options.xml, results)]
        print(json.dumps(payload if len(payload) > 1 else payload[0], indent=2))
    else:
        for path, result in zip(options.xml, results):
            print(format_result(result, label=path))

    if monitor is not None:
        print(monitor.format_report(), file=sys.stderr)

    invalid = sum(1 for result in results if not result.is_valid)
    logger.info(f"{len(results) - invalid}/{len(results)} document(s) valid")
    return EXIT_VALID if invalid == 0 else EXIT_INVALID


if __name__ == "__main__":
    sys.exit(main())
