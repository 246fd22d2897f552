"""
Future-based validation coordinator.

Runs validations on a concurrent.futures pool so that callers receive a Future
and stay responsive while large documents are processed. Each submitted run is
fully independent: it builds its own definition table, indexes and line map,
so no coordination between workers is needed.

KEY FEATURES:
- Thread pool by default; process pool for CPU-bound batches of large documents
- submit() hands back a Future resolving to a ValidationResult
- validate_batch() returns results in input order
- A lazily created module-level coordinator backs validate_async()
"""

import logging
import threading
from concurrent.futures import Executor, Future, ProcessPoolExecutor, ThreadPoolExecutor
from typing import List, Optional, Sequence, Tuple

from ..config.config_manager import ValidatorSettings
from ..interfaces import PerformanceMonitorInterface
from ..models import ValidationResult
from ..validation.orchestrator import (
    INTERNAL_ERROR_PREFIX,
    INTERNAL_ERROR_SUMMARY,
    ValidationRun,
)


def _run_validation(dtd_text: str, xml_text: str, settings: ValidatorSettings) -> ValidationResult:
    """Worker entry point; module-level so process pools can pickle it."""
    return ValidationRun(dtd_text, xml_text, settings=settings).execute()


class ParallelCoordinator:
    """
    Executor pool manager for validation requests.

    Worker Lifecycle:
    1. The executor is created on first submit (thread or process pool)
    2. Each request runs a fresh ValidationRun in a worker
    3. The Future completes with that run's ValidationResult
    4. shutdown() (or leaving the context manager) releases the pool

    A performance monitor is only honoured with the thread executor, since
    process workers cannot update the parent's metrics.
    """

    def __init__(self, settings: Optional[ValidatorSettings] = None,
                 max_workers: Optional[int] = None,
                 executor_kind: Optional[str] = None,
                 monitor: Optional[PerformanceMonitorInterface] = None):
        """
        Args:
            settings: Runtime settings passed to every run
            max_workers: Pool size (defaults to settings.max_workers)
            executor_kind: "thread" or "process" (defaults to settings.executor)
            monitor: Optional metrics collector for thread-pool runs
        """
        self.logger = logging.getLogger(__name__)
        self.settings = settings or ValidatorSettings()
        self.max_workers = max_workers or self.settings.max_workers
        self.executor_kind = (executor_kind or self.settings.executor).lower()
        if self.executor_kind not in ('thread', 'process'):
            raise ValueError(f"Unknown executor kind: {self.executor_kind}")
        self.monitor = monitor if self.executor_kind == 'thread' else None
        if monitor is not None and self.monitor is None:
            self.logger.warning("Performance monitor ignored with process executor")

        self._executor: Optional[Executor] = None
        self._lock = threading.Lock()

    def _get_executor(self) -> Executor:
        with self._lock:
            if self._executor is None:
                if self.executor_kind == 'process':
                    self._executor = ProcessPoolExecutor(max_workers=self.max_workers)
                else:
                    self._executor = ThreadPoolExecutor(
                        max_workers=self.max_workers,
                        thread_name_prefix='dtd-validator',
                    )
                self.logger.info(f"ParallelCoordinator started {self.executor_kind} pool with {self.max_workers} workers")
            return self._executor

    def submit(self, dtd_text: str, xml_text: str) -> Future:
        """
        Schedule one validation.

        Returns:
            Future resolving to the run's ValidationResult
        """
        executor = self._get_executor()
        if self.monitor is not None:
            run = ValidationRun(dtd_text, xml_text, settings=self.settings, monitor=self.monitor)
            return executor.submit(run.execute)
        return executor.submit(_run_validation, dtd_text, xml_text, self.settings)

    def validate_batch(self, pairs: Sequence[Tuple[str, str]]) -> List[ValidationResult]:
        """
        Validate many (dtd_text, xml_text) pairs concurrently.

        Args:
            pairs: Requests to run

        Returns:
            Results in the same order as ``pairs``
        """
        if not pairs:
            return []

        self.logger.info(f"Validating batch of {len(pairs)} document(s)")
        futures = [self.submit(dtd_text, xml_text) for dtd_text, xml_text in pairs]

        results = []
        for sequence, future in enumerate(futures, 1):
            try:
                results.append(future.result())
            except Exception as e:
                # Only reachable when the pool itself fails (e.g. a killed worker process)
                self.logger.error(f"Batch item {sequence}: worker failed: {e}")
                results.append(ValidationResult(
                    is_valid=False,
                    errors=(f"{INTERNAL_ERROR_PREFIX}{e}",),
                    summary=INTERNAL_ERROR_SUMMARY,
                ))
        return results

    def shutdown(self, wait: bool = True) -> None:
        with self._lock:
            if self._executor is not None:
                self._executor.shutdown(wait=wait)
                self._executor = None

    def __enter__(self) -> 'ParallelCoordinator':
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.shutdown()


# Global coordinator instance
_global_coordinator: Optional[ParallelCoordinator] = None
_global_lock = threading.Lock()


def get_coordinator(settings: Optional[ValidatorSettings] = None) -> ParallelCoordinator:
    """
    Get the global coordinator instance.

    Args:
        settings: Settings for the coordinator. Only used on first call.
    """
    global _global_coordinator

    with _global_lock:
        if _global_coordinator is None:
            _global_coordinator = ParallelCoordinator(settings)
        return _global_coordinator


def reset_coordinator() -> None:
    """Shut down and discard the global coordinator."""
    global _global_coordinator

    with _global_lock:
        if _global_coordinator is not None:
            _global_coordinator.shutdown()
        _global_coordinator = None


def validate_async(dtd_text: str, xml_text: str) -> Future:
    """Submit a validation to the global coordinator and return its Future."""
    return get_coordinator().submit(dtd_text, xml_text)
