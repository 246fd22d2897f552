"""
Performance monitoring for validation runs.

Collects per-stage timings, outcome counts and peak resident memory so that
large documents and batches can be profiled from the CLI.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

import psutil

from ..interfaces import PerformanceMonitorInterface
from ..models import ValidationResult


STAGES = ('compile', 'parse', 'correlate', 'validate')


@dataclass
class PerformanceMetrics:
    """Container for performance metrics."""
    start_time: Optional[datetime] = None
    runs_completed: int = 0
    runs_valid: int = 0
    runs_invalid: int = 0
    runs_errored: int = 0
    diagnostics_reported: int = 0

    # Validation stage timings (seconds, summed over runs)
    stage_times: Dict[str, float] = field(default_factory=lambda: {stage: 0.0 for stage in STAGES})

    # System resource metrics
    peak_memory_mb: float = 0.0


class PerformanceMonitor(PerformanceMonitorInterface):
    """
    Thread-safe metrics collector shared by the runs of one session.

    Stage timers are tracked per thread so that concurrent runs in a thread
    pool do not overwrite each other's start times.
    """

    def __init__(self):
        """Initialize the performance monitor."""
        self.logger = logging.getLogger(__name__)
        self._metrics = PerformanceMetrics(start_time=datetime.now())
        self._lock = threading.Lock()
        self._local = threading.local()

    def _stage_start_times(self) -> Dict[str, float]:
        if not hasattr(self._local, 'stage_start_times'):
            self._local.stage_start_times = {}
        return self._local.stage_start_times

    def start_stage(self, stage_name: str) -> None:
        """Start timing a validation stage."""
        self._stage_start_times()[stage_name] = time.perf_counter()

    def end_stage(self, stage_name: str) -> float:
        """End timing a validation stage and return duration."""
        start_times = self._stage_start_times()
        if stage_name not in start_times:
            return 0.0

        duration = time.perf_counter() - start_times.pop(stage_name)
        with self._lock:
            self._metrics.stage_times[stage_name] = self._metrics.stage_times.get(stage_name, 0.0) + duration
        self._sample_memory()
        return duration

    def record_result(self, result: ValidationResult, errored: bool = False) -> None:
        """Record the outcome of one validation run."""
        with self._lock:
            self._metrics.runs_completed += 1
            if errored:
                self._metrics.runs_errored += 1
            elif result.is_valid:
                self._metrics.runs_valid += 1
            else:
                self._metrics.runs_invalid += 1
                self._metrics.diagnostics_reported += result.error_count

    def _sample_memory(self) -> None:
        memory_mb = self._get_current_memory_mb()
        with self._lock:
            if memory_mb > self._metrics.peak_memory_mb:
                self._metrics.peak_memory_mb = memory_mb

    def _get_current_memory_mb(self) -> float:
        """Get current memory usage in MB."""
        try:
            process = psutil.Process()
            return process.memory_info().rss / 1024 / 1024
        except psutil.Error as e:
            self.logger.debug(f"Memory sampling unavailable: {e}")
            return 0.0

    def get_summary(self) -> Dict[str, Any]:
        """Get comprehensive performance summary."""
        with self._lock:
            metrics = self._metrics
            elapsed = (datetime.now() - metrics.start_time).total_seconds() if metrics.start_time else 0.0
            return {
                'elapsed_seconds': elapsed,
                'runs_completed': metrics.runs_completed,
                'runs_valid': metrics.runs_valid,
                'runs_invalid': metrics.runs_invalid,
                'runs_errored': metrics.runs_errored,
                'diagnostics_reported': metrics.diagnostics_reported,
                'runs_per_second': metrics.runs_completed / elapsed if elapsed > 0 else 0.0,
                'stage_timings': dict(metrics.stage_times),
                'peak_memory_mb': metrics.peak_memory_mb,
            }

    def format_report(self) -> str:
        """Plain-text report for terminal output."""
        summary = self.get_summary()
        lines = [
            "Performance Summary",
            f"  Runs: {summary['runs_completed']} "
            f"(valid {summary['runs_valid']}, invalid {summary['runs_invalid']}, errored {summary['runs_errored']})",
            f"  Diagnostics: {summary['diagnostics_reported']}",
            f"  Elapsed: {summary['elapsed_seconds']:.3f}s",
            "  Stage timings:",
        ]
        for stage, seconds in summary['stage_timings'].items():
            lines.append(f"    {stage}: {seconds * 1000:.2f}ms")
        lines.append(f"  Peak memory: {summary['peak_memory_mb']:.1f} MB")
        return "\n".join(lines)
