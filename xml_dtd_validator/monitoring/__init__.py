"""
Monitoring module for the DTD validation system.

This module provides stage timing and resource metrics for profiling
validation runs.
"""

from .performance_monitor import PerformanceMonitor, PerformanceMetrics

__all__ = [
    'PerformanceMonitor',
    'PerformanceMetrics'
]
