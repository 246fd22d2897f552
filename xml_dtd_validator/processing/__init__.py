"""
Processing module for the DTD validation system.

This module provides future-based and batch validation on thread or process
pools.
"""

from .parallel_coordinator import ParallelCoordinator, get_coordinator, reset_coordinator, validate_async

__all__ = [
    'ParallelCoordinator',
    'get_coordinator',
    'reset_coordinator',
    'validate_async',
]
