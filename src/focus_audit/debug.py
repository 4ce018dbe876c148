"""Debugging utilities for focus walks and audit checks.

Provides env-toggled step tracing for the traversal engine, per-check
timing and a performance summary at the end of an audit.
"""

import os
import time
import logging
from typing import Dict, Optional, Callable, List
from functools import wraps

# Configure debug logger
debug_logger = logging.getLogger("focus_audit.debug")
debug_logger.setLevel(logging.DEBUG)

DEBUG_ENABLED = os.getenv("DEBUG_WALK", "false").lower() in ("true", "1", "yes")
DEBUG_VERBOSE = os.getenv("DEBUG_WALK_VERBOSE", "false").lower() in ("true", "1", "yes")

# Performance tracking
_check_timings: Dict[str, List[float]] = {}


def reset_debug_state():
    """Reset debug state between audits."""
    global _check_timings
    _check_timings = {}


def log_walk_step(direction: str, step: int, description: str, closed_cycle: bool = False):
    """Log one walker observation."""
    if not DEBUG_ENABLED:
        return

    if closed_cycle:
        debug_logger.info(f"[{direction.upper()} {step}] cycle closed at {description}")
    else:
        debug_logger.debug(f"[{direction.upper()} {step}] {description}")


def log_no_move(direction: str, step: int, description: str, count: int):
    """Log a shift that did not move focus."""
    if not DEBUG_ENABLED:
        return

    debug_logger.debug(f"[{direction.upper()} {step}] no movement on {description} ({count} in a row)")


def log_check_entry(check_name: str):
    if not DEBUG_ENABLED:
        return

    debug_logger.info(f"→ ENTER {check_name}")


def log_check_exit(check_name: str, duration: float, status: Optional[str] = None):
    """Log when a check finishes and record its timing."""
    _check_timings.setdefault(check_name, []).append(duration)

    if not DEBUG_ENABLED:
        return

    debug_logger.info(f"← EXIT {check_name} [{status or 'unknown'}] [{duration:.3f}s]")


def log_performance_summary():
    """Log performance summary at end of an audit."""
    if not DEBUG_ENABLED or not _check_timings:
        return

    debug_logger.info("=" * 70)
    debug_logger.info("PERFORMANCE SUMMARY")
    debug_logger.info("=" * 70)

    total_time = sum(sum(times) for times in _check_timings.values())
    debug_logger.info(f"Total execution time: {total_time:.3f}s")
    debug_logger.info("")
    debug_logger.info("Check timings:")

    for check_name, times in sorted(_check_timings.items(), key=lambda x: sum(x[1]), reverse=True):
        count = len(times)
        total = sum(times)
        avg = total / count if count > 0 else 0
        debug_logger.info(f"  {check_name[:40]:40s}: {count:3d} runs, {total:7.3f}s total, {avg:6.3f}s avg")

    debug_logger.info("=" * 70)


def timed_check(check_name: str):
    """Decorator that logs entry, exit and duration of an async check method.

    The wrapped method must return a Verdict (or anything with a ``status``).
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args, **kwargs):
            start_time = time.time()
            status = None
            log_check_entry(check_name)
            try:
                result = await func(*args, **kwargs)
                status = getattr(getattr(result, "status", None), "value", None)
                return result
            finally:
                log_check_exit(check_name, time.time() - start_time, status)

        return wrapper
    return decorator


def enable_debug(enabled: bool = True, verbose: bool = False):
    """Enable or disable debug logging."""
    global DEBUG_ENABLED, DEBUG_VERBOSE

    DEBUG_ENABLED = enabled
    DEBUG_VERBOSE = verbose

    if enabled:
        debug_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
        if not debug_logger.handlers:
            handler = logging.StreamHandler()
            handler.setLevel(logging.DEBUG)
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                datefmt='%H:%M:%S'
            )
            handler.setFormatter(formatter)
            debug_logger.addHandler(handler)

        debug_logger.info("=" * 70)
        debug_logger.info("WALK DEBUG MODE ENABLED")
        debug_logger.info(f"Verbose: {verbose}")
        debug_logger.info("=" * 70)
    else:
        debug_logger.setLevel(logging.WARNING)


if DEBUG_ENABLED:
    enable_debug(True, DEBUG_VERBOSE)
