"""Timing helpers for the view pipeline.

``monitor_performance`` wraps hot paths (filter recomputation, exports) and
logs calls slower than a threshold. Per-function metrics are kept per process
and can be shown on the admin page via ``PerformanceTracker``.
"""

import functools
import logging
import time
from datetime import datetime
from typing import Any, Callable, Dict, Optional

import pandas as pd
import psutil

perf_logger = logging.getLogger(__name__)

_performance_metrics: Dict[str, Dict[str, Any]] = {}


def _rss_mb() -> float:
    return psutil.Process().memory_info().rss / 1024 / 1024


def monitor_performance(slow_threshold: float = 0.5, log_memory: bool = False):
    """
    Decorator that records call timings and logs slow calls.

    Args:
        slow_threshold (float): Seconds above which a call is logged as slow
        log_memory (bool): Whether to log resident memory change

    Example:
        @monitor_performance(slow_threshold=0.2)
        def apply_filters(profiles, criteria):
            ...
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            func_name = f"{func.__module__}.{func.__name__}"
            start_memory = _rss_mb() if log_memory else None
            start_time = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                _record(func_name, time.perf_counter() - start_time, slow_threshold, start_memory, error=str(e))
                raise
            _record(func_name, time.perf_counter() - start_time, slow_threshold, start_memory)
            return result

        return wrapper

    return decorator


def _record(
    func_name: str,
    execution_time: float,
    slow_threshold: float,
    start_memory: Optional[float],
    error: Optional[str] = None,
) -> None:
    metrics = _performance_metrics.setdefault(
        func_name,
        {"call_count": 0, "total_time": 0.0, "max_time": 0.0, "error_count": 0, "last_call": None},
    )
    metrics["call_count"] += 1
    metrics["total_time"] += execution_time
    metrics["max_time"] = max(metrics["max_time"], execution_time)
    metrics["last_call"] = datetime.now().isoformat()

    if error is not None:
        metrics["error_count"] += 1
        perf_logger.error(f"{func_name} failed after {execution_time:.3f}s: {error}")
    elif execution_time > slow_threshold:
        perf_logger.warning(f"SLOW: {func_name} took {execution_time:.3f}s (threshold: {slow_threshold}s)")
    else:
        perf_logger.debug(f"{func_name} completed in {execution_time:.3f}s")

    if start_memory is not None:
        memory_diff = _rss_mb() - start_memory
        if abs(memory_diff) > 10:
            perf_logger.info(f"{func_name} memory change: {memory_diff:+.1f}MB")


class PerformanceTracker:
    """Read and reset the metrics collected by ``monitor_performance``."""

    @staticmethod
    def get_performance_summary() -> pd.DataFrame:
        """
        Summarize metrics for every monitored function, slowest average first.

        Returns:
            pd.DataFrame: columns function_name, call_count, avg_time, max_time,
            error_rate (percent) and last_call
        """
        if not _performance_metrics:
            return pd.DataFrame()

        rows = []
        for func_name, metrics in _performance_metrics.items():
            calls = metrics["call_count"]
            rows.append(
                {
                    "function_name": func_name,
                    "call_count": calls,
                    "avg_time": round(metrics["total_time"] / calls, 4),
                    "max_time": round(metrics["max_time"], 4),
                    "error_rate": round(metrics["error_count"] / calls * 100, 1),
                    "last_call": metrics["last_call"],
                }
            )
        return pd.DataFrame(rows).sort_values("avg_time", ascending=False).reset_index(drop=True)

    @staticmethod
    def reset_metrics() -> None:
        _performance_metrics.clear()
        perf_logger.info("Performance metrics reset")


__all__ = ["monitor_performance", "PerformanceTracker"]
