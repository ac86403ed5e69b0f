"""
Timing utilities for the S3 Select demo.

``profile_block`` measures a block of code:
- Wall-clock time (perf_counter), also exposed in milliseconds
- Peak RSS of the process via a background sampling thread (psutil)
- CPU usage over the block (psutil)

Usage example:
    from s3select.utils.profiler import profile_block

    with profile_block("query:csv") as stats:
        run_query(...)

    print(f"Took {stats.elapsed_ms} ms, peak RSS {stats.peak_rss_bytes} bytes")
"""

from __future__ import annotations

import contextlib
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Generator, Optional

import psutil


@dataclass
class ProfileStats:
    """
    Container for profiling measurements.
    """

    label: str
    start_ts: float = field(default=0.0)
    end_ts: float = field(default=0.0)
    duration_seconds: float = field(default=0.0)
    peak_rss_bytes: Optional[int] = field(default=None)
    cpu_percent: Optional[float] = field(default=None)
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def elapsed_ms(self) -> int:
        """Whole milliseconds of wall-clock time."""
        return int(round(self.duration_seconds * 1000))


@contextlib.contextmanager
def profile_block(label: str, sample_interval_ms: int = 20) -> Generator[ProfileStats, None, None]:
    """
    Context manager timing a block of code.

    Parameters
    ----------
    label : str
        Human-friendly label for the profiled block.
    sample_interval_ms : int
        Interval between RSS samples taken by the background thread.

    The stats object is filled in when the block exits, including when it
    exits with an exception.
    """
    stats = ProfileStats(label=label)
    process = psutil.Process()
    stop_sampling = threading.Event()
    peak_rss = process.memory_info().rss

    def _sample_memory() -> None:
        nonlocal peak_rss
        while not stop_sampling.is_set():
            try:
                peak_rss = max(peak_rss, process.memory_info().rss)
            except psutil.Error:
                return
            stop_sampling.wait(timeout=sample_interval_ms / 1000.0)

    # CPU percent needs a priming call
    process.cpu_percent(interval=None)
    sampler = threading.Thread(target=_sample_memory, daemon=True)
    sampler.start()

    stats.start_ts = time.perf_counter()
    try:
        yield stats
    finally:
        stats.end_ts = time.perf_counter()
        stats.duration_seconds = stats.end_ts - stats.start_ts

        stop_sampling.set()
        sampler.join(timeout=1.0)

        # Final sample covers blocks shorter than one interval
        stats.peak_rss_bytes = max(peak_rss, process.memory_info().rss)
        stats.cpu_percent = process.cpu_percent(interval=None)


__all__ = ["ProfileStats", "profile_block"]
