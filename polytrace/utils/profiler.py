"""Lightweight wall-clock timers for tracing stages.

Provides:
    - timer(): Context manager for wall-clock timing with optional sink
    - log_sink(): Sink factory that reports timings through a logger

Used to measure:
    - Zhang–Suen thinning
    - Recursive skeleton tracing
    - Polyline simplification

No heavy dependencies (no line_profiler, no cProfile overhead).
"""

import logging
import time
from contextlib import contextmanager
from typing import Callable, Optional


@contextmanager
def timer(name: str, sink: Optional[Callable[[str, float], None]] = None):
    """Context manager for wall-clock timing.

    Parameters
    ----------
    name : str
        Timer name (for logging/display)
    sink : Optional[Callable[[str, float], None]]
        Optional callback(name, elapsed_seconds)
        If None, prints to stdout

    Yields
    ------
    None

    Examples
    --------
    >>> with timer("thinning"):
    ...     thin_image(image)
    thinning: 0.012 s

    >>> with timer("trace", sink=log_sink(logger)):
    ...     chains = trace_section(image, region, 0, params)
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed = time.perf_counter() - start
        if sink is not None:
            sink(name, elapsed)
        else:
            print(f"{name}: {elapsed:.3f} s")


def log_sink(
    logger: logging.Logger,
    level: int = logging.DEBUG
) -> Callable[[str, float], None]:
    """Build a timer sink that writes "<name>: <seconds> s" to a logger.

    Parameters
    ----------
    logger : logging.Logger
        Destination logger
    level : int
        Log level, default DEBUG

    Returns
    -------
    Callable[[str, float], None]
        Sink usable with timer()
    """
    def _sink(name: str, elapsed: float) -> None:
        logger.log(level, "%s: %.3f s", name, elapsed)

    return _sink
