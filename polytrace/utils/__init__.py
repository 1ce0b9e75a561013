"""Cross-cutting utilities (lowest dependency layer).

This package provides shared primitives for:
    - Config validation (validators)
    - YAML loading (fs)
    - Point/line geometry and polyline simplification (geometry)
    - Unified logging (logging_config)
    - Stage timing (profiler)

No module in utils/ may import from upper layers (tracing, fitting).

Convenience imports:
    from polytrace.utils import fs, geometry, validators
    from polytrace.utils.logging_config import setup_logging, get_logger
"""

from . import fs
from . import geometry
from . import logging_config
from . import profiler
from . import validators

from .logging_config import get_logger, push_context, reset_logging, setup_logging

__all__ = [
    # Modules
    'fs',
    'geometry',
    'logging_config',
    'profiler',
    'validators',
    # Direct exports
    'setup_logging',
    'reset_logging',
    'get_logger',
    'push_context',
]
