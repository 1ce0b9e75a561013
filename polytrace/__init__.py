"""polytrace: skeleton tracing of binary rasters into pixel polylines.

This package turns an on/off raster (scanned line art, hand-drawn strokes,
occupancy masks) into ordered polylines of integer grid coordinates that
follow the topological skeleton of the "on" regions.

Architecture layers (strict one-way dependency):
    polytrace/{tracing,fitting}/ → polytrace/utils/

Key invariants:
    - Pixel references are flat integer offsets into one BitImage buffer
    - Only the thinner mutates the grid; every other stage reads it
    - Output coordinates are (row, col) integer pairs
    - YAML-only configs validated by pydantic
"""

from .tracing.tracer import fit_polylines, fit_polylines_from_config, trace_skeleton

__version__ = "1.0.0"

__all__ = [
    'fit_polylines',
    'fit_polylines_from_config',
    'trace_skeleton',
]
