"""Skeleton tracing of binary rasters into pixel polylines.

Modules:
    - bit_image: Flat-buffer binary grid, pixel references, regions
    - thinning: Zhang–Suen thinning, in place
    - splitting: Center-first, fewest-on-pixels split line selection
    - segments: Frame-entrance segments and junction estimation for leaves
    - merging: Endpoint-identity merging of sibling chains
    - tracer: Recursive driver and public entry points

Workflow:
    1. Raw pixels + predicate → BitImage
    2. Thin to 1-px skeleton
    3. Split recursively, fit leaves, merge on unwind
    4. Pixel references → (row, col) polylines
"""

from .bit_image import BitImage, Region
from .merging import merge_polylines
from .segments import estimate_junction, fit_segments, frame_pixels
from .splitting import Split, find_best_split, split_region
from .thinning import thin_image
from .tracer import fit_polylines, fit_polylines_from_config, trace_section, trace_skeleton

__all__ = [
    'BitImage',
    'Region',
    'Split',
    'estimate_junction',
    'find_best_split',
    'fit_polylines',
    'fit_polylines_from_config',
    'fit_segments',
    'frame_pixels',
    'merge_polylines',
    'split_region',
    'thin_image',
    'trace_section',
    'trace_skeleton',
]
