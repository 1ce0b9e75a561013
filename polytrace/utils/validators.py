"""YAML schema validation and config loading.

Provides centralized validation for tracer configuration using pydantic:
    - Tracer schema (tracer.v1.yaml): section sizes, recursion limit, thinning,
      simplification tolerance
    - Heuristic constants: split margin, minimum splittable size, junction
      early-stop score
    - Segment fitting parameters: RANSAC iterations, sampling, inlier distance,
      optional seed

All modules must use these validators to load configs for fail-fast error
detection with actionable messages (offending keys, expected ranges).

Units:
    - Sizes and distances: pixels

Usage:
    from polytrace.utils import validators

    cfg = validators.load_tracer_config("configs/tracer_v1.yaml")
    polylines = fit_polylines_from_config(data, rows, cols, is_on, cfg)
"""

from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# ============================================================================
# TRACER SCHEMA V1
# ============================================================================

class TracerHeuristics(BaseModel):
    """Empirically tuned constants of the splitter and the junction estimator."""
    split_margin: int = Field(
        4, ge=4, le=64,
        description="Rows/cols excluded from split candidates (both halves stay ≥ 3)"
    )
    min_split_size: int = Field(
        5, ge=5, le=4096,
        description="Sections with both sides below this size are fitted directly"
    )
    junction_min_on_pixels: int = Field(
        5, ge=1, le=9,
        description="3x3 on-pixel score that stops the junction search early"
    )

    @model_validator(mode='after')
    def validate_split_candidates(self) -> 'TracerHeuristics':
        """Every splittable section must yield at least one split candidate."""
        if self.split_margin >= self.min_split_size:
            raise ValueError(
                f"split_margin ({self.split_margin}) must be smaller than "
                f"min_split_size ({self.min_split_size})"
            )
        return self


class SegmentFittingParams(BaseModel):
    """RANSAC segment fitting parameters."""
    n_iterations: int = Field(100, ge=0, description="RANSAC iterations (0 is promoted to 1)")
    n_samples: int = Field(0, ge=0, description="Points sampled per estimate, 0 for all")
    max_inliers_distance: float = Field(
        0.0, ge=0.0, description="Inlier distance threshold, 0 for unconstrained"
    )
    seed: Optional[int] = Field(None, description="Seed for reproducible sampling, null for random")


class TracerConfigV1(BaseModel):
    """Skeleton tracer configuration (tracer.v1.yaml schema)."""
    model_config = ConfigDict(populate_by_name=True)

    schema_version: str = Field("tracer.v1", alias="schema", description="Schema version")
    min_section_size: int = Field(3, ge=0, description="Smallest section size (floored to 3)")
    max_recursions: int = Field(0, ge=0, description="Maximum split depth, 0 for unbounded")
    do_thinning: bool = Field(True, description="Thin the image before tracing")
    simplify_epsilon: float = Field(
        0.0, ge=0.0, description="RDP tolerance applied to output polylines, 0 disables"
    )
    heuristics: TracerHeuristics = Field(default_factory=TracerHeuristics)
    segment_fitting: SegmentFittingParams = Field(default_factory=SegmentFittingParams)

    @field_validator('schema_version')
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != "tracer.v1":
            raise ValueError(f"Expected schema 'tracer.v1', got '{v}'")
        return v


# ============================================================================
# PUBLIC API
# ============================================================================

def load_tracer_config(path: Union[str, Path]) -> TracerConfigV1:
    """Load and validate tracer config from YAML.

    Parameters
    ----------
    path : Union[str, Path]
        Path to tracer.v1 YAML file

    Returns
    -------
    TracerConfigV1
        Validated tracer configuration

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    ValueError
        If validation fails (with actionable error message)
    """
    from . import fs

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Tracer config not found: {path}")

    data = fs.load_yaml(path)
    try:
        return TracerConfigV1(**data)
    except Exception as e:
        raise ValueError(f"Tracer config validation failed at {path}: {e}") from e
