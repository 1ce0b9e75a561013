"""Test YAML schema validation and config loading.

Tests for polytrace.utils.validators:
    - Load the shipped tracer.v1 config
    - Defaults match the documented tracer behaviour
    - Reject out-of-range values and wrong schema versions
    - Cross-field check on the splitter heuristics
    - Error messages name the offending file

Test cases:
    - test_load_shipped_config()
    - test_defaults()
    - test_schema_alias_and_name()
    - test_wrong_schema_rejected()
    - test_out_of_range_rejected()
    - test_heuristics_cross_check()
    - test_load_missing_file()
    - test_load_invalid_file()

Run:
    pytest tests/test_schemas.py -v
"""

from pathlib import Path

import pytest
import yaml

from polytrace.utils import validators

CONFIG_PATH = Path(__file__).resolve().parent.parent / "configs" / "tracer_v1.yaml"


def test_load_shipped_config():
    cfg = validators.load_tracer_config(CONFIG_PATH)

    assert cfg.schema_version == "tracer.v1"
    assert cfg.min_section_size == 3
    assert cfg.max_recursions == 0
    assert cfg.do_thinning is True
    assert cfg.simplify_epsilon == 0.0
    assert cfg.heuristics.split_margin == 4
    assert cfg.heuristics.min_split_size == 5
    assert cfg.heuristics.junction_min_on_pixels == 5
    assert cfg.segment_fitting.n_iterations == 100
    assert cfg.segment_fitting.seed is None


def test_defaults():
    """An empty mapping validates to the shipped defaults."""
    assert validators.TracerConfigV1().model_dump() == \
        validators.load_tracer_config(CONFIG_PATH).model_dump()


def test_schema_alias_and_name():
    by_alias = validators.TracerConfigV1(**{"schema": "tracer.v1"})
    by_name = validators.TracerConfigV1(schema_version="tracer.v1")
    assert by_alias.schema_version == by_name.schema_version == "tracer.v1"


def test_wrong_schema_rejected():
    with pytest.raises(ValueError, match="tracer.v1"):
        validators.TracerConfigV1(**{"schema": "tracer.v2"})


@pytest.mark.parametrize("field,value", [
    ("min_section_size", -1),
    ("max_recursions", -3),
    ("simplify_epsilon", -0.5),
])
def test_out_of_range_rejected(field, value):
    with pytest.raises(ValueError):
        validators.TracerConfigV1(**{field: value})


def test_heuristics_cross_check():
    with pytest.raises(ValueError, match="split_margin"):
        validators.TracerHeuristics(split_margin=6, min_split_size=6)

    with pytest.raises(ValueError):
        validators.TracerHeuristics(split_margin=3)

    with pytest.raises(ValueError):
        validators.TracerHeuristics(junction_min_on_pixels=10)

    heuristics = validators.TracerHeuristics(split_margin=6, min_split_size=8)
    assert heuristics.split_margin == 6


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError, match="Tracer config not found"):
        validators.load_tracer_config(tmp_path / "missing.yaml")


def test_load_invalid_file(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text(yaml.safe_dump({"schema": "tracer.v1", "max_recursions": -1}))

    with pytest.raises(ValueError, match="validation failed") as excinfo:
        validators.load_tracer_config(path)
    assert str(path) in str(excinfo.value)


def test_load_partial_file(tmp_path):
    """Missing keys fall back to defaults, nested sections merge."""
    path = tmp_path / "partial.yaml"
    path.write_text(
        "schema: tracer.v1\n"
        "min_section_size: 8\n"
        "segment_fitting:\n"
        "  seed: 42\n"
    )

    cfg = validators.load_tracer_config(path)
    assert cfg.min_section_size == 8
    assert cfg.segment_fitting.seed == 42
    assert cfg.segment_fitting.n_iterations == 100
    assert cfg.heuristics.model_dump() == validators.TracerHeuristics().model_dump()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
