"""Test filesystem helpers.

Tests for polytrace.utils.fs:
    - YAML loading (mapping, empty file, missing file, malformed file)
    - ensure_dir creates parents

Test cases:
    - test_load_yaml()
    - test_load_yaml_empty()
    - test_load_yaml_missing()
    - test_load_yaml_malformed()
    - test_ensure_dir()

Run:
    pytest tests/test_fs.py -v
"""

import pytest
import yaml

from polytrace.utils import fs


def test_load_yaml(tmp_path):
    path = tmp_path / "cfg.yaml"
    path.write_text("schema: tracer.v1\nheuristics:\n  split_margin: 4\n")

    assert fs.load_yaml(path) == {"schema": "tracer.v1", "heuristics": {"split_margin": 4}}
    assert fs.load_yaml(str(path))["schema"] == "tracer.v1"


def test_load_yaml_empty(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert fs.load_yaml(path) == {}


def test_load_yaml_missing(tmp_path):
    with pytest.raises(FileNotFoundError, match="YAML file not found"):
        fs.load_yaml(tmp_path / "nope.yaml")


def test_load_yaml_malformed(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("key: [unclosed\n")

    with pytest.raises(yaml.YAMLError, match="bad.yaml"):
        fs.load_yaml(path)


def test_ensure_dir(tmp_path):
    target = tmp_path / "a" / "b" / "c"
    result = fs.ensure_dir(target)

    assert result == target
    assert target.is_dir()
    # idempotent
    assert fs.ensure_dir(str(target)) == target


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
