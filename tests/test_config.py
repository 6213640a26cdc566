"""
Tests for YAML configuration loading.
"""

import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).parent.parent / "src"))

from scanner_fusion.utils.config import load_config, AppConfig


def test_defaults_without_file(tmp_path):
    cfg: AppConfig = load_config(tmp_path / "missing.yaml")
    assert cfg.fusion.min_overlap == 12
    assert cfg.fusion.min_shared_distances is None
    assert cfg.fusion.gate_threshold == 66
    assert cfg.fusion.use_fingerprint is True
    assert cfg.parallel.enabled is False
    assert cfg.logging.level == "INFO"


def test_repository_default_config_matches_defaults():
    cfg = load_config(None)
    assert cfg.fusion.min_overlap == 12
    assert cfg.fusion.gate_threshold == 66


def test_missing_file_can_be_required(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.yaml", allow_missing=False)


def test_yaml_overrides(tmp_path):
    path = tmp_path / "cfg.yaml"
    path.write_text(
        "fusion:\n"
        "  min_overlap: 6\n"
        "  use_fingerprint: false\n"
        "parallel:\n"
        "  enabled: true\n"
        "  n_workers: 3\n"
        "logging:\n"
        "  level: DEBUG\n"
    )
    cfg = load_config(path)
    assert cfg.fusion.min_overlap == 6
    assert cfg.fusion.gate_threshold == 15
    assert cfg.fusion.use_fingerprint is False
    assert cfg.parallel.n_workers == 3
    assert cfg.logging.level == "DEBUG"


def test_empty_yaml_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_config(path).fusion.min_overlap == 12


@pytest.mark.parametrize(
    "body",
    [
        "fusion:\n  min_overlap: 1\n",
        "fusion:\n  min_overlap: 12\n  min_shared_distances: 70\n",
        "logging:\n  level: LOUD\n",
    ],
)
def test_invalid_values_raise_value_error(tmp_path, body):
    path = tmp_path / "bad.yaml"
    path.write_text(body)
    with pytest.raises(ValueError, match="Invalid configuration"):
        load_config(path)
