"""
Configuration management for scanner-fusion.

Provides a typed pydantic model and YAML loader with sensible defaults.
"""

from __future__ import annotations

from math import comb
from pathlib import Path
from typing import Optional, Literal, Any, Dict

from pydantic import BaseModel, Field, ValidationError, model_validator
import yaml


# -----------------------
# Typed config structures
# -----------------------


class PathsConfig(BaseModel):
    input_file: Optional[str] = Field(default=None, description="Scanner report to fuse when no CLI path is given")
    output_dir: str = Field(default="data/output")


class FusionConfig(BaseModel):
    min_overlap: int = Field(
        default=12,
        ge=2,
        description="Number of points that must coincide exactly for two readings to overlap",
    )
    min_shared_distances: Optional[int] = Field(
        default=None,
        ge=1,
        description="Shared pairwise distances required by the fingerprint gate (None = C(min_overlap, 2))",
    )
    use_fingerprint: bool = Field(
        default=True,
        description="Skip exact matching for readings whose distance fingerprints cannot overlap",
    )

    @model_validator(mode="after")
    def _check_gate_threshold(self) -> "FusionConfig":
        # A gate stricter than the pair count of a minimal overlap would drop true matches
        if self.min_shared_distances is not None and self.min_shared_distances > comb(self.min_overlap, 2):
            raise ValueError(
                f"min_shared_distances={self.min_shared_distances} exceeds "
                f"C({self.min_overlap}, 2)={comb(self.min_overlap, 2)}"
            )
        return self

    @property
    def gate_threshold(self) -> int:
        if self.min_shared_distances is None:
            return comb(self.min_overlap, 2)
        return self.min_shared_distances


class ParallelConfig(BaseModel):
    enabled: bool = Field(default=False, description="Run overlap detection of a fusion pass in worker processes")
    n_workers: Optional[int] = Field(default=None, description="Number of worker processes (None = auto-detect: cpu_count - 1)")


class VisualizationConfig(BaseModel):
    enabled: bool = Field(default=False)
    point_size: int = Field(default=3)


class LoggingConfig(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    file: Optional[str] = Field(default=None)


class AppConfig(BaseModel):
    paths: PathsConfig = Field(default_factory=PathsConfig)
    fusion: FusionConfig = Field(default_factory=FusionConfig)
    parallel: ParallelConfig = Field(default_factory=ParallelConfig)
    visualization: VisualizationConfig = Field(default_factory=VisualizationConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# -----------------------
# Loader
# -----------------------


def _project_root() -> Path:
    """
    Resolve the repository root directory.

    File is at: repo_root/src/scanner_fusion/utils/config.py
    parents sequence:
      0 -> .../src/scanner_fusion/utils
      1 -> .../src/scanner_fusion
      2 -> .../src
      3 -> repo_root
    """
    return Path(__file__).resolve().parents[3]


def load_config(path: Optional[str | Path] = None, *, allow_missing: bool = True) -> AppConfig:
    """
    Load configuration from YAML into a typed AppConfig.

    Search order when path is None:
    1) repo_root/config/default.yaml
    2) if missing and allow_missing=True: return default AppConfig()

    Args:
        path: Explicit YAML file path.
        allow_missing: If True, returns defaults when file missing; otherwise raises.

    Returns:
        AppConfig instance
    """
    cfg_path: Path
    if path is None:
        cfg_path = _project_root() / "config" / "default.yaml"
    else:
        cfg_path = Path(path)

    if not cfg_path.exists():
        if allow_missing:
            return AppConfig()
        raise FileNotFoundError(f"Config file not found: {cfg_path}")

    with cfg_path.open("r", encoding="utf-8") as f:
        raw: Dict[str, Any] = yaml.safe_load(f) or {}

    try:
        return AppConfig.model_validate(raw)
    except ValidationError as e:
        # Re-raise with context to help users fix the YAML
        raise ValueError(f"Invalid configuration in {cfg_path}: {e}") from e
