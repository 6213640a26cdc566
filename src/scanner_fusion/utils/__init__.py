"""
Utility Functions Module

This module provides common utility functions used across the project.
- Logging
- Configuration loading
- Export of fusion results
"""

from .logging import setup_logger, set_package_log_level
from .config import AppConfig, load_config
from .export import export_points_to_csv, export_fusion_summary, fusion_summary

__all__ = [
    "setup_logger",
    "set_package_log_level",
    "AppConfig",
    "load_config",
    "export_points_to_csv",
    "export_fusion_summary",
    "fusion_summary",
]
