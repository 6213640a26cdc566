"""
Scanner Reading Preprocessing Module

This module contains the reading model and the loader for scanner reports:
- Parsing of '--- scanner N ---' blocks
- Validation of malformed input before fusion
"""

from .loader import (
    ScannerReading,
    ScannerReportLoader,
    parse_scanner_report,
    readings_from_arrays,
)

__all__ = [
    "ScannerReading",
    "ScannerReportLoader",
    "parse_scanner_report",
    "readings_from_arrays",
]
