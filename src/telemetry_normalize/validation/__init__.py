"""Record validation utilities for leak detection.

This module provides validation for normalized telemetry records to detect
leftover local paths and PII before they are shipped or committed as
fixtures. Useful for CI/pre-commit hooks.

Exports:
    - find_path_leaks: Scan a parsed record
    - validate_record_file: Scan a record file
    - Finding: Dataclass for validation findings
"""

from __future__ import annotations

from telemetry_normalize.validation.leaks import (
    HOME_DIR_PATTERNS,
    Finding,
    check_string,
    find_path_leaks,
    truncate,
    validate_record_file,
)

__all__ = [
    "HOME_DIR_PATTERNS",
    "Finding",
    "check_string",
    "find_path_leaks",
    "truncate",
    "validate_record_file",
]
