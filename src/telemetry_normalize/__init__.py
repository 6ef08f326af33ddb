"""Telemetry path normalization and PII stripping library.

This library provides tools for:
- Rewriting absolute paths in crash events, replay envelopes and profiles
  into ``app:///``-relative paths before they leave the process
- Removing machine-identifying fields (user agent, server name)
- Validating normalized records for leftover paths before sharing

Core normalization has ZERO dependencies (only stdlib).
Optional features require: typer (cli).

Example usage:
    from telemetry_normalize.normalization import normalize_event, normalize_url_to_base

    # Normalize one path
    normalize_url_to_base("/Users/alice/app/src/index.js", "/Users/alice/app")

    # Normalize a crash event in-place
    normalize_event(event, "/Users/alice/app")

    # Validate a record for leftover paths
    from telemetry_normalize.validation import validate_record_file
    findings = validate_record_file("crash.normalized.json", "/Users/alice/app")
"""

from __future__ import annotations

__version__ = "0.1.0"

# Re-export public API for convenience
from telemetry_normalize.normalization import (
    normalize_event,
    normalize_profile,
    normalize_record_file,
    normalize_url_to_base,
    normalize_urls_in_replay_envelope,
)

__all__ = [
    "__version__",
    "normalize_event",
    "normalize_profile",
    "normalize_record_file",
    "normalize_url_to_base",
    "normalize_urls_in_replay_envelope",
]
