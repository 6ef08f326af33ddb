"""CLI for telemetry-normalize.

This module provides a Typer-based CLI for normalizing telemetry record
files and validating them for leftover paths.

Requires the 'cli' optional dependency: pip install telemetry-normalize[cli]
"""

from __future__ import annotations
