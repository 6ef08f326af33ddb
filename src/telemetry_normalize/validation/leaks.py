"""Validate telemetry records for leftover local paths and PII.

Scans records for:
- Strings still containing the application base path
- Home directory paths (macOS, Linux, Windows) that expose a username
- User-Agent request headers
- Server (machine) names

This module has ZERO external dependencies (stdlib only).
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from telemetry_normalize.normalization.records import load_record

_LOGGER = logging.getLogger(__name__)

# Maximum recursion depth for record scanning to prevent stack overflow
_MAX_RECURSION_DEPTH = 50

# Home directory paths that embed a username
HOME_DIR_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"/Users/(?!Shared\b)[^/\\\s]+"),
    re.compile(r"/home/[^/\\\s]+"),
    re.compile(r"[A-Za-z]:[\\/]+Users[\\/]+(?!Public\b)[^/\\\s]+", re.IGNORECASE),
]


@dataclass
class Finding:
    """A potential path or PII leak.

    Attributes:
        severity: Finding severity ('error' or 'warning')
        location: Where in the record the finding was detected
        field: Name of the field containing the issue
        value: The suspicious value (truncated for display)
        reason: Human-readable explanation of why it was flagged
    """

    severity: str
    location: str
    field: str
    value: str
    reason: str


def truncate(value: str, max_len: int = 40) -> str:
    """Truncate a value for display.

    Args:
        value: Value to truncate
        max_len: Maximum length

    Returns:
        Truncated value
    """
    if len(value) <= max_len:
        return value
    return value[: max_len - 3] + "..."


def _field_name(path: str) -> str:
    return path.rsplit(".", 1)[-1] if path else "<root>"


def check_string(value: str, path: str, findings: list[Finding], base_path: str | None = None) -> None:
    """Check a single string value for leaked paths.

    Args:
        value: String to check
        path: Location of the value in the record
        findings: List to append findings to
        base_path: Application base path that must not appear
    """
    slashed = value.replace("\\", "/").lower()
    if base_path and base_path.replace("\\", "/").lower() in slashed:
        findings.append(
            Finding(
                severity="error",
                location=path or "<root>",
                field=_field_name(path),
                value=truncate(value),
                reason="Contains the application base path",
            )
        )
        return

    for pattern in HOME_DIR_PATTERNS:
        if pattern.search(value):
            findings.append(
                Finding(
                    severity="warning",
                    location=path or "<root>",
                    field=_field_name(path),
                    value=truncate(value),
                    reason="Potential home directory path with username",
                )
            )
            break


def _check_pii_keys(data: dict[str, Any], path: str, findings: list[Finding]) -> None:
    if path.endswith("headers") and "User-Agent" in data:
        findings.append(
            Finding(
                severity="error",
                location=path,
                field="User-Agent",
                value=truncate(str(data["User-Agent"])),
                reason="User-Agent header present",
            )
        )
    if "server_name" in data:
        findings.append(
            Finding(
                severity="error",
                location=path or "<root>",
                field="server_name",
                value=truncate(str(data["server_name"])),
                reason="Server name may contain the machine name",
            )
        )


def find_path_leaks(
    data: Any,
    base_path: str | None = None,
    *,
    findings: list[Finding] | None = None,
    path: str = "",
    _depth: int = 0,
) -> list[Finding]:
    """Recursively check a record for leaked paths and PII.

    Args:
        data: Parsed record (dict, list, or primitive)
        base_path: Application base path that must not appear
        findings: List to append findings to (created if None)
        path: Current path in the record structure
        _depth: Current recursion depth (internal use)

    Returns:
        List of findings (empty if clean)

    Example:
        >>> [f.reason for f in find_path_leaks({"filename": "/opt/app/x.js"}, "/opt/app")]
        ['Contains the application base path']
    """
    if findings is None:
        findings = []

    if _depth > _MAX_RECURSION_DEPTH:
        _LOGGER.warning("Max recursion depth exceeded in leak scan at %s", path)
        return findings

    if isinstance(data, dict):
        _check_pii_keys(data, path, findings)
        for key, value in data.items():
            current_path = f"{path}.{key}" if path else str(key)
            find_path_leaks(value, base_path, findings=findings, path=current_path, _depth=_depth + 1)
    elif isinstance(data, list):
        for i, item in enumerate(data):
            find_path_leaks(item, base_path, findings=findings, path=f"{path}[{i}]", _depth=_depth + 1)
    elif isinstance(data, str) and data:
        check_string(data, path, findings, base_path)

    return findings


def validate_record_file(record_path: Path | str, base_path: str | None = None) -> list[Finding]:
    """Validate a record file for leaked paths and PII.

    Args:
        record_path: Path to record file (.json or .json.gz)
        base_path: Application base path that must not appear

    Returns:
        List of findings (empty if clean)

    Example:
        >>> findings = validate_record_file("crash.normalized.json", "/opt/app")
        >>> if findings:
        ...     print(f"Found {len(findings)} issues")
    """
    return find_path_leaks(load_record(record_path), base_path)
