"""Record-level normalization and file utilities.

This module dispatches a parsed record to the matching normalizer and provides
file helpers for normalizing JSON records captured to disk (e.g., fixtures).
"""

from __future__ import annotations

import gzip
import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from telemetry_normalize.normalization.envelope import normalize_urls_in_replay_envelope
from telemetry_normalize.normalization.event import normalize_event
from telemetry_normalize.normalization.profile import normalize_profile
from telemetry_normalize.settings import load_settings

if TYPE_CHECKING:
    from telemetry_normalize.settings import RuntimeContext

_LOGGER = logging.getLogger(__name__)

RECORD_KINDS = ("event", "envelope", "profile")

# Default maximum record file size (100 MB)
DEFAULT_MAX_RECORD_SIZE = 100 * 1024 * 1024


class RecordSizeError(ValueError):
    """Raised when a record file exceeds the size limit."""

    def __init__(self, size: int, max_size: int) -> None:
        self.size = size
        self.max_size = max_size
        super().__init__(
            f"Record file size ({size:,} bytes) exceeds limit ({max_size:,} bytes). "
            f"Use max_size parameter to increase or set to None to disable."
        )


class RecordValidationError(ValueError):
    """Raised when a record's structure is invalid."""

    def __init__(self, message: str, path: str = "") -> None:
        self.path = path
        full_message = f"Invalid record structure: {message}"
        if path:
            full_message += f" (at {path})"
        super().__init__(full_message)


def _check_kind(kind: str) -> None:
    if kind not in RECORD_KINDS:
        raise ValueError(f"Unknown record kind {kind!r}, expected one of: {', '.join(RECORD_KINDS)}")


def validate_record_structure(data: Any, kind: str) -> list[str]:
    """Validate the top-level shape of a record.

    Args:
        data: Parsed record
        kind: One of RECORD_KINDS

    Returns:
        List of validation warnings (empty if valid)

    Raises:
        RecordValidationError: If the structure is fundamentally invalid
        ValueError: If kind is unknown

    Example:
        >>> validate_record_structure({"profile": {"frames": []}}, "profile")
        []
        >>> validate_record_structure([{}, []], "envelope")
        []
    """
    _check_kind(kind)
    warnings: list[str] = []

    if kind == "envelope":
        if not isinstance(data, list) or len(data) != 2:
            raise RecordValidationError("Envelope must be a [headers, items] array", "root")
        if not isinstance(data[0], dict):
            raise RecordValidationError("Envelope headers must be an object", "root[0]")
        if not isinstance(data[1], list):
            raise RecordValidationError("Envelope items must be an array", "root[1]")
        for i, item in enumerate(data[1]):
            if not isinstance(item, list) or len(item) != 2 or not isinstance(item[0], dict):
                warnings.append(f"Item {i} is not a [headers, payload] pair")
            elif "type" not in item[0]:
                warnings.append(f"Item {i} headers missing 'type'")
        return warnings

    if not isinstance(data, dict):
        raise RecordValidationError(f"{kind.capitalize()} must be an object", "root")

    if kind == "profile":
        samples = data.get("profile")
        if not isinstance(samples, dict):
            warnings.append("Missing profile object")
        elif not isinstance(samples.get("frames"), list):
            warnings.append("Missing profile.frames (recommended)")
    elif "exception" not in data and "transaction" not in data:
        warnings.append("Event has neither 'exception' nor 'transaction'")

    return warnings


def normalize_record(
    data: Any,
    kind: str,
    base_path: str,
    *,
    runtime: RuntimeContext | None = None,
    settings: dict[str, Any] | None = None,
) -> Any:
    """Normalize a parsed record of the given kind.

    Args:
        data: Parsed record
        kind: One of RECORD_KINDS
        base_path: Application base path to strip from paths
        runtime: Runtime descriptor for events (default: from settings)
        settings: Settings dict from ``load_settings`` (default: built-in)

    Returns:
        The normalized record (for envelopes possibly a new object)

    Raises:
        ValueError: If kind is unknown
    """
    _check_kind(kind)
    if kind == "event":
        return normalize_event(data, base_path, runtime=runtime, settings=settings)
    if kind == "envelope":
        return normalize_urls_in_replay_envelope(data, base_path)
    normalize_profile(data, base_path)
    return data


def load_record(path: Path | str) -> Any:
    """Load a JSON record from disk (.json or .json.gz)."""
    path = Path(path)
    if path.suffix == ".gz":
        with gzip.open(path, "rt", encoding="utf-8") as f:
            return json.load(f)
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def _default_output_path(input_str: str) -> str:
    for suffix in (".json.gz", ".json"):
        if input_str.endswith(suffix):
            return input_str[: -len(suffix)] + ".normalized.json"
    return input_str + ".normalized.json"


def normalize_record_file(
    input_path: str | Path,
    output_path: str | Path | None = None,
    *,
    kind: str,
    base_path: str,
    runtime: RuntimeContext | None = None,
    settings_path: Path | str | None = None,
    max_size: int | None = DEFAULT_MAX_RECORD_SIZE,
    validate: bool = True,
) -> str:
    """Normalize a JSON record file and write to a new file.

    Args:
        input_path: Path to input record file (.json or .json.gz)
        output_path: Path to output file (default: input with .normalized.json suffix)
        kind: One of RECORD_KINDS
        base_path: Application base path to strip from paths
        runtime: Runtime descriptor for events (default: from settings)
        settings_path: Optional path to custom settings JSON file
        max_size: Maximum file size in bytes (default: 100MB). Set to None to disable.
        validate: If True, validate record structure before processing (default: True)

    Returns:
        Path to the normalized file

    Raises:
        ValueError: If kind is unknown
        RecordSizeError: If file exceeds max_size limit
        RecordValidationError: If the structure is invalid (when validate=True)
        SettingsLoadError: If the custom settings file cannot be loaded
        FileNotFoundError: If input file doesn't exist
        json.JSONDecodeError: If file is not valid JSON

    Example:
        >>> # normalize_record_file("crash.json", kind="event", base_path="/opt/app")
        >>> # Creates crash.normalized.json
    """
    _check_kind(kind)
    input_path = Path(input_path)

    if max_size is not None:
        file_size = input_path.stat().st_size
        if file_size > max_size:
            raise RecordSizeError(file_size, max_size)

    output_str = str(output_path) if output_path is not None else _default_output_path(str(input_path))

    data = load_record(input_path)

    if validate:
        for warning in validate_record_structure(data, kind):
            _LOGGER.warning("Record validation: %s", warning)

    settings = load_settings(settings_path) if settings_path is not None else None
    normalized = normalize_record(data, kind, base_path, runtime=runtime, settings=settings)

    with open(output_str, "w", encoding="utf-8") as f:
        json.dump(normalized, f, indent=2)

    _LOGGER.info("Normalized %s written to: %s", kind, output_str)
    return output_str
