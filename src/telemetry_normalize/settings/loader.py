"""Settings loading utilities for normalization.

This module loads the runtime descriptor and the PII key lists from the
built-in ``defaults.json``, optionally merged with a user-supplied JSON file.
"""

from __future__ import annotations

import copy
import json
import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass
from pathlib import Path
from typing import Any

_LOGGER = logging.getLogger(__name__)

# Maximum number of cache entries to prevent unbounded growth
_MAX_CACHE_SIZE = 20

# LRU cache for loaded settings (OrderedDict for LRU behavior)
_settings_cache: OrderedDict[str, Any] = OrderedDict()

# Guards every read and write of _settings_cache
_cache_lock = threading.Lock()

_PII_LIST_KEYS = ("request_headers", "tags", "event_fields")


def _cache_get(key: str) -> Any | None:
    """Get value from cache, moving it to end (most recently used).

    Callers must hold ``_cache_lock``.
    """
    if key in _settings_cache:
        _settings_cache.move_to_end(key)
        return _settings_cache[key]
    return None


def _cache_set(key: str, value: Any) -> None:
    """Set value in cache with LRU eviction. Callers must hold ``_cache_lock``."""
    if key in _settings_cache:
        _settings_cache.move_to_end(key)
    _settings_cache[key] = value
    while len(_settings_cache) > _MAX_CACHE_SIZE:
        evicted_key = next(iter(_settings_cache))
        _settings_cache.pop(evicted_key)
        _LOGGER.debug("Settings cache evicted: %s", evicted_key)


class SettingsLoadError(Exception):
    """Raised when settings files cannot be loaded."""


@dataclass(frozen=True)
class RuntimeContext:
    """Host runtime descriptor written to ``contexts.runtime``.

    Attributes:
        name: Runtime name (e.g., "Electron")
        version: Runtime version, or None when unknown
    """

    name: str
    version: str | None = None

    def as_context(self) -> dict[str, Any]:
        """Return the descriptor as an event context mapping."""
        return {"name": self.name, "version": self.version}


def _get_builtin_path(filename: str) -> Path:
    """Get path to a built-in settings file."""
    return Path(__file__).parent / filename


def _normalize_path(path: Path | str | None) -> str | None:
    """Normalize a path to a string for cache key consistency."""
    if path is None:
        return None
    return str(Path(path).resolve())


def load_json_file(path: Path | str) -> dict[str, Any]:
    """Load a JSON settings file with error handling.

    Args:
        path: Path to the JSON file

    Returns:
        Parsed JSON data

    Raises:
        SettingsLoadError: If file cannot be read or parsed
    """
    path_str = str(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise SettingsLoadError(f"Settings file not found: {path_str}") from e
    except PermissionError as e:
        raise SettingsLoadError(f"Permission denied reading settings file: {path_str}") from e
    except json.JSONDecodeError as e:
        raise SettingsLoadError(f"Invalid JSON in settings file {path_str}: {e}") from e

    if not isinstance(data, dict):
        raise SettingsLoadError(f"Settings file {path_str} must contain a JSON object")
    return data


def _merge_custom(builtin: dict[str, Any], custom: dict[str, Any]) -> None:
    """Merge a custom settings file into the built-in settings in-place."""
    runtime = custom.get("runtime")
    if isinstance(runtime, dict):
        for key in ("name", "version"):
            if key in runtime:
                builtin["runtime"][key] = runtime[key]

    pii = custom.get("pii")
    if isinstance(pii, dict):
        for key in _PII_LIST_KEYS:
            values = pii.get(key)
            if isinstance(values, list):
                builtin["pii"][key].extend(v for v in values if v not in builtin["pii"][key])


def load_settings(custom_path: Path | str | None = None) -> dict[str, Any]:
    """Load normalization settings.

    Args:
        custom_path: Optional path to a custom settings file to merge

    Returns:
        Dict with 'runtime' and 'pii' keys. The caller owns the returned copy.

    Raises:
        SettingsLoadError: If a settings file cannot be loaded
    """
    normalized = _normalize_path(custom_path)
    cache_key = f"settings:{normalized}"
    with _cache_lock:
        cached = _cache_get(cache_key)
        if cached is not None:
            return copy.deepcopy(cached)

    settings = load_builtin_settings()

    if custom_path:
        _merge_custom(settings, load_json_file(custom_path))
        _LOGGER.debug("Merged custom settings from %s", normalized)

    with _cache_lock:
        _cache_set(cache_key, settings)
    return copy.deepcopy(settings)


def load_builtin_settings() -> dict[str, Any]:
    """Load the built-in ``defaults.json`` without touching the cache.

    Returns:
        A fresh dict with 'runtime' and 'pii' keys

    Raises:
        SettingsLoadError: If the built-in file cannot be loaded
    """
    return load_json_file(_get_builtin_path("defaults.json"))


def runtime_context_from_settings(settings: dict[str, Any], version: str | None = None) -> RuntimeContext:
    """Build the runtime descriptor from already-loaded settings.

    Args:
        settings: Settings dict as returned by ``load_settings``
        version: Runtime version; overrides the configured version when given

    Returns:
        RuntimeContext for ``contexts.runtime``
    """
    runtime = settings.get("runtime")
    if not isinstance(runtime, dict):
        runtime = {}
    return RuntimeContext(
        name=str(runtime.get("name") or "Electron"),
        version=version if version is not None else runtime.get("version"),
    )


def load_runtime_context(
    version: str | None = None,
    custom_path: Path | str | None = None,
) -> RuntimeContext:
    """Build the runtime descriptor from settings.

    Args:
        version: Runtime version; overrides the configured version when given
        custom_path: Optional path to a custom settings file

    Returns:
        RuntimeContext for ``contexts.runtime``
    """
    return runtime_context_from_settings(load_settings(custom_path), version)


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Useful for testing or when settings files have been modified.
    """
    with _cache_lock:
        _settings_cache.clear()
