"""Settings loading for normalization.

This module provides:
- Loading of the runtime descriptor and PII key lists from JSON
- Merging of a custom user settings file over the built-in defaults
"""

from __future__ import annotations

from telemetry_normalize.settings.loader import (
    RuntimeContext,
    SettingsLoadError,
    clear_settings_cache,
    load_builtin_settings,
    load_runtime_context,
    load_settings,
    runtime_context_from_settings,
)

__all__ = [
    "load_settings",
    "load_builtin_settings",
    "load_runtime_context",
    "runtime_context_from_settings",
    "clear_settings_cache",
    "RuntimeContext",
    "SettingsLoadError",
]
