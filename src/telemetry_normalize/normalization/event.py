"""Crash event normalization.

Rewrites the paths an event carries (stack frames, source map debug images,
transaction name, request and feedback URLs) relative to the application base
path, replaces the runtime context, and removes the user agent and server name.
Without this, grouping would not work due to usernames in file paths.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from telemetry_normalize.normalization.paths import normalize_url_to_base
from telemetry_normalize.settings import RuntimeContext, load_builtin_settings, runtime_context_from_settings

if TYPE_CHECKING:
    from collections.abc import Iterator

_LOGGER = logging.getLogger(__name__)

# Built-in settings, loaded once at import and never mutated
_DEFAULT_SETTINGS = load_builtin_settings()
_DEFAULT_RUNTIME = runtime_context_from_settings(_DEFAULT_SETTINGS)


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _iter_exception_frames(event: dict[str, Any]) -> Iterator[dict[str, Any]]:
    """Yield every stack frame of every exception in the event."""
    for exception in _as_list(_as_dict(event.get("exception")).get("values")):
        stacktrace = _as_dict(_as_dict(exception).get("stacktrace"))
        for frame in _as_list(stacktrace.get("frames")):
            if isinstance(frame, dict):
                yield frame


def _normalize_paths(event: dict[str, Any], base_path: str) -> None:
    """Rewrite every path-carrying field of the event in-place."""
    for frame in _iter_exception_frames(event):
        if frame.get("filename"):
            frame["filename"] = normalize_url_to_base(frame["filename"], base_path)

    # Debug images must match the frames for source maps to resolve
    for image in _as_list(_as_dict(event.get("debug_meta")).get("images")):
        if isinstance(image, dict) and image.get("type") == "sourcemap" and "code_file" in image:
            image["code_file"] = normalize_url_to_base(image["code_file"], base_path)

    if event.get("transaction"):
        event["transaction"] = normalize_url_to_base(event["transaction"], base_path)

    request = _as_dict(event.get("request"))
    if request.get("url"):
        request["url"] = normalize_url_to_base(request["url"], base_path)

    feedback = _as_dict(_as_dict(event.get("contexts")).get("feedback"))
    if isinstance(feedback.get("url"), str) and feedback["url"]:
        feedback["url"] = normalize_url_to_base(feedback["url"], base_path)


def _remove_pii(event: dict[str, Any], pii: dict[str, Any]) -> None:
    """Delete user agent and machine name fields in-place."""
    # The user agent would be parsed server-side and overwrite the runtime context
    headers = _as_dict(event.get("request")).get("headers")
    if isinstance(headers, dict):
        for name in pii.get("request_headers", []):
            headers.pop(name, None)

    tags = event.get("tags")
    if isinstance(tags, dict):
        for name in pii.get("tags", []):
            tags.pop(name, None)

    for name in pii.get("event_fields", []):
        event.pop(name, None)


def normalize_event(
    event: dict[str, Any],
    base_path: str,
    *,
    runtime: RuntimeContext | None = None,
    settings: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Normalize all paths in a crash event and strip PII.

    Mutates the passed in event and nothing else: no settings are loaded or
    cached here, so distinct events can be normalized from several threads.
    Missing containers are treated as empty, fields that are not path or PII
    carriers are left alone.

    Args:
        event: Event record (parsed JSON object)
        base_path: Application base path to strip from paths
        runtime: Runtime descriptor for ``contexts.runtime``
            (default: built from ``settings``)
        settings: Settings dict from ``load_settings``, resolved once by the
            caller (default: the built-in settings)

    Returns:
        The same event object, normalized

    Example:
        >>> event = {"server_name": "alices-macbook", "transaction": "/Users/alice/app/index.html"}
        >>> normalize_event(event, "/Users/alice/app")["transaction"]
        'app:///index.html'
        >>> "server_name" in event
        False
    """
    if settings is None:
        settings = _DEFAULT_SETTINGS
        if runtime is None:
            runtime = _DEFAULT_RUNTIME
    elif runtime is None:
        runtime = runtime_context_from_settings(settings)

    _normalize_paths(event, base_path)

    contexts = event.get("contexts")
    if not isinstance(contexts, dict):
        contexts = event["contexts"] = {}
    contexts["runtime"] = runtime.as_context()

    _remove_pii(event, settings.get("pii", {}))

    _LOGGER.debug("Normalized event %s", event.get("event_id", "<no id>"))
    return event
