"""Base-relative path normalization.

Rewrites absolute filesystem paths and file URLs that live under an
application's base path into ``app:///``-rooted paths. Stack frames, source
map references and URLs normalized this way no longer carry the local
username or install location, and keep the same shape on every machine so
crash reports group and symbolicate consistently.

This module has ZERO external dependencies (stdlib only).
"""

from __future__ import annotations

import logging
import re

_LOGGER = logging.getLogger(__name__)

VIRTUAL_ROOT = "app:///"

# Characters decodeURI leaves escaped
_URI_RESERVED = frozenset(";/?:@&=+$,#")

_ESCAPE_RUN_RE = re.compile(r"(?:%[0-9A-Fa-f]{2})+")
_MALFORMED_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_WEBPACK_RE = re.compile(r"webpack:/?")

# Upper bound on decode passes for multiply-encoded input
_MAX_DECODE_PASSES = 8


def _utf8_width(lead: int) -> int:
    """Return the byte length of a UTF-8 sequence from its lead byte."""
    if 0xC2 <= lead <= 0xDF:
        return 2
    if 0xE0 <= lead <= 0xEF:
        return 3
    if 0xF0 <= lead <= 0xF4:
        return 4
    raise ValueError(f"Invalid UTF-8 lead byte: {lead:#04x}")


def _decode_escape_run(match: re.Match[str]) -> str:
    """Decode one run of consecutive %XX escapes."""
    run = match.group(0)
    tokens = [run[i : i + 3] for i in range(0, len(run), 3)]
    out: list[str] = []
    i = 0
    while i < len(tokens):
        lead = int(tokens[i][1:], 16)
        if lead < 0x80:
            char = chr(lead)
            out.append(tokens[i] if char in _URI_RESERVED else char)
            i += 1
            continue
        width = _utf8_width(lead)
        chunk = tokens[i : i + width]
        if len(chunk) != width:
            raise ValueError("Truncated UTF-8 escape sequence")
        # UnicodeDecodeError is a ValueError
        out.append(bytes(int(token[1:], 16) for token in chunk).decode("utf-8"))
        i += width
    return "".join(out)


def decode_uri(value: str) -> str:
    """Decode percent-escapes the way a browser's ``decodeURI`` does.

    Reserved URI characters stay escaped. Malformed input is returned as-is
    instead of raising.

    Args:
        value: Possibly percent-encoded string

    Returns:
        Decoded string, or the input unchanged if it cannot be decoded

    Example:
        >>> decode_uri("/My%20Apps/main.js")
        '/My Apps/main.js'
        >>> decode_uri("a%2Fb")
        'a%2Fb'
    """
    if "%" not in value:
        return value
    if _MALFORMED_ESCAPE_RE.search(value):
        return value
    try:
        return _ESCAPE_RUN_RE.sub(_decode_escape_run, value)
    except ValueError:
        _LOGGER.debug("Leaving undecodable URI as-is: %r", value)
        return value


def _prepare(url: str) -> str:
    """Decode, convert backslashes and strip webpack markers until stable."""
    candidate = url
    for _ in range(_MAX_DECODE_PASSES):
        prepared = _WEBPACK_RE.sub("", decode_uri(candidate).replace("\\", "/"))
        if prepared == candidate:
            break
        candidate = prepared
    return candidate


def normalize_url_to_base(url: str | None, base_path: str) -> str | None:
    """Rewrite an absolute path or URL under ``base_path`` to ``app:///``.

    The input is decoded until it no longer changes (bounded), so multiply
    percent-encoded paths cannot hide the base path. Every occurrence of the
    base path (optionally preceded by ``file://`` and any number of slashes)
    is then replaced, case-insensitively. Existing ``app:///`` roots are never
    matched into. Input that does not contain the base path is returned
    unchanged, and a base path with no component other than slashes matches
    nothing, so the function is safe to apply twice.

    Args:
        url: Absolute path, file URL or free-form string; None is passed through
        base_path: Local root to strip (typically the app install directory)

    Returns:
        The base-relative string, or the input unchanged

    Example:
        >>> normalize_url_to_base("/Users/alice/app/src/index.js", "/Users/alice/app")
        'app:///src/index.js'
        >>> normalize_url_to_base("C:\\\\Users\\\\bob\\\\app\\\\main.js", "C:\\\\Users\\\\bob\\\\app")
        'app:///main.js'
        >>> normalize_url_to_base(None, "/opt/app") is None
        True
    """
    if not isinstance(url, str):
        return url
    slashed_base = (base_path or "").replace("\\", "/")
    if not slashed_base.strip("/"):
        return url

    # Group 1 swallows existing roots so the base is never matched inside one
    pattern = re.compile(
        f"({re.escape(VIRTUAL_ROOT)})|(?:file://)?/*{re.escape(slashed_base)}/*",
        re.IGNORECASE,
    )
    replaced = 0

    def _replace(match: re.Match[str]) -> str:
        nonlocal replaced
        if match.group(1):
            return match.group(1)
        replaced += 1
        return VIRTUAL_ROOT

    normalized = pattern.sub(_replace, _prepare(url))
    if not replaced:
        return url
    return normalized
