"""Replay envelope normalization.

An envelope is the ``[headers, items]`` pair a telemetry SDK bundles for one
transmission, where every item is an ``[item_headers, payload]`` pair and the
item type lives in ``item_headers["type"]``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from telemetry_normalize.normalization.paths import normalize_url_to_base

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence

_LOGGER = logging.getLogger(__name__)

REPLAY_EVENT = "replay_event"
REPLAY_RECORDING = "replay_recording"

Envelope = list[Any]
EnvelopeItem = list[Any]


def create_envelope(headers: dict[str, Any], items: Iterable[EnvelopeItem] = ()) -> Envelope:
    """Create an envelope from headers and items."""
    return [headers, list(items)]


def add_item_to_envelope(envelope: Sequence[Any], item: EnvelopeItem) -> Envelope:
    """Return a new envelope with ``item`` appended."""
    return [envelope[0], [*envelope[1], item]]


def _item_type(item: Any) -> str | None:
    if not isinstance(item, list | tuple) or len(item) != 2:
        return None
    headers = item[0]
    if not isinstance(headers, dict):
        return None
    item_type = headers.get("type")
    return item_type if isinstance(item_type, str) else None


def iter_envelope_items(envelope: Sequence[Any]) -> Iterator[tuple[Any, str | None]]:
    """Yield ``(item, type)`` for every item in the envelope.

    Envelopes without an item list yield nothing.
    """
    if len(envelope) < 2 or not isinstance(envelope[1], list | tuple):
        return
    for item in envelope[1]:
        yield item, _item_type(item)


def _normalize_replay_event(payload: Any, base_path: str) -> None:
    """Rewrite the URLs of a replay event payload in-place."""
    if not isinstance(payload, dict):
        return

    if isinstance(payload.get("urls"), list):
        payload["urls"] = [normalize_url_to_base(url, base_path) for url in payload["urls"]]

    request = payload.get("request")
    if isinstance(request, dict) and request.get("url"):
        request["url"] = normalize_url_to_base(request["url"], base_path)


def normalize_urls_in_replay_envelope(envelope: Sequence[Any], base_path: str) -> Sequence[Any]:
    """Normalize URLs in any replay_event items found in an envelope.

    When the envelope holds a replay event, a new envelope is built that keeps
    only the replay_event and replay_recording items, in their original order.
    Any other item type is dropped from it. When there is no replay event, the
    original envelope is returned unmodified with all of its items.

    Args:
        envelope: ``[headers, items]`` envelope
        base_path: Application base path to strip from URLs

    Returns:
        New replay-only envelope, or the original envelope object

    Example:
        >>> env = [{}, [[{"type": "replay_event"}, {"urls": ["/Users/bob/app/x.html"]}]]]
        >>> normalize_urls_in_replay_envelope(env, "/Users/bob/app")[1][0][1]["urls"]
        ['app:///x.html']
    """
    if len(envelope) < 1:
        return envelope

    modified = create_envelope(envelope[0])
    is_replay = False

    for item, item_type in iter_envelope_items(envelope):
        if item_type == REPLAY_EVENT:
            is_replay = True
            _normalize_replay_event(item[1], base_path)
            modified = add_item_to_envelope(modified, item)
        elif item_type == REPLAY_RECORDING:
            modified = add_item_to_envelope(modified, item)

    if not is_replay:
        return envelope

    dropped = sum(1 for _ in iter_envelope_items(envelope)) - len(modified[1])
    if dropped:
        _LOGGER.debug("Dropped %d non-replay item(s) from replay envelope", dropped)
    return modified
