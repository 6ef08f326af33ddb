"""Normalization of telemetry records before they leave the process.

This module rewrites absolute paths into ``app:///``-relative paths and
removes machine-identifying fields with ZERO external dependencies (stdlib
only).

Exports:
    - normalize_url_to_base: Rewrite one path or URL relative to the base path
    - normalize_event: Normalize a crash event in-place
    - normalize_urls_in_replay_envelope: Normalize replay items of an envelope
    - normalize_profile: Normalize profile frames in-place
    - normalize_record / normalize_record_file: Dispatch by record kind
"""

from __future__ import annotations

from telemetry_normalize.normalization.envelope import (
    REPLAY_EVENT,
    REPLAY_RECORDING,
    add_item_to_envelope,
    create_envelope,
    iter_envelope_items,
    normalize_urls_in_replay_envelope,
)
from telemetry_normalize.normalization.event import normalize_event
from telemetry_normalize.normalization.paths import VIRTUAL_ROOT, decode_uri, normalize_url_to_base
from telemetry_normalize.normalization.profile import normalize_profile
from telemetry_normalize.normalization.records import (
    DEFAULT_MAX_RECORD_SIZE,
    RECORD_KINDS,
    RecordSizeError,
    RecordValidationError,
    load_record,
    normalize_record,
    normalize_record_file,
    validate_record_structure,
)

__all__ = [
    # Paths
    "normalize_url_to_base",
    "decode_uri",
    "VIRTUAL_ROOT",
    # Records
    "normalize_event",
    "normalize_urls_in_replay_envelope",
    "normalize_profile",
    "create_envelope",
    "add_item_to_envelope",
    "iter_envelope_items",
    "REPLAY_EVENT",
    "REPLAY_RECORDING",
    # Files and structure
    "normalize_record",
    "normalize_record_file",
    "load_record",
    "validate_record_structure",
    "RECORD_KINDS",
    "DEFAULT_MAX_RECORD_SIZE",
    "RecordSizeError",
    "RecordValidationError",
]
