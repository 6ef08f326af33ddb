"""Profile normalization."""

from __future__ import annotations

from typing import Any

from telemetry_normalize.normalization.paths import normalize_url_to_base


def normalize_profile(profile: dict[str, Any], base_path: str) -> None:
    """Normalize all paths in a profile's frames.

    Mutates the passed in profile. Frames without an ``abs_path`` are left
    untouched.

    Args:
        profile: Profile record with ``profile.frames``
        base_path: Application base path to strip from paths
    """
    samples = profile.get("profile")
    frames = samples.get("frames") if isinstance(samples, dict) else None
    if not isinstance(frames, list):
        return

    for frame in frames:
        if isinstance(frame, dict) and frame.get("abs_path"):
            frame["abs_path"] = normalize_url_to_base(frame["abs_path"], base_path)
