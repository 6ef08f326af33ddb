"""Pytest configuration and fixtures for telemetry-normalize tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from telemetry_normalize.settings import clear_settings_cache

BASE_PATH = "/Users/alice/app"


@pytest.fixture(autouse=True)
def _fresh_settings_cache():
    """Isolate tests from settings cached by earlier tests."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def base_path() -> str:
    """Application base path used across tests."""
    return BASE_PATH


@pytest.fixture
def sample_event():
    """Create a sample crash event carrying local paths and PII."""

    def _create_event(base: str = BASE_PATH) -> dict:
        return {
            "event_id": "9f2c3b1a",
            "exception": {
                "values": [
                    {
                        "type": "TypeError",
                        "value": "x is undefined",
                        "stacktrace": {
                            "frames": [
                                {"filename": f"{base}/src/index.js", "lineno": 10},
                                {"function": "nativeCall"},
                                {"filename": "node:internal/process/task_queues", "lineno": 95},
                            ]
                        },
                    }
                ]
            },
            "debug_meta": {
                "images": [
                    {"type": "sourcemap", "code_file": f"{base}/src/index.js", "debug_id": "d1"},
                    {"type": "macho", "code_file": f"{base}/Frameworks/Electron Framework"},
                ]
            },
            "transaction": f"{base}/index.html",
            "request": {
                "url": f"file://{base}/index.html",
                "headers": {"User-Agent": "Mozilla/5.0 (Macintosh)", "Accept": "text/html"},
            },
            "contexts": {
                "feedback": {"url": f"{base}/feedback.html", "message": "it broke"},
                "runtime": {"name": "node", "version": "20.11.0"},
                "os": {"name": "macOS", "version": "14.5"},
            },
            "tags": {"server_name": "alices-macbook", "release": "1.0.0"},
            "server_name": "alices-macbook",
        }

    return _create_event


@pytest.fixture
def temp_record_file(tmp_path: Path):
    """Write a record to a temporary JSON file."""

    def _create_record(data, name: str = "record.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _create_record
