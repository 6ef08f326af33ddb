"""Tests for replay envelope normalization."""

from __future__ import annotations

import copy

import pytest

from telemetry_normalize.normalization.envelope import (
    add_item_to_envelope,
    create_envelope,
    iter_envelope_items,
    normalize_urls_in_replay_envelope,
)

BASE = "/Users/bob/app"
HEADERS = {"event_id": "e1", "sent_at": "2026-10-19T10:00:00Z"}


def _item(item_type: str, payload) -> list:
    return [{"type": item_type}, payload]


class TestEnvelopeHelpers:
    """Tests for envelope construction helpers."""

    def test_create_envelope(self) -> None:
        """Test creating an envelope reuses the headers object."""
        envelope = create_envelope(HEADERS)
        assert envelope == [HEADERS, []]
        assert envelope[0] is HEADERS

    def test_add_item_returns_new_envelope(self) -> None:
        """Test adding an item leaves the original envelope alone."""
        envelope = create_envelope(HEADERS)
        item = _item("event", {})
        result = add_item_to_envelope(envelope, item)

        assert result[1] == [item]
        assert envelope[1] == []

    def test_iter_items_with_types(self) -> None:
        """Test items are yielded in order with their types."""
        items = [_item("replay_event", {}), [{}, {}], "garbage"]
        envelope = create_envelope(HEADERS, items)

        assert [t for _, t in iter_envelope_items(envelope)] == ["replay_event", None, None]

    def test_iter_items_without_item_list(self) -> None:
        """Test envelopes without an item list yield nothing."""
        assert list(iter_envelope_items([HEADERS])) == []
        assert list(iter_envelope_items([HEADERS, None])) == []


class TestReplayEnvelope:
    """Tests for normalize_urls_in_replay_envelope."""

    def test_no_replay_returns_original(self) -> None:
        """Test envelopes without replay events pass through untouched."""
        envelope = [
            HEADERS,
            [
                _item("event", {"transaction": f"{BASE}/index.html"}),
                _item("attachment", "raw bytes"),
                _item("replay_recording", {"segment_id": 0}),
            ],
        ]
        snapshot = copy.deepcopy(envelope)

        result = normalize_urls_in_replay_envelope(envelope, BASE)

        assert result is envelope
        assert result == snapshot

    def test_replay_urls_normalized_and_others_dropped(self) -> None:
        """Test replay URLs are rewritten and unrelated items dropped."""
        envelope = [
            HEADERS,
            [
                _item("replay_event", {"urls": ["/Users/bob/x.html"]}),
                _item("event", {"message": "unrelated"}),
            ],
        ]

        result = normalize_urls_in_replay_envelope(envelope, "/Users/bob")

        assert result is not envelope
        assert result[0] is HEADERS
        assert len(result[1]) == 1
        item_headers, payload = result[1][0]
        assert item_headers == {"type": "replay_event"}
        assert payload["urls"] == ["app:///x.html"]
        assert "bob" not in payload["urls"][0]

    def test_dropped_items_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test the number of dropped non-replay items is logged."""
        envelope = [
            HEADERS,
            [
                _item("client_report", {}),
                _item("replay_event", {"urls": []}),
                _item("attachment", "bytes"),
            ],
        ]

        with caplog.at_level("DEBUG", logger="telemetry_normalize.normalization.envelope"):
            result = normalize_urls_in_replay_envelope(envelope, BASE)

        assert [item[0]["type"] for item in result[1]] == ["replay_event"]
        assert "Dropped 2 non-replay item(s)" in caplog.text

    def test_recordings_kept_in_order(self) -> None:
        """Test replay_recording items survive in original order."""
        recording = _item("replay_recording", {"segment_id": 3})
        envelope = [
            HEADERS,
            [
                _item("client_report", {}),
                recording,
                _item("replay_event", {"urls": []}),
                _item("attachment", "x"),
            ],
        ]

        result = normalize_urls_in_replay_envelope(envelope, BASE)

        assert [item[0]["type"] for item in result[1]] == ["replay_recording", "replay_event"]
        assert result[1][0] is recording

    def test_request_url_normalized(self) -> None:
        """Test the replay request URL is rewritten."""
        envelope = [HEADERS, [_item("replay_event", {"request": {"url": f"file://{BASE}/index.html"}})]]

        result = normalize_urls_in_replay_envelope(envelope, BASE)

        assert result[1][0][1]["request"]["url"] == "app:///index.html"

    def test_outside_urls_unchanged(self) -> None:
        """Test URLs outside the base path are left as they are."""
        urls = ["https://example.com/", f"{BASE}/page.html", None]
        envelope = [HEADERS, [_item("replay_event", {"urls": urls})]]

        result = normalize_urls_in_replay_envelope(envelope, BASE)

        assert result[1][0][1]["urls"] == ["https://example.com/", "app:///page.html", None]

    # fmt: off
    ODD_PAYLOADS = [
        ({"urls": "/Users/bob/app/x.html"},     {"urls": "/Users/bob/app/x.html"},  "urls_not_list"),
        ({"request": None},                     {"request": None},                  "request_none"),
        ({},                                    {},                                 "empty_payload"),
        (None,                                  None,                               "payload_none"),
    ]
    # fmt: on

    @pytest.mark.parametrize(
        ("payload", "expected", "desc"),
        ODD_PAYLOADS,
        ids=[c[2] for c in ODD_PAYLOADS],
    )
    def test_odd_replay_payloads(self, payload, expected, desc: str) -> None:
        """Test replay payloads with unexpected shapes are kept as-is."""
        envelope = [HEADERS, [_item("replay_event", payload)]]

        result = normalize_urls_in_replay_envelope(envelope, BASE)

        assert result is not envelope, desc
        assert result[1][0][1] == expected, desc

    def test_malformed_envelope_returned(self) -> None:
        """Test envelopes without items come back unchanged."""
        for envelope in ([], [HEADERS], [HEADERS, "not a list"]):
            assert normalize_urls_in_replay_envelope(envelope, BASE) is envelope
