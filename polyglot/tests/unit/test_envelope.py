"""Tests for realtime event envelopes and client frame parsing."""

import json

import pytest

from polyglot.realtime.envelope import MAX_FRAME_BYTES, MessageValidationError, build_event, parse_client_event


class TestBuildEvent:
    def test_envelope_fields(self):
        event = build_event("enteredChat", {"message": "a@x.com has entered the chat"}, sequence_number=7)

        assert event["event_type"] == "enteredChat"
        assert event["sequence_number"] == 7
        assert event["data"] == {"message": "a@x.com has entered the chat"}
        assert event["timestamp"].endswith("Z")

    def test_missing_data_is_empty_dict(self):
        assert build_event("ping", sequence_number=1)["data"] == {}


class TestParseClientEvent:
    def test_chat_message(self):
        event = parse_client_event(json.dumps({"event_type": "chatMessage", "data": {"text": "¡hola!"}}))

        assert event.data.text == "¡hola!"

    def test_invalid_json(self):
        with pytest.raises(MessageValidationError) as exc_info:
            parse_client_event("{not json")
        assert exc_info.value.error_type == "invalid_json"

    def test_non_object(self):
        with pytest.raises(MessageValidationError):
            parse_client_event("[1, 2, 3]")

    def test_unknown_event_type(self):
        with pytest.raises(MessageValidationError) as exc_info:
            parse_client_event(json.dumps({"event_type": "teleport", "data": {}}))
        assert exc_info.value.error_type == "unknown_event"

    def test_missing_text(self):
        with pytest.raises(MessageValidationError):
            parse_client_event(json.dumps({"event_type": "chatMessage", "data": {}}))

    def test_oversized_frame(self):
        raw = json.dumps({"event_type": "chatMessage", "data": {"text": "x" * MAX_FRAME_BYTES}})
        with pytest.raises(MessageValidationError) as exc_info:
            parse_client_event(raw)
        assert exc_info.value.error_type == "message_too_large"

    def test_binary_frame(self):
        with pytest.raises(MessageValidationError) as exc_info:
            parse_client_event(None)
        assert exc_info.value.error_type == "binary_frame"
