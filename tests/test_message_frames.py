"""Tests for inbound chat frame parsing."""

import json

import pytest

from backend.app.errors import ParseError, ValidationError
from backend.app.schemas.message import FrameRejection, ParsedFrame, error_frame, parse_frame


def _frame(**overrides) -> str:
    payload = {"type": "message", "channelId": 1, "userName": "al", "text": "hi"}
    payload.update(overrides)
    return json.dumps(payload)


def test_well_formed_frame_parses():
    outcome = parse_frame(_frame())

    assert isinstance(outcome, ParsedFrame)
    assert outcome.frame.channel_id == 1
    assert outcome.frame.user_name == "al"
    assert outcome.frame.text == "hi"
    assert outcome.payload == {"type": "message", "channelId": 1, "userName": "al", "text": "hi"}


def test_extra_keys_are_kept_in_payload():
    outcome = parse_frame(_frame(clientNonce="abc"))
    assert isinstance(outcome, ParsedFrame)
    assert outcome.payload["clientNonce"] == "abc"


def test_whitespace_is_not_trimmed():
    outcome = parse_frame(_frame(userName=" ", text="  "))
    assert isinstance(outcome, ParsedFrame)


def test_malformed_json_is_a_parse_error():
    outcome = parse_frame("{not json")

    assert isinstance(outcome, FrameRejection)
    assert isinstance(outcome.error, ParseError)
    assert outcome.message.startswith("Invalid JSON")


@pytest.mark.parametrize(
    "raw",
    [
        json.dumps({"type": "message", "channelId": 1, "userName": "al"}),  # missing text
        json.dumps({"channelId": 1, "userName": "al", "text": "hi"}),  # missing type
        _frame(type="typing"),
        _frame(channelId="1"),
        _frame(channelId=1.0),
        _frame(channelId=True),
        _frame(channelId=None),
        _frame(userName=5),
        _frame(text=["hi"]),
        json.dumps([1, 2, 3]),
        json.dumps("message"),
        "null",
        "42",
    ],
)
def test_wrong_shape_is_invalid_format(raw: str):
    outcome = parse_frame(raw)

    assert isinstance(outcome, FrameRejection)
    assert isinstance(outcome.error, ValidationError)
    assert outcome.message == "Invalid message format"


def test_empty_user_name_rejected():
    outcome = parse_frame(_frame(userName=""))
    assert isinstance(outcome, FrameRejection)
    assert outcome.message == "Message userName must be longer than 0 character"


def test_empty_text_rejected():
    outcome = parse_frame(_frame(text=""))
    assert isinstance(outcome, FrameRejection)
    assert outcome.message == "Message text must be longer than 0 character"


def test_error_frame_shape():
    assert error_frame("Channel not found") == {"type": "error", "message": "Channel not found"}


@pytest.mark.parametrize(
    "raw",
    [
        '{"type": "message", "channelId": 1, "userName": "a", "text": "b", "x": NaN}',
        '{"type": "message", "channelId": 1, "userName": "a", "text": "b", "x": Infinity}',
        '{"type": "message", "channelId": 1, "userName": "a", "text": "b", "x": -Infinity}',
        '{"type": "message", "channelId": 1, "userName": "a", "text": "b", "x": 1e400}',
    ],
)
def test_non_finite_numbers_are_a_parse_error(raw: str):
    """Only strict JSON is accepted, so nothing non-finite can be relayed."""
    outcome = parse_frame(raw)

    assert isinstance(outcome, FrameRejection)
    assert isinstance(outcome.error, ParseError)
    assert outcome.message.startswith("Invalid JSON")


def test_finite_floats_in_extra_keys_are_kept():
    outcome = parse_frame(_frame(score=2.5))
    assert isinstance(outcome, ParsedFrame)
    assert outcome.payload["score"] == 2.5


def test_binary_frame_with_utf8_json_parses():
    outcome = parse_frame(_frame(text="héllo").encode("utf-8"))
    assert isinstance(outcome, ParsedFrame)
    assert outcome.frame.text == "héllo"


def test_binary_frame_that_is_not_utf8_is_a_parse_error():
    outcome = parse_frame(b"\xff\xfe\x00garbage")

    assert isinstance(outcome, FrameRejection)
    assert isinstance(outcome.error, ParseError)
    assert outcome.message == "Invalid JSON: frame is not valid UTF-8"
