"""
test_feedback_handler.py
------------------------
Unit tests for FeedbackSubmissionHandler: parsing, validation, record
construction and response mapping.
"""
import json
import logging
import re
from datetime import datetime, timezone

import pytest

from app.integrations.store_client import StoreException
from app.pipelines.feedback import FeedbackSubmissionHandler, extract_submission, parse_body
from app.core.exceptions import InvalidJSONBodyError, MissingFieldsError
from conftest import FailingStore, run

EXPECTED_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
}
VALID_PAYLOAD = {"name": "Ann", "email": "a@x.com", "message": "Hi"}
REQUIRED_ERROR = {"error": "name, email, and message are required"}


def make_event(payload=None, raw=None):
    if raw is not None:
        return {"body": raw}
    return {"body": json.dumps(payload)}


def body_of(response):
    return json.loads(response["body"])


def test_valid_submission_is_stored(recording_store):
    handler = FeedbackSubmissionHandler(recording_store, "feedback")

    response = run(handler.handle(make_event(VALID_PAYLOAD)))

    assert response["statusCode"] == 201
    assert response["headers"] == EXPECTED_HEADERS
    data = body_of(response)
    assert data["ok"] is True
    assert data["id"]

    assert len(recording_store.calls) == 1
    table_name, item = recording_store.calls[0]
    assert table_name == "feedback"
    assert set(item) == {"id", "name", "email", "message", "createdAt"}
    assert item["id"] == data["id"]
    assert item["name"] == "Ann"
    assert item["email"] == "a@x.com"
    assert item["message"] == "Hi"
    # ISO 8601, UTC
    created = datetime.fromisoformat(item["createdAt"].replace("Z", "+00:00"))
    assert created.utcoffset().total_seconds() == 0


def test_success_body_is_compact_json(recording_store):
    handler = FeedbackSubmissionHandler(recording_store, "feedback", id_factory=lambda now: "123-abcdef")

    response = run(handler.handle(make_event(VALID_PAYLOAD)))

    assert response["body"] == '{"ok":true,"id":"123-abcdef"}'


def test_id_and_created_at_share_the_clock_reading(recording_store):
    fixed = datetime(2024, 5, 1, 10, 20, 30, 123000, tzinfo=timezone.utc)
    handler = FeedbackSubmissionHandler(recording_store, "feedback", clock=lambda: fixed)

    run(handler.handle(make_event(VALID_PAYLOAD)))

    _, item = recording_store.calls[0]
    assert item["createdAt"] == "2024-05-01T10:20:30.123Z"
    assert item["id"].startswith("1714558830123-")
    assert re.fullmatch(r"\d+-[0-9a-z]{6}", item["id"])


@pytest.mark.parametrize("missing", ["name", "email", "message"])
def test_missing_field_is_rejected(recording_store, missing):
    payload = {k: v for k, v in VALID_PAYLOAD.items() if k != missing}
    handler = FeedbackSubmissionHandler(recording_store, "feedback")

    response = run(handler.handle(make_event(payload)))

    assert response["statusCode"] == 400
    assert body_of(response) == REQUIRED_ERROR
    assert recording_store.calls == []


@pytest.mark.parametrize("field", ["name", "email", "message"])
@pytest.mark.parametrize("falsy", ["", None, 0, False])
def test_falsy_field_is_rejected(recording_store, field, falsy):
    payload = dict(VALID_PAYLOAD, **{field: falsy})
    handler = FeedbackSubmissionHandler(recording_store, "feedback")

    response = run(handler.handle(make_event(payload)))

    assert response["statusCode"] == 400
    assert body_of(response) == REQUIRED_ERROR
    assert recording_store.calls == []


@pytest.mark.parametrize("raw", [
    "{not json",
    "name=Ann&email=a@x.com",
    "{\"name\": \"Ann\"",
    "'single'",
    '{"name":"Ann","email":"a@x.com","message":NaN}',
    '{"name":"Ann","email":"a@x.com","message":Infinity}',
    '{"name":"Ann","email":"a@x.com","message":-Infinity}',
])
def test_invalid_json_is_rejected(recording_store, raw):
    handler = FeedbackSubmissionHandler(recording_store, "feedback")

    response = run(handler.handle(make_event(raw=raw)))

    assert response["statusCode"] == 400
    assert response["headers"] == EXPECTED_HEADERS
    assert body_of(response) == {"error": "Invalid JSON body"}
    assert recording_store.calls == []


@pytest.mark.parametrize("event", [{}, {"body": None}, {"body": ""}])
def test_absent_body_takes_the_required_fields_path(recording_store, event):
    handler = FeedbackSubmissionHandler(recording_store, "feedback")

    response = run(handler.handle(event))

    assert response["statusCode"] == 400
    assert body_of(response) == REQUIRED_ERROR
    assert recording_store.calls == []


@pytest.mark.parametrize("raw", ["null", "[1, 2, 3]", "\"Ann\"", "42"])
def test_non_object_json_takes_the_required_fields_path(recording_store, raw):
    handler = FeedbackSubmissionHandler(recording_store, "feedback")

    response = run(handler.handle(make_event(raw=raw)))

    assert response["statusCode"] == 400
    assert body_of(response) == REQUIRED_ERROR


def test_validation_is_shallow(recording_store):
    payload = {"name": 7, "email": "not-an-email", "message": ["x"], "extra": "ignored"}
    handler = FeedbackSubmissionHandler(recording_store, "feedback")

    response = run(handler.handle(make_event(payload)))

    assert response["statusCode"] == 201
    _, item = recording_store.calls[0]
    assert item["name"] == 7
    assert item["email"] == "not-an-email"
    assert "extra" not in item


def test_store_failure_returns_generic_500(caplog):
    store = FailingStore(StoreException("AccessDeniedException: user is not authorized"))
    handler = FeedbackSubmissionHandler(store, "feedback")

    with caplog.at_level(logging.ERROR):
        response = run(handler.handle(make_event(VALID_PAYLOAD)))

    assert response["statusCode"] == 500
    assert response["headers"] == EXPECTED_HEADERS
    assert body_of(response) == {"error": "Failed to save feedback"}
    assert "AccessDenied" not in response["body"]
    assert "AccessDeniedException" in caplog.text
    assert store.calls == 1


def test_unexpected_store_error_returns_generic_500():
    handler = FeedbackSubmissionHandler(FailingStore(RuntimeError("socket closed")), "feedback")

    response = run(handler.handle(make_event(VALID_PAYLOAD)))

    assert response["statusCode"] == 500
    assert body_of(response) == {"error": "Failed to save feedback"}


def test_repeated_submissions_create_distinct_records(recording_store):
    handler = FeedbackSubmissionHandler(recording_store, "feedback")

    first = run(handler.handle(make_event(VALID_PAYLOAD)))
    second = run(handler.handle(make_event(VALID_PAYLOAD)))

    assert body_of(first)["id"] != body_of(second)["id"]
    assert len(recording_store.calls) == 2


def test_parse_body_and_extract_submission():
    assert parse_body(None) == {}
    assert parse_body("") == {}
    assert parse_body('{"a": 1}') == {"a": 1}
    with pytest.raises(InvalidJSONBodyError):
        parse_body("{")

    assert extract_submission(VALID_PAYLOAD) == VALID_PAYLOAD
    with pytest.raises(MissingFieldsError) as exc_info:
        extract_submission({"name": "Ann"})
    assert exc_info.value.message == "name, email, and message are required"
