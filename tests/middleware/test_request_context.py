"""Tests for the request context middleware and log filter.

Verifies that every response gets an X-Request-ID header (generated or
echoed) and that log records emitted during a request carry the id.
"""

from __future__ import annotations

import logging
import uuid

from fastapi.testclient import TestClient

from studynotion.middleware.request_context import (
    _RequestContextFilter,
    install_request_context_filter,
    request_id_var,
    user_id_var,
)


def test_request_id_generated_when_not_provided(client: TestClient) -> None:
    resp = client.get("/health")
    req_id = resp.headers.get("x-request-id")
    assert req_id is not None
    uuid.UUID(req_id)  # raises ValueError if invalid


def test_request_id_echoed_when_provided(client: TestClient) -> None:
    custom_id = "checkout-trace-123"
    resp = client.get("/health", headers={"X-Request-ID": custom_id})
    assert resp.headers.get("x-request-id") == custom_id


def test_request_id_present_on_error_responses(client: TestClient) -> None:
    """Error envelopes (401, 404) still carry the header."""
    assert client.get("/v1/me/courses").headers.get("x-request-id") is not None
    assert client.get("/no-such-route").headers.get("x-request-id") is not None


def test_filter_copies_context_vars_onto_records() -> None:
    record = logging.LogRecord("t", logging.INFO, "t.py", 1, "m", (), None)
    rid_token = request_id_var.set("req-42")
    uid_token = user_id_var.set("user-7")
    try:
        _RequestContextFilter().filter(record)
    finally:
        request_id_var.reset(rid_token)
        user_id_var.reset(uid_token)

    assert record.request_id == "req-42"  # type: ignore[attr-defined]
    assert record.user_id == "user-7"  # type: ignore[attr-defined]


def test_filter_keeps_explicit_request_id() -> None:
    record = logging.LogRecord("t", logging.INFO, "t.py", 1, "m", (), None)
    record.request_id = "explicit"  # type: ignore[attr-defined]
    _RequestContextFilter().filter(record)
    assert record.request_id == "explicit"  # type: ignore[attr-defined]


def test_filter_defaults_outside_request() -> None:
    record = logging.LogRecord("t", logging.INFO, "t.py", 1, "m", (), None)
    _RequestContextFilter().filter(record)
    assert record.request_id == "-"  # type: ignore[attr-defined]


def test_install_filter_is_idempotent() -> None:
    install_request_context_filter()
    install_request_context_filter()
    root = logging.getLogger()
    count = sum(isinstance(f, _RequestContextFilter) for f in root.filters)
    assert count == 1
