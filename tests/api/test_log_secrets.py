"""Assert that bearer tokens and payment signatures never appear in logs."""

from __future__ import annotations

import logging

import pytest
from fastapi.testclient import TestClient

from studynotion.models.account import Account
from tests.conftest import create_course, mint_token


def test_bearer_token_is_not_logged(
    client: TestClient, buyer: Account, caplog: pytest.LogCaptureFixture
) -> None:
    token = mint_token(str(buyer.id))
    course = create_course()

    with caplog.at_level(logging.DEBUG):
        client.post(
            "/v1/payments/capture",
            json={"courses": [str(course.id)]},
            headers={"Authorization": f"Bearer {token}"},
        )
        client.get("/v1/me/courses", headers={"Authorization": "Bearer not-a-jwt"})

    assert token not in caplog.text
    assert "not-a-jwt" not in caplog.text


def test_request_summary_line_is_logged(
    client: TestClient, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.INFO, logger="studynotion.middleware.request_context"):
        client.get("/v1/courses")

    assert any("GET /v1/courses" in r.getMessage() for r in caplog.records)
