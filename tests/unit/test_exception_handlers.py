"""Unit tests for error payloads and the error-kind to HTTP status mapping."""

from __future__ import annotations

import json
from types import SimpleNamespace

import pytest

from lesson_studio.ai.errors import AssetNotFoundError, MissingCredentialError, MissingMediaPayloadError, PollTimeoutError, RateLimitedError, RemoteServiceError, UnverifiedContentError, VideoFailedError
from lesson_studio.core.exceptions import _sanitize_validation_errors, remote_exception_handler, status_for_kind, studio_exception_handler


def _request(request_id: str | None = "req-1") -> SimpleNamespace:
  return SimpleNamespace(state=SimpleNamespace(request_id=request_id), url=SimpleNamespace(path="/v1/pages/video"), method="POST")


def test_sanitize_validation_errors_removes_input_and_ctx() -> None:
  """Ensure validation errors stay JSON-serializable and redact raw request payloads."""
  errors = [{"type": "greater_than_equal", "loc": ("body", "page", "pageNumber"), "msg": "Input should be greater than or equal to 1", "input": 0, "ctx": {"ge": 1}}]
  sanitized = _sanitize_validation_errors(errors)
  assert "input" not in sanitized[0]
  assert "ctx" not in sanitized[0]
  assert sanitized[0]["loc"] == ["body", "page", "pageNumber"]


@pytest.mark.parametrize(
  ("error", "expected"),
  [
    (MissingCredentialError(), 401),
    (RateLimitedError(), 429),
    (UnverifiedContentError(), 409),
    (AssetNotFoundError(), 404),
    (PollTimeoutError(), 504),
    (MissingMediaPayloadError(), 502),
    (VideoFailedError(), 502),
    (RemoteServiceError(), 502),
  ],
)
def test_status_for_each_error_kind(error, expected) -> None:
  assert status_for_kind(error.kind) == expected


def test_unknown_kind_is_a_server_error() -> None:
  assert status_for_kind("something_else") == 500


@pytest.mark.anyio
async def test_studio_handler_payload_carries_kind_and_request_id() -> None:
  response = await studio_exception_handler(_request(), PollTimeoutError("still rendering"))

  assert response.status_code == 504
  assert json.loads(response.body) == {"detail": "still rendering", "kind": "poll_timeout", "requestId": "req-1"}


@pytest.mark.anyio
async def test_remote_handler_hides_collaborator_message() -> None:
  response = await remote_exception_handler(_request(None), RuntimeError("Too Many Requests: prompt text here"))

  body = json.loads(response.body)
  assert response.status_code == 429
  assert body["kind"] == "rate_limited"
  assert "prompt text" not in body["detail"]
  assert "requestId" not in body
