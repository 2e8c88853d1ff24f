"""Error taxonomy for studio stages and remote failure classification."""

from __future__ import annotations

from dataclasses import dataclass
from http import HTTPStatus

import httpx
from google.genai import errors as genai_errors

# Last-resort substrings for collaborators that only surface a message.
_RATE_LIMIT_HINTS: tuple[str, ...] = ("429", "resource_exhausted", "resource exhausted", "quota exceeded", "too many requests")


class StudioError(Exception):
  """Base class for every failure a stage reports to its caller."""

  kind = "studio_error"


class MissingCredentialError(StudioError):
  """Raised before any I/O when the session carries no API key."""

  kind = "missing_credential"


class RateLimitedError(StudioError):
  """Raised when a collaborator reports throttling outside of a retried call."""

  kind = "rate_limited"


class RemoteServiceError(StudioError):
  """Raised when the generative service fails for a reason other than throttling."""

  kind = "remote_service_error"


class MissingMediaPayloadError(StudioError):
  """Raised when a successful response carries no inline binary payload."""

  kind = "missing_media_payload"


class VideoFailedError(StudioError):
  """Raised when a finished video job exposes no result locator."""

  kind = "video_failed"


class PollTimeoutError(StudioError):
  """Raised when a video job is still pending after the configured poll budget."""

  kind = "poll_timeout"


class UnverifiedContentError(StudioError):
  """Raised by the page workflow when downstream work needs a confirmed analysis."""

  kind = "unverified_content"


class AssetNotFoundError(StudioError):
  """Raised when an asset name has no stored blob."""

  kind = "asset_not_found"


class InvalidAssetNameError(StudioError, ValueError):
  """Raised when a name could not be stored as a flat file under the asset root."""

  kind = "invalid_asset_name"


@dataclass(frozen=True)
class RemoteFailureClassification:
  """Classification result for a remote call failure."""

  retryable: bool
  kind: str
  status_code: int | None
  reason: str


def _extract_status_code(exc: BaseException) -> int | None:
  """Pull an HTTP-like status code from known collaborator exception shapes."""
  if isinstance(exc, genai_errors.APIError):
    return exc.code
  if isinstance(exc, httpx.HTTPStatusError):
    return exc.response.status_code
  for attribute in ("status_code", "code", "status"):
    value = getattr(exc, attribute, None)
    if isinstance(value, int) and not isinstance(value, bool):
      return value
  return None


def _extract_status_name(exc: BaseException) -> str | None:
  if isinstance(exc, genai_errors.APIError) and exc.status:
    return str(exc.status).upper()
  value = getattr(exc, "status", None)
  if isinstance(value, str):
    return value.upper()
  return None


def classify_remote_failure(exc: BaseException) -> RemoteFailureClassification:
  """
  Classify a remote call failure as rate-limited (retryable) or not.

  Primary signal: structured status code or status name from the collaborator.
  Fallback: message substrings, for errors that carry nothing structured.
  """
  if isinstance(exc, StudioError):
    return RemoteFailureClassification(retryable=isinstance(exc, RateLimitedError), kind=exc.kind, status_code=None, reason=f"Studio error: {type(exc).__name__}")

  status_code = _extract_status_code(exc)
  status_name = _extract_status_name(exc)

  if status_code == HTTPStatus.TOO_MANY_REQUESTS or status_name == "RESOURCE_EXHAUSTED":
    return RemoteFailureClassification(retryable=True, kind=RateLimitedError.kind, status_code=status_code, reason="Quota exhausted or throttled by the remote service")

  if status_code is not None:
    return RemoteFailureClassification(retryable=False, kind=RemoteServiceError.kind, status_code=status_code, reason=f"Remote service returned status {status_code}")

  message = str(exc).lower()
  if any(hint in message for hint in _RATE_LIMIT_HINTS):
    return RemoteFailureClassification(retryable=True, kind=RateLimitedError.kind, status_code=None, reason="Rate limit detected from error message")

  return RemoteFailureClassification(retryable=False, kind=RemoteServiceError.kind, status_code=None, reason=f"Unclassified error: {type(exc).__name__}")


def is_rate_limited(exc: BaseException) -> bool:
  """Return True when an exception indicates quota exhaustion or HTTP 429."""
  return classify_remote_failure(exc).retryable
