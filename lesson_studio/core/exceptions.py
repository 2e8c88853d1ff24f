import logging
from typing import Any

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from lesson_studio.ai.errors import StudioError, classify_remote_failure

logger = logging.getLogger("uvicorn.error")

_STATUS_BY_KIND: dict[str, int] = {
  "missing_credential": status.HTTP_401_UNAUTHORIZED,
  "rate_limited": status.HTTP_429_TOO_MANY_REQUESTS,
  "unverified_content": status.HTTP_409_CONFLICT,
  "asset_not_found": status.HTTP_404_NOT_FOUND,
  "invalid_asset_name": status.HTTP_400_BAD_REQUEST,
  "poll_timeout": status.HTTP_504_GATEWAY_TIMEOUT,
  "missing_media_payload": status.HTTP_502_BAD_GATEWAY,
  "video_failed": status.HTTP_502_BAD_GATEWAY,
  "remote_service_error": status.HTTP_502_BAD_GATEWAY,
}

# Remote failures get a generic message; collaborator errors may echo prompts.
_REMOTE_DETAIL = "The generative service failed to complete the request."


def _error_payload(detail: Any, *, kind: str | None = None, request_id: str | None = None) -> dict[str, Any]:
  """Build a safe error payload that avoids leaking internal details to clients."""
  payload: dict[str, Any] = {"detail": detail}
  if kind:
    payload["kind"] = kind
  # Attach a request id so support can correlate client reports to server logs.
  if request_id:
    payload["requestId"] = request_id
  return payload


def _sanitize_validation_errors(errors: Any) -> list[dict[str, Any]]:
  """Return validation errors without raw input payloads."""
  sanitized: list[dict[str, Any]] = []
  for error in errors:
    scrubbed = {key: value for key, value in error.items() if key not in {"input", "ctx", "url"}}
    sanitized.append({key: (list(value) if isinstance(value, tuple) else value) for key, value in scrubbed.items()})
  return sanitized


def status_for_kind(kind: str) -> int:
  return _STATUS_BY_KIND.get(kind, status.HTTP_500_INTERNAL_SERVER_ERROR)


async def studio_exception_handler(request: Request, exc: StudioError) -> JSONResponse:
  """Map the studio error taxonomy onto HTTP status codes."""
  request_id = getattr(request.state, "request_id", None)
  status_code = status_for_kind(exc.kind)
  if status_code >= 500:
    logger.error("Studio failure request_id=%s path=%s kind=%s error=%s", request_id, request.url.path, exc.kind, exc, exc_info=True)
  else:
    logger.warning("Studio request rejected request_id=%s path=%s kind=%s error=%s", request_id, request.url.path, exc.kind, exc)
  return JSONResponse(status_code=status_code, content=_error_payload(str(exc), kind=exc.kind, request_id=request_id))


async def remote_exception_handler(request: Request, exc: Exception) -> JSONResponse:
  """Map collaborator errors that escaped the stages, such as an exhausted retry budget."""
  request_id = getattr(request.state, "request_id", None)
  classification = classify_remote_failure(exc)
  logger.error("Remote failure request_id=%s path=%s kind=%s reason=%s", request_id, request.url.path, classification.kind, classification.reason, exc_info=True)
  return JSONResponse(status_code=status_for_kind(classification.kind), content=_error_payload(_REMOTE_DETAIL, kind=classification.kind, request_id=request_id))


def internal_error_response(request_id: str | None) -> JSONResponse:
  return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=_error_payload("Internal Server Error", request_id=request_id))


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
  """Global exception handler to catch unhandled errors."""
  request_id = getattr(request.state, "request_id", None)
  logger.error("Global exception request_id=%s path=%s error_type=%s", request_id, request.url.path, type(exc).__name__, exc_info=True)
  return internal_error_response(request_id)


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
  """Log request validation errors for debugging without leaking payloads."""
  request_id = getattr(request.state, "request_id", None)
  sanitized_errors = _sanitize_validation_errors(exc.errors())
  logger.warning("Request validation failed request_id=%s path=%s method=%s errors=%s", request_id, request.url.path, request.method, sanitized_errors)
  return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content=_error_payload(sanitized_errors, request_id=request_id))


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
  """Handle HTTPExceptions while keeping 5xx details out of responses."""
  request_id = getattr(request.state, "request_id", None)
  if exc.status_code >= 500:
    logger.error("HTTPException request_id=%s path=%s status_code=%s detail=%s", request_id, request.url.path, exc.status_code, exc.detail, exc_info=True)
    return JSONResponse(status_code=exc.status_code, content=_error_payload("Internal Server Error", request_id=request_id))

  return JSONResponse(status_code=exc.status_code, content=_error_payload(exc.detail, request_id=request_id), headers=getattr(exc, "headers", None))
