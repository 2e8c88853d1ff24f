"""Retry logic for rate-limited remote calls with exponential backoff."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from lesson_studio.ai.errors import classify_remote_failure

T = TypeVar("T")
logger = logging.getLogger(__name__)

DEFAULT_RETRIES = 3
DEFAULT_BASE_DELAY_SECONDS = 2.0

_sleep = asyncio.sleep


async def retry_with_backoff(func: Callable[[], Awaitable[T]], *, retries: int = DEFAULT_RETRIES, base_delay: float = DEFAULT_BASE_DELAY_SECONDS, operation_name: str = "remote_call") -> T:
  """
  Execute an async operation, retrying only rate-limit failures.

  Performs at most ``retries + 1`` attempts. The wait before retry ``n`` is
  ``base_delay * 2 ** (n - 1)``, so the defaults wait 2s, 4s, then 8s.
  Non-retryable errors, and the last rate-limit error once the budget is spent,
  propagate unchanged.
  """
  attempts_remaining = retries
  delay = base_delay
  attempt = 0

  while True:
    attempt += 1
    try:
      result = await func()
      if attempt > 1:
        logger.info("Remote call succeeded after retry: operation=%s, attempt=%d", operation_name, attempt)
      return result

    except Exception as exc:
      classification = classify_remote_failure(exc)

      if not classification.retryable:
        logger.error("Remote call failed with non-retryable error: operation=%s, attempt=%d, kind=%s, status=%s, reason=%s", operation_name, attempt, classification.kind, classification.status_code or "none", classification.reason)
        raise

      if attempts_remaining <= 0:
        logger.error("Remote call still rate limited after %d attempts: operation=%s - giving up", attempt, operation_name)
        raise

      logger.warning("Quota limit hit: operation=%s, retrying in %.1fs (%d attempts left)", operation_name, delay, attempts_remaining)
      await _sleep(delay)
      attempts_remaining -= 1
      delay *= 2
