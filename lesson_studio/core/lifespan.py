import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
  """Initialize logging and the asset directory once uvicorn starts."""
  from lesson_studio.config import get_settings
  from lesson_studio.core.logging import _initialize_logging

  settings = get_settings()
  logger = logging.getLogger("lesson_studio.core.lifespan")

  _initialize_logging(settings)
  logger.info("Startup complete - logging verified.")

  asset_dir = Path(settings.asset_dir).resolve()
  try:
    asset_dir.mkdir(parents=True, exist_ok=True)
    logger.info("Asset directory ready: %s", asset_dir)
  except OSError:
    logger.warning("Failed to create asset directory at %s; uploads will fail until it exists.", asset_dir, exc_info=True)

  if not settings.gemini_api_key:
    logger.info("No GEMINI_API_KEY configured; callers must send X-Api-Key.")

  yield
