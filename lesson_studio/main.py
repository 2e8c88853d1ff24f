from __future__ import annotations

import httpx
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from google.genai import errors as genai_errors

from lesson_studio import __version__
from lesson_studio.ai.errors import StudioError
from lesson_studio.api.routes import assets, courses, pages
from lesson_studio.config import get_settings
from lesson_studio.core.exceptions import global_exception_handler, http_exception_handler, remote_exception_handler, request_validation_exception_handler, studio_exception_handler
from lesson_studio.core.lifespan import lifespan
from lesson_studio.core.middleware import RequestLoggingMiddleware

settings = get_settings()

app = FastAPI(title="Lesson Studio", version=__version__, lifespan=lifespan)

app.add_middleware(CORSMiddleware, allow_origins=list(settings.allowed_origins), allow_credentials=True, allow_methods=["GET", "POST", "OPTIONS"], allow_headers=["content-type", "x-api-key"], expose_headers=["content-length", "x-request-id"])

# Add exception handlers
app.add_exception_handler(Exception, global_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
app.add_exception_handler(StudioError, studio_exception_handler)
app.add_exception_handler(genai_errors.APIError, remote_exception_handler)
app.add_exception_handler(httpx.HTTPStatusError, remote_exception_handler)

# Add middleware
app.add_middleware(RequestLoggingMiddleware)


@app.get("/health", include_in_schema=False)
async def health_check() -> dict[str, str]:
  """Return a simple health status."""
  return {"status": "ok", "version": __version__}


app.include_router(assets.router, prefix="/assets", tags=["assets"])
app.include_router(courses.router, prefix="/v1/courses", tags=["courses"])
app.include_router(pages.router, prefix="/v1/pages", tags=["pages"])
