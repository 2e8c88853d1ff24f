from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, status
from starlette.responses import Response

from lesson_studio.api.deps import get_asset_store
from lesson_studio.storage.assets import LocalAssetStore, validate_asset_name

router = APIRouter()


@router.post("/{name}", status_code=status.HTTP_201_CREATED)
async def upload_asset(name: str, request: Request, store: LocalAssetStore = Depends(get_asset_store)) -> dict[str, Any]:  # noqa: B008
  """Store the raw request body under ``name``, replacing any previous blob."""
  # Reject bad names before reading the body.
  validate_asset_name(name)
  data = await request.body()
  if not data:
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Asset body must not be empty.")
  await store.save(name, data)
  return {"name": name, "size": len(data)}


@router.get("/{name}")
async def download_asset(name: str, store: LocalAssetStore = Depends(get_asset_store)) -> Response:  # noqa: B008
  """Stream a stored blob back with a content type inferred from its name."""
  asset = await store.load(name)
  return Response(content=asset.data, media_type=asset.content_type, headers={"Cache-Control": "no-cache"})
