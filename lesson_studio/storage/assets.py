"""Local filesystem store for generated lesson media."""

from __future__ import annotations

import logging
import mimetypes
import re
from dataclasses import dataclass
from pathlib import Path

from starlette.concurrency import run_in_threadpool

from lesson_studio.ai.errors import AssetNotFoundError, InvalidAssetNameError
from lesson_studio.config import Settings

logger = logging.getLogger(__name__)

_ASSET_NAME_RE = re.compile(r"[A-Za-z0-9][A-Za-z0-9._-]{0,199}")


@dataclass(frozen=True)
class StoredAsset:
  """Blob bytes plus the content type inferred from the stored name."""

  name: str
  data: bytes
  content_type: str


def validate_asset_name(name: str) -> str:
  """Reject names that could escape the asset directory."""
  if not _ASSET_NAME_RE.fullmatch(name) or ".." in name:
    raise InvalidAssetNameError(f"Invalid asset name: {name!r}")
  return name


class LocalAssetStore:
  """Keep binary assets as flat files under one directory, keyed by name."""

  def __init__(self, root: str | Path) -> None:
    self._root = Path(root).resolve()

  @property
  def root(self) -> Path:
    return self._root

  def _path_for(self, name: str) -> Path:
    path = (self._root / validate_asset_name(name)).resolve()
    # Resolution must stay inside the root even with odd but valid names.
    if path.parent != self._root:
      raise InvalidAssetNameError(f"Invalid asset name: {name!r}")
    return path

  async def save(self, name: str, data: bytes) -> str:
    """Write bytes under ``name``, replacing any previous blob, and return the name."""
    path = self._path_for(name)

    def _write() -> None:
      self._root.mkdir(parents=True, exist_ok=True)
      path.write_bytes(data)

    await run_in_threadpool(_write)
    logger.info("Stored asset %s (%d bytes)", name, len(data))
    return name

  async def load(self, name: str) -> StoredAsset:
    """Return the stored blob or raise AssetNotFoundError."""
    path = self._path_for(name)
    try:
      data = await run_in_threadpool(path.read_bytes)
    except FileNotFoundError as exc:
      raise AssetNotFoundError(f"Asset not found: {name}") from exc
    content_type = mimetypes.guess_type(name)[0] or "application/octet-stream"
    return StoredAsset(name=name, data=data, content_type=content_type)

  async def exists(self, name: str) -> bool:
    """Return True when a blob is stored under ``name``."""
    path = self._path_for(name)
    return bool(await run_in_threadpool(path.is_file))


def build_asset_store(settings: Settings) -> LocalAssetStore:
  """Build the asset store rooted at the configured directory."""
  return LocalAssetStore(settings.asset_dir)
