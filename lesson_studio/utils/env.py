"""Optional .env file for local runs, limited to the keys lesson studio reads."""

from __future__ import annotations

import os
from collections.abc import MutableMapping
from pathlib import Path

ENV_FILE_VAR = "LESSON_STUDIO_ENV_FILE"
SETTINGS_PREFIX = "LESSON_STUDIO_"
# Operator default credential, read without the prefix.
UNPREFIXED_KEYS = frozenset({"GEMINI_API_KEY"})


def resolve_env_path(environ: MutableMapping[str, str] | None = None) -> Path:
  """Path named by LESSON_STUDIO_ENV_FILE, otherwise .env at the project root."""
  environ = os.environ if environ is None else environ
  configured = (environ.get(ENV_FILE_VAR) or "").strip()
  if configured:
    return Path(configured).expanduser()
  return Path(__file__).resolve().parents[2] / ".env"


def is_settings_key(key: str) -> bool:
  # The file cannot point at another file.
  if key == ENV_FILE_VAR:
    return False
  return key.startswith(SETTINGS_PREFIX) or key in UNPREFIXED_KEYS


def _unquote(value: str) -> str:
  if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
    return value[1:-1]
  # Unquoted values may carry a trailing comment.
  return value.split(" #", 1)[0].rstrip()


def read_env_file(path: Path) -> dict[str, str]:
  """Parse KEY=VALUE lines, accepting `export` prefixes and quoted values. A missing file reads as empty."""
  if not path.is_file():
    return {}

  values: dict[str, str] = {}
  for raw_line in path.read_text(encoding="utf-8").splitlines():
    line = raw_line.strip()
    if not line or line.startswith("#"):
      continue
    if line.startswith("export "):
      line = line[len("export ") :].lstrip()
    key, sep, value = line.partition("=")
    key = key.strip()
    if not sep or not key:
      continue
    values[key] = _unquote(value.strip())
  return values


def load_settings_env(path: Path | None = None, *, override: bool = False, environ: MutableMapping[str, str] | None = None) -> list[str]:
  """
  Copy the settings keys of the .env file into the environment.

  Keys the settings never read are ignored so the file cannot leak unrelated
  variables into the process. Values already present win unless `override` is set.
  Returns the keys that were applied.
  """
  environ = os.environ if environ is None else environ
  path = resolve_env_path(environ) if path is None else path

  applied: list[str] = []
  for key, value in read_env_file(path).items():
    if not is_settings_key(key):
      continue
    if not override and key in environ:
      continue
    environ[key] = value
    applied.append(key)
  return applied
