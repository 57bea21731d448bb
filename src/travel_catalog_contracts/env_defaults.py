"""Read harness defaults from a `.env.defaults` file.

Why this exists:
- Contract runs happen on developer machines and CI agents that point at
  different catalog deployments. A checked-in `.env.defaults` keeps the
  common target next to the code while env vars still win.

The file is looked up in the current working directory first, then at the
repository root (two levels above this package in the src layout).
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional

ENV_DEFAULTS_FILENAME = ".env.defaults"


def _candidate_paths() -> list[Path]:
    repo_root = Path(__file__).resolve().parents[2]
    return [Path.cwd() / ENV_DEFAULTS_FILENAME, repo_root / ENV_DEFAULTS_FILENAME]


def parse_env_lines(text: str) -> Dict[str, str]:
    """Parse `KEY=value` lines, ignoring blanks and `#` comments."""
    defaults: Dict[str, str] = {}
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        value = value.strip()
        if len(value) >= 2 and value[0] in ('"', "'") and value[-1] == value[0]:
            value = value[1:-1]
        defaults[key.strip()] = value
    return defaults


@lru_cache(maxsize=1)
def _load_env_defaults() -> Dict[str, str]:
    for path in _candidate_paths():
        if path.is_file():
            return parse_env_lines(path.read_text(encoding="utf-8"))
    return {}


def get_env_default(key: str) -> Optional[str]:
    return _load_env_defaults().get(key)


def clear_cache() -> None:
    """Forget the cached file contents (tests switch working directories)."""
    _load_env_defaults.cache_clear()
