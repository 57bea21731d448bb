"""Harness configuration.

Configuration is resolved in this order for every option:
1. Explicit environment variable (CATALOG_API_BASE_URL, ...)
2. `.env.defaults` file (see env_defaults.py)
3. Built-in default

The result is a plain `HarnessConfig` value that gets passed into the
client, the runner and the pytest fixtures. Nothing reads the environment
after `load_config()` returns.

Suite order matters: the destination suite reads the category listing to
pick a category id and depends on seed data, so suites run exactly in the
order listed in CATALOG_SUITES (default: category, then destination).
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Mapping, Optional, Tuple
from urllib.parse import urljoin

from travel_catalog_contracts.env_defaults import get_env_default

DEFAULT_BASE_URL = "http://localhost:5000/api"
DEFAULT_EMAIL = "john.doe@example.com"
DEFAULT_PASSWORD = "password123"
DEFAULT_TIMEOUT = 30.0

# Fixed run order. Scenarios inside each suite have their own fixed order.
KNOWN_SUITES: Tuple[str, ...] = ("category", "destination")


class ConfigError(ValueError):
    """Raised when a configuration value is missing or malformed."""
    pass


@dataclass(frozen=True)
class Credentials:
    """Login credentials for the catalog API."""

    email: str
    password: str

    def __repr__(self) -> str:
        return f"Credentials(email={self.email!r}, password='***')"


@dataclass(frozen=True)
class HarnessConfig:
    """Everything the harness needs to talk to one catalog deployment."""

    base_url: str = DEFAULT_BASE_URL
    credentials: Credentials = field(
        default_factory=lambda: Credentials(DEFAULT_EMAIL, DEFAULT_PASSWORD)
    )
    timeout: float = DEFAULT_TIMEOUT
    suites: Tuple[str, ...] = KNOWN_SUITES

    def __post_init__(self) -> None:
        if not self.base_url.strip():
            raise ConfigError("base_url must not be empty")
        if not self.credentials.email or not self.credentials.password:
            raise ConfigError("credentials require a non-empty email and password")
        if self.timeout <= 0:
            raise ConfigError(f"timeout must be positive, got {self.timeout}")
        unknown = [name for name in self.suites if name not in KNOWN_SUITES]
        if unknown:
            raise ConfigError(
                f"Unknown suite(s) {', '.join(unknown)}; expected any of {', '.join(KNOWN_SUITES)}"
            )

    def url(self, path: str) -> str:
        """Return an absolute URL for the provided path."""
        return urljoin(self.base_url.rstrip("/") + "/", path.lstrip("/"))

    def with_overrides(self, **changes) -> "HarnessConfig":
        """Copy with selected fields replaced (None values are ignored)."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def _lookup(environ: Mapping[str, str], key: str) -> Optional[str]:
    value = environ.get(key)
    if value is None or not value.strip():
        value = get_env_default(key)
    if value is None or not value.strip():
        return None
    return value.strip()


def _parse_timeout(raw: Optional[str]) -> float:
    if raw is None:
        return DEFAULT_TIMEOUT
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"CATALOG_API_TIMEOUT must be a number of seconds, got {raw!r}")


def order_suites(names) -> Tuple[str, ...]:
    """Deduplicate suite names and put them into the fixed run order."""
    requested = [name.strip().lower() for name in names if name and name.strip()]
    if not requested:
        raise ConfigError("At least one suite must be selected")
    unknown = [name for name in requested if name not in KNOWN_SUITES]
    if unknown:
        raise ConfigError(
            f"Unknown suite(s) {', '.join(unknown)}; expected any of {', '.join(KNOWN_SUITES)}"
        )
    return tuple(name for name in KNOWN_SUITES if name in requested)


def load_config(environ: Optional[Mapping[str, str]] = None) -> HarnessConfig:
    """Build a `HarnessConfig` from the environment.

    Args:
        environ: Mapping to read instead of `os.environ` (tests pass a dict)

    Returns:
        Validated configuration

    Raises:
        ConfigError: If any value is malformed
    """
    if environ is None:
        environ = os.environ

    suites_raw = _lookup(environ, "CATALOG_SUITES")
    suites = order_suites(suites_raw.split(",")) if suites_raw else KNOWN_SUITES

    return HarnessConfig(
        base_url=_lookup(environ, "CATALOG_API_BASE_URL") or DEFAULT_BASE_URL,
        credentials=Credentials(
            email=_lookup(environ, "CATALOG_API_EMAIL") or DEFAULT_EMAIL,
            password=_lookup(environ, "CATALOG_API_PASSWORD") or DEFAULT_PASSWORD,
        ),
        timeout=_parse_timeout(_lookup(environ, "CATALOG_API_TIMEOUT")),
        suites=suites,
    )
