"""
Catalog HTTP client
Thin facade over httpx that returns raw status codes and bodies
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)

ALLOWED_METHODS = frozenset({"GET", "POST", "PUT", "DELETE"})

_NO_JSON = object()


class TransportError(Exception):
    """Raised when a request never produced an HTTP response"""

    def __init__(self, method: str, path: str, cause: Exception):
        self.method = method
        self.path = path
        self.cause = cause
        super().__init__(f"{method} {path} failed before a response arrived: {cause}")


@dataclass
class HttpExchange:
    """One request/response pair, owned by the scenario step that issued it."""

    method: str
    path: str
    request_json: Any
    status_code: int
    body: str

    def json(self) -> Any:
        """Parse the body as JSON (raises ValueError on malformed content)."""
        return json.loads(self.body)

    @property
    def is_absent(self) -> bool:
        """True when the body is empty or the literal `null`."""
        return self.body.strip() in ("", "null")

    def describe(self) -> str:
        return f"{self.method} {self.path} -> {self.status_code}"


class CatalogHttpClient:
    """Client for issuing requests against the catalog API base URL.

    Non-2xx responses are returned like any other; deciding what a status
    means is up to the caller. There are no retries.
    """

    def __init__(self, base_url: str, timeout: float = 30.0,
                 transport: Optional[httpx.BaseTransport] = None):
        self.base_url = base_url.rstrip("/") + "/"
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            follow_redirects=False,
            transport=transport,
        )

    def execute(self, method: str, path: str, headers: Optional[Dict[str, str]] = None,
                json_body: Any = _NO_JSON) -> HttpExchange:
        """Issue exactly one request and capture the raw outcome.

        Args:
            method: GET, POST, PUT or DELETE
            path: Path relative to the base URL (e.g. "category/123")
            headers: Extra request headers
            json_body: Payload serialized as JSON; omitted when not given

        Returns:
            HttpExchange with status code and body text

        Raises:
            ValueError: For unsupported methods
            TransportError: If no response was received
        """
        method = method.upper()
        if method not in ALLOWED_METHODS:
            raise ValueError(f"Unsupported method {method}; expected one of {sorted(ALLOWED_METHODS)}")
        path = path.lstrip("/")

        kwargs: Dict[str, Any] = {"headers": headers or {}}
        if json_body is not _NO_JSON:
            kwargs["json"] = json_body

        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.TransportError as e:
            logger.error(f"Transport failure on {method} {path}: {e}")
            raise TransportError(method, path, e) from e

        exchange = HttpExchange(
            method=method,
            path=path,
            request_json=None if json_body is _NO_JSON else json_body,
            status_code=response.status_code,
            body=response.text,
        )
        logger.debug(f"{exchange.describe()} ({len(exchange.body)} bytes)")
        return exchange

    def get(self, path: str, headers: Optional[Dict[str, str]] = None) -> HttpExchange:
        return self.execute("GET", path, headers=headers)

    def post(self, path: str, json_body: Any, headers: Optional[Dict[str, str]] = None) -> HttpExchange:
        return self.execute("POST", path, headers=headers, json_body=json_body)

    def put(self, path: str, json_body: Any, headers: Optional[Dict[str, str]] = None) -> HttpExchange:
        return self.execute("PUT", path, headers=headers, json_body=json_body)

    def delete(self, path: str, headers: Optional[Dict[str, str]] = None) -> HttpExchange:
        return self.execute("DELETE", path, headers=headers)

    def close(self) -> None:
        self._client.close()

    def __enter__(self):
        """Context manager entry"""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit"""
        self.close()
