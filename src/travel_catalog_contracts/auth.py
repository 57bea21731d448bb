"""
Authentication against the catalog API login endpoint.

Every suite logs in during its own setup; tokens are never cached or shared
between suites. A failed login aborts the suite since all mutating calls
need the token.
"""
import logging
from typing import Dict

from travel_catalog_contracts.config import Credentials
from travel_catalog_contracts.http_client import CatalogHttpClient

logger = logging.getLogger(__name__)

LOGIN_PATH = "user/login"


class AuthenticationError(Exception):
    """Login did not produce a usable bearer token"""

    def __init__(self, message: str, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(message)


def authenticate(client: CatalogHttpClient, credentials: Credentials) -> str:
    """Exchange credentials for a bearer token.

    Args:
        client: HTTP client bound to the catalog base URL
        credentials: Email/password pair

    Returns:
        The opaque token string

    Raises:
        ValueError: If email or password is empty
        AuthenticationError: If the login is not answered with 200 and a token
    """
    if not credentials.email or not credentials.password:
        raise ValueError("email and password must be non-empty")

    exchange = client.post(
        LOGIN_PATH,
        json_body={"email": credentials.email, "password": credentials.password},
    )

    if exchange.status_code != 200:
        logger.error(f"Login for {credentials.email} rejected with status {exchange.status_code}")
        raise AuthenticationError(
            f"Authentication failed with status code: {exchange.status_code}, "
            f"content: {exchange.body}",
            status_code=exchange.status_code,
            body=exchange.body,
        )

    try:
        payload = exchange.json()
    except ValueError:
        payload = None
    token = payload.get("token") if isinstance(payload, dict) else None
    if not isinstance(token, str) or not token:
        logger.error(f"Login for {credentials.email} returned 200 without a token")
        raise AuthenticationError(
            f"Authentication token should not be null or empty, content: {exchange.body}",
            status_code=exchange.status_code,
            body=exchange.body,
        )

    logger.info(f"Authenticated as {credentials.email}")
    return token


def bearer_headers(token: str) -> Dict[str, str]:
    """Authorization header for mutating requests."""
    return {"Authorization": f"Bearer {token}"}
