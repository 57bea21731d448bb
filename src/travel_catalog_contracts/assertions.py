"""Grouped response checks.

A `CheckGroup` evaluates every check given to it and only fails when the
group closes, so one wrong field never hides the others:

    with CheckGroup("fetch destination by id") as checks:
        checks.status_is(exchange, 200)
        body = checks.json_object(exchange)
        if body is not None:
            checks.equals(body.get("location"), "Hawaii, USA", "Destination location should match the input.")
            checks.equals(body.get("description"), expected_description, "Destination description should match the input.")

Checks that produce a value other checks depend on (`json_object`,
`json_array`) return None on failure so callers can skip the dependents.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, List, Optional, Sequence

from travel_catalog_contracts.http_client import HttpExchange
from travel_catalog_contracts.models import category_id_of

logger = logging.getLogger(__name__)

_MISSING = object()
_BODY_PREVIEW = 300


def _preview(body: str) -> str:
    return body if len(body) <= _BODY_PREVIEW else body[:_BODY_PREVIEW] + "..."


def _status_label(code: int) -> str:
    try:
        return f"{HTTPStatus(code).phrase.upper()} ({code})"
    except ValueError:
        return str(code)


@dataclass
class CheckFailure:
    """A single failed check with the values that disagreed."""

    message: str
    expected: Any = _MISSING
    actual: Any = _MISSING

    def __str__(self) -> str:
        parts = [self.message]
        if self.expected is not _MISSING:
            parts.append(f"expected {self.expected!r}")
        if self.actual is not _MISSING:
            parts.append(f"got {self.actual!r}")
        if len(parts) == 1:
            return self.message
        return f"{parts[0]}: " + ", ".join(parts[1:])


class ContractViolation(AssertionError):
    """One or more checks of a step failed."""

    def __init__(self, step: str, failures: Sequence[CheckFailure]):
        self.step = step
        self.failures: List[CheckFailure] = list(failures)
        lines = [f"{step}: {len(self.failures)} check(s) failed"]
        lines.extend(f"  - {failure}" for failure in self.failures)
        super().__init__("\n".join(lines))


class FixtureNotFoundError(ContractViolation):
    """An expected seed resource is missing from a listing."""

    def __init__(self, kind: str, name: str):
        self.kind = kind
        self.name = name
        super().__init__(
            f"find {kind} '{name}'",
            [CheckFailure(f"Expected to find {kind} '{name}'", expected=name, actual="no match in listing")],
        )


class CheckGroup:
    """Collects independent checks for one step and reports them together."""

    def __init__(self, step: str):
        self.step = step
        self.failures: List[CheckFailure] = []

    # ---- generic --------------------------------------------------------------
    def check(self, condition: bool, message: str, expected: Any = _MISSING, actual: Any = _MISSING) -> bool:
        if not condition:
            self.failures.append(CheckFailure(message, expected, actual))
        return bool(condition)

    def equals(self, actual: Any, expected: Any, message: str) -> bool:
        return self.check(actual == expected, message, expected, actual)

    def not_blank(self, value: Any, message: str) -> bool:
        return self.check(value is not None and str(value).strip() != "", message, "non-empty value", value)

    def is_array(self, value: Any, message: str) -> bool:
        return self.check(isinstance(value, list), message, "JSON array", type(value).__name__)

    def size_is(self, collection: Any, expected_size: int, message: str) -> bool:
        try:
            size = len(collection)
        except TypeError:
            return self.check(False, message, expected_size, f"unsized {type(collection).__name__}")
        return self.check(size == expected_size, message, expected_size, size)

    def greater_than(self, actual: Any, threshold: Any, message: str) -> bool:
        return self.check(actual is not None and actual > threshold, message, f"> {threshold}", actual)

    def sequence_equals(self, actual: Any, expected: Sequence[Any], message: str) -> bool:
        if not isinstance(actual, list):
            return self.check(False, message, list(expected), actual)
        if actual == list(expected):
            return True
        if sorted(map(str, actual)) == sorted(map(str, expected)):
            message = f"{message} (same elements, different order)"
        return self.check(False, message, list(expected), actual)

    def references_id(self, reference: Any, expected_id: str, message: str) -> bool:
        """Category reference (bare id or embedded object) must resolve to `expected_id`."""
        return self.check(category_id_of(reference) == expected_id, message, expected_id, reference)

    # ---- exchanges --------------------------------------------------------------
    def status_is(self, exchange: HttpExchange, expected: int = 200, message: Optional[str] = None) -> bool:
        message = message or f"Expected status code {_status_label(expected)} for {exchange.method} {exchange.path}"
        if exchange.status_code == expected:
            return True
        self.failures.append(
            CheckFailure(f"{message} [body: {_preview(exchange.body)}]", expected, exchange.status_code)
        )
        return False

    def not_empty(self, exchange: HttpExchange, message: str = "Response content should not be empty") -> bool:
        return self.check(bool(exchange.body.strip()), message, "non-empty content", exchange.body)

    def is_absent(self, exchange: HttpExchange, message: str = "Deleted resource should not be found") -> bool:
        return self.check(exchange.is_absent, message, "empty body or null", _preview(exchange.body))

    def _parse(self, exchange: HttpExchange, kind: type, message: str) -> Any:
        try:
            payload = exchange.json()
        except ValueError:
            self.failures.append(
                CheckFailure(f"{message} (content is not valid JSON)", kind.__name__, _preview(exchange.body))
            )
            return None
        if not isinstance(payload, kind):
            self.failures.append(CheckFailure(message, kind.__name__, type(payload).__name__))
            return None
        return payload

    def json_object(self, exchange: HttpExchange,
                    message: str = "Expected response content to be a JSON object") -> Optional[dict]:
        return self._parse(exchange, dict, message)

    def json_array(self, exchange: HttpExchange,
                   message: str = "Expected response content to be a JSON array") -> Optional[list]:
        return self._parse(exchange, list, message)

    # ---- outcome --------------------------------------------------------------
    @property
    def passed(self) -> bool:
        return not self.failures

    def verify(self) -> None:
        """Raise ContractViolation listing every failure collected so far."""
        if self.failures:
            for failure in self.failures:
                logger.warning(f"[{self.step}] {failure}")
            raise ContractViolation(self.step, self.failures)
        logger.debug(f"[{self.step}] all checks passed")

    def __enter__(self) -> CheckGroup:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type is None:
            self.verify()
            return False
        if isinstance(exc_val, ContractViolation) and self.failures:
            # A nested hard check failed; report it alongside the siblings.
            raise ContractViolation(self.step, self.failures + exc_val.failures) from exc_val
        for failure in self.failures:
            logger.warning(f"[{self.step}] {failure}")
        return False


def require_status(exchange: HttpExchange, expected: int, step: str, message: Optional[str] = None) -> None:
    """Single mandatory status check; raises immediately on mismatch."""
    with CheckGroup(step) as checks:
        checks.status_is(exchange, expected, message)


def find_by_name(items: Sequence[Any], name: str, kind: str) -> dict:
    """Return the first listed resource called `name`.

    Raises:
        FixtureNotFoundError: If no element of the listing has that name
    """
    for item in items:
        if isinstance(item, dict) and item.get("name") == name:
            return item
    raise FixtureNotFoundError(kind, name)
