"""Suite-scoped registry of resources created by scenarios.

Scenarios publish the ids they create under a (kind, name) key; later
scenarios in the same suite consume them by name instead of searching the
server listing. A fresh context is created for every suite run.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Set, Tuple

logger = logging.getLogger(__name__)


class SuiteContext:
    """Identifiers handed from one scenario to the next within a suite."""

    def __init__(self, suite: str = ""):
        self.suite = suite
        self._ids: Dict[Tuple[str, str], str] = {}
        self._attempted: Set[Tuple[str, str]] = set()

    def mark_attempted(self, kind: str, name: str) -> None:
        """Record that a scenario of this suite sent the create for (kind, name)."""
        self._attempted.add((kind, name))

    def attempted(self, kind: str, name: str) -> bool:
        return (kind, name) in self._attempted

    def publish(self, kind: str, name: str, resource_id: str) -> None:
        if not resource_id:
            raise ValueError(f"Refusing to publish empty id for {kind} '{name}'")
        self._ids[(kind, name)] = resource_id
        logger.debug(f"[{self.suite}] published {kind} '{name}' -> {resource_id}")

    def resolve(self, kind: str, name: str) -> Optional[str]:
        return self._ids.get((kind, name))

    def withdraw(self, kind: str, name: str) -> Optional[str]:
        """Forget a published id (after the resource was deleted)."""
        return self._ids.pop((kind, name), None)

    def created(self, kind: str) -> List[Tuple[str, str]]:
        """(name, id) pairs still published for `kind`, in publish order.

        Whatever remains here at the end of a failed run was left on the
        server.
        """
        return [(name, rid) for (k, name), rid in self._ids.items() if k == kind]

    def __len__(self) -> int:
        return len(self._ids)
