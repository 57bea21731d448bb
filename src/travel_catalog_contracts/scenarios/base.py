"""Building blocks shared by the lifecycle scenarios.

A scenario is a plain function taking a `ScenarioSession`. It raises
`ContractViolation` on the first failing check group, which ends it; the
tracker then tells where it stopped.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from travel_catalog_contracts.context import SuiteContext
from travel_catalog_contracts.http_client import HttpExchange
from travel_catalog_contracts.resources import CatalogApi

logger = logging.getLogger(__name__)


class LifecycleStage(str, Enum):
    """Stages a resource passes through, in order."""

    NOT_STARTED = "NotStarted"
    CREATED = "Created"
    LISTED = "Listed"
    FETCHED_BY_ID = "FetchedById"
    UPDATED = "Updated"
    REVERIFIED = "ReVerified"
    DELETED = "Deleted"
    CONFIRMED_ABSENT = "ConfirmedAbsent"


STAGE_ORDER = list(LifecycleStage)


class LifecycleTracker:
    """Records the last stage a resource reached.

    Stages only move forward. Scenarios that cover part of a lifecycle may
    skip stages (the update scenario starts at Updated).
    """

    def __init__(self, resource: str):
        self.resource = resource
        self.stage = LifecycleStage.NOT_STARTED
        self.resource_id: Optional[str] = None

    def advance(self, stage: LifecycleStage, resource_id: Optional[str] = None) -> None:
        if STAGE_ORDER.index(stage) <= STAGE_ORDER.index(self.stage):
            raise RuntimeError(f"{self.resource}: cannot move from {self.stage.value} to {stage.value}")
        self.stage = stage
        if resource_id:
            self.resource_id = resource_id
        label = f"{self.resource} {self.resource_id}" if self.resource_id else self.resource
        logger.info(f"{label} -> {stage.value}")

    @property
    def completed(self) -> bool:
        return self.stage is LifecycleStage.CONFIRMED_ABSENT


@dataclass
class ScenarioSession:
    """What a scenario gets to work with: API, token and suite context."""

    api: CatalogApi
    token: str
    context: SuiteContext
    tracker: Optional[LifecycleTracker] = None

    def track(self, resource: str) -> LifecycleTracker:
        self.tracker = LifecycleTracker(resource)
        return self.tracker

    def publish_created(self, kind: str, name: str, created: HttpExchange) -> Optional[str]:
        """Publish the `_id` of a create response before its status is verified.

        Marks the create as attempted even when the body carries no id.
        """
        self.context.mark_attempted(kind, name)
        try:
            body = created.json()
        except ValueError:
            return None
        resource_id = body.get("_id") if isinstance(body, dict) else None
        if not resource_id:
            return None
        self.context.publish(kind, name, str(resource_id))
        return str(resource_id)


@dataclass(frozen=True)
class Scenario:
    """A named step of a suite."""

    name: str
    run: Callable[[ScenarioSession], None]
    description: str = ""
