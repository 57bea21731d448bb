"""Lifecycle scenarios grouped into suites.

SUITES maps suite name to its scenarios in run order.
"""
from travel_catalog_contracts.scenarios.base import (
    LifecycleStage,
    LifecycleTracker,
    Scenario,
    ScenarioSession,
)
from travel_catalog_contracts.scenarios.category import CATEGORY_SCENARIOS
from travel_catalog_contracts.scenarios.destination import DESTINATION_SCENARIOS

SUITES = {
    "category": CATEGORY_SCENARIOS,
    "destination": DESTINATION_SCENARIOS,
}

__all__ = [
    "LifecycleStage",
    "LifecycleTracker",
    "Scenario",
    "ScenarioSession",
    "SUITES",
]
