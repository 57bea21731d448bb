"""Sequential suite runner.

Suites run one after another in the configured order; scenarios inside a
suite run in declaration order. Each suite opens its own client, logs in
once, and gets a fresh SuiteContext. Nothing runs concurrently.

Outcome per scenario:
- PASSED   all check groups passed
- FAILED   a check group raised ContractViolation (includes missing seed data)
- ERROR    the transport failed (no HTTP response) or the scenario crashed
- NOT_RUN  the suite was aborted because login failed
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

import httpx

from travel_catalog_contracts.assertions import ContractViolation
from travel_catalog_contracts.auth import AuthenticationError, authenticate
from travel_catalog_contracts.config import HarnessConfig
from travel_catalog_contracts.context import SuiteContext
from travel_catalog_contracts.http_client import CatalogHttpClient, TransportError
from travel_catalog_contracts.resources import CatalogApi
from travel_catalog_contracts.scenarios import SUITES, LifecycleStage, Scenario, ScenarioSession

logger = logging.getLogger(__name__)


class ScenarioStatus(str, Enum):
    PASSED = "passed"
    FAILED = "failed"
    ERROR = "error"
    NOT_RUN = "not run"


_MARKERS = {
    ScenarioStatus.PASSED: "✅",
    ScenarioStatus.FAILED: "❌",
    ScenarioStatus.ERROR: "💥",
    ScenarioStatus.NOT_RUN: "⏭️",
}


@dataclass
class ScenarioResult:
    suite: str
    name: str
    status: ScenarioStatus
    message: str = ""
    stage: Optional[LifecycleStage] = None


@dataclass
class SuiteResult:
    name: str
    scenarios: List[ScenarioResult] = field(default_factory=list)
    aborted_reason: Optional[str] = None
    # (kind, name, id) of resources still published when the suite ended
    leftovers: List[Tuple[str, str, str]] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return self.aborted_reason is None and all(
            result.status is ScenarioStatus.PASSED for result in self.scenarios
        )


@dataclass
class RunReport:
    suites: List[SuiteResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return bool(self.suites) and all(suite.passed for suite in self.suites)

    def results(self) -> List[ScenarioResult]:
        return [result for suite in self.suites for result in suite.scenarios]

    def summary(self) -> List[str]:
        """Human-readable report, one line per scenario plus failure details."""
        lines: List[str] = []
        for suite in self.suites:
            header = f"Suite '{suite.name}'"
            if suite.aborted_reason:
                header += f" ABORTED: {suite.aborted_reason}"
            lines.append(header)
            for result in suite.scenarios:
                line = f"  {_MARKERS[result.status]} {result.name}: {result.status.value}"
                if result.stage is not None and result.status is not ScenarioStatus.PASSED:
                    line += f" (last stage: {result.stage.value})"
                lines.append(line)
                if result.message and result.status is not ScenarioStatus.PASSED:
                    lines.extend(f"      {detail}" for detail in result.message.splitlines())
            for kind, name, resource_id in suite.leftovers:
                lines.append(f"  ⚠️ left on server: {kind} '{name}' ({resource_id})")
        total = len(self.results())
        passed = sum(1 for r in self.results() if r.status is ScenarioStatus.PASSED)
        lines.append(f"{passed}/{total} scenarios passed")
        return lines


class SuiteRunner:
    """Runs the configured suites against one catalog deployment."""

    def __init__(self, config: HarnessConfig, transport: Optional[httpx.BaseTransport] = None):
        self.config = config
        self._transport = transport

    def run(self) -> RunReport:
        report = RunReport()
        for suite_name in self.config.suites:
            report.suites.append(self.run_suite(suite_name))
        logger.info(f"Run finished: {'passed' if report.passed else 'failed'}")
        return report

    def run_suite(self, suite_name: str) -> SuiteResult:
        scenarios = SUITES[suite_name]
        result = SuiteResult(name=suite_name)
        logger.info(f"Starting suite '{suite_name}' against {self.config.base_url}")

        with CatalogHttpClient(self.config.base_url, self.config.timeout, transport=self._transport) as client:
            try:
                token = authenticate(client, self.config.credentials)
            except (AuthenticationError, TransportError) as e:
                logger.error(f"Suite '{suite_name}' aborted: {e}")
                result.aborted_reason = str(e)
                result.scenarios = [
                    ScenarioResult(suite_name, scenario.name, ScenarioStatus.NOT_RUN) for scenario in scenarios
                ]
                return result

            context = SuiteContext(suite_name)
            api = CatalogApi(client)
            for scenario in scenarios:
                result.scenarios.append(self._run_scenario(suite_name, scenario, api, token, context))

        for kind in ("category", "destination"):
            result.leftovers.extend((kind, name, rid) for name, rid in context.created(kind))
        logger.info(f"Suite '{suite_name}' {'passed' if result.passed else 'failed'}")
        return result

    def _run_scenario(self, suite_name: str, scenario: Scenario, api: CatalogApi,
                      token: str, context: SuiteContext) -> ScenarioResult:
        session = ScenarioSession(api=api, token=token, context=context)
        logger.info(f"[{suite_name}] {scenario.name}: {scenario.description}")
        try:
            scenario.run(session)
        except ContractViolation as e:
            status, message = ScenarioStatus.FAILED, str(e)
        except TransportError as e:
            status, message = ScenarioStatus.ERROR, str(e)
        except Exception as e:
            logger.exception(f"[{suite_name}] {scenario.name} raised unexpectedly")
            status, message = ScenarioStatus.ERROR, f"{type(e).__name__}: {e}"
        else:
            status, message = ScenarioStatus.PASSED, ""

        stage = session.tracker.stage if session.tracker is not None else None
        if status is ScenarioStatus.PASSED:
            logger.info(f"[{suite_name}] {scenario.name} passed")
        else:
            logger.error(f"[{suite_name}] {scenario.name} {status.value}: {message}")
        return ScenarioResult(suite_name, scenario.name, status, message, stage)
