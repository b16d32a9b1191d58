"""Scenario runner - executes lifecycle scenarios and collects results.

Runs the scenarios outside of pytest (e.g. from the CLI against a staging
adapter) and reports each one as a CheckResult instead of stopping at the
first failure.
"""

from __future__ import annotations

import time
from dataclasses import asdict, dataclass, field
from typing import Any, Sequence

import httpx

from efs_harness.config import HarnessConfig
from efs_harness.errors import HarnessError
from efs_harness.observability import bind_context, get_logger, unbind_context
from efs_harness.scenarios import SCENARIO_NAMES, BookingScenarios
from efs_harness.transport.client import BookingApiClient

logger = get_logger(__name__)


@dataclass
class CheckResult:
    name: str
    passed: bool
    message: str
    duration_seconds: float = 0.0


@dataclass
class SuiteResult:
    """Aggregated result of a scenario run."""

    base_url: str
    checks: list[CheckResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(c.passed for c in self.checks)

    @property
    def failed(self) -> list[CheckResult]:
        return [c for c in self.checks if not c.passed]

    def to_dict(self) -> dict[str, Any]:
        return {
            "base_url": self.base_url,
            "passed": self.passed,
            "checks": [asdict(c) for c in self.checks],
        }


def _describe_failure(exc: BaseException) -> str:
    if isinstance(exc, HarnessError):
        return f"{exc.code}: {exc.message}"
    text = str(exc).strip()
    return f"{type(exc).__name__}: {text}" if text else type(exc).__name__


def run_scenario(scenarios: BookingScenarios, name: str) -> CheckResult:
    """Run one scenario and turn its outcome into a CheckResult.

    Assertion failures, harness errors and transport errors fail the check;
    anything else propagates.
    """
    bind_context(scenario=name)
    start = time.perf_counter()
    try:
        scenarios.run(name)
    except (AssertionError, HarnessError, httpx.HTTPError) as exc:
        elapsed = time.perf_counter() - start
        logger.warning("scenario.failed", error=_describe_failure(exc))
        return CheckResult(
            name=name,
            passed=False,
            message=_describe_failure(exc),
            duration_seconds=elapsed,
        )
    finally:
        unbind_context("scenario")

    elapsed = time.perf_counter() - start
    logger.info("scenario.passed", scenario=name, duration_seconds=round(elapsed, 3))
    return CheckResult(name=name, passed=True, message="ok", duration_seconds=elapsed)


def run_scenarios(
    config: HarnessConfig,
    names: Sequence[str] | None = None,
    *,
    http: httpx.Client | None = None,
) -> SuiteResult:
    """Run ``names`` (default: all scenarios) against the configured adapter.

    Args:
        config: Harness configuration
        names: Scenario names, see SCENARIO_NAMES
        http: Optional pre-built httpx client (e.g. a TestClient)

    Raises:
        ValueError: If a scenario name is unknown
    """
    selected = list(names) if names else list(SCENARIO_NAMES)
    unknown = [n for n in selected if n not in SCENARIO_NAMES]
    if unknown:
        raise ValueError(f"Unknown scenarios: {unknown}")

    result = SuiteResult(base_url=config.base_url)
    with BookingApiClient.from_config(config, http=http) as client:
        scenarios = BookingScenarios(client, config)
        for name in selected:
            result.checks.append(run_scenario(scenarios, name))

    logger.info(
        "scenario.run_finished",
        passed=result.passed,
        total=len(result.checks),
        failed=len(result.failed),
    )
    return result


__all__ = ["CheckResult", "SuiteResult", "run_scenario", "run_scenarios"]
