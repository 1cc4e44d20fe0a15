"""
homebuilder_services.analytics_orchestrator -- One analytics computation per call.

Responsibility:
    Load a project snapshot, run the five metric extractors, the risk
    analyzer and the completion predictor, assemble an ``AnalyticsSnapshot``
    and write it back to the metrics store.

Architecture position:
    Services -- the only layer that reads the clock, applies timeouts and
    talks to the loader and writer.  Engines receive ``now`` and config
    values as plain parameters.

Invariants enforced:
    - ``generated_at`` and every engine's ``now`` are the same clock reading.
    - An extractor or analyzer failure writes nothing.
    - A write failure never reaches the caller; the computed snapshot is
      still returned and the outcome is logged as a ``PersistenceOutcome``.
    - ``state`` is COMPUTING while at least one computation is in flight.

Failure modes:
    - ProjectNotFoundError: propagated unchanged from the loader.
    - SnapshotLoadError: the load timed out or failed unexpectedly.
    - ComputationError: an extractor or analyzer raised; chained to the
      original exception.
    - PersistenceError: logged with exc_info and swallowed.

Usage:
    orchestrator = AnalyticsOrchestrator(
        loader=SqlProjectSnapshotLoader(),
        writer=ProjectMetricsStore(),
        clock=SystemClock(),
    )
    snapshot = orchestrator.compute_analytics(project_id)
"""

from __future__ import annotations

import contextvars
import threading
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import asdict, dataclass
from datetime import datetime
from enum import Enum
from typing import Any, TypeVar
from uuid import uuid4

from homebuilder_config import AnalyticsConfig, get_active_config
from homebuilder_engines.budget import extract_budget_metrics
from homebuilder_engines.prediction import predict_completion
from homebuilder_engines.quality import extract_quality_metrics
from homebuilder_engines.risk import RiskWeights, analyze_risk
from homebuilder_engines.team import extract_team_metrics
from homebuilder_engines.timeline import extract_timeline_metrics
from homebuilder_engines.vendor import extract_vendor_metrics
from homebuilder_kernel.domain.clock import Clock, SystemClock
from homebuilder_kernel.domain.metrics import AnalyticsSnapshot
from homebuilder_kernel.domain.snapshot import ProjectSnapshot
from homebuilder_kernel.exceptions import (
    ComputationError,
    HomebuilderError,
    PersistenceError,
    SnapshotLoadError,
)
from homebuilder_kernel.logging_config import LogContext, get_logger
from homebuilder_services.protocols import AnalyticsSnapshotWriter, ProjectSnapshotLoader

logger = get_logger("services.analytics_orchestrator")

T = TypeVar("T")


class OrchestratorState(str, Enum):
    IDLE = "IDLE"
    COMPUTING = "COMPUTING"


@dataclass(frozen=True)
class PersistenceOutcome:
    """Result of the best-effort write.  Logged only; callers never see it."""

    project_id: str
    succeeded: bool
    duration_ms: float
    error_code: str | None = None
    reason: str | None = None


def call_with_timeout(fn: Callable[..., T], timeout: float | None, *args: Any) -> T:
    """Run ``fn(*args)`` and wait at most ``timeout`` seconds for it.

    With ``timeout=None`` the call runs inline.  Otherwise it runs on a
    worker thread carrying the caller's log context; on timeout the worker
    is abandoned and ``concurrent.futures.TimeoutError`` is raised.
    """
    if timeout is None:
        return fn(*args)
    ctx = contextvars.copy_context()
    pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="analytics-io")
    try:
        return pool.submit(ctx.run, fn, *args).result(timeout=timeout)
    finally:
        pool.shutdown(wait=False)


class AnalyticsOrchestrator:
    """Computes and stores the analytics snapshot of a project.

    Contract:
        Receives the loader, the writer, an optional Clock and an optional
        ``AnalyticsConfig`` (defaults to ``get_active_config()``).  Holds no
        per-project state between calls.
    """

    def __init__(
        self,
        loader: ProjectSnapshotLoader,
        writer: AnalyticsSnapshotWriter,
        clock: Clock | None = None,
        config: AnalyticsConfig | None = None,
    ) -> None:
        self._loader = loader
        self._writer = writer
        self._clock = clock or SystemClock()
        self._config = config or get_active_config()
        self._risk_weights = RiskWeights(**asdict(self._config.risk_weights))
        self._lock = threading.Lock()
        self._in_flight = 0

    @property
    def state(self) -> OrchestratorState:
        with self._lock:
            return OrchestratorState.COMPUTING if self._in_flight else OrchestratorState.IDLE

    @property
    def config(self) -> AnalyticsConfig:
        return self._config

    def compute_analytics(self, project_id: str) -> AnalyticsSnapshot:
        """Compute, store and return the analytics snapshot for ``project_id``.

        Raises:
            ProjectNotFoundError: The project does not exist.
            SnapshotLoadError: The snapshot could not be loaded in time.
            ComputationError: An extractor or analyzer failed.
        """
        with LogContext.bind(project_id=project_id, computation_id=str(uuid4())):
            with self._lock:
                self._in_flight += 1
            logger.info("analytics_computation_started")
            t0 = time.monotonic()
            try:
                project = self._load(project_id)
                now = self._clock.now()
                snapshot = self._compute(project, now)
                self._persist(project_id, snapshot)
            except Exception:
                logger.error(
                    "analytics_computation_failed",
                    extra={"duration_ms": round((time.monotonic() - t0) * 1000, 2)},
                    exc_info=True,
                )
                raise
            finally:
                with self._lock:
                    self._in_flight -= 1

            logger.info(
                "analytics_computation_completed",
                extra={
                    "duration_ms": round((time.monotonic() - t0) * 1000, 2),
                    "overall_risk_score": snapshot.risks.overall_risk_score,
                },
            )
            return snapshot

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def _load(self, project_id: str) -> ProjectSnapshot:
        timeout = self._config.io.load_timeout_seconds
        try:
            return call_with_timeout(self._loader.load_project_snapshot, timeout, project_id)
        except HomebuilderError:
            raise
        except FutureTimeoutError as exc:
            raise SnapshotLoadError(project_id, f"timed out after {timeout}s") from exc
        except Exception as exc:
            raise SnapshotLoadError(project_id, str(exc)) from exc

    def _compute(self, project: ProjectSnapshot, now: datetime) -> AnalyticsSnapshot:
        timeline, budget, quality, team, vendors = self._run_extractors(project, now)
        placeholders = self._config.placeholders

        risks = self._run_stage(
            project.project_id, "risk",
            analyze_risk,
            timeline, budget, quality, team, vendors,
            self._risk_weights,
            placeholders.weather_risk,
            placeholders.supply_chain_risk,
        )
        predictions = self._run_stage(
            project.project_id, "prediction",
            predict_completion,
            timeline, budget, quality, risks, now,
            placeholders.weather_delay_risk,
        )

        return AnalyticsSnapshot(
            project_id=project.project_id,
            generated_at=now,
            timeline=timeline,
            budget=budget,
            quality=quality,
            team=team,
            vendors=vendors,
            risks=risks,
            predictions=predictions,
        )

    def _extractor_calls(
        self, project: ProjectSnapshot, now: datetime,
    ) -> list[tuple[str, Callable[..., Any], tuple[Any, ...]]]:
        capacity = self._config.capacity
        placeholders = self._config.placeholders
        return [
            ("timeline", extract_timeline_metrics, (project, now)),
            ("budget", extract_budget_metrics, (project, now, self._config.forecast.contingency_factor)),
            ("quality", extract_quality_metrics, (project, capacity.default_floor_area)),
            ("team", extract_team_metrics, (
                project,
                capacity.hours_per_week,
                capacity.weeks_in_period,
                placeholders.communication_efficiency,
            )),
            ("vendors", extract_vendor_metrics, (
                project,
                placeholders.vendor_on_time_delivery_rate,
                placeholders.vendor_quality_score,
                placeholders.vendor_cost_efficiency,
            )),
        ]

    def _run_extractors(self, project: ProjectSnapshot, now: datetime) -> list[Any]:
        calls = self._extractor_calls(project, now)
        if not self._config.parallel_extractors:
            return [self._run_stage(project.project_id, stage, fn, *args) for stage, fn, args in calls]

        with ThreadPoolExecutor(
            max_workers=len(calls), thread_name_prefix="analytics-extract",
        ) as pool:
            futures = [
                (stage, pool.submit(contextvars.copy_context().run, fn, *args))
                for stage, fn, args in calls
            ]
            results = []
            for stage, future in futures:
                try:
                    results.append(future.result())
                except Exception as exc:
                    raise ComputationError(project.project_id, stage, str(exc)) from exc
        return results

    def _run_stage(self, project_id: str, stage: str, fn: Callable[..., T], *args: Any) -> T:
        try:
            return fn(*args)
        except Exception as exc:
            raise ComputationError(project_id, stage, str(exc)) from exc

    def _persist(self, project_id: str, snapshot: AnalyticsSnapshot) -> PersistenceOutcome:
        timeout = self._config.io.write_timeout_seconds
        t0 = time.monotonic()
        try:
            try:
                call_with_timeout(
                    self._writer.upsert_analytics_snapshot, timeout, project_id, snapshot,
                )
            except FutureTimeoutError as exc:
                raise PersistenceError(project_id, f"timed out after {timeout}s") from exc
            except Exception as exc:
                raise PersistenceError(project_id, str(exc)) from exc
        except PersistenceError as err:
            outcome = PersistenceOutcome(
                project_id=project_id,
                succeeded=False,
                duration_ms=round((time.monotonic() - t0) * 1000, 2),
                error_code=err.code,
                reason=err.reason,
            )
            logger.error("analytics_persistence_failed", extra=asdict(outcome), exc_info=True)
            return outcome

        outcome = PersistenceOutcome(
            project_id=project_id,
            succeeded=True,
            duration_ms=round((time.monotonic() - t0) * 1000, 2),
        )
        logger.info("analytics_persisted", extra=asdict(outcome))
        return outcome
