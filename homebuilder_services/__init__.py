"""
homebuilder_services -- Package init and public API.

Responsibility:
    Stateful orchestration that composes the pure analytics engines with
    database sessions, configuration and the clock.  This is the only layer
    that may hold sessions, apply I/O timeouts or read wall-clock time.

Architecture position:
    Services -- stateful orchestration over engines + kernel.

    Dependency direction:
        homebuilder_services/ -> homebuilder_engines/  (allowed)
        homebuilder_services/ -> homebuilder_kernel/   (allowed)
        homebuilder_services/ -> homebuilder_config/   (allowed)
        homebuilder_engines/  -> homebuilder_services/ (FORBIDDEN)
        homebuilder_kernel/   -> homebuilder_services/ (FORBIDDEN)
"""

from homebuilder_services.analytics_orchestrator import (
    AnalyticsOrchestrator,
    OrchestratorState,
    PersistenceOutcome,
)
from homebuilder_services.metrics_store import ProjectMetricsStore
from homebuilder_services.protocols import AnalyticsSnapshotWriter, ProjectSnapshotLoader
from homebuilder_services.snapshot_loader import SqlProjectSnapshotLoader

__all__ = [
    "AnalyticsOrchestrator",
    "AnalyticsSnapshotWriter",
    "OrchestratorState",
    "PersistenceOutcome",
    "ProjectMetricsStore",
    "ProjectSnapshotLoader",
    "SqlProjectSnapshotLoader",
]
