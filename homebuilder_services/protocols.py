"""Read and write collaborators of the analytics orchestrator.

The orchestrator depends only on these protocols.  SQL-backed
implementations live in ``snapshot_loader`` and ``metrics_store``; tests
substitute in-memory fakes.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from homebuilder_kernel.domain.metrics import AnalyticsSnapshot
from homebuilder_kernel.domain.snapshot import ProjectSnapshot


@runtime_checkable
class ProjectSnapshotLoader(Protocol):
    """Source of read-only project snapshots."""

    def load_project_snapshot(self, project_id: str) -> ProjectSnapshot:
        """Return the snapshot for ``project_id``.

        Raises:
            ProjectNotFoundError: When the project does not exist.
        """
        ...


@runtime_checkable
class AnalyticsSnapshotWriter(Protocol):
    """Sink for computed analytics; one row per project, replaced on write."""

    def upsert_analytics_snapshot(self, project_id: str, snapshot: AnalyticsSnapshot) -> None:
        ...
