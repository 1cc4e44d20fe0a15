"""
homebuilder_services.metrics_store -- SQL-backed ``AnalyticsSnapshotWriter``.

Responsibility:
    Persist one ``project_metrics`` row per project.  The first write
    creates the row; later writes overwrite every column.

Invariants enforced:
    - At most one row per project (unique ``project_id``).
    - Last writer wins: each write is one ``INSERT ... ON CONFLICT (project_id)
      DO UPDATE`` statement, so two first writes for the same project never
      collide on the unique constraint.

Failure modes:
    - SQLAlchemy errors propagate after rollback; the orchestrator turns
      them into ``PersistenceError``.
    - ValueError for a database dialect without ON CONFLICT support.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session, sessionmaker

from homebuilder_kernel.db.engine import session_scope
from homebuilder_kernel.domain.metrics import AnalyticsSnapshot
from homebuilder_kernel.logging_config import get_logger
from homebuilder_kernel.models.project_metrics import ProjectMetricsModel

logger = get_logger("services.metrics_store")

_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _upsert_insert(session: Session):
    dialect = session.get_bind().dialect.name
    try:
        return _UPSERT_INSERTS[dialect]
    except KeyError:
        raise ValueError(f"project_metrics upsert is not supported on {dialect}") from None


class ProjectMetricsStore:
    """Upserts analytics snapshots into ``project_metrics``."""

    def __init__(self, session_factory: sessionmaker[Session] | None = None) -> None:
        self._session_factory = session_factory

    def upsert_analytics_snapshot(self, project_id: str, snapshot: AnalyticsSnapshot) -> None:
        columns = ProjectMetricsModel.snapshot_columns(snapshot)
        with session_scope(self._session_factory) as session:
            insert = _upsert_insert(session)
            stmt = insert(ProjectMetricsModel.__table__).values(project_id=project_id, **columns)
            stmt = stmt.on_conflict_do_update(
                index_elements=["project_id"],
                set_={**columns, "updated_at": func.now()},
            )
            session.execute(stmt)

        logger.info(
            "project_metrics_upserted",
            extra={"project_id": project_id, "risk_score": columns["risk_score"]},
        )

    def get_insights(self, project_id: str) -> dict[str, Any] | None:
        """The stored snapshot as a JSON dict, or None if never computed."""
        with session_scope(self._session_factory) as session:
            row = session.scalars(
                select(ProjectMetricsModel).where(ProjectMetricsModel.project_id == project_id)
            ).one_or_none()
            return dict(row.insights) if row is not None else None
