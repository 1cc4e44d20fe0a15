"""
homebuilder_services.snapshot_loader -- SQL-backed ``ProjectSnapshotLoader``.

Each call opens its own session, builds the snapshot through
``ProjectSnapshotSelector`` and closes the session, so the loader can be
called from a worker thread.
"""

from __future__ import annotations

from sqlalchemy.orm import Session, sessionmaker

from homebuilder_kernel.db.engine import session_scope
from homebuilder_kernel.domain.snapshot import ProjectSnapshot
from homebuilder_kernel.selectors.project_selector import ProjectSnapshotSelector


class SqlProjectSnapshotLoader:
    """Loads ``ProjectSnapshot`` values from the project record tables."""

    def __init__(self, session_factory: sessionmaker[Session] | None = None) -> None:
        self._session_factory = session_factory

    def load_project_snapshot(self, project_id: str) -> ProjectSnapshot:
        with session_scope(self._session_factory) as session:
            return ProjectSnapshotSelector(session).get_snapshot(project_id)
