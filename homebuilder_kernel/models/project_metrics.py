"""
SQLAlchemy ORM model for the persisted analytics snapshot.

Responsibility
--------------
One row per project holding the latest ``AnalyticsSnapshot``: headline
metrics as flat columns for querying plus the full snapshot as JSON in
``insights``.

Architecture position
---------------------
**Kernel > Models** -- written only by ``ProjectMetricsStore``.

Invariants enforced
-------------------
* ``project_id`` is unique: the row is created on the first computation
  and overwritten on every later one.  No history is kept.
* The row is always written from a complete snapshot (never partially).
* No version column: concurrent writers for the same project are
  last-writer-wins through a single INSERT ... ON CONFLICT statement.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import JSON, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from homebuilder_kernel.db.base import TrackedBase
from homebuilder_kernel.domain.metrics import AnalyticsSnapshot


class ProjectMetricsModel(TrackedBase):
    __tablename__ = "project_metrics"

    __table_args__ = (
        UniqueConstraint("project_id", name="uq_project_metrics_project"),
    )

    project_id: Mapped[str] = mapped_column(ForeignKey("projects.id"), nullable=False)

    # Timeline
    original_duration: Mapped[int] = mapped_column(default=0)
    current_duration: Mapped[int] = mapped_column(default=0)
    actual_duration: Mapped[int | None] = mapped_column(nullable=True)
    days_overdue: Mapped[int] = mapped_column(default=0)
    completion_percentage: Mapped[float] = mapped_column(default=0.0)

    # Budget
    original_budget: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    current_budget: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    spent_amount: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    variance: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    variance_percentage: Mapped[Decimal] = mapped_column(default=Decimal("0"))

    # Quality / team / vendors
    defect_count: Mapped[int] = mapped_column(default=0)
    tasks_completed: Mapped[int] = mapped_column(default=0)
    tasks_total: Mapped[int] = mapped_column(default=0)
    team_utilization: Mapped[float] = mapped_column(default=0.0)
    vendor_on_time_rate: Mapped[float] = mapped_column(default=0.0)
    average_vendor_score: Mapped[float] = mapped_column(default=0.0)

    # Risk / prediction
    risk_score: Mapped[float] = mapped_column(default=0.0)
    success_probability: Mapped[float] = mapped_column(default=0.0)

    insights: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    last_calculated: Mapped[datetime] = mapped_column(nullable=False)

    @staticmethod
    def snapshot_columns(snapshot: AnalyticsSnapshot) -> dict[str, Any]:
        """Every column value written from ``snapshot``, keyed by column name."""
        timeline = snapshot.timeline
        budget = snapshot.budget
        return {
            "original_duration": timeline.original_duration_days,
            "current_duration": timeline.current_duration_days,
            "actual_duration": timeline.actual_duration_days,
            "days_overdue": timeline.days_overdue,
            "completion_percentage": timeline.completion_percentage,
            "original_budget": budget.original_budget,
            "current_budget": budget.current_budget,
            "spent_amount": budget.spent_amount,
            "variance": budget.variance,
            "variance_percentage": budget.variance_percentage,
            "defect_count": snapshot.quality.defect_count,
            "tasks_completed": snapshot.team.tasks_completed,
            "tasks_total": snapshot.team.tasks_total,
            "team_utilization": snapshot.team.average_utilization,
            "vendor_on_time_rate": snapshot.vendors.on_time_delivery_rate.value,
            "average_vendor_score": snapshot.vendors.quality_score.value,
            "risk_score": snapshot.risks.overall_risk_score,
            "success_probability": snapshot.predictions.completion_probability.on_time,
            "insights": snapshot.to_dict(),
            "last_calculated": snapshot.generated_at,
        }

    def __repr__(self) -> str:
        return f"<ProjectMetricsModel {self.project_id} risk={self.risk_score}>"
