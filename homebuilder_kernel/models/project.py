"""
SQLAlchemy ORM models for the project record store.

Responsibility
--------------
Database-backed rows for a construction project and the records the
analytics engine reads: tasks, budget line items, suppliers and their
deliveries, inspections, issues, time entries and communications.

Architecture position
---------------------
**Kernel > Models** -- read by ``ProjectSnapshotSelector``; every model
exposes ``to_dto()`` returning the frozen value object from
``homebuilder_kernel.domain.snapshot``.

Invariants enforced
-------------------
* All monetary fields and hours use ``Decimal`` (Numeric(38,9)).
* Enum fields stored as String(50) for readability and portability.
* Timestamps read back without tzinfo (SQLite) are interpreted as UTC.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from homebuilder_kernel.db.base import TrackedBase
from homebuilder_kernel.domain.snapshot import (
    BudgetLineItem,
    Communication,
    Delivery,
    Inspection,
    Issue,
    IssueCategory,
    IssueStatus,
    Supplier,
    Task,
    TaskStatus,
    TimeEntry,
)


def as_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive timestamps coming back from the database."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# ProjectModel
# ---------------------------------------------------------------------------


class ProjectModel(TrackedBase):
    """
    A construction project.

    ``status`` follows PLANNING -> IN_PROGRESS -> (ON_HOLD) -> COMPLETE,
    with CANCELLED as a terminal exit.
    """

    __tablename__ = "projects"

    __table_args__ = (
        Index("idx_projects_status", "status"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="PLANNING")
    original_budget: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    current_budget: Mapped[Decimal | None] = mapped_column(nullable=True)
    spent_amount: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    estimated_start_date: Mapped[datetime | None] = mapped_column(nullable=True)
    actual_start_date: Mapped[datetime | None] = mapped_column(nullable=True)
    estimated_end_date: Mapped[datetime | None] = mapped_column(nullable=True)
    completion_percentage: Mapped[float | None] = mapped_column(nullable=True)
    floor_area: Mapped[Decimal | None] = mapped_column(nullable=True)

    tasks: Mapped[list[TaskModel]] = relationship(
        back_populates="project",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="TaskModel.position",
    )
    budget_items: Mapped[list[BudgetItemModel]] = relationship(
        back_populates="project",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="BudgetItemModel.position",
    )
    inspections: Mapped[list[InspectionModel]] = relationship(
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="InspectionModel.position",
    )
    issues: Mapped[list[IssueModel]] = relationship(
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="IssueModel.position",
    )
    time_entries: Mapped[list[TimeEntryModel]] = relationship(
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="TimeEntryModel.position",
    )
    communications: Mapped[list[CommunicationModel]] = relationship(
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="CommunicationModel.position",
    )

    def __repr__(self) -> str:
        return f"<ProjectModel {self.name} [{self.status}]>"


# ---------------------------------------------------------------------------
# Child records
# ---------------------------------------------------------------------------


class TaskModel(TrackedBase):
    __tablename__ = "project_tasks"

    __table_args__ = (
        Index("idx_project_tasks_project", "project_id"),
    )

    project_id: Mapped[str] = mapped_column(ForeignKey("projects.id"), nullable=False)
    position: Mapped[int] = mapped_column(default=0)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="NOT_STARTED")
    assignee_id: Mapped[str | None] = mapped_column(String(64), nullable=True)

    project: Mapped[ProjectModel] = relationship(back_populates="tasks")

    def to_dto(self) -> Task:
        return Task(
            id=self.id,
            name=self.name,
            status=TaskStatus(self.status),
            assignee_id=self.assignee_id,
        )


class SupplierModel(TrackedBase):
    """
    A supplier shared across projects, with optional performance data.

    Rates are unit prices; ``customer_satisfaction`` is on a 0-5 scale.
    """

    __tablename__ = "suppliers"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    defect_rate: Mapped[Decimal | None] = mapped_column(nullable=True)
    customer_satisfaction: Mapped[Decimal | None] = mapped_column(nullable=True)
    rework_rate: Mapped[Decimal | None] = mapped_column(nullable=True)
    market_rate: Mapped[Decimal | None] = mapped_column(nullable=True)
    quoted_rate: Mapped[Decimal | None] = mapped_column(nullable=True)
    actual_rate: Mapped[Decimal | None] = mapped_column(nullable=True)

    deliveries: Mapped[list[DeliveryModel]] = relationship(
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="DeliveryModel.promised_date",
    )

    def to_dto(self) -> Supplier:
        return Supplier(
            id=self.id,
            name=self.name,
            deliveries=tuple(d.to_dto() for d in self.deliveries),
            defect_rate=self.defect_rate,
            customer_satisfaction=self.customer_satisfaction,
            rework_rate=self.rework_rate,
            market_rate=self.market_rate,
            quoted_rate=self.quoted_rate,
            actual_rate=self.actual_rate,
        )


class DeliveryModel(TrackedBase):
    __tablename__ = "supplier_deliveries"

    supplier_id: Mapped[str] = mapped_column(ForeignKey("suppliers.id"), nullable=False)
    promised_date: Mapped[datetime] = mapped_column(nullable=False)
    actual_date: Mapped[datetime | None] = mapped_column(nullable=True)

    def to_dto(self) -> Delivery:
        return Delivery(
            promised_date=as_utc(self.promised_date),
            actual_date=as_utc(self.actual_date),
        )


class BudgetItemModel(TrackedBase):
    __tablename__ = "project_budget_items"

    __table_args__ = (
        Index("idx_project_budget_items_project", "project_id"),
    )

    project_id: Mapped[str] = mapped_column(ForeignKey("projects.id"), nullable=False)
    position: Mapped[int] = mapped_column(default=0)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    estimated_total: Mapped[Decimal | None] = mapped_column(nullable=True)
    actual_total: Mapped[Decimal | None] = mapped_column(nullable=True)
    supplier_id: Mapped[str | None] = mapped_column(ForeignKey("suppliers.id"), nullable=True)

    project: Mapped[ProjectModel] = relationship(back_populates="budget_items")

    def to_dto(self) -> BudgetLineItem:
        return BudgetLineItem(
            id=self.id,
            name=self.name,
            category=self.category,
            estimated_total=self.estimated_total,
            actual_total=self.actual_total,
            supplier_id=self.supplier_id,
        )


class InspectionModel(TrackedBase):
    __tablename__ = "project_inspections"

    project_id: Mapped[str] = mapped_column(ForeignKey("projects.id"), nullable=False)
    position: Mapped[int] = mapped_column(default=0)
    inspection_type: Mapped[str] = mapped_column(String(100), nullable=False)
    passed: Mapped[bool | None] = mapped_column(nullable=True)
    inspected_at: Mapped[datetime | None] = mapped_column(nullable=True)

    def to_dto(self) -> Inspection:
        return Inspection(
            id=self.id,
            inspection_type=self.inspection_type,
            passed=self.passed,
            inspected_at=as_utc(self.inspected_at),
        )


class IssueModel(TrackedBase):
    __tablename__ = "project_issues"

    __table_args__ = (
        Index("idx_project_issues_category_status", "category", "status"),
    )

    project_id: Mapped[str] = mapped_column(ForeignKey("projects.id"), nullable=False)
    position: Mapped[int] = mapped_column(default=0)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str] = mapped_column(String(50), nullable=False, default="OTHER")
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="OPEN")

    def to_dto(self) -> Issue:
        return Issue(
            id=self.id,
            title=self.title,
            category=IssueCategory(self.category),
            status=IssueStatus(self.status),
        )


class TimeEntryModel(TrackedBase):
    __tablename__ = "project_time_entries"

    project_id: Mapped[str] = mapped_column(ForeignKey("projects.id"), nullable=False)
    position: Mapped[int] = mapped_column(default=0)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    task_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    duration_hours: Mapped[Decimal | None] = mapped_column(nullable=True)

    def to_dto(self) -> TimeEntry:
        return TimeEntry(
            id=self.id,
            user_id=self.user_id,
            task_id=self.task_id,
            duration_hours=self.duration_hours,
        )


class CommunicationModel(TrackedBase):
    __tablename__ = "project_communications"

    project_id: Mapped[str] = mapped_column(ForeignKey("projects.id"), nullable=False)
    position: Mapped[int] = mapped_column(default=0)
    channel: Mapped[str] = mapped_column(String(50), nullable=False)
    sent_at: Mapped[datetime | None] = mapped_column(nullable=True)

    def to_dto(self) -> Communication:
        return Communication(
            id=self.id,
            channel=self.channel,
            sent_at=as_utc(self.sent_at),
        )
