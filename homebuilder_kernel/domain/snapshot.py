"""
Project Snapshot Domain Models (``homebuilder_kernel.domain.snapshot``).

Responsibility
--------------
Frozen dataclass value objects representing the read-only input of one
analytics computation: a project and all of its associated records
(tasks, budget line items, inspections, issues, time entries,
communications and suppliers).

Architecture position
---------------------
**Kernel > Domain** -- pure data definitions with ZERO I/O.  Built by
``ProjectSnapshotSelector`` from ORM rows (or by tests directly) and
consumed by every metric extractor in ``homebuilder_engines``.

Invariants enforced
-------------------
* All models are ``frozen=True`` (immutable after construction).
* Collections are tuples; they may be empty, never None.
* All monetary fields and hours use ``Decimal`` -- NEVER ``float``.
* Instants are timezone-aware ``datetime`` values (UTC) or None.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum


class ProjectStatus(str, Enum):
    """Lifecycle status of a construction project."""

    PLANNING = "PLANNING"
    IN_PROGRESS = "IN_PROGRESS"
    ON_HOLD = "ON_HOLD"
    COMPLETE = "COMPLETE"
    CANCELLED = "CANCELLED"


class TaskStatus(str, Enum):
    """Status of a single task."""

    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    BLOCKED = "BLOCKED"
    COMPLETE = "COMPLETE"
    CANCELLED = "CANCELLED"


class IssueCategory(str, Enum):
    """Category of a reported project issue."""

    QUALITY = "QUALITY"
    SAFETY = "SAFETY"
    SCHEDULE = "SCHEDULE"
    BUDGET = "BUDGET"
    OTHER = "OTHER"


class IssueStatus(str, Enum):
    """Resolution status of a project issue."""

    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    RESOLVED = "RESOLVED"
    CLOSED = "CLOSED"


@dataclass(frozen=True)
class Task:
    """A unit of work on the project schedule."""
    id: str
    name: str
    status: TaskStatus = TaskStatus.NOT_STARTED
    assignee_id: str | None = None


@dataclass(frozen=True)
class BudgetLineItem:
    """A budgeted cost line, optionally tied to a supplier."""
    id: str
    name: str
    category: str | None = None
    estimated_total: Decimal | None = None
    actual_total: Decimal | None = None
    supplier_id: str | None = None


@dataclass(frozen=True)
class Inspection:
    """A municipal or internal inspection; ``passed`` is None until graded."""
    id: str
    inspection_type: str
    passed: bool | None = None
    inspected_at: datetime | None = None


@dataclass(frozen=True)
class Issue:
    """A reported issue (defect, safety concern, schedule problem...)."""
    id: str
    title: str
    category: IssueCategory = IssueCategory.OTHER
    status: IssueStatus = IssueStatus.OPEN


@dataclass(frozen=True)
class TimeEntry:
    """Hours logged by a team member."""
    id: str
    user_id: str
    task_id: str | None = None
    duration_hours: Decimal | None = None


@dataclass(frozen=True)
class Communication:
    """A logged project communication (email, call, site note)."""
    id: str
    channel: str
    sent_at: datetime | None = None


@dataclass(frozen=True)
class Delivery:
    """A supplier delivery; ``actual_date`` is None while outstanding."""
    promised_date: datetime
    actual_date: datetime | None = None


@dataclass(frozen=True)
class Supplier:
    """
    A supplier together with whatever delivery-tracking data exists for it.

    Every performance field is optional.  When none are present the vendor
    extractor falls back to documented defaults and tags them as such.
    """
    id: str
    name: str
    deliveries: tuple[Delivery, ...] = ()
    defect_rate: Decimal | None = None
    customer_satisfaction: Decimal | None = None  # 0-5 scale
    rework_rate: Decimal | None = None
    market_rate: Decimal | None = None
    quoted_rate: Decimal | None = None
    actual_rate: Decimal | None = None


@dataclass(frozen=True)
class ProjectSnapshot:
    """
    Full read-only aggregate of a project's records for one computation.

    ``current_budget`` falls back to ``original_budget`` when not revised.
    ``floor_area`` is in square feet.
    """
    project_id: str
    name: str = ""
    status: ProjectStatus = ProjectStatus.PLANNING
    original_budget: Decimal = Decimal("0")
    current_budget: Decimal | None = None
    spent_amount: Decimal = Decimal("0")
    estimated_start_date: datetime | None = None
    actual_start_date: datetime | None = None
    estimated_end_date: datetime | None = None
    completion_percentage: float | None = None
    floor_area: Decimal | None = None
    tasks: tuple[Task, ...] = ()
    budget_items: tuple[BudgetLineItem, ...] = ()
    inspections: tuple[Inspection, ...] = ()
    issues: tuple[Issue, ...] = ()
    time_entries: tuple[TimeEntry, ...] = ()
    communications: tuple[Communication, ...] = ()
    suppliers: tuple[Supplier, ...] = ()

    @property
    def start_date(self) -> datetime | None:
        """Actual start when recorded, otherwise the estimated start."""
        return self.actual_start_date or self.estimated_start_date

    @property
    def effective_current_budget(self) -> Decimal:
        if self.current_budget is None:
            return self.original_budget
        return self.current_budget
