"""ORM models - project record store and persisted analytics snapshots."""

from homebuilder_kernel.models.project import (
    BudgetItemModel,
    CommunicationModel,
    DeliveryModel,
    InspectionModel,
    IssueModel,
    ProjectModel,
    SupplierModel,
    TaskModel,
    TimeEntryModel,
)
from homebuilder_kernel.models.project_metrics import ProjectMetricsModel

__all__ = [
    "BudgetItemModel",
    "CommunicationModel",
    "DeliveryModel",
    "InspectionModel",
    "IssueModel",
    "ProjectMetricsModel",
    "ProjectModel",
    "SupplierModel",
    "TaskModel",
    "TimeEntryModel",
]
