"""Domain layer - pure value objects and the injectable clock, zero I/O."""

from homebuilder_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from homebuilder_kernel.domain.metrics import (
    AnalyticsSnapshot,
    BudgetMetrics,
    CategorySpend,
    CompletionProbability,
    DataSource,
    PredictionResult,
    ProductivityMetric,
    QualityMetrics,
    RiskAssessment,
    RiskCategory,
    RiskFactor,
    Sourced,
    TeamMetrics,
    TimelineMetrics,
    Trend,
    VendorMetrics,
    VendorPerformance,
)
from homebuilder_kernel.domain.snapshot import (
    BudgetLineItem,
    Communication,
    Delivery,
    Inspection,
    Issue,
    IssueCategory,
    IssueStatus,
    ProjectSnapshot,
    ProjectStatus,
    Supplier,
    Task,
    TaskStatus,
    TimeEntry,
)

__all__ = [
    "AnalyticsSnapshot",
    "BudgetLineItem",
    "BudgetMetrics",
    "CategorySpend",
    "Clock",
    "Communication",
    "CompletionProbability",
    "DataSource",
    "Delivery",
    "DeterministicClock",
    "Inspection",
    "Issue",
    "IssueCategory",
    "IssueStatus",
    "PredictionResult",
    "ProductivityMetric",
    "ProjectSnapshot",
    "ProjectStatus",
    "QualityMetrics",
    "RiskAssessment",
    "RiskCategory",
    "RiskFactor",
    "Sourced",
    "Supplier",
    "SystemClock",
    "Task",
    "TaskStatus",
    "TeamMetrics",
    "TimeEntry",
    "TimelineMetrics",
    "Trend",
    "VendorMetrics",
    "VendorPerformance",
]
