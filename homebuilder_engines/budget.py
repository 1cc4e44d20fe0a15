"""
homebuilder_engines.budget -- Budget burn and cost-by-category metrics.

Responsibility:
    Derive committed spend, variance against the original budget, burn rate,
    a contingency-buffered final-cost estimate and a per-category breakdown
    from a project snapshot.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Decimal-only arithmetic for every monetary amount.
    - Division-by-zero safe: percentages are Decimal("0") when the base is 0.
    - ``cost_by_category`` keeps the order in which categories first appear
      in the line items; items without a category fall into "Other".
    - The contingency factor applies to the remaining budget only, never to
      the amount already spent.

Usage:
    from homebuilder_engines.budget import extract_budget_metrics

    metrics = extract_budget_metrics(snapshot, now)
    metrics.cost_by_category["Framing"].variance
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from decimal import Decimal

from homebuilder_engines.forecasting import calculate_burn_rate
from homebuilder_engines.tracer import traced_engine
from homebuilder_kernel.domain.metrics import BudgetMetrics, CategorySpend
from homebuilder_kernel.domain.snapshot import BudgetLineItem, ProjectSnapshot
from homebuilder_kernel.logging_config import get_logger

logger = get_logger("engines.budget")

DEFAULT_CATEGORY = "Other"
DEFAULT_CONTINGENCY_FACTOR = Decimal("1.1")

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


def variance_percent(variance: Decimal, base: Decimal) -> Decimal:
    """``variance / base * 100``, or 0 when the base is not positive."""
    if base <= _ZERO:
        return _ZERO
    return variance / base * _HUNDRED


def group_cost_by_category(items: Iterable[BudgetLineItem]) -> dict[str, CategorySpend]:
    """Sum budgeted and spent per category, in first-seen category order."""
    totals: dict[str, tuple[Decimal, Decimal]] = {}
    for item in items:
        name = item.category or DEFAULT_CATEGORY
        budgeted, spent = totals.get(name, (_ZERO, _ZERO))
        totals[name] = (
            budgeted + (item.estimated_total or _ZERO),
            spent + (item.actual_total or _ZERO),
        )

    result: dict[str, CategorySpend] = {}
    for name, (budgeted, spent) in totals.items():
        variance = spent - budgeted
        result[name] = CategorySpend(
            category=name,
            budgeted=budgeted,
            spent=spent,
            variance=variance,
            variance_percentage=variance_percent(variance, budgeted),
        )
    return result


@traced_engine("budget", "1.0", fingerprint_fields=("snapshot", "now", "contingency_factor"))
def extract_budget_metrics(
    snapshot: ProjectSnapshot,
    now: datetime,
    contingency_factor: Decimal = DEFAULT_CONTINGENCY_FACTOR,
) -> BudgetMetrics:
    """
    Compute ``BudgetMetrics`` for ``snapshot`` as of ``now``.

    Formulas:
        committed = sum(estimated_total)
        remaining = current_budget - spent
        variance  = spent - original_budget
        predicted_final_cost = spent + remaining * contingency_factor
    """
    original_budget = snapshot.original_budget
    current_budget = snapshot.effective_current_budget
    spent = snapshot.spent_amount

    committed = sum((item.estimated_total or _ZERO for item in snapshot.budget_items), _ZERO)
    remaining = current_budget - spent
    variance = spent - original_budget

    metrics = BudgetMetrics(
        original_budget=original_budget,
        current_budget=current_budget,
        spent_amount=spent,
        committed_amount=committed,
        remaining_budget=remaining,
        variance=variance,
        variance_percentage=variance_percent(variance, original_budget),
        burn_rate_per_day=calculate_burn_rate(spent, snapshot.start_date, now),
        predicted_final_cost=spent + remaining * contingency_factor,
        cost_by_category=group_cost_by_category(snapshot.budget_items),
    )

    logger.debug(
        "budget_metrics_computed",
        extra={
            "project_id": snapshot.project_id,
            "variance": str(metrics.variance),
            "variance_percentage": str(metrics.variance_percentage),
            "category_count": len(metrics.cost_by_category),
        },
    )
    return metrics
