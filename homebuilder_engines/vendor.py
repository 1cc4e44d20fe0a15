"""
homebuilder_engines.vendor -- Supplier count and delivery performance.

Responsibility:
    Count the distinct suppliers referenced by a project's budget items and
    score their delivery reliability, quality and pricing wherever
    delivery-tracking data exists.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Every aggregate is a ``Sourced`` value.  It is MEASURED when at least
      one referenced supplier has the underlying data (mean over those
      suppliers), otherwise the documented default tagged UNAVAILABLE.
    - Per-vendor scores are clamped to [0, 100].
    - ``top_vendors`` is sorted by overall score descending, ties broken by
      supplier id ascending.

Scoring (per supplier):
    on_time_rate    = 100 * on-or-before-promise deliveries / delivered
    quality_score   = satisfaction * 20 - defect_rate * 10 - rework_rate * 15
                      (satisfaction defaults to 5, rates to 0)
    cost_efficiency = 50 + (market - actual) / market * 100
                      (market falls back to quoted, actual to quoted)
"""

from __future__ import annotations

from statistics import fmean

from homebuilder_engines.forecasting import clamp
from homebuilder_engines.tracer import traced_engine
from homebuilder_kernel.domain.metrics import Sourced, VendorMetrics, VendorPerformance
from homebuilder_kernel.domain.snapshot import ProjectSnapshot, Supplier
from homebuilder_kernel.logging_config import get_logger

logger = get_logger("engines.vendor")

DEFAULT_ON_TIME_DELIVERY_RATE = 90.0
DEFAULT_QUALITY_SCORE = 85.0
DEFAULT_COST_EFFICIENCY = 80.0


def on_time_rate(supplier: Supplier) -> float | None:
    delivered = [d for d in supplier.deliveries if d.actual_date is not None]
    if not delivered:
        return None
    on_time = sum(1 for d in delivered if d.actual_date <= d.promised_date)
    return 100 * on_time / len(delivered)


def quality_score(supplier: Supplier) -> float | None:
    if (
        supplier.defect_rate is None
        and supplier.customer_satisfaction is None
        and supplier.rework_rate is None
    ):
        return None
    satisfaction = float(supplier.customer_satisfaction) if supplier.customer_satisfaction is not None else 5.0
    defect_rate = float(supplier.defect_rate or 0)
    rework_rate = float(supplier.rework_rate or 0)
    return clamp(satisfaction * 20 - defect_rate * 10 - rework_rate * 15, 0.0, 100.0)


def cost_efficiency(supplier: Supplier) -> float | None:
    market = supplier.market_rate if supplier.market_rate is not None else supplier.quoted_rate
    actual = supplier.actual_rate if supplier.actual_rate is not None else supplier.quoted_rate
    if market is None or actual is None or market <= 0:
        return None
    efficiency = float((market - actual) / market) * 100
    return clamp(50 + efficiency, 0.0, 100.0)


def score_vendor(supplier: Supplier) -> VendorPerformance | None:
    """Score one supplier, or None when it has no performance data at all."""
    on_time = on_time_rate(supplier)
    quality = quality_score(supplier)
    cost = cost_efficiency(supplier)
    measured = [s for s in (on_time, quality, cost) if s is not None]
    if not measured:
        return None
    return VendorPerformance(
        vendor_id=supplier.id,
        name=supplier.name,
        on_time_rate=on_time,
        quality_score=quality,
        cost_efficiency=cost,
        overall_score=fmean(measured),
    )


def _aggregate(values: list[float | None], default: float) -> Sourced:
    measured = [v for v in values if v is not None]
    if not measured:
        return Sourced.default(default)
    return Sourced.measured(fmean(measured))


@traced_engine("vendor", "1.0", fingerprint_fields=("snapshot",))
def extract_vendor_metrics(
    snapshot: ProjectSnapshot,
    on_time_default: float = DEFAULT_ON_TIME_DELIVERY_RATE,
    quality_default: float = DEFAULT_QUALITY_SCORE,
    cost_efficiency_default: float = DEFAULT_COST_EFFICIENCY,
) -> VendorMetrics:
    """Compute ``VendorMetrics`` for the suppliers referenced by ``snapshot``."""
    referenced = {
        item.supplier_id for item in snapshot.budget_items
        if item.supplier_id is not None
    }
    suppliers = [s for s in snapshot.suppliers if s.id in referenced]

    performances = [p for p in (score_vendor(s) for s in suppliers) if p is not None]
    top_vendors = tuple(sorted(performances, key=lambda p: (-p.overall_score, p.vendor_id)))

    metrics = VendorMetrics(
        total_vendors=len(referenced),
        on_time_delivery_rate=_aggregate([p.on_time_rate for p in performances], on_time_default),
        quality_score=_aggregate([p.quality_score for p in performances], quality_default),
        cost_efficiency=_aggregate([p.cost_efficiency for p in performances], cost_efficiency_default),
        top_vendors=top_vendors,
    )

    logger.debug(
        "vendor_metrics_computed",
        extra={
            "project_id": snapshot.project_id,
            "total_vendors": metrics.total_vendors,
            "measured_vendors": len(performances),
            "on_time_source": metrics.on_time_delivery_rate.source,
        },
    )
    return metrics
