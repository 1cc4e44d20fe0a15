"""
homebuilder_engines.quality -- Defect and inspection metrics.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - ``inspection_pass_rate`` is exactly 100 when there are no inspections.
    - ``defect_density`` never divides by less than one square foot; a
      missing floor area is treated as 1000 sq ft.
"""

from __future__ import annotations

from decimal import Decimal

from homebuilder_engines.tracer import traced_engine
from homebuilder_kernel.domain.metrics import QualityMetrics
from homebuilder_kernel.domain.snapshot import IssueCategory, IssueStatus, ProjectSnapshot
from homebuilder_kernel.logging_config import get_logger

logger = get_logger("engines.quality")

DEFAULT_FLOOR_AREA = Decimal("1000")


@traced_engine("quality", "1.0", fingerprint_fields=("snapshot", "default_floor_area"))
def extract_quality_metrics(
    snapshot: ProjectSnapshot,
    default_floor_area: Decimal = DEFAULT_FLOOR_AREA,
) -> QualityMetrics:
    """Count open quality defects and grade inspections for ``snapshot``."""
    defect_count = sum(
        1 for issue in snapshot.issues
        if issue.category == IssueCategory.QUALITY and issue.status == IssueStatus.OPEN
    )

    floor_area = snapshot.floor_area if snapshot.floor_area is not None else default_floor_area
    defect_density = defect_count / max(1.0, float(floor_area))

    inspection_count = len(snapshot.inspections)
    if inspection_count == 0:
        pass_rate = 100.0
    else:
        passed = sum(1 for i in snapshot.inspections if i.passed is True)
        pass_rate = 100 * passed / inspection_count

    logger.debug(
        "quality_metrics_computed",
        extra={
            "project_id": snapshot.project_id,
            "defect_count": defect_count,
            "inspection_count": inspection_count,
        },
    )

    return QualityMetrics(
        defect_count=defect_count,
        defect_density=defect_density,
        inspection_pass_rate=pass_rate,
        inspection_count=inspection_count,
    )
