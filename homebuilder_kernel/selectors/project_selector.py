"""
Module: homebuilder_kernel.selectors.project_selector
Responsibility: Assemble a read-only ``ProjectSnapshot`` from the project
    record tables.
Architecture position: Kernel > Selectors.  Consumed by
    ``homebuilder_services.snapshot_loader``.

Invariants enforced:
    - Child collections keep their stored ``position`` order.
    - Only suppliers referenced by the project's budget items are loaded.

Failure modes:
    - ProjectNotFoundError if the project id does not resolve.
"""

from sqlalchemy import select

from homebuilder_kernel.domain.snapshot import ProjectSnapshot, ProjectStatus
from homebuilder_kernel.exceptions import ProjectNotFoundError
from homebuilder_kernel.logging_config import get_logger
from homebuilder_kernel.models.project import ProjectModel, SupplierModel, as_utc
from homebuilder_kernel.selectors.base import BaseSelector

logger = get_logger("selectors.project")


class ProjectSnapshotSelector(BaseSelector):
    """Loads a project and all of its records as one ``ProjectSnapshot``."""

    def get_snapshot(self, project_id: str) -> ProjectSnapshot:
        """
        Build the snapshot for ``project_id``.

        Raises:
            ProjectNotFoundError: If no project has this id.
        """
        project = self.session.get(ProjectModel, project_id)
        if project is None:
            logger.info("project_not_found", extra={"project_id": project_id})
            raise ProjectNotFoundError(project_id)

        supplier_ids = sorted({
            item.supplier_id for item in project.budget_items
            if item.supplier_id is not None
        })
        suppliers = ()
        if supplier_ids:
            rows = self.session.scalars(
                select(SupplierModel)
                .where(SupplierModel.id.in_(supplier_ids))
                .order_by(SupplierModel.id)
            ).all()
            suppliers = tuple(row.to_dto() for row in rows)

        snapshot = ProjectSnapshot(
            project_id=project.id,
            name=project.name,
            status=ProjectStatus(project.status),
            original_budget=project.original_budget,
            current_budget=project.current_budget,
            spent_amount=project.spent_amount,
            estimated_start_date=as_utc(project.estimated_start_date),
            actual_start_date=as_utc(project.actual_start_date),
            estimated_end_date=as_utc(project.estimated_end_date),
            completion_percentage=project.completion_percentage,
            floor_area=project.floor_area,
            tasks=tuple(t.to_dto() for t in project.tasks),
            budget_items=tuple(b.to_dto() for b in project.budget_items),
            inspections=tuple(i.to_dto() for i in project.inspections),
            issues=tuple(i.to_dto() for i in project.issues),
            time_entries=tuple(e.to_dto() for e in project.time_entries),
            communications=tuple(c.to_dto() for c in project.communications),
            suppliers=suppliers,
        )

        logger.debug(
            "project_snapshot_loaded",
            extra={
                "project_id": project_id,
                "task_count": len(snapshot.tasks),
                "budget_item_count": len(snapshot.budget_items),
                "supplier_count": len(suppliers),
            },
        )
        return snapshot
