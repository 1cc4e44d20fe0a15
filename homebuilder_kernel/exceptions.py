"""
Typed Exception Hierarchy for the Homebuilder Analytics Engine.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from HomebuilderError:

    HomebuilderError (base)
    |
    +-- ProjectError
    |   +-- ProjectNotFoundError
    |   +-- SnapshotLoadError
    |
    +-- AnalyticsError
        +-- ComputationError
        +-- PersistenceError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category   | Code                          | When Raised
-----------|-------------------------------|------------------------------------------
Project    | PROJECT_NOT_FOUND             | Project ID does not resolve
           | SNAPSHOT_LOAD_FAILED          | Snapshot load failed or timed out
-----------|-------------------------------|------------------------------------------
Analytics  | ANALYTICS_COMPUTATION_FAILED  | An extractor or analyzer raised
           | ANALYTICS_PERSISTENCE_FAILED  | Metrics write-back failed (logged only)

===============================================================================
HANDLING PATTERNS
===============================================================================

1. NOT FOUND IS TERMINAL:

    try:
        snapshot = orchestrator.compute_analytics(project_id)
    except ProjectNotFoundError as e:
        return {"error": e.code, "project_id": e.project_id}

2. COMPUTATION FAILURES CARRY THE STAGE:

    except ComputationError as e:
        log.error("analytics_failed", extra={"stage": e.stage})

3. PERSISTENCE FAILURES NEVER REACH THE CALLER:

    The orchestrator catches PersistenceError, logs it with exc_info and
    returns the computed snapshot anyway.

Every exception stores its context as attributes so the structured log
formatter can render them as ``exc_<name>`` fields.
"""


class HomebuilderError(Exception):
    """
    Base exception for all homebuilder analytics errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "HOMEBUILDER_ERROR"


# Project-related exceptions


class ProjectError(HomebuilderError):
    """Base exception for project lookup errors."""

    code: str = "PROJECT_ERROR"


class ProjectNotFoundError(ProjectError):
    """Project with given ID was not found."""

    code: str = "PROJECT_NOT_FOUND"

    def __init__(self, project_id: str):
        self.project_id = project_id
        super().__init__(f"Project not found: {project_id}")


class SnapshotLoadError(ProjectError):
    """Project snapshot could not be loaded in time."""

    code: str = "SNAPSHOT_LOAD_FAILED"

    def __init__(self, project_id: str, reason: str):
        self.project_id = project_id
        self.reason = reason
        super().__init__(f"Failed to load snapshot for project {project_id}: {reason}")


# Analytics-related exceptions


class AnalyticsError(HomebuilderError):
    """Base exception for analytics computation errors."""

    code: str = "ANALYTICS_ERROR"


class ComputationError(AnalyticsError):
    """
    An extractor or analyzer raised while processing a project snapshot.

    No partial snapshot is written when this is raised.
    """

    code: str = "ANALYTICS_COMPUTATION_FAILED"

    def __init__(self, project_id: str, stage: str, reason: str):
        self.project_id = project_id
        self.stage = stage
        self.reason = reason
        super().__init__(
            f"Analytics computation failed for project {project_id} "
            f"at stage '{stage}': {reason}"
        )


class PersistenceError(AnalyticsError):
    """Writing the analytics snapshot back to the store failed."""

    code: str = "ANALYTICS_PERSISTENCE_FAILED"

    def __init__(self, project_id: str, reason: str):
        self.project_id = project_id
        self.reason = reason
        super().__init__(
            f"Failed to persist analytics for project {project_id}: {reason}"
        )
