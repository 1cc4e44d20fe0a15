"""Selectors - read-only queries returning domain value objects."""

from homebuilder_kernel.selectors.base import BaseSelector
from homebuilder_kernel.selectors.project_selector import ProjectSnapshotSelector

__all__ = ["BaseSelector", "ProjectSnapshotSelector"]
