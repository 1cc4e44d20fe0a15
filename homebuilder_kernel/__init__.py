"""
Homebuilder Kernel - project analytics foundation

Shared ground for the analytics engine:
- Immutable project snapshot and metric records
- Injectable clock for deterministic computation
- Typed, coded exceptions
- Structured JSON logging
- SQLAlchemy persistence for project records and metrics snapshots
"""

__version__ = "0.1.0"
