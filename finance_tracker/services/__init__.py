"""Services coordinating the repository, engines and snapshot storage."""

from .projection_service import ProjectionService
from .snapshot_service import SnapshotService

__all__ = ["ProjectionService", "SnapshotService"]
