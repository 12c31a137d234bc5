"""
Snapshot storage for exporting and importing finance records.

This module provides a unified interface for storing snapshots on different
backends (local filesystem, S3).
"""

from .base import (
    SnapshotStorage,
    StorageError,
    StorageNotFoundError,
    StoragePermissionError,
)
from .factory import create_snapshot_storage, get_snapshot_storage
from .local import LocalSnapshotStorage
from .s3 import S3SnapshotStorage

__all__ = [
    "SnapshotStorage",
    "StorageError",
    "StorageNotFoundError",
    "StoragePermissionError",
    "LocalSnapshotStorage",
    "S3SnapshotStorage",
    "create_snapshot_storage",
    "get_snapshot_storage",
]
