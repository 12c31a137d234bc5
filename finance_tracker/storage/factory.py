"""
Snapshot storage factory.

This module creates the snapshot storage backend selected by the application
configuration.
"""

from finance_tracker.config import Settings, get_global_settings

from .base import SnapshotStorage
from .local import LocalSnapshotStorage
from .s3 import S3SnapshotStorage


def create_snapshot_storage(settings: Settings) -> SnapshotStorage:
    """
    Create a snapshot storage instance based on configuration.

    Args:
        settings: Application settings containing storage configuration

    Returns:
        SnapshotStorage: Configured storage instance

    Raises:
        ValueError: If storage configuration is invalid
    """
    if settings.storage_type == "local":
        return LocalSnapshotStorage(base_path=settings.storage_base_path, create_dirs=True)

    elif settings.storage_type == "s3":
        if not settings.s3_bucket_name:
            raise ValueError("S3_BUCKET_NAME must be set when using S3 storage")

        return S3SnapshotStorage(
            bucket_name=settings.s3_bucket_name,
            region_name=settings.s3_region_name,
            aws_access_key_id=settings.s3_access_key_id,
            aws_secret_access_key=settings.s3_secret_access_key,
            prefix=settings.s3_prefix,
        )

    else:
        raise ValueError(f"Unsupported storage type: {settings.storage_type}")


def get_snapshot_storage() -> SnapshotStorage:
    """Get a snapshot storage instance using global settings."""
    return create_snapshot_storage(get_global_settings())
