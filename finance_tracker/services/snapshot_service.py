"""
Snapshot export and import.

Exports write every stored record to snapshot storage as one JSON document;
imports replace the stored records with a previously exported document.
"""

import logging
from datetime import datetime
from typing import List

from pydantic import ValidationError

from finance_tracker.models.records import FinanceSnapshot
from finance_tracker.repository import FinanceRepository
from finance_tracker.storage.base import SnapshotStorage, StorageError

logger = logging.getLogger(__name__)

SNAPSHOT_FORMAT_VERSION = 1


class SnapshotService:
    """Service for exporting and importing record snapshots."""

    def __init__(self, repository: FinanceRepository, storage: SnapshotStorage) -> None:
        self.repository = repository
        self.storage = storage

    def export_snapshot(self, name: str) -> FinanceSnapshot:
        """
        Export all stored records under a name.

        Args:
            name: Snapshot name

        Returns:
            The exported snapshot

        Raises:
            StorageError: If the snapshot cannot be stored
        """
        snapshot = self.repository.load_snapshot()
        payload = {
            "format_version": SNAPSHOT_FORMAT_VERSION,
            "exported_at": datetime.utcnow().isoformat(),
            "snapshot": snapshot.model_dump(mode="json"),
        }
        self.storage.write_snapshot(name, payload)
        logger.info(
            f"Exported snapshot {name}: {len(snapshot.accounts)} accounts, "
            f"{len(snapshot.contributions)} contributions"
        )
        return snapshot

    def import_snapshot(self, name: str) -> FinanceSnapshot:
        """
        Replace all stored records with a previously exported snapshot.

        Args:
            name: Snapshot name

        Returns:
            The imported snapshot

        Raises:
            StorageNotFoundError: If the snapshot does not exist
            StorageError: If the snapshot has an unknown format or invalid records
        """
        payload = self.storage.read_snapshot(name)

        version = payload.get("format_version")
        if version != SNAPSHOT_FORMAT_VERSION:
            raise StorageError(f"Unsupported snapshot format version: {version}")

        try:
            snapshot = FinanceSnapshot.model_validate(payload.get("snapshot", {}))
        except ValidationError as e:
            raise StorageError(f"Snapshot {name} contains invalid records: {e}")

        self.repository.replace_snapshot(snapshot)
        logger.info(f"Imported snapshot {name}")
        return snapshot

    def list_snapshots(self) -> List[str]:
        """List stored snapshot names."""
        return self.storage.list_snapshots()

    def delete_snapshot(self, name: str) -> bool:
        """Delete a stored snapshot."""
        return self.storage.delete_snapshot(name)
