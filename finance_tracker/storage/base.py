"""
Base snapshot storage interface and exceptions.

This module defines the abstract interface that all snapshot storage
implementations must follow, along with common exceptions.
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Dict, List


class StorageError(Exception):
    """Base exception for storage-related errors."""


class StorageNotFoundError(StorageError):
    """Raised when a requested snapshot is not found in storage."""


class StoragePermissionError(StorageError):
    """Raised when there are permission issues with storage operations."""


class SnapshotStorage(ABC):
    """
    Abstract base class for snapshot storage.

    Snapshots are JSON documents addressed by name. Implementations only move
    bytes; encoding lives in this base class.
    """

    @abstractmethod
    def _write(self, name: str, content: bytes) -> str:
        """Write raw snapshot bytes and return the storage key."""

    @abstractmethod
    def _read(self, name: str) -> bytes:
        """
        Read raw snapshot bytes.

        Raises:
            StorageNotFoundError: If the snapshot is not found
        """

    @abstractmethod
    def delete_snapshot(self, name: str) -> bool:
        """
        Delete a snapshot.

        Args:
            name: Snapshot name

        Returns:
            bool: True if the snapshot was deleted, False if it didn't exist

        Raises:
            StorageError: If the snapshot cannot be deleted
        """

    @abstractmethod
    def snapshot_exists(self, name: str) -> bool:
        """Check if a snapshot exists."""

    @abstractmethod
    def list_snapshots(self) -> List[str]:
        """List snapshot names in sorted order."""

    def write_snapshot(self, name: str, payload: Dict[str, Any]) -> str:
        """
        Store a snapshot payload as JSON.

        Args:
            name: Snapshot name
            payload: JSON-serializable snapshot payload

        Returns:
            str: The storage key where the snapshot was stored

        Raises:
            StorageError: If the snapshot cannot be stored
        """
        content = json.dumps(payload, indent=2, sort_keys=True).encode("utf-8")
        return self._write(name, content)

    def read_snapshot(self, name: str) -> Dict[str, Any]:
        """
        Load a snapshot payload.

        Args:
            name: Snapshot name

        Returns:
            The decoded JSON payload

        Raises:
            StorageNotFoundError: If the snapshot is not found
            StorageError: If the snapshot is not valid JSON
        """
        content = self._read(name)
        try:
            return json.loads(content.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise StorageError(f"Snapshot {name} is corrupted: {e}")
