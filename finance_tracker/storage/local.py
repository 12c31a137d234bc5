"""
Local filesystem snapshot storage.

Snapshots are stored as ``<name>.json`` files under a base directory. This is
the default backend for a single local user.
"""

import logging
from pathlib import Path
from typing import List

from .base import (
    SnapshotStorage,
    StorageError,
    StorageNotFoundError,
    StoragePermissionError,
)

logger = logging.getLogger(__name__)

SNAPSHOT_SUFFIX = ".json"


class LocalSnapshotStorage(SnapshotStorage):
    """Snapshot storage backed by a local directory."""

    def __init__(self, base_path: str = "snapshots", create_dirs: bool = True):
        """
        Initialize the local snapshot storage.

        Args:
            base_path: Directory holding snapshot files
            create_dirs: Whether to create the directory if it doesn't exist
        """
        self.base_path = Path(base_path)
        self.create_dirs = create_dirs

        if self.create_dirs:
            self.base_path.mkdir(parents=True, exist_ok=True)

    def _get_file_path(self, name: str) -> Path:
        """
        Get the file path for a snapshot name.

        Only the final path component is used, so names cannot escape the
        base directory.
        """
        safe_name = name.replace("\\", "/").split("/")[-1]
        if safe_name in ("", ".", ".."):
            raise StorageError(f"Invalid snapshot name: {name!r}")
        return self.base_path / f"{safe_name}{SNAPSHOT_SUFFIX}"

    def _write(self, name: str, content: bytes) -> str:
        local_path = self._get_file_path(name)
        try:
            if self.create_dirs:
                local_path.parent.mkdir(parents=True, exist_ok=True)
            local_path.write_bytes(content)
        except PermissionError as e:
            raise StoragePermissionError(f"Permission denied storing snapshot {name}: {e}")
        except OSError as e:
            raise StorageError(f"Failed to store snapshot {name}: {e}")

        logger.info(f"Stored snapshot {name} at {local_path}")
        return str(local_path)

    def _read(self, name: str) -> bytes:
        local_path = self._get_file_path(name)
        if not local_path.exists():
            raise StorageNotFoundError(f"Snapshot not found: {name}")
        try:
            return local_path.read_bytes()
        except PermissionError as e:
            raise StoragePermissionError(f"Permission denied reading snapshot {name}: {e}")
        except OSError as e:
            raise StorageError(f"Failed to read snapshot {name}: {e}")

    def delete_snapshot(self, name: str) -> bool:
        local_path = self._get_file_path(name)
        if not local_path.exists():
            return False
        try:
            local_path.unlink()
        except PermissionError as e:
            raise StoragePermissionError(f"Permission denied deleting snapshot {name}: {e}")
        except OSError as e:
            raise StorageError(f"Failed to delete snapshot {name}: {e}")
        return True

    def snapshot_exists(self, name: str) -> bool:
        return self._get_file_path(name).exists()

    def list_snapshots(self) -> List[str]:
        if not self.base_path.exists():
            return []
        return sorted(path.stem for path in self.base_path.glob(f"*{SNAPSHOT_SUFFIX}"))
