"""
Temporary upload cleanup.

Deletes uploaded resumes after a fixed retention window, independent of
session state, to bound disk usage.

Dependencies: asyncio, pathlib
System role: Upload directory retention
"""

import asyncio
import logging
import time
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class FileCleanupService:
    """Periodic and scheduled deletion of uploaded files."""

    def __init__(
        self,
        directory: str | Path,
        retention_seconds: float = 10 * 60,
        interval_seconds: float = 5 * 60,
    ) -> None:
        """
        Initialize cleanup service.

        Args:
            directory: Upload directory (created if missing)
            retention_seconds: Age after which a file is deleted
            interval_seconds: Cadence of the periodic sweep
        """
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)
        self.retention_seconds = retention_seconds
        self.interval_seconds = interval_seconds
        self._periodic_task: asyncio.Task | None = None
        self._scheduled: set[asyncio.Task] = set()

    def delete_file(self, file_path: str | Path) -> bool:
        """
        Delete a file if it exists.

        Returns:
            bool: True if a file was deleted
        """
        path = Path(file_path)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.error(
                "Error deleting file",
                extra={"file_path": str(path), "error_type": type(e).__name__, "error_msg": str(e)},
            )
            return False

        logger.info("File deleted", extra={"file_path": str(path)})
        return True

    def _files(self) -> list[Path]:
        if not self.directory.exists():
            return []
        return [
            path for path in self.directory.iterdir()
            if path.is_file() and not path.name.startswith(".")
        ]

    def cleanup_old_files(self) -> int:
        """
        Delete files older than the retention window.

        Returns:
            int: Number of files deleted
        """
        now = time.time()
        deleted = 0
        for path in self._files():
            try:
                age = now - path.stat().st_mtime
            except OSError as e:
                logger.error("Error checking file", extra={"file_path": str(path), "error_msg": str(e)})
                continue
            if age > self.retention_seconds and self.delete_file(path):
                deleted += 1

        if deleted:
            logger.info("Cleaned up old files", extra={"deleted_count": deleted})
        return deleted

    def schedule_cleanup(self, session_id: str, file_path: str | Path, delay_seconds: float) -> asyncio.Task:
        """Delete a file after a delay on the running event loop."""

        async def _delete_later() -> None:
            await asyncio.sleep(delay_seconds)
            self.delete_file(file_path)
            logger.info("Scheduled cleanup completed", extra={"session_id": session_id})

        task = asyncio.get_running_loop().create_task(_delete_later())
        self._scheduled.add(task)
        task.add_done_callback(self._scheduled.discard)
        return task

    def start(self) -> None:
        """Run one sweep now and start the periodic sweep."""
        if self._periodic_task is not None and not self._periodic_task.done():
            return
        self.cleanup_old_files()
        self._periodic_task = asyncio.get_running_loop().create_task(self._periodic_loop())
        logger.info(
            "File cleanup service started",
            extra={"interval_seconds": self.interval_seconds, "directory": str(self.directory)},
        )

    async def stop(self) -> None:
        """Cancel the periodic sweep and any pending scheduled deletions."""
        tasks = list(self._scheduled)
        if self._periodic_task is not None:
            tasks.append(self._periodic_task)
            self._periodic_task = None
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._scheduled.clear()

    async def _periodic_loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            self.cleanup_old_files()

    def stats(self) -> dict[str, Any]:
        file_count = 0
        total_size = 0
        for path in self._files():
            try:
                total_size += path.stat().st_size
                file_count += 1
            except OSError as e:
                logger.error("Error reading file stats", extra={"file_path": str(path), "error_msg": str(e)})

        return {
            "file_count": file_count,
            "total_size": total_size,
            "total_size_mb": round(total_size / (1024 * 1024), 2),
        }
