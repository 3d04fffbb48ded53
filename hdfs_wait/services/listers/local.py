"""
Local filesystem lister.

Lists directories on a local disk or a mounted share (NFS, an HDFS FUSE
mount, SMB). Every filesystem call is guarded by a timeout so an unresponsive
network mount surfaces as a listing error instead of hanging the job.
"""

import asyncio
import logging
import stat
from pathlib import Path
from typing import List, Optional

import aiofiles.os

from hdfs_wait.core.exceptions import DirectoryListingError, PathNotFoundError
from hdfs_wait.models import DirectoryEntry
from .base import DirectoryLister


class LocalDirectoryLister(DirectoryLister):

    def __init__(self, item_timeout: float = 5.0, logger: Optional[logging.Logger] = None):
        self._item_timeout = item_timeout
        self._logger = logger or logging.getLogger(__name__)

    async def exists(self, path: str) -> bool:
        try:
            return await asyncio.wait_for(
                aiofiles.os.path.exists(path), timeout=self._item_timeout
            )
        except asyncio.TimeoutError:
            raise DirectoryListingError(path, "existence check timed out")

    async def list_children(self, path: str) -> List[DirectoryEntry]:
        try:
            path_is_dir = await asyncio.wait_for(
                aiofiles.os.path.isdir(path), timeout=self._item_timeout
            )
        except asyncio.TimeoutError:
            raise DirectoryListingError(path, "directory accessibility check timed out")

        if not path_is_dir:
            raise PathNotFoundError(path)

        try:
            names = await asyncio.wait_for(
                aiofiles.os.listdir(path), timeout=self._item_timeout
            )
        except (FileNotFoundError, NotADirectoryError) as e:
            # Removed between the isdir check and the listing
            raise PathNotFoundError(path) from e
        except asyncio.TimeoutError:
            raise DirectoryListingError(path, "directory listing timed out")
        except OSError as e:
            raise DirectoryListingError(path, str(e)) from e

        entries = []
        for name in names:
            entry = await self._get_entry(path, name)
            if entry:
                entries.append(entry)

        self._logger.debug(f"Listed {len(entries)} entries in {path}")
        return entries

    async def _get_entry(self, parent_path: str, name: str) -> Optional[DirectoryEntry]:
        entry_path = str(Path(parent_path) / name)

        try:
            stat_result = await asyncio.wait_for(
                aiofiles.os.stat(entry_path), timeout=self._item_timeout
            )
        except asyncio.TimeoutError:
            self._logger.warning(f"Metadata fetch timed out for: {entry_path}")
            return None
        except OSError as e:
            self._logger.debug(f"Skipping {entry_path}: {e}")
            return None

        return DirectoryEntry(
            name=name,
            path=entry_path,
            is_directory=stat.S_ISDIR(stat_result.st_mode),
            modified_time_ms=stat_result.st_mtime_ns // 1_000_000,
        )
