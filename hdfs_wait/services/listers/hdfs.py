"""
HDFS lister backed by pyarrow's libhdfs binding.

pyarrow calls block, so they run on a worker thread. The filesystem connection
is opened lazily on first use; with host "default" the namenode is taken from
fs.defaultFS in the Hadoop configuration on the CLASSPATH.
"""

import asyncio
import logging
from typing import List, Optional

from pyarrow import fs
from pyarrow.fs import FileInfo, FileSelector, FileType

from hdfs_wait.core.exceptions import DirectoryListingError, PathNotFoundError
from hdfs_wait.models import DirectoryEntry
from .base import DirectoryLister


def entry_from_file_info(info: FileInfo) -> DirectoryEntry:
    mtime_ns = info.mtime_ns
    return DirectoryEntry(
        name=info.base_name,
        path=info.path,
        is_directory=info.type == FileType.Directory,
        modified_time_ms=mtime_ns // 1_000_000 if mtime_ns is not None else 0,
    )


class HdfsDirectoryLister(DirectoryLister):

    def __init__(
        self,
        host: str = "default",
        port: int = 0,
        user: Optional[str] = None,
        filesystem: Optional[fs.FileSystem] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._host = host
        self._port = port
        self._user = user
        self._filesystem = filesystem
        self._logger = logger or logging.getLogger(__name__)

    def _get_filesystem(self) -> fs.FileSystem:
        if self._filesystem is None:
            self._logger.info(f"Connecting to HDFS at {self._host}:{self._port}")
            self._filesystem = fs.HadoopFileSystem(self._host, self._port, user=self._user)
        return self._filesystem

    async def exists(self, path: str) -> bool:
        try:
            info = await asyncio.to_thread(self._get_file_info, path)
        except OSError as e:
            raise DirectoryListingError(path, str(e)) from e
        return info.type != FileType.NotFound

    async def list_children(self, path: str) -> List[DirectoryEntry]:
        try:
            infos = await asyncio.to_thread(self._list_status, path)
        except (FileNotFoundError, NotADirectoryError) as e:
            raise PathNotFoundError(path) from e
        except OSError as e:
            raise DirectoryListingError(path, str(e)) from e

        self._logger.debug(f"Listed {len(infos)} entries in {path}")
        return [entry_from_file_info(info) for info in infos]

    def _get_file_info(self, path: str) -> FileInfo:
        return self._get_filesystem().get_file_info(path)

    def _list_status(self, path: str) -> List[FileInfo]:
        info = self._get_file_info(path)
        if info.type == FileType.NotFound:
            raise FileNotFoundError(path)
        if info.type != FileType.Directory:
            raise NotADirectoryError(path)

        selector = FileSelector(path, recursive=False)
        return self._get_filesystem().get_file_info(selector)
