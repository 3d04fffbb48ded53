from abc import ABC, abstractmethod
from typing import List

from hdfs_wait.models import DirectoryEntry


class DirectoryLister(ABC):
    """Read-only view of a hierarchical filesystem."""

    @abstractmethod
    async def list_children(self, path: str) -> List[DirectoryEntry]:
        """
        List the immediate children of path.

        Raises:
            PathNotFoundError: If path does not exist or is not a directory.
            DirectoryListingError: If path could not be listed for another reason.
        """

    @abstractmethod
    async def exists(self, path: str) -> bool:
        """Return True if path exists, file or directory."""
