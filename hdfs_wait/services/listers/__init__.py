"""
Directory listers.

Provides the DirectoryLister capability used by the poller and its
implementations for HDFS and for local or mounted filesystems.
"""

import logging
from typing import Optional

from hdfs_wait.config import JobSettings

from .base import DirectoryLister
from .hdfs import HdfsDirectoryLister
from .local import LocalDirectoryLister


def create_lister(
    settings: JobSettings, logger: Optional[logging.Logger] = None
) -> DirectoryLister:
    """Build the lister selected by settings.filesystem."""
    if settings.filesystem == "local":
        return LocalDirectoryLister(item_timeout=settings.listing_timeout_seconds, logger=logger)

    return HdfsDirectoryLister(
        host=settings.hdfs_host,
        port=settings.hdfs_port,
        user=settings.hdfs_user,
        logger=logger,
    )


__all__ = [
    "DirectoryLister",
    "HdfsDirectoryLister",
    "LocalDirectoryLister",
    "create_lister",
]
