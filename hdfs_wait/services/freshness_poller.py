import asyncio
import logging
from datetime import timedelta
from typing import Optional

from hdfs_wait.core.clock import Clock, SystemClock
from hdfs_wait.core.exceptions import PollCancelledError
from hdfs_wait.models import PollConfig, PollOutcome
from .listers.base import DirectoryLister


class FreshnessPoller:
    """
    Waits for a fresh folder to appear under a directory.

    A child directory is fresh when now - modified_time <= freshness. The
    directory is listed every poll interval until a fresh folder is found or
    the timeout passes. A missing directory fails the wait immediately.
    """

    def __init__(
        self,
        lister: DirectoryLister,
        clock: Optional[Clock] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._lister = lister
        self._clock = clock or SystemClock()
        self._logger = logger or logging.getLogger(__name__)

    async def check_directory(
        self, path: str, freshness_ms: int, check_exact_path: bool = False
    ) -> bool:
        """
        Run one listing cycle.

        Returns:
            True if a child folder of path is fresh enough, or in exact path
            mode, if path itself exists.

        Raises:
            PathNotFoundError: If path does not exist (not in exact path mode).
            DirectoryListingError: If path could not be listed.
        """
        if check_exact_path:
            path_exists = await self._lister.exists(path)
            if path_exists:
                self._logger.info(f"SUCCESS: Found the exact path {path}")
            return path_exists

        entries = await self._lister.list_children(path)
        now_ms = self._clock.now_ms()

        for entry in entries:
            if not entry.is_directory:
                continue

            age_ms = now_ms - entry.modified_time_ms
            if age_ms <= freshness_ms:
                self._logger.info(f"We found this fresh folder in the filePath: {entry.name}")
                return True

        return False

    async def wait_for_fresh_folder(
        self, config: PollConfig, stop_event: Optional[asyncio.Event] = None
    ) -> PollOutcome:
        """
        Poll config.path until a fresh folder shows up or config.timeout_ms passes.

        Raises:
            PathNotFoundError: If config.path does not exist. Never retried.
            DirectoryListingError: If config.path could not be listed.
            PollCancelledError: If stop_event is set while waiting.
        """
        deadline_ms = self._clock.now_ms() + config.timeout_ms
        timeout_minutes = timedelta(milliseconds=config.timeout_ms) // timedelta(minutes=1)
        attempts = 0

        # Always at least one listing attempt, so a missing path fails even with
        # a zero timeout. No attempt is made once the deadline has passed.
        while True:
            attempts += 1
            if await self.check_directory(
                config.path, config.freshness_ms, config.check_exact_path
            ):
                self._logger.info(
                    f"SUCCESS: Fresh folder found in {config.path} after {attempts} attempt(s)"
                )
                return PollOutcome.FRESH_FOLDER_FOUND

            remaining_ms = deadline_ms - self._clock.now_ms()
            if remaining_ms <= 0:
                break

            sleep_ms = min(config.poll_interval_ms, remaining_ms)
            self._logger.info(
                f"STATUS: No fresh folders found during latest polling. "
                f"Now sleeping for {sleep_ms} ms before polling again."
            )
            self._logger.info(
                f"REMINDER: Job will time out {timeout_minutes} minutes after instantiation."
            )

            if await self._clock.sleep(sleep_ms, stop_event):
                self._logger.warning(f"Polling of {config.path} stopped after {attempts} attempt(s)")
                raise PollCancelledError(f"Polling of {config.path} was cancelled")

            if self._clock.now_ms() >= deadline_ms:
                break

        self._logger.warning(
            f"WARNING: There were no folders found in {config.path} "
            f"that were fresh enough before reaching timeout."
        )
        return PollOutcome.TIMED_OUT
