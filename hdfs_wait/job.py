"""
HdfsWaitJob - waits for a fresh folder before letting a workflow proceed.

Before the timeout, finding a folder under pathToDirectory that is fresh
enough makes the job succeed. Once the timeout passes the job either succeeds
or fails depending on forceJobToFail.
"""

import asyncio
import logging
from typing import Optional

from hdfs_wait.config import JobSettings
from hdfs_wait.core.clock import Clock, SystemClock
from hdfs_wait.core.exceptions import TimeoutExceededError
from hdfs_wait.core.poll_state_machine import PollStateMachine
from hdfs_wait.models import PollConfig, PollOutcome, PollState
from hdfs_wait.services.duration_parser import parse_duration
from hdfs_wait.services.freshness_poller import FreshnessPoller
from hdfs_wait.services.listers import DirectoryLister, create_lister
from hdfs_wait.services.path_template import expand_path_template


class HdfsWaitJob:

    def __init__(
        self,
        name: str,
        settings: JobSettings,
        lister: Optional[DirectoryLister] = None,
        clock: Optional[Clock] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.name = name
        self._settings = settings
        self._logger = logger or logging.getLogger(f"hdfs_wait.job.{name}")
        self._lister = lister or create_lister(settings, logger=self._logger)
        self._clock = clock or SystemClock()
        self._stop_event = asyncio.Event()

    def build_config(self) -> PollConfig:
        """
        Turn job settings into a PollConfig.

        Raises:
            InvalidDurationFormatError: If freshness, timeout or sleepInterval is malformed.
        """
        settings = self._settings
        return PollConfig(
            path=expand_path_template(settings.path_to_directory, timezone=settings.path_timezone),
            freshness_ms=parse_duration(settings.freshness),
            timeout_ms=parse_duration(settings.timeout),
            poll_interval_ms=parse_duration(settings.sleep_interval),
            fail_on_timeout=settings.force_job_to_fail,
            check_exact_path=settings.check_exact_path,
        )

    def cancel(self) -> None:
        """Stop a running wait at its next sleep."""
        self._stop_event.set()

    async def run(self, stop_event: Optional[asyncio.Event] = None) -> PollState:
        """
        Run the job.

        Returns:
            PollState.FRESH_FOUND, or PollState.SOFT_TIMEOUT when the timeout
            was reached and the job is not forced to fail.

        Raises:
            TimeoutExceededError: On timeout when forceJobToFail is set.
            PathNotFoundError: If the directory does not exist.
            PollCancelledError: If the job was cancelled while sleeping.
        """
        config = self.build_config()
        if stop_event is not None:
            # Carry over a cancel() that arrived before run()
            if self._stop_event.is_set():
                stop_event.set()
            self._stop_event = stop_event
        state_machine = PollStateMachine(config.path, logger=self._logger)
        poller = FreshnessPoller(self._lister, clock=self._clock, logger=self._logger)

        self._logger.info(
            f"STATUS: Job {self.name} started. Checking the directory at {config.path} "
            f"for fresh folders with a sleep interval of {self._settings.sleep_interval}"
        )

        outcome = await poller.wait_for_fresh_folder(config, stop_event=self._stop_event)

        if outcome == PollOutcome.FRESH_FOLDER_FOUND:
            self._logger.info("SUCCESS: Program now quitting after successfully finding a fresh folder.")
            return state_machine.transition(PollState.FRESH_FOUND)

        state_machine.transition(PollState.TIMED_OUT)
        self._logger.info(
            f"RESULT: Job timing out with parameter failOnTimeout = {config.fail_on_timeout}"
        )

        if config.fail_on_timeout:
            state_machine.transition(PollState.FORCED_FAILURE)
            raise TimeoutExceededError(config.path, config.timeout_ms)

        return state_machine.transition(PollState.SOFT_TIMEOUT)
