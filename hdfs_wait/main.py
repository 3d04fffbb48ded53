#!/usr/bin/env python3
"""
hdfs-wait command line entry point.

Runs one HdfsWaitJob. Settings come from settings.env / HDFS_WAIT_*
environment variables, an optional Azkaban properties file (--properties, or
the JOB_PROP_FILE variable Azkaban exports for command jobs) and command line
flags, in increasing order of priority.
"""

import argparse
import asyncio
import logging
import os
import signal
import sys
from typing import List, Optional

from pydantic import ValidationError

from .config import JobSettings, load_properties_file
from .core.exceptions import (
    DirectoryListingError,
    InvalidDurationFormatError,
    PollCancelledError,
    TimeoutExceededError,
)
from .job import HdfsWaitJob
from .logging_config import setup_logging

EXIT_SUCCESS = 0
EXIT_JOB_FAILED = 1
EXIT_CONFIG_ERROR = 2
EXIT_CANCELLED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hdfs-wait",
        description="Wait for a fresh folder to appear in a directory",
    )
    parser.add_argument("--name", default="hdfsWaitJob", help="Job name used in log messages")
    parser.add_argument("--properties", help="Azkaban .job or .properties file")
    parser.add_argument("--path", dest="path_to_directory", help="Directory to poll (%%Y %%m %%d allowed)")
    parser.add_argument("--freshness", help='Maximum folder age, e.g. "1H 30M"')
    parser.add_argument("--timeout", help='Total time to wait, e.g. "2H"')
    parser.add_argument("--sleep-interval", dest="sleep_interval", help='Time between polls (default "1M")')
    parser.add_argument(
        "--fail-on-timeout",
        dest="force_job_to_fail",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Fail the job when the timeout is reached (--no-fail-on-timeout to turn off)",
    )
    parser.add_argument(
        "--check-exact-path",
        dest="check_exact_path",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Succeed as soon as the path itself exists",
    )
    parser.add_argument("--filesystem", choices=["hdfs", "local"], help="Filesystem to poll")
    return parser


def load_settings(args: argparse.Namespace) -> JobSettings:
    properties_file = args.properties or os.environ.get("JOB_PROP_FILE")
    properties = load_properties_file(properties_file) if properties_file else {}

    return JobSettings.from_properties(
        properties,
        path_to_directory=args.path_to_directory,
        freshness=args.freshness,
        timeout=args.timeout,
        sleep_interval=args.sleep_interval,
        force_job_to_fail=args.force_job_to_fail,
        check_exact_path=args.check_exact_path,
        filesystem=args.filesystem,
    )


async def run_job(job: HdfsWaitJob) -> None:
    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except (NotImplementedError, RuntimeError, ValueError):
            # No signal handlers on Windows loops or outside the main thread
            pass

    final_state = await job.run(stop_event=stop_event)
    logging.info(f"Job {job.name} finished in state {final_state.value}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args)
    except (ValidationError, ValueError, OSError) as e:
        print(f"hdfs-wait: invalid configuration: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    setup_logging(settings)

    try:
        job = HdfsWaitJob(args.name, settings)
        asyncio.run(run_job(job))
    except (InvalidDurationFormatError, ValidationError) as e:
        logging.error(f"ERROR: Invalid job configuration: {e}")
        return EXIT_CONFIG_ERROR
    except PollCancelledError as e:
        logging.warning(f"Job cancelled: {e}")
        return EXIT_CANCELLED
    except KeyboardInterrupt:
        logging.warning("Job interrupted")
        return EXIT_CANCELLED
    except (TimeoutExceededError, DirectoryListingError) as e:
        logging.error(f"ERROR: {e}. JOB TERMINATED.")
        return EXIT_JOB_FAILED

    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
