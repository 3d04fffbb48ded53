from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class PollOutcome(str, Enum):
    """Terminal result of a single wait."""

    FRESH_FOLDER_FOUND = "FreshFolderFound"
    TIMED_OUT = "TimedOut"


class PollState(str, Enum):
    """
    Lifecycle of a wait job.

    Normal Workflow: Polling -> FreshFound
    Timeout: Polling -> TimedOut -> ForcedFailure (failOnTimeout) or SoftTimeout
    """

    POLLING = "Polling"  # Listing the directory and sleeping between attempts
    FRESH_FOUND = "FreshFound"  # A fresh folder was found, job succeeds
    TIMED_OUT = "TimedOut"  # Deadline passed without a fresh folder
    FORCED_FAILURE = "ForcedFailure"  # Timed out and the job is forced to fail
    SOFT_TIMEOUT = "SoftTimeout"  # Timed out but the job still succeeds


class DirectoryEntry(BaseModel):
    """One child of a listed directory."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Entry name without parent path")
    path: str = Field(..., description="Full path to the entry")
    is_directory: bool = Field(..., description="True if entry is a directory")
    modified_time_ms: int = Field(..., description="Last modification time, epoch milliseconds")


class PollConfig(BaseModel):
    """Immutable configuration for one wait."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., min_length=1, description="Directory whose children are polled")
    freshness_ms: int = Field(..., ge=0, description="Maximum age of a fresh folder")
    timeout_ms: int = Field(..., ge=0, description="Total time to keep polling")
    poll_interval_ms: int = Field(60_000, ge=0, description="Sleep between listing attempts")
    fail_on_timeout: bool = Field(False, description="Fail the job when the timeout is reached")
    check_exact_path: bool = Field(
        False, description="Succeed as soon as the path itself exists, ignoring freshness"
    )
