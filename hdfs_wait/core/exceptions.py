# hdfs_wait/core/exceptions.py


class HdfsWaitError(Exception):
    """Base class for all errors raised by the wait job."""
    pass


class InvalidDurationFormatError(HdfsWaitError, ValueError):
    """Raised when a duration string contains a malformed token."""
    def __init__(self, text: str, token: str):
        self.text = text
        self.token = token
        super().__init__(
            f"Invalid time specification: '{text}'. Token '{token}' must be a "
            f"non-negative integer followed by seconds (S), minutes (M), "
            f"hours (H), or days (D)."
        )


class DirectoryListingError(HdfsWaitError):
    """Raised when a directory could not be listed."""
    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot list {path}: {reason}")


class PathNotFoundError(DirectoryListingError):
    """Raised when the directory to poll does not exist."""
    def __init__(self, path: str, reason: str = "path is not a directory or does not exist"):
        super().__init__(path, reason)


class TimeoutExceededError(HdfsWaitError):
    """Raised when no fresh folder was found in time and the job must fail."""
    def __init__(self, path: str, timeout_ms: int):
        self.path = path
        self.timeout_ms = timeout_ms
        super().__init__(
            f"No fresh folder found in {path} within {timeout_ms} ms. "
            f"Forcing job to fail after timeout."
        )


class PollCancelledError(HdfsWaitError):
    """Raised when a wait is stopped through its stop event."""
    pass


class InvalidTransitionError(HdfsWaitError):
    """Raised when a poll state transition is not allowed."""
    def __init__(self, path: str, from_state: str, to_state: str):
        self.path = path
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Invalid state transition for {path}: "
            f"Cannot move from '{from_state}' to '{to_state}'."
        )
