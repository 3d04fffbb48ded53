import logging
from pathlib import Path
from typing import Dict, Iterable, Iterator, Literal, Mapping, Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Job property names as written in Azkaban .job files
AZKABAN_PROPERTY_NAMES = {
    "pathToDirectory": "path_to_directory",
    "freshness": "freshness",
    "timeout": "timeout",
    "sleepInterval": "sleep_interval",
    "forceJobToFail": "force_job_to_fail",
    "checkExactPath": "check_exact_path",
}

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")


class JobSettings(BaseSettings):
    # Directory to poll, may contain %Y %m %d placeholders
    path_to_directory: str

    # Durations in the compact "1D 2H 3M 4S" format
    freshness: str
    timeout: str
    sleep_interval: str = "1M"

    # Policy
    force_job_to_fail: bool = False  # Fail the job when the timeout is reached
    check_exact_path: bool = False  # Only check that the path itself exists

    # Filesystem
    filesystem: Literal["hdfs", "local"] = "hdfs"
    hdfs_host: str = "default"  # "default" reads fs.defaultFS from the Hadoop config
    hdfs_port: int = 0
    hdfs_user: Optional[str] = None
    listing_timeout_seconds: float = 5.0  # Per call, local filesystem only

    path_timezone: str = "America/Los_Angeles"

    # Logging konfiguration
    log_level: str = "INFO"
    log_file_path: str = "logs/hdfs_wait.log"  # Empty string disables the log file
    log_retention_days: int = 30

    model_config = SettingsConfigDict(
        env_prefix="HDFS_WAIT_",
        env_file="settings.env",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got '{value}'")
        return level

    @field_validator("path_timezone")
    @classmethod
    def validate_path_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown time zone '{value}'") from e
        return value

    @property
    def log_directory(self) -> Optional[Path]:
        """Returnerer log directory som Path objekt"""
        if not self.log_file_path:
            return None
        return Path(self.log_file_path).parent

    @classmethod
    def from_properties(cls, properties: Mapping[str, str], **overrides) -> "JobSettings":
        """
        Build settings from job properties.

        Azkaban property names (pathToDirectory, sleepInterval, ...) and field
        names are both accepted. Overrides that are not None win over properties.
        """
        values: Dict[str, object] = {}

        for key, value in properties.items():
            field_name = AZKABAN_PROPERTY_NAMES.get(key, key)
            if field_name in cls.model_fields:
                values[field_name] = value

        # Underscore keys (_env_file, ...) go to pydantic-settings as given
        values.update(
            {key: value for key, value in overrides.items() if value is not None or key.startswith("_")}
        )
        return cls(**values)


def load_properties_file(path: str) -> Dict[str, str]:
    """
    Read a Java-style .properties or Azkaban .job file.

    Follows java.util.Properties: '=', ':' or whitespace separators, '#' and
    '!' comments, trailing backslash line continuation and backslash escapes
    (\\:, \\=, \\ , \\t, \\uXXXX, ...) in keys and values.

    Raises:
        ValueError: On a malformed \\uXXXX escape.
    """
    properties: Dict[str, str] = {}

    with open(path, "r", encoding="utf-8") as f:
        for line in _logical_lines(f):
            key, value = _split_property(line)
            properties[key] = value

    logging.getLogger(__name__).debug(f"Loaded {len(properties)} properties from {path}")
    return properties


_WHITESPACE = " \t\f"
_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}


def _logical_lines(lines: Iterable[str]) -> Iterator[str]:
    pending: Optional[str] = None

    for raw_line in lines:
        line = raw_line.rstrip("\r\n").lstrip(_WHITESPACE)

        if pending is None:
            if not line or line[0] in "#!":
                continue
        else:
            line = pending + line
            pending = None

        # An odd number of trailing backslashes continues the line
        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2 == 1:
            pending = line[:-1]
            continue

        yield line

    if pending:
        yield pending


def _split_property(line: str) -> Tuple[str, str]:
    index = 0
    while index < len(line):
        char = line[index]
        if char == "\\":
            index += 2
            continue
        if char in "=:" or char in _WHITESPACE:
            break
        index += 1

    key = line[:index]
    rest = line[index:].lstrip(_WHITESPACE)
    if rest[:1] in ("=", ":"):
        rest = rest[1:].lstrip(_WHITESPACE)

    return _unescape(key), _unescape(rest)


def _unescape(text: str) -> str:
    if "\\" not in text:
        return text

    result = []
    index = 0
    while index < len(text):
        char = text[index]
        if char != "\\" or index + 1 == len(text):
            result.append(char)
            index += 1
            continue

        escaped = text[index + 1]
        if escaped == "u":
            digits = text[index + 2:index + 6]
            if len(digits) != 4:
                raise ValueError(f"Malformed \\uXXXX encoding in '{text}'")
            result.append(chr(int(digits, 16)))
            index += 6
            continue

        result.append(_ESCAPES.get(escaped, escaped))
        index += 2

    return "".join(result)
