"""Parser for compact duration strings such as "3M 2S" or "1D 12H"."""

import logging
import re
from datetime import timedelta

from hdfs_wait.core.exceptions import InvalidDurationFormatError

UNIT_MILLISECONDS = {
    "S": int(timedelta(seconds=1).total_seconds() * 1000),
    "M": int(timedelta(minutes=1).total_seconds() * 1000),
    "H": int(timedelta(hours=1).total_seconds() * 1000),
    "D": int(timedelta(days=1).total_seconds() * 1000),
}

_TOKEN_PATTERN = re.compile(r"^([0-9]+)([A-Za-z])$")


def parse_duration(text: str) -> int:
    """
    Convert a duration string to milliseconds.

    Each whitespace separated token is a non-negative integer followed by one
    unit character: S (seconds), M (minutes), H (hours) or D (days). Tokens
    are summed, so "3M 2S" and "2S 3M" both give 182000. Empty input gives 0.

    Raises:
        InvalidDurationFormatError: If any token is malformed.
    """
    total_ms = 0

    for token in text.split():
        match = _TOKEN_PATTERN.match(token)
        if not match or match.group(2) not in UNIT_MILLISECONDS:
            error = InvalidDurationFormatError(text, token)
            logging.getLogger(__name__).error(str(error))
            raise error

        magnitude, unit = match.groups()
        total_ms += int(magnitude) * UNIT_MILLISECONDS[unit]

    return total_ms
