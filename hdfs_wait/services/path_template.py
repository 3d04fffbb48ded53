"""Date placeholders in the directory path, e.g. /data/events/%Y/%m/%d."""

import logging
from datetime import datetime
from typing import Dict, Optional
from zoneinfo import ZoneInfo

DEFAULT_TIMEZONE = "America/Los_Angeles"


def _extract_variables(now: datetime) -> Dict[str, str]:
    return {
        "%Y": now.strftime("%Y"),
        "%m": now.strftime("%m"),
        "%d": now.strftime("%d"),
    }


def _substitute_template(template: str, variables: Dict[str, str]) -> str:
    result = template

    for placeholder, value in variables.items():
        result = result.replace(placeholder, value)

    return result


def expand_path_template(
    path: str,
    now: Optional[datetime] = None,
    timezone: str = DEFAULT_TIMEZONE,
) -> str:
    """
    Replace %Y, %m and %d in path with the current date in timezone.

    A naive `now` is taken as already being in the target timezone.
    """
    if "%" not in path:
        return path

    if now is None:
        now = datetime.now(ZoneInfo(timezone))
    elif now.tzinfo is not None:
        now = now.astimezone(ZoneInfo(timezone))

    expanded = _substitute_template(path, _extract_variables(now))
    logging.getLogger(__name__).debug(f"Path template mapping: '{path}' → '{expanded}'")
    return expanded
