from datetime import datetime, timezone
from typing import Optional

from .errors import NormalizationError


OUTPUT_FORMAT = "%Y-%m-%d %H:%M:%S UTC"

# Graph API emits e.g. "2015-04-01T12:34:56+0000"
_INPUT_FORMATS = (
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%d %H:%M:%S%z",
)


def _parse(value: str) -> datetime:
    for fmt in _INPUT_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    return datetime.fromisoformat(value)


def normalize_date(value: Optional[str]) -> Optional[str]:
    """
    Render a Graph API timestamp as "YYYY-MM-DD HH:MM:SS UTC".
    - None / "" -> None
    - naive timestamps are taken as UTC
    - anything unparseable raises NormalizationError
    """
    if not value:
        return None
    s = str(value).strip()
    try:
        dt = _parse(s)
    except ValueError as e:
        raise NormalizationError(value, str(e)) from e

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).strftime(OUTPUT_FORMAT)
