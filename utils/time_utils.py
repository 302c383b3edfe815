# utils/time_utils.py

from datetime import datetime
import logging
import re
import pytz

logger = logging.getLogger(__name__)

# "Never checked" marker for mod timestamps
EPOCH = datetime(1970, 1, 1, tzinfo=pytz.utc)

_STEAM_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})\s*([ap]m)$", re.IGNORECASE)


def utc_now():
    """Returns current datetime in UTC."""
    return datetime.now(pytz.utc)


def is_epoch(dt: datetime) -> bool:
    return dt == EPOCH


def parse_iso(value: str) -> datetime:
    """Parses an ISO-8601 string. Naive values are taken as UTC."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=pytz.utc)
    return parsed.astimezone(pytz.utc)


def to_iso(dt: datetime) -> str:
    return dt.astimezone(pytz.utc).isoformat()


def parse_workshop_date(raw: str, now: datetime | None = None) -> datetime:
    """
    Parses the 'Updated' stat of a Steam Workshop page.

    Steam renders either "12 Mar, 2023 @ 4:05pm" or, for the current year,
    "12 Mar @ 4:05pm" (US locale swaps day and month: "Mar 12 @ 4:05pm").
    Pages are served without running JavaScript so the value is read as UTC.
    A date without a year that lands in the future belongs to last year.
    """
    now = now or utc_now()
    tokens = [t for t in raw.replace(",", " ").replace("@", " ").split() if t]
    if len(tokens) not in (3, 4):
        raise ValueError(f"Unexpected workshop date format: '{raw}'")

    time_token = tokens[-1]
    date_tokens = tokens[:-1]
    year_given = len(date_tokens) == 3
    if year_given:
        year = int(date_tokens[2])
        date_tokens = date_tokens[:2]
    else:
        year = now.year

    if date_tokens[0].isdigit():
        day, month = date_tokens[0], date_tokens[1]
    else:
        month, day = date_tokens[0], date_tokens[1]

    match = _STEAM_TIME_RE.match(time_token)
    if not match:
        raise ValueError(f"Unexpected workshop time format: '{raw}'")
    hour, minute, meridiem = match.groups()

    parsed = datetime.strptime(
        f"{int(day)} {month[:3].title()} {year} {int(hour)}:{minute} {meridiem.upper()}",
        "%d %b %Y %I:%M %p",
    ).replace(tzinfo=pytz.utc)

    if not year_given and parsed > now:
        logger.warning("Last modified is in the future, subtracting one year")
        parsed = parsed.replace(year=parsed.year - 1)
    return parsed


def parse_spotrep_date(raw: str) -> datetime:
    """Parses SpotRep post dates such as 'March 5, 2024' (midnight UTC)."""
    return datetime.strptime(" ".join(raw.split()), "%B %d, %Y").replace(tzinfo=pytz.utc)
