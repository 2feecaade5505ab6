"""
Calendar-day helpers shared by the day-based account rules.

All rules compare *local* calendar days. Timestamps are stored in UTC;
a naive timestamp is read as UTC when a time zone is given (SQLite returns
TIMESTAMP columns without tzinfo). Without a time zone the timestamp is
taken as already local.
"""
from datetime import date, datetime, timezone, tzinfo


def to_local(moment: datetime, tz: tzinfo | None = None) -> datetime:
    if tz is None:
        return moment
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(tz)


def local_day(moment: datetime, tz: tzinfo | None = None) -> date:
    """Midnight-normalised local day of a timestamp."""
    return to_local(moment, tz).date()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
