"""Login streak: consecutive local calendar days with a qualifying login or check-in."""
from datetime import datetime, timedelta, tzinfo

from app.domain.clock import local_day


def next_streak(
    now: datetime,
    last_increment: datetime | None,
    current_streak: int,
    tz: tzinfo | None = None,
) -> tuple[int, datetime | None]:
    """
    Pure function: streak after a login at ``now``.

    Args:
        now:             Moment of the login / check-in.
        last_increment:  Full timestamp of the previous increment (may be None).
        current_streak:  Streak stored on the account.
        tz:              Local time zone used to cut calendar days.

    Returns:
        (new_streak, new_last_increment). Same-day calls return the inputs
        unchanged; new_last_increment is the full ``now`` timestamp otherwise.
    """
    today = local_day(now, tz)

    if last_increment is not None and local_day(last_increment, tz) == today:
        return current_streak, last_increment

    if last_increment is not None and local_day(last_increment, tz) == today - timedelta(days=1):
        return current_streak + 1, now

    return 1, now
