"""Staff attendance: a check-in counts as present only inside the morning window."""
from datetime import datetime, time, tzinfo

from app.domain.clock import to_local

ATTENDANCE_PRESENT = "present"
ATTENDANCE_ABSENT = "absent"
ATTENDANCE_ON_LEAVE = "on_leave"

ATTENDANCE_STATUSES = (ATTENDANCE_PRESENT, ATTENDANCE_ABSENT, ATTENDANCE_ON_LEAVE)

# Inclusive on both ends
WINDOW_START = time(10, 0, 0)
WINDOW_END = time(10, 30, 0)


def classify_attendance(now: datetime, tz: tzinfo | None = None) -> str:
    """
    Return "present" if the local time of ``now`` is within
    [10:00:00.000, 10:30:00.000], otherwise "absent".

    Leave is not handled here: callers skip accounts that are on leave.
    """
    moment = to_local(now, tz).time()
    if WINDOW_START <= moment <= WINDOW_END:
        return ATTENDANCE_PRESENT
    return ATTENDANCE_ABSENT
