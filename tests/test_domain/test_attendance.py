"""
Tests for staff attendance classification (10:00–10:30 local, inclusive)
"""
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from app.domain.attendance import (
    classify_attendance,
    ATTENDANCE_PRESENT,
    ATTENDANCE_ABSENT,
)

IST = ZoneInfo("Asia/Kolkata")


@pytest.mark.parametrize("hms, expected", [
    ((9, 59, 59), ATTENDANCE_ABSENT),
    ((10, 0, 0), ATTENDANCE_PRESENT),
    ((10, 15, 0), ATTENDANCE_PRESENT),
    ((10, 30, 0), ATTENDANCE_PRESENT),
    ((10, 30, 1), ATTENDANCE_ABSENT),
    ((16, 0, 0), ATTENDANCE_ABSENT),
])
def test_window_bounds(hms, expected):
    now = datetime(2026, 10, 5, *hms, tzinfo=IST)
    assert classify_attendance(now, tz=IST) == expected


def test_utc_timestamp_is_converted_to_local_time():
    # 04:45 UTC == 10:15 IST
    now = datetime(2026, 10, 5, 4, 45, tzinfo=timezone.utc)
    assert classify_attendance(now, tz=IST) == ATTENDANCE_PRESENT
    assert classify_attendance(now, tz=timezone.utc) == ATTENDANCE_ABSENT


def test_without_zone_wall_clock_is_used():
    assert classify_attendance(datetime(2026, 10, 5, 10, 0)) == ATTENDANCE_PRESENT
