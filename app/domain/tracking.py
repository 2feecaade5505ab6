"""
Collection-truck tracking helpers (pure)
"""
import re
from datetime import datetime, timedelta, timezone

ACTIVE_DRIVER_WINDOW = timedelta(minutes=15)
ETA_NOT_AVAILABLE = "Not available"


def _aware(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def find_active_driver(drivers, now: datetime):
    """First driver that reported a location within the last 15 minutes, or None."""
    cutoff = _aware(now) - ACTIVE_DRIVER_WINDOW
    for driver in drivers:
        if driver.last_location_at is None:
            continue
        if _aware(driver.last_location_at) > cutoff:
            return driver
    return None


def _minutes_label(minutes: int) -> str:
    if minutes < 1:
        return "< 1 min"
    return f"{minutes} min"


def format_eta(raw_text: str) -> str:
    """
    Turn a free-text model reply into an ETA label.

    Example:
        >>> format_eta("15")
        '15 min'
        >>> format_eta("About 7 minutes by car")
        '7 min'
        >>> format_eta("unknown")
        'Not available'
    """
    text = (raw_text or "").strip()
    leading = re.match(r"^-?\d+", text)
    if leading:
        return _minutes_label(int(leading.group(0)))

    match = re.search(r"(\d+)\s*minutes?", text)
    if match:
        return _minutes_label(int(match.group(1)))

    return ETA_NOT_AVAILABLE
