"""
Fee rules: monthly subscription tier and special-event booking bands
"""
from dataclasses import dataclass
from decimal import Decimal

ADMIN_ADJUST = "admin-adjust"

# (inclusive upper bound of attendees, fee)
EVENT_FEE_BANDS: tuple[tuple[int, Decimal], ...] = (
    (300, Decimal("500")),
    (600, Decimal("700")),
    (1000, Decimal("1200")),
)


@dataclass(frozen=True)
class SubscriptionPlans:
    standard: Decimal
    large_family: Decimal
    large_family_threshold: int


DEFAULT_PLANS = SubscriptionPlans(
    standard=Decimal("63"),
    large_family=Decimal("75"),
    large_family_threshold=5,
)


def select_monthly_fee(family_size: int, plans: SubscriptionPlans) -> Decimal:
    """Large-family fee only when family_size is strictly above the threshold."""
    if family_size > plans.large_family_threshold:
        return plans.large_family
    return plans.standard


def calculate_event_fee(attendee_count: int | None) -> Decimal | str | None:
    """
    Booking fee for an event pickup.

    Returns:
        Decimal fee for up to 1000 attendees, ADMIN_ADJUST above that
        (priced manually by an admin), None when the count is missing or
        not positive.
    """
    if attendee_count is None or attendee_count <= 0:
        return None
    for upper_bound, fee in EVENT_FEE_BANDS:
        if attendee_count <= upper_bound:
            return fee
    return ADMIN_ADJUST
