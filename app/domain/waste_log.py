"""
Waste-log accrual: one log per local day, fine after three Mixed logs in a row
"""
from dataclasses import dataclass, replace
from datetime import datetime, tzinfo
from decimal import Decimal

from app.domain.account import AccountSnapshot
from app.domain.clock import local_day

WASTE_WET = "Wet"
WASTE_DRY = "Dry"
WASTE_MIXED = "Mixed"

WASTE_TYPES = (WASTE_WET, WASTE_DRY, WASTE_MIXED)

MIXED_FINE_THRESHOLD = 3
MIXED_FINE_AMOUNT = Decimal("100")

MIXED_FINE_MESSAGE = (
    'A fine of ₹100 has been applied to your account for logging "Mixed Waste" '
    "on three consecutive days. Please ensure proper waste segregation to avoid future fines."
)


@dataclass(frozen=True)
class WasteLogOutcome:
    accepted: bool
    new_consecutive_count: int
    fine_applied: bool
    new_balance: Decimal
    account: AccountSnapshot


def apply_waste_log(
    account: AccountSnapshot,
    waste_type: str,
    now: datetime,
    tz: tzinfo | None = None,
) -> WasteLogOutcome:
    """
    Pure function: account state after logging ``waste_type`` at ``now``.

    A second log on the same local day is not accepted and leaves the
    account untouched. The caller persists the log record and queues
    MIXED_FINE_MESSAGE when ``fine_applied`` is set.
    """
    if account.last_waste_log_date is not None and local_day(account.last_waste_log_date, tz) == local_day(now, tz):
        return WasteLogOutcome(
            accepted=False,
            new_consecutive_count=account.consecutive_mixed_waste_logs,
            fine_applied=False,
            new_balance=account.outstanding_balance,
            account=account,
        )

    count = account.consecutive_mixed_waste_logs
    balance = account.outstanding_balance
    fine_applied = False

    if waste_type == WASTE_MIXED:
        count += 1
        if count >= MIXED_FINE_THRESHOLD:
            balance = balance + MIXED_FINE_AMOUNT
            count = 0
            fine_applied = True
    else:
        count = 0

    updated = replace(
        account,
        consecutive_mixed_waste_logs=count,
        outstanding_balance=balance,
        last_waste_log_date=now,
    )
    return WasteLogOutcome(
        accepted=True,
        new_consecutive_count=count,
        fine_applied=fine_applied,
        new_balance=balance,
        account=updated,
    )
