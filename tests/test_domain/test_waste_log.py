"""
Tests for waste-log accrual and the mixed-waste fine
"""
from datetime import datetime
from decimal import Decimal
from zoneinfo import ZoneInfo

from app.domain.account import AccountSnapshot
from app.domain.waste_log import (
    apply_waste_log,
    WASTE_WET,
    WASTE_DRY,
    WASTE_MIXED,
    MIXED_FINE_AMOUNT,
)

IST = ZoneInfo("Asia/Kolkata")


def _day(day, hour=8):
    return datetime(2026, 10, day, hour, 0, tzinfo=IST)


def _account(**kwargs):
    defaults = {"household_id": "HH-TEST-0001", "outstanding_balance": Decimal("75")}
    defaults.update(kwargs)
    return AccountSnapshot(**defaults)


def _log_days(account, types, start_day=1):
    outcomes = []
    for offset, waste_type in enumerate(types):
        outcome = apply_waste_log(account, waste_type, _day(start_day + offset), tz=IST)
        account = outcome.account
        outcomes.append(outcome)
    return outcomes


class TestMixedWasteFine:
    def test_third_consecutive_mixed_day_is_fined(self):
        outcomes = _log_days(_account(), [WASTE_MIXED, WASTE_MIXED, WASTE_MIXED])

        assert [o.fine_applied for o in outcomes] == [False, False, True]
        assert [o.new_consecutive_count for o in outcomes] == [1, 2, 0]
        assert outcomes[-1].new_balance == Decimal("175")
        assert outcomes[-1].account.outstanding_balance == Decimal("75") + MIXED_FINE_AMOUNT

    def test_other_type_resets_the_run(self):
        outcomes = _log_days(_account(), [WASTE_MIXED, WASTE_MIXED, WASTE_WET, WASTE_MIXED, WASTE_MIXED])

        assert not any(o.fine_applied for o in outcomes)
        assert outcomes[2].new_consecutive_count == 0
        assert outcomes[-1].new_consecutive_count == 2
        assert outcomes[-1].new_balance == Decimal("75")

    def test_dry_resets_too(self):
        outcome = apply_waste_log(_account(consecutive_mixed_waste_logs=2), WASTE_DRY, _day(3), tz=IST)
        assert outcome.new_consecutive_count == 0
        assert not outcome.fine_applied

    def test_count_restarts_after_fine(self):
        outcomes = _log_days(_account(), [WASTE_MIXED] * 6)
        assert [o.fine_applied for o in outcomes] == [False, False, True, False, False, True]
        assert outcomes[-1].new_balance == Decimal("275")

    def test_fine_goes_on_top_of_negative_balance(self):
        account = _account(outstanding_balance=Decimal("-20"), consecutive_mixed_waste_logs=2)
        outcome = apply_waste_log(account, WASTE_MIXED, _day(4), tz=IST)
        assert outcome.new_balance == Decimal("80")


class TestOncePerDay:
    def test_second_log_same_day_is_not_accepted(self):
        first = apply_waste_log(_account(), WASTE_MIXED, _day(1, 7), tz=IST)
        second = apply_waste_log(first.account, WASTE_WET, _day(1, 21), tz=IST)

        assert first.accepted
        assert not second.accepted
        assert second.account == first.account
        assert second.new_consecutive_count == 1
        assert second.new_balance == first.new_balance

    def test_accepted_log_records_the_moment(self):
        now = _day(2)
        outcome = apply_waste_log(_account(), WASTE_WET, now, tz=IST)
        assert outcome.account.last_waste_log_date == now

    def test_input_snapshot_is_not_mutated(self):
        account = _account()
        apply_waste_log(account, WASTE_MIXED, _day(1), tz=IST)
        assert account.consecutive_mixed_waste_logs == 0
        assert account.last_waste_log_date is None
