"""
Tests for LogWasteUseCase (persistence, fine, notification)
"""
from datetime import datetime, timezone
from decimal import Decimal
from zoneinfo import ZoneInfo

import pytest
from sqlalchemy.orm import sessionmaker

from app.application.messages import list_messages, count_unread
from app.application.waste_logs import LogWasteUseCase, WasteLogValidationError, list_waste_logs
from app.domain.waste_log import MIXED_FINE_MESSAGE
from app.infrastructure.db.repositories import AccountRepository
from app.infrastructure.eventlog.repository import EventLogRepository

IST = ZoneInfo("Asia/Kolkata")


def ist(day, hour=8):
    return datetime(2026, 10, day, hour, 0, tzinfo=IST).astimezone(timezone.utc)


class TestLogWaste:
    def test_three_mixed_days_fine_and_notify(self, db_session, household):
        """New household (family 6, balance 75) logs Mixed on three days -> 175 and a message"""
        use_case = LogWasteUseCase(db_session, tz=IST)
        hid = household.household_id

        use_case.execute(hid, "Mixed", now=ist(2))
        use_case.execute(hid, "Mixed", now=ist(3))
        outcome = use_case.execute(hid, "Mixed", now=ist(4))

        assert outcome.fine_applied
        account = AccountRepository(db_session).get(hid)
        assert account.outstanding_balance == Decimal("175")
        assert account.consecutive_mixed_waste_logs == 0

        messages = list_messages(db_session, hid)
        assert [m.text for m in messages] == [MIXED_FINE_MESSAGE]
        assert count_unread(db_session, hid) == 1

        event_types = [e.event_type for e in EventLogRepository(db_session).list_events(hid)]
        assert event_types.count("waste_logged") == 3
        assert "waste_fine_applied" in event_types

    def test_same_day_duplicate_returns_not_accepted(self, db_session, household):
        use_case = LogWasteUseCase(db_session, tz=IST)
        hid = household.household_id

        first = use_case.execute(hid, "Mixed", now=ist(2, 7))
        second = use_case.execute(hid, "Dry", now=ist(2, 22))

        assert first.accepted
        assert not second.accepted
        assert len(list_waste_logs(db_session, hid)) == 1
        assert AccountRepository(db_session).get(hid).consecutive_mixed_waste_logs == 1

    def test_log_committed_by_another_session_is_seen(self, db_session, db_engine, household):
        hid = household.household_id
        assert household.last_waste_log_date is None

        other = sessionmaker(bind=db_engine)()
        try:
            LogWasteUseCase(other, tz=IST).execute(hid, "Wet", now=ist(2, 7))
        finally:
            other.close()

        outcome = LogWasteUseCase(db_session, tz=IST).execute(hid, "Mixed", now=ist(2, 7))

        assert not outcome.accepted
        assert len(list_waste_logs(db_session, hid)) == 1
        assert AccountRepository(db_session).get(hid).consecutive_mixed_waste_logs == 0

    def test_wet_in_between_prevents_fine(self, db_session, household):
        use_case = LogWasteUseCase(db_session, tz=IST)
        hid = household.household_id
        for day, waste_type in zip(range(2, 7), ["Mixed", "Mixed", "Wet", "Mixed", "Mixed"]):
            use_case.execute(hid, waste_type, now=ist(day))

        account = AccountRepository(db_session).get(hid)
        assert account.outstanding_balance == Decimal("75")
        assert account.consecutive_mixed_waste_logs == 2
        assert list_messages(db_session, hid) == []

    def test_unknown_type(self, db_session, household):
        with pytest.raises(WasteLogValidationError):
            LogWasteUseCase(db_session, tz=IST).execute(household.household_id, "Plastic")

    def test_staff_cannot_log(self, db_session, driver):
        with pytest.raises(WasteLogValidationError):
            LogWasteUseCase(db_session, tz=IST).execute(driver.household_id, "Wet")
