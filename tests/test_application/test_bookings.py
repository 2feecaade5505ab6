"""
Tests for special pickup bookings and event fees
"""
from datetime import date
from decimal import Decimal

import pytest

from app.application.bookings import (
    CreateBookingUseCase,
    AdjustBookingFeeUseCase,
    CompleteBookingUseCase,
    BookingValidationError,
    list_bookings,
    quote_event_fee,
)
from app.infrastructure.db.repositories import AccountRepository

PICKUP = date(2026, 10, 20)


def _balance(db, household_id):
    return AccountRepository(db).get(household_id).outstanding_balance


class TestCreateBooking:
    def test_event_fee_added_to_balance(self, db_session, household):
        booking = CreateBookingUseCase(db_session).execute(
            household.household_id, PICKUP, "Morning", "Event Waste", attendee_count=450,
        )
        assert booking.booking_fee == Decimal("700")
        assert not booking.needs_fee_adjustment
        assert booking.booking_ref.startswith("BK-")
        assert _balance(db_session, household.household_id) == Decimal("775")

    def test_large_event_waits_for_admin(self, db_session, household):
        booking = CreateBookingUseCase(db_session).execute(
            household.household_id, PICKUP, "Afternoon", "Event Waste", attendee_count=1001,
        )
        assert booking.booking_fee is None
        assert booking.needs_fee_adjustment
        assert _balance(db_session, household.household_id) == Decimal("75")

    def test_non_event_has_no_fee(self, db_session, household):
        booking = CreateBookingUseCase(db_session).execute(
            household.household_id, PICKUP, "Morning", "Garden Waste", attendee_count=50,
        )
        assert booking.booking_fee is None
        assert booking.attendee_count is None
        assert _balance(db_session, household.household_id) == Decimal("75")

    def test_date_required(self, db_session, household):
        with pytest.raises(BookingValidationError, match="select a date"):
            CreateBookingUseCase(db_session).execute(household.household_id, None, "Morning", "Bulk Household")

    @pytest.mark.parametrize("count", [None, 0])
    def test_event_needs_attendees(self, db_session, household, count):
        with pytest.raises(BookingValidationError):
            CreateBookingUseCase(db_session).execute(
                household.household_id, PICKUP, "Morning", "Event Waste", attendee_count=count,
            )

    def test_unknown_slot(self, db_session, household):
        with pytest.raises(BookingValidationError):
            CreateBookingUseCase(db_session).execute(household.household_id, PICKUP, "Night", "Garden Waste")


class TestAdminBookingActions:
    def test_adjust_fee_bills_once(self, db_session, household):
        booking = CreateBookingUseCase(db_session).execute(
            household.household_id, PICKUP, "Morning", "Event Waste", attendee_count=2500,
        )
        adjusted = AdjustBookingFeeUseCase(db_session).execute(booking.id, "3000")

        assert adjusted.booking_fee == Decimal("3000")
        assert not adjusted.needs_fee_adjustment
        assert _balance(db_session, household.household_id) == Decimal("3075")

        with pytest.raises(BookingValidationError):
            AdjustBookingFeeUseCase(db_session).execute(booking.id, "3000")

    def test_adjust_requires_flagged_booking(self, db_session, household):
        booking = CreateBookingUseCase(db_session).execute(
            household.household_id, PICKUP, "Morning", "Event Waste", attendee_count=10,
        )
        with pytest.raises(BookingValidationError):
            AdjustBookingFeeUseCase(db_session).execute(booking.id, "100")

    def test_complete(self, db_session, household):
        booking = CreateBookingUseCase(db_session).execute(household.household_id, PICKUP, "Morning", "Bulk Household")
        assert CompleteBookingUseCase(db_session).execute(booking.id).status == "Completed"
        assert list_bookings(db_session, status="Scheduled") == []


class TestQuote:
    def test_quote(self):
        assert quote_event_fee(300) == {"fee": "500", "admin_adjust": False}
        assert quote_event_fee(1001) == {"fee": None, "admin_adjust": True}
        assert quote_event_fee(None) == {"fee": None, "admin_adjust": False}
