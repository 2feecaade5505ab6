"""
Special pickup bookings and event fees
"""
import logging
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation

from sqlalchemy.orm import Session

from app.domain.account import AccountEvent
from app.domain.booking import (
    BOOKING_SCHEDULED,
    BOOKING_COMPLETED,
    BOOKING_EVENT_WASTE,
    BOOKING_WASTE_TYPES,
    TIME_SLOTS,
)
from app.domain.fees import calculate_event_fee, ADMIN_ADJUST
from app.infrastructure.db.models import BookingModel
from app.infrastructure.db.repositories import AccountRepository
from app.infrastructure.eventlog.repository import EventLogRepository
from app.utils.refs import new_ref

logger = logging.getLogger(__name__)


class BookingValidationError(ValueError):
    pass


def quote_event_fee(attendee_count: int | None) -> dict:
    """
    Fee preview for the booking form.

    Returns:
        {"fee": "700", "admin_adjust": False} / {"fee": None, "admin_adjust": True}
    """
    fee = calculate_event_fee(attendee_count)
    if fee == ADMIN_ADJUST:
        return {"fee": None, "admin_adjust": True}
    return {"fee": str(fee) if fee is not None else None, "admin_adjust": False}


class CreateBookingUseCase:
    """
    Book a special pickup.

    Event pickups need a positive attendee count; a numeric fee is added to
    the household balance right away, larger events wait for an admin price.
    """

    def __init__(self, db: Session, accounts: AccountRepository | None = None):
        self.db = db
        self.accounts = accounts or AccountRepository(db)
        self.event_repo = EventLogRepository(db)

    def execute(
        self,
        household_id: str,
        pickup_date: date | None,
        time_slot: str,
        waste_type: str,
        notes: str | None = None,
        attendee_count: int | None = None,
        now: datetime | None = None,
    ) -> BookingModel:
        now = now or datetime.now(timezone.utc)
        if pickup_date is None:
            raise BookingValidationError("Please select a date.")
        if time_slot not in TIME_SLOTS:
            raise BookingValidationError(f"Unknown time slot: {time_slot}")
        if waste_type not in BOOKING_WASTE_TYPES:
            raise BookingValidationError(f"Unknown waste type: {waste_type}")

        account = self.accounts.get(household_id)
        if not account:
            raise BookingValidationError(f"Account {household_id} not found")

        booking_fee = None
        needs_adjustment = False
        if waste_type == BOOKING_EVENT_WASTE:
            if attendee_count is None or attendee_count <= 0:
                raise BookingValidationError("Enter the number of attendees")
            fee = calculate_event_fee(attendee_count)
            if fee == ADMIN_ADJUST:
                needs_adjustment = True
            else:
                booking_fee = fee
        else:
            attendee_count = None

        booking = BookingModel(
            booking_ref=new_ref("BK"),
            household_id=household_id,
            pickup_date=pickup_date,
            time_slot=time_slot,
            waste_type=waste_type,
            status=BOOKING_SCHEDULED,
            notes=(notes or "").strip() or None,
            attendee_count=attendee_count,
            booking_fee=booking_fee,
            needs_fee_adjustment=needs_adjustment,
            created_at=now,
        )
        self.db.add(booking)
        self.db.flush()

        if booking_fee:
            account.outstanding_balance = Decimal(account.outstanding_balance) + booking_fee
            self.accounts.put(account)
            self.event_repo.append_event(
                household_id=household_id,
                event_type="balance_changed",
                payload=AccountEvent.balance_changed(
                    household_id, "booking_fee", booking_fee, account.outstanding_balance, booking.booking_ref
                ),
                occurred_at=now,
            )

        self.event_repo.append_event(
            household_id=household_id,
            event_type="booking_created",
            payload={
                "booking_ref": booking.booking_ref,
                "waste_type": waste_type,
                "pickup_date": pickup_date.isoformat(),
                "booking_fee": str(booking_fee) if booking_fee is not None else None,
                "needs_fee_adjustment": needs_adjustment,
            },
            occurred_at=now,
        )
        self.db.commit()
        logger.info("Booking %s created for %s", booking.booking_ref, household_id)
        return booking


class AdjustBookingFeeUseCase:
    """Admin prices an event above the largest band; the fee is billed once."""

    def __init__(self, db: Session, accounts: AccountRepository | None = None):
        self.db = db
        self.accounts = accounts or AccountRepository(db)
        self.event_repo = EventLogRepository(db)

    def execute(self, booking_id: int, fee, actor_id: str | None = None) -> BookingModel:
        try:
            fee = Decimal(str(fee))
        except InvalidOperation:
            raise BookingValidationError("Invalid fee")
        if fee <= 0:
            raise BookingValidationError("Fee must be positive")

        booking = self.db.query(BookingModel).filter(BookingModel.id == booking_id).first()
        if not booking:
            raise BookingValidationError(f"Booking #{booking_id} not found")
        if not booking.needs_fee_adjustment:
            raise BookingValidationError("This booking does not need a manual fee")

        booking.booking_fee = fee
        booking.needs_fee_adjustment = False

        account = self.accounts.get(booking.household_id)
        if account:
            account.outstanding_balance = Decimal(account.outstanding_balance) + fee
            self.accounts.put(account)
            self.event_repo.append_event(
                household_id=account.household_id,
                event_type="balance_changed",
                payload=AccountEvent.balance_changed(
                    account.household_id, "booking_fee", fee, account.outstanding_balance, booking.booking_ref
                ),
                actor_id=actor_id,
            )
        self.db.commit()
        return booking


class CompleteBookingUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, booking_id: int) -> BookingModel:
        booking = self.db.query(BookingModel).filter(BookingModel.id == booking_id).first()
        if not booking:
            raise BookingValidationError(f"Booking #{booking_id} not found")
        if booking.status == BOOKING_COMPLETED:
            raise BookingValidationError("Booking is already completed")
        booking.status = BOOKING_COMPLETED
        self.db.commit()
        return booking


def list_bookings(db: Session, household_id: str | None = None, status: str | None = None) -> list[BookingModel]:
    query = db.query(BookingModel)
    if household_id:
        query = query.filter(BookingModel.household_id == household_id)
    if status:
        query = query.filter(BookingModel.status == status)
    return query.order_by(BookingModel.pickup_date.asc(), BookingModel.id.asc()).all()
