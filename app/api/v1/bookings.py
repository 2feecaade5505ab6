"""
Special pickup booking API endpoints
"""
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.deps import get_db, require_household
from app.application.bookings import (
    CreateBookingUseCase,
    BookingValidationError,
    list_bookings,
    quote_event_fee,
)
from app.infrastructure.db.models import BookingModel


router = APIRouter(prefix="/api/v1/bookings", tags=["bookings"])


class CreateBookingRequest(BaseModel):
    pickup_date: date | None = None
    time_slot: str  # Morning, Afternoon
    waste_type: str  # Event Waste, Bulk Household, Garden Waste
    notes: str | None = None
    attendee_count: int | None = None


class BookingResponse(BaseModel):
    id: int
    booking_ref: str
    pickup_date: date
    time_slot: str
    waste_type: str
    status: str
    notes: str | None
    attendee_count: int | None
    booking_fee: str | None  # Decimal as string
    needs_fee_adjustment: bool

    @classmethod
    def from_model(cls, b: BookingModel) -> "BookingResponse":
        return cls(
            id=b.id,
            booking_ref=b.booking_ref,
            pickup_date=b.pickup_date,
            time_slot=b.time_slot,
            waste_type=b.waste_type,
            status=b.status,
            notes=b.notes,
            attendee_count=b.attendee_count,
            booking_fee=str(b.booking_fee) if b.booking_fee is not None else None,
            needs_fee_adjustment=b.needs_fee_adjustment,
        )


@router.get("/fee-quote")
def get_fee_quote(attendee_count: int | None = None):
    """Event fee preview while the form is being filled."""
    return quote_event_fee(attendee_count)


@router.post("/", response_model=BookingResponse)
def create_booking(request: Request, req: CreateBookingRequest, db: Session = Depends(get_db)):
    account = require_household(request, db)
    try:
        booking = CreateBookingUseCase(db).execute(
            household_id=account.household_id,
            pickup_date=req.pickup_date,
            time_slot=req.time_slot,
            waste_type=req.waste_type,
            notes=req.notes,
            attendee_count=req.attendee_count,
        )
    except BookingValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return BookingResponse.from_model(booking)


@router.get("/", response_model=list[BookingResponse])
def get_bookings(request: Request, db: Session = Depends(get_db)):
    account = require_household(request, db)
    return [BookingResponse.from_model(b) for b in list_bookings(db, household_id=account.household_id)]
