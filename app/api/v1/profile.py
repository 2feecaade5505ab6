"""
Profile API endpoints (household settings)
"""
from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_account
from app.api.v1.auth import AccountResponse
from app.application.accounts import (
    UpdateProfileUseCase,
    ToggleBookingRemindersUseCase,
    ClearWarningUseCase,
    AccountValidationError,
)


router = APIRouter(prefix="/api/v1/profile", tags=["profile"])


class UpdateProfileRequest(BaseModel):
    name: str | None = None
    email: str | None = None
    profile_picture: str | None = None  # data URL
    push_notifications: bool | None = None
    email_notifications: bool | None = None
    sms_notifications: bool | None = None
    booking_reminders: bool | None = None


@router.get("/", response_model=AccountResponse)
def get_profile(request: Request, db: Session = Depends(get_db)):
    account = get_current_account(request, db)
    return AccountResponse.from_model(account)


@router.patch("/", response_model=AccountResponse)
def update_profile(request: Request, req: UpdateProfileRequest, db: Session = Depends(get_db)):
    account = get_current_account(request, db)
    try:
        account = UpdateProfileUseCase(db).execute(account.household_id, **req.model_dump(exclude_none=True))
    except AccountValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return AccountResponse.from_model(account)


@router.post("/booking-reminders/toggle")
def toggle_booking_reminders(request: Request, db: Session = Depends(get_db)):
    account = get_current_account(request, db)
    enabled = ToggleBookingRemindersUseCase(db).execute(account.household_id)
    return {"booking_reminders": enabled}


@router.post("/warning/acknowledge", response_model=AccountResponse)
def acknowledge_warning(request: Request, db: Session = Depends(get_db)):
    """Household dismissed the admin warning banner."""
    account = get_current_account(request, db)
    account = ClearWarningUseCase(db).execute(account.household_id)
    return AccountResponse.from_model(account)
