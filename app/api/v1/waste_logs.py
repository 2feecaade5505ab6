"""
Daily waste log API endpoints
"""
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.deps import get_db, require_household
from app.application.waste_logs import LogWasteUseCase, WasteLogValidationError, list_waste_logs


router = APIRouter(prefix="/api/v1/waste-logs", tags=["waste-logs"])


class LogWasteRequest(BaseModel):
    waste_type: str  # Wet, Dry, Mixed


class LogWasteResponse(BaseModel):
    accepted: bool
    consecutive_mixed_waste_logs: int
    fine_applied: bool
    outstanding_balance: str  # Decimal as string


class WasteLogResponse(BaseModel):
    log_ref: str
    waste_type: str
    logged_at: datetime


@router.post("/", response_model=LogWasteResponse)
def log_waste(request: Request, req: LogWasteRequest, db: Session = Depends(get_db)):
    """Log today's waste; a second log on the same day returns accepted=false."""
    account = require_household(request, db)
    try:
        outcome = LogWasteUseCase(db).execute(account.household_id, req.waste_type)
    except WasteLogValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return LogWasteResponse(
        accepted=outcome.accepted,
        consecutive_mixed_waste_logs=outcome.new_consecutive_count,
        fine_applied=outcome.fine_applied,
        outstanding_balance=str(outcome.new_balance),
    )


@router.get("/", response_model=list[WasteLogResponse])
def get_waste_logs(request: Request, db: Session = Depends(get_db), limit: int = 30):
    account = require_household(request, db)
    return [
        WasteLogResponse(log_ref=w.log_ref, waste_type=w.waste_type, logged_at=w.logged_at)
        for w in list_waste_logs(db, account.household_id, limit=limit)
    ]
