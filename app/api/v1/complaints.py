"""
Complaint and feedback API endpoints
"""
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.api.deps import get_db, require_household
from app.application.complaints import (
    CreateComplaintUseCase,
    AddFeedbackUseCase,
    ComplaintValidationError,
    list_complaints,
)
from app.infrastructure.db.models import ComplaintModel


router = APIRouter(prefix="/api/v1/complaints", tags=["complaints"])
feedback_router = APIRouter(prefix="/api/v1/feedback", tags=["feedback"])


class CreateComplaintRequest(BaseModel):
    issue: str
    details: str = ""
    photo: str | None = None  # data URL


class ComplaintResponse(BaseModel):
    id: int
    complaint_ref: str
    issue: str
    details: str
    status: str
    created_at: datetime

    @classmethod
    def from_model(cls, c: ComplaintModel) -> "ComplaintResponse":
        return cls(
            id=c.id,
            complaint_ref=c.complaint_ref,
            issue=c.issue,
            details=c.details,
            status=c.status,
            created_at=c.created_at,
        )


class FeedbackRequest(BaseModel):
    feedback_text: str
    rating: int = Field(ge=1, le=5)


@router.post("/", response_model=ComplaintResponse)
def create_complaint(request: Request, req: CreateComplaintRequest, db: Session = Depends(get_db)):
    account = require_household(request, db)
    try:
        complaint = CreateComplaintUseCase(db).execute(
            household_id=account.household_id,
            issue=req.issue,
            details=req.details,
            photo=req.photo,
        )
    except ComplaintValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ComplaintResponse.from_model(complaint)


@router.get("/", response_model=list[ComplaintResponse])
def get_complaints(request: Request, db: Session = Depends(get_db)):
    account = require_household(request, db)
    return [ComplaintResponse.from_model(c) for c in list_complaints(db, account.household_id)]


@feedback_router.post("/")
def add_feedback(request: Request, req: FeedbackRequest, db: Session = Depends(get_db)):
    account = require_household(request, db)
    try:
        feedback = AddFeedbackUseCase(db).execute(account.household_id, req.feedback_text, req.rating)
    except ComplaintValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"id": feedback.id, "status": "received"}
