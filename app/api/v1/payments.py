"""
Payment API endpoints (household side)
"""
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from app.api.deps import get_db, require_household
from app.application.payments import SubmitPaymentUseCase, PaymentValidationError, list_payments
from app.infrastructure.db.models import PaymentModel
from app.utils.validation import validate_and_normalize_amount


router = APIRouter(prefix="/api/v1/payments", tags=["payments"])


class SubmitPaymentRequest(BaseModel):
    screenshot: str  # data URL of the UPI receipt
    amount: str | None = None  # defaults to the outstanding balance

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return validate_and_normalize_amount(v, max_decimal_places=2)


class PaymentResponse(BaseModel):
    id: int
    txn_ref: str
    amount: str  # Decimal as string
    status: str
    rejection_reason: str | None
    created_at: datetime
    resolved_at: datetime | None

    @classmethod
    def from_model(cls, p: PaymentModel) -> "PaymentResponse":
        return cls(
            id=p.id,
            txn_ref=p.txn_ref,
            amount=str(p.amount),
            status=p.status,
            rejection_reason=p.rejection_reason,
            created_at=p.created_at,
            resolved_at=p.resolved_at,
        )


@router.post("/", response_model=PaymentResponse)
def submit_payment(request: Request, req: SubmitPaymentRequest, db: Session = Depends(get_db)):
    """Submit proof of payment; verification happens in the background."""
    account = require_household(request, db)
    try:
        payment = SubmitPaymentUseCase(db).execute(
            household_id=account.household_id,
            screenshot=req.screenshot,
            amount=req.amount,
        )
    except PaymentValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return PaymentResponse.from_model(payment)


@router.get("/", response_model=list[PaymentResponse])
def get_payments(request: Request, db: Session = Depends(get_db)):
    account = require_household(request, db)
    return [PaymentResponse.from_model(p) for p in list_payments(db, account.household_id)]


@router.get("/{payment_id}", response_model=PaymentResponse)
def get_payment_status(request: Request, payment_id: int, db: Session = Depends(get_db)):
    account = require_household(request, db)
    payment = db.query(PaymentModel).filter(
        PaymentModel.id == payment_id,
        PaymentModel.household_id == account.household_id,
    ).first()
    if not payment:
        raise HTTPException(status_code=404, detail="Payment not found")
    return PaymentResponse.from_model(payment)
