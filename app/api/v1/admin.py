"""
Admin panel JSON API.

Access: only sessions that entered through the admin portal.
"""
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.orm import Session

from app.api.deps import get_db, require_admin
from app.api.v1.auth import AccountResponse
from app.api.v1.bookings import BookingResponse
from app.api.v1.payments import PaymentResponse
from app.application.accounts import (
    ProvisionAccountUseCase,
    UpdateAccountUseCase,
    ChangeAccountStatusUseCase,
    ClearWarningUseCase,
    DeleteAccountUseCase,
    SetLeaveUseCase,
    AccountValidationError,
)
from app.application.bookings import (
    AdjustBookingFeeUseCase,
    CompleteBookingUseCase,
    BookingValidationError,
)
from app.application.complaints import UpdateComplaintStatusUseCase, ComplaintValidationError, list_feedback
from app.application.messages import SendMessageUseCase, UpdateBroadcastUseCase, MessageValidationError, get_broadcast
from app.application.payments import (
    ApprovePaymentUseCase,
    RejectPaymentUseCase,
    PaymentValidationError,
    list_payments,
)
from app.application.subscription_plans import (
    UpdateSubscriptionPlansUseCase,
    SubscriptionPlanValidationError,
    get_subscription_plans,
)
from app.domain.account import ROLES, STAFF_ROLES
from app.infrastructure.db.models import AccountModel, BookingModel, ComplaintModel, PaymentModel
from app.infrastructure.db.repositories import AccountRepository
from app.readmodels.admin_stats import (
    get_overview_stats,
    get_staff_list,
    get_household_history,
    get_account_activity_feed,
)
from app.utils.validation import validate_and_normalize_amount

router = APIRouter(prefix="/admin/api", tags=["admin"])


# ── Request models ───────────────────────────────────────────────────────────

class ProvisionAccountRequest(BaseModel):
    name: str
    identifier: str
    role: str
    password: str | None = None
    family_size: int = Field(default=1, ge=1)
    area: str = ""
    landmark: str = ""
    pincode: str = ""


class UpdateAccountRequest(BaseModel):
    name: str | None = None
    email: str | None = None
    family_size: int | None = None
    has_green_badge: bool | None = None
    area: str | None = None
    landmark: str | None = None
    pincode: str | None = None


class WarnRequest(BaseModel):
    message: str


class MessageRequest(BaseModel):
    text: str


class RejectPaymentRequest(BaseModel):
    reason: str | None = None


class ComplaintStatusRequest(BaseModel):
    status: str  # Pending, In Progress, Resolved


class AdjustFeeRequest(BaseModel):
    fee: str

    @field_validator("fee")
    @classmethod
    def validate_fee(cls, v: str) -> str:
        return validate_and_normalize_amount(v, max_decimal_places=2)


class PlansRequest(BaseModel):
    standard: str
    large_family: str
    large_family_threshold: int

    @field_validator("standard", "large_family")
    @classmethod
    def validate_fee(cls, v: str) -> str:
        return validate_and_normalize_amount(v, max_decimal_places=2)


class BroadcastRequest(BaseModel):
    text: str = ""


class LeaveRequest(BaseModel):
    on_leave: bool


# ── Helpers ──────────────────────────────────────────────────────────────────

def _get_account_or_404(db: Session, household_id: str) -> AccountModel:
    account = AccountRepository(db).get(household_id)
    if not account:
        raise HTTPException(status_code=404, detail="Account not found")
    return account


def _get_or_404(db: Session, model, entity_id: int, label: str):
    row = db.query(model).filter(model.id == entity_id).first()
    if not row:
        raise HTTPException(status_code=404, detail=f"{label} not found")
    return row


# ── Overview ─────────────────────────────────────────────────────────────────

@router.get("/overview")
def admin_overview(request: Request, db: Session = Depends(get_db)):
    require_admin(request, db)
    return get_overview_stats(db)


# ── Accounts ─────────────────────────────────────────────────────────────────

@router.get("/accounts", response_model=list[AccountResponse])
def admin_accounts(request: Request, db: Session = Depends(get_db), role: str | None = None):
    require_admin(request, db)
    if role is not None and role not in ROLES:
        raise HTTPException(status_code=400, detail=f"Unknown role: {role}")
    query = db.query(AccountModel)
    if role:
        query = query.filter(AccountModel.role == role)
    return [AccountResponse.from_model(a) for a in query.order_by(AccountModel.created_at.desc()).all()]


@router.post("/accounts", response_model=AccountResponse)
def admin_account_create(request: Request, req: ProvisionAccountRequest, db: Session = Depends(get_db)):
    admin_account = require_admin(request, db)
    try:
        account = ProvisionAccountUseCase(db).execute(
            name=req.name,
            identifier=req.identifier,
            role=req.role,
            password=req.password,
            family_size=req.family_size,
            area=req.area,
            landmark=req.landmark,
            pincode=req.pincode,
            actor_id=admin_account.household_id,
        )
    except AccountValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return AccountResponse.from_model(account)


@router.get("/accounts/{household_id}/history")
def admin_account_history(request: Request, household_id: str, db: Session = Depends(get_db)):
    require_admin(request, db)
    history = get_household_history(db, household_id)
    if history is None:
        raise HTTPException(status_code=404, detail="Account not found")
    history["events"] = get_account_activity_feed(db, household_id)
    return history


@router.patch("/accounts/{household_id}", response_model=AccountResponse)
def admin_account_update(request: Request, household_id: str, req: UpdateAccountRequest, db: Session = Depends(get_db)):
    require_admin(request, db)
    _get_account_or_404(db, household_id)
    try:
        account = UpdateAccountUseCase(db).execute(household_id, **req.model_dump(exclude_none=True))
    except AccountValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return AccountResponse.from_model(account)


@router.post("/accounts/{household_id}/warn", response_model=AccountResponse)
def admin_account_warn(request: Request, household_id: str, req: WarnRequest, db: Session = Depends(get_db)):
    admin_account = require_admin(request, db)
    _get_account_or_404(db, household_id)
    try:
        account = ChangeAccountStatusUseCase(db).warn(household_id, req.message, actor_id=admin_account.household_id)
    except AccountValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return AccountResponse.from_model(account)


@router.post("/accounts/{household_id}/block", response_model=AccountResponse)
def admin_account_block(request: Request, household_id: str, db: Session = Depends(get_db)):
    admin_account = require_admin(request, db)
    _get_account_or_404(db, household_id)
    account = ChangeAccountStatusUseCase(db).block(household_id, actor_id=admin_account.household_id)
    return AccountResponse.from_model(account)


@router.post("/accounts/{household_id}/unblock", response_model=AccountResponse)
def admin_account_unblock(request: Request, household_id: str, db: Session = Depends(get_db)):
    admin_account = require_admin(request, db)
    _get_account_or_404(db, household_id)
    account = ChangeAccountStatusUseCase(db).unblock(household_id, actor_id=admin_account.household_id)
    return AccountResponse.from_model(account)


@router.post("/accounts/{household_id}/clear-warning", response_model=AccountResponse)
def admin_account_clear_warning(request: Request, household_id: str, db: Session = Depends(get_db)):
    require_admin(request, db)
    _get_account_or_404(db, household_id)
    account = ClearWarningUseCase(db).execute(household_id)
    return AccountResponse.from_model(account)


@router.delete("/accounts/{household_id}")
def admin_account_delete(request: Request, household_id: str, db: Session = Depends(get_db)):
    admin_account = require_admin(request, db)
    _get_account_or_404(db, household_id)
    try:
        DeleteAccountUseCase(db).execute(household_id, actor_id=admin_account.household_id)
    except AccountValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"status": "deleted"}


@router.post("/accounts/{household_id}/message")
def admin_account_message(request: Request, household_id: str, req: MessageRequest, db: Session = Depends(get_db)):
    require_admin(request, db)
    _get_account_or_404(db, household_id)
    try:
        message_id = SendMessageUseCase(db).execute(household_id, req.text, commit=True)
    except MessageValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"id": message_id, "status": "sent"}


# ── Payments ─────────────────────────────────────────────────────────────────

@router.get("/payments", response_model=list[PaymentResponse])
def admin_payments(request: Request, db: Session = Depends(get_db), household_id: str | None = None):
    require_admin(request, db)
    return [PaymentResponse.from_model(p) for p in list_payments(db, household_id)]


@router.post("/payments/{payment_id}/approve", response_model=PaymentResponse)
def admin_payment_approve(request: Request, payment_id: int, db: Session = Depends(get_db)):
    admin_account = require_admin(request, db)
    _get_or_404(db, PaymentModel, payment_id, "Payment")
    try:
        payment = ApprovePaymentUseCase(db).execute(payment_id, actor_id=admin_account.household_id)
    except PaymentValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return PaymentResponse.from_model(payment)


@router.post("/payments/{payment_id}/reject", response_model=PaymentResponse)
def admin_payment_reject(request: Request, payment_id: int, req: RejectPaymentRequest, db: Session = Depends(get_db)):
    admin_account = require_admin(request, db)
    _get_or_404(db, PaymentModel, payment_id, "Payment")
    try:
        payment = RejectPaymentUseCase(db).execute(payment_id, reason=req.reason, actor_id=admin_account.household_id)
    except PaymentValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return PaymentResponse.from_model(payment)


# ── Complaints & feedback ────────────────────────────────────────────────────

@router.post("/complaints/{complaint_id}/status")
def admin_complaint_status(request: Request, complaint_id: int, req: ComplaintStatusRequest, db: Session = Depends(get_db)):
    require_admin(request, db)
    _get_or_404(db, ComplaintModel, complaint_id, "Complaint")
    try:
        complaint = UpdateComplaintStatusUseCase(db).execute(complaint_id, req.status)
    except ComplaintValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"id": complaint.id, "status": complaint.status}


@router.get("/feedback")
def admin_feedback(request: Request, db: Session = Depends(get_db)):
    require_admin(request, db)
    return [
        {
            "id": f.id,
            "household_id": f.household_id,
            "feedback_text": f.feedback_text,
            "rating": f.rating,
            "created_at": f.created_at,
        }
        for f in list_feedback(db)
    ]


# ── Bookings ─────────────────────────────────────────────────────────────────

@router.post("/bookings/{booking_id}/complete", response_model=BookingResponse)
def admin_booking_complete(request: Request, booking_id: int, db: Session = Depends(get_db)):
    require_admin(request, db)
    _get_or_404(db, BookingModel, booking_id, "Booking")
    try:
        booking = CompleteBookingUseCase(db).execute(booking_id)
    except BookingValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return BookingResponse.from_model(booking)


@router.post("/bookings/{booking_id}/fee", response_model=BookingResponse)
def admin_booking_fee(request: Request, booking_id: int, req: AdjustFeeRequest, db: Session = Depends(get_db)):
    admin_account = require_admin(request, db)
    _get_or_404(db, BookingModel, booking_id, "Booking")
    try:
        booking = AdjustBookingFeeUseCase(db).execute(booking_id, req.fee, actor_id=admin_account.household_id)
    except BookingValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return BookingResponse.from_model(booking)


# ── Settings ─────────────────────────────────────────────────────────────────

@router.get("/plans")
def admin_plans(request: Request, db: Session = Depends(get_db)):
    require_admin(request, db)
    plans = get_subscription_plans(db)
    return {
        "standard": str(plans.standard),
        "large_family": str(plans.large_family),
        "large_family_threshold": plans.large_family_threshold,
    }


@router.put("/plans")
def admin_plans_update(request: Request, req: PlansRequest, db: Session = Depends(get_db)):
    require_admin(request, db)
    try:
        plans = UpdateSubscriptionPlansUseCase(db).execute(
            standard=Decimal(req.standard),
            large_family=Decimal(req.large_family),
            large_family_threshold=req.large_family_threshold,
        )
    except SubscriptionPlanValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {
        "standard": str(plans.standard),
        "large_family": str(plans.large_family),
        "large_family_threshold": plans.large_family_threshold,
    }


@router.get("/broadcast")
def admin_broadcast(request: Request, db: Session = Depends(get_db)):
    require_admin(request, db)
    return {"text": get_broadcast(db)}


@router.put("/broadcast")
def admin_broadcast_update(request: Request, req: BroadcastRequest, db: Session = Depends(get_db)):
    require_admin(request, db)
    return {"text": UpdateBroadcastUseCase(db).execute(req.text) or None}


# ── Staff ────────────────────────────────────────────────────────────────────

@router.get("/staff/{role}")
def admin_staff(request: Request, role: str, db: Session = Depends(get_db)):
    """Attendance board / live tracking for employees or drivers."""
    require_admin(request, db)
    if role not in STAFF_ROLES:
        raise HTTPException(status_code=404, detail="Unknown staff role")
    return get_staff_list(db, role)


@router.post("/staff/{household_id}/leave", response_model=AccountResponse)
def admin_staff_leave(request: Request, household_id: str, req: LeaveRequest, db: Session = Depends(get_db)):
    admin_account = require_admin(request, db)
    _get_account_or_404(db, household_id)
    try:
        account = SetLeaveUseCase(db).execute(household_id, req.on_leave, actor_id=admin_account.household_id)
    except AccountValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return AccountResponse.from_model(account)
