"""
Authentication API: household signup/login, staff and admin OTP logins
"""
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_account, login_session
from app.application.accounts import (
    SignupUseCase,
    LoginUseCase,
    StaffLoginUseCase,
    AdminLoginUseCase,
    AccountValidationError,
    AuthError,
    find_portal_account,
)
from app.application.otp import issue_otp, verify_otp
from app.config import get_settings
from app.domain.account import ROLE_ADMIN, ROLE_HOUSEHOLD, STAFF_ROLES, normalize_identifier
from app.infrastructure.db.models import AccountModel


router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


# === Request/Response models ===

class SignupRequest(BaseModel):
    name: str
    identifier: str  # mobile number or email
    password: str
    family_size: int = Field(ge=1)
    area: str = ""
    landmark: str = ""
    pincode: str = ""


class LoginRequest(BaseModel):
    identifier: str
    password: str


class OtpRequest(BaseModel):
    identifier: str
    role: str | None = None  # employee / driver for the staff portal


class OtpLoginRequest(BaseModel):
    identifier: str
    code: str
    role: str | None = None


class AccountResponse(BaseModel):
    household_id: str
    name: str
    identifier: str
    email: str | None
    role: str
    status: str
    warning_message: str | None
    has_green_badge: bool
    outstanding_balance: str  # Decimal as string
    family_size: int
    address_area: str
    address_landmark: str
    address_pincode: str
    login_streak: int
    attendance_status: str | None
    booking_reminders: bool
    push_notifications: bool
    email_notifications: bool
    sms_notifications: bool
    profile_picture: str | None
    last_login_time: datetime | None

    @classmethod
    def from_model(cls, a: AccountModel) -> "AccountResponse":
        return cls(
            household_id=a.household_id,
            name=a.name,
            identifier=a.identifier,
            email=a.email,
            role=a.role,
            status=a.status,
            warning_message=a.warning_message,
            has_green_badge=a.has_green_badge,
            outstanding_balance=str(a.outstanding_balance),
            family_size=a.family_size,
            address_area=a.address_area,
            address_landmark=a.address_landmark,
            address_pincode=a.address_pincode,
            login_streak=a.login_streak,
            attendance_status=a.attendance_status,
            booking_reminders=a.booking_reminders,
            push_notifications=a.push_notifications,
            email_notifications=a.email_notifications,
            sms_notifications=a.sms_notifications,
            profile_picture=a.profile_picture,
            last_login_time=a.last_login_time,
        )


def _staff_role(role: str | None) -> str:
    if role not in STAFF_ROLES:
        raise HTTPException(status_code=400, detail="role must be employee or driver")
    return role


def _otp_sent(code: str) -> dict:
    result = {"status": "sent"}
    if get_settings().DEBUG:
        result["code"] = code
    return result


# === Endpoints ===

@router.post("/signup", response_model=AccountResponse)
def signup(request: Request, req: SignupRequest, db: Session = Depends(get_db)):
    """Household registration; logs the new account in."""
    try:
        account = SignupUseCase(db).execute(
            name=req.name,
            identifier=req.identifier,
            password=req.password,
            family_size=req.family_size,
            area=req.area,
            landmark=req.landmark,
            pincode=req.pincode,
        )
    except AccountValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    login_session(request, account, ROLE_HOUSEHOLD)
    return AccountResponse.from_model(account)


@router.post("/login", response_model=AccountResponse)
def login(request: Request, req: LoginRequest, db: Session = Depends(get_db)):
    try:
        account = LoginUseCase(db).execute(identifier=req.identifier, password=req.password)
    except AuthError as e:
        raise HTTPException(status_code=401, detail=str(e))

    login_session(request, account, ROLE_HOUSEHOLD)
    return AccountResponse.from_model(account)


@router.post("/staff/otp")
def staff_otp(request: Request, req: OtpRequest, db: Session = Depends(get_db)):
    role = _staff_role(req.role)
    account = find_portal_account(db, req.identifier, (role,))
    if not account:
        raise HTTPException(status_code=404, detail=f"No {role} account found with this number.")

    code = issue_otp(db, request.session, account.identifier, role)
    return _otp_sent(code)


@router.post("/staff/login", response_model=AccountResponse)
def staff_login(request: Request, req: OtpLoginRequest, db: Session = Depends(get_db)):
    role = _staff_role(req.role)
    identifier = normalize_identifier(req.identifier)
    if not verify_otp(db, request.session, identifier, role, req.code):
        raise HTTPException(status_code=401, detail="Invalid or expired OTP.")

    try:
        account = StaffLoginUseCase(db).execute(identifier=identifier, role=role)
    except AuthError as e:
        raise HTTPException(status_code=401, detail=str(e))

    login_session(request, account, role)
    return AccountResponse.from_model(account)


@router.post("/admin/otp")
def admin_otp(request: Request, req: OtpRequest, db: Session = Depends(get_db)):
    account = find_portal_account(db, req.identifier, (ROLE_ADMIN,))
    if not account:
        raise HTTPException(status_code=404, detail="Admin account not found.")

    code = issue_otp(db, request.session, account.identifier, ROLE_ADMIN)
    return _otp_sent(code)


@router.post("/admin/login", response_model=AccountResponse)
def admin_login(request: Request, req: OtpLoginRequest, db: Session = Depends(get_db)):
    identifier = normalize_identifier(req.identifier)
    if not verify_otp(db, request.session, identifier, ROLE_ADMIN, req.code):
        raise HTTPException(status_code=401, detail="Invalid or expired OTP.")

    try:
        account = AdminLoginUseCase(db).execute(identifier=identifier)
    except AuthError as e:
        raise HTTPException(status_code=401, detail=str(e))

    login_session(request, account, ROLE_ADMIN)
    return AccountResponse.from_model(account)


@router.post("/logout")
def logout(request: Request):
    request.session.clear()
    return {"status": "logged_out"}


@router.get("/me", response_model=AccountResponse)
def me(request: Request, db: Session = Depends(get_db)):
    account = get_current_account(request, db)
    return AccountResponse.from_model(account)
