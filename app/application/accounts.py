"""
Account use cases: signup, portal logins, profile settings, admin management, staff location
"""
import logging
from datetime import datetime, timedelta, timezone, tzinfo
from decimal import Decimal

from sqlalchemy.orm import Session

from app.auth import hash_password, verify_password
from app.config import get_settings
from app.domain.account import (
    AccountEvent,
    ROLES,
    ROLE_HOUSEHOLD,
    ROLE_ADMIN,
    STAFF_ROLES,
    STATUS_ACTIVE,
    STATUS_BLOCKED,
    STATUS_WARNED,
    normalize_identifier,
    is_email,
    is_strong_password,
    generate_household_id,
    mock_ip_address,
)
from app.domain.attendance import classify_attendance, ATTENDANCE_ABSENT, ATTENDANCE_ON_LEAVE
from app.domain.fees import select_monthly_fee
from app.domain.streak import next_streak
from app.infrastructure.db.models import AccountModel
from app.infrastructure.db.repositories import AccountRepository
from app.infrastructure.eventlog.repository import EventLogRepository
from app.application.subscription_plans import get_subscription_plans

logger = logging.getLogger(__name__)

BLOCKED_MESSAGE = "Your account has been blocked. Please contact support."
WEAK_PASSWORD_MESSAGE = (
    "Password is not strong enough. It must be at least 8 characters and include "
    "uppercase, lowercase, a number, and a special character."
)

PROFILE_FIELDS = (
    "name",
    "email",
    "profile_picture",
    "booking_reminders",
    "push_notifications",
    "email_notifications",
    "sms_notifications",
)


class AccountValidationError(ValueError):
    pass


class AuthError(ValueError):
    """Login refused; the message is shown to the user as is."""
    pass


def _local_tz(tz: tzinfo | None) -> tzinfo:
    return tz or get_settings().get_timezone()


def _unique_household_id(accounts: AccountRepository, role: str, seed: str, now: datetime) -> str:
    household_id = generate_household_id(role, seed, now)
    while accounts.get(household_id):
        now = now + timedelta(milliseconds=1)
        household_id = generate_household_id(role, seed, now)
    return household_id


def _can_use_portal(account: AccountModel, allowed_roles: tuple[str, ...]) -> bool:
    if account.role in allowed_roles:
        return True
    return account.identifier in get_settings().PORTAL_OVERRIDE_IDENTIFIERS


def _record_streak(account: AccountModel, now: datetime, tz: tzinfo) -> None:
    streak, last_increment = next_streak(
        now,
        account.last_streak_increment,
        account.login_streak or 0,
        tz=tz,
    )
    account.login_streak = streak
    account.last_streak_increment = last_increment


def _get_or_raise(accounts: AccountRepository, household_id: str) -> AccountModel:
    account = accounts.get(household_id)
    if not account:
        raise AccountValidationError(f"Account {household_id} not found")
    return account


# ============================================================================
# Signup & logins
# ============================================================================


class SignupUseCase:
    """Household self-registration; the first month is billed immediately."""

    def __init__(self, db: Session, accounts: AccountRepository | None = None):
        self.db = db
        self.accounts = accounts or AccountRepository(db)
        self.event_repo = EventLogRepository(db)

    def execute(
        self,
        name: str,
        identifier: str,
        password: str,
        family_size: int,
        area: str = "",
        landmark: str = "",
        pincode: str = "",
        now: datetime | None = None,
    ) -> AccountModel:
        now = now or datetime.now(timezone.utc)
        name = (name or "").strip()
        if not name:
            raise AccountValidationError("Name cannot be empty")
        if family_size < 1:
            raise AccountValidationError("Family size must be at least 1")

        normalized = normalize_identifier(identifier or "")
        if not normalized:
            raise AccountValidationError("Enter a mobile number or email")
        if self.accounts.get_by_identifier(normalized):
            raise AccountValidationError("An account with this identifier already exists.")
        if not password or not is_strong_password(password):
            raise AccountValidationError(WEAK_PASSWORD_MESSAGE)

        balance = select_monthly_fee(family_size, get_subscription_plans(self.db))
        household_id = _unique_household_id(self.accounts, ROLE_HOUSEHOLD, normalized, now)

        account = AccountModel(
            household_id=household_id,
            name=name,
            identifier=normalized,
            email=normalized if is_email(normalized) else "",
            password_hash=hash_password(password),
            role=ROLE_HOUSEHOLD,
            status=STATUS_ACTIVE,
            has_green_badge=False,
            booking_reminders=True,
            push_notifications=True,
            email_notifications=True,
            sms_notifications=True,
            profile_picture="",
            created_at=now,
            outstanding_balance=balance,
            family_size=family_size,
            address_area=area,
            address_landmark=landmark,
            address_pincode=pincode,
            login_streak=1,
            last_streak_increment=now,
            consecutive_mixed_waste_logs=0,
        )
        self.accounts.put(account)

        self.event_repo.append_event(
            household_id=household_id,
            event_type="account_created",
            payload=AccountEvent.created(household_id, ROLE_HOUSEHOLD, family_size, balance),
            occurred_at=now,
        )
        self.db.commit()
        logger.info("Household %s signed up (family size %s, balance %s)", household_id, family_size, balance)
        return account


class LoginUseCase:
    """Household portal login with password."""

    def __init__(self, db: Session, accounts: AccountRepository | None = None, tz: tzinfo | None = None):
        self.db = db
        self.accounts = accounts or AccountRepository(db)
        self.event_repo = EventLogRepository(db)
        self.tz = _local_tz(tz)

    def execute(self, identifier: str, password: str | None, now: datetime | None = None) -> AccountModel:
        now = now or datetime.now(timezone.utc)
        account = self.accounts.get_by_identifier(normalize_identifier(identifier or ""))

        if not account:
            raise AuthError("No account found with this identifier.")
        if not _can_use_portal(account, (ROLE_HOUSEHOLD,)):
            raise AuthError("Access denied for this portal.")
        if account.status == STATUS_BLOCKED:
            raise AuthError(BLOCKED_MESSAGE)
        if not verify_password(password or "", account.password_hash):
            raise AuthError("Invalid password.")

        _record_streak(account, now, self.tz)
        account.last_login_time = now
        account.last_ip_address = mock_ip_address()
        self.accounts.put(account)

        self.event_repo.append_event(
            household_id=account.household_id,
            event_type="login_recorded",
            payload=AccountEvent.login_recorded(
                account.household_id, ROLE_HOUSEHOLD, account.login_streak, account.last_ip_address
            ),
            occurred_at=now,
        )
        self.db.commit()
        return account


class StaffLoginUseCase:
    """
    Employee / driver check-in (identity already confirmed by OTP).

    Attendance is classified on every check-in except for staff on leave.
    """

    def __init__(self, db: Session, accounts: AccountRepository | None = None, tz: tzinfo | None = None):
        self.db = db
        self.accounts = accounts or AccountRepository(db)
        self.event_repo = EventLogRepository(db)
        self.tz = _local_tz(tz)

    def execute(self, identifier: str, role: str, now: datetime | None = None) -> AccountModel:
        if role not in STAFF_ROLES:
            raise AccountValidationError(f"Unknown staff role: {role}")
        now = now or datetime.now(timezone.utc)

        account = self.accounts.get_by_identifier(normalize_identifier(identifier or ""))
        if not account or not _can_use_portal(account, (role,)):
            raise AuthError(f"No {role} account found with this number.")
        if account.status == STATUS_BLOCKED:
            raise AuthError(BLOCKED_MESSAGE)

        if account.attendance_status != ATTENDANCE_ON_LEAVE:
            account.attendance_status = classify_attendance(now, tz=self.tz)
        _record_streak(account, now, self.tz)
        account.last_login_time = now
        account.last_ip_address = mock_ip_address()
        self.accounts.put(account)

        self.event_repo.append_event(
            household_id=account.household_id,
            event_type="attendance_recorded",
            payload=AccountEvent.attendance_recorded(account.household_id, account.attendance_status, now),
            occurred_at=now,
        )
        self.db.commit()
        logger.info("Staff %s checked in: %s", account.household_id, account.attendance_status)
        return account


class AdminLoginUseCase:
    """Admin portal login (identity already confirmed by OTP)."""

    def __init__(self, db: Session, accounts: AccountRepository | None = None):
        self.db = db
        self.accounts = accounts or AccountRepository(db)

    def execute(self, identifier: str) -> AccountModel:
        account = self.accounts.get_by_identifier(normalize_identifier(identifier or ""))
        if not account or not _can_use_portal(account, (ROLE_ADMIN,)):
            raise AuthError("Admin account not found.")
        if account.status == STATUS_BLOCKED:
            raise AuthError(BLOCKED_MESSAGE)
        return account


def find_portal_account(db: Session, identifier: str, roles: tuple[str, ...]) -> AccountModel | None:
    """Lookup used before sending an OTP: the account must exist and be allowed into the portal."""
    account = AccountRepository(db).get_by_identifier(normalize_identifier(identifier or ""))
    if not account or not _can_use_portal(account, roles):
        return None
    return account


# ============================================================================
# Profile
# ============================================================================


class UpdateProfileUseCase:
    def __init__(self, db: Session, accounts: AccountRepository | None = None):
        self.db = db
        self.accounts = accounts or AccountRepository(db)

    def execute(self, household_id: str, **changes) -> AccountModel:
        account = _get_or_raise(self.accounts, household_id)

        if "name" in changes and changes["name"] is not None:
            name = changes["name"].strip()
            if not name:
                raise AccountValidationError("Name cannot be empty")
            changes["name"] = name

        for key in PROFILE_FIELDS:
            if key in changes and changes[key] is not None:
                setattr(account, key, changes[key])

        self.accounts.put(account)
        self.db.commit()
        return account


class ToggleBookingRemindersUseCase:
    def __init__(self, db: Session, accounts: AccountRepository | None = None):
        self.db = db
        self.accounts = accounts or AccountRepository(db)

    def execute(self, household_id: str) -> bool:
        account = _get_or_raise(self.accounts, household_id)
        account.booking_reminders = not account.booking_reminders
        self.accounts.put(account)
        self.db.commit()
        return account.booking_reminders


class ClearWarningUseCase:
    """The household acknowledged the admin warning."""

    def __init__(self, db: Session, accounts: AccountRepository | None = None):
        self.db = db
        self.accounts = accounts or AccountRepository(db)
        self.event_repo = EventLogRepository(db)

    def execute(self, household_id: str) -> AccountModel:
        account = _get_or_raise(self.accounts, household_id)
        if account.status == STATUS_WARNED:
            account.status = STATUS_ACTIVE
        account.warning_message = None
        self.accounts.put(account)
        self.event_repo.append_event(
            household_id=household_id,
            event_type="account_status_changed",
            payload=AccountEvent.status_changed(household_id, account.status),
        )
        self.db.commit()
        return account


# ============================================================================
# Admin management
# ============================================================================


class ProvisionAccountUseCase:
    """Admin creates a staff or admin account (households normally sign up themselves)."""

    def __init__(self, db: Session, accounts: AccountRepository | None = None):
        self.db = db
        self.accounts = accounts or AccountRepository(db)
        self.event_repo = EventLogRepository(db)

    def execute(
        self,
        name: str,
        identifier: str,
        role: str,
        password: str | None = None,
        family_size: int = 1,
        area: str = "",
        landmark: str = "",
        pincode: str = "",
        actor_id: str | None = None,
        now: datetime | None = None,
    ) -> AccountModel:
        now = now or datetime.now(timezone.utc)
        if role not in ROLES:
            raise AccountValidationError(f"Unknown role: {role}")
        name = (name or "").strip()
        if not name:
            raise AccountValidationError("Name cannot be empty")
        if family_size < 1:
            raise AccountValidationError("Family size must be at least 1")

        normalized = normalize_identifier(identifier or "")
        if not normalized:
            raise AccountValidationError("Enter a mobile number or email")
        if self.accounts.get_by_identifier(normalized):
            raise AccountValidationError("An account with this identifier already exists.")
        if password and not is_strong_password(password):
            raise AccountValidationError(WEAK_PASSWORD_MESSAGE)

        household_id = _unique_household_id(self.accounts, role, name, now)
        account = AccountModel(
            household_id=household_id,
            name=name,
            identifier=normalized,
            email=normalized if is_email(normalized) else "",
            password_hash=hash_password(password) if password else None,
            role=role,
            status=STATUS_ACTIVE,
            has_green_badge=role == ROLE_ADMIN,
            created_at=now,
            outstanding_balance=Decimal("0"),
            family_size=family_size,
            address_area=area,
            address_landmark=landmark,
            address_pincode=pincode,
            login_streak=0,
            consecutive_mixed_waste_logs=0,
            attendance_status=ATTENDANCE_ABSENT if role in STAFF_ROLES else None,
        )
        self.accounts.put(account)
        self.event_repo.append_event(
            household_id=household_id,
            event_type="account_created",
            payload=AccountEvent.created(household_id, role, family_size, Decimal("0")),
            occurred_at=now,
            actor_id=actor_id,
        )
        self.db.commit()
        logger.info("Account %s (%s) provisioned by %s", household_id, role, actor_id)
        return account


class UpdateAccountUseCase:
    """Admin edit of household details."""

    def __init__(self, db: Session, accounts: AccountRepository | None = None):
        self.db = db
        self.accounts = accounts or AccountRepository(db)

    def execute(self, household_id: str, **changes) -> AccountModel:
        account = _get_or_raise(self.accounts, household_id)

        if changes.get("name") is not None:
            name = changes["name"].strip()
            if not name:
                raise AccountValidationError("Name cannot be empty")
            account.name = name
        if changes.get("email") is not None:
            account.email = changes["email"].strip().lower()
        if changes.get("family_size") is not None:
            if changes["family_size"] < 1:
                raise AccountValidationError("Family size must be at least 1")
            account.family_size = changes["family_size"]
        if changes.get("has_green_badge") is not None:
            account.has_green_badge = changes["has_green_badge"]
        for key, column in (("area", "address_area"), ("landmark", "address_landmark"), ("pincode", "address_pincode")):
            if changes.get(key) is not None:
                setattr(account, column, changes[key])

        self.accounts.put(account)
        self.db.commit()
        return account


class ChangeAccountStatusUseCase:
    """warn / block / unblock."""

    def __init__(self, db: Session, accounts: AccountRepository | None = None):
        self.db = db
        self.accounts = accounts or AccountRepository(db)
        self.event_repo = EventLogRepository(db)

    def warn(self, household_id: str, message: str, actor_id: str | None = None) -> AccountModel:
        message = (message or "").strip()
        if not message:
            raise AccountValidationError("Warning message cannot be empty")
        return self._apply(household_id, STATUS_WARNED, message, actor_id)

    def block(self, household_id: str, actor_id: str | None = None) -> AccountModel:
        return self._apply(household_id, STATUS_BLOCKED, None, actor_id)

    def unblock(self, household_id: str, actor_id: str | None = None) -> AccountModel:
        return self._apply(household_id, STATUS_ACTIVE, None, actor_id)

    def _apply(self, household_id: str, status: str, warning_message: str | None, actor_id: str | None) -> AccountModel:
        account = _get_or_raise(self.accounts, household_id)
        account.status = status
        account.warning_message = warning_message
        self.accounts.put(account)
        self.event_repo.append_event(
            household_id=household_id,
            event_type="account_status_changed",
            payload=AccountEvent.status_changed(household_id, status, warning_message),
            actor_id=actor_id,
        )
        self.db.commit()
        logger.info("Account %s status -> %s (by %s)", household_id, status, actor_id)
        return account


class DeleteAccountUseCase:
    def __init__(self, db: Session, accounts: AccountRepository | None = None):
        self.db = db
        self.accounts = accounts or AccountRepository(db)
        self.event_repo = EventLogRepository(db)

    def execute(self, household_id: str, actor_id: str | None = None) -> None:
        if actor_id == household_id:
            raise AccountValidationError("You cannot delete your own account")
        if not self.accounts.delete(household_id):
            raise AccountValidationError(f"Account {household_id} not found")
        self.event_repo.append_event(
            household_id=household_id,
            event_type="account_deleted",
            payload={"household_id": household_id},
            actor_id=actor_id,
        )
        self.db.commit()
        logger.info("Account %s deleted by %s", household_id, actor_id)


# ============================================================================
# Staff
# ============================================================================


class UpdateLocationUseCase:
    def __init__(self, db: Session, accounts: AccountRepository | None = None):
        self.db = db
        self.accounts = accounts or AccountRepository(db)

    def execute(self, household_id: str, lat: float, lng: float, now: datetime | None = None) -> AccountModel:
        if not -90 <= lat <= 90 or not -180 <= lng <= 180:
            raise AccountValidationError("Invalid coordinates")
        account = _get_or_raise(self.accounts, household_id)
        account.last_location_lat = lat
        account.last_location_lng = lng
        account.last_location_at = now or datetime.now(timezone.utc)
        self.accounts.put(account)
        self.db.commit()
        return account


class SetLeaveUseCase:
    """Admin puts a staff member on leave or brings them back (back = absent until next check-in)."""

    def __init__(self, db: Session, accounts: AccountRepository | None = None):
        self.db = db
        self.accounts = accounts or AccountRepository(db)
        self.event_repo = EventLogRepository(db)

    def execute(self, household_id: str, on_leave: bool, actor_id: str | None = None) -> AccountModel:
        account = _get_or_raise(self.accounts, household_id)
        if account.role not in STAFF_ROLES:
            raise AccountValidationError("Only employees and drivers can be put on leave")

        account.attendance_status = ATTENDANCE_ON_LEAVE if on_leave else ATTENDANCE_ABSENT
        self.accounts.put(account)
        self.event_repo.append_event(
            household_id=household_id,
            event_type="attendance_recorded",
            payload={"household_id": household_id, "attendance_status": account.attendance_status},
            actor_id=actor_id,
        )
        self.db.commit()
        return account
