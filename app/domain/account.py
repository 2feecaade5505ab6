"""
Account domain entity - engine-facing snapshot and identity rules
"""
import random
import re
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

ROLE_HOUSEHOLD = "household"
ROLE_ADMIN = "admin"
ROLE_EMPLOYEE = "employee"
ROLE_DRIVER = "driver"

ROLES = (ROLE_HOUSEHOLD, ROLE_ADMIN, ROLE_EMPLOYEE, ROLE_DRIVER)
STAFF_ROLES = (ROLE_EMPLOYEE, ROLE_DRIVER)

STATUS_ACTIVE = "active"
STATUS_BLOCKED = "blocked"
STATUS_WARNED = "warned"

ACCOUNT_STATUSES = (STATUS_ACTIVE, STATUS_BLOCKED, STATUS_WARNED)

# household_id prefix per role
_ID_PREFIX = {
    ROLE_HOUSEHOLD: "HH",
    ROLE_ADMIN: "ADM",
    ROLE_EMPLOYEE: "EMP",
    ROLE_DRIVER: "DRV",
}


@dataclass(frozen=True)
class AccountSnapshot:
    """
    The account fields the state-transition rules read and write.

    The engine never touches storage: use cases build a snapshot from the
    stored row, pass it through the rules and write the result back.
    """
    household_id: str
    role: str = ROLE_HOUSEHOLD
    status: str = STATUS_ACTIVE
    login_streak: int = 0
    last_streak_increment: datetime | None = None
    consecutive_mixed_waste_logs: int = 0
    last_waste_log_date: datetime | None = None
    outstanding_balance: Decimal = field(default_factory=lambda: Decimal("0"))
    family_size: int = 1
    attendance_status: str | None = None

    @classmethod
    def from_model(cls, account) -> "AccountSnapshot":
        return cls(
            household_id=account.household_id,
            role=account.role,
            status=account.status,
            login_streak=account.login_streak or 0,
            last_streak_increment=account.last_streak_increment,
            consecutive_mixed_waste_logs=account.consecutive_mixed_waste_logs or 0,
            last_waste_log_date=account.last_waste_log_date,
            outstanding_balance=Decimal(account.outstanding_balance or 0),
            family_size=account.family_size,
            attendance_status=account.attendance_status,
        )

    def apply_to(self, account) -> None:
        """Copy the rule-managed fields back onto an ORM row."""
        account.login_streak = self.login_streak
        account.last_streak_increment = self.last_streak_increment
        account.consecutive_mixed_waste_logs = self.consecutive_mixed_waste_logs
        account.last_waste_log_date = self.last_waste_log_date
        account.outstanding_balance = self.outstanding_balance
        account.attendance_status = self.attendance_status


def normalize_identifier(raw: str) -> str:
    """
    Emails are lower-cased, phone numbers reduced to digits.

    Example:
        >>> normalize_identifier("Jane.Doe@Example.com")
        'jane.doe@example.com'
        >>> normalize_identifier("+91 96359-29052")
        '919635929052'
    """
    raw = raw.strip()
    if "@" in raw:
        return raw.lower()
    return re.sub(r"[^0-9]", "", raw)


def is_email(identifier: str) -> bool:
    return "@" in identifier


def is_strong_password(password: str) -> bool:
    """At least 8 chars with upper, lower, digit and a non-alphanumeric (underscore counts)."""
    return (
        len(password) >= 8
        and re.search(r"[A-Z]", password) is not None
        and re.search(r"[a-z]", password) is not None
        and re.search(r"\d", password) is not None
        and re.search(r"\W|_", password) is not None
    )


def generate_household_id(role: str, seed: str, now: datetime) -> str:
    """
    Public account id: ``<PREFIX>-<first 4 chars of seed>-<last 4 digits of epoch ms>``.

    Example:
        HH-JANE-9876, EMP-RAVI-1234
    """
    prefix = _ID_PREFIX[role]
    stem = re.sub(r"[^A-Za-z0-9]", "", seed)[:4].upper()
    millis = str(int(now.timestamp() * 1000))
    return f"{prefix}-{stem}-{millis[-4:]}"


def mock_ip_address() -> str:
    return f"103.12.{random.randint(0, 254)}.{random.randint(0, 254)}"


class AccountEvent:
    """Event payloads for the account audit trail"""

    @staticmethod
    def created(household_id: str, role: str, family_size: int, opening_balance: Decimal) -> dict:
        return {
            "household_id": household_id,
            "role": role,
            "family_size": family_size,
            "opening_balance": str(opening_balance),
        }

    @staticmethod
    def login_recorded(household_id: str, portal: str, login_streak: int, ip_address: str) -> dict:
        return {
            "household_id": household_id,
            "portal": portal,
            "login_streak": login_streak,
            "ip_address": ip_address,
        }

    @staticmethod
    def attendance_recorded(household_id: str, attendance_status: str, check_in_at: datetime) -> dict:
        return {
            "household_id": household_id,
            "attendance_status": attendance_status,
            "check_in_at": check_in_at.isoformat(),
        }

    @staticmethod
    def status_changed(household_id: str, status: str, warning_message: str | None = None) -> dict:
        payload = {"household_id": household_id, "status": status}
        if warning_message:
            payload["warning_message"] = warning_message
        return payload

    @staticmethod
    def waste_logged(household_id: str, log_ref: str, waste_type: str, consecutive_mixed: int) -> dict:
        return {
            "household_id": household_id,
            "log_ref": log_ref,
            "waste_type": waste_type,
            "consecutive_mixed_waste_logs": consecutive_mixed,
        }

    @staticmethod
    def fine_applied(household_id: str, amount: Decimal, new_balance: Decimal) -> dict:
        return {
            "household_id": household_id,
            "amount": str(amount),
            "new_balance": str(new_balance),
        }

    @staticmethod
    def balance_changed(household_id: str, reason: str, delta: Decimal, new_balance: Decimal, ref: str | None = None) -> dict:
        payload = {
            "household_id": household_id,
            "reason": reason,
            "delta": str(delta),
            "new_balance": str(new_balance),
        }
        if ref:
            payload["ref"] = ref
        return payload
