"""
Admin statistics readmodel: queries accounts + activity tables for the admin panel.

All functions accept a SQLAlchemy Session and return plain dicts/lists.
Amounts are returned as strings.
"""
from decimal import Decimal

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.domain.account import ROLES, ROLE_HOUSEHOLD, STAFF_ROLES
from app.domain.attendance import ATTENDANCE_PRESENT
from app.domain.booking import BOOKING_SCHEDULED, COMPLAINT_RESOLVED
from app.domain.payment import PAYMENT_PENDING, PAYMENT_PAID
from app.infrastructure.db.models import (
    AccountModel,
    PaymentModel,
    ComplaintModel,
    BookingModel,
    WasteLogModel,
    EventLog,
)

RECENT_PAYMENTS_LIMIT = 5


def payment_row(p: PaymentModel) -> dict:
    return {
        "id": p.id,
        "txn_ref": p.txn_ref,
        "household_id": p.household_id,
        "amount": str(p.amount),
        "status": p.status,
        "rejection_reason": p.rejection_reason,
        "created_at": p.created_at,
        "resolved_at": p.resolved_at,
    }


def complaint_row(c: ComplaintModel) -> dict:
    return {
        "id": c.id,
        "complaint_ref": c.complaint_ref,
        "household_id": c.household_id,
        "issue": c.issue,
        "details": c.details,
        "status": c.status,
        "created_at": c.created_at,
    }


def booking_row(b: BookingModel) -> dict:
    return {
        "id": b.id,
        "booking_ref": b.booking_ref,
        "household_id": b.household_id,
        "pickup_date": b.pickup_date,
        "time_slot": b.time_slot,
        "waste_type": b.waste_type,
        "status": b.status,
        "notes": b.notes,
        "attendee_count": b.attendee_count,
        "booking_fee": str(b.booking_fee) if b.booking_fee is not None else None,
        "needs_fee_adjustment": b.needs_fee_adjustment,
    }


def staff_row(a: AccountModel) -> dict:
    return {
        "household_id": a.household_id,
        "name": a.name,
        "identifier": a.identifier,
        "role": a.role,
        "status": a.status,
        "attendance_status": a.attendance_status,
        "last_login_time": a.last_login_time,
        "last_ip_address": a.last_ip_address,
        "last_location": (
            {"lat": a.last_location_lat, "lng": a.last_location_lng, "at": a.last_location_at}
            if a.last_location_at else None
        ),
    }


def get_overview_stats(db: Session) -> dict:
    """Aggregate stats for /admin/api/overview."""
    pending_payments = (
        db.query(PaymentModel)
        .filter(PaymentModel.status == PAYMENT_PENDING)
        .order_by(PaymentModel.created_at.asc())
        .all()
    )
    unresolved_complaints = (
        db.query(ComplaintModel)
        .filter(ComplaintModel.status != COMPLAINT_RESOLVED)
        .order_by(ComplaintModel.created_at.desc())
        .all()
    )
    scheduled_bookings = (
        db.query(BookingModel)
        .filter(BookingModel.status == BOOKING_SCHEDULED)
        .order_by(BookingModel.pickup_date.asc(), BookingModel.id.asc())
        .all()
    )
    recent_paid = (
        db.query(PaymentModel)
        .filter(PaymentModel.status == PAYMENT_PAID)
        .order_by(PaymentModel.resolved_at.desc(), PaymentModel.id.desc())
        .limit(RECENT_PAYMENTS_LIMIT)
        .all()
    )
    present_staff = (
        db.query(AccountModel)
        .filter(
            AccountModel.role.in_(STAFF_ROLES),
            AccountModel.attendance_status == ATTENDANCE_PRESENT,
        )
        .order_by(AccountModel.name)
        .all()
    )

    role_counts = dict(
        db.query(AccountModel.role, func.count(AccountModel.id))
        .group_by(AccountModel.role)
        .all()
    )
    total_balance = db.query(func.sum(AccountModel.outstanding_balance)).filter(
        AccountModel.role == ROLE_HOUSEHOLD
    ).scalar()

    return {
        "pending_payments": [payment_row(p) for p in pending_payments],
        "unresolved_complaints": [complaint_row(c) for c in unresolved_complaints],
        "scheduled_bookings": [booking_row(b) for b in scheduled_bookings],
        "recent_paid_payments": [payment_row(p) for p in recent_paid],
        "present_staff": [staff_row(a) for a in present_staff],
        "accounts_by_role": {role: role_counts.get(role, 0) for role in ROLES},
        "total_outstanding_balance": str(Decimal(total_balance or 0)),
    }


def get_staff_list(db: Session, role: str) -> list[dict]:
    """Employees or drivers with attendance and last known location."""
    accounts = (
        db.query(AccountModel)
        .filter(AccountModel.role == role)
        .order_by(AccountModel.name)
        .all()
    )
    return [staff_row(a) for a in accounts]


def get_household_history(db: Session, household_id: str) -> dict | None:
    """Everything a household did, newest first. None if the account is unknown."""
    account = db.query(AccountModel).filter(AccountModel.household_id == household_id).first()
    if not account:
        return None

    payments = (
        db.query(PaymentModel)
        .filter(PaymentModel.household_id == household_id)
        .order_by(PaymentModel.created_at.desc())
        .all()
    )
    complaints = (
        db.query(ComplaintModel)
        .filter(ComplaintModel.household_id == household_id)
        .order_by(ComplaintModel.created_at.desc())
        .all()
    )
    bookings = (
        db.query(BookingModel)
        .filter(BookingModel.household_id == household_id)
        .order_by(BookingModel.pickup_date.desc())
        .all()
    )
    waste_logs = (
        db.query(WasteLogModel)
        .filter(WasteLogModel.household_id == household_id)
        .order_by(WasteLogModel.logged_at.desc())
        .all()
    )

    return {
        "household_id": household_id,
        "name": account.name,
        "outstanding_balance": str(account.outstanding_balance),
        "payments": [payment_row(p) for p in payments],
        "complaints": [complaint_row(c) for c in complaints],
        "bookings": [booking_row(b) for b in bookings],
        "waste_logs": [
            {"log_ref": w.log_ref, "waste_type": w.waste_type, "logged_at": w.logged_at}
            for w in waste_logs
        ],
    }


def get_account_activity_feed(db: Session, household_id: str, limit: int = 50) -> list[dict]:
    """Recent audit events for an account."""
    rows = (
        db.query(EventLog)
        .filter(EventLog.household_id == household_id)
        .order_by(EventLog.occurred_at.desc(), EventLog.id.desc())
        .limit(limit)
        .all()
    )
    return [
        {
            "id": ev.id,
            "event_type": ev.event_type,
            "actor_id": ev.actor_id,
            "payload": ev.payload_json,
            "occurred_at": ev.occurred_at,
        }
        for ev in rows
    ]
