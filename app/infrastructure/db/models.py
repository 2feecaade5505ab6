"""
SQLAlchemy ORM models (accounts, household activity, admin settings, event log)
"""
from decimal import Decimal
from datetime import date as date_type, datetime
from sqlalchemy import String, Integer, Text, TIMESTAMP, Date, Float, func, Boolean, Numeric, SmallInteger
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import JSONB

from app.infrastructure.db.session import Base


class AccountModel(Base):
    """
    Account of any role: household, admin, employee, driver.

    household_id is the public reference used by every other table.
    """
    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(primary_key=True)
    household_id: Mapped[str] = mapped_column(String(32), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    identifier: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)

    role: Mapped[str] = mapped_column(String(16), nullable=False, default="household", server_default="household")
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="active", server_default="active")
    warning_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    has_green_badge: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")
    booking_reminders: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default="true")
    push_notifications: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default="true")
    email_notifications: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default="true")
    sms_notifications: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default="true")
    profile_picture: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    outstanding_balance: Mapped[Decimal] = mapped_column(
        Numeric(precision=20, scale=2),
        nullable=False,
        default=Decimal("0"),
        server_default="0"
    )
    family_size: Mapped[int] = mapped_column(Integer, nullable=False, default=1, server_default="1")
    address_area: Mapped[str] = mapped_column(String(255), nullable=False, default="", server_default="")
    address_landmark: Mapped[str] = mapped_column(String(255), nullable=False, default="", server_default="")
    address_pincode: Mapped[str] = mapped_column(String(16), nullable=False, default="", server_default="")

    login_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    last_streak_increment: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)

    consecutive_mixed_waste_logs: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    last_waste_log_date: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)

    # Staff only
    attendance_status: Mapped[str | None] = mapped_column(String(16), nullable=True)  # present, absent, on_leave
    last_login_time: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    last_ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    last_location_lat: Mapped[float | None] = mapped_column(Float, nullable=True)
    last_location_lng: Mapped[float | None] = mapped_column(Float, nullable=True)
    last_location_at: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)


class PaymentModel(Base):
    """Monthly bill payment; screenshot is a data URL uploaded by the household"""
    __tablename__ = "payments"

    id: Mapped[int] = mapped_column(primary_key=True)
    txn_ref: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    household_id: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=2), nullable=False)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="Pending Verification", server_default="Pending Verification")
    screenshot: Mapped[str | None] = mapped_column(Text, nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
    resolved_at: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)


class ComplaintModel(Base):
    __tablename__ = "complaints"

    id: Mapped[int] = mapped_column(primary_key=True)
    complaint_ref: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    household_id: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    issue: Mapped[str] = mapped_column(String(255), nullable=False)
    details: Mapped[str] = mapped_column(Text, nullable=False, default="", server_default="")
    photo: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="Pending", server_default="Pending")
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)


class BookingModel(Base):
    """
    Special pickup booking.

    pickup_date is a plain calendar date (no time zone).
    needs_fee_adjustment=True marks events above the largest fee band.
    """
    __tablename__ = "bookings"

    id: Mapped[int] = mapped_column(primary_key=True)
    booking_ref: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    household_id: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    pickup_date: Mapped[date_type] = mapped_column(Date, nullable=False)
    time_slot: Mapped[str] = mapped_column(String(16), nullable=False)  # Morning, Afternoon
    waste_type: Mapped[str] = mapped_column(String(32), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="Scheduled", server_default="Scheduled")
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    attendee_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    booking_fee: Mapped[Decimal | None] = mapped_column(Numeric(precision=20, scale=2), nullable=True)
    needs_fee_adjustment: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)


class MessageModel(Base):
    __tablename__ = "messages"

    id: Mapped[int] = mapped_column(primary_key=True)
    recipient_id: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)


class FeedbackModel(Base):
    __tablename__ = "feedback"

    id: Mapped[int] = mapped_column(primary_key=True)
    household_id: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    feedback_text: Mapped[str] = mapped_column(Text, nullable=False)
    rating: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)


class WasteLogModel(Base):
    __tablename__ = "waste_logs"

    id: Mapped[int] = mapped_column(primary_key=True)
    log_ref: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    household_id: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    waste_type: Mapped[str] = mapped_column(String(16), nullable=False)  # Wet, Dry, Mixed
    logged_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False, index=True)


class SubscriptionPlanModel(Base):
    """Single-row table: monthly fee tiers"""
    __tablename__ = "subscription_plans"

    id: Mapped[int] = mapped_column(primary_key=True)
    standard: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=2), nullable=False)
    large_family: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=2), nullable=False)
    large_family_threshold: Mapped[int] = mapped_column(Integer, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )


class BroadcastModel(Base):
    """Single-row table: banner shown to every household"""
    __tablename__ = "broadcasts"

    id: Mapped[int] = mapped_column(primary_key=True)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )


class EventLog(Base):
    """
    Audit trail of account state transitions (immutable)
    """
    __tablename__ = "event_log"

    id: Mapped[int] = mapped_column(primary_key=True)
    household_id: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    actor_id: Mapped[str | None] = mapped_column(String(32), nullable=True)

    event_type: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    payload_json: Mapped[dict] = mapped_column(JSONB, nullable=False)

    occurred_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        nullable=False
    )


class OtpChallengeModel(Base):
    """
    Pending staff/admin login code.

    The HTTP session carries only challenge_id; the code hash never leaves the server.
    """
    __tablename__ = "otp_challenges"

    id: Mapped[int] = mapped_column(primary_key=True)
    challenge_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    identifier: Mapped[str] = mapped_column(String(255), nullable=False)
    portal: Mapped[str] = mapped_column(String(16), nullable=False)
    code_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    attempts: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    expires_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
