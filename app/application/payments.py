"""
Payment use cases: submission, automated verification, manual admin review
"""
import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation

from sqlalchemy.orm import Session

from app.config import get_settings
from app.domain.account import AccountEvent
from app.domain.payment import (
    PaymentVerifier,
    PaymentVerdict,
    SimulatedPaymentVerifier,
    FixedPaymentVerifier,
    apply_payment_verdict,
    PAYMENT_PENDING,
    PAYMENT_PAID,
    PAYMENT_REJECTED,
    MANUAL_REJECTION_REASON,
)
from app.infrastructure.db.models import PaymentModel
from app.infrastructure.db.repositories import AccountRepository
from app.infrastructure.eventlog.repository import EventLogRepository
from app.utils.refs import new_ref

logger = logging.getLogger(__name__)


class PaymentValidationError(ValueError):
    pass


def default_verifier() -> PaymentVerifier:
    return SimulatedPaymentVerifier(success_rate=get_settings().PAYMENT_VERIFICATION_SUCCESS_RATE)


class SubmitPaymentUseCase:
    """Household uploads proof of a UPI transfer; the payment waits for verification."""

    def __init__(self, db: Session, accounts: AccountRepository | None = None):
        self.db = db
        self.accounts = accounts or AccountRepository(db)
        self.event_repo = EventLogRepository(db)

    def execute(
        self,
        household_id: str,
        screenshot: str,
        amount: Decimal | str | None = None,
        now: datetime | None = None,
    ) -> PaymentModel:
        now = now or datetime.now(timezone.utc)
        account = self.accounts.get(household_id)
        if not account:
            raise PaymentValidationError(f"Account {household_id} not found")
        if not screenshot:
            raise PaymentValidationError("Upload the payment screenshot")

        if amount is None:
            amount = Decimal(account.outstanding_balance)
        else:
            try:
                amount = Decimal(str(amount))
            except InvalidOperation:
                raise PaymentValidationError("Invalid amount")
        if amount <= 0:
            raise PaymentValidationError("Nothing to pay")

        payment = PaymentModel(
            txn_ref=new_ref("TXN", ""),
            household_id=household_id,
            amount=amount,
            status=PAYMENT_PENDING,
            screenshot=screenshot,
            created_at=now,
        )
        self.db.add(payment)
        self.db.flush()

        self.event_repo.append_event(
            household_id=household_id,
            event_type="payment_submitted",
            payload={"txn_ref": payment.txn_ref, "amount": str(amount)},
            occurred_at=now,
        )
        self.db.commit()
        logger.info("Payment %s submitted by %s (%s)", payment.txn_ref, household_id, amount)
        return payment


class VerifyPaymentUseCase:
    """
    Apply exactly one terminal verdict to a pending payment.

    Paid subtracts the amount from the household balance; Rejected stores
    the reason. Payments already resolved are refused.
    """

    def __init__(self, db: Session, verifier: PaymentVerifier | None = None, accounts: AccountRepository | None = None):
        self.db = db
        self.verifier = verifier or default_verifier()
        self.accounts = accounts or AccountRepository(db)
        self.event_repo = EventLogRepository(db)

    def execute(self, payment_id: int, actor_id: str | None = None, now: datetime | None = None) -> PaymentModel:
        now = now or datetime.now(timezone.utc)
        payment = (
            self.db.query(PaymentModel)
            .filter(PaymentModel.id == payment_id)
            .with_for_update()
            .populate_existing()
            .first()
        )
        if not payment:
            raise PaymentValidationError(f"Payment #{payment_id} not found")
        if payment.status != PAYMENT_PENDING:
            raise PaymentValidationError(f"Payment {payment.txn_ref} is already {payment.status}")

        verdict = self.verifier.verify(payment)

        # Conditional write: a concurrent verdict committed since the read wins
        claimed = (
            self.db.query(PaymentModel)
            .filter(PaymentModel.id == payment_id, PaymentModel.status == PAYMENT_PENDING)
            .update(
                {
                    PaymentModel.status: verdict.status,
                    PaymentModel.rejection_reason: verdict.rejection_reason,
                    PaymentModel.resolved_at: now,
                },
                synchronize_session=False,
            )
        )
        if claimed != 1:
            self.db.rollback()
            self.db.refresh(payment)
            raise PaymentValidationError(f"Payment {payment.txn_ref} is already {payment.status}")
        self.db.refresh(payment)

        account = self.accounts.get_for_update(payment.household_id)
        if account and verdict.is_paid:
            amount = Decimal(payment.amount)
            account.outstanding_balance = apply_payment_verdict(
                Decimal(account.outstanding_balance), amount, verdict
            )
            self.accounts.put(account)
            self.event_repo.append_event(
                household_id=account.household_id,
                event_type="balance_changed",
                payload=AccountEvent.balance_changed(
                    account.household_id, "payment", -amount, account.outstanding_balance, payment.txn_ref
                ),
                occurred_at=now,
                actor_id=actor_id,
            )

        self.event_repo.append_event(
            household_id=payment.household_id,
            event_type="payment_verified",
            payload={"txn_ref": payment.txn_ref, "status": verdict.status, "reason": verdict.rejection_reason},
            occurred_at=now,
            actor_id=actor_id,
        )
        self.db.commit()
        logger.info("Payment %s -> %s", payment.txn_ref, verdict.status)
        return payment


class ApprovePaymentUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, payment_id: int, actor_id: str | None = None) -> PaymentModel:
        verifier = FixedPaymentVerifier(PaymentVerdict(status=PAYMENT_PAID))
        return VerifyPaymentUseCase(self.db, verifier=verifier).execute(payment_id, actor_id=actor_id)


class RejectPaymentUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, payment_id: int, reason: str | None = None, actor_id: str | None = None) -> PaymentModel:
        verdict = PaymentVerdict(status=PAYMENT_REJECTED, rejection_reason=(reason or "").strip() or MANUAL_REJECTION_REASON)
        return VerifyPaymentUseCase(self.db, verifier=FixedPaymentVerifier(verdict)).execute(payment_id, actor_id=actor_id)


def verify_pending_payments(db: Session, verifier: PaymentVerifier | None = None, now: datetime | None = None) -> int:
    """
    Scheduler job: run the verifier over payments pending longer than
    PAYMENT_VERIFICATION_DELAY_SECONDS.

    Returns:
        Number of payments resolved
    """
    now = now or datetime.now(timezone.utc)
    cutoff = now - timedelta(seconds=get_settings().PAYMENT_VERIFICATION_DELAY_SECONDS)
    pending = (
        db.query(PaymentModel)
        .filter(PaymentModel.status == PAYMENT_PENDING, PaymentModel.created_at <= cutoff)
        .order_by(PaymentModel.id.asc())
        .all()
    )

    use_case = VerifyPaymentUseCase(db, verifier=verifier)
    resolved = 0
    for payment_id in [p.id for p in pending]:
        try:
            use_case.execute(payment_id, now=now)
            resolved += 1
        except PaymentValidationError as e:
            db.rollback()
            logger.info("Skipping payment #%s: %s", payment_id, e)
        except Exception:
            db.rollback()
            logger.exception("Verification of payment #%s failed", payment_id)
    return resolved


def list_payments(db: Session, household_id: str | None = None) -> list[PaymentModel]:
    """Pending first, then newest first."""
    query = db.query(PaymentModel)
    if household_id:
        query = query.filter(PaymentModel.household_id == household_id)
    payments = query.order_by(PaymentModel.created_at.desc(), PaymentModel.id.desc()).all()
    return sorted(payments, key=lambda p: p.status != PAYMENT_PENDING)
