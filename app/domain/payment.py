"""
Payment domain: status machine and the pluggable verification capability

Pending Verification -> Paid | Rejected (exactly one terminal transition).
"""
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal

PAYMENT_PENDING = "Pending Verification"
PAYMENT_PAID = "Paid"
PAYMENT_REJECTED = "Rejected"

PAYMENT_STATUSES = (PAYMENT_PENDING, PAYMENT_PAID, PAYMENT_REJECTED)
TERMINAL_STATUSES = (PAYMENT_PAID, PAYMENT_REJECTED)

AUTOMATED_REJECTION_REASON = "Automated verification failed. Please check the screenshot and try again."
MANUAL_REJECTION_REASON = "Screenshot unclear or invalid."


@dataclass(frozen=True)
class PaymentVerdict:
    status: str
    rejection_reason: str | None = None

    @property
    def is_paid(self) -> bool:
        return self.status == PAYMENT_PAID


class PaymentVerifier(ABC):
    """
    Verifies a pending payment and returns exactly one terminal verdict.

    The built-in implementation is a simulation; a real gateway client
    replaces it without touching the use cases.
    """

    @abstractmethod
    def verify(self, payment) -> PaymentVerdict:
        pass


class SimulatedPaymentVerifier(PaymentVerifier):
    """Approves with probability ``success_rate`` (0.8 by default)."""

    def __init__(self, success_rate: float = 0.8, rng: random.Random | None = None):
        self.success_rate = success_rate
        self.rng = rng or random.Random()

    def verify(self, payment) -> PaymentVerdict:
        if self.rng.random() < self.success_rate:
            return PaymentVerdict(status=PAYMENT_PAID)
        return PaymentVerdict(status=PAYMENT_REJECTED, rejection_reason=AUTOMATED_REJECTION_REASON)


class FixedPaymentVerifier(PaymentVerifier):
    """Always returns the same verdict (admin decisions, tests)."""

    def __init__(self, verdict: PaymentVerdict):
        self.verdict = verdict

    def verify(self, payment) -> PaymentVerdict:
        return self.verdict


def apply_payment_verdict(balance: Decimal, amount: Decimal, verdict: PaymentVerdict) -> Decimal:
    """Balance after a verdict: only Paid subtracts. No clamping at zero."""
    if verdict.is_paid:
        return balance - amount
    return balance
