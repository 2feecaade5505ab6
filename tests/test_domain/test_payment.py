"""
Tests for payment verdicts and verifiers
"""
import random
from decimal import Decimal

from app.domain.payment import (
    PaymentVerdict,
    SimulatedPaymentVerifier,
    FixedPaymentVerifier,
    apply_payment_verdict,
    PAYMENT_PAID,
    PAYMENT_REJECTED,
    AUTOMATED_REJECTION_REASON,
)


class TestApplyPaymentVerdict:
    def test_paid_subtracts(self):
        verdict = PaymentVerdict(status=PAYMENT_PAID)
        assert apply_payment_verdict(Decimal("175"), Decimal("75"), verdict) == Decimal("100")

    def test_rejected_leaves_balance(self):
        verdict = PaymentVerdict(status=PAYMENT_REJECTED, rejection_reason="blurry")
        assert apply_payment_verdict(Decimal("175"), Decimal("75"), verdict) == Decimal("175")

    def test_overpayment_goes_negative(self):
        verdict = PaymentVerdict(status=PAYMENT_PAID)
        assert apply_payment_verdict(Decimal("63"), Decimal("100"), verdict) == Decimal("-37")


class TestVerifiers:
    def test_fixed_verifier(self):
        verdict = PaymentVerdict(status=PAYMENT_PAID)
        assert FixedPaymentVerifier(verdict).verify(object()) is verdict

    def test_simulated_always_paid_at_rate_one(self):
        verifier = SimulatedPaymentVerifier(success_rate=1.0, rng=random.Random(1))
        assert all(verifier.verify(None).is_paid for _ in range(20))

    def test_simulated_always_rejected_at_rate_zero(self):
        verifier = SimulatedPaymentVerifier(success_rate=0.0, rng=random.Random(1))
        verdict = verifier.verify(None)
        assert verdict.status == PAYMENT_REJECTED
        assert verdict.rejection_reason == AUTOMATED_REJECTION_REASON
