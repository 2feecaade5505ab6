"""
Tests for account identity helpers
"""
from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace

from app.domain.account import (
    AccountSnapshot,
    normalize_identifier,
    is_strong_password,
    generate_household_id,
    mock_ip_address,
)


class TestIdentity:
    def test_normalize_identifier(self):
        assert normalize_identifier("  Jane.Doe@Example.COM ") == "jane.doe@example.com"
        assert normalize_identifier("+91 98765-43210") == "919876543210"

    def test_strong_password(self):
        assert is_strong_password("Green@123")
        assert is_strong_password("Green_123")
        assert not is_strong_password("green@123")
        assert not is_strong_password("Green123")
        assert not is_strong_password("Gr@1")

    def test_household_id_format(self):
        now = datetime(2026, 10, 5, tzinfo=timezone.utc)
        millis = str(int(now.timestamp() * 1000))
        assert generate_household_id("household", "jane@x.com", now) == f"HH-JANE-{millis[-4:]}"
        assert generate_household_id("driver", "Ravi Kumar", now).startswith("DRV-RAVI-")

    def test_mock_ip(self):
        assert mock_ip_address().startswith("103.12.")


class TestAccountSnapshot:
    def test_round_trip_through_model(self):
        row = SimpleNamespace(
            household_id="HH-ASHA-0001",
            role="household",
            status="active",
            login_streak=None,
            last_streak_increment=None,
            consecutive_mixed_waste_logs=2,
            last_waste_log_date=None,
            outstanding_balance="75.00",
            family_size=6,
            attendance_status=None,
        )
        snapshot = AccountSnapshot.from_model(row)
        assert snapshot.login_streak == 0
        assert snapshot.outstanding_balance == Decimal("75")

        target = SimpleNamespace()
        snapshot.apply_to(target)
        assert target.consecutive_mixed_waste_logs == 2
        assert target.outstanding_balance == Decimal("75")
