"""
Tests for the HTTP API (TestClient against in-memory SQLite)
"""
import base64
import json
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from app.api.deps import get_db
from app.application.accounts import ProvisionAccountUseCase
from app.config import get_settings
from app.main import app

OTP = "123456"


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(bind=db_engine)


@pytest.fixture
def client(session_factory, monkeypatch):
    """Test client with get_db pointed at the test engine"""
    def _get_test_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    monkeypatch.setattr("app.application.otp.generate_code", lambda: OTP)
    monkeypatch.setattr(get_settings(), "GEMINI_API_KEY", "")
    app.dependency_overrides[get_db] = _get_test_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def provision(session_factory):
    def _provision(name, identifier, role):
        db = session_factory()
        try:
            return ProvisionAccountUseCase(db).execute(name=name, identifier=identifier, role=role).household_id
        finally:
            db.close()
    return _provision


def _signup(client, identifier="9876543210", family_size=6):
    return client.post("/api/v1/auth/signup", json={
        "name": "Asha Patil",
        "identifier": identifier,
        "password": "Green@123",
        "family_size": family_size,
        "area": "Kothrud",
    })


def _admin_login(client, provision):
    provision("Meera Admin", "9000000001", "admin")
    assert client.post("/api/v1/auth/admin/otp", json={"identifier": "9000000001"}).status_code == 200
    response = client.post("/api/v1/auth/admin/login", json={"identifier": "9000000001", "code": OTP})
    assert response.status_code == 200


class TestSystem:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.text == "ok"


class TestAuthApi:
    def test_signup_logs_in(self, client):
        response = _signup(client)
        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["outstanding_balance"]) == Decimal("75")
        assert data["login_streak"] == 1

        me = client.get("/api/v1/auth/me")
        assert me.status_code == 200
        assert me.json()["household_id"] == data["household_id"]

    def test_logout(self, client):
        _signup(client)
        client.post("/api/v1/auth/logout")
        assert client.get("/api/v1/auth/me").status_code == 401

    def test_weak_password_is_400(self, client):
        response = client.post("/api/v1/auth/signup", json={
            "name": "Weak", "identifier": "1111111111", "password": "weak", "family_size": 2,
        })
        assert response.status_code == 400

    def test_wrong_password_is_401(self, client):
        _signup(client)
        client.post("/api/v1/auth/logout")
        response = client.post("/api/v1/auth/login", json={"identifier": "9876543210", "password": "Nope@1234"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid password."

    def test_admin_wrong_otp(self, client, provision):
        provision("Meera Admin", "9000000001", "admin")
        client.post("/api/v1/auth/admin/otp", json={"identifier": "9000000001"})
        response = client.post("/api/v1/auth/admin/login", json={"identifier": "9000000001", "code": "000000"})
        assert response.status_code == 401

    def test_admin_otp_unknown_account(self, client):
        response = client.post("/api/v1/auth/admin/otp", json={"identifier": "9999999999"})
        assert response.status_code == 404

    def test_session_cookie_holds_only_challenge_id(self, client, provision, monkeypatch):
        monkeypatch.setattr(get_settings(), "DEBUG", False)
        provision("Meera Admin", "9000000001", "admin")
        response = client.post("/api/v1/auth/admin/otp", json={"identifier": "9000000001"})
        assert response.json() == {"status": "sent"}

        signed = client.cookies["session"].strip('"')
        data = json.loads(base64.b64decode(signed.split(".")[0]))
        assert list(data) == ["otp_challenge"]
        assert isinstance(data["otp_challenge"], str)
        assert "pbkdf2" not in json.dumps(data)

    def test_sixth_otp_guess_is_refused(self, client, provision):
        provision("Meera Admin", "9000000001", "admin")
        client.post("/api/v1/auth/admin/otp", json={"identifier": "9000000001"})
        for _ in range(5):
            response = client.post("/api/v1/auth/admin/login", json={"identifier": "9000000001", "code": "000000"})
            assert response.status_code == 401

        response = client.post("/api/v1/auth/admin/login", json={"identifier": "9000000001", "code": OTP})
        assert response.status_code == 401


class TestHouseholdApi:
    def test_requires_login(self, client):
        assert client.get("/api/v1/waste-logs/").status_code == 401

    def test_log_waste_once_per_day(self, client):
        _signup(client)
        first = client.post("/api/v1/waste-logs/", json={"waste_type": "Mixed"})
        second = client.post("/api/v1/waste-logs/", json={"waste_type": "Wet"})

        assert first.status_code == 200
        assert first.json()["accepted"] is True
        assert first.json()["consecutive_mixed_waste_logs"] == 1
        assert second.json()["accepted"] is False
        assert len(client.get("/api/v1/waste-logs/").json()) == 1

    def test_unknown_waste_type_is_400(self, client):
        _signup(client)
        assert client.post("/api/v1/waste-logs/", json={"waste_type": "Glass"}).status_code == 400

    def test_event_booking(self, client):
        _signup(client)
        quote = client.get("/api/v1/bookings/fee-quote", params={"attendee_count": 301})
        assert quote.json() == {"fee": "700", "admin_adjust": False}

        response = client.post("/api/v1/bookings/", json={
            "pickup_date": "2026-11-02",
            "time_slot": "Morning",
            "waste_type": "Event Waste",
            "attendee_count": 301,
        })
        assert response.status_code == 200
        assert Decimal(response.json()["booking_fee"]) == Decimal("700")
        assert Decimal(client.get("/api/v1/auth/me").json()["outstanding_balance"]) == Decimal("775")

    def test_complaint_and_feedback(self, client):
        _signup(client)
        response = client.post("/api/v1/complaints/", json={"issue": "Missed pickup", "details": "No truck"})
        assert response.status_code == 200
        assert response.json()["status"] == "Pending"
        assert client.post("/api/v1/feedback/", json={"feedback_text": "Good", "rating": 9}).status_code == 422

    def test_messages_and_broadcast(self, client):
        _signup(client)
        inbox = client.get("/api/v1/messages/").json()
        assert inbox == {"unread": 0, "messages": []}
        assert client.get("/api/v1/messages/broadcast").json()["text"]

    def test_household_cannot_open_admin(self, client):
        _signup(client)
        assert client.get("/admin/api/overview").status_code == 403


class TestAdminApi:
    def test_payment_approval_flow(self, client, provision):
        household = _signup(client).json()
        submitted = client.post("/api/v1/payments/", json={"screenshot": "data:image/png;base64,AAAA"})
        assert submitted.status_code == 200
        payment_id = submitted.json()["id"]
        client.post("/api/v1/auth/logout")

        _admin_login(client, provision)
        overview = client.get("/admin/api/overview").json()
        assert [p["id"] for p in overview["pending_payments"]] == [payment_id]

        approved = client.post(f"/admin/api/payments/{payment_id}/approve")
        assert approved.status_code == 200
        assert approved.json()["status"] == "Paid"

        again = client.post(f"/admin/api/payments/{payment_id}/reject", json={})
        assert again.status_code == 400

        history = client.get(f"/admin/api/accounts/{household['household_id']}/history").json()
        assert Decimal(history["outstanding_balance"]) == Decimal("0")

    def test_unknown_payment_is_404(self, client, provision):
        _admin_login(client, provision)
        assert client.post("/admin/api/payments/999/approve").status_code == 404

    def test_warn_and_block(self, client, provision):
        household = _signup(client).json()
        client.post("/api/v1/auth/logout")
        _admin_login(client, provision)
        hid = household["household_id"]

        warned = client.post(f"/admin/api/accounts/{hid}/warn", json={"message": "Segregate waste"})
        assert warned.json()["status"] == "warned"
        blocked = client.post(f"/admin/api/accounts/{hid}/block")
        assert blocked.json()["status"] == "blocked"
        client.post("/api/v1/auth/logout")

        response = client.post("/api/v1/auth/login", json={"identifier": "9876543210", "password": "Green@123"})
        assert response.status_code == 401

    def test_plans_and_broadcast(self, client, provision):
        _admin_login(client, provision)
        response = client.put("/admin/api/plans", json={"standard": "70", "large_family": "90", "large_family_threshold": 4})
        assert response.status_code == 200
        assert response.json()["large_family_threshold"] == 4

        assert client.put("/admin/api/broadcast", json={"text": ""}).json() == {"text": None}

    def test_delete_account(self, client, provision):
        household = _signup(client).json()
        client.post("/api/v1/auth/logout")
        _admin_login(client, provision)

        assert client.delete(f"/admin/api/accounts/{household['household_id']}").status_code == 200
        assert client.delete(f"/admin/api/accounts/{household['household_id']}").status_code == 404


class TestStaffApi:
    def test_driver_location_visible_to_household(self, client, provision):
        provision("Ravi Driver", "9000000002", "driver")
        assert client.post("/api/v1/auth/staff/otp", json={"identifier": "9000000002", "role": "driver"}).status_code == 200
        login = client.post("/api/v1/auth/staff/login", json={"identifier": "9000000002", "role": "driver", "code": OTP})
        assert login.status_code == 200
        assert login.json()["attendance_status"] in ("present", "absent")

        assert client.post("/api/v1/tracking/location", json={"lat": 18.52, "lng": 73.85}).status_code == 200
        client.post("/api/v1/auth/logout")

        _signup(client)
        tracking = client.get("/api/v1/tracking/driver", params={"lat": 18.50, "lng": 73.80}).json()
        assert tracking["active"] is True
        assert tracking["driver"]["name"] == "Ravi Driver"
        assert tracking["eta"] is None

    def test_staff_otp_wrong_role(self, client, provision):
        provision("Ravi Driver", "9000000002", "driver")
        response = client.post("/api/v1/auth/staff/otp", json={"identifier": "9000000002", "role": "employee"})
        assert response.status_code == 404

    def test_chat_without_key(self, client):
        _signup(client)
        reply = client.post("/api/v1/tracking/chat", json={"prompt": "How do I compost?"}).json()["reply"]
        assert "unavailable" in reply
