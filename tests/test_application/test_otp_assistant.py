"""
Tests for OTP challenges and the Gemini-backed assistant
"""
import logging
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock, patch

import pytest
import requests

from app.application import assistant
from app.application.otp import issue_otp, verify_otp, OTP_TTL, OTP_MAX_ATTEMPTS
from app.config import get_settings
from app.infrastructure.db.models import OtpChallengeModel

NOW = datetime(2026, 10, 5, 4, 40, tzinfo=timezone.utc)


class TestOtp:
    def test_code_is_six_digits_and_kept_server_side(self, db_session):
        session = {}
        code = issue_otp(db_session, session, "9000000002", "driver", now=NOW)
        assert len(code) == 6 and code.isdigit()

        challenge_id = session["otp_challenge"]
        assert list(session) == ["otp_challenge"]
        challenge = db_session.query(OtpChallengeModel).filter_by(challenge_id=challenge_id).one()
        assert challenge.code_hash != code
        assert challenge.attempts == 0

    def test_correct_code_is_consumed(self, db_session):
        session = {}
        code = issue_otp(db_session, session, "9000000002", "driver", now=NOW)
        assert verify_otp(db_session, session, "9000000002", "driver", code, now=NOW + timedelta(minutes=1))
        assert not verify_otp(db_session, session, "9000000002", "driver", code, now=NOW + timedelta(minutes=1))
        assert db_session.query(OtpChallengeModel).count() == 0

    def test_expired(self, db_session):
        session = {}
        code = issue_otp(db_session, session, "9000000002", "driver", now=NOW)
        assert not verify_otp(db_session, session, "9000000002", "driver", code, now=NOW + OTP_TTL + timedelta(seconds=1))
        assert "otp_challenge" not in session

    def test_other_portal_or_identifier(self, db_session):
        session = {}
        code = issue_otp(db_session, session, "9000000002", "driver", now=NOW)
        assert not verify_otp(db_session, session, "9000000002", "employee", code, now=NOW)
        assert not verify_otp(db_session, session, "9000000003", "driver", code, now=NOW)

    def test_wrong_code_keeps_challenge(self, db_session):
        session = {}
        code = issue_otp(db_session, session, "9000000002", "driver", now=NOW)
        wrong = "000000" if code != "000000" else "111111"
        assert not verify_otp(db_session, session, "9000000002", "driver", wrong, now=NOW)
        assert verify_otp(db_session, session, "9000000002", "driver", code, now=NOW)

    def test_challenge_dropped_after_max_attempts(self, db_session):
        session = {}
        code = issue_otp(db_session, session, "9000000002", "driver", now=NOW)
        wrong = "000000" if code != "000000" else "111111"
        for _ in range(OTP_MAX_ATTEMPTS):
            assert not verify_otp(db_session, session, "9000000002", "driver", wrong, now=NOW)

        assert "otp_challenge" not in session
        assert db_session.query(OtpChallengeModel).count() == 0
        assert not verify_otp(db_session, session, "9000000002", "driver", code, now=NOW)

    def test_attempts_are_tracked_across_sessions(self, db_session):
        """A replayed cookie shares the server-side attempt counter"""
        session = {}
        code = issue_otp(db_session, session, "9000000002", "driver", now=NOW)
        wrong = "000000" if code != "000000" else "111111"
        for _ in range(OTP_MAX_ATTEMPTS):
            replayed = dict(session)
            verify_otp(db_session, replayed, "9000000002", "driver", wrong, now=NOW)

        assert not verify_otp(db_session, dict(session), "9000000002", "driver", code, now=NOW)

    def test_new_code_replaces_previous(self, db_session):
        first_session, second_session = {}, {}
        first = issue_otp(db_session, first_session, "9000000002", "driver", now=NOW)
        second = issue_otp(db_session, second_session, "9000000002", "driver", now=NOW)

        assert db_session.query(OtpChallengeModel).count() == 1
        assert not verify_otp(db_session, first_session, "9000000002", "driver", first, now=NOW)
        assert verify_otp(db_session, second_session, "9000000002", "driver", second, now=NOW)

    def test_code_logged_only_in_debug(self, db_session, monkeypatch, caplog):
        caplog.set_level(logging.INFO, logger="app.application.otp")
        monkeypatch.setattr("app.application.otp.generate_code", lambda: "482913")
        monkeypatch.setattr(get_settings(), "DEBUG", False)
        code = issue_otp(db_session, {}, "9000000002", "driver", now=NOW)
        assert "sent to 9000000002" in caplog.text
        assert code not in caplog.text

        caplog.clear()
        monkeypatch.setattr(get_settings(), "DEBUG", True)
        code = issue_otp(db_session, {}, "9000000002", "driver", now=NOW)
        assert code in caplog.text


def _gemini_reply(text):
    resp = Mock()
    resp.raise_for_status.return_value = None
    resp.json.return_value = {"candidates": [{"content": {"parts": [{"text": text}]}}]}
    return resp


@pytest.fixture
def gemini_key(monkeypatch):
    monkeypatch.setattr(get_settings(), "GEMINI_API_KEY", "test-key")


class TestAssistant:
    def test_chat_without_key(self, monkeypatch):
        monkeypatch.setattr(get_settings(), "GEMINI_API_KEY", "")
        assert assistant.get_chatbot_response("hi") == assistant.UNAVAILABLE_REPLY

    def test_eta_without_key(self, monkeypatch):
        monkeypatch.setattr(get_settings(), "GEMINI_API_KEY", "")
        assert assistant.get_eta((18.5, 73.8), (18.6, 73.9)) is None

    def test_chat_reply(self, gemini_key):
        with patch("app.application.assistant.requests.post", return_value=_gemini_reply("Compost wet waste.")) as post:
            assert assistant.get_chatbot_response("How?") == "Compost wet waste."
        body = post.call_args.kwargs["json"]
        assert "EcoHelper" in body["systemInstruction"]["parts"][0]["text"]
        assert post.call_args.kwargs["params"] == {"key": "test-key"}

    def test_chat_error_fallback(self, gemini_key):
        with patch("app.application.assistant.requests.post", side_effect=requests.ConnectionError("down")):
            assert assistant.get_chatbot_response("How?") == assistant.ERROR_REPLY

    def test_eta_parsed(self, gemini_key):
        with patch("app.application.assistant.requests.post", return_value=_gemini_reply("About 12 minutes")):
            assert assistant.get_eta((18.5, 73.8), (18.6, 73.9)) == "12 min"

    def test_eta_error(self, gemini_key):
        with patch("app.application.assistant.requests.post", side_effect=requests.Timeout()):
            assert assistant.get_eta((18.5, 73.8), (18.6, 73.9)) == "Not available"
