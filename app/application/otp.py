"""
One-time codes for the staff and admin portals.

The challenge (hashed code, expiry, failed attempts) is stored server-side
in ``otp_challenges``; the caller's HTTP session only holds its random id.
The code is delivered through the application log until an SMS gateway is
wired in.
"""
import logging
import secrets
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from app.auth import hash_password, verify_password
from app.config import get_settings
from app.infrastructure.db.models import OtpChallengeModel

logger = logging.getLogger(__name__)

OTP_LENGTH = 6
OTP_TTL = timedelta(minutes=5)
OTP_MAX_ATTEMPTS = 5
_SESSION_KEY = "otp_challenge"


def generate_code() -> str:
    return f"{secrets.randbelow(10 ** OTP_LENGTH):0{OTP_LENGTH}d}"


def _aware(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def _drop(db: Session, session: dict, challenge: OtpChallengeModel) -> None:
    db.delete(challenge)
    db.commit()
    session.pop(_SESSION_KEY, None)


def issue_otp(db: Session, session: dict, identifier: str, portal: str, now: datetime | None = None) -> str:
    """
    Start a challenge for (identifier, portal).

    Any earlier challenge for the same pair is discarded.

    Returns:
        The plain code (only its hash is stored)
    """
    now = now or datetime.now(timezone.utc)
    code = generate_code()

    db.query(OtpChallengeModel).filter(
        OtpChallengeModel.identifier == identifier,
        OtpChallengeModel.portal == portal,
    ).delete(synchronize_session=False)

    challenge = OtpChallengeModel(
        challenge_id=secrets.token_urlsafe(32),
        identifier=identifier,
        portal=portal,
        code_hash=hash_password(code),
        attempts=0,
        expires_at=now + OTP_TTL,
    )
    db.add(challenge)
    db.commit()

    session[_SESSION_KEY] = challenge.challenge_id
    if get_settings().DEBUG:
        logger.info("OTP for %s portal sent to %s: %s", portal, identifier, code)
    else:
        logger.info("OTP for %s portal sent to %s", portal, identifier)
    return code


def verify_otp(
    db: Session,
    session: dict,
    identifier: str,
    portal: str,
    code: str,
    now: datetime | None = None,
) -> bool:
    """
    Check the code against the session's challenge.

    A correct code consumes the challenge. A wrong one counts as an attempt;
    after OTP_MAX_ATTEMPTS failures the challenge is dropped.
    """
    now = now or datetime.now(timezone.utc)
    challenge_id = session.get(_SESSION_KEY)
    if not challenge_id:
        return False

    challenge = (
        db.query(OtpChallengeModel)
        .filter(OtpChallengeModel.challenge_id == challenge_id)
        .with_for_update()
        .first()
    )
    if not challenge:
        session.pop(_SESSION_KEY, None)
        return False
    if challenge.identifier != identifier or challenge.portal != portal:
        return False
    if _aware(now) > _aware(challenge.expires_at):
        _drop(db, session, challenge)
        return False

    if not verify_password((code or "").strip(), challenge.code_hash):
        challenge.attempts += 1
        if challenge.attempts >= OTP_MAX_ATTEMPTS:
            logger.warning("OTP for %s portal of %s dropped after %s failed attempts", portal, identifier, challenge.attempts)
            _drop(db, session, challenge)
        else:
            db.commit()
        return False

    _drop(db, session, challenge)
    return True
