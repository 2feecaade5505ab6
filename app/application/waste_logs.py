"""Daily waste logging with the mixed-waste fine"""
import logging
from datetime import datetime, timezone, tzinfo

from sqlalchemy.orm import Session

from app.config import get_settings
from app.domain.account import AccountSnapshot, AccountEvent, ROLE_HOUSEHOLD
from app.domain.waste_log import (
    apply_waste_log,
    WasteLogOutcome,
    WASTE_TYPES,
    MIXED_FINE_AMOUNT,
    MIXED_FINE_MESSAGE,
)
from app.infrastructure.db.models import WasteLogModel
from app.infrastructure.db.repositories import AccountRepository
from app.infrastructure.eventlog.repository import EventLogRepository
from app.application.messages import SendMessageUseCase
from app.utils.refs import new_ref

logger = logging.getLogger(__name__)


class WasteLogValidationError(ValueError):
    pass


class LogWasteUseCase:
    """
    Record today's waste type for a household.

    A repeated submission on the same local day is answered with
    ``accepted=False`` and changes nothing.
    """

    def __init__(self, db: Session, accounts: AccountRepository | None = None, tz: tzinfo | None = None):
        self.db = db
        self.accounts = accounts or AccountRepository(db)
        self.event_repo = EventLogRepository(db)
        self.tz = tz or get_settings().get_timezone()

    def execute(self, household_id: str, waste_type: str, now: datetime | None = None) -> WasteLogOutcome:
        if waste_type not in WASTE_TYPES:
            raise WasteLogValidationError(f"Unknown waste type: {waste_type}")
        now = now or datetime.now(timezone.utc)

        account = self.accounts.get_for_update(household_id)
        if not account:
            raise WasteLogValidationError(f"Account {household_id} not found")
        if account.role != ROLE_HOUSEHOLD:
            raise WasteLogValidationError("Only households can log waste")

        outcome = apply_waste_log(AccountSnapshot.from_model(account), waste_type, now, tz=self.tz)
        if not outcome.accepted:
            logger.info("Household %s already logged waste today", household_id)
            return outcome

        log_ref = new_ref("LOG")
        self.db.add(WasteLogModel(
            log_ref=log_ref,
            household_id=household_id,
            waste_type=waste_type,
            logged_at=now,
        ))

        outcome.account.apply_to(account)
        self.accounts.put(account)

        self.event_repo.append_event(
            household_id=household_id,
            event_type="waste_logged",
            payload=AccountEvent.waste_logged(household_id, log_ref, waste_type, outcome.new_consecutive_count),
            occurred_at=now,
        )

        if outcome.fine_applied:
            self.event_repo.append_event(
                household_id=household_id,
                event_type="waste_fine_applied",
                payload=AccountEvent.fine_applied(household_id, MIXED_FINE_AMOUNT, outcome.new_balance),
                occurred_at=now,
            )
            SendMessageUseCase(self.db).execute(household_id, MIXED_FINE_MESSAGE, now=now)
            logger.info("Mixed-waste fine applied to %s, balance %s", household_id, outcome.new_balance)

        self.db.commit()
        return outcome


def list_waste_logs(db: Session, household_id: str, limit: int = 30) -> list[WasteLogModel]:
    return (
        db.query(WasteLogModel)
        .filter(WasteLogModel.household_id == household_id)
        .order_by(WasteLogModel.logged_at.desc())
        .limit(limit)
        .all()
    )
