"""
Messages to households (admin notes, fine notices) and the broadcast banner.

SendMessageUseCase is the notification channel used by the other use cases:
it only adds the row, the caller owns the commit.
"""
from datetime import datetime, timezone
from sqlalchemy.orm import Session

from app.infrastructure.db.models import MessageModel, BroadcastModel

DEFAULT_BROADCAST = "Welcome! A friendly reminder that monthly payments are due by the end of the week. Thank you!"


class MessageValidationError(ValueError):
    pass


class SendMessageUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, recipient_id: str, text: str, now: datetime | None = None, commit: bool = False) -> int:
        text = (text or "").strip()
        if not text:
            raise MessageValidationError("Message text cannot be empty")

        msg = MessageModel(
            recipient_id=recipient_id,
            text=text,
            is_read=False,
            created_at=now or datetime.now(timezone.utc),
        )
        self.db.add(msg)
        self.db.flush()
        if commit:
            self.db.commit()
        return msg.id


class MarkMessagesReadUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, household_id: str) -> int:
        """Returns the number of messages that were unread."""
        updated = (
            self.db.query(MessageModel)
            .filter(MessageModel.recipient_id == household_id, MessageModel.is_read.is_(False))
            .update({MessageModel.is_read: True}, synchronize_session=False)
        )
        self.db.commit()
        return updated


def list_messages(db: Session, household_id: str) -> list[MessageModel]:
    return (
        db.query(MessageModel)
        .filter(MessageModel.recipient_id == household_id)
        .order_by(MessageModel.created_at.desc(), MessageModel.id.desc())
        .all()
    )


def count_unread(db: Session, household_id: str) -> int:
    return (
        db.query(MessageModel)
        .filter(MessageModel.recipient_id == household_id, MessageModel.is_read.is_(False))
        .count()
    )


# ── Broadcast ────────────────────────────────────────────────────────────────

def get_broadcast(db: Session) -> str | None:
    row = db.query(BroadcastModel).order_by(BroadcastModel.id.asc()).first()
    if row is None:
        return DEFAULT_BROADCAST
    return row.text or None


class UpdateBroadcastUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, text: str) -> str:
        """Empty text clears the banner."""
        text = (text or "").strip()
        row = self.db.query(BroadcastModel).order_by(BroadcastModel.id.asc()).first()
        if row is None:
            row = BroadcastModel(text=text)
            self.db.add(row)
        else:
            row.text = text
        self.db.commit()
        return text
