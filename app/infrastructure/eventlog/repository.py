"""
Event Log Repository - append-only audit trail of account state transitions
"""
from datetime import datetime, timezone
from typing import Optional, Dict, Any, List
from sqlalchemy.orm import Session

from app.infrastructure.db.models import EventLog


class EventLogRepository:
    """
    Repository for the event log
    """

    def __init__(self, db: Session):
        self.db = db

    def append_event(
        self,
        household_id: str,
        event_type: str,
        payload: Dict[str, Any],
        occurred_at: Optional[datetime] = None,
        actor_id: Optional[str] = None,
    ) -> int:
        """
        Append an event to the log

        Args:
            household_id: Account the event belongs to
            event_type: Event type (e.g. "waste_logged")
            payload: Event data (stored as JSONB)
            occurred_at: When it happened (default: now, UTC)
            actor_id: household_id of whoever performed the action (optional)

        Returns:
            event_id of the new row

        Example:
            >>> repo = EventLogRepository(db)
            >>> event_id = repo.append_event(
            ...     household_id="HH-JANE-9876",
            ...     event_type="waste_logged",
            ...     payload={"waste_type": "Mixed"},
            ... )
        """
        if occurred_at is None:
            occurred_at = datetime.now(timezone.utc)

        event = EventLog(
            household_id=household_id,
            actor_id=actor_id,
            event_type=event_type,
            payload_json=payload,
            occurred_at=occurred_at,
        )

        self.db.add(event)
        self.db.flush()  # get the id without committing

        return event.id

    def list_events(
        self,
        household_id: str,
        event_types: Optional[List[str]] = None,
        limit: int = 200,
    ) -> List[EventLog]:
        """
        Events of one account, oldest first

        Args:
            household_id: Account reference
            event_types: Optional filter by type
            limit: Maximum rows (default: 200)
        """
        query = self.db.query(EventLog).filter(EventLog.household_id == household_id)

        if event_types:
            query = query.filter(EventLog.event_type.in_(event_types))

        return query.order_by(EventLog.id.asc()).limit(limit).all()
