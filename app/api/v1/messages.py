"""
Inbox and broadcast banner API endpoints
"""
from datetime import datetime

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_account
from app.application.messages import (
    MarkMessagesReadUseCase,
    list_messages,
    count_unread,
    get_broadcast,
)


router = APIRouter(prefix="/api/v1/messages", tags=["messages"])


class MessageResponse(BaseModel):
    id: int
    text: str
    is_read: bool
    created_at: datetime


@router.get("/")
def get_messages(request: Request, db: Session = Depends(get_db)):
    account = get_current_account(request, db)
    messages = list_messages(db, account.household_id)
    return {
        "unread": count_unread(db, account.household_id),
        "messages": [
            MessageResponse(id=m.id, text=m.text, is_read=m.is_read, created_at=m.created_at)
            for m in messages
        ],
    }


@router.post("/read")
def mark_read(request: Request, db: Session = Depends(get_db)):
    account = get_current_account(request, db)
    updated = MarkMessagesReadUseCase(db).execute(account.household_id)
    return {"marked_read": updated}


@router.get("/broadcast")
def broadcast(db: Session = Depends(get_db)):
    return {"text": get_broadcast(db)}
