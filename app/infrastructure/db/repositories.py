"""
Account repository - the only way use cases read and replace account rows
"""
from typing import List, Optional
from sqlalchemy.orm import Session

from app.infrastructure.db.models import (
    AccountModel,
    PaymentModel,
    ComplaintModel,
    BookingModel,
    MessageModel,
    FeedbackModel,
    WasteLogModel,
)


class AccountRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, household_id: str) -> Optional[AccountModel]:
        return self.db.query(AccountModel).filter(
            AccountModel.household_id == household_id
        ).first()

    def get_by_identifier(self, identifier: str) -> Optional[AccountModel]:
        return self.db.query(AccountModel).filter(
            AccountModel.identifier == identifier
        ).first()

    def get_for_update(self, household_id: str) -> Optional[AccountModel]:
        """Row-locked read, refreshed from the database (not the identity map)."""
        return (
            self.db.query(AccountModel)
            .filter(AccountModel.household_id == household_id)
            .with_for_update()
            .populate_existing()
            .first()
        )

    def put(self, account: AccountModel) -> AccountModel:
        """Insert or replace the row; flushed, not committed."""
        self.db.add(account)
        self.db.flush()
        return account

    def list_by_role(self, role: str) -> List[AccountModel]:
        return (
            self.db.query(AccountModel)
            .filter(AccountModel.role == role)
            .order_by(AccountModel.name.asc())
            .all()
        )

    def delete(self, household_id: str) -> bool:
        """
        Delete the account and everything that references it.

        Returns:
            False if the account did not exist
        """
        account = self.get(household_id)
        if not account:
            return False

        for model in (PaymentModel, ComplaintModel, BookingModel, FeedbackModel, WasteLogModel):
            self.db.query(model).filter(model.household_id == household_id).delete(synchronize_session=False)
        self.db.query(MessageModel).filter(
            MessageModel.recipient_id == household_id
        ).delete(synchronize_session=False)

        self.db.delete(account)
        self.db.flush()
        return True
